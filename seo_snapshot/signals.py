"""Turn raw provider payloads into engine signals.

Homepage HTML is parsed with BeautifulSoup; PageSpeed Insights and DataForSEO
Maps responses are plain JSON and only need normalizing, once the Maps result
that is actually this business has been picked. Everything here is pure:
fetching the payloads is the caller's job.
"""

import json
import logging
import re
from typing import Any
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .models import BusinessProfile, GbpSignals, PageSignals, PerformanceSignals, as_count

logger = logging.getLogger(__name__)

# (123) 456-7890, 123-456-7890, 123.456.7890, +1234567890
US_PHONE_PATTERN = re.compile(r"^\+?\(?[0-9]{3}\)?[-\s.]?[0-9]{3}[-\s.]?[0-9]{4,6}$")


def is_valid_us_phone(phone: str | None) -> bool:
    if not phone:
        return False
    return bool(US_PHONE_PATTERN.match(re.sub(r"\s", "", phone)))


def has_complete_nap(profile: BusinessProfile) -> bool:
    """Name, phone and ZIP were all supplied."""
    return bool(profile.business_name and profile.phone and profile.zip)


def contains_city_name(html: str, city: str) -> bool:
    if not city:
        return False
    return city.lower() in html.lower()


def _keyword_zones(soup: BeautifulSoup) -> list[str]:
    """Title, meta description and H1 text: the only places the category keyword counts."""
    zones: list[str] = []
    title_tag = soup.find("title")
    if title_tag:
        zones.append(title_tag.get_text(strip=True))
    meta_tag = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
    if meta_tag:
        zones.append(meta_tag.get("content", ""))
    for h1_tag in soup.find_all("h1"):
        zones.append(h1_tag.get_text(strip=True))
    return zones


def contains_category_keyword(html: str, category: str) -> bool:
    if not category:
        return False
    soup = BeautifulSoup(html, "html.parser")
    needle = category.lower()
    return any(needle in zone.lower() for zone in _keyword_zones(soup))


def _schema_types(node: Any) -> list[str]:
    """Collect every @type in a JSON-LD document, walking @graph and nesting."""
    types: list[str] = []
    if isinstance(node, list):
        for item in node:
            types.extend(_schema_types(item))
    elif isinstance(node, dict):
        declared = node.get("@type")
        if isinstance(declared, str):
            types.append(declared)
        elif isinstance(declared, list):
            types.extend(t for t in declared if isinstance(t, str))
        for key, value in node.items():
            if key != "@type" and isinstance(value, (dict, list)):
                types.extend(_schema_types(value))
    return types


def _has_local_business_schema(soup: BeautifulSoup) -> bool:
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text()
        try:
            document = json.loads(raw)
        except (TypeError, ValueError):
            logger.debug("Skipping unparseable JSON-LD block")
            continue
        if "LocalBusiness" in _schema_types(document):
            return True
    return False


def _count_internal_links(soup: BeautifulSoup, base_url: str | None) -> int:
    host = urlparse(base_url).netloc.lower() if base_url else ""
    count = 0
    for a_tag in soup.find_all("a", href=True):
        href = a_tag["href"].strip()
        if href.startswith(("#", "javascript:", "mailto:", "tel:")):
            continue
        netloc = urlparse(href).netloc.lower()
        # Relative links are internal; absolute ones must match the site host
        if not netloc or (host and netloc.removeprefix("www.") == host.removeprefix("www.")):
            count += 1
    return count


def _visible_word_count(soup: BeautifulSoup) -> int:
    for el in soup.find_all(["script", "style", "noscript"]):
        el.decompose()
    return len(soup.get_text(separator=" ").split())


def extract_page_signals(
    html: str,
    city: str = "",
    category: str = "",
    base_url: str | None = None,
) -> PageSignals:
    """Parse homepage HTML into PageSignals."""
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    meta_tag = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
    images = soup.find_all("img")
    with_alt = [img for img in images if img.has_attr("alt")]

    # Keyword zones and schema must be read before the word count strips scripts
    zones = _keyword_zones(soup)
    has_schema = _has_local_business_schema(soup)
    internal_links = _count_internal_links(soup, base_url)
    mentions_city = contains_city_name(soup.get_text(separator=" "), city)

    return PageSignals(
        has_h1=soup.find("h1") is not None,
        has_title=bool(title_tag and title_tag.get_text(strip=True)),
        has_meta_description=meta_tag is not None,
        has_local_business_schema=has_schema,
        alt_text_coverage=(len(with_alt) / len(images) * 100) if images else 0.0,
        internal_links=internal_links,
        word_count=_visible_word_count(soup),
        mentions_city=mentions_city,
        mentions_category=bool(category) and any(category.lower() in zone.lower() for zone in zones),
    )


def _mapping(node: Any) -> dict:
    return node if isinstance(node, dict) else {}


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def performance_from_pagespeed(payload: dict | None) -> PerformanceSignals | None:
    """Pull performance, SEO and viewport results out of a PageSpeed Insights response."""
    if not payload:
        return None
    lighthouse = _mapping(payload.get("lighthouseResult"))
    categories = _mapping(lighthouse.get("categories"))
    audits = _mapping(lighthouse.get("audits"))

    def _category_score(name: str) -> Any:
        return _mapping(categories.get(name)).get("score")

    return PerformanceSignals.from_dict({
        "performance_score": _category_score("performance") or 0,
        "seo_score": _category_score("seo") or 0,
        "has_mobile_viewport": _mapping(audits.get("viewport")).get("score") == 1,
    })


def normalize_phone(phone: str | None) -> str:
    return re.sub(r"\D", "", phone or "")


def name_similarity(first: str, second: str) -> float:
    """
    Rough 0-100 similarity between two business names or addresses.

    Containment scores 85; otherwise it is the share of words that appear
    inside a word of the other string.
    """
    first, second = first.lower().strip(), second.lower().strip()
    if first == second:
        return 100.0
    if not first or not second:
        return 0.0
    if first in second or second in first:
        return 85.0

    first_words, second_words = first.split(), second.split()
    matching = [w for w in first_words if any(w in other or other in w for other in second_words)]
    return len(matching) / max(len(first_words), len(second_words)) * 100


def business_match_confidence(item: dict, profile: BusinessProfile) -> int:
    """
    Confidence (0-100) that a Maps result is this business.

    The name must be at least 70% similar (40 points) or the result is 0.
    A ZIP inside the listed address adds 30, the same phone digits add 20
    and a similar street address adds 10.
    """
    title = _as_text(item.get("title"))
    if name_similarity(title, profile.business_name) < 70:
        return 0

    confidence = 40
    address = _as_text(item.get("address"))
    if profile.zip and profile.zip in address:
        confidence += 30
    phone = normalize_phone(_as_text(item.get("phone")))
    if phone and phone == normalize_phone(profile.phone):
        confidence += 20
    if profile.address and name_similarity(address, profile.address) >= 60:
        confidence += 10
    return confidence


def is_business_match(item: dict, profile: BusinessProfile) -> bool:
    return business_match_confidence(item, profile) >= 40


def find_business_listing(items: Any, profile: BusinessProfile) -> dict | None:
    """Pick the Maps result that best matches the business, or None.

    ``items`` is the ``items`` list of a Maps search; a single result object
    is treated as a one-item list.
    """
    if isinstance(items, dict):
        items = [items]
    if not isinstance(items, list):
        return None

    best, best_confidence = None, 0
    for item in items:
        if not isinstance(item, dict):
            continue
        confidence = business_match_confidence(item, profile)
        if confidence >= 40 and confidence > best_confidence:
            best, best_confidence = item, confidence

    if best is None:
        logger.info("No Maps result matched %s among %d candidates", profile.business_name, len(items))
    else:
        logger.debug("Matched %r for %s (confidence %d)", best.get("title"), profile.business_name, best_confidence)
    return best


def gbp_from_maps_item(item: dict | None) -> GbpSignals:
    """Convert a DataForSEO Google Maps result into GbpSignals.

    A missing item means the lookup came back empty or nothing matched,
    which scores as "could not fetch" rather than as a listing with zero
    reviews.
    """
    if not isinstance(item, dict) or not item:
        return GbpSignals(present=False)
    rating = _mapping(item.get("rating"))
    review_count = as_count(rating.get("votes_count"))
    return GbpSignals.from_dict({
        "present": True,
        "rating": rating.get("value"),
        "review_count": review_count,
        # Maps results carry no activity feed; a listing with reviews counts as active
        "has_recent_activity": review_count > 0,
    })


def gbp_from_maps_items(items: Any, profile: BusinessProfile) -> GbpSignals:
    """GbpSignals for the result matching ``profile``; not present when none matches."""
    return gbp_from_maps_item(find_business_listing(items, profile))
