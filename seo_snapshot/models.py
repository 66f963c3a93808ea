"""Business profile, signal and score dataclasses — the engine's input/output shapes."""

import math
from dataclasses import dataclass, field
from typing import Any


REQUIRED_PROFILE_FIELDS = ("business_name", "website", "address", "city", "zip", "category")


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def as_count(value: Any) -> int:
    """Coerce to a non-negative int; junk and negatives become 0."""
    try:
        return max(0, int(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _as_float(value: Any, low: float, high: float) -> float:
    """Coerce into [low, high]; junk, NaN and infinities become low."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    if not math.isfinite(number):
        return low
    return _clamp(number, low, high)


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _require_mapping(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object")
    return data


@dataclass(frozen=True)
class BusinessProfile:
    business_name: str
    website: str
    address: str  # street address
    city: str
    zip: str
    category: str  # free text, e.g. "dentist", "plumber"
    phone: str = ""
    gbp_url: str = ""
    email: str = ""

    @property
    def website_url(self) -> str:
        if self.website.startswith(("http://", "https://")):
            return self.website
        return f"https://{self.website}"

    @classmethod
    def from_dict(cls, data: Any) -> "BusinessProfile":
        data = _require_mapping(data, "profile")
        # Accept the form's "street" as an alias for address
        if "address" not in data and "street" in data:
            data = {**data, "address": data["street"]}

        missing = [name for name in REQUIRED_PROFILE_FIELDS if not _as_str(data.get(name))]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        return cls(
            business_name=_as_str(data["business_name"]),
            website=_as_str(data["website"]),
            address=_as_str(data["address"]),
            city=_as_str(data["city"]),
            zip=_as_str(data["zip"]),
            category=_as_str(data["category"]),
            phone=_as_str(data.get("phone")),
            gbp_url=_as_str(data.get("gbp_url")),
            email=_as_str(data.get("email")),
        )


@dataclass(frozen=True)
class GbpSignals:
    present: bool = False  # listing data was actually fetched
    rating: float | None = None  # 0-5 stars
    review_count: int = 0
    has_recent_activity: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "GbpSignals":
        rating = data.get("rating")
        return cls(
            present=bool(data.get("present", data.get("found", True))),
            rating=None if rating is None else _as_float(rating, 0.0, 5.0),
            review_count=as_count(data.get("review_count")),
            has_recent_activity=bool(data.get("has_recent_activity")),
        )


@dataclass(frozen=True)
class PageSignals:
    has_h1: bool = False
    has_title: bool = False
    has_meta_description: bool = False
    has_local_business_schema: bool = False
    alt_text_coverage: float = 0.0  # percent of <img> tags with alt text, 0-100
    internal_links: int = 0
    word_count: int = 0
    mentions_city: bool = False
    mentions_category: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "PageSignals":
        return cls(
            has_h1=bool(data.get("has_h1")),
            has_title=bool(data.get("has_title")),
            has_meta_description=bool(data.get("has_meta_description")),
            has_local_business_schema=bool(data.get("has_local_business_schema")),
            alt_text_coverage=_as_float(data.get("alt_text_coverage", 0), 0.0, 100.0),
            internal_links=as_count(data.get("internal_links")),
            word_count=as_count(data.get("word_count")),
            mentions_city=bool(data.get("mentions_city")),
            mentions_category=bool(data.get("mentions_category")),
        )


@dataclass(frozen=True)
class PerformanceSignals:
    performance_score: float = 0.0  # Lighthouse 0-1
    seo_score: float = 0.0  # Lighthouse 0-1
    has_mobile_viewport: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "PerformanceSignals":
        return cls(
            performance_score=_as_float(data.get("performance_score", 0), 0.0, 1.0),
            seo_score=_as_float(data.get("seo_score", 0), 0.0, 1.0),
            has_mobile_viewport=bool(data.get("has_mobile_viewport")),
        )


@dataclass(frozen=True)
class SignalBundle:
    """Everything the collectors managed to gather; absent sources stay None."""

    gbp: GbpSignals | None = None
    page: PageSignals | None = None
    performance: PerformanceSignals | None = None
    citation_count: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "SignalBundle":
        if data is None:
            return cls()
        data = _require_mapping(data, "signals")

        def _part(key: str, part_cls):
            value = data.get(key)
            if value is None:
                return None
            return part_cls.from_dict(_require_mapping(value, key))

        return cls(
            gbp=_part("gbp", GbpSignals),
            page=_part("page", PageSignals),
            performance=_part("performance", PerformanceSignals),
            citation_count=as_count(data.get("citation_count")),
        )


@dataclass(frozen=True)
class LocalSignals:
    has_gbp_url: bool = False
    gbp: GbpSignals | None = None
    has_nap: bool = False
    phone_valid: bool = False
    has_local_business_schema: bool = False
    mentions_city: bool = False
    mentions_category: bool = False
    internal_links: int = 0
    alt_text_coverage: float = 0.0
    citation_count: int = 0


@dataclass(frozen=True)
class CategoryScore:
    score: int
    insights: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"score": self.score, "insights": list(self.insights)}


@dataclass(frozen=True)
class ScoreResult:
    local: CategoryScore
    onsite: CategoryScore
    combined: int

    def to_dict(self) -> dict:
        return {
            "local": self.local.to_dict(),
            "onsite": self.onsite.to_dict(),
            "combined": self.combined,
        }
