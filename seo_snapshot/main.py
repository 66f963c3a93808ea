"""Orchestration: raw provider payloads -> signals -> score."""

import asyncio
import logging
from typing import Any, Awaitable

from .models import BusinessProfile, ScoreResult, SignalBundle, as_count
from .scoring import compute_score
from .signals import extract_page_signals, gbp_from_maps_items, performance_from_pagespeed

logger = logging.getLogger(__name__)


async def gather_settled(*aws: Awaitable[Any]) -> list[Any]:
    """
    Await every source together and keep whichever succeeded.

    A source that raises an Exception becomes None in its slot; the others
    are never cancelled. Anything else (KeyboardInterrupt, SystemExit,
    cancellation) is re-raised. There is no retry and no timeout here;
    those belong to the HTTP client that produced the awaitable.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    settled = []
    for i, result in enumerate(results):
        if isinstance(result, Exception):
            logger.warning("Signal source %d failed: %r", i, result)
            settled.append(None)
        elif isinstance(result, BaseException):
            raise result
        else:
            settled.append(result)
    return settled


def build_signal_bundle(
    profile: BusinessProfile,
    html: str | None = None,
    pagespeed: dict | None = None,
    maps_items: list | dict | None = None,
    citation_count: int = 0,
) -> SignalBundle:
    """Normalize whichever raw payloads were collected into a SignalBundle."""
    page = None
    if html:
        page = extract_page_signals(
            html,
            city=profile.city,
            category=profile.category,
            base_url=profile.website_url,
        )

    gbp = gbp_from_maps_items(maps_items, profile) if profile.gbp_url else None

    bundle = SignalBundle(
        gbp=gbp,
        page=page,
        performance=performance_from_pagespeed(pagespeed),
        citation_count=as_count(citation_count),
    )
    logger.debug(
        "Signals for %s: page=%s performance=%s gbp=%s citations=%d",
        profile.business_name,
        bundle.page is not None,
        bundle.performance is not None,
        bundle.gbp is not None and bundle.gbp.present,
        bundle.citation_count,
    )
    return bundle


def generate_snapshot(
    profile: BusinessProfile,
    html: str | None = None,
    pagespeed: dict | None = None,
    maps_items: list | dict | None = None,
    citation_count: int = 0,
) -> ScoreResult:
    """
    Score a business from raw provider payloads.

    Args:
        profile: Business details from the audit form
        html: Homepage HTML, or None if the fetch failed
        pagespeed: PageSpeed Insights JSON, or None
        maps_items: DataForSEO Google Maps results (or a single result), or None;
            only a result matching the business counts
        citation_count: Number of directories the business is listed in

    Returns:
        ScoreResult with local, on-site and combined scores
    """
    bundle = build_signal_bundle(profile, html, pagespeed, maps_items, citation_count)
    result = compute_score(profile, bundle)
    logger.info(
        "Scored %s: local=%d onsite=%d combined=%d",
        profile.business_name,
        result.local.score,
        result.onsite.score,
        result.combined,
    )
    return result


async def generate_snapshot_async(
    profile: BusinessProfile,
    fetch_html: Awaitable[str | None] | None = None,
    fetch_pagespeed: Awaitable[dict | None] | None = None,
    fetch_maps_items: Awaitable[list | dict | None] | None = None,
    citation_count: int = 0,
) -> ScoreResult:
    """Run the caller's fetches in parallel, then score whatever came back."""

    async def _nothing():
        return None

    html, pagespeed, maps_items = await gather_settled(
        fetch_html or _nothing(),
        fetch_pagespeed or _nothing(),
        fetch_maps_items or _nothing(),
    )
    return generate_snapshot(profile, html, pagespeed, maps_items, citation_count)
