"""Local and on-site SEO scoring.

Each sub-score is a sum of independently capped point contributions, so the
total can never leave 0-100 for well-formed input. Every category that falls
short of its maximum appends one human-readable insight, in a fixed order.
"""

import math

from .models import (
    BusinessProfile,
    CategoryScore,
    LocalSignals,
    PageSignals,
    PerformanceSignals,
    ScoreResult,
    SignalBundle,
)
from .signals import has_complete_nap, is_valid_us_phone

NO_GBP_URL_INSIGHT = "Google Business Profile URL not provided"
GBP_FETCH_FAILED_INSIGHT = "Could not fetch Google Business Profile data"
NO_WEBSITE_DATA_INSIGHT = "Unable to analyze website performance"

NEUTRAL_ONSITE_SCORE = 50


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _finalize(points: float, insights: list[str]) -> CategoryScore:
    return CategoryScore(score=max(0, min(100, _round_half_up(points))), insights=insights)


def _review_points(review_count: int) -> int:
    if review_count >= 50:
        return 15
    if review_count >= 25:
        return 12
    if review_count >= 10:
        return 8
    if review_count >= 1:
        return 4
    return 0


def _rating_points(rating: float) -> int:
    if rating >= 4.5:
        return 10
    if rating >= 4.0:
        return 7
    if rating >= 3.5:
        return 4
    return 2


def _score_gbp(signals: LocalSignals, insights: list[str]) -> float:
    """GBP block: 5 base + 15 reviews + 10 rating + 5 activity."""
    if not signals.has_gbp_url:
        insights.append(NO_GBP_URL_INSIGHT)
        return 0

    points = 5
    gbp = signals.gbp
    if gbp is None or not gbp.present:
        insights.append(GBP_FETCH_FAILED_INSIGHT)
        return points

    reviews = gbp.review_count
    points += _review_points(reviews)
    if reviews == 0:
        insights.append("No reviews found on Google Business Profile")
    elif reviews < 10:
        insights.append(f"GBP has only {reviews} reviews (critical: aim for 10+ minimum)")
    elif reviews < 50:
        insights.append(f"GBP has only {reviews} reviews (aim for 50+)")

    if gbp.rating:
        points += _rating_points(gbp.rating)
        if gbp.rating < 3.5:
            insights.append(f"Very low GBP rating of {gbp.rating:.1f}/5.0 (urgent: address negative reviews)")
        elif gbp.rating < 4.0:
            insights.append(f"Low GBP rating of {gbp.rating:.1f}/5.0 (critical issue)")
        elif gbp.rating < 4.5:
            insights.append(f"GBP rating is {gbp.rating:.1f}/5.0 (aim for 4.5+)")
    else:
        insights.append("No rating data found on Google Business Profile")

    if gbp.has_recent_activity:
        points += 5
    else:
        insights.append("No recent activity on Google Business Profile (post updates and photos)")

    return points


def calculate_local_score(signals: LocalSignals) -> CategoryScore:
    """Score listing and local-relevance signals (0-100)."""
    insights: list[str] = []
    points = _score_gbp(signals, insights)

    # NAP consistency
    if signals.has_nap:
        points += 10
    else:
        insights.append("Incomplete NAP data (Name, Address, Phone)")

    if signals.phone_valid:
        points += 8
    else:
        insights.append("Phone number not in valid US format")

    # Local content signals
    if signals.has_local_business_schema:
        points += 15
    else:
        insights.append("No LocalBusiness schema markup found on homepage")

    if signals.mentions_city:
        points += 10
    else:
        insights.append("City name not mentioned on homepage - critical for local SEO")

    if signals.mentions_category:
        points += 8
    else:
        insights.append("Business category not found in title, headings, or meta description")

    if signals.internal_links >= 5:
        points += 7
    else:
        insights.append(f"Only {signals.internal_links} internal links on homepage (aim for 5+)")

    if signals.alt_text_coverage >= 50:
        points += 5
    else:
        insights.append(f"Only {round(signals.alt_text_coverage)}% of images have alt text (aim for 50%+)")

    # Citations: at most 2 points, linear up to 10 listings
    points += min(2, signals.citation_count / 10 * 2)
    if signals.citation_count < 10:
        insights.append(f"Listed in {signals.citation_count} directories (aim for 10+ citations)")

    return _finalize(points, insights)


def _score_performance(performance: PerformanceSignals | None, insights: list[str]) -> float:
    if performance is None:
        insights.append("Page speed data unavailable")
        return 0
    if performance.performance_score < 0.7:
        insights.append(f"Page speed score is {_round_half_up(performance.performance_score * 100)}/100 (aim for 70+)")
    return performance.performance_score * 30


def _score_page(page: PageSignals, performance: PerformanceSignals | None, insights: list[str]) -> float:
    points = 0

    if page.has_h1:
        points += 8
    else:
        insights.append("No H1 tag found on homepage")

    if page.has_meta_description:
        points += 8
    else:
        insights.append("Missing meta description tag")

    if page.has_title:
        points += 7
    else:
        insights.append("Missing or empty title tag")

    if page.has_local_business_schema:
        points += 7
    else:
        insights.append("No structured data markup found (critical for local SEO)")

    # Viewport comes from the performance analyzer but sits between schema and content
    if performance is not None:
        if performance.has_mobile_viewport:
            points += 5
        else:
            insights.append("Missing viewport meta tag (required for mobile-friendliness)")

    if page.word_count >= 500:
        points += 10
    elif page.word_count >= 250:
        points += 6
        insights.append(f"Homepage has {page.word_count} words (aim for 500+)")
    else:
        points += 2
        insights.append(f"Homepage has only {page.word_count} words (critical: aim for 500+)")

    if page.internal_links >= 10:
        points += 5
    elif page.internal_links >= 5:
        points += 3
        insights.append(f"Only {page.internal_links} internal links found (aim for 10+)")
    else:
        insights.append(f"Only {page.internal_links} internal links found (critical: aim for 10+)")

    coverage = round(page.alt_text_coverage)
    if page.alt_text_coverage >= 80:
        points += 5
    elif page.alt_text_coverage >= 50:
        points += 3
        insights.append(f"Only {coverage}% of images have alt text (aim for 80%+)")
    else:
        insights.append(f"Only {coverage}% of images have alt text (critical for accessibility & SEO)")

    return points


def calculate_onsite_score(
    performance: PerformanceSignals | None,
    page: PageSignals | None,
) -> CategoryScore:
    """Score technical and content signals of the homepage (0-100).

    With no data at all the result is a neutral 50: an upstream timeout is
    expected, not an error.
    """
    if performance is None and page is None:
        return CategoryScore(score=NEUTRAL_ONSITE_SCORE, insights=[NO_WEBSITE_DATA_INSIGHT])

    insights: list[str] = []
    points = _score_performance(performance, insights)

    if page is not None:
        points += _score_page(page, performance, insights)
    else:
        insights.append("Unable to analyze homepage content")
        if performance.has_mobile_viewport:
            points += 5
        else:
            insights.append("Missing viewport meta tag (required for mobile-friendliness)")

    if performance is not None:
        points += performance.seo_score * 15
        if performance.seo_score < 0.9:
            insights.append(f"Google SEO audit score is {_round_half_up(performance.seo_score * 100)}/100 (aim for 90+)")

    return _finalize(points, insights)


def local_signals_for(profile: BusinessProfile, bundle: SignalBundle) -> LocalSignals:
    """Combine what the business told us with what the collectors found."""
    page = bundle.page or PageSignals()
    return LocalSignals(
        has_gbp_url=bool(profile.gbp_url),
        gbp=bundle.gbp,
        has_nap=has_complete_nap(profile),
        phone_valid=is_valid_us_phone(profile.phone),
        has_local_business_schema=page.has_local_business_schema,
        mentions_city=page.mentions_city,
        mentions_category=page.mentions_category,
        internal_links=page.internal_links,
        alt_text_coverage=page.alt_text_coverage,
        citation_count=bundle.citation_count,
    )


def combine_scores(local: int, onsite: int) -> int:
    return _round_half_up((local + onsite) / 2)


def compute_score(profile: BusinessProfile, bundle: SignalBundle) -> ScoreResult:
    """Score a business; the two halves are independent and only averaged for display."""
    local = calculate_local_score(local_signals_for(profile, bundle))
    onsite = calculate_onsite_score(bundle.performance, bundle.page)
    return ScoreResult(local=local, onsite=onsite, combined=combine_scores(local.score, onsite.score))
