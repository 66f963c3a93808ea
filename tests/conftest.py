"""Shared pytest fixtures for the SEO snapshot tests."""

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'seo_snapshot' is importable.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from seo_snapshot.models import (  # noqa: E402
    BusinessProfile,
    GbpSignals,
    LocalSignals,
    PageSignals,
    PerformanceSignals,
)


@pytest.fixture()
def profile():
    return BusinessProfile(
        business_name="Smile Boutique Beverly Hills",
        website="smileboutique.com",
        address="8500 Wilshire Blvd # 505",
        city="Beverly Hills",
        zip="90211",
        category="dentist",
        phone="(424) 453-3495",
        gbp_url="https://maps.google.com/?cid=123",
    )


@pytest.fixture()
def perfect_local():
    """Every local category at its maximum."""
    return LocalSignals(
        has_gbp_url=True,
        gbp=GbpSignals(present=True, rating=4.8, review_count=60, has_recent_activity=True),
        has_nap=True,
        phone_valid=True,
        has_local_business_schema=True,
        mentions_city=True,
        mentions_category=True,
        internal_links=12,
        alt_text_coverage=90,
        citation_count=10,
    )


@pytest.fixture()
def perfect_page():
    return PageSignals(
        has_h1=True,
        has_title=True,
        has_meta_description=True,
        has_local_business_schema=True,
        alt_text_coverage=100,
        internal_links=25,
        word_count=1200,
        mentions_city=True,
        mentions_category=True,
    )


@pytest.fixture()
def perfect_performance():
    return PerformanceSignals(performance_score=1.0, seo_score=1.0, has_mobile_viewport=True)


@pytest.fixture()
def homepage_html():
    return """<!DOCTYPE html>
<html>
<head>
  <title>Beverly Hills Dentist | Smile Boutique</title>
  <meta name="description" content="Cosmetic dentist in Beverly Hills, CA.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <script type="application/ld+json">
  {"@context": "https://schema.org", "@graph": [
    {"@type": "WebSite", "name": "Smile Boutique"},
    {"@type": ["Dentist", "LocalBusiness"], "name": "Smile Boutique"}
  ]}
  </script>
</head>
<body>
  <nav>
    <a href="/">Home</a>
    <a href="/services">Services</a>
    <a href="https://www.smileboutique.com/about">About</a>
    <a href="https://smileboutique.com/contact">Contact</a>
    <a href="/reviews">Reviews</a>
    <a href="https://www.yelp.com/biz/smile-boutique">Yelp</a>
    <a href="#top">Top</a>
    <a href="tel:4244533495">Call</a>
  </nav>
  <h1>Your Smile, Our Passion</h1>
  <p>Welcome to our practice serving the whole community with gentle care.</p>
  <img src="a.jpg" alt="Dental chair">
  <img src="b.jpg" alt="">
  <img src="c.jpg">
  <img src="d.jpg">
  <script>var tracking = "lots of words that should never be counted";</script>
</body>
</html>
"""
