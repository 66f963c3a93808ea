"""Tests for the FastAPI JSON endpoints."""

import pytest
from fastapi.testclient import TestClient

from seo_snapshot import web
from seo_snapshot.config import Settings
from seo_snapshot.web import create_app

PROFILE = {
    "business_name": "Smile Boutique Beverly Hills",
    "website": "smileboutique.com",
    "address": "8500 Wilshire Blvd # 505",
    "city": "Beverly Hills",
    "zip": "90211",
    "phone": "(424) 453-3495",
    "category": "dentist",
}


@pytest.fixture()
def client():
    return TestClient(create_app(Settings(api_enabled=True)))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "api_enabled": True}


class TestSeoScore:

    def test_scores_normalized_signals(self, client):
        response = client.post("/api/seo-score", json={
            "profile": {**PROFILE, "gbp_url": "https://maps.google.com/?cid=1"},
            "signals": {
                "gbp": {"rating": 4.8, "review_count": 60, "has_recent_activity": True},
                "page": {
                    "has_h1": True,
                    "has_title": True,
                    "has_meta_description": True,
                    "has_local_business_schema": True,
                    "alt_text_coverage": 100,
                    "internal_links": 20,
                    "word_count": 800,
                    "mentions_city": True,
                    "mentions_category": True,
                },
                "performance": {"performance_score": 1, "seo_score": 1, "has_mobile_viewport": True},
                "citation_count": 10,
            },
        })
        assert response.status_code == 200
        assert response.json() == {
            "local": {"score": 100, "insights": []},
            "onsite": {"score": 100, "insights": []},
            "combined": 100,
        }

    def test_missing_signals_are_scored_not_rejected(self, client):
        response = client.post("/api/seo-score", json={"profile": PROFILE})
        assert response.status_code == 200
        body = response.json()
        assert body["local"]["insights"][0] == "Google Business Profile URL not provided"
        assert body["onsite"] == {"score": 50, "insights": ["Unable to analyze website performance"]}

    def test_missing_required_fields(self, client):
        response = client.post("/api/seo-score", json={"profile": {"business_name": "X"}})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Missing required fields")

    def test_invalid_json(self, client):
        response = client.post(
            "/api/seo-score",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Request body must be valid JSON"}

    def test_infinite_and_nan_numbers(self, client):
        response = client.post(
            "/api/seo-score",
            content=(
                b'{"profile": {"business_name": "Smile Boutique Beverly Hills", "website": "smileboutique.com",'
                b' "address": "8500 Wilshire Blvd # 505", "city": "Beverly Hills", "zip": "90211",'
                b' "category": "dentist", "gbp_url": "https://maps.google.com/?cid=1"},'
                b' "signals": {"gbp": {"rating": NaN, "review_count": 60}, "citation_count": 1e999,'
                b' "performance": {"performance_score": NaN, "seo_score": NaN, "has_mobile_viewport": true}}}'
            ),
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 200
        body = response.json()
        assert "No rating data found on Google Business Profile" in body["local"]["insights"]
        assert "Listed in 0 directories (aim for 10+ citations)" in body["local"]["insights"]
        assert "Page speed score is 0/100 (aim for 70+)" in body["onsite"]["insights"]

    def test_body_must_be_object(self, client):
        response = client.post("/api/seo-score", json=[1, 2, 3])
        assert response.status_code == 400


class TestAnalyze:

    def test_scores_raw_payloads(self, client):
        html = "<html><head><title>Beverly Hills Dentist</title></head><body><h1>Hi</h1></body></html>"
        response = client.post("/api/seo-score/analyze", json={
            "profile": PROFILE,
            "html": html,
            "pagespeed": {"lighthouseResult": {"categories": {"performance": {"score": 0.5}}}},
            "citation_count": 3,
        })
        assert response.status_code == 200
        body = response.json()
        assert "City name not mentioned on homepage - critical for local SEO" not in body["local"]["insights"]
        assert "Page speed score is 50/100 (aim for 70+)" in body["onsite"]["insights"]

    def test_rejects_wrong_payload_types(self, client):
        response = client.post("/api/seo-score/analyze", json={"profile": PROFILE, "pagespeed": "fast"})
        assert response.status_code == 400
        assert response.json() == {"error": "pagespeed must be a JSON object"}

    def test_disabled_without_api_keys(self):
        client = TestClient(create_app(Settings(api_enabled=False)))
        response = client.post("/api/seo-score/analyze", json={"profile": PROFILE})
        assert response.status_code == 503
        assert response.json() == {"error": "Configure API keys to enable live data"}

    def test_normalized_scoring_stays_available_when_disabled(self):
        client = TestClient(create_app(Settings(api_enabled=False)))
        response = client.post("/api/seo-score", json={"profile": PROFILE})
        assert response.status_code == 200

    @pytest.mark.parametrize("extra", [
        {"maps_item": {"title": "Smile Boutique", "rating": 4.5}},
        {"maps_item": {"title": "Smile Boutique", "rating": {"value": 4.5, "votes_count": "12"}}},
        {"maps_items": [{"title": "Smile Boutique", "rating": {"votes_count": [12]}}, "junk"]},
        {"pagespeed": {"lighthouseResult": "not an object"}},
        {"pagespeed": {"lighthouseResult": {"categories": ["performance"], "audits": 1}}},
    ])
    def test_malformed_provider_payloads_are_scored(self, client, extra):
        profile = {**PROFILE, "gbp_url": "https://maps.google.com/?cid=1"}
        response = client.post("/api/seo-score/analyze", json={"profile": profile, **extra})
        assert response.status_code == 200
        assert 0 <= response.json()["combined"] <= 100

    def test_string_review_count_is_counted(self, client):
        profile = {**PROFILE, "gbp_url": "https://maps.google.com/?cid=1"}
        response = client.post("/api/seo-score/analyze", json={
            "profile": profile,
            "maps_item": {"title": "Smile Boutique", "rating": {"value": 4.5, "votes_count": "12"}},
        })
        assert "GBP has only 12 reviews (aim for 50+)" in response.json()["local"]["insights"]

    def test_competitor_listing_is_not_credited(self, client):
        profile = {**PROFILE, "gbp_url": "https://maps.google.com/?cid=1"}
        response = client.post("/api/seo-score/analyze", json={
            "profile": profile,
            "maps_items": [{"title": "Beverly Hills Dental Arts", "rating": {"value": 5.0, "votes_count": 900}}],
        })
        assert response.json()["local"]["insights"][0] == "Could not fetch Google Business Profile data"

    def test_rejects_scalar_maps_items(self, client):
        response = client.post("/api/seo-score/analyze", json={"profile": PROFILE, "maps_items": "Smile Boutique"})
        assert response.status_code == 400
        assert response.json() == {"error": "maps_items must be a JSON array or object"}


def test_import_builds_no_app():
    assert not hasattr(web, "app")


def test_app_factory_reads_environment(monkeypatch):
    monkeypatch.setenv("SEO_SNAPSHOT_API_ENABLED", "false")
    monkeypatch.setattr(web, "configure_logging", lambda level: None)
    client = TestClient(web.app_factory())
    assert client.get("/health").json() == {"status": "ok", "api_enabled": False}
