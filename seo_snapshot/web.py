"""FastAPI app exposing the SEO snapshot scorer as JSON."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Settings, configure_logging
from .main import generate_snapshot
from .models import BusinessProfile, SignalBundle
from .scoring import compute_score

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="SEO Snapshot")
    app.state.settings = settings

    @app.get("/health")
    async def health():
        return {"status": "ok", "api_enabled": settings.api_enabled}

    @app.post("/api/seo-score")
    async def seo_score(request: Request):
        """Score already-normalized signals."""
        try:
            body = await _json_body(request)
            profile = BusinessProfile.from_dict(body.get("profile"))
            bundle = SignalBundle.from_dict(body.get("signals"))
        except ValueError as e:
            return _error(str(e), 400)

        result = compute_score(profile, bundle)
        return result.to_dict()

    @app.post("/api/seo-score/analyze")
    async def analyze(request: Request):
        """Score raw provider payloads: homepage HTML, PageSpeed JSON, Maps results."""
        if not settings.api_enabled:
            return _error("Configure API keys to enable live data", 503)

        try:
            body = await _json_body(request)
            profile = BusinessProfile.from_dict(body.get("profile"))
            html = body.get("html")
            if html is not None and not isinstance(html, str):
                raise ValueError("html must be a string")
            pagespeed = body.get("pagespeed")
            if pagespeed is not None and not isinstance(pagespeed, dict):
                raise ValueError("pagespeed must be a JSON object")
            # A single pre-selected result is still checked against the profile
            maps_items = body.get("maps_items", body.get("maps_item"))
            if maps_items is not None and not isinstance(maps_items, (list, dict)):
                raise ValueError("maps_items must be a JSON array or object")
        except ValueError as e:
            return _error(str(e), 400)

        result = generate_snapshot(
            profile,
            html=html,
            pagespeed=pagespeed,
            maps_items=maps_items,
            citation_count=body.get("citation_count") or 0,
        )
        return result.to_dict()

    return app


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise ValueError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def _error(message: str, status_code: int) -> JSONResponse:
    logger.info("Rejected request (%d): %s", status_code, message)
    return JSONResponse({"error": message}, status_code=status_code)


def app_factory() -> FastAPI:
    """Entry point for `uvicorn seo_snapshot.web:app_factory --factory`."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return create_app(settings)
