"""
FastAPI server for article search.

Exposes search, content revalidation and article lookup endpoints for a
presentation layer. The relevance engine is chosen once when the app is
created.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Settings, load_env_files
from .content import ArticleRepository
from .errors import ConfigurationError, NotConfiguredError, UpstreamError
from .models import SearchResponse
from .search import RelevanceEngine, build_relevance_engine

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _parse_limit(raw: str | None) -> int:
    try:
        value = int(raw) if raw is not None else DEFAULT_LIMIT
    except ValueError:
        value = DEFAULT_LIMIT
    return min(max(value, 1), MAX_LIMIT)


def create_app(
    settings: Settings | None = None,
    *,
    engine: RelevanceEngine | None = None,
    repository: ArticleRepository | None = None,
) -> FastAPI:
    """Build the app from explicit settings (or the environment)."""
    if settings is None:
        load_env_files()
        settings = Settings.from_env()

    if engine is None:
        try:
            engine = build_relevance_engine(settings)
        except NotConfiguredError as exc:
            logger.warning("Search disabled: %s", exc)

    if repository is None:
        repository = ArticleRepository.from_settings(settings)

    app = FastAPI(title="Decoupled Search", description="Semantic search over CMS articles")
    app.state.settings = settings
    app.state.engine = engine
    app.state.repository = repository

    @app.get("/api/status")
    def status():
        """Report whether the setup screen should be shown."""
        return {
            "configured": settings.configured,
            "demoMode": settings.demo_mode,
            "engine": engine.name if engine is not None else None,
        }

    @app.get("/api/search")
    def search(q: str | None = None, limit: str | None = None):
        """Rank articles for a free-text query."""
        if q is None or not q.strip():
            return JSONResponse(
                {"error": 'Query parameter "q" is required'}, status_code=400
            )

        if engine is None:
            return JSONResponse(
                {
                    "error": "Search is not configured. "
                    "Set PINECONE_API_KEY or enable DEMO_MODE."
                },
                status_code=503,
            )

        try:
            results = engine.search(q, _parse_limit(limit))
        except ConfigurationError as exc:
            logger.error("Search configuration error: %s", exc)
            return JSONResponse({"error": str(exc)}, status_code=503)
        except Exception:
            logger.exception("Search failed for query %r", q)
            return JSONResponse(
                {"error": "Search failed. Please try again."}, status_code=500
            )

        return SearchResponse.build(q, results).model_dump(mode="json", by_alias=True)

    @app.post("/api/revalidate")
    async def revalidate(request: Request):
        """Invalidate cached content after the CMS reports a change."""
        expected_secret = settings.revalidate_secret
        if not expected_secret:
            return JSONResponse(
                {"message": "Revalidate secret not configured"}, status_code=500
            )

        try:
            secret, slug = await _read_revalidate_request(request)
        except Exception:
            logger.exception("Could not parse revalidation request")
            return JSONResponse({"message": "Revalidation failed"}, status_code=500)

        if secret != expected_secret:
            return JSONResponse({"message": "Invalid secret"}, status_code=401)

        path = repository.revalidate(slug)
        return {
            "revalidated": True,
            "path": path,
            "timestamp": int(time.time() * 1000),
        }

    @app.get("/api/articles")
    def list_articles():
        """List articles from the demo corpus or the content source."""
        if not repository.configured:
            return JSONResponse(
                {"error": "Content source is not configured."}, status_code=503
            )
        try:
            articles = repository.list_articles()
        except UpstreamError:
            logger.exception("Failed to load articles")
            return JSONResponse({"error": "Failed to load articles."}, status_code=502)
        return {
            "articles": [a.model_dump(mode="json", by_alias=True) for a in articles],
            "total": len(articles),
        }

    @app.get("/api/articles/{slug}")
    def get_article(slug: str):
        """Fetch a single article by slug."""
        if not repository.configured:
            return JSONResponse(
                {"error": "Content source is not configured."}, status_code=503
            )
        try:
            article = repository.get_article(slug)
        except UpstreamError:
            logger.exception("Failed to load article %s", slug)
            return JSONResponse({"error": "Failed to load article."}, status_code=502)
        if article is None:
            return JSONResponse({"error": "Article not found"}, status_code=404)
        return article.model_dump(mode="json", by_alias=True)

    return app


async def _read_revalidate_request(request: Request) -> tuple[str | None, str | None]:
    content_type = request.headers.get("content-type", "")
    if "application/x-www-form-urlencoded" in content_type:
        form = await request.form()
        return _as_str(form.get("secret")), _as_str(form.get("slug"))

    body: Any = await request.json()
    if not isinstance(body, dict):
        body = {}
    secret = body.get("secret") or request.headers.get("x-revalidate-secret")
    slug = body.get("slug") or body.get("path")
    return _as_str(secret), _as_str(slug)


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def run_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Run the FastAPI server."""
    import uvicorn

    uvicorn.run("decoupled_search.server:create_app", host=host, port=port, factory=True)


if __name__ == "__main__":
    run_server()
