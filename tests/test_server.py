"""Tests for the HTTP API."""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import make_article
from decoupled_search.config import Settings
from decoupled_search.content import ArticleRepository
from decoupled_search.errors import ConfigurationError, ContentSourceError, VectorStoreError
from decoupled_search.models import SearchResult
from decoupled_search.server import _parse_limit, create_app


class RecordingEngine:
    name = "fake"

    def __init__(self, results=None, error: Exception | None = None) -> None:
        self.results = results or []
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def search(self, query: str, limit: int = 10):
        self.calls.append((query, limit))
        if self.error is not None:
            raise self.error
        return self.results[:limit]


class FailingRepository(ArticleRepository):
    def list_articles(self):
        raise ContentSourceError("cms down")


def _client(settings: Settings | None = None, **kwargs) -> TestClient:
    return TestClient(create_app(settings or Settings(), **kwargs))


# ---------------------------------------------------------------------------
# /api/search
# ---------------------------------------------------------------------------


def test_search_requires_query() -> None:
    engine = RecordingEngine()
    client = _client(engine=engine)

    for params in ({}, {"q": ""}, {"q": "   "}):
        response = client.get("/api/search", params=params)
        assert response.status_code == 400
        assert response.json() == {"error": 'Query parameter "q" is required'}

    assert engine.calls == []


def test_search_returns_results_envelope() -> None:
    article = make_article(id="n1", title="GraphQL", slug="graphql", read_time="3 min read")
    engine = RecordingEngine([SearchResult(id="n1", score=0.75, article=article)])
    client = _client(engine=engine)

    response = client.get("/api/search", params={"q": "graphql", "limit": "5"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["query"] == "graphql"
    assert payload["totalResults"] == 1
    result = payload["results"][0]
    assert result["id"] == "n1"
    assert result["score"] == 0.75
    assert result["article"]["readTime"] == "3 min read"
    assert result["article"]["publishedAt"] == "2025-01-01T00:00:00.000Z"
    assert engine.calls == [("graphql", 5)]


def test_search_limit_defaults_and_clamps() -> None:
    engine = RecordingEngine()
    client = _client(engine=engine)

    client.get("/api/search", params={"q": "a"})
    client.get("/api/search", params={"q": "a", "limit": "abc"})
    client.get("/api/search", params={"q": "a", "limit": "0"})
    client.get("/api/search", params={"q": "a", "limit": "5000"})

    assert [limit for _, limit in engine.calls] == [10, 10, 1, 100]


def test_parse_limit() -> None:
    assert _parse_limit(None) == 10
    assert _parse_limit("7") == 7
    assert _parse_limit("-3") == 1


def test_search_without_engine_is_unavailable() -> None:
    client = _client(Settings())

    response = client.get("/api/search", params={"q": "graphql"})

    assert response.status_code == 503
    assert "error" in response.json()


def test_search_configuration_error_is_unavailable() -> None:
    client = _client(engine=RecordingEngine(error=ConfigurationError("missing key")))

    response = client.get("/api/search", params={"q": "graphql"})

    assert response.status_code == 503
    assert response.json() == {"error": "missing key"}


def test_search_backend_failure_is_generic_500() -> None:
    client = _client(engine=RecordingEngine(error=VectorStoreError("pinecone exploded")))

    response = client.get("/api/search", params={"q": "graphql"})

    assert response.status_code == 500
    assert response.json() == {"error": "Search failed. Please try again."}


def test_demo_mode_search_uses_bundled_articles() -> None:
    client = _client(Settings(demo_mode=True))

    response = client.get("/api/search", params={"q": "graphql"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["totalResults"] == len(payload["results"]) > 0
    scores = [r["score"] for r in payload["results"]]
    assert scores == sorted(scores, reverse=True)
    assert all(0 < s <= 1 for s in scores)


# ---------------------------------------------------------------------------
# /api/revalidate
# ---------------------------------------------------------------------------


def _revalidate_client() -> TestClient:
    return _client(Settings(revalidate_secret="s3cret"), engine=RecordingEngine())


def test_revalidate_with_form_body() -> None:
    response = _revalidate_client().post(
        "/api/revalidate", data={"secret": "s3cret", "slug": "articles/hello"}
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["revalidated"] is True
    assert payload["path"] == "/articles/hello"
    assert isinstance(payload["timestamp"], int)


def test_revalidate_with_json_body() -> None:
    response = _revalidate_client().post(
        "/api/revalidate", json={"secret": "s3cret", "path": "/articles/x"}
    )

    assert response.status_code == 200
    assert response.json()["path"] == "/articles/x"


def test_revalidate_secret_from_header_defaults_to_root() -> None:
    response = _revalidate_client().post(
        "/api/revalidate", json={}, headers={"x-revalidate-secret": "s3cret"}
    )

    assert response.status_code == 200
    assert response.json()["path"] == "/"


def test_revalidate_rejects_wrong_secret() -> None:
    response = _revalidate_client().post("/api/revalidate", json={"secret": "nope"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid secret"}


def test_revalidate_without_configured_secret() -> None:
    response = _client(engine=RecordingEngine()).post(
        "/api/revalidate", json={"secret": "anything"}
    )

    assert response.status_code == 500
    assert response.json() == {"message": "Revalidate secret not configured"}


def test_revalidate_malformed_body() -> None:
    response = _revalidate_client().post(
        "/api/revalidate",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 500
    assert response.json() == {"message": "Revalidation failed"}


def test_revalidate_drops_cached_articles() -> None:
    calls = []

    class Client:
        def fetch_articles(self):
            calls.append(1)
            return [make_article()]

    repository = ArticleRepository(client_factory=Client)
    client = _client(
        Settings(revalidate_secret="s3cret"), engine=RecordingEngine(), repository=repository
    )

    client.get("/api/articles")
    client.get("/api/articles")
    client.post("/api/revalidate", json={"secret": "s3cret"})
    client.get("/api/articles")

    assert len(calls) == 2


# ---------------------------------------------------------------------------
# /api/articles and /api/status
# ---------------------------------------------------------------------------


def test_articles_in_demo_mode() -> None:
    client = _client(Settings(demo_mode=True))

    listing = client.get("/api/articles").json()
    assert listing["total"] == 8

    article = client.get("/api/articles/building-apis-with-graphql")
    assert article.status_code == 200
    assert article.json()["id"] == "demo-3"

    missing = client.get("/api/articles/nope")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Article not found"}


def test_articles_unconfigured() -> None:
    response = _client(Settings()).get("/api/articles")

    assert response.status_code == 503


def test_articles_upstream_failure() -> None:
    repository = FailingRepository(client_factory=lambda: None)
    response = _client(Settings(), engine=RecordingEngine(), repository=repository).get(
        "/api/articles"
    )

    assert response.status_code == 502


def test_unknown_slugs_do_not_grow_the_cache() -> None:
    class EmptyClient:
        def fetch_article_by_path(self, path):
            return None

    repository = ArticleRepository(client_factory=EmptyClient)
    client = _client(Settings(), engine=RecordingEngine(), repository=repository)

    for i in range(500):
        response = client.get(f"/api/articles/missing-{i}")
        assert response.status_code == 404

    assert repository.cache_size == 0


def test_status_reports_configuration() -> None:
    assert _client(Settings()).get("/api/status").json() == {
        "configured": False,
        "demoMode": False,
        "engine": None,
    }
    assert _client(Settings(demo_mode=True)).get("/api/status").json() == {
        "configured": True,
        "demoMode": True,
        "engine": "lexical",
    }
