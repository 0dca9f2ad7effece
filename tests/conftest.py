from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from decoupled_search.models import Article, ArticleImage
from decoupled_search.storage import EmbeddingRecord, VectorMatch


# ---------------------------------------------------------------------------
# Fake Pinecone client
# ---------------------------------------------------------------------------


@dataclass
class FakeEmbedding:
    values: list[float]


class FakeInference:
    """Records embed calls and returns deterministic vectors."""

    def __init__(self, dim: int = 4) -> None:
        self.dim = dim
        self.calls: list[dict[str, Any]] = []
        self.fail_on: str | None = None

    def embed(self, *, model: str, inputs: list[str], parameters: dict) -> list[FakeEmbedding]:
        self.calls.append({"model": model, "inputs": inputs, "parameters": parameters})
        if self.fail_on is not None and any(self.fail_on in text for text in inputs):
            raise RuntimeError("embedding service unavailable")
        return [
            FakeEmbedding(values=[float(len(self.calls))] * self.dim) for _ in inputs
        ]


@dataclass
class FakeMatch:
    id: str
    score: float
    metadata: dict[str, Any] | None = None


@dataclass
class FakeQueryResponse:
    matches: list[FakeMatch]


class FakeIndex:
    def __init__(self) -> None:
        self.vectors: dict[str, dict[str, Any]] = {}
        self.delete_calls: list[dict[str, Any]] = []
        self.query_calls: list[dict[str, Any]] = []
        self.matches: list[FakeMatch] = []
        self.delete_error: Exception | None = None

    def upsert(self, *, vectors: list[dict[str, Any]]) -> None:
        for vector in vectors:
            self.vectors[vector["id"]] = vector

    def delete(self, **kwargs: Any) -> None:
        self.delete_calls.append(kwargs)
        if self.delete_error is not None:
            raise self.delete_error
        self.vectors.clear()

    def query(self, *, vector: list[float], top_k: int, include_metadata: bool) -> FakeQueryResponse:
        self.query_calls.append(
            {"vector": vector, "top_k": top_k, "include_metadata": include_metadata}
        )
        return FakeQueryResponse(matches=self.matches[:top_k])


class FakeIndexList:
    def __init__(self, names: list[str]) -> None:
        self._names = names

    def names(self) -> list[str]:
        return list(self._names)


@dataclass
class FakeDescription:
    status: dict[str, Any] = field(default_factory=lambda: {"ready": True})


class FakePineconeClient:
    def __init__(self, *, dim: int = 4, existing: list[str] | None = None) -> None:
        self.inference = FakeInference(dim=dim)
        self.existing = list(existing or [])
        self.created: list[dict[str, Any]] = []
        self.index = FakeIndex()
        self.ready = True

    def list_indexes(self) -> FakeIndexList:
        return FakeIndexList(self.existing)

    def create_index(self, *, name: str, dimension: int, metric: str, spec: Any) -> None:
        self.created.append(
            {"name": name, "dimension": dimension, "metric": metric, "spec": spec}
        )
        self.existing.append(name)

    def describe_index(self, name: str) -> FakeDescription:
        return FakeDescription(status={"ready": self.ready})

    def Index(self, name: str) -> FakeIndex:  # noqa: N802
        return self.index


# ---------------------------------------------------------------------------
# In-memory vector store (VectorStore protocol)
# ---------------------------------------------------------------------------


class InMemoryStore:
    def __init__(self, *, exists: bool = True, ready_after: int = 0) -> None:
        self.records: dict[str, EmbeddingRecord] = {}
        self.exists = exists
        self.ready_after = ready_after
        self.ready_checks = 0
        self.created: list[dict[str, Any]] = []
        self.events: list[str] = []
        self.upsert_error: Exception | None = None

    def index_exists(self) -> bool:
        self.events.append("index_exists")
        return self.exists

    def create_index(self, *, dimension: int, metric: str = "cosine") -> None:
        self.events.append("create_index")
        self.created.append({"dimension": dimension, "metric": metric})
        self.exists = True

    def is_ready(self) -> bool:
        self.ready_checks += 1
        return self.ready_checks > self.ready_after

    def delete_all(self) -> bool:
        self.events.append("delete_all")
        had_records = bool(self.records)
        self.records.clear()
        return had_records

    def upsert(self, records: list[EmbeddingRecord]) -> int:
        self.events.append("upsert")
        if self.upsert_error is not None:
            raise self.upsert_error
        for record in records:
            self.records[record.id] = record
        return len(records)

    def query(self, *, vector: list[float], top_k: int) -> list[VectorMatch]:
        return [
            VectorMatch(id=record.id, score=1.0, metadata=record.metadata)
            for record in list(self.records.values())[:top_k]
        ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def make_article(**overrides: Any) -> Article:
    data: dict[str, Any] = {
        "id": "a1",
        "title": "Untitled",
        "slug": "untitled",
        "body": "",
        "summary": "",
        "category": "General",
        "tags": [],
        "read_time": "5 min read",
        "published_at": "2025-01-01T00:00:00.000Z",
    }
    data.update(overrides)
    return Article(**data)


@pytest.fixture()
def articles() -> list[Article]:
    return [
        make_article(
            id="n1",
            title="Getting Started with GraphQL",
            slug="getting-started-with-graphql",
            body="<p>GraphQL queries fetch <em>exactly</em> what you need.</p>",
            summary="A first look at GraphQL.",
            category="Development",
            tags=["graphql", "api"],
        ),
        make_article(
            id="n2",
            title="Vector Search Basics",
            slug="vector-search-basics",
            body="<p>Embeddings turn text into vectors.</p>",
            summary="How semantic search works.",
            category="Search",
            tags=["vectors", "embeddings"],
            image=ArticleImage(url="https://example.com/v.png", alt="Vectors"),
        ),
        make_article(
            id="n3",
            title="Caching for CMS Front Ends",
            slug="caching-for-cms-front-ends",
            body="<p>Revalidate pages when content changes.</p>",
            summary="Keeping pages fresh.",
            category="Performance",
            tags=["caching"],
        ),
    ]


@pytest.fixture()
def fake_pinecone() -> FakePineconeClient:
    return FakePineconeClient()
