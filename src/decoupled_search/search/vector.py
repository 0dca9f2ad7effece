"""
Vector-based semantic search engine.

Embeds a query and asks the vector store for its nearest neighbours. The
store's ordering is authoritative; matches are only reshaped.
"""

from __future__ import annotations

from ..embeddings import EmbeddingProvider
from ..models import Article, SearchResult
from ..storage import VectorMatch, VectorStore


def _clamp(score: float) -> float:
    return min(max(score, 0.0), 1.0)


def match_to_result(match: VectorMatch) -> SearchResult:
    return SearchResult(
        id=match.id,
        score=_clamp(match.score),
        article=Article.from_vector_metadata(match.id, match.metadata),
    )


class VectorSearchEngine:
    """Embed a query and search stored article embeddings."""

    name = "vector"

    def __init__(
        self,
        store: VectorStore,
        embedding_provider: EmbeddingProvider,
    ) -> None:
        self.store = store
        self.embedding_provider = embedding_provider

    def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        """Return ranked hits using cosine similarity."""
        query_embedding = self.embedding_provider.embed_query(query)
        matches = self.store.query(vector=query_embedding, top_k=limit)
        return [match_to_result(match) for match in matches]
