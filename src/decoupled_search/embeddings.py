"""
Embedding provider for vector-based semantic search.

Wraps Pinecone's hosted inference API for passage and query embeddings
with a configurable model and output dimensionality.
"""

from __future__ import annotations

from typing import Any

from pinecone import Pinecone

from .config import DEFAULT_EMBEDDING_DIM, DEFAULT_EMBEDDING_MODEL
from .errors import ConfigurationError, VectorStoreError


class EmbeddingProvider:
    """Generate text embeddings via Pinecone inference."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        dim: int | None = None,
        client: Any | None = None,
    ) -> None:
        self.model = model or DEFAULT_EMBEDDING_MODEL
        self.dim = dim or DEFAULT_EMBEDDING_DIM

        if client is not None:
            self._client = client
        elif not api_key:
            raise ConfigurationError(
                "PINECONE_API_KEY not found. "
                "Pass api_key from Settings or an explicit client."
            )
        else:
            self._client = Pinecone(api_key=api_key)

    def embed_texts(
        self,
        texts: list[str],
        *,
        input_type: str = "passage",
    ) -> list[list[float]]:
        """Embed texts in one request.

        Returns a list of embedding vectors in the same order as *texts*.
        """
        if not texts:
            return []
        try:
            result = self._client.inference.embed(
                model=self.model,
                inputs=texts,
                parameters={"input_type": input_type, "truncate": "END"},
            )
        except Exception as exc:
            raise VectorStoreError(f"Embedding request failed: {exc}") from exc

        vectors = [list(item.values) for item in result]
        if len(vectors) != len(texts):
            raise VectorStoreError(
                f"Expected {len(texts)} embeddings, got {len(vectors)}"
            )
        for idx, vec in enumerate(vectors):
            if len(vec) != self.dim:
                raise VectorStoreError(
                    f"Inconsistent embedding dimension at index {idx}: "
                    f"expected {self.dim}, got {len(vec)}"
                )
        return vectors

    def embed_passage(self, text: str) -> list[float]:
        """Embed a single document passage for storage."""
        return self.embed_texts([text], input_type="passage")[0]

    def embed_query(self, query: str) -> list[float]:
        """Embed a single query text for retrieval."""
        return self.embed_texts([query], input_type="query")[0]
