"""
Pinecone storage backend for article embeddings.
"""

from __future__ import annotations

import logging
from typing import Any

from pinecone import Pinecone, ServerlessSpec
from pinecone.exceptions import NotFoundException

from ..config import DEFAULT_CLOUD, DEFAULT_INDEX_NAME, DEFAULT_REGION
from ..errors import ConfigurationError, VectorStoreError
from .base import EmbeddingRecord, VectorMatch

logger = logging.getLogger(__name__)


class PineconeVectorStore:
    """Pinecone-backed persistence and nearest-neighbour search for one index."""

    def __init__(
        self,
        index_name: str = DEFAULT_INDEX_NAME,
        *,
        api_key: str | None = None,
        client: Any | None = None,
        cloud: str = DEFAULT_CLOUD,
        region: str = DEFAULT_REGION,
    ) -> None:
        self.index_name = index_name
        self.cloud = cloud
        self.region = region
        self._index: Any | None = None

        if client is not None:
            self._client = client
        elif not api_key:
            raise ConfigurationError(
                "PINECONE_API_KEY not found. "
                "Pass api_key from Settings or an explicit client."
            )
        else:
            self._client = Pinecone(api_key=api_key)

    @property
    def index(self) -> Any:
        if self._index is None:
            self._index = self._client.Index(self.index_name)
        return self._index

    def index_exists(self) -> bool:
        try:
            return self.index_name in self._client.list_indexes().names()
        except Exception as exc:
            raise VectorStoreError(f"Failed to list indexes: {exc}") from exc

    def create_index(self, *, dimension: int, metric: str = "cosine") -> None:
        logger.info(
            "Creating index %s (dimension=%d, metric=%s, %s/%s)",
            self.index_name,
            dimension,
            metric,
            self.cloud,
            self.region,
        )
        try:
            self._client.create_index(
                name=self.index_name,
                dimension=dimension,
                metric=metric,
                spec=ServerlessSpec(cloud=self.cloud, region=self.region),
            )
        except Exception as exc:
            raise VectorStoreError(f"Failed to create index {self.index_name}: {exc}") from exc

    def is_ready(self) -> bool:
        try:
            status = self._client.describe_index(self.index_name).status
        except NotFoundException:
            return False
        except Exception as exc:
            raise VectorStoreError(f"Failed to describe index {self.index_name}: {exc}") from exc
        if isinstance(status, dict):
            return bool(status.get("ready"))
        return bool(getattr(status, "ready", False))

    def delete_all(self) -> bool:
        if not self.index_exists():
            return False
        try:
            self.index.delete(delete_all=True)
        except NotFoundException:
            # Pinecone reports an empty namespace as not found.
            return False
        except Exception as exc:
            raise VectorStoreError(f"Failed to clear index {self.index_name}: {exc}") from exc
        return True

    def upsert(self, records: list[EmbeddingRecord]) -> int:
        if not records:
            return 0
        try:
            self.index.upsert(vectors=[record.to_upsert_dict() for record in records])
        except Exception as exc:
            ids = ", ".join(record.id for record in records)
            raise VectorStoreError(f"Upsert failed for [{ids}]: {exc}") from exc
        return len(records)

    def query(self, *, vector: list[float], top_k: int) -> list[VectorMatch]:
        try:
            response = self.index.query(vector=vector, top_k=top_k, include_metadata=True)
        except Exception as exc:
            raise VectorStoreError(f"Query failed on {self.index_name}: {exc}") from exc

        return [
            VectorMatch(
                id=str(match.id),
                score=float(match.score or 0.0),
                metadata=dict(match.metadata or {}),
            )
            for match in (response.matches or [])
        ]
