"""
Vector storage interfaces and records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class EmbeddingRecord:
    """The persisted unit: one vector plus flat display metadata per article."""

    id: str
    vector: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_upsert_dict(self) -> dict[str, Any]:
        return {"id": self.id, "values": self.vector, "metadata": self.metadata}


@dataclass(frozen=True)
class VectorMatch:
    """A nearest-neighbour match returned by the store."""

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


class VectorStore(Protocol):
    """Protocol for the vector operations used by indexing and search."""

    def index_exists(self) -> bool:
        """Return True if the target index exists."""

    def create_index(self, *, dimension: int, metric: str = "cosine") -> None:
        """Create the target index."""

    def is_ready(self) -> bool:
        """Return True once the index accepts reads and writes."""

    def delete_all(self) -> bool:
        """Remove every record. Return False when there was nothing to clear."""

    def upsert(self, records: list[EmbeddingRecord]) -> int:
        """Insert or fully replace records by id. Return count written."""

    def query(self, *, vector: list[float], top_k: int) -> list[VectorMatch]:
        """Return the *top_k* matches by similarity, best first, with metadata."""
