"""Vector storage backends."""

from .base import EmbeddingRecord, VectorMatch, VectorStore
from .pinecone import PineconeVectorStore

__all__ = [
    "EmbeddingRecord",
    "VectorMatch",
    "VectorStore",
    "PineconeVectorStore",
]
