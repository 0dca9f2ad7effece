"""Indexing components for article embeddings."""

from .pipeline import IndexingError, IndexingPipeline, IndexingResult, IndexingStage
from .text import build_embedding_input, strip_markup

__all__ = [
    "IndexingError",
    "IndexingPipeline",
    "IndexingResult",
    "IndexingStage",
    "build_embedding_input",
    "strip_markup",
]
