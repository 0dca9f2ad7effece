"""
Relevance engine selection.

The engine is chosen once from settings so request handlers never branch on
demo mode themselves.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..config import Settings
from ..demo import get_demo_articles
from ..embeddings import EmbeddingProvider
from ..errors import NotConfiguredError
from ..models import SearchResult
from ..storage import PineconeVectorStore
from .lexical import LexicalSearchEngine
from .vector import VectorSearchEngine

logger = logging.getLogger(__name__)


class RelevanceEngine(Protocol):
    """Anything that turns a query into ranked search results."""

    name: str

    def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        """Return at most *limit* results, best first."""


def build_relevance_engine(settings: Settings) -> RelevanceEngine:
    """Build the engine the settings call for.

    Demo mode wins over a configured vector backend. Raises
    `NotConfiguredError` when neither is available.
    """
    if settings.demo_mode:
        logger.info("Demo mode enabled; using lexical fallback search")
        return LexicalSearchEngine(get_demo_articles())

    if settings.vector_configured:
        store = PineconeVectorStore(
            settings.index_name,
            api_key=settings.pinecone_api_key,
            cloud=settings.cloud,
            region=settings.region,
        )
        provider = EmbeddingProvider(
            api_key=settings.pinecone_api_key,
            model=settings.embedding_model,
            dim=settings.embedding_dim,
        )
        return VectorSearchEngine(store, provider)

    raise NotConfiguredError(
        "Vector search is not configured. Set PINECONE_API_KEY or enable DEMO_MODE."
    )
