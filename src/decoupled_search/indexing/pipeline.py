"""
Indexing pipeline orchestration.

A run moves through a fixed sequence of stages:

    CLEARING_INDEX -> ENSURING_INDEX -> EMBEDDING_AND_UPSERTING -> DONE

Runs are not transactional. A failure leaves the store in whatever state it
reached; re-running is safe because records are upserted by article id.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from ..config import (
    DEFAULT_EMBEDDING_DIM,
    DEFAULT_INDEX_READY_TIMEOUT,
    DEFAULT_MAX_EMBEDDING_CHARS,
    DEFAULT_UPSERT_DELAY,
    Settings,
)
from ..embeddings import EmbeddingProvider
from ..errors import DecoupledSearchError
from ..models import Article
from ..storage import EmbeddingRecord, VectorStore
from .text import build_embedding_input

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, Article], None]


class IndexingStage(str, Enum):
    PENDING = "pending"
    CLEARING_INDEX = "clearing_index"
    ENSURING_INDEX = "ensuring_index"
    EMBEDDING_AND_UPSERTING = "embedding_and_upserting"
    DONE = "done"


class IndexingError(DecoupledSearchError):
    """Raised when an indexing run aborts; carries the stage that failed."""

    def __init__(
        self,
        stage: IndexingStage,
        message: str,
        *,
        article_id: str | None = None,
    ) -> None:
        self.stage = stage
        self.article_id = article_id
        where = f" (article {article_id})" if article_id else ""
        super().__init__(f"[{stage.value}]{where} {message}")


@dataclass(frozen=True)
class IndexingResult:
    """Summary output for an indexing run."""

    count: int
    cleared: bool = False
    created_index: bool = False


class IndexingPipeline:
    """Embed articles and upsert them into a vector store, one at a time."""

    def __init__(
        self,
        store: VectorStore,
        embedding_provider: EmbeddingProvider,
        *,
        dimension: int = DEFAULT_EMBEDDING_DIM,
        max_embedding_chars: int = DEFAULT_MAX_EMBEDDING_CHARS,
        upsert_delay: float = DEFAULT_UPSERT_DELAY,
        ready_timeout: float = DEFAULT_INDEX_READY_TIMEOUT,
        poll_interval: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.store = store
        self.embedding_provider = embedding_provider
        self.dimension = dimension
        self.max_embedding_chars = max_embedding_chars
        self.upsert_delay = upsert_delay
        self.ready_timeout = ready_timeout
        self.poll_interval = poll_interval
        self._sleep = sleep
        self.stage = IndexingStage.PENDING

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: VectorStore,
        embedding_provider: EmbeddingProvider,
        **kwargs,
    ) -> "IndexingPipeline":
        return cls(
            store,
            embedding_provider,
            dimension=settings.embedding_dim,
            max_embedding_chars=settings.max_embedding_chars,
            upsert_delay=settings.upsert_delay,
            ready_timeout=settings.index_ready_timeout,
            **kwargs,
        )

    def index_all(
        self,
        articles: Sequence[Article],
        *,
        reset_first: bool = False,
        progress: ProgressCallback | None = None,
    ) -> IndexingResult:
        cleared = False
        if reset_first:
            cleared = self._clear_index()

        created = self._ensure_index()

        self.stage = IndexingStage.EMBEDDING_AND_UPSERTING
        total = len(articles)
        for position, article in enumerate(articles, start=1):
            if progress is not None:
                progress(position, total, article)
            self._index_article(article)
            logger.debug("Indexed %d/%d: %s", position, total, article.id)
            if position < total:
                self._sleep(self.upsert_delay)

        self.stage = IndexingStage.DONE
        logger.info("Indexed %d articles", total)
        return IndexingResult(count=total, cleared=cleared, created_index=created)

    def _clear_index(self) -> bool:
        self.stage = IndexingStage.CLEARING_INDEX
        logger.info("Clearing all existing vectors")
        try:
            cleared = self.store.delete_all()
        except Exception as exc:
            raise IndexingError(self.stage, f"Could not clear index: {exc}") from exc
        if not cleared:
            logger.info("Index already empty; nothing to clear")
        return cleared

    def _ensure_index(self) -> bool:
        self.stage = IndexingStage.ENSURING_INDEX
        try:
            if self.store.index_exists():
                return False
            self.store.create_index(dimension=self.dimension, metric="cosine")
            self._wait_until_ready()
        except IndexingError:
            raise
        except Exception as exc:
            raise IndexingError(self.stage, f"Could not prepare index: {exc}") from exc
        return True

    def _wait_until_ready(self) -> None:
        waited = 0.0
        while not self.store.is_ready():
            if waited >= self.ready_timeout:
                logger.warning(
                    "Index not reported ready after %.0fs; continuing anyway",
                    waited,
                )
                return
            self._sleep(self.poll_interval)
            waited += self.poll_interval
        logger.info("Index ready after %.0fs", waited)

    def _index_article(self, article: Article) -> None:
        text = build_embedding_input(article, self.max_embedding_chars)
        try:
            vector = self.embedding_provider.embed_passage(text)
            self.store.upsert(
                [
                    EmbeddingRecord(
                        id=article.id,
                        vector=vector,
                        metadata=article.to_vector_metadata(),
                    )
                ]
            )
        except Exception as exc:
            raise IndexingError(self.stage, str(exc), article_id=article.id) from exc
