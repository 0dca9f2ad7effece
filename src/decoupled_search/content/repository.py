"""
Article access for the HTTP layer.

Serves articles from the demo corpus or the content source. Content-source
results are cached in process until `revalidate` is called.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Any, Callable

from ..config import Settings
from ..demo import get_demo_article_by_slug, get_demo_articles
from ..errors import ConfigurationError
from ..models import Article
from .client import ContentSourceClient

logger = logging.getLogger(__name__)

_ALL_ARTICLES = "__all__"
MAX_CACHED_ARTICLES = 256


def to_path(slug: str | None) -> str:
    """Turn a slug or path into a path with a leading slash."""
    if not slug:
        return "/"
    return slug if slug.startswith("/") else f"/{slug}"


class ArticleRepository:
    """Read articles with a shared cache for every content-source fetch."""

    def __init__(
        self,
        *,
        demo_mode: bool = False,
        client_factory: Callable[[], ContentSourceClient] | None = None,
        max_cached: int = MAX_CACHED_ARTICLES,
    ) -> None:
        self.demo_mode = demo_mode
        self._client_factory = client_factory
        self._client: ContentSourceClient | None = None
        self.max_cached = max_cached
        self._cache: OrderedDict[str, Any] = OrderedDict()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ArticleRepository":
        factory = None
        if settings.content_configured:
            factory = lambda: ContentSourceClient.from_settings(settings)  # noqa: E731
        return cls(demo_mode=settings.demo_mode, client_factory=factory)

    @property
    def configured(self) -> bool:
        return self.demo_mode or self._client_factory is not None

    def _get_client(self) -> ContentSourceClient:
        if self._client_factory is None:
            raise ConfigurationError(
                "Content source is not configured. Set DRUPAL_BASE_URL, "
                "DRUPAL_CLIENT_ID and DRUPAL_CLIENT_SECRET or enable DEMO_MODE."
            )
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    @property
    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    def _cached(self, key: str, load: Callable[[], Any]) -> Any:
        """Return the cached value for *key*, loading it on a miss.

        Misses that load `None` are not stored. The cache keeps at most
        `max_cached` entries and drops the least recently used one first.
        """
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                return self._cache[key]
        value = load()
        if value is None:
            return None
        with self._lock:
            self._cache[key] = value
            self._cache.move_to_end(key)
            while len(self._cache) > self.max_cached:
                self._cache.popitem(last=False)
        return value

    def list_articles(self) -> list[Article]:
        if self.demo_mode:
            return list(get_demo_articles())
        return self._cached(_ALL_ARTICLES, lambda: self._get_client().fetch_articles())

    def get_article(self, slug: str) -> Article | None:
        if self.demo_mode:
            return get_demo_article_by_slug(slug)
        path = f"/articles/{slug}"
        return self._cached(path, lambda: self._get_client().fetch_article_by_path(path))

    def revalidate(self, slug: str | None = None) -> str:
        """Drop every cached content-source response and return the target path."""
        path = to_path(slug)
        with self._lock:
            dropped = len(self._cache)
            self._cache.clear()
        logger.info("Revalidated %s (%d cached entries dropped)", path, dropped)
        return path
