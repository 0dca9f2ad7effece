"""
Configuration for the search service.

Settings are read once from the environment at process start and passed
explicitly into the components that need them.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


DEFAULT_INDEX_NAME = "decoupled-search"
DEFAULT_EMBEDDING_MODEL = "llama-text-embed-v2"
DEFAULT_EMBEDDING_DIM = 1024
DEFAULT_CLOUD = "aws"
DEFAULT_REGION = "us-east-1"
DEFAULT_MAX_EMBEDDING_CHARS = 32_000
DEFAULT_UPSERT_DELAY = 0.1
DEFAULT_INDEX_READY_TIMEOUT = 30.0

ENV_FILES = (".env.local", ".env")


def load_env_files(directory: str | None = None) -> None:
    """Load `.env.local` then `.env` without overriding the real environment."""
    base = Path(directory) if directory else Path.cwd()
    for name in ENV_FILES:
        path = base / name
        if path.is_file():
            load_dotenv(path, override=False)


def _flag(value: str | None) -> bool:
    return value == "true"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _positive_int(name: str, value: str | None, default: int) -> int:
    cleaned = _clean(value)
    if cleaned is None:
        return default
    try:
        parsed = int(cleaned)
    except ValueError:
        parsed = 0
    if parsed <= 0:
        logger.warning("Ignoring invalid %s=%r; using %d", name, value, default)
        return default
    return parsed


@dataclass(frozen=True)
class Settings:
    """Process-wide, read-only configuration."""

    content_base_url: str | None = None
    content_client_id: str | None = None
    content_client_secret: str | None = None
    pinecone_api_key: str | None = None
    index_name: str = DEFAULT_INDEX_NAME
    demo_mode: bool = False
    revalidate_secret: str | None = None
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    embedding_dim: int = DEFAULT_EMBEDDING_DIM
    cloud: str = DEFAULT_CLOUD
    region: str = DEFAULT_REGION
    max_embedding_chars: int = DEFAULT_MAX_EMBEDDING_CHARS
    upsert_delay: float = DEFAULT_UPSERT_DELAY
    index_ready_timeout: float = DEFAULT_INDEX_READY_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        base_url = _clean(env.get("DRUPAL_BASE_URL")) or _clean(
            env.get("NEXT_PUBLIC_DRUPAL_BASE_URL")
        )
        return cls(
            content_base_url=base_url.rstrip("/") if base_url else None,
            content_client_id=_clean(env.get("DRUPAL_CLIENT_ID")),
            content_client_secret=_clean(env.get("DRUPAL_CLIENT_SECRET")),
            pinecone_api_key=_clean(env.get("PINECONE_API_KEY")),
            index_name=_clean(env.get("PINECONE_INDEX")) or DEFAULT_INDEX_NAME,
            demo_mode=_flag(env.get("DEMO_MODE")) or _flag(env.get("NEXT_PUBLIC_DEMO_MODE")),
            revalidate_secret=_clean(env.get("DRUPAL_REVALIDATE_SECRET")),
            embedding_model=_clean(env.get("PINECONE_EMBEDDING_MODEL"))
            or DEFAULT_EMBEDDING_MODEL,
            embedding_dim=_positive_int(
                "PINECONE_EMBEDDING_DIM", env.get("PINECONE_EMBEDDING_DIM"), DEFAULT_EMBEDDING_DIM
            ),
        )

    @property
    def vector_configured(self) -> bool:
        return self.pinecone_api_key is not None

    @property
    def content_configured(self) -> bool:
        return all(
            (self.content_base_url, self.content_client_id, self.content_client_secret)
        )

    @property
    def configured(self) -> bool:
        """True when the app can serve search without the setup screen."""
        return self.demo_mode or (self.content_base_url is not None and self.vector_configured)
