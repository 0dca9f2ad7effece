"""
GraphQL client for the content source.

Authenticates with the OAuth client-credentials grant and runs GraphQL
queries over HTTP with `requests`.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from ..config import Settings
from ..errors import ConfigurationError, ContentSourceError
from ..models import Article
from .normalize import normalize, normalize_nodes
from .queries import GET_ALL_ARTICLES, GET_ARTICLE_BY_PATH, MAX_ARTICLES

logger = logging.getLogger(__name__)

# Refresh the token slightly before the server-side expiry.
_TOKEN_EXPIRY_MARGIN = 30.0


class ContentSourceClient:
    """Fetch articles from the content source's GraphQL endpoint."""

    def __init__(
        self,
        base_url: str,
        client_id: str,
        client_secret: str,
        *,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self._session = session or requests.Session()
        self._token: str | None = None
        self._token_expires_at = 0.0

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "ContentSourceClient":
        if not settings.content_configured:
            raise ConfigurationError(
                "Content source credentials not configured. "
                "Set DRUPAL_BASE_URL, DRUPAL_CLIENT_ID and DRUPAL_CLIENT_SECRET."
            )
        return cls(
            settings.content_base_url,  # type: ignore[arg-type]
            settings.content_client_id,  # type: ignore[arg-type]
            settings.content_client_secret,  # type: ignore[arg-type]
            **kwargs,
        )

    def fetch_access_token(self) -> str:
        """Return a bearer token, requesting a new one when the cached one expired."""
        if self._token is not None and time.monotonic() < self._token_expires_at:
            return self._token

        try:
            response = self._session.post(
                f"{self.base_url}/oauth/token",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise ContentSourceError(f"Failed to get access token: {exc}") from exc

        token = payload.get("access_token")
        if not token:
            raise ContentSourceError("Token endpoint returned no access_token")

        expires_in = float(payload.get("expires_in") or 0)
        self._token = str(token)
        self._token_expires_at = (
            time.monotonic() + expires_in - _TOKEN_EXPIRY_MARGIN if expires_in else 0.0
        )
        return self._token

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL query and return its `data` object."""
        token = self.fetch_access_token()
        try:
            response = self._session.post(
                f"{self.base_url}/graphql",
                json={"query": query, "variables": variables or {}},
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise ContentSourceError(f"GraphQL request failed: {exc}") from exc

        if payload.get("errors"):
            raise ContentSourceError(f"GraphQL errors: {payload['errors']}")
        return payload.get("data") or {}

    def fetch_articles(self, first: int = MAX_ARTICLES) -> list[Article]:
        data = self.execute(GET_ALL_ARTICLES, {"first": first})
        nodes = (data.get("nodeArticles") or {}).get("nodes") or []
        articles = normalize_nodes(nodes)
        logger.info("Fetched %d articles from %s", len(articles), self.base_url)
        return articles

    def fetch_article_by_path(self, path: str) -> Article | None:
        data = self.execute(GET_ARTICLE_BY_PATH, {"path": path})
        entity = (data.get("route") or {}).get("entity")
        return normalize(entity)
