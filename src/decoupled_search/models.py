"""
Shared data shapes: articles, search results and the flat vector metadata.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def iso_now() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a `Z` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ArticleImage(BaseModel):
    """Lead image of an article."""

    model_config = ConfigDict(frozen=True)

    url: str
    alt: str = ""
    width: int = 1200
    height: int = 630


class Article(BaseModel):
    """Canonical article record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    slug: str
    body: str = ""
    summary: str = ""
    category: str = "General"
    tags: list[str] = Field(default_factory=list)
    read_time: str = Field(default="5 min read", alias="readTime")
    published_at: str = Field(alias="publishedAt")
    image: ArticleImage | None = None

    def to_vector_metadata(self) -> dict[str, str]:
        """Flatten the display fields into vector-store metadata."""
        return {
            "title": self.title,
            "slug": self.slug,
            "summary": self.summary,
            "category": self.category,
            "tags": ", ".join(self.tags),
            "readTime": self.read_time,
            "publishedAt": self.published_at,
            "imageUrl": self.image.url if self.image else "",
            "imageAlt": self.image.alt if self.image else "",
        }

    @classmethod
    def from_vector_metadata(cls, id: str, metadata: dict[str, Any] | None) -> "Article":
        """Rebuild a result-card article from stored metadata.

        The body is not stored alongside the vector, so it comes back empty.
        """
        meta = metadata or {}
        title = str(meta.get("title") or "")
        raw_tags = str(meta.get("tags") or "")
        image_url = str(meta.get("imageUrl") or "")
        return cls(
            id=id,
            title=title,
            slug=str(meta.get("slug") or id),
            summary=str(meta.get("summary") or ""),
            category=str(meta.get("category") or "General"),
            tags=[tag.strip() for tag in raw_tags.split(",") if tag.strip()],
            read_time=str(meta.get("readTime") or "5 min read"),
            published_at=str(meta.get("publishedAt") or iso_now()),
            image=(
                ArticleImage(url=image_url, alt=str(meta.get("imageAlt") or title))
                if image_url
                else None
            ),
        )


class SearchResult(BaseModel):
    """A ranked hit, identical in shape for every relevance engine."""

    model_config = ConfigDict(frozen=True)

    id: str
    score: float = Field(ge=0.0, le=1.0)
    article: Article


class SearchResponse(BaseModel):
    """Payload returned by `GET /api/search`."""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    results: list[SearchResult]
    total_results: int = Field(alias="totalResults")

    @classmethod
    def build(cls, query: str, results: list[SearchResult]) -> "SearchResponse":
        return cls(query=query, results=results, total_results=len(results))
