"""
Content normalizer.

GraphQL nodes from the content source are untrusted. `decode_node` validates
them into a typed `ArticleNode`, discarding malformed optional fields, and
`normalize` maps the node onto the canonical `Article` with defaults applied.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ContentDecodeError
from ..models import Article, ArticleImage, iso_now

logger = logging.getLogger(__name__)

ARTICLE_PATH_PREFIX = re.compile(r"^/articles/")
DEFAULT_CATEGORY = "General"
DEFAULT_READ_TIME = "5 min read"


class _Node(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class TimeField(_Node):
    time: str | None = None


class ProcessedText(_Node):
    processed: str | None = None


class ValueText(_Node):
    value: str | None = None


class ImageNode(_Node):
    url: str | None = None
    alt: str | None = None
    width: int | None = None
    height: int | None = None


class ArticleNode(_Node):
    """Typed view of a `NodeArticle` returned by the GraphQL API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str | None = None
    path: str | None = None
    created: TimeField | None = None
    body: ProcessedText | None = None
    summary: ValueText | None = None
    category: str | None = None
    tags: str | list[str] | None = None
    read_time: str | None = Field(default=None, alias="readTime")
    image: ImageNode | None = None


def _without(data: dict[str, Any], loc: tuple[Any, ...]) -> bool:
    """Remove the value at *loc* from nested dicts. Return True if removed."""
    target: Any = data
    for key in loc[:-1]:
        if not isinstance(target, dict) or not isinstance(target.get(key), dict):
            return False
        target[key] = dict(target[key])
        target = target[key]
    if isinstance(target, dict) and loc[-1] in target:
        del target[loc[-1]]
        return True
    return False


def decode_node(raw: Mapping[str, Any]) -> ArticleNode:
    """Validate a raw node, dropping any optional field that does not fit.

    Raises `ContentDecodeError` when the node is not a mapping or carries no
    usable `id`.
    """
    if not isinstance(raw, Mapping):
        raise ContentDecodeError(f"Expected an object node, got {type(raw).__name__}")

    data = dict(raw)
    while True:
        try:
            return ArticleNode.model_validate(data)
        except ValidationError as exc:
            locs = [tuple(err["loc"]) for err in exc.errors() if err["loc"]]
            if not locs or any(loc[0] == "id" for loc in locs):
                raise ContentDecodeError(f"Article node has no usable id: {exc}") from exc
            removed = False
            for loc in locs:
                # Union errors carry the member name in loc; fall back to the
                # closest enclosing field that exists.
                for end in range(len(loc), 0, -1):
                    if _without(data, loc[:end]):
                        removed = True
                        break
            if not removed:
                raise ContentDecodeError(str(exc)) from exc
            logger.debug("Dropped malformed fields %s from node %r", locs, data.get("id"))


def _split_tags(tags: str | list[str] | None) -> list[str]:
    if not tags:
        return []
    if isinstance(tags, str):
        return [tag.strip() for tag in tags.split(",")]
    return [tag.strip() for tag in tags]


def normalize(raw_node: Mapping[str, Any] | None, *, now: str | None = None) -> Article | None:
    """Map a raw content node to an `Article`; `None` for an absent/empty node."""
    if not raw_node:
        return None

    node = decode_node(raw_node)
    title = node.title or ""
    slug = ARTICLE_PATH_PREFIX.sub("", node.path or "") or node.id

    image: ArticleImage | None = None
    if node.image is not None and node.image.url:
        image = ArticleImage(
            url=node.image.url,
            alt=node.image.alt or title,
            width=node.image.width or 1200,
            height=node.image.height or 630,
        )

    return Article(
        id=node.id,
        title=title,
        slug=slug,
        body=(node.body.processed if node.body else None) or "",
        summary=(node.summary.value if node.summary else None) or "",
        category=node.category or DEFAULT_CATEGORY,
        tags=_split_tags(node.tags),
        read_time=node.read_time or DEFAULT_READ_TIME,
        published_at=(node.created.time if node.created else None) or now or iso_now(),
        image=image,
    )


def normalize_nodes(nodes: list[Any]) -> list[Article]:
    """Normalize a node list, skipping empty and undecodable entries."""
    articles: list[Article] = []
    for idx, raw in enumerate(nodes):
        try:
            article = normalize(raw)
        except ContentDecodeError as exc:
            logger.warning("Skipping content node %d: %s", idx, exc)
            continue
        if article is not None:
            articles.append(article)
    return articles
