"""
Bundled demo articles used when the service runs without live credentials.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources

from .models import Article


@lru_cache(maxsize=1)
def get_demo_articles() -> tuple[Article, ...]:
    """Return the demo corpus in file order."""
    raw = resources.files(__package__).joinpath("data/articles.json").read_text(
        encoding="utf-8"
    )
    data = json.loads(raw)
    return tuple(Article.model_validate(item) for item in data.get("articles", []))


def get_demo_article_by_slug(slug: str) -> Article | None:
    for article in get_demo_articles():
        if article.slug == slug:
            return article
    return None
