"""
Text preparation for article embeddings.
"""

from __future__ import annotations

import re

from ..config import DEFAULT_MAX_EMBEDDING_CHARS
from ..models import Article

TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")


def strip_markup(html: str) -> str:
    """Replace tag-like substrings with a space and collapse whitespace."""
    if not html:
        return ""
    text = TAG_RE.sub(" ", html)
    return WHITESPACE_RE.sub(" ", text).strip()


def build_embedding_input(
    article: Article,
    max_chars: int = DEFAULT_MAX_EMBEDDING_CHARS,
) -> str:
    """Title, summary and plain body separated by blank lines, head-truncated."""
    text = f"{article.title}\n\n{article.summary}\n\n{strip_markup(article.body)}"
    return text[:max_chars]
