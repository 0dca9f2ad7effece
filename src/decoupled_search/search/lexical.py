"""
Lexical fallback scorer.

A deterministic stand-in for semantic search over an in-memory corpus,
used when no vector backend is configured. The constants are kept as-is
so rankings stay reproducible across releases.
"""

from __future__ import annotations

from typing import Sequence

from ..models import Article, SearchResult

PHRASE_BONUS = 0.5
TOKEN_BONUS = 0.1
TITLE_BONUS = 0.2
MAX_SCORE = 1.0
MIN_TOKEN_LENGTH = 3


def query_tokens(query: str) -> list[str]:
    """Lowercased whitespace tokens longer than two characters."""
    return [token for token in query.lower().split() if len(token) >= MIN_TOKEN_LENGTH]


def searchable_text(article: Article) -> str:
    parts = [article.title, article.summary, article.body, article.category, *article.tags]
    return " ".join(parts).lower()


def score_article(query: str, article: Article) -> float:
    query_lower = query.lower()
    text = searchable_text(article)
    title = article.title.lower()

    score = 0.0
    if query_lower in text:
        score += PHRASE_BONUS

    for token in query_tokens(query):
        if token in text:
            score += TOKEN_BONUS
            if token in title:
                score += TITLE_BONUS

    return min(score, MAX_SCORE)


def score_articles(
    query: str,
    limit: int,
    corpus: Sequence[Article],
) -> list[SearchResult]:
    """Rank *corpus* against *query*; ties keep corpus order."""
    if not query.strip():
        return []

    scored = [
        SearchResult(id=article.id, score=score, article=article)
        for article in corpus
        if (score := score_article(query, article)) > 0
    ]
    ordered = sorted(scored, key=lambda result: -result.score)
    return ordered[: max(limit, 0)]


class LexicalSearchEngine:
    """Relevance engine backed by `score_articles` over a fixed corpus."""

    name = "lexical"

    def __init__(self, corpus: Sequence[Article]) -> None:
        self.corpus = tuple(corpus)

    def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        return score_articles(query, limit, self.corpus)
