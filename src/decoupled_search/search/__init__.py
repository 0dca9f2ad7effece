"""Relevance engines for article search."""

from .engine import RelevanceEngine, build_relevance_engine
from .lexical import LexicalSearchEngine, score_article, score_articles
from .vector import VectorSearchEngine

__all__ = [
    "RelevanceEngine",
    "build_relevance_engine",
    "LexicalSearchEngine",
    "score_article",
    "score_articles",
    "VectorSearchEngine",
]
