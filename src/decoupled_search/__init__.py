"""
Decoupled Search - semantic search over articles from a headless CMS.

Articles are fetched over GraphQL, embedded and stored in Pinecone, and
searched either through the vector index or, in demo mode, through a
deterministic lexical scorer over bundled articles.

Example usage:
    >>> from decoupled_search import Settings, build_relevance_engine
    >>> engine = build_relevance_engine(Settings(demo_mode=True))
    >>> results = engine.search("graphql", limit=5)
"""

from .config import Settings
from .models import Article, ArticleImage, SearchResponse, SearchResult
from .search import (
    LexicalSearchEngine,
    RelevanceEngine,
    VectorSearchEngine,
    build_relevance_engine,
    score_articles,
)

__all__ = [
    # Config
    "Settings",
    # Models
    "Article",
    "ArticleImage",
    "SearchResponse",
    "SearchResult",
    # Search
    "LexicalSearchEngine",
    "RelevanceEngine",
    "VectorSearchEngine",
    "build_relevance_engine",
    "score_articles",
]
