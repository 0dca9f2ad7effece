"""Content source access: GraphQL client, normalizer and cached repository."""

from .client import ContentSourceClient
from .normalize import ArticleNode, decode_node, normalize, normalize_nodes
from .repository import ArticleRepository

__all__ = [
    "ContentSourceClient",
    "ArticleNode",
    "decode_node",
    "normalize",
    "normalize_nodes",
    "ArticleRepository",
]
