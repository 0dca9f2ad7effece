"""
Exception types shared across the package.
"""

from __future__ import annotations


class DecoupledSearchError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(DecoupledSearchError):
    """Raised when required credentials or URLs are missing."""


class NotConfiguredError(ConfigurationError):
    """Raised when no relevance engine can be built from the settings."""


class UpstreamError(DecoupledSearchError):
    """Raised when an external service fails or returns an error status."""


class ContentSourceError(UpstreamError):
    """Raised for OAuth or GraphQL failures against the content source."""


class VectorStoreError(UpstreamError):
    """Raised for failures talking to the vector database or its inference API."""


class ContentDecodeError(ValueError):
    """Raised when a content node cannot be decoded into an article at all."""
