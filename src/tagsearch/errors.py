"""Exception hierarchy shared across TagSearch components."""

from __future__ import annotations


class TagSearchError(Exception):
    """Base class for errors raised by TagSearch."""


class ConfigurationError(TagSearchError):
    """Environment configuration is incomplete or inconsistent."""


class TargetNotFoundError(TagSearchError):
    """The selected database target is not configured."""

    def __init__(self, name: str | None) -> None:
        super().__init__(f"Database not found: {name!r}")
        self.name = name


class EmbeddingError(TagSearchError):
    """The embeddings API failed or returned unusable output."""


class IndexQueryError(TagSearchError):
    """The vector index call failed or returned a malformed response."""
