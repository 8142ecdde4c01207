"""Thoughts error hierarchy.

All thoughts-specific errors inherit from ThoughtsError for easy catching.
"""


class ThoughtsError(Exception):
    """Base error for all thoughts operations."""


class ConfigError(ThoughtsError):
    """Invalid or missing configuration."""


class SourceError(ThoughtsError):
    """The content source could not be reached or answered with a failure."""


class ArchiveError(SourceError):
    """A pulled tree could not be read as the expected archive format."""


class ContentError(ThoughtsError):
    """Error in content processing (extraction, indexing, rendering)."""


class MissingIndexError(ContentError):
    """A pulled tree produced no index document."""


class RenderError(ContentError):
    """A document's content could not be transformed to HTML."""


class SyncInProgressError(ThoughtsError):
    """A sync was requested while another one is still running."""
