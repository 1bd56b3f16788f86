"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class ForgecastError(Exception):
    """Base exception for all application-specific errors."""


class AnalysisError(ForgecastError):
    """Raised when a media file is missing or its container cannot be parsed."""


class TagWriteError(ForgecastError):
    """Raised when embedded tags could not be written to a media file."""


class DirectoryError(ForgecastError):
    """Raised when a publish directory could not be created."""


class CacheCorruptError(ForgecastError):
    """
    Raised when the tag cache document cannot be parsed.

    The cache itself never lets this escape; it degrades to an empty cache.
    """


class ConfigurationError(ForgecastError):
    """Raised for issues related to configuration loading or validation."""


class DownloadError(ForgecastError):
    """Raised when a remote media file could not be downloaded."""


class FrontMatterError(ForgecastError):
    """Raised when a content file has no front matter or it cannot be parsed."""
