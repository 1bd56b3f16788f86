"""
Storage Layer.

This package handles all data persistence: the project configuration file
and the tag fingerprint cache.
"""

from .cache import TagCache, file_identity
from .config_manager import ConfigManager

__all__ = ["ConfigManager", "TagCache", "file_identity"]
