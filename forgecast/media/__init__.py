"""
Media Processing Layer.

This package is responsible for all media file operations: inspecting
containers, writing embedded tags and downloading remote files.
"""

from .downloader import Downloader
from .inspector import MediaInspector
from .tagger import TagWriter, tag_fingerprint

__all__ = ["Downloader", "MediaInspector", "TagWriter", "tag_fingerprint"]
