"""
Data Models Layer.

This package contains the Pydantic configuration model and the value objects
passed between media synchronization and feed rendering.
"""

from .config import PodcastConfig
from .feed import FeedChannel, FeedItem
from .media import Enclosure, MediaMetadata

__all__ = ["PodcastConfig", "FeedChannel", "FeedItem", "Enclosure", "MediaMetadata"]
