"""
Feed value objects handed to the podcast extension by the feed builder.
"""

from dataclasses import dataclass, field
from typing import Any

from forgecast.models.media import Enclosure


@dataclass
class FeedChannel:
    """Channel-level data of an RSS feed."""

    title: str = ""
    link: str = ""
    description: str = ""
    author: str = ""
    copyright: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class FeedItem:
    """A single entry of an RSS feed."""

    title: str = ""
    link: str = ""
    description: str = ""
    author: str = ""
    content: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    enclosure: Enclosure | None = None
