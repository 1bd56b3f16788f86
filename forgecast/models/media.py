"""
Value objects produced by media inspection and synchronization.
"""

from dataclasses import asdict, dataclass
from typing import Any

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class MediaMetadata:
    """Structural metadata of a media file."""

    size: int = 0
    type: str = DEFAULT_MIME_TYPE
    duration: str = "00:00"


@dataclass(frozen=True)
class Enclosure:
    """
    A publish-ready RSS enclosure.

    `url` is either a remote URL taken verbatim from the front matter or a
    site-relative path into the publish tree, never a filesystem path.
    """

    url: str
    length: int
    type: str

    @property
    def is_video(self) -> bool:
        return "video" in self.type

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
