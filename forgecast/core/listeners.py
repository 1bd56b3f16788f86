"""
Host-facing listeners that run media synchronization for a single content
item and inject the result into the page or feed item being built.

Each listener is the failure boundary for one item: any error raised while
processing is logged and the item is rendered without media.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from bs4 import BeautifulSoup

from forgecast.core.media_sync import MediaSyncService
from forgecast.models.feed import FeedItem
from forgecast.models.media import Enclosure
from forgecast.utils.fallback import MEDIA_REFERENCE
from forgecast.utils.path import is_remote_url, join_url

log = logging.getLogger(__name__)

CONTENT_BODY_SELECTOR = "div.content-body"


class PageRenderListener:
    """Adds media URL, type and length to a page's template variables."""

    def __init__(self, media_service: MediaSyncService, output_dir: Path, source_dir: Path):
        self.media_service = media_service
        self.output_dir = output_dir
        self.source_dir = source_dir

    def handle(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        metadata = parameters.get("metadata") or {}
        if not MEDIA_REFERENCE.resolve(metadata):
            return parameters

        try:
            enclosure = self.media_service.process_media(
                metadata, self.source_dir, self.output_dir
            )
        except Exception as e:
            log.error(
                f"Podcast: Failed to process media for page: {e}",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return parameters

        if enclosure:
            self._inject(parameters.setdefault("metadata", {}), enclosure)
            if "file_metadata" in parameters:
                self._inject(parameters["file_metadata"], enclosure)
        return parameters

    @staticmethod
    def _inject(target: Dict[str, Any], enclosure: Enclosure) -> None:
        key = "video_url" if enclosure.is_video else "audio_url"
        target[key] = enclosure.url
        target["media_type"] = enclosure.type
        target["media_length"] = enclosure.length


class RssItemListener:
    """Attaches an absolute enclosure to a feed item while the feed is built."""

    def __init__(self, media_service: MediaSyncService, output_dir: Path, source_dir: Path):
        self.media_service = media_service
        self.output_dir = output_dir
        self.source_dir = source_dir

    def handle(self, event_data: Dict[str, Any], site_base_url: str) -> None:
        item: FeedItem = event_data["item"]
        file_data: Dict[str, Any] = event_data.get("file") or {}
        metadata = file_data.get("metadata") or {}

        if not MEDIA_REFERENCE.resolve(metadata):
            return

        try:
            self._clean_content(item)
            enclosure = self.media_service.process_media(
                metadata, self.source_dir, self.output_dir
            )
        except Exception as e:
            log.error(
                f"Failed to process podcast media for {item.title}: {e}",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return

        if enclosure:
            if not is_remote_url(enclosure.url):
                enclosure = Enclosure(
                    url=join_url(site_base_url, enclosure.url),
                    length=enclosure.length,
                    type=enclosure.type,
                )
            item.enclosure = enclosure
            log.info(f"Added podcast enclosure for: {item.title}")

    @staticmethod
    def _clean_content(item: FeedItem) -> None:
        """Reduces rendered page HTML to its content body, or the description."""
        if not item.content:
            return
        soup = BeautifulSoup(item.content, "html.parser")
        body = soup.select_one(CONTENT_BODY_SELECTOR)
        item.content = body.decode_contents().strip() if body else item.description
