"""
Wires the podcast services together from the project configuration.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from forgecast.core.listeners import PageRenderListener, RssItemListener
from forgecast.core.media_sync import MediaSyncService
from forgecast.exceptions import ConfigurationError
from forgecast.feed.extension import PodcastExtension
from forgecast.media.inspector import MediaInspector
from forgecast.media.tagger import TagWriter
from forgecast.models.config import PodcastConfig
from forgecast.storage.cache import TagCache
from forgecast.storage.config_manager import resolve_project_path

log = logging.getLogger(__name__)


class PodcastFeature:
    """
    Owns one set of podcast services for a site build.

    The host calls `handle_pre_render` for each page, `handle_rss_item` for
    each feed item, and `create_extension` once when the feed builder starts.
    """

    name = "Podcast"

    def __init__(self, config: PodcastConfig):
        self.config = config
        self.source_dir: Path = resolve_project_path(config, config.source_dir)
        self.output_dir: Path = resolve_project_path(config, config.output_dir)
        self.cache_path: Path = resolve_project_path(config, config.cache_path)

        self.inspector = MediaInspector()
        self.tag_cache = TagCache(self.cache_path)
        self.media_service = MediaSyncService(
            self.inspector, TagWriter(config.site_name), self.tag_cache
        )
        self.page_listener = PageRenderListener(
            self.media_service, self.output_dir, self.source_dir
        )
        self.rss_listener = RssItemListener(
            self.media_service, self.output_dir, self.source_dir
        )

    def handle_pre_render(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        return self.page_listener.handle(parameters)

    def handle_rss_item(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        self.rss_listener.handle(parameters, self._require_base_url())
        return parameters

    def create_extension(self) -> PodcastExtension:
        return PodcastExtension(self._require_base_url())

    def _require_base_url(self) -> str:
        if not self.config.site_base_url:
            raise ConfigurationError(
                "site_base_url is not set; it is required to build the podcast feed."
            )
        return self.config.site_base_url

