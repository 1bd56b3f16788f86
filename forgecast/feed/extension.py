"""
Adds the iTunes podcast namespace elements to an RSS channel and its items.

The extension only projects already-resolved metadata into XML; it never
touches the filesystem and never writes the standard <enclosure> element,
which the feed builder adds itself.
"""

import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any

from forgecast.models.feed import FeedChannel, FeedItem
from forgecast.utils.fallback import (
    CHANNEL_SUMMARY,
    CHANNEL_TYPE,
    ITEM_AUTHOR,
    ITEM_SUMMARY,
    is_present,
)
from forgecast.utils.formatting import leading_int
from forgecast.utils.path import is_remote_url, join_url

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"

ET.register_namespace("itunes", ITUNES_NS)


def itunes(tag: str) -> str:
    """Returns the qualified name of an element in the iTunes namespace."""
    return f"{{{ITUNES_NS}}}{tag}"


def normalize_explicit(value: Any) -> str:
    """Only the string 'true' or boolean True count as explicit."""
    return "true" if value is True or value == "true" else "false"


def split_category(category: str) -> list[str]:
    """Splits 'Parent > Child' into its parts; a plain category yields one part."""
    if ">" in category:
        return [part.strip() for part in category.split(">", 1)]
    return [category]


class PodcastExtension:
    """Feed extension emitting iTunes podcast metadata."""

    def __init__(self, site_base_url: str = ""):
        self.site_base_url = site_base_url.rstrip("/")

    def get_namespaces(self) -> dict[str, str]:
        return {"itunes": ITUNES_NS}

    def apply_to_channel(self, channel: ET.Element, data: FeedChannel) -> None:
        metadata = data.metadata
        owner_name = metadata.get("itunes_owner_name")
        owner_email = metadata.get("itunes_owner_email")

        if not data.copyright and owner_name:
            copyright_node = ET.SubElement(channel, "copyright")
            copyright_node.text = f"© {datetime.now().year} {owner_name}"

        self._text(channel, "type", CHANNEL_TYPE.resolve(metadata, default="episodic"))
        self._text(channel, "author", metadata.get("itunes_author"))
        self._text(channel, "summary", CHANNEL_SUMMARY.resolve(metadata, data))

        if owner_name or owner_email:
            owner = ET.SubElement(channel, itunes("owner"))
            self._text(owner, "name", owner_name)
            self._text(owner, "email", owner_email)

        self._image(channel, metadata.get("itunes_image"), data.link)

        categories = metadata.get("itunes_category")
        if categories:
            if isinstance(categories, str):
                categories = [categories]
            for category in categories:
                self._category(channel, str(category))

        if metadata.get("itunes_explicit") is not None:
            self._text(channel, "explicit", normalize_explicit(metadata["itunes_explicit"]))

    def apply_to_item(self, item: ET.Element, data: FeedItem) -> None:
        metadata = data.metadata

        self._text(item, "title", metadata.get("itunes_title"))
        self._text(item, "episodeType", metadata.get("itunes_episode_type"))
        self._text(item, "author", ITEM_AUTHOR.resolve(metadata, data))
        self._text(item, "subtitle", metadata.get("itunes_subtitle"))
        self._text(item, "summary", ITEM_SUMMARY.resolve(metadata, data))
        self._text(item, "duration", metadata.get("itunes_duration"))

        if metadata.get("itunes_explicit") is not None:
            self._text(item, "explicit", normalize_explicit(metadata["itunes_explicit"]))

        for key, tag in (("itunes_episode", "episode"), ("itunes_season", "season")):
            number = leading_int(metadata.get(key))
            if number:
                self._text(item, tag, number)

        self._image(item, metadata.get("itunes_image"), data.link)

    def resolve_url(self, url: str, fallback_base: str) -> str:
        """
        Makes an image or media URL absolute.

        Absolute HTTP(S) URLs are kept. Anything else is joined to the site
        base URL, or to the channel/item link when no base URL is configured.
        """
        if is_remote_url(url):
            return url
        return join_url(self.site_base_url or fallback_base, url)

    def _text(self, parent: ET.Element, tag: str, value: Any) -> None:
        if not is_present(value) or value is False:
            return
        node = ET.SubElement(parent, itunes(tag))
        node.text = str(value)

    def _image(self, parent: ET.Element, image: Any, link: str) -> None:
        if image:
            ET.SubElement(parent, itunes("image"), href=self.resolve_url(str(image), link))

    def _category(self, parent: ET.Element, category: str) -> None:
        parts = split_category(category)
        node = ET.SubElement(parent, itunes("category"), {"text": parts[0]})
        if len(parts) > 1:
            ET.SubElement(node, itunes("category"), {"text": parts[1]})
