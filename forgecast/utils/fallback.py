"""
Ordered fallback chains for front matter fields.

Several fields are looked up under more than one name (an iTunes-specific
key first, a generic key after it). Each chain is declared once here so the
precedence is defined in a single place.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


def is_present(value: Any) -> bool:
    """A value counts as present unless it is None or an empty string."""
    return value is not None and value != ""


@dataclass(frozen=True)
class FieldChain:
    """
    An ordered list of front matter keys, then object attributes, to consult.

    Metadata keys always take precedence over attributes of the fallback
    object (a feed channel or item).
    """

    name: str
    keys: tuple[str, ...]
    attributes: tuple[str, ...] = ()

    def resolve(
        self, metadata: Mapping[str, Any], source: Any = None, default: Any = None
    ) -> Any:
        for key in self.keys:
            value = metadata.get(key)
            if is_present(value):
                return value
        if source is not None:
            for attribute in self.attributes:
                value = getattr(source, attribute, None)
                if is_present(value):
                    return value
        return default


MEDIA_REFERENCE = FieldChain("media_reference", ("audio_file", "video_file"))

CHANNEL_SUMMARY = FieldChain(
    "channel_summary", ("itunes_summary", "description"), ("description",)
)
ITEM_SUMMARY = FieldChain("item_summary", ("itunes_summary",), ("description",))
ITEM_AUTHOR = FieldChain("item_author", ("itunes_author",), ("author",))
CHANNEL_TYPE = FieldChain("channel_type", ("itunes_type",))

REMOTE_SIZE = FieldChain("remote_size", ("audio_size",))
REMOTE_TYPE = FieldChain("remote_type", ("audio_type",))
