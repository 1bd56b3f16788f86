"""
Publishes the media file referenced by a content item and describes it as an
RSS enclosure.
"""

import logging
import mimetypes
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from forgecast.exceptions import AnalysisError, DirectoryError
from forgecast.media.inspector import MediaInspector
from forgecast.media.tagger import TagWriter, tag_fingerprint
from forgecast.models.media import Enclosure
from forgecast.storage.cache import TagCache, file_identity
from forgecast.utils.fallback import MEDIA_REFERENCE, REMOTE_SIZE, REMOTE_TYPE
from forgecast.utils.formatting import leading_int
from forgecast.utils.path import (
    create_dir,
    escapes_root,
    is_remote_url,
    publish_path_for,
    site_url_for,
    source_path_for,
)

log = logging.getLogger(__name__)

DEFAULT_AUDIO_TYPE = "audio/mpeg"


def _as_length(value: Any) -> int:
    """Byte length declared in front matter; unreadable or negative values count as 0."""
    return max(leading_int(value) or 0, 0)


class MediaSyncService:
    """
    Orchestrates tagging, publishing and inspection of a single media file.

    The service owns the tag cache: it is the only component that records
    fingerprints, and it does so only after a successful tag write.
    """

    def __init__(
        self,
        inspector: MediaInspector,
        tag_writer: TagWriter,
        tag_cache: TagCache,
    ):
        self.inspector = inspector
        self.tag_writer = tag_writer
        self.tag_cache = tag_cache

    @property
    def site_name(self) -> str:
        return self.tag_writer.site_name

    def process_media(
        self,
        metadata: Dict[str, Any],
        source_dir: Path,
        output_dir: Path,
    ) -> Optional[Enclosure]:
        """
        Resolves, tags, publishes and inspects an item's media file.

        Args:
            metadata: The item's front matter.
            source_dir: Root of the content tree that media references are
                relative to.
            output_dir: Root of the publish tree.

        Returns:
            The enclosure for the item, or None if it declares no media or the
            referenced local file does not exist or lies outside the content
            tree.

        Raises:
            DirectoryError: If the publish directory cannot be created.
            TagWriteError: If embedded tags cannot be rewritten.
        """
        reference = MEDIA_REFERENCE.resolve(metadata)
        if not reference:
            return None
        reference = str(reference)

        if is_remote_url(reference):
            return Enclosure(
                url=reference,
                length=_as_length(REMOTE_SIZE.resolve(metadata, default=0)),
                type=str(REMOTE_TYPE.resolve(metadata, default=DEFAULT_AUDIO_TYPE)),
            )

        if escapes_root(reference):
            log.warning(f"Media reference '{reference}' points outside the content tree, skipping.")
            return None

        source_dir, output_dir = Path(source_dir), Path(output_dir)
        source_path = source_path_for(reference, source_dir)
        if not source_path.is_file():
            log.debug(f"Media file '{source_path}' does not exist, skipping.")
            return None

        target_path = publish_path_for(reference, output_dir)
        try:
            create_dir(target_path.parent)
        except OSError as e:
            raise DirectoryError(
                f'Directory "{target_path.parent}" was not created: {e}'
            ) from e

        # Tags go on the source so every published copy inherits them.
        self._sync_tags(source_path, metadata, source_dir)
        self._publish(source_path, target_path)

        length, mime_type = self._describe(target_path)
        return Enclosure(url=site_url_for(reference), length=length, type=mime_type)

    def _sync_tags(
        self, source_path: Path, metadata: Dict[str, Any], source_dir: Path
    ) -> bool:
        """Rewrites tags if the tag-relevant metadata changed. Returns True if it did."""
        identity = file_identity(source_path)
        fingerprint = tag_fingerprint(metadata, self.site_name)
        if self.tag_cache.get(identity) == fingerprint:
            return False

        log.debug(f"Writing tags to '{source_path.name}'.")
        self.tag_writer.write(str(source_path), metadata, str(source_dir))
        self.tag_cache.put(identity, fingerprint)
        return True

    def _publish(self, source_path: Path, target_path: Path) -> bool:
        """Copies the source if the target is missing or older. Returns True if copied."""
        if (
            target_path.exists()
            and source_path.stat().st_mtime <= target_path.stat().st_mtime
        ):
            log.debug(f"'{target_path.name}' is up to date, not copying.")
            return False

        shutil.copy2(source_path, target_path)
        log.debug(f"Published '{source_path.name}' to '{target_path}'.")
        return True

    def _describe(self, target_path: Path) -> tuple[int, str]:
        try:
            info = self.inspector.inspect(str(target_path))
            return info.size, info.type
        except AnalysisError as e:
            log.warning(
                f"Could not inspect '{target_path.name}' ({e}), "
                "falling back to file size and guessed type."
            )
            guessed, _ = mimetypes.guess_type(str(target_path))
            return target_path.stat().st_size, guessed or DEFAULT_AUDIO_TYPE
