"""
Probes media files for their size, MIME type and playing time.
"""

import logging
import mimetypes
import os

import mutagen
from mutagen import MutagenError

from forgecast.exceptions import AnalysisError
from forgecast.models.media import DEFAULT_MIME_TYPE, MediaMetadata
from forgecast.utils.formatting import format_duration

log = logging.getLogger(__name__)


class MediaInspector:
    """Reads structural metadata from audio and video containers."""

    def inspect(self, file_path: str) -> MediaMetadata:
        """
        Inspects a media file and returns its metadata.

        Args:
            file_path: Path to the media file.

        Returns:
            The file's size in bytes, MIME type and formatted duration.

        Raises:
            AnalysisError: If the file does not exist or its container cannot be
            parsed.
        """
        if not os.path.isfile(file_path):
            raise AnalysisError(f"File not found: {file_path}")

        try:
            audio = mutagen.File(file_path)
        except (MutagenError, OSError) as e:
            raise AnalysisError(f"Failed to analyze file: {e}") from e

        if audio is None:
            raise AnalysisError(
                f"Failed to analyze file: unrecognized container "
                f"'{os.path.basename(file_path)}'."
            )

        size = os.path.getsize(file_path)
        info = getattr(audio, "info", None)
        length = getattr(info, "length", None) or 0

        return MediaMetadata(
            size=size,
            type=self._detect_mime(file_path, audio),
            duration=format_duration(length),
        )

    @staticmethod
    def _detect_mime(file_path: str, audio: mutagen.FileType) -> str:
        # Containers such as MP4 are shared between audio and video; the
        # extension decides which one a feed should advertise.
        guessed, _ = mimetypes.guess_type(file_path)
        if guessed and guessed.startswith("video/"):
            return guessed

        # mutagen lists layer-specific aliases (audio/mp3) ahead of the
        # registered type, so prefer the first one with a known extension.
        mimes = getattr(audio, "mime", None) or []
        for mime in mimes:
            if mimetypes.guess_extension(mime):
                return mime
        if guessed:
            return guessed
        return mimes[0] if mimes else DEFAULT_MIME_TYPE
