"""
Maps episode front matter onto embedded tags and writes them to media files.
"""

import hashlib
import json
import logging
import mimetypes
import os
from pathlib import Path
from typing import Any, Dict, Optional

import mutagen
import mutagen.id3 as id3
from mutagen import MutagenError
from mutagen.flac import FLAC, Picture
from mutagen.id3 import ID3NoHeaderError
from mutagen.mp4 import MP4, MP4Cover
from mutagen.ogg import OggFileType

from forgecast.exceptions import TagWriteError
from forgecast.utils.path import normalize_reference

log = logging.getLogger(__name__)

# --- Constants ---
GENRE = "Podcast"
FRONT_COVER = 3
FLAC_MAX_BLOCKSIZE = 16777215  # ~16.7MB, max size for a FLAC metadata block
MP3_EXTENSIONS = {".mp3", ".mp2", ".mpga"}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _year(date_value: Any) -> str:
    # Front matter dates may arrive parsed (datetime.date) or as strings.
    return _text(date_value)[:4]


def tag_fields(metadata: Dict[str, Any], site_name: str) -> Dict[str, str]:
    """
    Projects front matter onto the fixed set of fields written as tags.

    Only these fields influence the fingerprint, so edits to any other front
    matter key never cause a rewrite.
    """
    return {
        "title": _text(metadata.get("title")),
        "artist": _text(metadata.get("itunes_author")),
        "album": site_name,
        "year": _year(metadata.get("date")),
        "track": _text(metadata.get("itunes_episode")),
        "comment": _text(metadata.get("description")),
        "image_path": _text(metadata.get("itunes_image")),
    }


def tag_fingerprint(metadata: Dict[str, Any], site_name: str) -> str:
    """Returns a deterministic hash of the tag-relevant front matter fields."""
    payload = json.dumps(tag_fields(metadata, site_name), ensure_ascii=False)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()  # noqa: S324


def resolve_art_path(image: str, source_dir: str) -> Optional[str]:
    """Resolves cover art relative to the content tree, or None if it is missing."""
    if not image:
        return None
    candidate = Path(source_dir) / normalize_reference(image)
    return str(candidate) if candidate.is_file() else None


class TagWriter:
    """Writes podcast episode tags to MP3, MP4, FLAC and Ogg files in place."""

    def __init__(self, site_name: str):
        self.site_name = site_name

    def write(self, file_path: str, metadata: Dict[str, Any], source_dir: str) -> None:
        """
        Rewrites the embedded tags of a media file.

        Args:
            file_path: The media file, modified in place.
            metadata: Episode front matter.
            source_dir: Content tree root used to resolve relative cover art.

        Raises:
            TagWriteError: If the container cannot be opened or saved.
        """
        tags = tag_fields(metadata, self.site_name)
        art_path = resolve_art_path(tags["image_path"], source_dir)
        if tags["image_path"] and not art_path:
            log.debug(
                f"Could not resolve cover art '{tags['image_path']}' for "
                f"'{os.path.basename(file_path)}', tagging without it."
            )

        try:
            if Path(file_path).suffix.lower() in MP3_EXTENSIONS:
                self._tag_mp3(file_path, tags, art_path)
                return

            audio = mutagen.File(file_path)
            if isinstance(audio, MP4):
                self._tag_mp4(audio, tags, art_path)
            elif isinstance(audio, (FLAC, OggFileType)):
                self._tag_vorbis(audio, tags, art_path)
            elif audio is not None and isinstance(audio.tags, id3.ID3):
                self._tag_mp3(file_path, tags, art_path)
            else:
                raise TagWriteError(
                    f"Failed to write tags to {os.path.basename(file_path)}: "
                    "unsupported container."
                )
        except (MutagenError, OSError) as e:
            raise TagWriteError(
                f"Failed to write tags to {os.path.basename(file_path)}: {e}"
            ) from e

    def _tag_mp3(
        self, file_path: str, tags: Dict[str, str], art_path: Optional[str]
    ) -> None:
        try:
            audio = id3.ID3(file_path)
        except ID3NoHeaderError:
            audio = id3.ID3()

        audio.setall("TIT2", [id3.TIT2(encoding=3, text=tags["title"])])
        audio.setall("TPE1", [id3.TPE1(encoding=3, text=tags["artist"])])
        audio.setall("TALB", [id3.TALB(encoding=3, text=tags["album"])])
        audio.setall("TCON", [id3.TCON(encoding=3, text=GENRE)])
        audio.setall(
            "COMM", [id3.COMM(encoding=3, lang="eng", desc="", text=tags["comment"])]
        )
        if tags["year"]:
            audio.setall("TDRC", [id3.TDRC(encoding=3, text=tags["year"])])
        else:
            audio.delall("TDRC")
        if tags["track"]:
            audio.setall("TRCK", [id3.TRCK(encoding=3, text=tags["track"])])
        else:
            audio.delall("TRCK")

        if art_path:
            audio.delall("APIC")
            with open(art_path, "rb") as f:
                audio.add(
                    id3.APIC(
                        encoding=3,
                        mime=self._image_mime(art_path),
                        type=FRONT_COVER,
                        desc="Cover Art",
                        data=f.read(),
                    )
                )

        # ID3v2.3 for modern players, plus an ID3v1 block for legacy ones.
        audio.save(filename=file_path, v1=2, v2_version=3)

    def _tag_mp4(
        self, audio: MP4, tags: Dict[str, str], art_path: Optional[str]
    ) -> None:
        if audio.tags is None:
            audio.add_tags()

        track = tags["track"]
        self._assign(
            audio,
            {
                "\xa9nam": [tags["title"]] if tags["title"] else None,
                "\xa9ART": [tags["artist"]] if tags["artist"] else None,
                "\xa9alb": [tags["album"]],
                "\xa9cmt": [tags["comment"]] if tags["comment"] else None,
                "\xa9gen": [GENRE],
                "\xa9day": [tags["year"]] if tags["year"] else None,
                "trkn": [(int(track), 0)] if track.isdigit() else None,
            },
        )

        if art_path:
            image_format = (
                MP4Cover.FORMAT_PNG
                if self._image_mime(art_path) == "image/png"
                else MP4Cover.FORMAT_JPEG
            )
            with open(art_path, "rb") as f:
                audio["covr"] = [MP4Cover(f.read(), imageformat=image_format)]

        audio.save()

    def _tag_vorbis(self, audio, tags: Dict[str, str], art_path: Optional[str]) -> None:
        if audio.tags is None:
            audio.add_tags()

        self._assign(
            audio,
            {
                key: [value] if value else None
                for key, value in (
                    ("TITLE", tags["title"]),
                    ("ARTIST", tags["artist"]),
                    ("ALBUM", tags["album"]),
                    ("COMMENT", tags["comment"]),
                    ("DATE", tags["year"]),
                    ("TRACKNUMBER", tags["track"]),
                    ("GENRE", GENRE),
                )
            },
        )

        if art_path and isinstance(audio, FLAC):
            if os.path.getsize(art_path) > FLAC_MAX_BLOCKSIZE:
                log.warning("Cover art is too large to embed in FLAC, skipping it.")
            else:
                pic = Picture()
                pic.type = FRONT_COVER
                pic.mime = self._image_mime(art_path)
                pic.desc = "Cover Art"
                with open(art_path, "rb") as f:
                    pic.data = f.read()
                audio.clear_pictures()
                audio.add_picture(pic)

        audio.save()

    @staticmethod
    def _assign(audio, values: Dict[str, Any]) -> None:
        """Sets each tag, removing it when its value is None."""
        for key, value in values.items():
            if value is not None:
                audio[key] = value
            elif key in audio:
                del audio[key]

    @staticmethod
    def _image_mime(art_path: str) -> str:
        mime, _ = mimetypes.guess_type(art_path)
        return mime or "image/jpeg"
