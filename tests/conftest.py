"""Shared pytest fixtures for forgecast tests."""

from __future__ import annotations

import struct
from pathlib import Path

import pytest

from forgecast.core.media_sync import MediaSyncService
from forgecast.media.inspector import MediaInspector
from forgecast.media.tagger import TagWriter
from forgecast.storage.cache import TagCache

# MPEG-1 Layer III, 128 kbps, 44.1 kHz, no padding: 417 bytes per frame.
MP3_FRAME_HEADER = b"\xff\xfb\x90\x64"
MP3_FRAME_SIZE = 417

# 1x1 transparent PNG.
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)

SITE_NAME = "Forge Radio"


def mp3_bytes(frames: int = 100) -> bytes:
    """Builds a silent but structurally valid MP3 stream."""
    frame = MP3_FRAME_HEADER + b"\x00" * (MP3_FRAME_SIZE - len(MP3_FRAME_HEADER))
    return frame * frames


def write_mp3(path: Path, frames: int = 100) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(mp3_bytes(frames))
    return path


def flac_bytes(seconds: int = 3, sample_rate: int = 44100) -> bytes:
    """Builds a FLAC stream holding only the marker and a STREAMINFO block."""
    # sample rate (20 bits), channels - 1 (3), bits per sample - 1 (5), total samples (36)
    packed = (sample_rate << 44) | (1 << 41) | (15 << 36) | (seconds * sample_rate)
    streaminfo = (
        (4096).to_bytes(2, "big") * 2
        + b"\x00" * 6
        + packed.to_bytes(8, "big")
        + b"\x00" * 16
    )
    # Last-metadata-block flag set, block type 0 (STREAMINFO).
    header = bytes([0x80]) + len(streaminfo).to_bytes(3, "big")
    return b"fLaC" + header + streaminfo


def write_flac(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(flac_bytes())
    return path


def _atom(name: bytes, payload: bytes = b"") -> bytes:
    return struct.pack(">I4s", 8 + len(payload), name) + payload


def m4a_bytes() -> bytes:
    """Builds an MP4 container with a file type box and an empty movie box."""
    ftyp = _atom(b"ftyp", b"M4A " + b"\x00\x00\x00\x00" + b"M4A mp42isom")
    return ftyp + _atom(b"moov") + _atom(b"mdat")


def write_m4a(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(m4a_bytes())
    return path


class CountingTagWriter(TagWriter):
    """A real TagWriter that records every file it rewrites."""

    def __init__(self, site_name: str):
        super().__init__(site_name)
        self.calls: list[str] = []

    def write(self, file_path, metadata, source_dir):
        self.calls.append(file_path)
        super().write(file_path, metadata, source_dir)


# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "public"
    path.mkdir()
    return path


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "podcast_media_state.json"


@pytest.fixture
def episode_mp3(source_dir: Path) -> Path:
    return write_mp3(source_dir / "media" / "ep1.mp3")


@pytest.fixture
def cover_png(source_dir: Path) -> Path:
    path = source_dir / "images" / "cover.png"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(PNG_BYTES)
    return path


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def episode_metadata() -> dict:
    return {
        "title": "Episode One",
        "description": "The very first episode.",
        "date": "2024-03-15",
        "itunes_author": "Jane Host",
        "itunes_episode": 1,
        "audio_file": "media/ep1.mp3",
    }


@pytest.fixture
def tag_writer() -> CountingTagWriter:
    return CountingTagWriter(SITE_NAME)


@pytest.fixture
def tag_cache(cache_path: Path) -> TagCache:
    return TagCache(cache_path)


@pytest.fixture
def service(tag_writer: CountingTagWriter, tag_cache: TagCache) -> MediaSyncService:
    return MediaSyncService(MediaInspector(), tag_writer, tag_cache)
