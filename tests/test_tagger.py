"""Tests for tag fingerprints and TagWriter."""

import datetime

import pytest
from mutagen.flac import FLAC
from mutagen.id3 import ID3
from mutagen.mp4 import MP4, MP4Cover

from forgecast.exceptions import TagWriteError
from forgecast.media import tagger
from forgecast.media.tagger import TagWriter, resolve_art_path, tag_fields, tag_fingerprint
from tests.conftest import PNG_BYTES, SITE_NAME, write_flac, write_m4a


def test_fingerprint_is_deterministic(episode_metadata):
    assert tag_fingerprint(episode_metadata, SITE_NAME) == tag_fingerprint(
        dict(episode_metadata), SITE_NAME
    )


@pytest.mark.parametrize(
    "irrelevant",
    [
        {"itunes_season": 4},
        {"itunes_explicit": "true"},
        {"itunes_category": "Technology"},
        {"layout": "episode"},
        {"audio_size": 999},
    ],
)
def test_fingerprint_ignores_irrelevant_fields(episode_metadata, irrelevant):
    changed = {**episode_metadata, **irrelevant}
    assert tag_fingerprint(changed, SITE_NAME) == tag_fingerprint(
        episode_metadata, SITE_NAME
    )


@pytest.mark.parametrize(
    "relevant",
    [
        {"title": "Episode One (remastered)"},
        {"itunes_author": "Someone Else"},
        {"date": "2025-01-01"},
        {"itunes_episode": 2},
        {"description": "Updated notes."},
        {"itunes_image": "images/cover.png"},
    ],
)
def test_fingerprint_changes_with_relevant_fields(episode_metadata, relevant):
    changed = {**episode_metadata, **relevant}
    assert tag_fingerprint(changed, SITE_NAME) != tag_fingerprint(
        episode_metadata, SITE_NAME
    )


def test_fingerprint_depends_on_site_name(episode_metadata):
    assert tag_fingerprint(episode_metadata, "A") != tag_fingerprint(
        episode_metadata, "B"
    )


def test_tag_fields_year_from_date_object():
    fields = tag_fields({"date": datetime.date(2023, 7, 1)}, SITE_NAME)
    assert fields["year"] == "2023"
    assert fields["album"] == SITE_NAME


def test_write_mp3_tags(episode_mp3, episode_metadata, source_dir):
    TagWriter(SITE_NAME).write(str(episode_mp3), episode_metadata, str(source_dir))

    tags = ID3(str(episode_mp3))
    assert tags.version[:2] == (2, 3)
    assert tags["TIT2"].text == ["Episode One"]
    assert tags["TPE1"].text == ["Jane Host"]
    assert tags["TALB"].text == [SITE_NAME]
    assert tags["TCON"].text == ["Podcast"]
    assert str(tags["TDRC"].text[0]) == "2024"
    assert tags["TRCK"].text == ["1"]
    assert tags.getall("COMM")[0].text == ["The very first episode."]
    assert not tags.getall("APIC")


def test_write_mp3_adds_legacy_id3v1_block(episode_mp3, episode_metadata, source_dir):
    TagWriter(SITE_NAME).write(str(episode_mp3), episode_metadata, str(source_dir))

    data = episode_mp3.read_bytes()
    assert data[-128:-125] == b"TAG"
    assert b"Episode One" in data[-128:]


def test_write_mp3_embeds_cover_art(episode_mp3, episode_metadata, source_dir, cover_png):
    metadata = {**episode_metadata, "itunes_image": "/images/cover.png"}

    TagWriter(SITE_NAME).write(str(episode_mp3), metadata, str(source_dir))

    pictures = ID3(str(episode_mp3)).getall("APIC")
    assert len(pictures) == 1
    assert pictures[0].type == 3
    assert pictures[0].mime == "image/png"
    assert pictures[0].data == PNG_BYTES


def test_rewrite_replaces_previous_tags(episode_mp3, episode_metadata, source_dir, cover_png):
    writer = TagWriter(SITE_NAME)
    metadata = {**episode_metadata, "itunes_image": "images/cover.png"}
    writer.write(str(episode_mp3), metadata, str(source_dir))
    writer.write(
        str(episode_mp3), {**metadata, "title": "Renamed"}, str(source_dir)
    )

    tags = ID3(str(episode_mp3))
    assert tags["TIT2"].text == ["Renamed"]
    assert len(tags.getall("APIC")) == 1
    assert len(tags.getall("COMM")) == 1


def test_unresolvable_cover_art_is_skipped(episode_mp3, episode_metadata, source_dir):
    metadata = {**episode_metadata, "itunes_image": "images/missing.jpg"}

    TagWriter(SITE_NAME).write(str(episode_mp3), metadata, str(source_dir))

    assert not ID3(str(episode_mp3)).getall("APIC")


def test_resolve_art_path(source_dir, cover_png):
    assert resolve_art_path("images/cover.png", str(source_dir)) == str(cover_png)
    assert resolve_art_path("", str(source_dir)) is None
    assert resolve_art_path("https://cdn.example.com/art.jpg", str(source_dir)) is None


def test_write_unsupported_container_raises(tmp_path, episode_metadata):
    path = tmp_path / "notes.txt"
    path.write_text("plain text")

    with pytest.raises(TagWriteError, match="notes.txt"):
        TagWriter(SITE_NAME).write(str(path), episode_metadata, str(tmp_path))


def test_write_missing_file_raises(tmp_path, episode_metadata):
    with pytest.raises(TagWriteError):
        TagWriter(SITE_NAME).write(
            str(tmp_path / "gone.mp3"), episode_metadata, str(tmp_path)
        )


def test_write_flac_tags(source_dir, episode_metadata, cover_png):
    path = write_flac(source_dir / "media" / "ep1.flac")
    metadata = {**episode_metadata, "itunes_image": "images/cover.png"}

    TagWriter(SITE_NAME).write(str(path), metadata, str(source_dir))

    audio = FLAC(str(path))
    assert audio["title"] == ["Episode One"]
    assert audio["artist"] == ["Jane Host"]
    assert audio["album"] == [SITE_NAME]
    assert audio["genre"] == ["Podcast"]
    assert audio["date"] == ["2024"]
    assert audio["tracknumber"] == ["1"]
    assert audio["comment"] == ["The very first episode."]
    assert len(audio.pictures) == 1
    assert audio.pictures[0].type == 3
    assert audio.pictures[0].mime == "image/png"
    assert audio.pictures[0].data == PNG_BYTES


def test_flac_rewrite_removes_cleared_fields(source_dir, episode_metadata, cover_png):
    path = write_flac(source_dir / "media" / "ep1.flac")
    writer = TagWriter(SITE_NAME)
    metadata = {**episode_metadata, "itunes_image": "images/cover.png"}
    writer.write(str(path), metadata, str(source_dir))

    writer.write(
        str(path),
        {**metadata, "description": "", "itunes_episode": None, "date": None},
        str(source_dir),
    )

    audio = FLAC(str(path))
    assert "comment" not in audio
    assert "tracknumber" not in audio
    assert "date" not in audio
    assert audio["title"] == ["Episode One"]
    assert len(audio.pictures) == 1


def test_flac_cover_art_too_large_is_skipped(
    source_dir, episode_metadata, cover_png, monkeypatch
):
    path = write_flac(source_dir / "media" / "ep1.flac")
    monkeypatch.setattr(tagger, "FLAC_MAX_BLOCKSIZE", len(PNG_BYTES) - 1)

    TagWriter(SITE_NAME).write(
        str(path), {**episode_metadata, "itunes_image": "images/cover.png"}, str(source_dir)
    )

    audio = FLAC(str(path))
    assert audio["title"] == ["Episode One"]
    assert not audio.pictures


def test_write_mp4_tags(source_dir, episode_metadata, cover_png):
    path = write_m4a(source_dir / "media" / "ep1.m4a")
    metadata = {**episode_metadata, "itunes_image": "images/cover.png"}

    TagWriter(SITE_NAME).write(str(path), metadata, str(source_dir))

    audio = MP4(str(path))
    assert audio["\xa9nam"] == ["Episode One"]
    assert audio["\xa9ART"] == ["Jane Host"]
    assert audio["\xa9alb"] == [SITE_NAME]
    assert audio["\xa9gen"] == ["Podcast"]
    assert audio["\xa9day"] == ["2024"]
    assert audio["\xa9cmt"] == ["The very first episode."]
    assert audio["trkn"] == [(1, 0)]
    covers = audio["covr"]
    assert len(covers) == 1
    assert covers[0].imageformat == MP4Cover.FORMAT_PNG
    assert bytes(covers[0]) == PNG_BYTES


def test_mp4_rewrite_removes_cleared_fields(source_dir, episode_metadata):
    path = write_m4a(source_dir / "media" / "ep1.m4a")
    writer = TagWriter(SITE_NAME)
    writer.write(str(path), episode_metadata, str(source_dir))

    writer.write(
        str(path),
        {**episode_metadata, "date": "", "itunes_episode": None, "description": None},
        str(source_dir),
    )

    audio = MP4(str(path))
    assert "\xa9day" not in audio
    assert "trkn" not in audio
    assert "\xa9cmt" not in audio
    assert audio["\xa9nam"] == ["Episode One"]
