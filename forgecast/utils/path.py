"""
Utilities for handling media references, publish paths and URL joining.
"""

import posixpath
import re
from pathlib import Path, PurePosixPath

REMOTE_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def is_remote_url(reference: str) -> bool:
    """Returns True if the reference is an absolute HTTP(S) URL."""
    return bool(REMOTE_URL_PATTERN.match(reference))


def normalize_reference(reference: str) -> str:
    """
    Turns a media reference into a relative POSIX path.

    Leading slashes and backslashes are stripped so that '/media/ep1.mp3'
    and 'media\\ep1.mp3' both resolve inside the content tree.
    """
    return reference.replace("\\", "/").lstrip("/")


def escapes_root(reference: str) -> bool:
    """
    Returns True if a relative reference climbs out of the tree it is joined to.

    The check is lexical, so '../x.mp3' and 'media/../../x.mp3' are rejected
    while symlinked directories inside the tree keep working.
    """
    normalized = posixpath.normpath(normalize_reference(reference) or ".")
    return normalized == ".." or normalized.startswith("../")


def source_path_for(reference: str, source_dir: Path) -> Path:
    """Resolves a relative media reference against the content source tree."""
    return source_dir / Path(*PurePosixPath(normalize_reference(reference)).parts)


def publish_path_for(reference: str, output_dir: Path) -> Path:
    """
    Computes where a local media file is published.

    The publish tree mirrors the reference's relative path under the output
    directory, so 'media/ep1.mp3' is published to '<output>/media/ep1.mp3'.
    """
    return output_dir / Path(*PurePosixPath(normalize_reference(reference)).parts)


def site_url_for(reference: str) -> str:
    """Returns the site-relative URL a published media file is served from."""
    return "/" + normalize_reference(reference)


def join_url(base: str, relative: str) -> str:
    """Joins a base URL and a relative path with exactly one separator."""
    return base.rstrip("/") + "/" + relative.lstrip("/")


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)
