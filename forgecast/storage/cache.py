"""
A single-document JSON cache remembering which tag fingerprint was last
written to each media file.
"""

import hashlib
import json
import logging
from pathlib import Path

from forgecast.exceptions import CacheCorruptError

log = logging.getLogger(__name__)


def file_identity(file_path: str | Path) -> str:
    """Derives a stable cache key from a file's resolved path."""
    resolved = str(Path(file_path).resolve())
    return hashlib.md5(resolved.encode("utf-8")).hexdigest()  # noqa: S324


class TagCache:
    """
    Maps file identities to the fingerprint of the tags last written to them.

    The document is loaded once on construction and rewritten in full on every
    `put`. A missing or unreadable document is treated as an empty cache.
    Entries for deleted files are never pruned.
    """

    def __init__(self, cache_path: Path):
        self.cache_path = Path(cache_path)
        self._entries: dict[str, str] = {}
        self.load()

    def load(self) -> None:
        """(Re)loads the cache document from disk."""
        self._entries = {}
        if not self.cache_path.is_file():
            return
        try:
            self._entries = self._read()
        except CacheCorruptError as e:
            log.warning(f"{e} Starting with an empty cache.")

    def _read(self) -> dict[str, str]:
        try:
            with open(self.cache_path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            raise CacheCorruptError(
                f"Tag cache '{self.cache_path}' could not be read: {e}."
            ) from e
        if not isinstance(data, dict):
            raise CacheCorruptError(
                f"Tag cache '{self.cache_path}' is not a JSON object."
            )
        return {str(k): str(v) for k, v in data.items()}

    def get(self, identity: str) -> str | None:
        return self._entries.get(identity)

    def put(self, identity: str, fingerprint: str) -> None:
        """Records a fingerprint and persists the whole document."""
        self._entries[identity] = fingerprint
        self.save()

    def save(self) -> None:
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.cache_path, "w", encoding="utf-8") as f:
            json.dump(self._entries, f, indent=4)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identity: object) -> bool:
        return identity in self._entries
