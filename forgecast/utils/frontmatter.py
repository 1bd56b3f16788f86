"""
Reads and writes the YAML front matter block at the top of a content file.
"""

import re
from typing import Any

import yaml

from forgecast.exceptions import FrontMatterError

FRONT_MATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n(.*)$", re.DOTALL)


def split_front_matter(content: str) -> tuple[dict[str, Any], str]:
    """
    Splits a content file into its parsed front matter and its body.

    Raises:
        FrontMatterError: If there is no front matter block or the YAML is invalid.
    """
    match = FRONT_MATTER_PATTERN.match(content)
    if not match:
        raise FrontMatterError("No valid YAML front matter found.")

    raw, body = match.groups()
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Failed to parse YAML front matter: {e}") from e

    if not isinstance(data, dict):
        raise FrontMatterError("Front matter must be a mapping of keys to values.")
    return data, body


def join_front_matter(data: dict[str, Any], body: str) -> str:
    """Rebuilds a content file from front matter and body."""
    dumped = yaml.safe_dump(
        data, sort_keys=False, allow_unicode=True, default_flow_style=False, indent=2
    )
    return f"---\n{dumped}---\n{body}"
