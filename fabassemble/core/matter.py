"""
Front matter: YAML header + body.

Format:
    ---
    title: Home
    order: 1
    ---
    <p>{{title}}</p>

- Header must be a YAML mapping (empty header → {})
- Files without a header have empty data and the whole text as content
- Unparseable header → AssemblyError(FRONT_MATTER_INVALID)
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from fabassemble.domain.errors import AssemblyError, ErrorCodes

# Opening delimiter on the first line, closing delimiter on its own line
FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<header>.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


@dataclass
class Matter:
    """Parsed file: front-matter data and body content."""
    data: dict[str, Any] = field(default_factory=dict)
    content: str = ""
    path: Path | None = None


def parse_matter(text: str, path: Path | None = None) -> Matter:
    """
    Split text into front-matter data and content.

    Args:
        text: Raw file text
        path: Source path (error context only)

    Returns:
        Matter

    Raises:
        AssemblyError: FRONT_MATTER_INVALID
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return Matter(data={}, content=text, path=path)

    try:
        data = yaml.safe_load(match.group("header"))
    except yaml.YAMLError as e:
        raise AssemblyError(
            ErrorCodes.FRONT_MATTER_INVALID,
            path=str(path) if path else None,
            error=str(e),
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise AssemblyError(
            ErrorCodes.FRONT_MATTER_INVALID,
            path=str(path) if path else None,
            error=f"front matter must be a mapping, got {type(data).__name__}",
        )

    return Matter(data=data, content=text[match.end():], path=path)


def read_matter(path: Path) -> Matter:
    """
    Read a file and parse its front matter.

    OSError (missing/unreadable file) propagates unchanged.
    """
    text = path.read_text(encoding="utf-8")
    return parse_matter(text, path)


def read_text(path: Path) -> str:
    """Raw file text (UTF-8)."""
    return path.read_text(encoding="utf-8")
