"""
File discovery: glob pattern lists.

- `**` matches any depth
- `{a,b}` brace alternatives are expanded before globbing
- `!pattern` removes matches of that pattern from the result
- Relative patterns resolve against base_dir
- Results are sorted so every run sees the same order
"""

import glob
import os
import re
from collections.abc import Iterable
from pathlib import Path

BRACE_PATTERN = re.compile(r"\{([^{}]*,[^{}]*)\}")


def as_pattern_list(patterns: str | Iterable[str]) -> list[str]:
    """A single pattern string becomes a one-item list."""
    if isinstance(patterns, str):
        return [patterns]
    return list(patterns)


def expand_braces(pattern: str) -> list[str]:
    """
    'data/*.{json,yml}' → ['data/*.json', 'data/*.yml']

    Multiple groups are expanded left to right.
    """
    match = BRACE_PATTERN.search(pattern)
    if not match:
        return [pattern]

    expanded: list[str] = []
    head, tail = pattern[:match.start()], pattern[match.end():]
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def _resolve(pattern: str, base_dir: Path) -> str:
    if os.path.isabs(pattern):
        return pattern
    return str(base_dir / pattern)


def _glob(pattern: str, base_dir: Path) -> set[Path]:
    matches: set[Path] = set()
    for expanded in expand_braces(pattern):
        for found in glob.glob(_resolve(expanded, base_dir), recursive=True):
            matches.add(Path(os.path.normpath(found)))
    return matches


def expand_globs(
    patterns: str | Iterable[str],
    base_dir: Path | None = None,
    only_files: bool = True,
) -> list[Path]:
    """
    Expand a pattern list into paths.

    Args:
        patterns: Glob pattern(s); '!' prefix excludes
        base_dir: Root for relative patterns (default: cwd)
        only_files: Drop directories from the result

    Returns:
        Sorted list of matching paths
    """
    base = base_dir or Path.cwd()
    included: set[Path] = set()
    excluded: set[Path] = set()

    for pattern in as_pattern_list(patterns):
        if pattern.startswith("!"):
            excluded |= _glob(pattern[1:], base)
        else:
            included |= _glob(pattern, base)

    paths = included - excluded
    if only_files:
        paths = {p for p in paths if p.is_file()}
    return sorted(paths)


def expand_dirs(patterns: str | Iterable[str], base_dir: Path | None = None) -> list[Path]:
    """Directories matched by the pattern list."""
    base = base_dir or Path.cwd()
    dirs = {
        p for p in expand_globs(patterns, base, only_files=False)
        if p.is_dir()
    }
    return sorted(dirs)
