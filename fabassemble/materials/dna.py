"""
Cross-reference scanner ("dna"): which materials use which.

A material exposes tags through its `dna` front-matter field (string or list).
Other materials reference those tags through markup:

    <div id="widget">           → '#widget'
    <div data-dna="widget">     → 'data-dna=widget'
    <div class="card widget">   → '.widget'

The result is stored as `helix` on the material's front matter:

    helix:
      dependents:  [{file, tags}]   # other files whose markup uses MY tags
      dependency:  [{file, tags}]   # other files whose tags MY markup uses

Each side is present only when non-empty; `helix` is absent when both are.

Heuristic, not a parser: only single-line opening tags are seen, and tags in
comments or strings count. Tag extraction lives in extract_top_level_tags
alone so it can be swapped for a real tokenizer.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fabassemble.core.logging import emit_helix
from fabassemble.core.matter import parse_matter, read_text
from fabassemble.domain.constants import FIELD_DNA, FIELD_HELIX
from fabassemble.domain.schemas import HelixLink, RunLog

# Opening tags only; closing tags, comments and doctypes are skipped
TAG_PATTERN = re.compile(r"<[^/!].*?>")

ID_ATTR_PATTERN = re.compile(r"""(?<![\w-])id\s*=\s*["'](.*?)["']""", re.IGNORECASE)
DNA_ATTR_PATTERN = re.compile(r"""(?<![\w-])data-dna\s*=\s*["'](.*?)["']""", re.IGNORECASE)
CLASS_ATTR_PATTERN = re.compile(r"""(?<![\w-])class\s*=\s*["'](.*?)["']""", re.IGNORECASE)

PREFIX_ID = "#"
PREFIX_DNA = "data-dna="
PREFIX_CLASS = "."

# =============================================================================
# Tag Extraction
# =============================================================================


@dataclass(frozen=True)
class AttributeSet:
    """Attributes of one opening tag that the scanner matches on."""
    tag: str
    id: str | None = None
    dna: str | None = None
    classes: tuple[str, ...] = ()


def _attribute(pattern: re.Pattern[str], element: str) -> str | None:
    match = pattern.search(element)
    if not match or not match.group(1):
        return None
    return match.group(1)


def extract_top_level_tags(text: str) -> list[AttributeSet]:
    """
    Opening tags in text, in document order.

    Args:
        text: Raw markup (front matter included is harmless)

    Returns:
        AttributeSet per opening tag
    """
    elements = []
    for match in TAG_PATTERN.finditer(text):
        element = match.group(0)
        class_value = _attribute(CLASS_ATTR_PATTERN, element) or ""
        elements.append(
            AttributeSet(
                tag=element,
                id=_attribute(ID_ATTR_PATTERN, element),
                dna=_attribute(DNA_ATTR_PATTERN, element),
                classes=tuple(c for c in class_value.split(" ") if c),
            )
        )
    return elements


# =============================================================================
# Matching
# =============================================================================


def declared_tags(front_matter: dict[str, Any]) -> list[str]:
    """Tags a material declares via `dna` (string or list)."""
    value = front_matter.get(FIELD_DNA)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


def match_tags(elements: Iterable[AttributeSet], props: Sequence[str]) -> list[str]:
    """
    Prefixed tags from props that the elements reference.

    Args:
        elements: Extracted opening tags
        props: Declared tags to look for

    Returns:
        Matches like '#id', 'data-dna=x', '.cls'; unique, first-seen order
    """
    wanted = set(props)
    matches: list[str] = []

    for element in elements:
        if element.id and element.id in wanted:
            matches.append(PREFIX_ID + element.id)
        if element.dna and element.dna in wanted:
            matches.append(PREFIX_DNA + element.dna)
        for cls in element.classes:
            if cls in wanted:
                matches.append(PREFIX_CLASS + cls)

    return list(dict.fromkeys(matches))


def scan_content(content: str, props: Sequence[str]) -> list[str]:
    """match_tags over the opening tags of content."""
    if not props:
        return []
    return match_tags(extract_top_level_tags(content), props)


# =============================================================================
# Scanner
# =============================================================================


class DnaScanner:
    """
    Cross-reference scanner for one assembly run.

    Every file's raw text and declared tags are read once and cached.

    Usage:
        scanner = DnaScanner(files, run_log)
        data = scanner.scan(file, front_matter)
    """

    def __init__(self, files: Iterable[Path], run_log: RunLog | None = None):
        """
        Args:
            files: All material files of the run
            run_log: Receives helix diagnostics (optional)
        """
        self.files = [Path(f) for f in files]
        self.run_log = run_log
        self._texts: dict[Path, str] = {}
        self._tags: dict[Path, list[str]] = {}

    def text(self, path: Path) -> str:
        """Raw text (cached). OSError propagates."""
        if path not in self._texts:
            self._texts[path] = read_text(path)
        return self._texts[path]

    def tags(self, path: Path) -> list[str]:
        """Declared tags of another file (cached)."""
        if path not in self._tags:
            self._tags[path] = declared_tags(parse_matter(self.text(path), path).data)
        return self._tags[path]

    def _others(self, file: Path) -> list[Path]:
        return [f for f in self.files if f != file]

    def dependents(self, file: Path, props: Sequence[str]) -> list[HelixLink]:
        """Other files whose markup references props."""
        links = []
        for other in self._others(file):
            matches = scan_content(self.text(other), props)
            if matches:
                links.append(HelixLink(file=other.name, tags=matches))
        return links

    def dependencies(self, file: Path) -> list[HelixLink]:
        """Other files whose declared tags file's markup references."""
        content = self.text(file)
        links = []
        for other in self._others(file):
            matches = scan_content(content, self.tags(other))
            if matches:
                links.append(HelixLink(file=other.name, tags=matches))
        return links

    def scan(self, file: Path, data: dict[str, Any]) -> dict[str, Any]:
        """
        Attach the helix annotation for file.

        Args:
            file: Material being processed
            data: Its front matter (not mutated)

        Returns:
            Copy of data, with `helix` when any link was found
        """
        file = Path(file)
        result = dict(data)
        result.pop(FIELD_HELIX, None)
        helix: dict[str, list[dict[str, Any]]] = {}

        props = declared_tags(data)
        if props:
            dependents = self.dependents(file, props)
            if dependents:
                helix["dependents"] = [link.to_dict() for link in dependents]

        dependency = self.dependencies(file)
        if dependency:
            helix["dependency"] = [link.to_dict() for link in dependency]

        if helix:
            result[FIELD_HELIX] = helix
            emit_helix(self.run_log, file.name, helix)

        return result


def scan(file: Path, all_files: Iterable[Path], data: dict[str, Any]) -> dict[str, Any]:
    """
    One-off scan of file against all_files.

    Args:
        file: Material being processed
        all_files: Every material file (file itself is skipped)
        data: file's front matter

    Returns:
        data with the helix annotation
    """
    return DnaScanner(all_files).scan(file, data)
