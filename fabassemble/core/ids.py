"""
ID derivation: material names, serials, run ids.

Rules:
- Leading ordering prefixes (01-, 2.) are stripped unless preserved
- serial is deterministic: same id → same serial
- run_id is unique per call
"""

import hashlib
import hmac
import re
import uuid
from datetime import UTC, datetime
from pathlib import Path

from fabassemble.domain.constants import SERIAL_KEY, SERIAL_PREFIX

ORDERING_PREFIX_PATTERN = re.compile(r"^[0-9.\-]+")
WHITESPACE_PATTERN = re.compile(r"\s")
SEPARATOR_PATTERN = re.compile(r"[-_]")
WORD_PATTERN = re.compile(r"\w\S*")

# Partial references may carry a prefix on both the sub-collection and the file
REFERENCE_PREFIX_PATTERN = re.compile(r"(\d+[-.])+")


def derive_name(file_path: str | Path, preserve_numbers: bool = False) -> str:
    """
    File name (minus extension) from a path.

    './src/materials/structures/foo.html'    → 'foo'
    './src/materials/structures/02-bar.html' → 'bar'

    Args:
        file_path: File or directory path
        preserve_numbers: Keep the leading ordering prefix

    Returns:
        Name with whitespace replaced by hyphens
    """
    name = WHITESPACE_PATTERN.sub("-", Path(file_path).stem)
    if preserve_numbers:
        return name
    return ORDERING_PREFIX_PATTERN.sub("", name)


def derive_serial(material_id: str) -> str:
    """
    Serial for a material id.

    Deterministic: same id → same serial
    Format: btr-{hmac_sha256_hex}

    Args:
        material_id: Material id (e.g. buttons.primary)

    Returns:
        serial string, safe to embed in markup attributes
    """
    digest = hmac.new(SERIAL_KEY, material_id.encode("utf-8"), hashlib.sha256)
    return f"{SERIAL_PREFIX}{digest.hexdigest()}"


def to_title_case(text: str) -> str:
    """'primary-button_large' → 'Primary Button Large'."""
    spaced = SEPARATOR_PATTERN.sub(" ", text)
    return WORD_PATTERN.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), spaced)


def strip_ordering(reference: str) -> str:
    """
    Remove ordering prefixes from a partial reference.

    Partials are always registered without them, for the sub-collection
    and the file name alike: '01-buttons.02-primary' → 'buttons.primary'
    """
    stripped = REFERENCE_PREFIX_PATTERN.sub("", reference, count=1)
    return REFERENCE_PREFIX_PATTERN.sub("", stripped, count=1)


def generate_run_id() -> str:
    """
    Run ID.

    Unique: UUID v4
    Format: RUN-{timestamp}-{uuid[:8]}
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"RUN-{timestamp}-{unique}"
