"""
Data schemas for the assembler.

Rules:
- Collection tree is two levels deep at most (collection → sub-collection)
- Templates receive plain dicts (to_dict), never dataclasses
- Material data is keyed by namespace (id with dots replaced by hyphens)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from .constants import FIELD_NOTES, HIDDEN_MATERIAL_PREFIX

# =============================================================================
# Materials
# =============================================================================

@dataclass
class Fragment:
    """
    One material file after front matter has been read.

    id:  dot-joined, ordering digits stripped (buttons.primary)
    key: display key, ordering digits kept (01-buttons.02-primary)
    """
    path: Path
    front_matter: dict[str, Any]
    body: str
    collection: str
    id: str
    key: str
    serial: str
    parent_collection: str | None = None
    is_sub_collection: bool = False

    @property
    def namespace(self) -> str:
        """Template namespace for this fragment's local data."""
        return self.id.replace(".", "-")

    @property
    def local_data(self) -> dict[str, Any]:
        """Front matter minus `notes`."""
        return {k: v for k, v in self.front_matter.items() if k != FIELD_NOTES}

    @property
    def file_name(self) -> str:
        """File part of the id."""
        return self.id.rsplit(".", 1)[-1]

    @property
    def is_hidden(self) -> bool:
        """'__' at the start of the id or of its file part."""
        return self.id.startswith(HIDDEN_MATERIAL_PREFIX) or self.file_name.startswith(HIDDEN_MATERIAL_PREFIX)


@dataclass
class MaterialEntry:
    """Leaf of the collection tree."""
    name: str
    serial: str
    notes: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    hidden: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "serial": self.serial,
            "notes": self.notes,
            "data": self.data,
        }


@dataclass
class CollectionNode:
    """Collection or sub-collection: a name plus keyed items."""
    name: str
    items: dict[str, Union["CollectionNode", MaterialEntry]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "items": {key: item.to_dict() for key, item in self.items.items()},
        }


def tree_to_dict(tree: dict[str, CollectionNode]) -> dict[str, Any]:
    """Collection tree → plain dicts for the template context."""
    return {key: node.to_dict() for key, node in tree.items()}


@dataclass
class HelixLink:
    """One cross-reference: another file and the tags that matched."""
    file: str
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "tags": list(self.tags)}


# =============================================================================
# Run Log
# =============================================================================

@dataclass
class WarningLog:
    """
    Warning event.

    Context: level, code, path, material_id, message
    """
    level: str = "warning"
    code: str = ""
    path: str | None = None
    material_id: str | None = None
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "path": self.path,
            "material_id": self.material_id,
            "message": self.message,
        }


@dataclass
class RunLog:
    """
    Assembly run log.

    One per run: warnings, helix diagnostics, written outputs.
    """
    run_id: str
    started_at: str  # ISO 8601
    finished_at: str | None = None
    result: str = "pending"  # pending, success, failed

    # Events
    warnings: list[WarningLog] = field(default_factory=list)
    helix: list[dict[str, Any]] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)

    # Error (if failed)
    error_code: str | None = None
    error_context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "warnings": [w.to_dict() for w in self.warnings],
            "helix": list(self.helix),
            "outputs": list(self.outputs),
            "error_code": self.error_code,
            "error_context": self.error_context,
        }
