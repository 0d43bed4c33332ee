"""Domain layer: errors, constants and schemas."""

from .errors import AssemblyError, ErrorCodes
from .schemas import (
    CollectionNode,
    Fragment,
    HelixLink,
    MaterialEntry,
    RunLog,
    WarningLog,
    tree_to_dict,
)

__all__ = [
    "AssemblyError",
    "ErrorCodes",
    "Fragment",
    "MaterialEntry",
    "CollectionNode",
    "HelixLink",
    "RunLog",
    "WarningLog",
    "tree_to_dict",
]
