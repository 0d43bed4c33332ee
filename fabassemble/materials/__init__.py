"""
Materials layer: material files → partials, collection tree, material data.

Roles:
- dna: cross-reference (helix) scanner
- collections: two-pass collection tree builder
- rewriter: namespacing of a material's own placeholders
- parser: orchestration for one run
"""

from .collections import CollectionBuilder, discover_collection_roots, sort_items
from .dna import DnaScanner, extract_top_level_tags, scan
from .parser import parse_materials
from .rewriter import namespace_for, rewrite

__all__ = [
    "CollectionBuilder",
    "discover_collection_roots",
    "sort_items",
    "DnaScanner",
    "extract_top_level_tags",
    "scan",
    "parse_materials",
    "namespace_for",
    "rewrite",
]
