"""
Collection builder: material files → two-level collection tree.

    src/materials/structures/01-page.html          → structures / 01-page
    src/materials/components/buttons/primary.html  → components / buttons / primary

Rules:
- A directory is a collection root iff it matches `dirname(pattern)/*/` for a
  materials pattern; a file whose grandparent is a root is a sub-collection member
- Pass 1 (stub) runs for every file before pass 2 (place) touches any entry
- Sorting happens once, after every entry is placed
- Two levels only: collection → sub-collection → entries
"""

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from fabassemble.core.files import as_pattern_list, expand_dirs
from fabassemble.core.ids import derive_name, strip_ordering, to_title_case
from fabassemble.domain.constants import FIELD_ORDER, HIDDEN_MATERIAL_PREFIX
from fabassemble.domain.schemas import CollectionNode, Fragment, MaterialEntry

T = TypeVar("T")

# =============================================================================
# Classification
# =============================================================================


@dataclass(frozen=True)
class Placement:
    """Where a material file lands in the tree."""
    collection: str  # immediate parent dir (ordering prefix kept)
    parent: str | None  # grandparent dir, only for sub-collection members
    is_sub_collection: bool = False

    @property
    def base(self) -> str:
        """Top-level collection key."""
        return self.parent if self.is_sub_collection and self.parent else self.collection


def discover_collection_roots(patterns: str | Iterable[str], base_dir: Path | None = None) -> set[str]:
    """
    Names of directories one level below each materials pattern's directory.

    'src/materials/**/*' → every directory under src/materials

    Args:
        patterns: Materials glob pattern(s); negations are ignored
        base_dir: Root for relative patterns

    Returns:
        Directory names (not paths)
    """
    dir_patterns = [
        f"{os.path.dirname(pattern)}/*/"
        for pattern in as_pattern_list(patterns)
        if not pattern.startswith("!")
    ]
    if not dir_patterns:
        return set()
    return {path.name for path in expand_dirs(dir_patterns, base_dir)}


def locate(file: Path, roots: set[str]) -> Placement:
    """
    Classify a material file.

    Args:
        file: Material file path
        roots: Known collection root names

    Returns:
        Placement
    """
    directory = Path(os.path.normpath(Path(file).parent))
    collection = derive_name(directory.name, preserve_numbers=True)
    parent_name = directory.parent.name

    if parent_name and parent_name in roots:
        return Placement(
            collection=collection,
            parent=derive_name(parent_name, preserve_numbers=True),
            is_sub_collection=True,
        )
    return Placement(collection=collection, parent=None, is_sub_collection=False)


def material_ids(placement: Placement, file: Path) -> tuple[str, str]:
    """
    (id, key) for a material file.

    id:  'buttons.primary' for sub-collection members, else 'primary'
    key: same shape, ordering digits kept
    """
    if placement.is_sub_collection:
        material_id = f"{derive_name(placement.collection)}.{derive_name(file)}"
        key = f"{placement.collection}.{derive_name(file, preserve_numbers=True)}"
    else:
        material_id = derive_name(file)
        key = derive_name(file, preserve_numbers=True)
    return material_id, key


def entry_name(fragment: Fragment) -> str:
    """Display name: title-cased id (file part only inside sub-collections)."""
    if fragment.is_sub_collection:
        return to_title_case(fragment.file_name)
    return to_title_case(fragment.id)


# =============================================================================
# Sorting
# =============================================================================


def _sort_key(item_key: str, item: object) -> tuple[Any, ...]:
    order = item.data.get(FIELD_ORDER) if isinstance(item, MaterialEntry) else None

    if isinstance(order, (int, float)):
        return (0, 0, order, item_key)
    if isinstance(order, str):
        return (0, 1, order, item_key)
    return (1, 0, 0, item_key)


def sort_items(items: dict[str, T]) -> dict[str, T]:
    """
    Sort one level of the tree.

    - Items with `order` first, ascending (numbers before strings)
    - Then the rest, alphabetically by key
    """
    return dict(sorted(items.items(), key=lambda pair: _sort_key(*pair)))


def sort_tree(tree: dict[str, CollectionNode]) -> dict[str, CollectionNode]:
    """Sort collections, their items, then each sub-collection's items."""
    tree = sort_items(tree)
    for node in tree.values():
        node.items = sort_items(node.items)

    for node in tree.values():
        for item in node.items.values():
            if isinstance(item, CollectionNode):
                item.items = sort_items(item.items)
    return tree


# =============================================================================
# Builder
# =============================================================================


class CollectionBuilder:
    """
    Two-pass collection tree builder.

    Usage:
        builder = CollectionBuilder(roots)
        builder.stub(files)
        for fragment, entry in ...:
            builder.place(fragment, entry)
        tree = builder.finalize()
    """

    def __init__(self, roots: set[str]):
        """
        Args:
            roots: Known collection root names (discover_collection_roots)
        """
        self.roots = roots
        self.tree: dict[str, CollectionNode] = {}

    def locate(self, file: Path) -> Placement:
        return locate(file, self.roots)

    def stub(self, files: Iterable[Path]) -> dict[str, CollectionNode]:
        """
        Pass 1: a node for every collection and sub-collection.

        Tree shape depends only on the set of files, not their order.
        """
        for file in files:
            placement = self.locate(file)
            base = placement.base

            if base not in self.tree:
                self.tree[base] = CollectionNode(name=to_title_case(derive_name(base)))

            if placement.is_sub_collection:
                items = self.tree[base].items
                if not isinstance(items.get(placement.collection), CollectionNode):
                    items[placement.collection] = CollectionNode(
                        name=to_title_case(derive_name(placement.collection)),
                    )

        return self.tree

    def place(self, fragment: Fragment, entry: MaterialEntry) -> bool:
        """
        Pass 2: attach a material entry under its stubbed node.

        A later fragment with the same key replaces the earlier one. A
        top-level material whose key is also a sub-collection directory is
        left out: the sub-collection keeps the key.

        Returns:
            False when the entry was left out for a sub-collection
        """
        if fragment.is_sub_collection and fragment.parent_collection:
            node = self.tree[fragment.parent_collection].items[fragment.collection]
            node.items[fragment.key] = entry
            return True

        items = self.tree[fragment.collection].items
        if isinstance(items.get(fragment.key), CollectionNode):
            return False
        items[fragment.key] = entry
        return True

    def finalize(self) -> dict[str, CollectionNode]:
        """Sort, then drop hidden entries (and nodes emptied by that)."""
        self.tree = prune_hidden(sort_tree(self.tree))
        return self.tree


def is_hidden_key(key: str) -> bool:
    """Sub-collection key (ordering digits ignored) starting with '__'."""
    return strip_ordering(key).startswith(HIDDEN_MATERIAL_PREFIX)


def _prune(node: CollectionNode) -> bool:
    """Remove hidden entries; True when node lost all of its items to pruning."""
    had_items = bool(node.items)
    for key, item in list(node.items.items()):
        if isinstance(item, MaterialEntry) and item.hidden:
            del node.items[key]
        elif isinstance(item, CollectionNode) and (is_hidden_key(key) or _prune(item)):
            del node.items[key]
    return had_items and not node.items


def prune_hidden(tree: dict[str, CollectionNode]) -> dict[str, CollectionNode]:
    """
    Drop '__'-prefixed materials and sub-collections from the displayed tree.

    They stay registered as partials; only the listing hides them.
    """
    for key, node in list(tree.items()):
        if _prune(node):
            del tree[key]
    return tree
