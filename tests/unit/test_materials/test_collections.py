"""
test_collections.py - collection tree tests

DoD:
- sub-collection rule: grandparent is a collection root
- tree shape independent of file order
- `order` items first, then alphabetical
- '__' materials and sub-collections pruned from the listing
- a sub-collection keeps its key over a same-named material
"""

import itertools
from pathlib import Path

from fabassemble.domain.schemas import CollectionNode, Fragment, MaterialEntry
from fabassemble.materials.collections import (
    CollectionBuilder,
    discover_collection_roots,
    locate,
    material_ids,
    prune_hidden,
    sort_items,
)

ROOTS = {"structures", "components"}


def _fragment(file: Path, roots: set[str] = ROOTS) -> Fragment:
    placement = locate(file, roots)
    material_id, key = material_ids(placement, file)
    return Fragment(
        path=file,
        front_matter={},
        body="",
        collection=placement.collection,
        parent_collection=placement.parent,
        is_sub_collection=placement.is_sub_collection,
        id=material_id,
        key=key,
        serial="btr-x",
    )


def _entry(name: str, order=None, hidden: bool = False) -> MaterialEntry:
    data = {} if order is None else {"order": order}
    return MaterialEntry(name=name, serial="btr-x", data=data, hidden=hidden)


# =============================================================================
# Classification
# =============================================================================


class TestLocate:
    """locate / material_ids tests."""

    def test_top_level(self):
        file = Path("src/materials/structures/page.html")

        placement = locate(file, ROOTS)

        assert placement.collection == "structures"
        assert placement.is_sub_collection is False
        assert material_ids(placement, file) == ("page", "page")

    def test_sub_collection(self):
        file = Path("src/materials/components/buttons/primary.html")

        placement = locate(file, ROOTS)

        assert placement.collection == "buttons"
        assert placement.parent == "components"
        assert placement.is_sub_collection is True
        assert material_ids(placement, file) == ("buttons.primary", "buttons.primary")

    def test_ordering_digits_kept_in_key(self):
        file = Path("src/materials/01-components/02-buttons/03-primary.html")

        placement = locate(file, {"01-components"})

        assert material_ids(placement, file) == ("buttons.primary", "02-buttons.03-primary")

    def test_hidden_by_id_or_file_part(self):
        assert _fragment(Path("src/materials/components/__internal/base.html")).is_hidden
        assert _fragment(Path("src/materials/components/buttons/__base.html")).is_hidden
        assert not _fragment(Path("src/materials/components/buttons/primary.html")).is_hidden

    def test_discover_roots(self, write_file, tmp_path: Path):
        write_file("src/materials/structures/page.html", "")
        write_file("src/materials/components/buttons/primary.html", "")
        write_file("src/materials/loose.html", "")

        roots = discover_collection_roots(["src/materials/**/*", "!src/materials/x/**"], tmp_path)

        # `**` reaches nested directories too
        assert roots == {"structures", "components", "buttons"}


# =============================================================================
# Sorting
# =============================================================================


class TestSortItems:
    """sort_items tests."""

    def test_ordered_first_then_alphabetical(self):
        items = {
            "zeta": _entry("Zeta"),
            "beta": _entry("Beta", order=2),
            "alpha": _entry("Alpha"),
            "gamma": _entry("Gamma", order=1),
        }

        assert list(sort_items(items)) == ["gamma", "beta", "alpha", "zeta"]

    def test_numbers_before_strings(self):
        items = {
            "a": _entry("A", order="b"),
            "b": _entry("B", order=5),
        }

        assert list(sort_items(items)) == ["b", "a"]

    def test_collection_nodes_alphabetical(self):
        items = {"b": CollectionNode(name="B"), "a": CollectionNode(name="A")}

        assert list(sort_items(items)) == ["a", "b"]


# =============================================================================
# Builder
# =============================================================================


FILES = [
    Path("src/materials/structures/02-footer.html"),
    Path("src/materials/structures/01-page.html"),
    Path("src/materials/components/buttons/primary.html"),
    Path("src/materials/components/buttons/secondary.html"),
    Path("src/materials/components/card.html"),
]


def _build(files: list[Path]) -> dict:
    builder = CollectionBuilder(ROOTS)
    builder.stub(files)
    for file in files:
        fragment = _fragment(file)
        builder.place(fragment, _entry(fragment.id))
    return {key: node.to_dict() for key, node in builder.finalize().items()}


class TestCollectionBuilder:
    """CollectionBuilder tests."""

    def test_stub_creates_every_node(self):
        builder = CollectionBuilder(ROOTS)

        tree = builder.stub(FILES)

        assert set(tree) == {"structures", "components"}
        assert isinstance(tree["components"].items["buttons"], CollectionNode)
        assert tree["components"].items["buttons"].name == "Buttons"

    def test_tree_shape(self):
        tree = _build(FILES)

        assert list(tree) == ["components", "structures"]
        assert list(tree["structures"]["items"]) == ["01-page", "02-footer"]
        assert list(tree["components"]["items"]) == ["buttons", "card"]
        assert list(tree["components"]["items"]["buttons"]["items"]) == [
            "buttons.primary",
            "buttons.secondary",
        ]

    def test_order_independent(self):
        expected = _build(FILES)

        for permutation in itertools.permutations(FILES):
            assert _build(list(permutation)) == expected

    def test_later_duplicate_key_wins(self):
        builder = CollectionBuilder(ROOTS)
        file = Path("src/materials/structures/page.html")
        builder.stub([file])

        builder.place(_fragment(file), _entry("First"))
        builder.place(_fragment(file), _entry("Second"))

        assert builder.finalize()["structures"].items["page"].name == "Second"

    def test_material_named_like_sub_collection(self):
        files = [
            Path("src/materials/components/buttons.html"),
            Path("src/materials/components/buttons/primary.html"),
        ]

        for permutation in itertools.permutations(files):
            tree = _build(list(permutation))

            buttons = tree["components"]["items"]["buttons"]
            assert list(buttons["items"]) == ["buttons.primary"]

    def test_place_reports_sub_collection_key(self):
        files = [
            Path("src/materials/components/buttons/primary.html"),
            Path("src/materials/components/buttons.html"),
        ]
        builder = CollectionBuilder(ROOTS)
        builder.stub(files)

        placed = [builder.place(_fragment(file), _entry("X")) for file in files]

        assert placed == [True, False]


class TestPruneHidden:
    """prune_hidden tests."""

    def test_hidden_entry_removed(self):
        tree = {
            "structures": CollectionNode(
                name="Structures",
                items={"page": _entry("Page"), "__base": _entry("Base", hidden=True)},
            ),
        }

        result = prune_hidden(tree)

        assert list(result["structures"].items) == ["page"]

    def test_node_emptied_by_pruning_removed(self):
        tree = {
            "internal": CollectionNode(name="Internal", items={"__x": _entry("X", hidden=True)}),
        }

        assert prune_hidden(tree) == {}

    def test_sub_collection_emptied_removed(self):
        buttons = CollectionNode(name="Buttons", items={"buttons.__x": _entry("X", hidden=True)})
        tree = {"components": CollectionNode(name="Components", items={"buttons": buttons})}

        assert prune_hidden(tree) == {}

    def test_empty_stub_kept(self):
        tree = {"structures": CollectionNode(name="Structures")}

        assert list(prune_hidden(tree)) == ["structures"]

    def test_hidden_sub_collection_removed(self):
        internal = CollectionNode(name="  Internal", items={"__internal.base": _entry("Base")})
        tree = {
            "components": CollectionNode(
                name="Components",
                items={"__internal": internal, "card": _entry("Card")},
            ),
        }

        assert list(prune_hidden(tree)["components"].items) == ["card"]

    def test_hidden_sub_collection_from_files(self):
        files = [
            Path("src/materials/components/__internal/base.html"),
            Path("src/materials/components/card.html"),
        ]

        tree = _build(files)

        assert list(tree["components"]["items"]) == ["card"]
