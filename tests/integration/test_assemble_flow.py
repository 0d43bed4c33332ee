"""
test_assemble_flow.py - full assembly run

Flow:
1. materials (collections, sub-collections, hidden, cross references)
2. layouts + includes, data, docs
3. views rendered through the material helper and partials
4. output files + run log

DoD:
- structures items ordered page, footer (keys keep ordering digits)
- partial `page` body namespaced, renders 'Home'
- material helper output unescaped inside views
"""

from pathlib import Path

import pytest

from fabassemble import AssemblyHook, AssemblyOptions, assemble
from fabassemble.core.logging import load_run_log


@pytest.fixture
def styleguide(site_dir: Path, write_file) -> Path:
    """Site fixture plus a style guide view listing every material."""
    write_file(
        "src/materials/components/buttons/__base.html",
        "<button class=\"btn-base\"></button>",
    )
    write_file(
        "src/materials/components/card.html",
        "---\ndna: card\nnotes: A *card*.\n---\n\n<div class=\"card\">{{heading}}</div>\n\n",
    )
    write_file(
        "src/materials/structures/03-grid.html",
        "<section><div class=\"card\"></div></section>",
    )
    write_file(
        "src/views/styleguide.html",
        "---\ntitle: Style guide\n---\n"
        "{{#each materials}}<h2>{{name}}</h2>"
        "{{#each items}}<h3>{{name}}</h3>{{/each}}"
        "{{/each}}"
        "{{{material \"01-buttons.primary\" this label=\"Buy\"}}}"
        "{{{material \"card\" this heading=\"Hi\"}}}",
    )
    return site_dir


class TestAssembleFlow:
    """End-to-end assemble()."""

    def test_collection_order_and_partial(self, site_dir: Path):
        result = assemble(AssemblyOptions(base_dir=site_dir))
        ctx = result.context

        structures = ctx.materials_dict()["structures"]
        assert list(structures["items"]) == ["01-page", "02-footer"]
        assert ctx.engine.partial_source("page") == "<p>{{page.title}}</p>"
        assert ctx.engine.render("{{> page}}", ctx.material_data) == "<p>Home</p>"

    def test_outputs(self, site_dir: Path):
        result = assemble(AssemblyOptions(base_dir=site_dir))

        index = (site_dir / "dist" / "index.html").read_text(encoding="utf-8")
        assert index.startswith("<html><head><title>Toolkit</title></head><body>")
        assert "<h1>Index</h1>" in index
        assert "<p>Home</p>" in index
        assert result.run_log.result == "success"

    def test_styleguide_view(self, styleguide: Path):
        assemble(AssemblyOptions(base_dir=styleguide))

        html = (styleguide / "dist" / "styleguide.html").read_text(encoding="utf-8")
        assert "<h2>Components</h2><h3>Buttons</h3><h3>Card</h3>" in html
        assert "<h2>Structures</h2><h3>Page</h3><h3>Footer</h3><h3>Grid</h3>" in html
        # Namespaced fields come from the material, not the hash
        assert '<button class="btn">Go</button>' in html
        assert '<div class="card">Hi</div>' in html
        assert "Base" not in html

    def test_cross_references(self, styleguide: Path):
        result = assemble(AssemblyOptions(base_dir=styleguide, save_run_log=True))

        helix = result.context.material_data["card"]["helix"]
        assert helix == {"dependents": [{"file": "03-grid.html", "tags": [".card"]}]}
        saved = load_run_log(result.run_log_path)
        assert {"file": "card.html", "helix": helix} in saved["helix"]

    def test_card_notes(self, styleguide: Path):
        result = assemble(AssemblyOptions(base_dir=styleguide))

        card = result.context.materials_dict()["components"]["items"]["card"]
        assert card["notes"] == "<p>A <em>card</em>.</p>"
        assert card["data"]["dna"] == "card"
        assert "notes" not in card["data"]

    def test_hooks_end_to_end(self, site_dir: Path):
        class Stamp(AssemblyHook):
            def on_layout(self, ctx, layout_id, content):
                return content.replace("<html>", "<html data-run>")

        assemble(AssemblyOptions(base_dir=site_dir, hooks=[Stamp()]))

        assert (site_dir / "dist" / "index.html").read_text(encoding="utf-8").startswith("<html data-run>")

    def test_rerun_overwrites(self, site_dir: Path):
        assemble(AssemblyOptions(base_dir=site_dir))
        (site_dir / "src" / "data" / "site.yml").write_text("name: Renamed\n", encoding="utf-8")

        assemble(AssemblyOptions(base_dir=site_dir))

        assert "<title>Renamed</title>" in (site_dir / "dist" / "index.html").read_text(encoding="utf-8")
