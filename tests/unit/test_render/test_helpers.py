"""
test_helpers.py - helper registration tests

DoD:
- material helper named after the singular of keys.materials (irregular plurals too)
- ordering prefixes stripped from the partial reference
- hash arguments override the context
- unknown material → PARTIAL_NOT_FOUND
"""

import pytest

from fabassemble.config import AssemblyOptions, KeysConfig
from fabassemble.context import AssemblyContext
from fabassemble.domain.errors import AssemblyError, ErrorCodes
from fabassemble.render.helpers import register_helpers, singular


class TestSingular:
    """singular tests."""

    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("materials", "material"),
            ("patterns", "pattern"),
            ("entries", "entry"),
            ("children", "child"),
            ("views", "view"),
            ("item", "item"),
        ],
    )
    def test_singular(self, word, expected):
        assert singular(word) == expected


@pytest.fixture
def ctx() -> AssemblyContext:
    context = AssemblyContext.create(AssemblyOptions())
    context.engine.register_partial("buttons.primary", "  <button>{{label}}</button>")
    return context


class TestMaterialHelper:
    """Material helper tests."""

    def test_registered_names(self, ctx: AssemblyContext):
        ctx.options.helpers = {"shout": lambda this, text: text.upper()}

        names = register_helpers(ctx)

        assert names == ["shout", "material"]

    def test_custom_materials_key(self):
        ctx = AssemblyContext.create(AssemblyOptions(keys=KeysConfig(materials="patterns")))

        assert register_helpers(ctx) == ["pattern"]

    def test_irregular_materials_key(self):
        ctx = AssemblyContext.create(AssemblyOptions(keys=KeysConfig(materials="children")))

        assert register_helpers(ctx) == ["child"]

    def test_renders_partial_with_hash(self, ctx: AssemblyContext):
        register_helpers(ctx)

        html = ctx.engine.render('{{{material "01-buttons.02-primary" this label="Go"}}}', {})

        assert html == "<button>Go</button>"

    def test_passed_context(self, ctx: AssemblyContext):
        register_helpers(ctx)

        html = ctx.engine.render('{{{material "buttons.primary" button}}}', {"button": {"label": "Send"}})

        assert html == "<button>Send</button>"

    def test_output_not_escaped(self, ctx: AssemblyContext):
        register_helpers(ctx)

        html = ctx.engine.render('{{material "buttons.primary" this label="Go"}}', {})

        assert html == "<button>Go</button>"

    def test_unknown_material(self, ctx: AssemblyContext):
        register_helpers(ctx)

        with pytest.raises(AssemblyError) as exc_info:
            ctx.engine.render('{{{material "missing" this}}}', {})

        assert exc_info.value.code == ErrorCodes.PARTIAL_NOT_FOUND
        assert exc_info.value.context["partial"] == "missing"

    def test_assembly_context_visible(self, ctx: AssemblyContext):
        ctx.data = {"site": {"name": "Toolkit"}}
        ctx.engine.register_partial("brand", "{{site.name}}")
        register_helpers(ctx)

        assert ctx.engine.render('{{{material "brand" this}}}', {}) == "Toolkit"
