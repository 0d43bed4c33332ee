"""
Template helpers registered for every assembly run.

- User helpers from options.helpers (name → callable(this, *args, **hash))
- Material helper, named after the singular of keys.materials:

    {{{material "01-buttons.02-primary" this label="Go"}}}

  renders the material partial against the full assembly context plus the
  passed context and hash arguments.
"""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

import inflect
from pybars import strlist

from fabassemble.core.ids import strip_ordering
from fabassemble.domain.errors import AssemblyError, ErrorCodes

if TYPE_CHECKING:
    from fabassemble.context import AssemblyContext


_INFLECT = inflect.engine()


def singular(word: str) -> str:
    """
    English singular of a plural noun; other words come back unchanged.

    'materials' → 'material', 'entries' → 'entry', 'children' → 'child'
    """
    if not word:
        return word
    return _INFLECT.singular_noun(word) or word


def _unwrap(value: Any) -> dict[str, Any]:
    """Template scope / mapping → plain dict (None → {})."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        value = getattr(value, "context", value)
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def material_helper(ctx: "AssemblyContext") -> Callable[..., Any]:
    """
    Build the material helper bound to ctx.

    Raises (at render time):
        AssemblyError: PARTIAL_NOT_FOUND
    """
    # Deferred: assembly.pages → context → render package (circular at import time)
    from fabassemble.assembly.pages import build_context

    def helper(this: Any, name: str, context: Any = None, **hash_args: Any) -> strlist:
        key = strip_ordering(str(name))
        if not ctx.engine.has_partial(key):
            raise AssemblyError(ErrorCodes.PARTIAL_NOT_FOUND, partial=key, reference=str(name))

        html = ctx.engine.render_partial(key, build_context(ctx, _unwrap(context), hash_args))
        return strlist([html.lstrip()])

    return helper


def register_helpers(ctx: "AssemblyContext") -> list[str]:
    """
    Register user helpers and the material helper on ctx.engine.

    Returns:
        Registered helper names
    """
    names = []
    for name, helper in ctx.options.helpers.items():
        ctx.engine.register_helper(name, helper)
        names.append(name)

    material_name = singular(ctx.options.keys.materials)
    ctx.engine.register_helper(material_name, material_helper(ctx))
    names.append(material_name)
    return names
