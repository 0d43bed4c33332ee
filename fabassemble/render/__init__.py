"""
Render layer: templates and Markdown.

Roles:
- engine: Handlebars (pybars3) partials, helpers, compile/render
- helpers: user helpers + material helper
- markup: Markdown → HTML (notes, docs)
"""

from .engine import TemplateEngine
from .helpers import register_helpers, singular
from .markup import render_markdown

__all__ = [
    "TemplateEngine",
    "register_helpers",
    "singular",
    "render_markdown",
]
