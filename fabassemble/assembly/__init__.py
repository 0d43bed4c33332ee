"""
Assembly layer: sources, pages, runner.

Roles:
- sources: layouts, layout includes, data, views, docs
- pages: context building, layout wrapping, view output
- runner: setup / assemble / error policy
"""

from .pages import assemble_views, build_context, wrap_page
from .runner import AssemblyResult, assemble, setup
from .sources import parse_data, parse_docs, parse_layout_includes, parse_layouts, parse_views

__all__ = [
    "assemble",
    "setup",
    "AssemblyResult",
    "assemble_views",
    "build_context",
    "wrap_page",
    "parse_layouts",
    "parse_layout_includes",
    "parse_data",
    "parse_views",
    "parse_docs",
]
