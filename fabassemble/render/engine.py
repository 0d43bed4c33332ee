"""
Template engine: pybars3 (Handlebars) based.

- Partials: name → compiled template, shared by every render of a run
- Helpers: name → callable(this, *args, **hash)
- Compile / render failures → AssemblyError(RENDER_FAILED)
"""

from collections.abc import Callable, Mapping
from typing import Any

from pybars import Compiler

from fabassemble.domain.errors import AssemblyError, ErrorCodes

Template = Callable[..., Any]


class TemplateEngine:
    """
    Handlebars engine for one assembly run.

    Usage:
        engine = TemplateEngine()
        engine.register_partial("page", "<p>{{page.title}}</p>")
        html = engine.render("{{> page}}", {"page": {"title": "Home"}})
    """

    def __init__(self) -> None:
        self._compiler = Compiler()
        self.partials: dict[str, Template] = {}
        self.helpers: dict[str, Callable[..., Any]] = {}
        self._sources: dict[str, str] = {}

    # =========================================================================
    # Registration
    # =========================================================================

    def register_partial(self, name: str, source: str) -> None:
        """Compile and register a partial (replaces an existing one)."""
        self.partials[name] = self.compile(source, name=name)
        self._sources[name] = source

    def register_helper(self, name: str, helper: Callable[..., Any]) -> None:
        self.helpers[name] = helper

    def has_partial(self, name: str) -> bool:
        return name in self.partials

    def partial_source(self, name: str) -> str:
        """
        Source a partial was registered with.

        Raises:
            AssemblyError: PARTIAL_NOT_FOUND
        """
        if name not in self._sources:
            raise AssemblyError(ErrorCodes.PARTIAL_NOT_FOUND, partial=name)
        return self._sources[name]

    # =========================================================================
    # Compile / Render
    # =========================================================================

    def compile(self, source: str, name: str | None = None) -> Template:
        """
        Compile a template.

        Raises:
            AssemblyError: RENDER_FAILED
        """
        try:
            return self._compiler.compile(source)
        except Exception as e:
            raise AssemblyError(
                ErrorCodes.RENDER_FAILED,
                template=name,
                stage="compile",
                error=str(e),
            ) from e

    def run(self, template: Template, context: Mapping[str, Any], name: str | None = None) -> str:
        """
        Render a compiled template with this engine's helpers and partials.

        Raises:
            AssemblyError: RENDER_FAILED
        """
        try:
            return str(template(context, helpers=self.helpers, partials=self.partials))
        except AssemblyError:
            raise
        except Exception as e:
            raise AssemblyError(
                ErrorCodes.RENDER_FAILED,
                template=name,
                stage="render",
                error=str(e),
            ) from e

    def render(self, source: str, context: Mapping[str, Any], name: str | None = None) -> str:
        """Compile + render a template source."""
        return self.run(self.compile(source, name=name), context, name=name)

    def render_partial(self, name: str, context: Mapping[str, Any]) -> str:
        """
        Render a registered partial.

        Raises:
            AssemblyError: PARTIAL_NOT_FOUND, RENDER_FAILED
        """
        if name not in self.partials:
            raise AssemblyError(ErrorCodes.PARTIAL_NOT_FOUND, partial=name)
        return self.run(self.partials[name], context, name=name)
