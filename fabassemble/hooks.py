"""
Hooks: user extension points of an assembly run.

A hook is any object implementing some of the AssemblyHook methods.
Hooks run in registration order; each receives the previous hook's result.
A missing method, or a `None` return, leaves the value unchanged.

Usage:
    class AddBanner(AssemblyHook):
        def on_material(self, ctx, fragment, content):
            return f"<!-- {fragment.id} -->\\n{content}"

    assemble(AssemblyOptions(hooks=[AddBanner()]))
"""

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fabassemble.context import AssemblyContext
    from fabassemble.domain.schemas import Fragment


class AssemblyHook:
    """Base class: every stage is the identity transform."""

    # === Materials ===
    def before_materials(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path] | None:
        return files

    def on_material(self, ctx: "AssemblyContext", fragment: "Fragment", content: str) -> str | None:
        return content

    # === Layouts ===
    def before_layouts(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path] | None:
        return files

    def on_layout(self, ctx: "AssemblyContext", layout_id: str, content: str) -> str | None:
        return content

    def before_layout_includes(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path] | None:
        return files

    def on_layout_include(self, ctx: "AssemblyContext", include_id: str, content: str) -> str | None:
        return content

    # === Data ===
    def before_data(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path] | None:
        return files

    def on_data(self, ctx: "AssemblyContext", data_id: str, content: Any) -> Any:
        return content

    # === Views ===
    def before_views(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path] | None:
        return files

    def on_view(self, ctx: "AssemblyContext", view_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        return data

    # === Docs ===
    def before_docs(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path] | None:
        return files

    def on_doc(self, ctx: "AssemblyContext", doc_id: str, content: str) -> str | None:
        return content

    # === Run ===
    def after_assembly(self, ctx: "AssemblyContext") -> None:
        return None


class HookChain:
    """Registered hooks, applied in order."""

    def __init__(self, hooks: Iterable[Any] = ()):
        self._hooks: list[Any] = list(hooks)

    def __len__(self) -> int:
        return len(self._hooks)

    def register(self, hook: Any) -> None:
        self._hooks.append(hook)

    def pipe(self, stage: str, value: Any, ctx: "AssemblyContext", *args: Any) -> Any:
        """
        Thread value through every hook implementing stage.

        Hook signature: stage(ctx, *args, value) → new value or None
        """
        for hook in self._hooks:
            method = getattr(hook, stage, None)
            if method is None:
                continue
            result = method(ctx, *args, value)
            if result is not None:
                value = result
        return value

    # === Materials ===
    def before_materials(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path]:
        return list(self.pipe("before_materials", files, ctx))

    def on_material(self, ctx: "AssemblyContext", fragment: "Fragment", content: str) -> str:
        return str(self.pipe("on_material", content, ctx, fragment))

    # === Layouts ===
    def before_layouts(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path]:
        return list(self.pipe("before_layouts", files, ctx))

    def on_layout(self, ctx: "AssemblyContext", layout_id: str, content: str) -> str:
        return str(self.pipe("on_layout", content, ctx, layout_id))

    def before_layout_includes(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path]:
        return list(self.pipe("before_layout_includes", files, ctx))

    def on_layout_include(self, ctx: "AssemblyContext", include_id: str, content: str) -> str:
        return str(self.pipe("on_layout_include", content, ctx, include_id))

    # === Data ===
    def before_data(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path]:
        return list(self.pipe("before_data", files, ctx))

    def on_data(self, ctx: "AssemblyContext", data_id: str, content: Any) -> Any:
        return self.pipe("on_data", content, ctx, data_id)

    # === Views ===
    def before_views(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path]:
        return list(self.pipe("before_views", files, ctx))

    def on_view(self, ctx: "AssemblyContext", view_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return dict(self.pipe("on_view", data, ctx, view_id))

    # === Docs ===
    def before_docs(self, ctx: "AssemblyContext", files: list[Path]) -> list[Path]:
        return list(self.pipe("before_docs", files, ctx))

    def on_doc(self, ctx: "AssemblyContext", doc_id: str, content: str) -> str:
        return str(self.pipe("on_doc", content, ctx, doc_id))

    # === Run ===
    def after_assembly(self, ctx: "AssemblyContext") -> None:
        for hook in self._hooks:
            method = getattr(hook, "after_assembly", None)
            if method is not None:
                method(ctx)
