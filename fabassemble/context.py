"""
Assembly context: all state of one assembly run.

A fresh context is built per run and passed to every stage; nothing is
kept at module level, so runs never leak into each other.
"""

from dataclasses import dataclass, field
from typing import Any

from fabassemble.config import AssemblyOptions
from fabassemble.core.logging import create_run_log
from fabassemble.domain.schemas import CollectionNode, RunLog, tree_to_dict
from fabassemble.hooks import HookChain
from fabassemble.render.engine import TemplateEngine


@dataclass
class AssemblyContext:
    """
    State of one run.

    layouts:       layout id → layout source
    data:          data file id → parsed content
    materials:     collection tree
    material_data: material namespace → local front-matter data
    views:         view collection → {name, items}
    docs:          doc id → {name, content}
    """
    options: AssemblyOptions
    engine: TemplateEngine = field(default_factory=TemplateEngine)
    hooks: HookChain = field(default_factory=HookChain)
    run_log: RunLog = field(default_factory=create_run_log)

    layouts: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    materials: dict[str, CollectionNode] = field(default_factory=dict)
    material_data: dict[str, dict[str, Any]] = field(default_factory=dict)
    views: dict[str, dict[str, Any]] = field(default_factory=dict)
    docs: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def create(cls, options: AssemblyOptions) -> "AssemblyContext":
        """New context with the options' hooks registered."""
        return cls(options=options, hooks=HookChain(options.hooks))

    def materials_dict(self) -> dict[str, Any]:
        """Collection tree as plain dicts (template context)."""
        return tree_to_dict(self.materials)
