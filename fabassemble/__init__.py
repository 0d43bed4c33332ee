"""
fabassemble: style-guide / static-site assembler.

Materials (partials), views, layouts, data and docs → rendered HTML.

Usage:
    from fabassemble import AssemblyOptions, assemble

    result = assemble(AssemblyOptions(base_dir=Path("site"), dest=Path("dist")))
"""

from .assembly import AssemblyResult, assemble, setup
from .config import AssemblyOptions, KeysConfig, load_options
from .domain.errors import AssemblyError, ErrorCodes
from .hooks import AssemblyHook

__version__ = "0.1.0"

__all__ = [
    "assemble",
    "setup",
    "AssemblyResult",
    "AssemblyOptions",
    "KeysConfig",
    "load_options",
    "AssemblyError",
    "ErrorCodes",
    "AssemblyHook",
]
