"""
Core layer: leaf utilities the assembler is built on.

Roles:
- ids: names, serials, run ids
- matter: front matter parsing
- files: glob expansion
- output: atomic writes, destination lock
- logging: run log
"""

from .files import expand_dirs, expand_globs
from .ids import derive_name, derive_serial, generate_run_id, to_title_case
from .logging import complete_run_log, create_run_log, emit_warning, save_run_log
from .matter import Matter, parse_matter, read_matter
from .output import atomic_write_json, atomic_write_text, dest_lock

__all__ = [
    # ids
    "derive_name",
    "derive_serial",
    "to_title_case",
    "generate_run_id",
    # matter
    "Matter",
    "parse_matter",
    "read_matter",
    # files
    "expand_globs",
    "expand_dirs",
    # output
    "atomic_write_text",
    "atomic_write_json",
    "dest_lock",
    # logging
    "create_run_log",
    "emit_warning",
    "complete_run_log",
    "save_run_log",
]
