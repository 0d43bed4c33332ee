"""
Configuration: defaults + YAML config file + overrides.

Config file (fabassemble.yaml):
    dest: dist
    materials: src/materials/**/*
    keys:
      materials: patterns

- Glob options accept a string or a list
- Original camelCase names are accepted (layoutIncludes, logErrors, onError)
- Unknown keys → AssemblyError(INVALID_CONFIG)
"""

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from fabassemble.core.files import as_pattern_list
from fabassemble.domain.errors import AssemblyError, ErrorCodes

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_LAYOUTS = ["src/views/layouts/*"]
DEFAULT_LAYOUT_INCLUDES = ["src/views/layouts/includes/*"]
DEFAULT_VIEWS = ["src/views/**/*", "!src/views/layouts/**"]
DEFAULT_MATERIALS = ["src/materials/**/*"]
DEFAULT_DATA = ["src/data/**/*.{json,yml,yaml}"]
DEFAULT_DOCS = ["src/docs/**/*.md"]

GLOB_FIELDS = ("layouts", "layout_includes", "views", "materials", "data", "docs")

# Original option names → field names
ALIASES = {
    "layoutIncludes": "layout_includes",
    "logErrors": "log_errors",
    "onError": "on_error",
    "baseDir": "base_dir",
    "strictIds": "strict_ids",
    "saveRunLog": "save_run_log",
    "lockTimeout": "lock_timeout",
}


@dataclass
class KeysConfig:
    """Names under which materials / views / docs appear in templates."""
    materials: str = "materials"
    views: str = "views"
    docs: str = "docs"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KeysConfig":
        unknown = set(data) - {f.name for f in fields(cls)}
        if unknown:
            raise AssemblyError(
                ErrorCodes.INVALID_CONFIG,
                section="keys",
                unknown=sorted(unknown),
            )
        return cls(**{k: str(v) for k, v in data.items()})


@dataclass
class AssemblyOptions:
    """All options of one assembly run."""
    layout: str = "default"
    layouts: list[str] = field(default_factory=lambda: list(DEFAULT_LAYOUTS))
    layout_includes: list[str] = field(default_factory=lambda: list(DEFAULT_LAYOUT_INCLUDES))
    views: list[str] = field(default_factory=lambda: list(DEFAULT_VIEWS))
    materials: list[str] = field(default_factory=lambda: list(DEFAULT_MATERIALS))
    data: list[str] = field(default_factory=lambda: list(DEFAULT_DATA))
    docs: list[str] = field(default_factory=lambda: list(DEFAULT_DOCS))
    keys: KeysConfig = field(default_factory=KeysConfig)
    dest: Path = Path("dist")
    base_dir: Path = Path(".")

    # Materials
    dna: bool = True
    strict_ids: bool = False

    # Run
    save_run_log: bool = False
    lock_timeout: float = 10.0

    # Errors
    log_errors: bool = False
    on_error: Callable[[Exception], None] | None = None

    # Programmatic only
    helpers: dict[str, Callable[..., Any]] = field(default_factory=dict)
    hooks: list[Any] = field(default_factory=list)

    def resolve(self, path: str | Path) -> Path:
        """Path relative to base_dir (absolute paths unchanged)."""
        path = Path(path)
        return path if path.is_absolute() else self.base_dir / path

    @property
    def dest_dir(self) -> Path:
        return self.resolve(self.dest)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AssemblyOptions":
        """
        Options from a plain mapping (YAML config, CLI overrides).

        Raises:
            AssemblyError: INVALID_CONFIG
        """
        return merge_options(cls(), data)


def _normalize(data: Mapping[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(AssemblyOptions)}
    normalized: dict[str, Any] = {}

    for raw_key, value in data.items():
        key = ALIASES.get(raw_key, raw_key)
        if key not in known:
            raise AssemblyError(
                ErrorCodes.INVALID_CONFIG,
                option=raw_key,
                error="unknown option",
            )

        if key in GLOB_FIELDS:
            value = as_pattern_list(value)
        elif key in ("dest", "base_dir"):
            value = Path(value)
        elif key == "lock_timeout":
            value = float(value)

        normalized[key] = value
    return normalized


def merge_options(base: AssemblyOptions, overrides: Mapping[str, Any]) -> AssemblyOptions:
    """
    Overrides on top of base (base is not modified).

    `keys` and `helpers` are merged key by key; `hooks` are appended;
    everything else is replaced.
    """
    normalized = _normalize(overrides)
    merged = replace(base, keys=copy.copy(base.keys), helpers=dict(base.helpers), hooks=list(base.hooks))

    for key, value in normalized.items():
        if key == "keys":
            if not isinstance(value, Mapping):
                raise AssemblyError(ErrorCodes.INVALID_CONFIG, option="keys", error="must be a mapping")
            current = {f.name: getattr(merged.keys, f.name) for f in fields(KeysConfig)}
            merged.keys = KeysConfig.from_dict({**current, **value})
        elif key == "helpers":
            merged.helpers.update(value)
        elif key == "hooks":
            merged.hooks.extend(value)
        else:
            setattr(merged, key, value)

    return merged


def load_options(config_path: Path, **overrides: Any) -> AssemblyOptions:
    """
    Load options from a YAML config file.

    Relative base_dir resolves against the config file's directory; without
    base_dir the config file's directory is used.

    Args:
        config_path: YAML file
        **overrides: Applied after the file

    Raises:
        AssemblyError: INVALID_CONFIG
    """
    with open(config_path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise AssemblyError(
                ErrorCodes.INVALID_CONFIG,
                path=str(config_path),
                error=str(e),
            ) from e

    if not isinstance(data, dict):
        raise AssemblyError(
            ErrorCodes.INVALID_CONFIG,
            path=str(config_path),
            error="config must be a mapping",
        )

    options = AssemblyOptions.from_dict(data)
    config_dir = config_path.parent
    options.base_dir = options.base_dir if options.base_dir.is_absolute() else config_dir / options.base_dir

    if overrides:
        options = merge_options(options, overrides)
    return options
