"""
Assembly sources: layouts, layout includes, data, views, docs.

Each parser resets its part of the context, expands its globs, runs the
`before_*` hook over the file list, then the per-item hook.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from fabassemble.context import AssemblyContext
from fabassemble.core.files import expand_globs
from fabassemble.core.ids import derive_name, to_title_case
from fabassemble.core.matter import read_matter, read_text
from fabassemble.domain.constants import FIELD_NOTES
from fabassemble.domain.errors import AssemblyError, ErrorCodes
from fabassemble.render.markup import render_markdown

logger = logging.getLogger(__name__)


# =============================================================================
# Layouts
# =============================================================================


def parse_layouts(ctx: AssemblyContext) -> dict[str, str]:
    """layouts[name] = raw layout source."""
    ctx.layouts = {}

    files = expand_globs(ctx.options.layouts, ctx.options.base_dir)
    files = ctx.hooks.before_layouts(ctx, files)

    for file in files:
        layout_id = derive_name(file)
        ctx.layouts[layout_id] = ctx.hooks.on_layout(ctx, layout_id, read_text(file))

    logger.debug(f"Loaded layouts: {sorted(ctx.layouts)}")
    return ctx.layouts


def parse_layout_includes(ctx: AssemblyContext) -> list[str]:
    """
    Register every layout include as a partial.

    Returns:
        Registered partial names
    """
    files = expand_globs(ctx.options.layout_includes, ctx.options.base_dir)
    files = ctx.hooks.before_layout_includes(ctx, files)

    names = []
    for file in files:
        include_id = derive_name(file)
        content = ctx.hooks.on_layout_include(ctx, include_id, read_text(file))
        ctx.engine.register_partial(include_id, content)
        names.append(include_id)
    return names


# =============================================================================
# Data
# =============================================================================


def load_data_file(path: Path) -> Any:
    """
    Parse a YAML or JSON data file.

    Raises:
        AssemblyError: DATA_FILE_INVALID
    """
    try:
        return yaml.safe_load(read_text(path))
    except yaml.YAMLError as e:
        raise AssemblyError(
            ErrorCodes.DATA_FILE_INVALID,
            path=str(path),
            error=str(e),
        ) from e


def parse_data(ctx: AssemblyContext) -> dict[str, Any]:
    """data[name] = parsed file content."""
    ctx.data = {}

    files = expand_globs(ctx.options.data, ctx.options.base_dir)
    files = ctx.hooks.before_data(ctx, files)

    for file in files:
        data_id = derive_name(file)
        ctx.data[data_id] = ctx.hooks.on_data(ctx, data_id, load_data_file(file))
    return ctx.data


# =============================================================================
# Views
# =============================================================================


def view_collection(file: Path, views_key: str) -> str:
    """
    Collection a view belongs to: its directory name, or '' when the view
    sits directly in the views directory.
    """
    dirname = Path(os.path.normpath(Path(file).parent)).name
    return "" if dirname == views_key else dirname


def parse_views(ctx: AssemblyContext) -> dict[str, dict[str, Any]]:
    """
    Collect view metadata for views inside a collection directory.

    views[collection] = {name, items: {view_id: {name, data}}}
    view_id keeps its ordering digits.
    """
    ctx.views = {}

    files = expand_globs(ctx.options.views, ctx.options.base_dir)
    files = ctx.hooks.before_views(ctx, files)

    for file in files:
        view_id = derive_name(file, preserve_numbers=True)
        collection = view_collection(file, ctx.options.keys.views)

        matter = read_matter(file)
        data = {k: v for k, v in matter.data.items() if k != FIELD_NOTES}
        data = ctx.hooks.on_view(ctx, view_id, data)

        if not collection:
            continue

        node = ctx.views.setdefault(
            collection,
            {"name": to_title_case(collection), "items": {}},
        )
        node["items"][view_id] = {
            "name": to_title_case(view_id),
            "data": data,
        }

    return ctx.views


# =============================================================================
# Docs
# =============================================================================


def parse_docs(ctx: AssemblyContext) -> dict[str, dict[str, Any]]:
    """docs[name] = {name, content (rendered Markdown)}."""
    ctx.docs = {}

    files = expand_globs(ctx.options.docs, ctx.options.base_dir)
    files = ctx.hooks.before_docs(ctx, files)

    for file in files:
        doc_id = derive_name(file)
        content = ctx.hooks.on_doc(ctx, doc_id, render_markdown(read_text(file)))
        ctx.docs[doc_id] = {
            "name": to_title_case(doc_id),
            "content": content,
        }
    return ctx.docs
