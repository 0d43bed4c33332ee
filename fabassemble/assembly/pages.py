"""
Page assembler: views → layouts → rendered HTML files.

Per view:
1. front matter + body (collection views get baseurl '..')
2. body inserted at the layout's {% body %} marker
3. render against the merged assembly context
4. write to dest/<collection>/<name>.html (or front-matter `dest`),
   plus an optional `dest-copy`

All writes of a run happen under the destination lock.
"""

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from fabassemble.context import AssemblyContext
from fabassemble.core.files import expand_globs
from fabassemble.core.matter import read_matter
from fabassemble.core.output import atomic_write_text, dest_lock
from fabassemble.domain.constants import (
    FIELD_BASEURL,
    FIELD_DEST,
    FIELD_DEST_COPY,
    FIELD_LAYOUT,
    OUTPUT_EXTENSION,
)
from fabassemble.domain.errors import AssemblyError, ErrorCodes

from .sources import view_collection

logger = logging.getLogger(__name__)

BODY_MARKER_PATTERN = re.compile(r"\{%\s?body\s?%\}")

# Lowercase alphanumeric extension at the end of the path
EXTENSION_PATTERN = re.compile(r"\.[0-9a-z]+$")


def build_context(
    ctx: AssemblyContext,
    data: Mapping[str, Any] | None = None,
    hash_args: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Template context for one render.

    Later sources win:
    data < data files < material data < materials < views < docs < hash_args
    """
    keys = ctx.options.keys
    context: dict[str, Any] = {}
    context.update(data or {})
    context.update(ctx.data)
    context.update(ctx.material_data)
    context[keys.materials] = ctx.materials_dict()
    context[keys.views] = ctx.views
    context[keys.docs] = ctx.docs
    context.update(hash_args or {})
    return context


def wrap_page(page: str, layout: str) -> str:
    """Insert page at the first {% body %} marker of layout."""
    return BODY_MARKER_PATTERN.sub(lambda _: page, layout, count=1)


def output_path(ctx: AssemblyContext, file: Path, collection: str, data: Mapping[str, Any]) -> Path:
    """
    Destination of a rendered view.

    Front-matter `dest` replaces dest/<collection>/<basename>; either way an
    existing extension becomes .html. A `dest` without one is kept as given.
    """
    if data.get(FIELD_DEST):
        path = ctx.options.resolve(os.path.normpath(str(data[FIELD_DEST])))
    else:
        path = ctx.options.dest_dir / collection / file.name
    return Path(EXTENSION_PATTERN.sub(OUTPUT_EXTENSION, str(path), count=1))


def render_view(ctx: AssemblyContext, file: Path) -> tuple[str, dict[str, Any]]:
    """
    Render one view.

    Returns:
        (html, view front matter)

    Raises:
        AssemblyError: LAYOUT_NOT_FOUND, RENDER_FAILED, PARTIAL_NOT_FOUND
    """
    matter = read_matter(file)
    data = dict(matter.data)

    if view_collection(file, ctx.options.keys.views):
        data[FIELD_BASEURL] = ".."

    layout_id = data.get(FIELD_LAYOUT) or ctx.options.layout
    layout = ctx.layouts.get(layout_id)
    if layout is None:
        raise AssemblyError(
            ErrorCodes.LAYOUT_NOT_FOUND,
            layout=layout_id,
            view=str(file),
        )

    source = wrap_page(matter.content, layout)
    html = ctx.engine.render(source, build_context(ctx, data), name=str(file))
    return html, data


def assemble_views(ctx: AssemblyContext) -> list[Path]:
    """
    Render and write every view.

    A failing view aborts the run; views after it are not written.

    Returns:
        Written file paths (dest-copy included)

    Raises:
        AssemblyError: LAYOUT_NOT_FOUND, RENDER_FAILED, PARTIAL_NOT_FOUND,
            DEST_LOCK_TIMEOUT
    """
    options = ctx.options
    files = expand_globs(options.views, options.base_dir)
    dest = options.dest_dir
    outputs: list[Path] = []

    with dest_lock(dest, timeout=options.lock_timeout):
        dest.mkdir(parents=True, exist_ok=True)

        for file in files:
            collection = view_collection(file, options.keys.views)
            try:
                html, data = render_view(ctx, file)
            except AssemblyError:
                logger.error(f"Error while compiling template {file}")
                raise

            path = atomic_write_text(output_path(ctx, file, collection, data), html)
            outputs.append(path)

            if data.get(FIELD_DEST_COPY):
                copy_path = ctx.options.resolve(os.path.normpath(str(data[FIELD_DEST_COPY])))
                outputs.append(atomic_write_text(copy_path, html))

    ctx.run_log.outputs.extend(str(p) for p in outputs)
    logger.info(f"Wrote {len(outputs)} files to {dest}")
    return outputs
