"""
Material parser: material files → partials, collection tree, material data.

Order per run:
1. stub every collection / sub-collection (all files)
2. hook before_materials
3. per file: front matter → helix scan → ids → tree entry → material data
   → namespace rewrite → hook on_material → partial registration
4. sort + prune hidden entries

Any read or front-matter failure aborts the run; no tree is produced.
"""

import logging
import re
from pathlib import Path

from fabassemble.context import AssemblyContext
from fabassemble.core.files import expand_globs
from fabassemble.core.ids import derive_serial
from fabassemble.core.logging import emit_warning
from fabassemble.core.matter import read_matter
from fabassemble.domain.constants import FIELD_NOTES
from fabassemble.domain.errors import AssemblyError, ErrorCodes
from fabassemble.domain.schemas import Fragment, MaterialEntry
from fabassemble.materials.collections import (
    CollectionBuilder,
    discover_collection_roots,
    entry_name,
    material_ids,
)
from fabassemble.materials.dna import DnaScanner
from fabassemble.materials.rewriter import rewrite
from fabassemble.render.markup import render_markdown

logger = logging.getLogger(__name__)

# Leading / trailing blank lines (indentation of the first line is kept)
LEADING_BLANK_PATTERN = re.compile(r"\A(?:[ \t]*[\r\n])+")
TRAILING_BLANK_PATTERN = re.compile(r"[ \t]*(?:[\r\n][ \t]*)+\Z")


def trim_blank_lines(content: str) -> str:
    content = LEADING_BLANK_PATTERN.sub("", content)
    return TRAILING_BLANK_PATTERN.sub("", content)


def load_fragment(
    file: Path,
    builder: CollectionBuilder,
    scanner: DnaScanner | None = None,
) -> Fragment:
    """
    Read one material file.

    Args:
        file: Material file
        builder: Supplies the file's placement
        scanner: Adds the helix annotation (None: skipped)

    Returns:
        Fragment

    Raises:
        AssemblyError: FRONT_MATTER_INVALID
    """
    matter = read_matter(file)
    data = scanner.scan(file, matter.data) if scanner else dict(matter.data)

    placement = builder.locate(file)
    material_id, key = material_ids(placement, file)

    return Fragment(
        path=file,
        front_matter=data,
        body=trim_blank_lines(matter.content),
        collection=placement.collection,
        parent_collection=placement.parent,
        is_sub_collection=placement.is_sub_collection,
        id=material_id,
        key=key,
        serial=derive_serial(material_id),
    )


def build_entry(fragment: Fragment) -> MaterialEntry:
    """Collection tree entry for a fragment."""
    return MaterialEntry(
        name=entry_name(fragment),
        serial=fragment.serial,
        notes=render_markdown(fragment.front_matter.get(FIELD_NOTES)),
        data=fragment.local_data,
        hidden=fragment.is_hidden,
    )


def _check_duplicate(ctx: AssemblyContext, seen: dict[str, Path], fragment: Fragment) -> None:
    """
    Duplicate ids: warning (later file wins), or failure with strict_ids.

    Raises:
        AssemblyError: DUPLICATE_MATERIAL_ID (strict_ids only)
    """
    first = seen.get(fragment.id)
    seen[fragment.id] = fragment.path
    if first is None:
        return

    if ctx.options.strict_ids:
        raise AssemblyError(
            ErrorCodes.DUPLICATE_MATERIAL_ID,
            material_id=fragment.id,
            first=str(first),
            duplicate=str(fragment.path),
        )

    emit_warning(
        ctx.run_log,
        ErrorCodes.DUPLICATE_MATERIAL_ID,
        f"Material id '{fragment.id}' of {fragment.path} replaces {first}",
        path=str(fragment.path),
        material_id=fragment.id,
    )


def _report_conflict(ctx: AssemblyContext, fragment: Fragment) -> None:
    """
    Top-level material left out of the listing for a sub-collection of the same key.

    Raises:
        AssemblyError: COLLECTION_KEY_CONFLICT (strict_ids only)
    """
    if ctx.options.strict_ids:
        raise AssemblyError(
            ErrorCodes.COLLECTION_KEY_CONFLICT,
            key=fragment.key,
            collection=fragment.collection,
            path=str(fragment.path),
        )

    emit_warning(
        ctx.run_log,
        ErrorCodes.COLLECTION_KEY_CONFLICT,
        f"Material {fragment.path} shares key '{fragment.key}' with a sub-collection of "
        f"'{fragment.collection}'; only the sub-collection is listed",
        path=str(fragment.path),
    )


def parse_materials(ctx: AssemblyContext) -> list[Fragment]:
    """
    Parse every material of the run into ctx.

    Fills ctx.materials, ctx.material_data and the engine's partials.

    Args:
        ctx: Assembly context (materials state is reset)

    Returns:
        Fragments in processing order

    Raises:
        AssemblyError: FRONT_MATTER_INVALID, DUPLICATE_MATERIAL_ID and
            COLLECTION_KEY_CONFLICT (strict)
    """
    options = ctx.options
    ctx.materials = {}
    ctx.material_data = {}

    files = expand_globs(options.materials, options.base_dir)
    roots = discover_collection_roots(options.materials, options.base_dir)

    builder = CollectionBuilder(roots)
    ctx.materials = builder.stub(files)

    files = ctx.hooks.before_materials(ctx, files)
    builder.stub(files)
    scanner = DnaScanner(files, ctx.run_log) if options.dna else None

    fragments: list[Fragment] = []
    seen: dict[str, Path] = {}

    try:
        for file in files:
            fragment = load_fragment(file, builder, scanner)
            _check_duplicate(ctx, seen, fragment)

            if not builder.place(fragment, build_entry(fragment)):
                _report_conflict(ctx, fragment)

            local_data = fragment.local_data
            ctx.material_data[fragment.namespace] = local_data

            content = rewrite(fragment.body, local_data, fragment.namespace)
            content = ctx.hooks.on_material(ctx, fragment, content)

            ctx.engine.register_partial(fragment.id, content)
            fragments.append(fragment)
    except Exception:
        # No partial tree survives a failed run
        ctx.materials = {}
        ctx.material_data = {}
        raise

    ctx.materials = builder.finalize()
    logger.debug(f"Parsed {len(fragments)} materials into {len(ctx.materials)} collections")
    return fragments
