"""
Runner: one assembly run from options to written files.

    result = assemble(AssemblyOptions(base_dir=Path("site")))
    result.outputs   # written HTML files
    result.run_log   # warnings, helix diagnostics, outputs

Error policy (fatal errors only):
- options.on_error set → called with the error, not re-raised
- options.log_errors   → logged, not re-raised
- otherwise            → logged and re-raised
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from fabassemble.config import AssemblyOptions
from fabassemble.context import AssemblyContext
from fabassemble.core.logging import complete_run_log, save_run_log
from fabassemble.domain.constants import RUN_LOG_DIRNAME
from fabassemble.domain.errors import AssemblyError
from fabassemble.domain.schemas import RunLog
from fabassemble.materials.parser import parse_materials
from fabassemble.render.helpers import register_helpers

from .pages import assemble_views
from .sources import parse_data, parse_docs, parse_layout_includes, parse_layouts, parse_views

logger = logging.getLogger(__name__)


@dataclass
class AssemblyResult:
    """Outcome of assemble()."""
    context: AssemblyContext
    outputs: list[Path] = field(default_factory=list)
    run_log_path: Path | None = None
    error: Exception | None = None

    @property
    def run_log(self) -> RunLog:
        return self.context.run_log

    @property
    def success(self) -> bool:
        return self.error is None


def setup(options: AssemblyOptions, ctx: AssemblyContext | None = None) -> AssemblyContext:
    """
    Build the assembly context: everything except writing views.

    Order: helpers, layouts, layout includes, data, materials, views, docs,
    then the after_assembly hook.

    Args:
        options: Run options
        ctx: Context to fill (default: a fresh one)

    Returns:
        Filled context
    """
    ctx = ctx or AssemblyContext.create(options)

    register_helpers(ctx)
    parse_layouts(ctx)
    parse_layout_includes(ctx)
    parse_data(ctx)
    parse_materials(ctx)
    parse_views(ctx)
    parse_docs(ctx)

    ctx.hooks.after_assembly(ctx)
    return ctx


def handle_error(options: AssemblyOptions, error: Exception) -> None:
    """
    Apply the error policy.

    Raises:
        The error itself, unless on_error or log_errors is set
    """
    if options.on_error is not None:
        options.on_error(error)
        return

    logger.error(f"Assembly failed: {error}")
    if options.log_errors:
        return
    raise error


def _finish(ctx: AssemblyContext, result: AssemblyResult) -> None:
    error = result.error
    if isinstance(error, AssemblyError):
        complete_run_log(ctx.run_log, success=False, error_code=error.code, error_context=error.context)
    elif error is not None:
        complete_run_log(
            ctx.run_log,
            success=False,
            error_code=type(error).__name__,
            error_context={"error": str(error)},
        )
    else:
        complete_run_log(ctx.run_log, success=True)

    if ctx.options.save_run_log:
        result.run_log_path = save_run_log(ctx.run_log, ctx.options.dest_dir / RUN_LOG_DIRNAME)
        logger.info(f"Run log saved: {result.run_log_path}")


def assemble(options: AssemblyOptions | None = None) -> AssemblyResult:
    """
    Set up the context, then render and write every view.

    Args:
        options: Run options (default: AssemblyOptions())

    Returns:
        AssemblyResult (error set when the policy swallowed a failure)

    Raises:
        AssemblyError, OSError: when neither on_error nor log_errors is set
    """
    options = options or AssemblyOptions()
    ctx = AssemblyContext.create(options)
    result = AssemblyResult(context=ctx)

    logger.info(f"Assembly started: {ctx.run_log.run_id}")
    try:
        setup(options, ctx)
        result.outputs = assemble_views(ctx)
    except (AssemblyError, OSError) as e:
        result.error = e
        _finish(ctx, result)
        handle_error(options, e)
        return result

    _finish(ctx, result)
    logger.info(f"Assembly finished: {ctx.run_log.run_id} ({len(result.outputs)} files)")
    return result
