"""
Run logging: assembly run log, warnings, helix diagnostics

Rules:
- Warning context: level, code, path, material_id, message
- Every warning is also sent to the module logger
- Run logs are written atomically under <dest>/.assembly/
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from fabassemble.core.ids import generate_run_id
from fabassemble.core.output import atomic_write_json
from fabassemble.domain.schemas import RunLog, WarningLog

logger = logging.getLogger(__name__)

# =============================================================================
# Run Log Management
# =============================================================================


def create_run_log() -> RunLog:
    """New RunLog with a fresh run_id."""
    now = datetime.now(UTC).isoformat()

    return RunLog(
        run_id=generate_run_id(),
        started_at=now,
        result="pending",
    )


def emit_warning(
    run_log: RunLog | None,
    code: str,
    message: str,
    path: str | None = None,
    material_id: str | None = None,
) -> None:
    """
    Record a warning event.

    Args:
        run_log: RunLog instance (None: logger only)
        code: Warning code (ErrorCodes value)
        message: Human readable message
        path: File the warning refers to
        material_id: Material id the warning refers to
    """
    logger.warning(f"[{code}] {message}")

    if run_log is None:
        return

    run_log.warnings.append(
        WarningLog(
            level="warning",
            code=code,
            path=path,
            material_id=material_id,
            message=message,
        )
    )


def emit_helix(run_log: RunLog | None, file: str, helix: dict[str, Any]) -> None:
    """
    Record a helix (cross-reference) diagnostic.

    One line per fragment with a non-empty annotation.
    """
    logger.info(json.dumps({"file": file, "helix": helix}, ensure_ascii=False))

    if run_log is not None:
        run_log.helix.append({"file": file, "helix": helix})


def complete_run_log(
    run_log: RunLog,
    success: bool,
    error_code: str | None = None,
    error_context: dict[str, Any] | None = None,
) -> None:
    """
    Finish a RunLog.

    Args:
        run_log: RunLog instance
        success: Whether the run succeeded
        error_code: Error code (on failure)
        error_context: Error context (on failure)
    """
    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.result = "success" if success else "failed"

    if not success:
        run_log.error_code = error_code
        run_log.error_context = error_context


def save_run_log(run_log: RunLog, logs_dir: Path) -> Path:
    """
    Write a RunLog to logs_dir/run_<run_id>.json.

    Returns:
        Written file path
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"run_{run_log.run_id}.json"
    atomic_write_json(log_path, run_log.to_dict())
    return log_path


def load_run_log(log_path: Path) -> dict[str, Any]:
    """Read a saved RunLog."""
    data: dict[str, Any] = json.loads(log_path.read_text(encoding="utf-8"))
    return data


def list_run_logs(logs_dir: Path) -> list[Path]:
    """
    Run log files in logs_dir.

    Returns:
        Log file paths, newest first
    """
    if not logs_dir.exists():
        return []

    logs = list(logs_dir.glob("run_*.json"))
    logs.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    return logs
