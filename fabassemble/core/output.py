"""
Output writing: atomic writes + destination lock.

Rules:
- No partial files: temp → rename + fsync
- fsync failure: warning, continue
- One assembly run per destination at a time (FileLock next to dest)
"""

import json
import logging
import os
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from fabassemble.domain.errors import AssemblyError, ErrorCodes

logger = logging.getLogger(__name__)

# Lock timeout (seconds)
DEFAULT_LOCK_TIMEOUT = 10.0

# =============================================================================
# Destination Lock
# =============================================================================


def lock_path_for(dest: Path) -> Path:
    """Lock file lives beside dest so it never lands in the output."""
    dest = Path(os.path.abspath(dest))
    return dest.parent / f".{dest.name}.lock"


@contextmanager
def dest_lock(dest: Path, timeout: float = DEFAULT_LOCK_TIMEOUT) -> Generator[Path, None, None]:
    """
    Lock a destination directory for one assembly run.

    Usage:
        with dest_lock(dest):
            # write output files

    Args:
        dest: Output directory
        timeout: Seconds to wait for the lock

    Yields:
        lock file path

    Raises:
        AssemblyError: DEST_LOCK_TIMEOUT
    """
    lock_file = lock_path_for(dest)
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_file, timeout=timeout)

    try:
        lock.acquire()
    except Timeout as e:
        raise AssemblyError(
            ErrorCodes.DEST_LOCK_TIMEOUT,
            dest=str(dest),
            lock_file=str(lock_file),
            timeout=timeout,
        ) from e

    try:
        yield lock_file
    finally:
        lock.release()


# =============================================================================
# Atomic Write
# =============================================================================


def _fsync_dir(dir_path: Path) -> None:
    """
    fsync a directory where supported.

    Makes the rename entry durable. Not available on every OS / filesystem.
    """
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        logger.warning(
            f"Directory fsync failed for {dir_path}: {e}. "
            f"Rename durability may not be guaranteed."
        )


def atomic_write_text(path: Path, text: str) -> Path:
    """
    Atomic text write.

    - No intermediate state: temp → rename
    - File fsync + directory fsync where possible
    - On failure: temp file removed, existing file kept

    Args:
        path: Target file
        text: Content (UTF-8)

    Returns:
        path
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="",
        ) as f:
            temp_path = Path(f.name)
            f.write(text)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(
                    f"File fsync failed for {path}: {e}. "
                    f"Data may not be durable on power loss."
                )

        # NamedTemporaryFile creates files as 0600
        os.chmod(temp_path, 0o644)
        os.replace(temp_path, path)

        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise

    return path


def atomic_write_json(path: Path, data: dict[str, Any]) -> Path:
    """Atomic JSON write (indent=2, UTF-8)."""
    return atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False))
