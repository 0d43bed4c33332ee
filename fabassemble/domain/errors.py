"""
Error definitions for the assembler.

Rules:
- No silent failures: fatal conditions raise AssemblyError with a code
- File read failures (OSError) propagate unchanged
- Duplicate material ids and material / sub-collection key clashes are
  warnings unless strict_ids is set
"""

from typing import Any


class AssemblyError(Exception):
    """
    Raised when an assembly run has to stop.

    Used for:
    - unparseable front matter or data files
    - missing layouts / partials
    - template compile or render failures
    - destination lock timeout
    - invalid configuration

    Usage:
        raise AssemblyError("FRONT_MATTER_INVALID", path=str(path), error=str(e))
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """For logs / JSON serialization."""
        return {
            "code": self.code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """Error code constants."""

    # === Read/Parse ===
    FRONT_MATTER_INVALID = "FRONT_MATTER_INVALID"
    DATA_FILE_INVALID = "DATA_FILE_INVALID"

    # === Materials ===
    DUPLICATE_MATERIAL_ID = "DUPLICATE_MATERIAL_ID"  # warning unless strict_ids
    COLLECTION_KEY_CONFLICT = "COLLECTION_KEY_CONFLICT"  # warning unless strict_ids

    # === Render ===
    LAYOUT_NOT_FOUND = "LAYOUT_NOT_FOUND"
    PARTIAL_NOT_FOUND = "PARTIAL_NOT_FOUND"
    RENDER_FAILED = "RENDER_FAILED"

    # === Output ===
    DEST_LOCK_TIMEOUT = "DEST_LOCK_TIMEOUT"

    # === Config ===
    INVALID_CONFIG = "INVALID_CONFIG"
