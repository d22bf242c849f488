"""Result model returned by the caller-facing codec operations."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, Field

from blazor_pack.exceptions import BlazorPackError, CodecResultError


class CodecStatus(str, enum.Enum):
    """Outcome of a codec operation."""

    OK = "ok"
    FAILED = "failed"


class CodecResult(BaseModel):
    """Result of a codec operation: either a value or a single error.

    Attributes:
        status: Whether the operation succeeded.
        value: JSON text, encoded bytes or an offset (if succeeded).
        error: Human-readable error message (if failed).
        error_type: Name of the error class, e.g. ``TruncatedFrameError``.
        details: Structured diagnostics such as offsets and frame indices.
    """

    status: CodecStatus = CodecStatus.OK
    """Whether the operation succeeded or failed."""

    value: str | bytes | int | None = None
    """The operation's output."""

    error: str | None = None
    """Error message if the operation failed."""

    error_type: str | None = None
    """Class name of the error that caused the failure."""

    details: dict[str, Any] = Field(default_factory=dict)
    """Structured diagnostics describing the failure."""

    @property
    def is_success(self) -> bool:
        """Check if the operation completed successfully."""
        return self.status == CodecStatus.OK

    def unwrap(self) -> str | bytes | int:
        """Return the value, raising if the operation failed."""
        if not self.is_success:
            raise CodecResultError(self.error_type or "Error", self.error or "")
        return self.value

    @staticmethod
    def success(value: str | bytes | int) -> CodecResult:
        """Create a successful result."""
        return CodecResult(status=CodecStatus.OK, value=value)

    @staticmethod
    def failure(error: BlazorPackError) -> CodecResult:
        """Create a failed result from a codec error."""
        return CodecResult(
            status=CodecStatus.FAILED,
            error=str(error),
            error_type=type(error).__name__,
            details=error.details,
        )
