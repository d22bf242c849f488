"""Exception hierarchy for the BlazorPack codec."""

from __future__ import annotations

from typing import Any


class BlazorPackError(Exception):
    """Base exception for all BlazorPack codec errors."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)

    @property
    def details(self) -> dict[str, Any]:
        """Structured diagnostics for callers that report errors."""
        return {}


# ── Decode Errors ─────────────────────────────────────────────────

class DecodeError(BlazorPackError):
    """Raised when a buffer cannot be decoded into messages."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        self.offset = offset
        self.frame_index: int | None = None
        super().__init__(message)

    @property
    def details(self) -> dict[str, Any]:
        details: dict[str, Any] = {}
        if self.offset is not None:
            details["offset"] = self.offset
        if self.frame_index is not None:
            details["frame_index"] = self.frame_index
        return details

    def in_frame(self, frame_index: int, frame_start: int) -> DecodeError:
        """Rebase a payload-relative error onto its frame within the buffer."""
        self.frame_index = frame_index
        if self.offset is not None:
            self.offset += frame_start
        return self

    def __str__(self) -> str:
        if self.frame_index is None:
            return self.message
        return f"{self.message} (frame {self.frame_index})"


class FrameError(DecodeError):
    """Raised when the varint framing of a buffer is invalid."""


class TruncatedFrameError(FrameError):
    """Raised when a frame declares more bytes than the buffer holds."""

    def __init__(self, offset: int, declared: int | None = None, remaining: int = 0) -> None:
        self.declared = declared
        self.remaining = remaining
        if declared is None:
            msg = f"Buffer ends inside a length prefix at offset {offset}."
        else:
            msg = (
                f"Frame at offset {offset} declares {declared} bytes "
                f"but only {remaining} remain."
            )
        super().__init__(msg, offset=offset)

    @property
    def details(self) -> dict[str, Any]:
        details = super().details
        if self.declared is not None:
            details["declared"] = self.declared
        details["remaining"] = self.remaining
        return details


class VarintOverflowError(FrameError):
    """Raised when a length prefix exceeds the supported size."""

    def __init__(self, offset: int | None = None, reason: str = "") -> None:
        msg = "Length prefix overflow"
        if offset is not None:
            msg += f" at offset {offset}"
        msg += "."
        if reason:
            msg += f" Reason: {reason}"
        super().__init__(msg, offset=offset)


class UnknownTagError(DecodeError):
    """Raised on a reserved or unknown MessagePack type tag."""

    def __init__(self, tag: int, offset: int) -> None:
        self.tag = tag
        super().__init__(f"Unknown MessagePack tag 0x{tag:02x} at offset {offset}.", offset=offset)

    @property
    def details(self) -> dict[str, Any]:
        details = super().details
        details["tag"] = self.tag
        return details


class NestingTooDeepError(DecodeError):
    """Raised when containers nest deeper than the configured limit."""

    def __init__(self, limit: int, offset: int) -> None:
        self.limit = limit
        super().__init__(f"Nesting exceeds maximum depth of {limit} at offset {offset}.", offset=offset)

    @property
    def details(self) -> dict[str, Any]:
        details = super().details
        details["limit"] = self.limit
        return details


class InvalidUtf8Error(DecodeError):
    """Raised when a MessagePack string is not valid UTF-8."""

    def __init__(self, offset: int, reason: str = "") -> None:
        msg = f"Invalid UTF-8 string at offset {offset}."
        if reason:
            msg += f" Reason: {reason}"
        super().__init__(msg, offset=offset)


class TruncatedValueError(DecodeError):
    """Raised when a payload ends in the middle of a value."""

    def __init__(self, offset: int, needed: int) -> None:
        self.needed = needed
        super().__init__(
            f"Payload ends at offset {offset}; {needed} more byte(s) needed.",
            offset=offset,
        )


class TrailingDataError(DecodeError):
    """Raised when bytes remain in a payload after its single value."""

    def __init__(self, offset: int, remaining: int) -> None:
        self.remaining = remaining
        super().__init__(
            f"{remaining} trailing byte(s) after value at offset {offset}.",
            offset=offset,
        )


# ── JSON Errors ───────────────────────────────────────────────────

class ParseError(BlazorPackError):
    """Raised when JSON text cannot be converted back into messages."""

    def __init__(self, reason: str, index: int | None = None) -> None:
        self.reason = reason
        self.index = index
        if index is None:
            msg = f"Invalid message JSON: {reason}"
        else:
            msg = f"Invalid message JSON at element {index}: {reason}"
        super().__init__(msg)

    @property
    def details(self) -> dict[str, Any]:
        return {"index": self.index, "reason": self.reason}


# ── Result Errors ─────────────────────────────────────────────────

class CodecResultError(BlazorPackError):
    """Raised when unwrapping a failed codec result."""

    def __init__(self, error_type: str, message: str) -> None:
        self.error_type = error_type
        super().__init__(f"{error_type}: {message}")


# ── HTTP Adapter Errors ───────────────────────────────────────────

class HttpMessageError(BlazorPackError):
    """Raised when a raw HTTP message cannot be split into head and body."""


class EmptyBodyError(HttpMessageError):
    """Raised when an edited message has no body to serialize."""

    def __init__(self, message: str = "The edited message body is empty.") -> None:
        super().__init__(message)
