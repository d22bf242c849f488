"""Minimal raw HTTP message model for captured requests and responses.

Only the pieces the editors need are parsed: the start line, header pairs
in their original order, and the body bytes.  Chunked transfer encoding and
other transport concerns are left to the host.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from blazor_pack.exceptions import HttpMessageError

_CRLF_SEPARATOR = b"\r\n\r\n"
_LF_SEPARATOR = b"\n\n"


def http_body_offset(raw: bytes) -> int:
    """Return the index of the first body byte of a raw HTTP message.

    Raises:
        HttpMessageError: If the message has no blank line ending its headers.
    """
    crlf = raw.find(_CRLF_SEPARATOR)
    lf = raw.find(_LF_SEPARATOR)
    if crlf == -1 and lf == -1:
        raise HttpMessageError("HTTP message has no header terminator.")
    if lf == -1 or (crlf != -1 and crlf < lf):
        return crlf + len(_CRLF_SEPARATOR)
    return lf + len(_LF_SEPARATOR)


class HttpMessage(BaseModel):
    """A raw HTTP request or response."""

    start_line: str
    """Request line or status line, without its line ending."""

    headers: list[tuple[str, str]] = Field(default_factory=list)
    """Header name/value pairs in wire order."""

    body: bytes = b""
    """Message body."""

    def header(self, name: str) -> str | None:
        """Return the first header value matching ``name`` (case-insensitive)."""
        wanted = name.lower()
        for header_name, value in self.headers:
            if header_name.lower() == wanted:
                return value
        return None

    @property
    def content_type(self) -> str | None:
        return self.header("Content-Type")

    def with_body(self, body: bytes) -> HttpMessage:
        """Return a copy carrying ``body``, keeping Content-Length in step.

        Content-Length is added when missing, unless the message declares a
        Transfer-Encoding.
        """
        headers = [
            (name, str(len(body)) if name.lower() == "content-length" else value)
            for name, value in self.headers
        ]
        if self.header("Content-Length") is None and self.header("Transfer-Encoding") is None:
            headers.append(("Content-Length", str(len(body))))
        return HttpMessage(start_line=self.start_line, headers=headers, body=body)

    def head_bytes(self) -> bytes:
        lines = [self.start_line] + [f"{name}: {value}" for name, value in self.headers]
        return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1")

    def to_bytes(self) -> bytes:
        return self.head_bytes() + self.body


def parse_http_message(raw: bytes) -> HttpMessage:
    """Parse raw bytes into an :class:`HttpMessage`.

    Raises:
        HttpMessageError: If the head cannot be split or a header line is
            malformed.
    """
    offset = http_body_offset(raw)
    head = raw[:offset].decode("latin-1").replace("\r\n", "\n").rstrip("\n")
    lines = head.split("\n")
    if not lines or not lines[0]:
        raise HttpMessageError("HTTP message has an empty start line.")

    headers: list[tuple[str, str]] = []
    for line in lines[1:]:
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            raise HttpMessageError(f"Malformed header line: {line!r}")
        headers.append((name.strip(), value.strip()))
    return HttpMessage(start_line=lines[0], headers=headers, body=raw[offset:])
