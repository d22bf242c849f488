"""BlazorPack message codec.

Decode path::

    bytes -> split_frames -> decode_payload (per frame) -> to_json -> text

Encode path::

    text -> from_json -> encode_value (per message) -> join_frames -> bytes

``unpack_messages`` and ``pack_messages`` raise :class:`BlazorPackError`
subclasses.  The ``decode_to_json`` / ``encode_from_json`` /
``locate_payload_offset`` entry points wrap them and always return a
:class:`CodecResult`, so a host can report failures without catching codec
exceptions.  Nothing here logs or keeps state between calls.
"""

from __future__ import annotations

from typing import Sequence

from blazor_pack.config import DEFAULT_CONFIG, CodecConfig
from blazor_pack.exceptions import BlazorPackError, DecodeError
from blazor_pack.framing.framer import frame_bounds, join_frames, payload_offset
from blazor_pack.json_bridge import from_json, to_json
from blazor_pack.messagepack.decoder import decode_payload
from blazor_pack.messagepack.encoder import encode_value
from blazor_pack.models import Value
from blazor_pack.result import CodecResult


def unpack_messages(data: bytes, config: CodecConfig | None = None) -> list[Value]:
    """Decode every frame of a buffer.

    A failure in any frame fails the whole call; no partial list is returned.

    Raises:
        DecodeError: With ``frame_index`` set to the failing frame and
            ``offset`` relative to the start of ``data``.
    """
    config = config or DEFAULT_CONFIG
    messages: list[Value] = []
    for index, (start, end) in enumerate(frame_bounds(data, config.max_frame_length)):
        try:
            messages.append(decode_payload(bytes(data[start:end]), config.max_depth))
        except DecodeError as exc:
            exc.in_frame(index, start)
            raise
    return messages


def pack_messages(messages: Sequence[Value], *, preserve_format: bool = False) -> bytes:
    """Encode messages and frame each one with its length prefix."""
    return join_frames(encode_value(message, preserve_format=preserve_format) for message in messages)


def decode_to_json(data: bytes, config: CodecConfig | None = None) -> CodecResult:
    """Render a BlazorPack buffer as JSON text (display path)."""
    config = config or DEFAULT_CONFIG
    try:
        messages = unpack_messages(data, config)
    except BlazorPackError as exc:
        return CodecResult.failure(exc)
    return CodecResult.success(to_json(messages, indent=config.json_indent))


def encode_from_json(text: str | bytes, config: CodecConfig | None = None) -> CodecResult:
    """Serialize edited JSON text back into a BlazorPack buffer."""
    config = config or DEFAULT_CONFIG
    try:
        messages = from_json(text, max_depth=config.max_depth)
        body = pack_messages(messages, preserve_format=config.preserve_int_format)
    except BlazorPackError as exc:
        return CodecResult.failure(exc)
    return CodecResult.success(body)


def locate_payload_offset(data: bytes) -> CodecResult:
    """Find where the first payload starts, past its length prefix."""
    try:
        return CodecResult.success(payload_offset(data))
    except BlazorPackError as exc:
        return CodecResult.failure(exc)

