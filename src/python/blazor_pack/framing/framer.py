"""Split and join varint length-delimited frames.

Wire format::

    buffer := frame*
    frame  := varint(payload_len) payload

A buffer may hold no frames (empty body) or several batched messages.
"""

from __future__ import annotations

from typing import Iterable

from blazor_pack.exceptions import DecodeError, TruncatedFrameError, VarintOverflowError
from blazor_pack.framing.varint import MAX_FRAME_LENGTH, decode_varint, encode_varint


def frame_bounds(data: bytes, max_frame_length: int = MAX_FRAME_LENGTH) -> list[tuple[int, int]]:
    """Return ``(payload_start, payload_end)`` for each frame, in order.

    Raises:
        TruncatedFrameError: If a frame declares more bytes than remain.
        VarintOverflowError: If a length prefix is malformed or exceeds
            ``max_frame_length``.
    """
    bounds: list[tuple[int, int]] = []
    offset = 0
    while offset < len(data):
        try:
            length, start = decode_varint(data, offset)
            if length > max_frame_length:
                raise VarintOverflowError(offset, reason=f"length {length} exceeds limit {max_frame_length}")
            end = start + length
            if end > len(data):
                raise TruncatedFrameError(offset, declared=length, remaining=len(data) - start)
        except DecodeError as exc:
            exc.frame_index = len(bounds)
            raise
        bounds.append((start, end))
        offset = end
    return bounds


def split_frames(data: bytes, max_frame_length: int = MAX_FRAME_LENGTH) -> list[bytes]:
    """Split a buffer into its payload slices, in order.

    Args:
        data: The raw buffer.
        max_frame_length: Largest payload length accepted.

    Returns:
        One bytes object per frame. An empty buffer yields an empty list.
    """
    return [bytes(data[start:end]) for start, end in frame_bounds(data, max_frame_length)]


def join_frames(payloads: Iterable[bytes]) -> bytes:
    """Prefix each payload with its minimal varint length and concatenate."""
    out = bytearray()
    for payload in payloads:
        out += encode_varint(len(payload))
        out += payload
    return bytes(out)


def payload_offset(data: bytes) -> int:
    """Return the index of the first payload byte in ``data``.

    Only the leading length prefix is decoded; the rest of the buffer is
    not inspected.

    Raises:
        TruncatedFrameError: If the buffer is empty or ends inside the prefix.
        VarintOverflowError: If the prefix is malformed.
    """
    _, start = decode_varint(data, 0)
    return start
