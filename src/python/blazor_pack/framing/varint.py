"""Unsigned LEB128 length prefixes used by the BlazorPack framing.

Each byte carries seven bits of the value, least significant group first.
The high bit of a byte is set when another byte follows::

    127   -> 7f
    128   -> 80 01
    16384 -> 80 80 01

SignalR caps the prefix at five bytes and rejects lengths above 2 GiB, so
the fifth byte may only contribute its low three bits.  Non-minimal forms
(``80 00``) are accepted when they fit in five bytes but are never written.
"""

from __future__ import annotations

from blazor_pack.exceptions import TruncatedFrameError, VarintOverflowError

MAX_VARINT_BYTES = 5
MAX_FRAME_LENGTH = 2**31 - 1

# Highest value the fifth byte may hold without exceeding MAX_FRAME_LENGTH
_LAST_BYTE_MAX = MAX_FRAME_LENGTH >> (7 * (MAX_VARINT_BYTES - 1))


def encode_varint(value: int) -> bytes:
    """Encode a frame length in its minimal LEB128 form.

    Raises:
        ValueError: If value is negative.
        VarintOverflowError: If value exceeds MAX_FRAME_LENGTH.
    """
    if value < 0:
        raise ValueError("Varint must be non-negative")
    if value > MAX_FRAME_LENGTH:
        raise VarintOverflowError(reason=f"length {value} exceeds {MAX_FRAME_LENGTH}")

    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a length prefix starting at ``offset``.

    Returns:
        The decoded value and the offset of the first byte after it.

    Raises:
        TruncatedFrameError: If the buffer ends inside the prefix.
        VarintOverflowError: If the prefix is longer than five bytes or
            encodes a length above MAX_FRAME_LENGTH.
    """
    result = 0
    pos = offset
    for index in range(MAX_VARINT_BYTES):
        if pos >= len(data):
            raise TruncatedFrameError(offset=offset)
        byte = data[pos]
        pos += 1
        if index == MAX_VARINT_BYTES - 1 and byte > _LAST_BYTE_MAX:
            raise VarintOverflowError(offset, reason=f"messages over {MAX_FRAME_LENGTH} bytes are not supported")
        result |= (byte & 0x7F) << (7 * index)
        if not byte & 0x80:
            return result, pos
    # Unreachable: the fifth byte is either rejected above or terminates.
    raise VarintOverflowError(offset, reason=f"more than {MAX_VARINT_BYTES} bytes")


def varint_size(value: int) -> int:
    """Number of bytes the minimal encoding of ``value`` occupies."""
    return len(encode_varint(value))
