"""MessagePack decoder producing the width-tagged value model.

Unlike ``msgpack.unpackb`` this decoder keeps the distinctions the editor
needs for a faithful round trip: the integer tag family, float32 versus
float64, and bin versus str.  It also refuses input that would otherwise be
silently repaired (invalid UTF-8) and bounds recursion, since captured
traffic is untrusted.
"""

from __future__ import annotations

import struct

from blazor_pack.exceptions import (
    InvalidUtf8Error,
    NestingTooDeepError,
    TrailingDataError,
    TruncatedValueError,
    UnknownTagError,
)
from blazor_pack.models import (
    IntFormat,
    MsgArray,
    MsgBin,
    MsgBool,
    MsgExt,
    MsgFloat32,
    MsgFloat64,
    MsgInt,
    MsgMap,
    MsgNil,
    MsgStr,
    Value,
)

MAX_NESTING_DEPTH = 100

# Fixed-width integer tags: tag -> (struct format, size, recorded format)
_INT_TAGS: dict[int, tuple[str, int, IntFormat]] = {
    0xCC: (">B", 1, IntFormat.UINT8),
    0xCD: (">H", 2, IntFormat.UINT16),
    0xCE: (">I", 4, IntFormat.UINT32),
    0xCF: (">Q", 8, IntFormat.UINT64),
    0xD0: (">b", 1, IntFormat.INT8),
    0xD1: (">h", 2, IntFormat.INT16),
    0xD2: (">i", 4, IntFormat.INT32),
    0xD3: (">q", 8, IntFormat.INT64),
}

# Length-prefixed tags: tag -> (struct format, size)
_STR_TAGS = {0xD9: (">B", 1), 0xDA: (">H", 2), 0xDB: (">I", 4)}
_BIN_TAGS = {0xC4: (">B", 1), 0xC5: (">H", 2), 0xC6: (">I", 4)}
_ARRAY_TAGS = {0xDC: (">H", 2), 0xDD: (">I", 4)}
_MAP_TAGS = {0xDE: (">H", 2), 0xDF: (">I", 4)}
_EXT_TAGS = {0xC7: (">B", 1), 0xC8: (">H", 2), 0xC9: (">I", 4)}

# fixext tag -> payload size
_FIXEXT_TAGS = {0xD4: 1, 0xD5: 2, 0xD6: 4, 0xD7: 8, 0xD8: 16}


class _Reader:
    """Cursor over one payload."""

    def __init__(self, data: bytes, offset: int, max_depth: int) -> None:
        self._data = data
        self.pos = offset
        self._max_depth = max_depth

    def _read(self, n: int) -> bytes:
        end = self.pos + n
        if end > len(self._data):
            raise TruncatedValueError(len(self._data), needed=end - len(self._data))
        chunk = self._data[self.pos:end]
        self.pos = end
        return bytes(chunk)

    def _unpack(self, fmt: str, size: int) -> int:
        return struct.unpack(fmt, self._read(size))[0]

    def read_value(self, depth: int = 1) -> Value:
        start = self.pos
        tag = self._read(1)[0]

        if tag <= 0x7F:
            return MsgInt(tag, IntFormat.POSITIVE_FIXINT)
        if tag >= 0xE0:
            return MsgInt(tag - 0x100, IntFormat.NEGATIVE_FIXINT)
        if 0x80 <= tag <= 0x8F:
            return self._read_map(tag & 0x0F, depth, start)
        if 0x90 <= tag <= 0x9F:
            return self._read_array(tag & 0x0F, depth, start)
        if 0xA0 <= tag <= 0xBF:
            return self._read_str(tag & 0x1F)

        if tag == 0xC0:
            return MsgNil()
        if tag == 0xC2:
            return MsgBool(False)
        if tag == 0xC3:
            return MsgBool(True)
        if tag == 0xCA:
            return MsgFloat32(struct.unpack(">f", self._read(4))[0])
        if tag == 0xCB:
            return MsgFloat64(struct.unpack(">d", self._read(8))[0])

        if tag in _INT_TAGS:
            fmt, size, int_format = _INT_TAGS[tag]
            return MsgInt(self._unpack(fmt, size), int_format)
        if tag in _STR_TAGS:
            return self._read_str(self._unpack(*_STR_TAGS[tag]))
        if tag in _BIN_TAGS:
            return MsgBin(self._read(self._unpack(*_BIN_TAGS[tag])))
        if tag in _ARRAY_TAGS:
            return self._read_array(self._unpack(*_ARRAY_TAGS[tag]), depth, start)
        if tag in _MAP_TAGS:
            return self._read_map(self._unpack(*_MAP_TAGS[tag]), depth, start)
        if tag in _FIXEXT_TAGS:
            return self._read_ext(_FIXEXT_TAGS[tag])
        if tag in _EXT_TAGS:
            return self._read_ext(self._unpack(*_EXT_TAGS[tag]))

        # 0xc1 is the only byte left: reserved ("never used")
        raise UnknownTagError(tag, start)

    def _read_str(self, length: int) -> MsgStr:
        start = self.pos
        raw = self._read(length)
        try:
            return MsgStr(raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise InvalidUtf8Error(start + exc.start, reason=exc.reason) from exc

    def _read_ext(self, length: int) -> MsgExt:
        type_code = struct.unpack(">b", self._read(1))[0]
        return MsgExt(type_code, self._read(length))

    def _enter(self, depth: int, start: int) -> None:
        if depth > self._max_depth:
            raise NestingTooDeepError(self._max_depth, start)

    def _read_array(self, length: int, depth: int, start: int) -> MsgArray:
        self._enter(depth, start)
        return MsgArray(tuple(self.read_value(depth + 1) for _ in range(length)))

    def _read_map(self, length: int, depth: int, start: int) -> MsgMap:
        self._enter(depth, start)
        entries = []
        for _ in range(length):
            key = self.read_value(depth + 1)
            value = self.read_value(depth + 1)
            entries.append((key, value))
        return MsgMap(tuple(entries))


def decode_value(data: bytes, offset: int = 0, max_depth: int = MAX_NESTING_DEPTH) -> tuple[Value, int]:
    """Decode one value starting at ``offset``.

    Args:
        data: Buffer holding MessagePack bytes.
        offset: Where the value's tag byte sits.
        max_depth: Deepest container nesting accepted. The top-level value
            sits at depth 1.

    Returns:
        The decoded value and the offset just past it.

    Raises:
        UnknownTagError: On the reserved tag byte.
        NestingTooDeepError: If containers nest deeper than ``max_depth``.
        InvalidUtf8Error: If a string is not valid UTF-8.
        TruncatedValueError: If the buffer ends inside the value.
    """
    reader = _Reader(data, offset, max_depth)
    value = reader.read_value()
    return value, reader.pos


def decode_payload(payload: bytes, max_depth: int = MAX_NESTING_DEPTH) -> Value:
    """Decode a frame payload that must hold exactly one value.

    Raises:
        TrailingDataError: If bytes remain after the value.
    """
    value, end = decode_value(payload, 0, max_depth)
    if end != len(payload):
        raise TrailingDataError(end, remaining=len(payload) - end)
    return value
