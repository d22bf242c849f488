"""MessagePack encoder for the value model.

Scalars and container headers are written by ``msgpack.Packer``, which
always picks the smallest tag that holds the value: fixint before
uint8/int8, fixstr before str8, and so on.  This means an integer decoded
from an ``int32`` tag may come back as a fixint; the value is unchanged, only
the width is normalised.  Pass ``preserve_format=True`` to re-emit the
recorded integer tag wherever it can still hold the value.

Packers keep an internal buffer, so one is created per call.
"""

from __future__ import annotations

import struct

import msgpack

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

# Explicit integer tags: format -> (tag byte, struct format)
_INT_LAYOUTS: dict[IntFormat, tuple[int, str]] = {
    IntFormat.UINT8: (0xCC, ">B"),
    IntFormat.UINT16: (0xCD, ">H"),
    IntFormat.UINT32: (0xCE, ">I"),
    IntFormat.UINT64: (0xCF, ">Q"),
    IntFormat.INT8: (0xD0, ">b"),
    IntFormat.INT16: (0xD1, ">h"),
    IntFormat.INT32: (0xD2, ">i"),
    IntFormat.INT64: (0xD3, ">q"),
}

_FIXEXT_TAGS = {1: 0xD4, 2: 0xD5, 4: 0xD6, 8: 0xD7, 16: 0xD8}


class _Encoder:
    def __init__(self, preserve_format: bool) -> None:
        self._preserve_format = preserve_format
        self._packer = msgpack.Packer(use_bin_type=True, autoreset=True)
        self._single_packer = msgpack.Packer(use_bin_type=True, use_single_float=True, autoreset=True)
        self._out = bytearray()

    def encode(self, value: Value) -> bytes:
        self._write(value)
        return bytes(self._out)

    def _write(self, value: Value) -> None:
        out = self._out
        if isinstance(value, MsgNil):
            out += self._packer.pack(None)
        elif isinstance(value, MsgBool):
            out += self._packer.pack(value.value)
        elif isinstance(value, MsgInt):
            out += self._int(value)
        elif isinstance(value, MsgFloat32):
            out += self._single_packer.pack(float(value.value))
        elif isinstance(value, MsgFloat64):
            out += self._packer.pack(float(value.value))
        elif isinstance(value, MsgStr):
            out += self._packer.pack(value.value)
        elif isinstance(value, MsgBin):
            out += self._packer.pack(bytes(value.data))
        elif isinstance(value, MsgArray):
            out += self._packer.pack_array_header(len(value.items))
            for item in value.items:
                self._write(item)
        elif isinstance(value, MsgMap):
            out += self._packer.pack_map_header(len(value.entries))
            for key, item in value.entries:
                self._write(key)
                self._write(item)
        elif isinstance(value, MsgExt):
            out += _ext_header(value.type_code, len(value.data))
            out += value.data
        else:
            raise TypeError(f"Cannot encode {type(value).__name__} as a MessagePack value")

    def _int(self, value: MsgInt) -> bytes:
        fmt = value.fmt
        if self._preserve_format and fmt is not None and fmt.fits(value.value):
            if fmt in _INT_LAYOUTS:
                tag, layout = _INT_LAYOUTS[fmt]
                return bytes([tag]) + struct.pack(layout, value.value)
        # Fixints are already minimal, so the packer reproduces them as well.
        return self._packer.pack(value.value)


def _ext_header(type_code: int, length: int) -> bytes:
    # msgpack.ExtType only admits codes 0..127, the header is written here.
    if length in _FIXEXT_TAGS:
        return struct.pack(">Bb", _FIXEXT_TAGS[length], type_code)
    if length < 2**8:
        return struct.pack(">BBb", 0xC7, length, type_code)
    if length < 2**16:
        return struct.pack(">BHb", 0xC8, length, type_code)
    return struct.pack(">BIb", 0xC9, length, type_code)


def encode_value(value: Value, *, preserve_format: bool = False) -> bytes:
    """Encode one value tree to MessagePack bytes.

    Args:
        value: Root of the value tree.
        preserve_format: Re-emit recorded integer widths where they still
            fit, so an unedited decoded tree encodes byte-identically.

    Returns:
        The encoded bytes.

    Raises:
        TypeError: If the tree contains an object that is not a value node.
    """
    return _Encoder(preserve_format).encode(value)
