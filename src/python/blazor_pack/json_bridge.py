"""Lossless mapping between decoded messages and JSON text.

A buffer's messages are rendered as one JSON array, one element per message.
Values JSON can express natively map directly; the rest use escape objects
whose keys start with ``$``::

    Bin                 {"$bin": "<base64>"}
    Extension           {"$ext": <type>, "$data": "<base64>"}
    Float32             {"$float32": <number | "NaN" | "Infinity" | "-Infinity">}
    non-finite Float64  {"$float64": "NaN" | "Infinity" | "-Infinity"}
    other maps          {"$map": [[<key>, <value>], ...]}

A map becomes a plain JSON object only when every key is a string, keys are
unique and none starts with ``$``.  Every other map, including maps with
integer keys or duplicate keys, uses the ``$map`` pair list so that order
and keys survive the trip back.  Conversely, a JSON object carrying any
``$`` key must be exactly one of the escape forms above.

Integers stay JSON integers and finite float64 values are always written
with a fraction or exponent, so the two remain distinct after parsing.
"""

from __future__ import annotations

import json
import math
import struct
from typing import Any, Sequence

from blazor_pack.exceptions import ParseError
from blazor_pack.messagepack.decoder import MAX_NESTING_DEPTH
from blazor_pack.models import (
    INT_MIN,
    UINT_MAX,
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
from blazor_pack.utils import Base64Util

ESCAPE_PREFIX = "$"
BIN_KEY = "$bin"
EXT_KEY = "$ext"
EXT_DATA_KEY = "$data"
FLOAT32_KEY = "$float32"
FLOAT64_KEY = "$float64"
MAP_KEY = "$map"

_NON_FINITE = {"NaN": math.nan, "Infinity": math.inf, "-Infinity": -math.inf}


# ── Value -> JSON ─────────────────────────────────────────────────


def to_json(messages: Sequence[Value], indent: int | None = None) -> str:
    """Render messages as a JSON array string.

    Args:
        messages: Decoded messages, in buffer order.
        indent: Pretty-print indentation; compact output when None.

    Returns:
        JSON text whose top-level array has one element per message.
    """
    document = [_to_plain(message) for message in messages]
    separators = (",", ":") if indent is None else None
    return json.dumps(
        document,
        ensure_ascii=False,
        allow_nan=False,
        indent=indent,
        separators=separators,
    )


def _non_finite_name(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return "Infinity" if value > 0 else "-Infinity"


def _is_plain_object(value: MsgMap) -> bool:
    seen: set[str] = set()
    for key, _ in value.entries:
        if not isinstance(key, MsgStr):
            return False
        if key.value.startswith(ESCAPE_PREFIX) or key.value in seen:
            return False
        seen.add(key.value)
    return True


def _to_plain(value: Value) -> Any:
    if isinstance(value, MsgNil):
        return None
    if isinstance(value, MsgBool):
        return value.value
    if isinstance(value, MsgInt):
        return value.value
    if isinstance(value, MsgFloat64):
        if math.isfinite(value.value):
            return value.value
        return {FLOAT64_KEY: _non_finite_name(value.value)}
    if isinstance(value, MsgFloat32):
        if math.isfinite(value.value):
            return {FLOAT32_KEY: value.value}
        return {FLOAT32_KEY: _non_finite_name(value.value)}
    if isinstance(value, MsgStr):
        return value.value
    if isinstance(value, MsgBin):
        return {BIN_KEY: Base64Util.to_base64(value.data)}
    if isinstance(value, MsgExt):
        return {EXT_KEY: value.type_code, EXT_DATA_KEY: Base64Util.to_base64(value.data)}
    if isinstance(value, MsgArray):
        return [_to_plain(item) for item in value.items]
    if isinstance(value, MsgMap):
        if _is_plain_object(value):
            return {key.value: _to_plain(item) for key, item in value.entries}
        return {MAP_KEY: [[_to_plain(key), _to_plain(item)] for key, item in value.entries]}
    raise TypeError(f"Cannot render {type(value).__name__} as JSON")


# ── JSON -> Value ─────────────────────────────────────────────────


class _JsonObject(list):
    """Ordered key/value pairs of a JSON object, duplicates included."""


class _ElementParser:
    """Converts one top-level JSON element into a value tree."""

    def __init__(self, index: int, max_depth: int) -> None:
        self._index = index
        self._max_depth = max_depth

    def fail(self, reason: str) -> ParseError:
        return ParseError(reason, index=self._index)

    def parse(self, node: Any, depth: int = 1) -> Value:
        if node is None:
            return MsgNil()
        if isinstance(node, bool):
            return MsgBool(node)
        if isinstance(node, int):
            if not INT_MIN <= node <= UINT_MAX:
                raise self.fail(f"integer {node} is outside the MessagePack range")
            return MsgInt(node)
        if isinstance(node, float):
            return MsgFloat64(node)
        if isinstance(node, str):
            return MsgStr(self._text(node))
        if isinstance(node, _JsonObject):
            if any(key.startswith(ESCAPE_PREFIX) for key, _ in node):
                return self._escape(node, depth)
            self._enter(depth)
            return MsgMap(tuple((MsgStr(self._text(key)), self.parse(item, depth + 1)) for key, item in node))
        if isinstance(node, list):
            self._enter(depth)
            return MsgArray(tuple(self.parse(item, depth + 1) for item in node))
        raise self.fail(f"unsupported JSON node {type(node).__name__}")

    def _enter(self, depth: int) -> None:
        if depth > self._max_depth:
            raise self.fail(f"nesting exceeds maximum depth of {self._max_depth}")

    def _text(self, text: str) -> str:
        try:
            text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise self.fail(f"string is not encodable as UTF-8: {exc.reason}") from exc
        return text

    def _base64(self, text: Any, key: str) -> bytes:
        if not isinstance(text, str):
            raise self.fail(f"{key} must be a base64 string")
        try:
            return Base64Util.from_base64(text)
        except ValueError as exc:
            raise self.fail(f"{key}: {exc}") from exc

    def _escape(self, node: _JsonObject, depth: int) -> Value:
        fields = dict(node)
        keys = [key for key, _ in node]
        if len(fields) != len(keys):
            raise self.fail(f"escape object has duplicate keys: {keys}")

        if keys == [BIN_KEY]:
            return MsgBin(self._base64(fields[BIN_KEY], BIN_KEY))
        if set(keys) == {EXT_KEY, EXT_DATA_KEY}:
            type_code = fields[EXT_KEY]
            if isinstance(type_code, bool) or not isinstance(type_code, int) or not -128 <= type_code <= 127:
                raise self.fail(f"{EXT_KEY} must be an integer in -128..127, got {type_code!r}")
            return MsgExt(type_code, self._base64(fields[EXT_DATA_KEY], EXT_DATA_KEY))
        if keys == [FLOAT32_KEY]:
            return MsgFloat32(self._float32(fields[FLOAT32_KEY]))
        if keys == [FLOAT64_KEY]:
            return MsgFloat64(self._float(fields[FLOAT64_KEY], FLOAT64_KEY))
        if keys == [MAP_KEY]:
            self._enter(depth)
            return self._pairs(fields[MAP_KEY], depth)
        raise self.fail(f"unrecognised escape object with keys {keys}")

    def _float(self, raw: Any, key: str) -> float:
        if isinstance(raw, str):
            if raw not in _NON_FINITE:
                raise self.fail(f"{key} string must be one of {sorted(_NON_FINITE)}, got {raw!r}")
            return _NON_FINITE[raw]
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise self.fail(f"{key} must be a number, got {raw!r}")
        try:
            return float(raw)
        except OverflowError as exc:
            raise self.fail(f"{key} value {raw!r} does not fit in a float") from exc

    def _float32(self, raw: Any) -> float:
        value = self._float(raw, FLOAT32_KEY)
        if not math.isfinite(value):
            return value
        try:
            # Round to the nearest single so the stored value is what gets sent.
            return struct.unpack(">f", struct.pack(">f", value))[0]
        except OverflowError as exc:
            raise self.fail(f"{value!r} does not fit in a float32") from exc

    def _pairs(self, raw: Any, depth: int) -> MsgMap:
        if not isinstance(raw, list) or isinstance(raw, _JsonObject):
            raise self.fail(f"{MAP_KEY} must be a list of [key, value] pairs")
        entries = []
        for pair in raw:
            if not isinstance(pair, list) or isinstance(pair, _JsonObject) or len(pair) != 2:
                raise self.fail(f"{MAP_KEY} entries must be [key, value] pairs, got {pair!r}")
            entries.append((self.parse(pair[0], depth + 1), self.parse(pair[1], depth + 1)))
        return MsgMap(tuple(entries))


def from_json(text: str | bytes, max_depth: int = MAX_NESTING_DEPTH) -> list[Value]:
    """Parse a JSON array back into messages.

    Args:
        text: JSON text, as produced by :func:`to_json` or edited by a user.
        max_depth: Deepest container nesting accepted per message.

    Returns:
        One value per array element, in order.

    Raises:
        ParseError: If the text is not a JSON array, or an element cannot be
            represented as a MessagePack value. ``index`` names the element.
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"JSON text is not valid UTF-8: {exc.reason}") from exc
    try:
        document = json.loads(text, object_pairs_hook=_JsonObject)
    except json.JSONDecodeError as exc:
        raise ParseError(f"{exc.msg} (line {exc.lineno}, column {exc.colno})") from exc
    except RecursionError as exc:
        raise ParseError("JSON nesting is too deep") from exc
    except ValueError as exc:
        # Integer literals past the interpreter's digit limit
        raise ParseError(str(exc)) from exc

    if not isinstance(document, list) or isinstance(document, _JsonObject):
        raise ParseError("top-level JSON value must be an array of messages")
    return [_ElementParser(index, max_depth).parse(element) for index, element in enumerate(document)]
