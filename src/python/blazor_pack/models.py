"""Value model for decoded BlazorPack messages.

Every MessagePack element maps to one immutable node class.  Containers hold
tuples of child nodes, so a decoded tree is acyclic and owned by its root.

``MsgInt.fmt`` remembers which integer tag the value was read from.  It is
informational only: it does not take part in equality, and the encoder only
honours it when asked to preserve formats.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union

INT_MIN = -(2**63)
UINT_MAX = 2**64 - 1


class IntFormat(str, enum.Enum):
    """MessagePack integer tag families."""

    POSITIVE_FIXINT = "positive_fixint"
    NEGATIVE_FIXINT = "negative_fixint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"

    def fits(self, value: int) -> bool:
        """Check whether ``value`` can be written with this tag."""
        low, high = _INT_FORMAT_RANGES[self]
        return low <= value <= high


_INT_FORMAT_RANGES: dict[IntFormat, tuple[int, int]] = {
    IntFormat.POSITIVE_FIXINT: (0, 0x7F),
    IntFormat.NEGATIVE_FIXINT: (-32, -1),
    IntFormat.UINT8: (0, 2**8 - 1),
    IntFormat.UINT16: (0, 2**16 - 1),
    IntFormat.UINT32: (0, 2**32 - 1),
    IntFormat.UINT64: (0, UINT_MAX),
    IntFormat.INT8: (-(2**7), 2**7 - 1),
    IntFormat.INT16: (-(2**15), 2**15 - 1),
    IntFormat.INT32: (-(2**31), 2**31 - 1),
    IntFormat.INT64: (INT_MIN, 2**63 - 1),
}


@dataclass(frozen=True)
class MsgNil:
    pass


@dataclass(frozen=True)
class MsgBool:
    value: bool


@dataclass(frozen=True)
class MsgInt:
    """A signed integer in the MessagePack range."""

    value: int
    fmt: IntFormat | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"MsgInt value must be int, got {type(self.value).__name__}")
        if not INT_MIN <= self.value <= UINT_MAX:
            raise ValueError(f"Integer {self.value} is outside the MessagePack range")


@dataclass(frozen=True)
class MsgFloat32:
    value: float


@dataclass(frozen=True)
class MsgFloat64:
    value: float


@dataclass(frozen=True)
class MsgStr:
    value: str


@dataclass(frozen=True)
class MsgBin:
    data: bytes


@dataclass(frozen=True)
class MsgArray:
    items: tuple[Value, ...] = ()


@dataclass(frozen=True)
class MsgMap:
    """An ordered sequence of key/value pairs.

    Keys are not required to be unique; lookups return the first match.
    """

    entries: tuple[tuple[Value, Value], ...] = ()

    def get(self, key: Value, default: Value | None = None) -> Value | None:
        for entry_key, entry_value in self.entries:
            if entry_key == key:
                return entry_value
        return default

    def keys(self) -> list[Value]:
        return [key for key, _ in self.entries]


@dataclass(frozen=True)
class MsgExt:
    """An application-defined extension value, kept opaque."""

    type_code: int
    data: bytes

    def __post_init__(self) -> None:
        if not -128 <= self.type_code <= 127:
            raise ValueError(f"Extension type {self.type_code} is outside int8 range")


Value = Union[
    MsgNil,
    MsgBool,
    MsgInt,
    MsgFloat32,
    MsgFloat64,
    MsgStr,
    MsgBin,
    MsgArray,
    MsgMap,
    MsgExt,
]

