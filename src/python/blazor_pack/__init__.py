"""BlazorPack codec: SignalR binary hub traffic to JSON and back.

Converts the varint-framed MessagePack bodies exchanged by server-rendered
Blazor sessions into an editable JSON array, and packs edited JSON back into
bytes that can be sent as a request body.

Quick Start::

    from blazor_pack import decode_to_json, encode_from_json

    result = decode_to_json(body)
    if result.is_success:
        print(result.value)          # '[["a",1]]'

    packed = encode_from_json('[["a", 1]]').unwrap()

Lower-level helpers raise instead of returning results::

    from blazor_pack import unpack_messages, pack_messages

    messages = unpack_messages(body)
    assert pack_messages(messages, preserve_format=True) == body
"""

from importlib.metadata import PackageNotFoundError, version

from .codec import (
    decode_to_json,
    encode_from_json,
    locate_payload_offset,
    pack_messages,
    unpack_messages,
)
from .config import CodecConfig, dump_config, load_config
from .exceptions import (
    BlazorPackError,
    CodecResultError,
    DecodeError,
    EmptyBodyError,
    FrameError,
    HttpMessageError,
    InvalidUtf8Error,
    NestingTooDeepError,
    ParseError,
    TrailingDataError,
    TruncatedFrameError,
    TruncatedValueError,
    UnknownTagError,
    VarintOverflowError,
)
from .framing import join_frames, payload_offset, split_frames
from .json_bridge import from_json, to_json
from .messagepack import decode_payload, decode_value, encode_value
from .models import (
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
from .result import CodecResult, CodecStatus

try:
    __version__ = version("blazor-pack-lib")
except PackageNotFoundError:  # pragma: no cover - running from a source tree
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    # Caller-facing operations
    "decode_to_json",
    "encode_from_json",
    "locate_payload_offset",
    "CodecResult",
    "CodecStatus",
    # Messages
    "pack_messages",
    "unpack_messages",
    # Framing
    "join_frames",
    "payload_offset",
    "split_frames",
    # Values
    "decode_payload",
    "decode_value",
    "encode_value",
    "IntFormat",
    "MsgArray",
    "MsgBin",
    "MsgBool",
    "MsgExt",
    "MsgFloat32",
    "MsgFloat64",
    "MsgInt",
    "MsgMap",
    "MsgNil",
    "MsgStr",
    "Value",
    # JSON
    "from_json",
    "to_json",
    # Config
    "CodecConfig",
    "dump_config",
    "load_config",
    # Exceptions
    "BlazorPackError",
    "CodecResultError",
    "DecodeError",
    "EmptyBodyError",
    "FrameError",
    "HttpMessageError",
    "InvalidUtf8Error",
    "NestingTooDeepError",
    "ParseError",
    "TrailingDataError",
    "TruncatedFrameError",
    "TruncatedValueError",
    "UnknownTagError",
    "VarintOverflowError",
]
