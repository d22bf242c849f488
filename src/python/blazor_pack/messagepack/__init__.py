# MessagePack value codec

from .decoder import MAX_NESTING_DEPTH, decode_payload, decode_value
from .encoder import encode_value

__all__ = [
    "MAX_NESTING_DEPTH",
    "decode_payload",
    "decode_value",
    "encode_value",
]
