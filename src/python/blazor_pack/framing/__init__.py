# Framing subpackage

from .framer import frame_bounds, join_frames, payload_offset, split_frames
from .varint import MAX_FRAME_LENGTH, MAX_VARINT_BYTES, decode_varint, encode_varint, varint_size

__all__ = [
    "MAX_FRAME_LENGTH",
    "MAX_VARINT_BYTES",
    "decode_varint",
    "encode_varint",
    "frame_bounds",
    "join_frames",
    "payload_offset",
    "split_frames",
    "varint_size",
]
