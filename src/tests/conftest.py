"""Shared BlazorPack samples."""

import pytest

# ["a", 1] and [true, null] as MessagePack payloads
FIRST_PAYLOAD = b"\x92\xa1a\x01"
SECOND_PAYLOAD = b"\x92\xc3\xc0"


def frame(payload: bytes) -> bytes:
    """Prefix a payload shorter than 128 bytes with its one-byte length."""
    assert len(payload) < 0x80
    return bytes([len(payload)]) + payload


@pytest.fixture
def two_frame_body() -> bytes:
    return frame(FIRST_PAYLOAD) + frame(SECOND_PAYLOAD)


@pytest.fixture
def invocation_body() -> bytes:
    """A captured BeginInvokeDotNetFromJS invocation followed by a ping.

    The call id is sent as an int32 even though it fits in a fixint, the way
    some clients write it.
    """
    invocation = (
        b"\x95"                                  # array of 5
        b"\x01"                                  # invocation
        b"\x80"                                  # headers {}
        b"\xc0"                                  # invocation id nil
        b"\xb7BeginInvokeDotNetFromJS"
        b"\x95"
        b"\xa11"
        b"\xc0"
        b"\xb2DispatchEventAsync"
        b"\xd2\x00\x00\x00\x01"                  # int32 1
        b"\xa2[]"
    )
    ping = b"\x91\x06"
    return frame(invocation) + frame(ping)
