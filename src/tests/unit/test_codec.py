"""Tests for the message codec entry points."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from blazor_pack.codec import (
    decode_to_json,
    encode_from_json,
    locate_payload_offset,
    pack_messages,
    unpack_messages,
)
from blazor_pack.config import CodecConfig
from blazor_pack.exceptions import CodecResultError, NestingTooDeepError, UnknownTagError
from blazor_pack.models import MsgArray, MsgBool, MsgInt, MsgNil, MsgStr
from blazor_pack.result import CodecStatus

INVOCATION_JSON = '[[1,{},null,"BeginInvokeDotNetFromJS",["1",null,"DispatchEventAsync",1,"[]"]],[6]]'


def test_two_frames_decode_to_json(two_frame_body):
    result = decode_to_json(two_frame_body)
    assert result.is_success
    assert result.status == CodecStatus.OK
    assert result.value == '[["a",1],[true,null]]'


def test_json_encodes_to_two_frames(two_frame_body):
    result = encode_from_json('[["a", 1], [true, null]]')
    assert result.unwrap() == two_frame_body


def test_unpack_messages(two_frame_body):
    assert unpack_messages(two_frame_body) == [
        MsgArray((MsgStr("a"), MsgInt(1))),
        MsgArray((MsgBool(True), MsgNil())),
    ]


def test_empty_buffer_and_empty_array():
    assert decode_to_json(b"").unwrap() == "[]"
    assert encode_from_json("[]").unwrap() == b""


def test_invocation_decodes(invocation_body):
    assert decode_to_json(invocation_body).unwrap() == INVOCATION_JSON


def test_json_round_trip_normalises_integer_width(invocation_body):
    packed = encode_from_json(decode_to_json(invocation_body).unwrap()).unwrap()
    # The int32 call argument comes back as a one-byte fixint.
    assert len(packed) == len(invocation_body) - 4
    assert decode_to_json(packed).unwrap() == INVOCATION_JSON


def test_preserve_format_reproduces_captured_bytes(invocation_body):
    messages = unpack_messages(invocation_body)
    assert pack_messages(messages, preserve_format=True) == invocation_body
    assert unpack_messages(pack_messages(messages)) == messages


def test_truncated_buffer_fails_whole_batch(two_frame_body):
    result = decode_to_json(two_frame_body[:-1])
    assert not result.is_success
    assert result.status == CodecStatus.FAILED
    assert result.value is None
    assert result.error_type == "TruncatedFrameError"
    assert result.details["frame_index"] == 1
    assert result.details["declared"] == 3
    assert result.details["remaining"] == 2


def test_bad_value_in_second_frame_is_rebased():
    data = b"\x01\x01" + b"\x02\x91\xc1"
    with pytest.raises(UnknownTagError) as excinfo:
        unpack_messages(data)
    assert excinfo.value.frame_index == 1
    # Tag sits at payload offset 1 of a frame whose payload starts at 3.
    assert excinfo.value.offset == 4

    result = decode_to_json(data)
    assert result.error_type == "UnknownTagError"
    assert result.details == {"offset": 4, "frame_index": 1, "tag": 0xC1}


def test_depth_limit_from_config():
    data = b"\x03\x91\x91\xc0"
    assert decode_to_json(data).unwrap() == "[[[null]]]"

    config = CodecConfig(max_depth=1)
    with pytest.raises(NestingTooDeepError):
        unpack_messages(data, config)
    result = decode_to_json(data, config)
    assert result.error_type == "NestingTooDeepError"
    assert result.details["limit"] == 1

    failed = encode_from_json("[[[null]]]", config)
    assert failed.error_type == "ParseError"
    assert failed.details["index"] == 0


def test_frame_length_limit_from_config(two_frame_body):
    result = decode_to_json(two_frame_body, CodecConfig(max_frame_length=3))
    assert result.error_type == "VarintOverflowError"
    assert result.details["frame_index"] == 0


def test_indent_from_config(two_frame_body):
    text = decode_to_json(two_frame_body, CodecConfig(json_indent=2)).unwrap()
    assert text.startswith("[\n  [\n")
    assert encode_from_json(text).unwrap() == two_frame_body


def test_preserve_int_format_from_config():
    # Integers parsed from JSON carry no recorded width.
    config = CodecConfig(preserve_int_format=True)
    assert encode_from_json("[[300]]", config).unwrap() == b"\x04\x91\xcd\x01\x2c"


def test_invalid_json_result():
    result = encode_from_json("[1, {\"$bin\": 7}]")
    assert result.error_type == "ParseError"
    assert result.details["index"] == 1
    with pytest.raises(CodecResultError) as excinfo:
        result.unwrap()
    assert excinfo.value.error_type == "ParseError"


def test_negotiation_probe_is_not_blazorpack():
    # "{" is 0x7b, read as a length far past the end of the probe.
    result = decode_to_json(b"{}\x1e")
    assert result.error_type == "TruncatedFrameError"


def test_locate_payload_offset(two_frame_body):
    assert locate_payload_offset(two_frame_body).unwrap() == 1
    assert locate_payload_offset(b"\xc8\x01" + b"\x00" * 200).unwrap() == 2

    result = locate_payload_offset(b"")
    assert result.error_type == "TruncatedFrameError"


def test_concurrent_calls_share_no_state(two_frame_body, invocation_body):
    bodies = [two_frame_body, invocation_body] * 50
    with ThreadPoolExecutor(max_workers=8) as pool:
        texts = list(pool.map(lambda body: decode_to_json(body).unwrap(), bodies))
        packed = list(pool.map(lambda text: encode_from_json(text).unwrap(), texts))
    assert texts[0] == '[["a",1],[true,null]]'
    assert texts[1] == INVOCATION_JSON
    assert packed[0] == two_frame_body
    assert all(text == texts[i % 2] for i, text in enumerate(texts))


@pytest.mark.parametrize(
    "text",
    [
        "[" + "1" * 5000 + "]",
        '[{"$float64": 1' + "0" * 400 + "}]",
        '[{"$float32": 1' + "0" * 400 + "}]",
    ],
)
def test_oversized_numbers_fail_as_results(text):
    result = encode_from_json(text)
    assert not result.is_success
    assert result.error_type == "ParseError"
