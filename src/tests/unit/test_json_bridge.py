"""Tests for the JSON rendering of decoded messages."""

import math
import struct

import pytest

from blazor_pack.exceptions import ParseError
from blazor_pack.json_bridge import from_json, to_json
from blazor_pack.models import (
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
)


@pytest.mark.parametrize(
    "messages, text",
    [
        ([], "[]"),
        ([MsgArray((MsgStr("a"), MsgInt(1)))], '[["a",1]]'),
        ([MsgNil(), MsgBool(True), MsgFloat64(1.0), MsgInt(1)], "[null,true,1.0,1]"),
        ([MsgFloat32(1.5)], '[{"$float32":1.5}]'),
        ([MsgFloat64(math.inf)], '[{"$float64":"Infinity"}]'),
        ([MsgFloat32(-math.inf)], '[{"$float32":"-Infinity"}]'),
        ([MsgBin(b"\x00\x01")], '[{"$bin":"AAE="}]'),
        ([MsgExt(5, b"\x01\x02")], '[{"$ext":5,"$data":"AQI="}]'),
        ([MsgMap(((MsgStr("k"), MsgInt(1)), (MsgStr("a"), MsgInt(2))))], '[{"k":1,"a":2}]'),
        ([MsgMap(((MsgInt(1), MsgStr("one")),))], '[{"$map":[[1,"one"]]}]'),
        ([MsgStr("héllo")], '["héllo"]'),
    ],
)
def test_rendering_and_parsing_are_inverse(messages, text):
    assert to_json(messages) == text
    assert from_json(text) == messages


def test_nan_uses_escape():
    assert to_json([MsgFloat64(math.nan)]) == '[{"$float64":"NaN"}]'
    parsed = from_json('[{"$float64":"NaN"}]')[0]
    assert isinstance(parsed, MsgFloat64)
    assert math.isnan(parsed.value)


def test_duplicate_keys_use_pair_list():
    value = MsgMap(((MsgStr("k"), MsgInt(1)), (MsgStr("k"), MsgInt(2))))
    text = to_json([value])
    assert text == '[{"$map":[["k",1],["k",2]]}]'
    assert from_json(text) == [value]


def test_dollar_keys_use_pair_list():
    value = MsgMap(((MsgStr("$bin"), MsgStr("not binary")),))
    text = to_json([value])
    assert text == '[{"$map":[["$bin","not binary"]]}]'
    assert from_json(text) == [value]


def test_plain_object_with_duplicate_keys_keeps_both():
    assert from_json('[{"k":1,"k":2}]') == [MsgMap(((MsgStr("k"), MsgInt(1)), (MsgStr("k"), MsgInt(2))))]


def test_integers_and_floats_stay_distinct():
    assert from_json("[1.0, 1, -0.5, 18446744073709551615]") == [
        MsgFloat64(1.0),
        MsgInt(1),
        MsgFloat64(-0.5),
        MsgInt(2**64 - 1),
    ]


def test_indent_output_parses_back():
    messages = [MsgArray((MsgInt(1), MsgMap(((MsgStr("a"), MsgNil()),))))]
    text = to_json(messages, indent=2)
    assert "\n  " in text
    assert from_json(text) == messages


def test_float32_is_rounded_to_single_precision():
    parsed = from_json('[{"$float32": 0.1}]')[0]
    assert parsed == MsgFloat32(struct.unpack(">f", struct.pack(">f", 0.1))[0])


def test_bytes_input_and_bare_nan():
    assert from_json(b'["a"]') == [MsgStr("a")]
    parsed = from_json("[NaN]")[0]
    assert isinstance(parsed, MsgFloat64)
    assert math.isnan(parsed.value)


def test_malformed_text_has_no_index():
    with pytest.raises(ParseError) as excinfo:
        from_json("not json")
    assert excinfo.value.index is None
    assert excinfo.value.details["index"] is None


def test_top_level_must_be_array():
    with pytest.raises(ParseError):
        from_json('{"a": 1}')
    with pytest.raises(ParseError):
        from_json("1")


@pytest.mark.parametrize(
    "text, index",
    [
        ('[1, {"$bin": "!!"}]', 1),
        ('[{"$bin": 5}]', 0),
        ('[{"$ext": 300, "$data": ""}]', 0),
        ('[{"$ext": true, "$data": ""}]', 0),
        ('[{"$ext": 1}]', 0),
        ('[{"$foo": 1}]', 0),
        ('[{"$bin": "", "extra": 1}]', 0),
        ('[0, 0, 18446744073709551616]', 2),
        ('[-9223372036854775809]', 0),
        ('[{"$map": [[1]]}]', 0),
        ('[{"$map": {"a": 1}}]', 0),
        ('["\\ud800"]', 0),
        ('[{"$float32": 1e300}]', 0),
        ('[{"$float32": "nan"}]', 0),
        ('[0, {"$float64": 1' + '0' * 400 + '}]', 1),
        ('[{"$float32": -1' + '0' * 400 + '}]', 0),
    ],
)
def test_invalid_elements_report_index(text, index):
    with pytest.raises(ParseError) as excinfo:
        from_json(text)
    assert excinfo.value.index == index


def test_depth_limit():
    assert from_json("[[[]]]", max_depth=2) == [MsgArray((MsgArray(),))]
    with pytest.raises(ParseError) as excinfo:
        from_json("[[[]]]", max_depth=1)
    assert excinfo.value.index == 0


def test_depth_limit_counts_pair_lists():
    with pytest.raises(ParseError):
        from_json('[{"$map": [[1, [2]]]}]', max_depth=1)
    assert from_json('[{"$map": [[1, 2]]}]', max_depth=1) == [MsgMap(((MsgInt(1), MsgInt(2)),))]


def test_escape_objects_do_not_count_as_nesting():
    assert from_json('[{"$bin": "AA=="}]', max_depth=1) == [MsgBin(b"\x00")]


def test_oversized_integer_literal_is_a_parse_error():
    with pytest.raises(ParseError):
        from_json("[" + "1" * 5000 + "]")
