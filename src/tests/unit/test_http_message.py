"""Tests for raw HTTP message parsing."""

import pytest

from blazor_pack.exceptions import HttpMessageError
from blazor_pack.http import HttpMessage, http_body_offset, parse_http_message

RAW_REQUEST = (
    b"POST /_blazor?id=abc HTTP/1.1\r\n"
    b"Host: localhost\r\n"
    b"Content-Type: application/octet-stream\r\n"
    b"Content-Length: 4\r\n"
    b"\r\n"
    b"BODY"
)


def test_body_offset_crlf():
    assert RAW_REQUEST[http_body_offset(RAW_REQUEST):] == b"BODY"


def test_body_offset_bare_lf():
    raw = b"POST / HTTP/1.1\nHost: x\n\nBODY"
    assert raw[http_body_offset(raw):] == b"BODY"


def test_body_offset_uses_first_terminator():
    raw = b"HTTP/1.1 200 OK\r\n\r\nline\n\nmore"
    assert raw[http_body_offset(raw):] == b"line\n\nmore"


def test_body_offset_requires_terminator():
    with pytest.raises(HttpMessageError):
        http_body_offset(b"POST / HTTP/1.1\r\nHost: x\r\n")


def test_parse_request():
    message = parse_http_message(RAW_REQUEST)
    assert message.start_line == "POST /_blazor?id=abc HTTP/1.1"
    assert message.headers[0] == ("Host", "localhost")
    assert message.header("content-type") == "application/octet-stream"
    assert message.content_type == "application/octet-stream"
    assert message.header("X-Missing") is None
    assert message.body == b"BODY"
    assert message.to_bytes() == RAW_REQUEST


def test_body_may_contain_binary():
    raw = b"HTTP/1.1 200 OK\r\nContent-Type: application/octet-stream\r\n\r\n\x04\x92\xa1a\x01"
    assert parse_http_message(raw).body == b"\x04\x92\xa1a\x01"


def test_with_body_updates_content_length():
    message = parse_http_message(RAW_REQUEST).with_body(b"longer body")
    assert message.header("Content-Length") == "11"
    assert message.body == b"longer body"
    assert message.to_bytes().endswith(b"Content-Length: 11\r\n\r\nlonger body")


def test_with_body_adds_missing_content_length():
    message = HttpMessage(start_line="POST /_blazor HTTP/1.1", headers=[("Host", "localhost")])
    rebuilt = message.with_body(b"\x03\x91\xc3\xc0")
    assert rebuilt.headers == [("Host", "localhost"), ("Content-Length", "4")]
    assert rebuilt.to_bytes() == b"POST /_blazor HTTP/1.1\r\nHost: localhost\r\nContent-Length: 4\r\n\r\n\x03\x91\xc3\xc0"


def test_with_body_leaves_chunked_messages_alone():
    message = HttpMessage(start_line="HTTP/1.1 200 OK", headers=[("Transfer-Encoding", "chunked")])
    assert message.with_body(b"abc").headers == [("Transfer-Encoding", "chunked")]


@pytest.mark.parametrize(
    "raw",
    [b"\r\n\r\nbody", b"POST / HTTP/1.1\r\nno colon here\r\n\r\n", b"POST / HTTP/1.1\r\n: empty\r\n\r\n"],
)
def test_malformed_heads(raw):
    with pytest.raises(HttpMessageError):
        parse_http_message(raw)
