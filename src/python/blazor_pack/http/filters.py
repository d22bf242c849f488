"""Decide whether a captured body carries BlazorPack traffic."""

from __future__ import annotations

import logging

from blazor_pack.http.message import HttpMessage

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"
BLAZOR_URL_MARKER = "_blazor"

# "{}" followed by the record separator: the handshake reply, not BlazorPack
NEGOTIATION_PROBE = b"{}\x1e"


def is_negotiation_probe(body: bytes) -> bool:
    return bytes(body) == NEGOTIATION_PROBE


def is_octet_stream(content_type: str | None) -> bool:
    return content_type is not None and OCTET_STREAM in content_type.lower()


def is_blazor_body(body: bytes | None, content_type: str | None) -> bool:
    """Check the codec's applicability rule for a body.

    The body must be declared as an octet stream, be non-empty, and not be
    the negotiation probe.
    """
    if not body:
        return False
    if not is_octet_stream(content_type):
        return False
    return not is_negotiation_probe(body)


def is_blazor_request(url: str | None, message: HttpMessage | None) -> bool:
    """Check whether a captured request should be shown as BlazorPack."""
    if message is None or not message.body:
        logger.debug("Request body is empty")
        return False
    if url is None or BLAZOR_URL_MARKER not in url:
        logger.debug("URL %s is not a Blazor hub endpoint", url)
        return False
    if is_negotiation_probe(message.body):
        logger.debug("Request body is the negotiation probe")
        return False
    return True


def is_blazor_response(message: HttpMessage | None) -> bool:
    """Check whether a captured response should be shown as BlazorPack."""
    if message is None:
        return False
    eligible = is_blazor_body(message.body, message.content_type)
    if not eligible:
        logger.debug("Response with Content-Type %s is not BlazorPack", message.content_type)
    return eligible
