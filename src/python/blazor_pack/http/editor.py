"""Render captured HTTP messages for editing and rebuild them afterwards.

The editing view is the original message with its BlazorPack body replaced
by the JSON rendering of its messages.  After an edit, the JSON body is
packed again and the (possibly edited) head is kept.  An unmodified view
gives back the original message untouched, so no re-encoding happens unless
the user changed something.
"""

from __future__ import annotations

import logging

from blazor_pack.codec import decode_to_json, pack_messages
from blazor_pack.config import DEFAULT_CONFIG, CodecConfig
from blazor_pack.exceptions import EmptyBodyError
from blazor_pack.http.filters import is_blazor_request, is_blazor_response
from blazor_pack.http.message import HttpMessage, http_body_offset, parse_http_message
from blazor_pack.json_bridge import from_json

logger = logging.getLogger(__name__)

CAPTION = "BTP"
NOT_BLAZOR_NOTICE = b"Not a BlazorPack request."
CONVERSION_ERROR_NOTICE = b"An error occurred while converting Blazor to JSON."


def render_for_editing(message: HttpMessage, config: CodecConfig | None = None) -> bytes:
    """Return the message bytes with the body shown as JSON."""
    result = decode_to_json(message.body, config)
    if not result.is_success:
        logger.warning("Failed to convert BlazorPack body to JSON: %s", result.error)
        return CONVERSION_ERROR_NOTICE
    rendered = message.with_body(result.value.encode("utf-8"))
    logger.info("Rendered %d byte body as %d bytes of JSON", len(message.body), len(rendered.body))
    return rendered.to_bytes()


def render_request(url: str | None, message: HttpMessage | None, config: CodecConfig | None = None) -> bytes:
    """Editing view for a captured request, or a notice if it is not BlazorPack."""
    if not is_blazor_request(url, message):
        logger.info("Not a BlazorPack request: %s", url)
        return NOT_BLAZOR_NOTICE
    return render_for_editing(message, config)


def render_response(message: HttpMessage | None, config: CodecConfig | None = None) -> bytes:
    """Editing view for a captured response, or a notice if it is not BlazorPack."""
    if not is_blazor_response(message):
        return NOT_BLAZOR_NOTICE
    return render_for_editing(message, config)


def rebuild_from_edit(
    original: HttpMessage,
    edited: bytes | None,
    config: CodecConfig | None = None,
) -> HttpMessage:
    """Turn an editing view back into a message with a BlazorPack body.

    Args:
        original: The captured message the view was rendered from.
        edited: The view's bytes after editing, or None if unmodified.
        config: Codec limits and encoding options.

    Returns:
        ``original`` when nothing was edited, otherwise the edited head with
        the JSON body packed into BlazorPack.

    Raises:
        HttpMessageError: If the edited view has no header terminator.
        EmptyBodyError: If the edited body is empty.
        ParseError: If the edited body is not a valid message array.
    """
    if edited is None:
        return original

    config = config or DEFAULT_CONFIG
    body = edited[http_body_offset(edited):]
    if not body.strip():
        raise EmptyBodyError()

    messages = from_json(body, max_depth=config.max_depth)
    packed = pack_messages(messages, preserve_format=config.preserve_int_format)
    logger.info("Re-packed %d message(s) into %d bytes", len(messages), len(packed))
    return parse_http_message(edited).with_body(packed)
