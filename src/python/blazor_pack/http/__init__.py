"""HTTP-side helpers for hosts that show captured traffic to a user."""

from .editor import (
    CAPTION,
    CONVERSION_ERROR_NOTICE,
    NOT_BLAZOR_NOTICE,
    rebuild_from_edit,
    render_for_editing,
    render_request,
    render_response,
)
from .filters import (
    NEGOTIATION_PROBE,
    is_blazor_body,
    is_blazor_request,
    is_blazor_response,
    is_negotiation_probe,
    is_octet_stream,
)
from .message import HttpMessage, http_body_offset, parse_http_message

__all__ = [
    "CAPTION",
    "CONVERSION_ERROR_NOTICE",
    "NEGOTIATION_PROBE",
    "NOT_BLAZOR_NOTICE",
    "HttpMessage",
    "http_body_offset",
    "is_blazor_body",
    "is_blazor_request",
    "is_blazor_response",
    "is_negotiation_probe",
    "is_octet_stream",
    "parse_http_message",
    "rebuild_from_edit",
    "render_for_editing",
    "render_request",
    "render_response",
]
