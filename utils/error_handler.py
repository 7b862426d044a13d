"""
Error handling utilities for the image generation MCP server.
"""

from enum import IntEnum
from typing import Optional

import requests

from utils.logging_config import get_logger

logger = get_logger(__name__)


class ErrorCode(IntEnum):
    """Categorical error codes, using the JSON-RPC values MCP clients expect."""
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class ToolError(Exception):
    """Protocol-level error raised by a tool invocation."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __repr__(self):
        return f"ToolError(code={self.code.name}, message={self.message!r})"


HTTP_STATUS_BY_CODE = {
    ErrorCode.INVALID_PARAMS: 400,
    ErrorCode.METHOD_NOT_FOUND: 404,
    ErrorCode.INTERNAL_ERROR: 500,
}


def http_status_for(code: ErrorCode) -> int:
    """Map a categorical error code onto an HTTP status for the HTTP transport."""
    return HTTP_STATUS_BY_CODE.get(code, 500)


def extract_api_error_message(
    response: Optional[requests.Response], fallback: str
) -> str:
    """
    Pull the human readable message out of a downstream error body.

    Accepts both ``{"message": ...}`` and the OpenAI style
    ``{"error": {"message": ...}}`` shapes.

    Args:
        response: The HTTP response attached to the failed request, if any
        fallback: Text to use when the body carries no message

    Returns:
        The downstream-provided message, or ``fallback``
    """
    if response is None:
        return fallback

    try:
        body = response.json()
    except ValueError:
        logger.debug("Downstream error body is not JSON")
        return fallback

    if not isinstance(body, dict):
        return fallback

    message = body.get("message")
    if not message and isinstance(body.get("error"), dict):
        message = body["error"].get("message")

    return message or fallback
