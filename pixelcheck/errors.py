"""Error types raised by the comparison pipeline.

Every error carries a ``kind`` used by callers to classify the failure and a
human-readable ``message`` that can be shown to the user as-is.
"""

from __future__ import annotations


class ComparisonError(Exception):
    """Base class for all comparison failures."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class InvalidInputError(ComparisonError):
    kind = "invalid_input"


class InvalidDimensionsError(InvalidInputError, ValueError):
    """Canonical dimensions are not positive."""


class NavigationFailedError(ComparisonError):
    kind = "navigation_failed"


class RenderTimeoutError(ComparisonError):
    kind = "render_timeout"


class DecodeFailedError(ComparisonError):
    kind = "decode_failed"


class ResultNotFoundError(ComparisonError):
    kind = "not_found"

    def __init__(self, result_id: str):
        super().__init__("Result not found or expired")
        self.result_id = result_id


# Ordered: first matching marker wins
_NAVIGATION_MESSAGES: list[tuple[tuple[str, ...], str]] = [
    (("net::ERR_NAME_NOT_RESOLVED",), "Could not resolve domain. Please check the URL."),
    (("net::ERR_CONNECTION_REFUSED",), "Connection refused. The server may be down."),
    (("net::ERR_CONNECTION_TIMED_OUT",), "Connection timed out. The server is too slow to respond."),
    (("Navigation timeout", "Timeout "),
     "Page took too long to load. Try a simpler page or check your connection."),
    (("net::ERR_CERT",), "SSL certificate error. The site may have an invalid certificate."),
    (("401", "Unauthorized"), "Authentication failed. Please check username and password."),
]


def friendly_navigation_message(raw: str) -> str:
    """Translate a browser navigation error into a user-facing message.

    Unknown errors are returned unchanged.
    """
    for markers, message in _NAVIGATION_MESSAGES:
        if any(m in raw for m in markers):
            return message
    return raw
