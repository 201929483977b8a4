# =============================================================================
# core/errors.py - The closed family of errors the core can raise
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Defines every error type that can leave core/.  The tools/ layer only
#   ever has to handle these three (plus "something unexpected"), so each
#   tool maps failures the same way.
#
#   ConfigurationError  →  credentials missing (nothing was sent upstream)
#   ValidationError     →  a required identifier is empty (nothing was sent)
#   UpstreamError       →  the AppSignal call failed: a non-2xx response,
#                          a network fault, or a body we could not parse
#
# STATUS 500:
#   UpstreamError.status is the real HTTP status for non-2xx responses.
#   Failures that never produced an HTTP status (DNS, refused connection,
#   invalid JSON on a 200) are reported as 500 "Internal Server Error".
# =============================================================================

from typing import Any, Optional


class AppSignalError(Exception):
    """Base class for every error raised by core/."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(AppSignalError):
    """The server is missing configuration it needs (e.g. the API token)."""


class ValidationError(AppSignalError):
    """A required tool argument was empty."""


class UpstreamError(AppSignalError):
    """A failed call to the AppSignal API.

    Attributes:
        status: HTTP status code (500 for failures without an HTTP response).
        status_text: HTTP reason phrase.
        body: Parsed JSON error body, or None if absent or not JSON.
        message: Human-readable description naming the operation.
    """

    def __init__(
        self,
        status: int,
        status_text: str,
        message: str,
        body: Optional[Any] = None,
    ):
        super().__init__(message)
        self.status = status
        self.status_text = status_text
        self.body = body

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "status_text": self.status_text,
            "body": self.body,
            "message": self.message,
        }
