"""Failure types raised by outbound calls.

Missing configuration is not an error here; it surfaces as
ContextReason.MISSING_CONFIG instead.
"""

from typing import Optional

BODY_PREVIEW_CHARS = 200


def truncate_body(body: Optional[str], limit: int = BODY_PREVIEW_CHARS) -> str:
    """Shorten a response body for logs and debug output."""
    if not body:
        return ""
    body = body.strip()
    if len(body) <= limit:
        return body
    return body[:limit] + "..."


class SnarkError(Exception):
    """Base class for snark pipeline failures."""


class UpstreamTimeout(SnarkError):
    """An external call exceeded its deadline."""

    def __init__(self, service: str, seconds: float):
        self.service = service
        self.seconds = seconds
        super().__init__(f"{service} timed out after {seconds:g}s")


class UpstreamError(SnarkError):
    """Non-success response or malformed payload from an external service."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None,
                 body: Optional[str] = None):
        self.service = service
        self.status_code = status_code
        self.body = truncate_body(body)
        detail = f"{service} {message}"
        if status_code is not None:
            detail = f"{service} HTTP {status_code}: {message}"
        if self.body:
            detail = f"{detail} - {self.body}"
        super().__init__(detail)


class GenerationEmpty(SnarkError):
    """The completion call succeeded but returned no usable text."""

    def __init__(self, model: str):
        self.model = model
        super().__init__(f"{model} returned an empty completion")
