"""Errors raised by the verification pipeline.

Each error maps to a fixed HTTP status and a title that ends up in the
rendered error body. They never escape ``handle()``.
"""


class HandlerError(Exception):
    """Base class for errors turned into an error response."""

    status_code: int = 500
    title: str = "InternalError"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BadRequest(HandlerError):
    """Malformed form body or missing token field."""

    status_code = 400
    title = "BadRequest"


class HttpRequestError(HandlerError):
    """Transport failure talking to siteverify."""

    title = "HttpRequestError"


class SiteverifyError(HandlerError):
    """Siteverify answered with a non-200 status."""

    title = "SiteverifyError"


class DeserializationError(HandlerError):
    """Siteverify body could not be decoded."""

    title = "DeserializationError"
