"""Exceptions raised by the Pingdom API client.

Transport failures are not wrapped: ``httpx.TransportError`` reaches the
caller unchanged, since no response exists for it.
"""

import httpx


class PingdomError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(PingdomError, ValueError):
    """Raised when the client configuration cannot produce a usable client."""


class RequestBuildError(PingdomError, ValueError):
    """Raised when a request cannot be built from a method and resource path."""


class ResponseError(PingdomError):
    """An error tied to a received HTTP response.

    Attributes:
        response: The response that produced the error. Its body has
            already been read and the stream closed.
    """

    def __init__(self, message: str, response: httpx.Response | None = None):
        super().__init__(message)
        self.message = message
        self.response = response


class ApiError(ResponseError):
    """The service answered outside 2xx with a well-formed error body."""

    def __init__(
        self,
        message: str,
        response: httpx.Response | None = None,
        status_code: int | None = None,
        status_desc: str | None = None,
    ):
        super().__init__(message, response)
        self.status_code = status_code
        self.status_desc = status_desc


class ErrorBodyDecodeError(ResponseError):
    """The service answered outside 2xx and the error body could not be parsed.

    The raw parse error is available as ``__cause__``.
    """


class DecodeError(ResponseError):
    """A 2xx body did not match the requested decode target.

    The pydantic validation error is available as ``__cause__``.
    """


class NilTargetError(ResponseError, TypeError):
    """Raised when no decode target is given for a successful response."""
