"""Pingdom REST API client package.

Provides the shared request/response core of the Pingdom API client:
authenticated request construction, response validation, JSON decoding
into caller-supplied types, and typed errors.

Exports:
    PingdomClient: HTTP client with authentication and error handling.
    types: Module containing Pydantic models for API error payloads.
    DEFAULT_BASE_URL: Public Pingdom API endpoint.
"""

from . import types
from .client import (
    DEFAULT_BASE_URL,
    PingdomClient,
    decode_response,
    default_http_client,
    new_client,
    new_multi_user_client,
    validate_response,
)
from .errors import (
    ApiError,
    ConfigurationError,
    DecodeError,
    ErrorBodyDecodeError,
    NilTargetError,
    PingdomError,
    RequestBuildError,
    ResponseError,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "ApiError",
    "ConfigurationError",
    "DecodeError",
    "ErrorBodyDecodeError",
    "NilTargetError",
    "PingdomClient",
    "PingdomError",
    "RequestBuildError",
    "ResponseError",
    "decode_response",
    "default_http_client",
    "new_client",
    "new_multi_user_client",
    "types",
    "validate_response",
]
