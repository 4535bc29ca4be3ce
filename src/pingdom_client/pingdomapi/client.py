"""Pingdom REST API client.

Builds authenticated requests against Pingdom resource paths, sends them
through an injected httpx transport, and turns responses into either a
decoded value or a typed error. Per-resource helpers are expected to be
thin wrappers around :meth:`PingdomClient.new_request` and
:meth:`PingdomClient.do`.
"""

import base64
import re
import threading
import time
import warnings
from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
import pydantic
import structlog

from ..config import ClientConfig
from ..metrics import RequestMetrics
from .errors import (
    ApiError,
    ConfigurationError,
    DecodeError,
    ErrorBodyDecodeError,
    NilTargetError,
    RequestBuildError,
)
from .types import ErrorEnvelope

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.pingdom.com/api/2.1"

# RFC 9110 token characters.
_METHOD_PATTERN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

T = TypeVar("T")

_default_http_client: httpx.Client | None = None
_default_http_client_lock = threading.Lock()


def default_http_client() -> httpx.Client:
    """Return the process-wide shared httpx client, creating it on first use.

    Used by clients configured without an explicit transport. Tests should
    inject their own client instead.
    """
    global _default_http_client  # noqa: PLW0603
    with _default_http_client_lock:
        if _default_http_client is None or _default_http_client.is_closed:
            _default_http_client = httpx.Client()
        return _default_http_client


def _parse_base_url(raw: str) -> httpx.URL:
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        msg = f"Invalid base URL {raw!r}: {exc}"
        raise ConfigurationError(msg) from exc
    if not url.is_absolute_url:
        msg = f"Base URL must be absolute: {raw!r}"
        raise ConfigurationError(msg)
    return url


def _basic_auth_header(user: str, password: str) -> str:
    credentials = base64.b64encode(f"{user}:{password}".encode()).decode("ascii")
    return f"Basic {credentials}"


def validate_response(response: httpx.Response) -> None:
    """Check that a response carries a 2xx status.

    Outside 2xx the whole body is read and parsed as the Pingdom error
    envelope ``{"error": {"message": ...}}``.

    Args:
        response: Received HTTP response.

    Raises:
        ApiError: If the body holds a well-formed error envelope.
        ErrorBodyDecodeError: If the body is not JSON or has no ``error``
            object. The raw parse error is chained as ``__cause__``.
    """
    if 200 <= response.status_code <= 299:  # noqa: PLR2004
        return

    body = response.read()
    try:
        envelope = ErrorEnvelope.model_validate_json(body)
    except pydantic.ValidationError as exc:
        raise ErrorBodyDecodeError(str(exc), response=response) from exc

    detail = envelope.error
    logger.debug(
        "API error response",
        status_code=response.status_code,
        error_message=detail.message,
    )
    raise ApiError(
        detail.message,
        response=response,
        status_code=detail.status_code or response.status_code,
        status_desc=detail.status_desc or response.reason_phrase,
    )


def decode_response(response: httpx.Response, target: type[T] | None) -> T:
    """Decode a response body into ``target``.

    Args:
        response: Received HTTP response.
        target: Any type pydantic can validate: a model, a dataclass,
            ``dict[str, Any]`` and so on.

    Returns:
        The decoded value.

    Raises:
        NilTargetError: If ``target`` is None.
        DecodeError: If the body is not JSON or does not fit ``target``.
    """
    if target is None:
        msg = "nil target provided to decode_response"
        raise NilTargetError(msg, response=response)

    body = response.read()
    try:
        return pydantic.TypeAdapter(target).validate_json(body)
    except pydantic.ValidationError as exc:
        raise DecodeError(str(exc), response=response) from exc


class PingdomClient:
    """HTTP client for the Pingdom REST API.

    Holds credentials and the base URL, builds authenticated requests and
    executes them on the configured transport. The client adds no locking:
    the transport must be safe for concurrent use, which ``httpx.Client``
    is. Requests are built fresh per call and must not be shared.
    """

    def __init__(self, config: ClientConfig, metrics: RequestMetrics | None = None):
        """Initialize the client from a configuration.

        Args:
            config: Credentials, base URL and optional transport.
            metrics: Optional request instrumentation.

        Raises:
            ConfigurationError: If the base URL cannot be parsed or is not
                absolute.
        """
        self.base_url = _parse_base_url(config.base_url or DEFAULT_BASE_URL)
        self.user = config.user
        self.password = config.password
        self.api_key = config.api_key
        self.account_email = config.account_email
        self._http_client = config.http_client
        self._metrics = metrics

    @property
    def http_client(self) -> httpx.Client:
        """Transport used for round trips.

        Without an injected client this resolves the shared default on every
        access, so a closed default is replaced for existing clients too.
        """
        if self._http_client is not None:
            return self._http_client
        return default_http_client()

    def new_request(
        self,
        method: str,
        resource: str,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Request:
        """Build an authenticated request for a resource path.

        Args:
            method: HTTP method such as GET, POST, PUT or DELETE.
            resource: Resource path appended to the base URL (e.g., "/checks").
            params: Optional query parameters. They replace any query in
                ``resource`` and are encoded with keys in sorted order.

        Returns:
            Request carrying Basic auth, ``App-Key`` and, when an account
            email is configured, ``Account-Email``.

        Raises:
            RequestBuildError: If the method is not a valid HTTP token or the
                resulting URL cannot be parsed.
        """
        if not _METHOD_PATTERN.fullmatch(method):
            msg = f"Invalid HTTP method: {method!r}"
            raise RequestBuildError(msg)

        try:
            url = httpx.URL(str(self.base_url) + resource)
            if params is not None:
                url = url.copy_with(params=sorted(params.items()))
        except httpx.InvalidURL as exc:
            msg = f"Invalid request URL for resource {resource!r}: {exc}"
            raise RequestBuildError(msg) from exc

        headers = {
            "Authorization": _basic_auth_header(self.user, self.password),
            "App-Key": self.api_key,
        }
        if self.account_email:
            headers["Account-Email"] = self.account_email

        try:
            return httpx.Request(method, url, headers=headers)
        except UnicodeEncodeError as exc:
            msg = f"Header values must be ASCII: {exc}"
            raise RequestBuildError(msg) from exc

    def do(
        self,
        request: httpx.Request,
        target: type[T] | None,
    ) -> tuple[httpx.Response, T]:
        """Send a request and decode its JSON body into ``target``.

        The response is closed before returning on every path. On any error
        carrying a response, the response is available as ``error.response``.

        Args:
            request: Request built by :meth:`new_request`.
            target: Type to decode a successful body into.

        Returns:
            Tuple of (response, decoded value).

        Raises:
            httpx.HTTPError: If the round trip or the body read fails; no
                response is returned in that case.
            ApiError: If the service answered outside 2xx.
            ErrorBodyDecodeError: If the non-2xx body could not be parsed.
            DecodeError: If a 2xx body does not fit ``target``.
            NilTargetError: If ``target`` is None for a 2xx response.
        """
        log = logger.bind(method=request.method, url=str(request.url))
        start_time = time.time()

        try:
            log.debug("Making API request")
            response = self.http_client.send(request, stream=True)
        except httpx.HTTPError:
            duration = time.time() - start_time
            log.debug(
                "API request failed",
                duration_seconds=round(duration, 3),
                exc_info=True,
            )
            self._observe(request.method, None, duration)
            raise

        try:
            try:
                response.read()
            except httpx.HTTPError:
                duration = time.time() - start_time
                log.debug(
                    "API response body read failed",
                    status_code=response.status_code,
                    duration_seconds=round(duration, 3),
                    exc_info=True,
                )
                self._observe(request.method, None, duration)
                raise

            duration = time.time() - start_time
            log.debug(
                "API request completed",
                status_code=response.status_code,
                duration_seconds=round(duration, 3),
            )
            self._observe(request.method, response.status_code, duration)

            validate_response(response)
            return response, decode_response(response, target)
        finally:
            response.close()

    def _observe(self, method: str, status: int | None, duration: float) -> None:
        if self._metrics is not None:
            self._metrics.observe(method, status, duration)


def _legacy_client(**fields: str) -> PingdomClient | None:
    # Construction errors are discarded here; callers get None instead.
    try:
        return PingdomClient(ClientConfig(**fields))
    except (ConfigurationError, pydantic.ValidationError):
        logger.warning("Discarding client construction error", exc_info=True)
        return None


def new_client(user: str, password: str, key: str) -> PingdomClient | None:
    """Return a client for the default base URL and shared transport.

    Deprecated: use ``PingdomClient(ClientConfig(...))``. Unlike the primary
    path, construction errors are not raised: they are logged and None is
    returned.
    """
    warnings.warn(
        "new_client is deprecated, use PingdomClient(ClientConfig(...))",
        DeprecationWarning,
        stacklevel=2,
    )
    return _legacy_client(user=user, password=password, api_key=key)


def new_multi_user_client(
    user: str,
    password: str,
    key: str,
    account_email: str,
) -> PingdomClient | None:
    """Like :func:`new_client`, acting on behalf of ``account_email``.

    Deprecated: use ``PingdomClient(ClientConfig(...))``. Construction
    errors are logged and None is returned.
    """
    warnings.warn(
        "new_multi_user_client is deprecated, use PingdomClient(ClientConfig(...))",
        DeprecationWarning,
        stacklevel=2,
    )
    return _legacy_client(
        user=user,
        password=password,
        api_key=key,
        account_email=account_email,
    )
