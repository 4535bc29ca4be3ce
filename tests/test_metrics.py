"""Tests for Prometheus request instrumentation."""

import httpx
import pytest
from prometheus_client.registry import CollectorRegistry

from pingdom_client import metrics
from pingdom_client.config import ClientConfig
from pingdom_client.pingdomapi import client, errors


@pytest.fixture
def registry() -> CollectorRegistry:
    """Isolated registry so tests never touch the global one."""
    return CollectorRegistry()


def _make_client(handler, registry: CollectorRegistry) -> client.PingdomClient:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return client.PingdomClient(
        ClientConfig(user="u", password="p", api_key="k", http_client=http_client),
        metrics=metrics.RequestMetrics(registry),
    )


def test_observe_counts_by_method_and_status(registry: CollectorRegistry):
    """Each observation increments the counter for its labels."""
    request_metrics = metrics.RequestMetrics(registry)

    request_metrics.observe("GET", 200, 0.1)
    request_metrics.observe("GET", 200, 0.2)
    request_metrics.observe("DELETE", 404, 0.1)

    assert (
        registry.get_sample_value(
            "pingdom_client_requests_total",
            {"method": "GET", "status": "200"},
        )
        == 2.0
    )
    assert (
        registry.get_sample_value(
            "pingdom_client_requests_total",
            {"method": "DELETE", "status": "404"},
        )
        == 1.0
    )


def test_observe_without_status_uses_error_label(registry: CollectorRegistry):
    """Round trips without a response are labelled as transport errors."""
    metrics.RequestMetrics(registry).observe("GET", None, 0.5)

    actual = registry.get_sample_value(
        "pingdom_client_requests_total",
        {"method": "GET", "status": metrics.TRANSPORT_ERROR_STATUS},
    )
    assert actual == 1.0


def test_custom_namespace(registry: CollectorRegistry):
    """The namespace replaces the default metric prefix."""
    metrics.RequestMetrics(registry, namespace="monitoring").observe("GET", 200, 0.1)

    actual = registry.get_sample_value(
        "monitoring_client_request_duration_seconds_count",
        {"method": "GET"},
    )
    assert actual == 1.0


def test_client_records_successful_round_trip(registry: CollectorRegistry):
    """do records the status and duration of each round trip."""
    pingdom = _make_client(lambda _r: httpx.Response(200, json={}), registry)

    pingdom.do(pingdom.new_request("GET", "/checks"), dict)

    assert (
        registry.get_sample_value(
            "pingdom_client_requests_total",
            {"method": "GET", "status": "200"},
        )
        == 1.0
    )
    assert (
        registry.get_sample_value(
            "pingdom_client_request_duration_seconds_count",
            {"method": "GET"},
        )
        == 1.0
    )


def test_client_records_api_error(registry: CollectorRegistry):
    """Non-2xx responses are recorded with their status code."""
    pingdom = _make_client(
        lambda _r: httpx.Response(403, json={"error": {"message": "denied"}}),
        registry,
    )

    with pytest.raises(errors.ApiError):
        pingdom.do(pingdom.new_request("PUT", "/checks/1"), dict)

    actual = registry.get_sample_value(
        "pingdom_client_requests_total",
        {"method": "PUT", "status": "403"},
    )
    assert actual == 1.0


def test_client_records_transport_error(registry: CollectorRegistry):
    """Transport failures are recorded with the error label."""

    def handler(request: httpx.Request) -> httpx.Response:
        msg = "timed out"
        raise httpx.ConnectTimeout(msg, request=request)

    pingdom = _make_client(handler, registry)

    with pytest.raises(httpx.ConnectTimeout):
        pingdom.do(pingdom.new_request("GET", "/checks"), dict)

    actual = registry.get_sample_value(
        "pingdom_client_requests_total",
        {"method": "GET", "status": metrics.TRANSPORT_ERROR_STATUS},
    )
    assert actual == 1.0


class _BrokenStream(httpx.SyncByteStream):
    """Response body that fails partway through the read."""

    def __iter__(self):
        yield b'{"id":'
        msg = "connection reset"
        raise httpx.ReadError(msg)


def test_client_records_body_read_failure_as_error(registry: CollectorRegistry):
    """A body that cannot be read is recorded with the error label."""
    pingdom = _make_client(
        lambda _r: httpx.Response(200, stream=_BrokenStream()),
        registry,
    )

    with pytest.raises(httpx.ReadError):
        pingdom.do(pingdom.new_request("GET", "/checks/1"), dict)

    assert (
        registry.get_sample_value(
            "pingdom_client_requests_total",
            {"method": "GET", "status": metrics.TRANSPORT_ERROR_STATUS},
        )
        == 1.0
    )
    assert (
        registry.get_sample_value(
            "pingdom_client_requests_total",
            {"method": "GET", "status": "200"},
        )
        is None
    )
