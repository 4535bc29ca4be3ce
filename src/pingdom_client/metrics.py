"""Prometheus instrumentation for Pingdom API round trips.

Metrics are registered on a caller-supplied registry rather than the
global ``prometheus_client.REGISTRY`` so that several clients, or tests,
can each own theirs.
"""

from prometheus_client import Counter, Histogram
from prometheus_client.registry import CollectorRegistry

# Label value used for round trips that never produced a response.
TRANSPORT_ERROR_STATUS = "error"


class RequestMetrics:
    """Counts and times requests sent through a ``PingdomClient``."""

    def __init__(self, registry: CollectorRegistry, namespace: str = "pingdom"):
        """Create and register the request metrics.

        Args:
            registry: Registry the metrics are registered on.
            namespace: Metric name prefix (default: "pingdom").
        """
        self.requests = Counter(
            "client_requests",
            "Pingdom API requests by method and response status",
            labelnames=["method", "status"],
            namespace=namespace,
            registry=registry,
        )
        self.duration = Histogram(
            "client_request_duration_seconds",
            "Pingdom API round trip duration in seconds",
            labelnames=["method"],
            namespace=namespace,
            registry=registry,
        )

    def observe(self, method: str, status: int | None, duration: float) -> None:
        """Record one round trip.

        Args:
            method: HTTP method of the request.
            status: Response status code, None when the transport failed or
                the body could not be read.
            duration: Round trip time in seconds.
        """
        status_label = str(status) if status is not None else TRANSPORT_ERROR_STATUS
        self.requests.labels(method=method, status=status_label).inc()
        self.duration.labels(method=method).observe(duration)
