"""
Prometheus request counters for the REST client.

Labels are low-cardinality only: tier, outcome and failure kind.
Symbols, paths and query strings are never used as labels.
"""

from __future__ import annotations

from prometheus_client import Counter
from prometheus_client.registry import CollectorRegistry

from mbxapi.rest.errors import ErrorKind
from mbxapi.rest.types import EndpointTier

# Labels that would cause cardinality explosion or leak request data
FORBIDDEN_LABELS = frozenset({"symbol", "endpoint", "path", "query", "asset", "signature"})

OUTCOME_SUCCESS = "success"
OUTCOME_FAILURE = "failure"


class RequestMetrics:
    """
    Request counters for one client.

    Usage:
        registry = CollectorRegistry()
        metrics = RequestMetrics(registry=registry)
        metrics.record_success(EndpointTier.PUBLIC)
        # generate_latest(registry) -> bytes for a /metrics endpoint
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self._requests_total = Counter(
            "mbxapi_requests_total",
            "Total REST requests by security tier and outcome",
            labelnames=("tier", "outcome"),
            registry=self._registry,
        )
        self._failures_total = Counter(
            "mbxapi_failures_total",
            "Total failed REST requests by failure kind",
            labelnames=("kind",),
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Get the Prometheus CollectorRegistry."""
        return self._registry

    def record_success(self, tier: EndpointTier) -> None:
        self._requests_total.labels(tier=tier.value, outcome=OUTCOME_SUCCESS).inc()

    def record_failure(self, tier: EndpointTier, kind: ErrorKind) -> None:
        self._requests_total.labels(tier=tier.value, outcome=OUTCOME_FAILURE).inc()
        self._failures_total.labels(kind=kind.value).inc()
