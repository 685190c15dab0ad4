"""
Prometheus counters for supervised runs.

Two monotonic counters, scraped from /metrics:
- lk_test_success_total: runs that reached a success verdict
- lk_test_failure_total: runs that ended in failure or premature exit

Usage:
    metrics = HarnessMetrics()
    metrics.serve(port=9090)
    metrics.record(verdict)
"""

from typing import Optional
import logging

from prometheus_client import CollectorRegistry, Counter, generate_latest, start_http_server

from ..models.verdict import Verdict

logger = logging.getLogger(__name__)


class HarnessMetrics:
    """Success/failure counters on their own registry.

    Each instance owns a CollectorRegistry so tests can create as many
    as they like without colliding on the global default registry.
    prometheus_client counters are safe to increment and scrape from
    different threads.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.successes = Counter(
            "lk_test_success_total",
            "The total number of successful livekit test operations",
            registry=self.registry,
        )
        self.failures = Counter(
            "lk_test_failure_total",
            "The total number of failed livekit test operations",
            registry=self.registry,
        )

    def record(self, verdict: Verdict) -> None:
        """Count one finished run."""
        if verdict.passed:
            self.successes.inc()
        else:
            self.failures.inc()

    def serve(self, port: int = 9090, addr: str = "") -> None:
        """Expose the registry over HTTP on a background thread.

        A bind failure is logged and otherwise ignored: metrics are not
        needed for a correct verdict.
        """
        try:
            start_http_server(port, addr=addr or "0.0.0.0", registry=self.registry)
        except OSError as e:
            logger.error(f"Error starting Prometheus metrics server: {e}")
            return
        logger.info(f"Serving metrics on {addr or '0.0.0.0'}:{port}/metrics")

    def exposition(self) -> str:
        """Current metrics in the Prometheus text format."""
        return generate_latest(self.registry).decode("utf-8")
