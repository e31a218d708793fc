import logging
import time

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram

logger = logging.getLogger(__name__)


class MetricsManager:
    """
    Manager for the prober's own metrics: requests in flight, request latency
    and probe results per module. These are served on /metrics and are
    separate from the per-probe metrics rendered for each target.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        """
        Initialize the MetricsManager and set up Prometheus metrics.

        Args:
            registry: Collector registry to register the metrics with. Tests pass
                a fresh CollectorRegistry to avoid duplicate registration.
        """
        self.registry = registry
        self.IN_FLIGHT = Gauge(
            "prober_requests_in_flight",
            "Number of prober requests in flight",
            registry=registry,
        )
        self.REQ_LATENCY = Histogram(
            "prober_request_latency_seconds",
            "Prober request latency in seconds",
            registry=registry,
        )
        self.PROBES = Counter(
            "prober_probes",
            "Number of probes executed, by module and result",
            ["module", "result"],
            registry=registry,
        )
        logger.info("MetricsManager initialized.")

    async def prometheus_middleware(self, request, call_next):
        """
        Middleware for tracking request metrics and updating Prometheus gauges/histograms.

        Args:
            request: The incoming request object.
            call_next: The next handler in the middleware chain.

        Returns:
            The response object from the next handler.
        """
        start = time.time()
        self.IN_FLIGHT.inc()
        try:
            response = await call_next(request)
            return response
        finally:
            elapsed = time.time() - start
            self.IN_FLIGHT.dec()
            self.REQ_LATENCY.observe(elapsed)
            logger.debug(
                f"Request processed in {elapsed:.4f}s. In-flight: {self.get_in_flight()}"
            )

    def record_probe(self, module: str, success: bool):
        self.PROBES.labels(module=module, result="success" if success else "failure").inc()

    def get_in_flight(self) -> float:
        """
        Get the current number of in-flight requests.

        Returns:
            float: Number of in-flight requests.
        """
        return self.registry.get_sample_value("prober_requests_in_flight") or 0.0

    def get_probe_count(self, module: str, success: bool) -> float:
        result = "success" if success else "failure"
        value = self.registry.get_sample_value(
            "prober_probes_total", {"module": module, "result": result}
        )
        return value or 0.0
