"""Prometheus metrics for residency calculations and trip intake."""

from prometheus_client import Counter, Histogram

departure_checks_total = Counter(
    "departure_checks_total",
    "Total departure safety checks",
    ["outcome"],
)

departure_check_latency_ms = Histogram(
    "departure_check_latency_ms",
    "Departure safety check latency in milliseconds",
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000],
)

trips_added_total = Counter(
    "trips_added_total",
    "Total trips stored",
)

trip_extractions_total = Counter(
    "trip_extractions_total",
    "Total screenshot extraction attempts",
    ["source", "outcome"],
)


class PrometheusResidencyMetrics:
    """Prometheus-based residency metrics implementation."""

    def record_departure_check(self, is_safe: bool, latency_ms: float) -> None:
        """Record a departure check verdict and its latency."""
        departure_checks_total.labels(outcome="safe" if is_safe else "unsafe").inc()
        departure_check_latency_ms.observe(latency_ms)

    def inc_trips_added(self, count: int) -> None:
        """Increment stored trip counter."""
        if count:
            trips_added_total.inc(count)

    def inc_extraction(self, source: str, outcome: str) -> None:
        """Increment extraction counter."""
        trip_extractions_total.labels(source=source, outcome=outcome).inc()


metrics = PrometheusResidencyMetrics()
