"""
Metrics Collection
Prometheus metrics for pipeline performance tracking
"""

import time

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the generation pipeline.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()

        # Pipeline metrics
        self.pipeline_requests_total = Counter(
            "uiforge_pipeline_requests_total",
            "Total number of pipeline runs",
            ["operation", "status"],
            registry=self.registry,
        )
        self.pipeline_duration = Histogram(
            "uiforge_pipeline_duration_seconds",
            "Pipeline run duration in seconds",
            ["operation"],
            buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
            registry=self.registry,
        )

        # LLM metrics
        self.llm_calls_total = Counter(
            "uiforge_llm_calls_total",
            "Total number of provider calls",
            ["provider", "status"],
            registry=self.registry,
        )
        self.llm_duration = Histogram(
            "uiforge_llm_duration_seconds",
            "Provider call duration in seconds",
            ["provider"],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=self.registry,
        )
        self.llm_retries_total = Counter(
            "uiforge_llm_retries_total",
            "Rate-limit retries performed by the invoker",
            registry=self.registry,
        )

        # Validation metrics
        self.validation_total = Counter(
            "uiforge_validation_total",
            "Whitelist validation outcomes",
            ["outcome"],
            registry=self.registry,
        )

        # Error metrics
        self.errors_total = Counter(
            "uiforge_errors_total",
            "Total number of errors",
            ["error_type", "component"],
            registry=self.registry,
        )

        # System metrics
        self.uptime = Gauge(
            "uiforge_uptime_seconds",
            "Service uptime in seconds",
            registry=self.registry,
        )
        self.start_time = time.time()

    def record_pipeline_run(self, operation: str, status: str, duration: float) -> None:
        """Record a pipeline run."""
        self.pipeline_requests_total.labels(operation=operation, status=status).inc()
        self.pipeline_duration.labels(operation=operation).observe(duration)

    def record_llm_call(self, provider: str, status: str, duration: float) -> None:
        """Record a provider call."""
        self.llm_calls_total.labels(provider=provider, status=status).inc()
        self.llm_duration.labels(provider=provider).observe(duration)

    def record_retry(self) -> None:
        """Record a rate-limit retry."""
        self.llm_retries_total.inc()

    def record_validation(self, valid: bool) -> None:
        """Record a validation outcome."""
        self.validation_total.labels(outcome="valid" if valid else "invalid").inc()

    def record_error(self, error_type: str, component: str) -> None:
        """Record an error."""
        self.errors_total.labels(error_type=error_type, component=component).inc()

    def update_uptime(self) -> None:
        """Update the uptime metric."""
        self.uptime.set(time.time() - self.start_time)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        self.update_uptime()
        return generate_latest(self.registry)


# Global metrics collector instance
metrics_collector = MetricsCollector()
