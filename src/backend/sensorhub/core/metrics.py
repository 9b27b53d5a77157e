"""Prometheus metrics instrumentation for SensorHub."""

from prometheus_client import REGISTRY, CollectorRegistry, Counter
from prometheus_fastapi_instrumentator import Instrumentator, metrics

# Latest-status cache lookups
status_cache_lookups = Counter(
    "sensorhub_status_cache_lookups_total",
    "Latest-status cache lookups by outcome",
    ["outcome"],
)

# Readings accepted by the ingestion service
readings_ingested = Counter(
    "sensorhub_readings_ingested_total",
    "Total number of sensor readings persisted",
)


def setup_metrics(app, registry: CollectorRegistry = REGISTRY) -> Instrumentator:
    """Set up Prometheus metrics instrumentation for FastAPI app.

    Instrumentation only switches on when the METRICS_ENABLED environment
    variable is "true".
    """
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/health", "/health/ready", "/metrics"],
        env_var_name="METRICS_ENABLED",
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
        registry=registry,
    )

    instrumentator.add(
        metrics.default(
            metric_namespace="",
            metric_subsystem="",
            latency_highr_buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
            registry=registry,
        )
    )

    instrumentator.instrument(app)
    return instrumentator


def expose_metrics(app, instrumentator: Instrumentator) -> None:
    """Expose the /metrics endpoint."""
    instrumentator.expose(app, endpoint="/metrics", include_in_schema=False)


# Helper functions for updating custom metrics


def record_cache_lookup(outcome: str) -> None:
    """Count a latest-status cache lookup ("hit" or "miss")."""
    status_cache_lookups.labels(outcome=outcome).inc()


def record_reading_ingested() -> None:
    """Increment the ingested readings counter."""
    readings_ingested.inc()
