"""OpenTelemetry helpers for metrics instrumentation."""

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader


_meter_provider_initialized = False


def init_metrics(export_to_console: bool = False) -> None:
    """Install an SDK meter provider, optionally exporting to the console."""
    global _meter_provider_initialized
    if _meter_provider_initialized:
        return
    readers = [PeriodicExportingMetricReader(ConsoleMetricExporter())] if export_to_console else []
    metrics.set_meter_provider(MeterProvider(metric_readers=readers))
    _meter_provider_initialized = True


def _meter():
    return metrics.get_meter("storefront_proxy")


def get_upstream_duration_histogram():
    """Return a histogram for upstream GraphQL request durations."""
    return _meter().create_histogram(
        name="storefront.upstream.request.duration",
        unit="ms",
        description="Duration of Shopify Storefront API requests",
    )


def get_cache_lookup_counter():
    """Return a counter of response cache lookups, tagged with ``result``."""
    return _meter().create_counter(
        name="storefront.cache.lookups",
        description="Response cache lookups by result (hit/miss)",
    )
