"""
Company Index Telemetry

Provides OTEL tracing and metrics for the build pipeline and the runtime loader.

Spans and instruments come from the OpenTelemetry API; without a configured SDK
they are no-ops, so callers never need to check whether telemetry is wired up.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from opentelemetry import metrics, trace

from company_index.config import IndexConfig

_tracer: trace.Tracer | None = None
_meter: metrics.Meter | None = None


def is_telemetry_enabled() -> bool:
    """Check the telemetry switch (``COMPANY_INDEX_TELEMETRY_ENABLED``, from the environment or .env)."""
    return IndexConfig().telemetry_enabled


def get_index_tracer() -> trace.Tracer:
    """Get tracer for index operations."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer("company_index")
    return _tracer


def get_index_meter() -> metrics.Meter:
    """Get meter for index metrics."""
    global _meter
    if _meter is None:
        _meter = metrics.get_meter("company_index")
    return _meter


@contextmanager
def trace_index_operation(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[Any, None, None]:
    """
    Context manager for tracing index operations.

    Args:
        name: Span name (e.g., "merge", "compress", "load")
        attributes: Initial span attributes

    Yields:
        Span object (or None if telemetry is disabled)

    Example:
        with trace_index_operation("split", {SpanAttributes.FILE_PATH: path}) as span:
            ...
            if span:
                span.set_attribute(SpanAttributes.CHUNK_COUNT, len(chunks))
    """
    if not is_telemetry_enabled():
        yield None
        return

    with get_index_tracer().start_as_current_span(f"company_index.{name}") as span:
        if attributes:
            span.set_attributes(attributes)
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_attribute("error", True)
            raise


def record_index_metric(
    name: str,
    value: int | float,
    attributes: dict[str, Any] | None = None,
) -> None:
    """
    Record an index metric.

    Counters for names ending in ``_total``/``_count``, histograms otherwise.
    """
    if not is_telemetry_enabled():
        return

    meter = get_index_meter()
    if name.endswith("_total") or name.endswith("_count"):
        counter = meter.create_counter(f"company_index.{name}")
        counter.add(int(value), attributes or {})
    else:
        histogram = meter.create_histogram(f"company_index.{name}")
        histogram.record(value, attributes or {})


class SpanAttributes:
    """Standard attribute names for index spans."""

    # Files
    FILE_PATH = "file.path"
    FILE_SIZE_BYTES = "file.size_bytes"

    # Build stats
    RECORDS_PROCESSED = "index.records_processed"
    RECORDS_SKIPPED = "index.records_skipped"
    ALIAS_COUNT = "index.alias_count"
    IDENTITY_COUNT = "index.identity_count"
    CORE_ALIAS_COUNT = "index.core_alias_count"
    EXTENDED_ALIAS_COUNT = "index.extended_alias_count"
    CHUNK_COUNT = "index.chunk_count"

    # Runtime
    TIER = "index.tier"
    QUERY_LENGTH = "search.query_length"
    RESULT_COUNT = "search.result_count"
