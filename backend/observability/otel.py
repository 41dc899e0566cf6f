"""OpenTelemetry + Prometheus fallback wiring for the Clawd Inspector backend."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI

from backend import config

logger = logging.getLogger("clawd_inspector.observability")


_initialized = False
_enabled = False
_tracer: Any | None = None
_trace_provider: Any | None = None
_meter_provider: Any | None = None
_fastapi_instrumentor: Any | None = None

_file_read_counter: Any | None = None
_file_read_latency_hist: Any | None = None
_skipped_lines_counter: Any | None = None
_turns_counter: Any | None = None

_prom_enabled = False
_prom_file_read_counter: Any | None = None
_prom_file_read_latency_hist: Any | None = None
_prom_skipped_lines_counter: Any | None = None
_prom_turns_counter: Any | None = None


def _normalize_otlp_endpoint(base_endpoint: str, signal_path: str) -> str:
    endpoint = (base_endpoint or "").strip()
    if not endpoint:
        return ""
    if endpoint.endswith(signal_path):
        return endpoint
    if endpoint.endswith("/"):
        endpoint = endpoint[:-1]
    if endpoint.endswith("/v1"):
        return f"{endpoint}{signal_path[3:]}"
    return f"{endpoint}{signal_path}"


def _prom_labels(**labels: str) -> dict[str, str]:
    return {key: (value or "").strip() or "unknown" for key, value in labels.items()}


def initialize(app: FastAPI | None = None) -> None:
    global _initialized, _enabled, _tracer, _trace_provider, _meter_provider, _fastapi_instrumentor
    global _file_read_counter, _file_read_latency_hist, _skipped_lines_counter, _turns_counter
    global _prom_enabled
    global _prom_file_read_counter, _prom_file_read_latency_hist, _prom_skipped_lines_counter, _prom_turns_counter

    if _initialized:
        if _enabled and app and _fastapi_instrumentor:
            _fastapi_instrumentor.instrument_app(app)
        return

    _initialized = True

    if not config.OTEL_ENABLED:
        logger.info("OpenTelemetry disabled (CLAWD_INSPECTOR_OTEL_ENABLED=false)")
        return

    try:
        from opentelemetry import metrics, trace
        from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
        from opentelemetry.sdk.metrics import MeterProvider
        from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
    except ImportError as exc:
        logger.warning("OpenTelemetry dependencies unavailable: %s", exc)
        return

    traces_endpoint = _normalize_otlp_endpoint(config.OTEL_ENDPOINT, "/v1/traces")
    metrics_endpoint = _normalize_otlp_endpoint(config.OTEL_ENDPOINT, "/v1/metrics")
    service_name = config.OTEL_SERVICE_NAME or "clawd-inspector-backend"

    resource = Resource.create(
        {
            "service.name": service_name,
            "service.namespace": "clawd-inspector",
        }
    )

    trace_provider = TracerProvider(resource=resource)
    trace_exporter = OTLPSpanExporter(endpoint=traces_endpoint or None)
    trace_provider.add_span_processor(BatchSpanProcessor(trace_exporter))
    trace.set_tracer_provider(trace_provider)
    tracer = trace.get_tracer("clawd_inspector.backend")

    metric_reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=metrics_endpoint or None)
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])
    metrics.set_meter_provider(meter_provider)
    meter = metrics.get_meter("clawd_inspector.backend")

    _file_read_counter = meter.create_counter(
        "clawd_inspector_file_reads_total",
        unit="1",
        description="Count of log and transcript file reads",
    )
    _file_read_latency_hist = meter.create_histogram(
        "clawd_inspector_file_read_latency_ms",
        unit="ms",
        description="Latency of log and transcript file reads",
    )
    _skipped_lines_counter = meter.create_counter(
        "clawd_inspector_skipped_lines_total",
        unit="1",
        description="Malformed JSONL lines discarded while parsing",
    )
    _turns_counter = meter.create_counter(
        "clawd_inspector_turns_total",
        unit="1",
        description="User turns produced by payload log segmentation",
    )

    _trace_provider = trace_provider
    _meter_provider = meter_provider
    _tracer = tracer
    _fastapi_instrumentor = FastAPIInstrumentor()
    _enabled = True

    if app:
        _fastapi_instrumentor.instrument_app(app)

    if config.PROM_PORT > 0:
        try:
            from prometheus_client import Counter, Histogram, start_http_server

            start_http_server(config.PROM_PORT)
            _prom_enabled = True
            _prom_file_read_counter = Counter(
                "clawd_inspector_file_reads_total",
                "Count of log and transcript file reads",
                ["source", "result"],
            )
            _prom_file_read_latency_hist = Histogram(
                "clawd_inspector_file_read_latency_ms",
                "Latency of log and transcript file reads",
                ["source", "result"],
            )
            _prom_skipped_lines_counter = Counter(
                "clawd_inspector_skipped_lines_total",
                "Malformed JSONL lines discarded while parsing",
                ["source"],
            )
            _prom_turns_counter = Counter(
                "clawd_inspector_turns_total",
                "User turns produced by payload log segmentation",
            )
            logger.info("Prometheus fallback metrics server listening on port %s", config.PROM_PORT)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Prometheus fallback not started: %s", exc)
            _prom_enabled = False

    logger.info(
        "OpenTelemetry initialized (service=%s endpoint=%s)",
        service_name,
        config.OTEL_ENDPOINT,
    )


def shutdown(app: FastAPI | None = None) -> None:
    global _enabled
    if not _initialized:
        return
    try:
        if app and _fastapi_instrumentor:
            _fastapi_instrumentor.uninstrument_app(app)
    except Exception:
        pass
    try:
        if _meter_provider is not None:
            _meter_provider.shutdown()
    except Exception:
        pass
    try:
        if _trace_provider is not None:
            _trace_provider.shutdown()
    except Exception:
        pass
    _enabled = False


@contextmanager
def start_span(name: str, attributes: dict[str, Any] | None = None):
    if not _enabled or _tracer is None:
        yield None
        return
    with _tracer.start_as_current_span(name) as span:
        if attributes:
            for key, value in attributes.items():
                if value is not None:
                    span.set_attribute(key, value)
        yield span


def record_file_read(source: str, result: str, duration_ms: float) -> None:
    labels = {
        "source": source or "unknown",
        "result": result or "unknown",
    }
    if _enabled and _file_read_counter is not None:
        _file_read_counter.add(1, labels)
    if _enabled and _file_read_latency_hist is not None:
        _file_read_latency_hist.record(max(0.0, float(duration_ms)), labels)
    if _prom_enabled and _prom_file_read_counter is not None:
        _prom_file_read_counter.labels(**_prom_labels(source=source, result=result)).inc()
    if _prom_enabled and _prom_file_read_latency_hist is not None:
        prom = _prom_labels(source=source, result=result)
        _prom_file_read_latency_hist.labels(**prom).observe(max(0.0, float(duration_ms)))


def record_skipped_lines(source: str, count: int) -> None:
    safe_count = max(0, int(count))
    if safe_count == 0:
        return
    if _enabled and _skipped_lines_counter is not None:
        _skipped_lines_counter.add(safe_count, {"source": source or "unknown"})
    if _prom_enabled and _prom_skipped_lines_counter is not None:
        _prom_skipped_lines_counter.labels(**_prom_labels(source=source)).inc(safe_count)


def record_turns(count: int) -> None:
    safe_count = max(0, int(count))
    if safe_count == 0:
        return
    if _enabled and _turns_counter is not None:
        _turns_counter.add(safe_count)
    if _prom_enabled and _prom_turns_counter is not None:
        _prom_turns_counter.inc(safe_count)
