"""
OpenTelemetry spans around pipeline steps.

Spans are exported over OTLP only when OTEL_EXPORTER_OTLP_ENDPOINT is set and
the grpc exporter is installed; otherwise they are recorded and dropped.
"""

import functools
import os
import time
from collections.abc import Callable
from contextlib import contextmanager
from typing import Any

from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Status, StatusCode, Tracer

try:
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # type: ignore
        OTLPSpanExporter,
    )

    OTLP_AVAILABLE = True
except ImportError:
    OTLP_AVAILABLE = False


def _build_tracer(service_name: str) -> Tracer:
    provider = TracerProvider(
        resource=Resource.create({"service.name": service_name})
    )
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if OTLP_AVAILABLE and endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint))
        )
    return provider.get_tracer(__name__)


class TelemetryManager:
    """Holds the tracer used by the advisory updater."""

    def __init__(self, service_name: str = "branch-freshness-advisory"):
        self.service_name = service_name
        self.tracer = _build_tracer(service_name)

    @contextmanager
    def trace_operation(
        self, operation_name: str, attributes: dict[str, Any] | None = None
    ):
        """
        Run the enclosed block inside a span.

        Attribute values are stringified. An exception marks the span as failed
        and is re-raised.
        """
        with self.tracer.start_as_current_span(operation_name) as span:
            for key, value in (attributes or {}).items():
                span.set_attribute(key, str(value))
            try:
                yield span
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
                raise


_telemetry_manager: TelemetryManager | None = None


def get_telemetry_manager() -> TelemetryManager:
    global _telemetry_manager
    if _telemetry_manager is None:
        _telemetry_manager = TelemetryManager()
    return _telemetry_manager


def trace_operation(operation_name: str, attributes: dict[str, Any] | None = None):
    return get_telemetry_manager().trace_operation(operation_name, attributes)


def trace_function(operation_name: str | None = None):
    """
    Wrap a function call in a span that records its duration.

    The tracer is looked up at call time, so decorating a function at import
    does not set up telemetry.
    """

    def decorator(func: Callable) -> Callable:
        name = operation_name or f"{func.__module__}.{func.__name__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with trace_operation(name) as span:
                start_time = time.time()
                result = func(*args, **kwargs)
                span.set_attribute("duration_seconds", time.time() - start_time)
                return result

        return wrapper

    return decorator
