"""OpenTelemetry tracing for pipeline steps and apply flows."""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator, Callable, Coroutine
from contextlib import asynccontextmanager
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

import structlog

if TYPE_CHECKING:
    from job_scout_core.config.settings import Settings

logger = structlog.get_logger()

# Set by configure_tracing(); None while tracing is disabled.
_tracer: Any = None

P = ParamSpec("P")
R = TypeVar("R")


def configure_tracing(settings: Settings) -> None:
    """Configure OpenTelemetry tracing based on settings.

    All OTEL imports are deferred so the default ``none`` exporter never
    loads the SDK.
    """
    global _tracer

    if settings.otel_exporter == "none":
        _tracer = None
        return

    from opentelemetry import trace
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider

    resource = Resource.create({"service.name": settings.otel_service_name})
    provider = TracerProvider(resource=resource)

    if settings.otel_exporter == "console":
        from opentelemetry.sdk.trace.export import (
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    elif settings.otel_exporter == "otlp":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.sdk.trace.export import BatchSpanProcessor

        exporter = OTLPSpanExporter(endpoint=settings.otel_endpoint)
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer("job-scout")
    logger.info("tracing_configured", exporter=settings.otel_exporter)


def disable_tracing() -> None:
    """Turn tracing off; spans become no-ops."""
    global _tracer
    _tracer = None


def get_tracer() -> Any:  # noqa: ANN401
    """The active tracer, or None when tracing is disabled."""
    return _tracer


def traced_agent(
    agent_name: str,
) -> Callable[
    [Callable[P, Coroutine[Any, Any, R]]], Callable[P, Coroutine[Any, Any, R]]
]:
    """Async decorator that wraps a pipeline step in an OTEL span.

    Noop when tracing is disabled.
    """

    def decorator(
        fn: Callable[P, Coroutine[Any, Any, R]],
    ) -> Callable[P, Coroutine[Any, Any, R]]:
        @wraps(fn)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            if _tracer is None:
                return await fn(*args, **kwargs)

            with _tracer.start_as_current_span(f"agent.{agent_name}") as span:
                span.set_attribute("agent.name", agent_name)
                start = time.monotonic()
                try:
                    result = await fn(*args, **kwargs)
                    span.set_attribute("agent.status", "ok")
                    return result
                except Exception as exc:
                    span.set_attribute("agent.status", "error")
                    span.set_attribute("agent.error", str(exc))
                    raise
                finally:
                    elapsed = time.monotonic() - start
                    span.set_attribute("agent.duration_seconds", round(elapsed, 3))

        return wrapper

    return decorator


@asynccontextmanager
async def trace_pipeline_run(run_id: str) -> AsyncGenerator[Any, None]:
    """Root span for an entire pipeline run; yields None when disabled."""
    if _tracer is None:
        yield None
        return

    with _tracer.start_as_current_span("pipeline.run") as span:
        span.set_attribute("pipeline.run_id", run_id)
        yield span


@asynccontextmanager
async def trace_apply_flow(listing_url: str) -> AsyncGenerator[Any, None]:
    """Child span around one listing's apply flow; yields None when disabled.

    Callers set ``apply.outcome`` on the yielded span.
    """
    if _tracer is None:
        yield None
        return

    with _tracer.start_as_current_span("apply.resolve") as span:
        span.set_attribute("apply.listing_url", listing_url)
        yield span
