"""Observability: structured logging and tracing."""

from job_scout_agents.observability.logging import (
    bind_listing_context,
    bind_run_context,
    clear_run_context,
    configure_logging,
    unbind_listing_context,
)
from job_scout_agents.observability.tracing import (
    configure_tracing,
    disable_tracing,
    get_tracer,
    trace_apply_flow,
    trace_pipeline_run,
    traced_agent,
)

__all__ = [
    "bind_listing_context",
    "bind_run_context",
    "clear_run_context",
    "configure_logging",
    "configure_tracing",
    "disable_tracing",
    "get_tracer",
    "trace_apply_flow",
    "trace_pipeline_run",
    "traced_agent",
    "unbind_listing_context",
]
