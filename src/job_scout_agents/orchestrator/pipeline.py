"""Sequential async pipeline over one shared browser."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Any

import structlog

from job_scout_agents.agents.aggregator import ExportAgent
from job_scout_agents.agents.apply_flow import ApplyFlowAgent
from job_scout_agents.agents.notifier import NotifierAgent
from job_scout_agents.agents.search_pager import SearchPagerAgent
from job_scout_agents.agents.session_manager import SessionManagerAgent
from job_scout_agents.observability import (
    bind_run_context,
    clear_run_context,
    get_tracer,
    trace_pipeline_run,
)
from job_scout_agents.tools.factories import create_driver
from job_scout_core.exceptions import BrowserLaunchError
from job_scout_core.models.run import RunConfig, RunResult, StepError
from job_scout_core.state import RunState

if TYPE_CHECKING:
    from job_scout_agents.agents.base import BaseAgent
    from job_scout_core.config.settings import Settings
    from job_scout_core.interfaces.driver import NavigationDriver

logger = structlog.get_logger()

DriverFactory = Callable[["Settings"], AbstractAsyncContextManager[Any]]

PIPELINE_STEPS: list[tuple[str, type[BaseAgent]]] = [
    ("restore_session", SessionManagerAgent),
    ("search", SearchPagerAgent),
    ("resolve_apply", ApplyFlowAgent),
    ("export", ExportAgent),
    ("notify", NotifierAgent),
]

# A failure in these steps leaves nothing useful for the later ones
FATAL_STEPS = frozenset({"restore_session"})

# Never cancelled by the step timeout; each bounds its own work per page or listing
UNBOUNDED_STEPS = frozenset({"search", "resolve_apply"})


class _FatalStep(Exception):
    """Internal signal that the run must stop."""


class Pipeline:
    """Runs the steps in order against one browser session."""

    def __init__(
        self,
        settings: Settings,
        driver_factory: DriverFactory = create_driver,
    ) -> None:
        """Initialize with application settings and the driver factory."""
        self.settings = settings
        self._driver_factory = driver_factory

    async def run(self, config: RunConfig) -> RunResult:
        """Execute the full pipeline and summarize it as a RunResult."""
        start = time.monotonic()
        state = RunState(config=config)
        bind_run_context(config.run_id)

        try:
            logger.info(
                "pipeline_start",
                run_id=config.run_id,
                keywords=config.search.keywords,
                location=config.search.location,
                dry_run=config.dry_run,
            )
            async with trace_pipeline_run(config.run_id) as root_span:
                status = await self._run_steps(state)
                result = state.build_result(
                    status=status, duration_seconds=time.monotonic() - start
                )
                self._set_root_span_attrs(root_span, result)

            state.run_result = result
            self._log_summary(result)
            return result
        finally:
            clear_run_context()

    async def _run_steps(self, state: RunState) -> str:
        """Run every step inside the browser; returns the run status."""
        try:
            async with self._driver_factory(self.settings) as driver:
                for step_name, agent_cls in PIPELINE_STEPS:
                    await self._run_agent_step(step_name, agent_cls, state, driver)
        except BrowserLaunchError as e:
            self._record_fatal(state, "browser", e)
            return "failed"
        except _FatalStep:
            return "failed"

        return "partial" if state.errors else "success"

    async def _run_agent_step(
        self,
        step_name: str,
        agent_cls: type[BaseAgent],
        state: RunState,
        driver: NavigationDriver,
    ) -> None:
        """Execute one step, optionally wrapped in a trace span.

        Errors in fatal steps stop the run; any other step error is recorded
        and the next step still runs.
        """
        tracer = get_tracer()
        span = None
        if tracer is not None:
            span = tracer.start_span(f"agent.{step_name}")
            span.set_attribute("agent.name", step_name)

        timeout = None if step_name in UNBOUNDED_STEPS else self.settings.agent_timeout_seconds
        try:
            agent = agent_cls(self.settings, driver)
            await asyncio.wait_for(agent.run(state), timeout=timeout)
            if span is not None:
                span.set_attribute("agent.status", "ok")

        except Exception as e:
            if span is not None:
                span.set_attribute("agent.status", "error")
                span.set_attribute("agent.error", str(e) or type(e).__name__)
            if isinstance(e, TimeoutError):
                logger.error(
                    "agent_timeout",
                    step=step_name,
                    timeout=timeout,
                )
            if step_name in FATAL_STEPS:
                self._record_fatal(state, step_name, e)
                raise _FatalStep from e
            state.errors.append(
                StepError(
                    step_name=step_name,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
            )
            logger.error("step_failed", step=step_name, error=str(e))

        finally:
            if span is not None:
                span.end()

    @staticmethod
    def _record_fatal(state: RunState, step_name: str, error: Exception) -> None:
        state.errors.append(
            StepError(
                step_name=step_name,
                error_type=type(error).__name__,
                error_message=str(error),
                is_fatal=True,
            )
        )
        logger.error("fatal_step_error", step=step_name, error=str(error))

    @staticmethod
    def _set_root_span_attrs(root_span: object | None, result: RunResult) -> None:
        """Set summary attributes on the root pipeline span."""
        if root_span is None:
            return
        root_span.set_attribute("pipeline.status", result.status)  # type: ignore[attr-defined]
        root_span.set_attribute("pipeline.listings_found", result.listings_found)  # type: ignore[attr-defined]
        root_span.set_attribute(  # type: ignore[attr-defined]
            "pipeline.external_urls_captured",
            result.external_urls_captured,
        )
        root_span.set_attribute("pipeline.errors", len(result.errors))  # type: ignore[attr-defined]

    @staticmethod
    def _log_summary(result: RunResult) -> None:
        """Log a structured run summary."""
        logger.info(
            "pipeline_summary",
            status=result.status,
            total_results=result.total_results,
            pages_scanned=result.pages_scanned,
            listings_found=result.listings_found,
            external_urls_captured=result.external_urls_captured,
            easy_apply=result.easy_apply_count,
            not_found=result.not_found_count,
            apply_errors=result.error_count,
            step_errors=len(result.errors),
            duration_seconds=round(result.duration_seconds, 2),
        )
