"""Tests for the pipeline orchestrator."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import patch

import pytest

from job_scout_agents.agents.apply_flow import ApplyFlowAgent
from job_scout_agents.orchestrator.pipeline import Pipeline
from job_scout_core.exceptions import BrowserLaunchError, SessionError
from job_scout_core.models.listing import ListingSummary
from job_scout_core.models.outcome import EasyApplyOutcome
from job_scout_core.models.run import RunConfig
from job_scout_core.models.search import SearchParams
from job_scout_core.state import RunState
from tests.mocks.mock_driver import FakeDriver
from tests.mocks.mock_settings import make_settings

STEPS = "job_scout_agents.orchestrator.pipeline.PIPELINE_STEPS"


def _config() -> RunConfig:
    return RunConfig(run_id="run_test", search=SearchParams(keywords="react"))


def _agent(name: str, calls: list[str], error: Exception | None = None) -> type:
    """Build an agent class that records its run and optionally fails."""

    class _StepAgent:
        def __init__(self, settings: Any, driver: Any) -> None:  # noqa: ANN401
            self.driver = driver

        async def run(self, state: RunState) -> RunState:
            calls.append(name)
            if error is not None:
                raise error
            if name == "search":
                state.total_results = 12
                state.pages_scanned = 1
            return state

    return _StepAgent


def _steps(calls: list[str], failing: dict[str, Exception] | None = None) -> list[tuple[str, type]]:
    failing = failing or {}
    return [
        (name, _agent(name, calls, failing.get(name)))
        for name in ("restore_session", "search", "resolve_apply", "export", "notify")
    ]


@pytest.mark.unit
class TestPipeline:
    """Test step sequencing and run status."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        """All steps run in order inside one browser session."""
        calls: list[str] = []
        driver = FakeDriver()

        with patch(STEPS, _steps(calls)):
            result = await Pipeline(make_settings(), lambda _s: driver).run(_config())

        assert calls == ["restore_session", "search", "resolve_apply", "export", "notify"]
        assert result.status == "success"
        assert result.run_id == "run_test"
        assert result.total_results == 12
        assert driver.entered and driver.exited

    @pytest.mark.asyncio
    async def test_non_fatal_step_failure_is_partial(self) -> None:
        """A failing export is recorded and the notifier still runs."""
        calls: list[str] = []
        failing = {"export": OSError("disk full")}

        with patch(STEPS, _steps(calls, failing)):
            result = await Pipeline(make_settings(), lambda _s: FakeDriver()).run(_config())

        assert calls[-1] == "notify"
        assert result.status == "partial"
        assert result.errors[0].step_name == "export"
        assert result.errors[0].is_fatal is False

    @pytest.mark.asyncio
    async def test_session_failure_stops_run(self) -> None:
        """Without a session nothing else runs."""
        calls: list[str] = []
        failing = {"restore_session": SessionError("No saved session and no credentials")}

        with patch(STEPS, _steps(calls, failing)):
            result = await Pipeline(make_settings(), lambda _s: FakeDriver()).run(_config())

        assert calls == ["restore_session"]
        assert result.status == "failed"
        assert result.errors[0].is_fatal is True
        assert result.errors[0].error_type == "SessionError"

    @pytest.mark.asyncio
    async def test_browser_launch_failure(self) -> None:
        """A browser that never starts fails the run."""

        def _factory(_settings: Any) -> FakeDriver:  # noqa: ANN401
            raise BrowserLaunchError("chromium missing")

        calls: list[str] = []
        with patch(STEPS, _steps(calls)):
            result = await Pipeline(make_settings(), _factory).run(_config())

        assert calls == []
        assert result.status == "failed"
        assert result.errors[0].step_name == "browser"

    @pytest.mark.asyncio
    async def test_step_timeout_recorded(self) -> None:
        """A step exceeding the agent timeout is recorded as an error."""
        calls: list[str] = []
        failing = {"search": TimeoutError()}

        with patch(STEPS, _steps(calls, failing)):
            result = await Pipeline(make_settings(), lambda _s: FakeDriver()).run(_config())

        assert result.status == "partial"
        assert result.errors[0].error_type == "TimeoutError"

    @pytest.mark.asyncio
    async def test_run_context_bound_and_cleared(self) -> None:
        """Logging context carries the run id for the duration of the run."""
        calls: list[str] = []
        with (
            patch(STEPS, _steps(calls)),
            patch("job_scout_agents.orchestrator.pipeline.bind_run_context") as mock_bind,
            patch("job_scout_agents.orchestrator.pipeline.clear_run_context") as mock_clear,
        ):
            await Pipeline(make_settings(), lambda _s: FakeDriver()).run(_config())

        mock_bind.assert_called_once_with("run_test")
        mock_clear.assert_called_once()

    @pytest.mark.asyncio
    async def test_step_timeout_never_drops_listings(self) -> None:
        """With a step timeout set, every listing still ends with one outcome."""
        listings = [
            ListingSummary(
                title="React Developer",
                listing_url=f"https://www.linkedin.com/jobs/view/{n}/",
            )
            for n in range(1, 6)
        ]

        class _Seed:
            def __init__(self, settings: Any, driver: Any) -> None:  # noqa: ANN401
                pass

            async def run(self, state: RunState) -> RunState:
                state.listings = list(listings)
                return state

        async def _slow(url: str, *, on_loaded: Any) -> EasyApplyOutcome:  # noqa: ANN401
            await asyncio.sleep(0.1)
            return EasyApplyOutcome()

        steps = [("search", _Seed), ("resolve_apply", ApplyFlowAgent)]
        with (
            patch(STEPS, steps),
            patch("job_scout_agents.agents.apply_flow.ApplyFlowResolver") as mock_cls,
        ):
            mock_cls.return_value.resolve = _slow
            result = await Pipeline(
                make_settings(agent_timeout_seconds=0.25), lambda _s: FakeDriver()
            ).run(_config())

        assert result.listings_found == 5
        assert result.easy_apply_count + result.error_count == 5
        assert result.easy_apply_count >= 1
        assert result.error_count >= 1
        assert result.status == "partial"

    @pytest.mark.asyncio
    async def test_step_timeout_applies_to_output_steps(self) -> None:
        """A slow export is still cut off by the step timeout."""

        class _SlowExport:
            def __init__(self, settings: Any, driver: Any) -> None:  # noqa: ANN401
                pass

            async def run(self, state: RunState) -> RunState:
                await asyncio.sleep(1)
                return state

        with patch(STEPS, [("export", _SlowExport)]):
            result = await Pipeline(
                make_settings(agent_timeout_seconds=0.05), lambda _s: FakeDriver()
            ).run(_config())

        assert result.status == "partial"
        assert result.errors[0].step_name == "export"
        assert result.errors[0].error_type == "TimeoutError"
