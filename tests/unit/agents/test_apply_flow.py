"""Tests for the apply-flow agent."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from job_scout_agents.agents.apply_flow import ApplyFlowAgent
from job_scout_core.models.eligibility import JobDetailInfo
from job_scout_core.models.listing import ListingSummary
from job_scout_core.models.outcome import (
    ApplyErrorOutcome,
    ApplySuccess,
    EasyApplyOutcome,
    NotFoundOutcome,
)
from job_scout_core.models.run import RunConfig
from job_scout_core.models.search import SearchParams
from job_scout_core.state import RunState
from tests.mocks.mock_driver import FakeDriver
from tests.mocks.mock_settings import make_settings

RESOLVER = "job_scout_agents.agents.apply_flow.ApplyFlowResolver"


def _listing(n: int, title: str = "React Developer") -> ListingSummary:
    return ListingSummary(
        title=title,
        company=f"Company {n}",
        listing_url=f"https://www.linkedin.com/jobs/view/{n}/",
    )


def _state(count: int, **config: Any) -> RunState:  # noqa: ANN401
    state = RunState(config=RunConfig(search=SearchParams(keywords="react"), **config))
    state.listings = [_listing(n) for n in range(1, count + 1)]
    return state


@pytest.mark.unit
class TestApplyFlowAgent:
    """Test listing iteration around the resolver."""

    @pytest.mark.asyncio
    async def test_every_listing_enriched_in_order(self) -> None:
        """Each listing gets exactly one outcome, in extraction order."""
        outcomes = [
            ApplySuccess(external_url="https://boards.greenhouse.io/acme/123"),
            EasyApplyOutcome(),
            NotFoundOutcome(),
            ApplyErrorOutcome(),
        ]
        state = _state(4)

        with patch(RESOLVER) as mock_cls:
            mock_cls.return_value.resolve = AsyncMock(side_effect=outcomes)
            result = await ApplyFlowAgent(make_settings(), FakeDriver()).run(state)

        assert [e.listing_url for e in result.enriched] == [
            item.listing_url for item in state.listings
        ]
        assert [e.apply_outcome for e in result.enriched] == outcomes
        assert result.outcome_counts() == {
            "success": 1,
            "easy_apply": 1,
            "not_found": 1,
            "error": 1,
        }

    @pytest.mark.asyncio
    async def test_max_listings_cap(self) -> None:
        """Only the first max_listings listings enter the flow."""
        state = _state(5, max_listings=2)

        with patch(RESOLVER) as mock_cls:
            mock_cls.return_value.resolve = AsyncMock(return_value=EasyApplyOutcome())
            result = await ApplyFlowAgent(make_settings(), FakeDriver()).run(state)

        assert len(result.enriched) == 2
        assert mock_cls.return_value.resolve.await_count == 2

    @pytest.mark.asyncio
    async def test_no_hook_without_scoring(self) -> None:
        """The resolver gets no loaded hook when scoring is off."""
        state = _state(1)

        with patch(RESOLVER) as mock_cls:
            mock_cls.return_value.resolve = AsyncMock(return_value=EasyApplyOutcome())
            result = await ApplyFlowAgent(make_settings(), FakeDriver()).run(state)

        assert mock_cls.return_value.resolve.call_args.kwargs["on_loaded"] is None
        assert result.enriched[0].eligibility is None

    @pytest.mark.asyncio
    async def test_scoring_hook_attaches_eligibility(self) -> None:
        """With scoring on, the detail page is scored before classification."""
        state = _state(1, score_listings=True)
        detail = JobDetailInfo(
            description="react javascript typescript redux next frontend developer",
            skill_chips=["react"],
            applicants=20,
        )

        async def _resolve(url: str, *, on_loaded: Any) -> EasyApplyOutcome:  # noqa: ANN401
            await on_loaded()
            return EasyApplyOutcome()

        with (
            patch(RESOLVER) as mock_cls,
            patch(
                "job_scout_agents.agents.apply_flow.read_job_detail",
                new_callable=AsyncMock,
                return_value=detail,
            ),
        ):
            mock_cls.return_value.resolve = _resolve
            result = await ApplyFlowAgent(make_settings(), FakeDriver()).run(state)

        eligibility = result.enriched[0].eligibility
        assert eligibility is not None
        assert eligibility.is_eligible is True
        assert "React" in eligibility.matched_skills

    @pytest.mark.asyncio
    async def test_unreadable_detail_fails_open(self) -> None:
        """A detail page that cannot be read leaves the listing eligible."""
        state = _state(1, score_listings=True)

        async def _resolve(url: str, *, on_loaded: Any) -> NotFoundOutcome:  # noqa: ANN401
            await on_loaded()
            return NotFoundOutcome()

        with (
            patch(RESOLVER) as mock_cls,
            patch(
                "job_scout_agents.agents.apply_flow.read_job_detail",
                new_callable=AsyncMock,
                side_effect=RuntimeError("layout changed"),
            ),
        ):
            mock_cls.return_value.resolve = _resolve
            result = await ApplyFlowAgent(make_settings(), FakeDriver()).run(state)

        eligibility = result.enriched[0].eligibility
        assert eligibility is not None
        assert eligibility.is_eligible is True
        assert eligibility.reason is not None
        assert "layout changed" in eligibility.reason

    @pytest.mark.asyncio
    async def test_real_resolver_end_to_end(self) -> None:
        """With the real resolver, a listing with no apply control is NotFound."""
        state = _state(2)

        result = await ApplyFlowAgent(make_settings(), FakeDriver()).run(state)

        assert [e.apply_outcome.kind for e in result.enriched] == ["not_found", "not_found"]

    @pytest.mark.asyncio
    async def test_budget_marks_unreached_listings(self) -> None:
        """Listings the time budget does not reach still get an error outcome."""
        state = _state(4)

        async def _slow(url: str, *, on_loaded: Any) -> EasyApplyOutcome:  # noqa: ANN401
            await asyncio.sleep(0.1)
            return EasyApplyOutcome()

        settings = make_settings(agent_timeout_seconds=0.15)
        with patch(RESOLVER) as mock_cls:
            mock_cls.return_value.resolve = _slow
            result = await ApplyFlowAgent(settings, FakeDriver()).run(state)

        assert len(result.enriched) == 4
        assert [e.listing_url for e in result.enriched] == [
            item.listing_url for item in state.listings
        ]
        assert result.enriched[0].apply_outcome.kind == "easy_apply"
        assert result.enriched[-1].apply_outcome == ApplyErrorOutcome(
            message="run time budget exhausted"
        )
        assert result.errors[0].error_type == "TimeoutError"
