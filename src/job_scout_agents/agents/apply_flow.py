"""Apply-flow agent: runs the resolver over every extracted listing."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import structlog

from job_scout_agents.agents.base import BaseAgent
from job_scout_agents.observability.logging import bind_listing_context, unbind_listing_context
from job_scout_agents.observability.tracing import trace_apply_flow
from job_scout_agents.tools.apply_resolver import ApplyFlowResolver, OnLoaded
from job_scout_agents.tools.eligibility import read_job_detail, score
from job_scout_core.models.eligibility import EligibilityResult
from job_scout_core.models.listing import EnrichedListing
from job_scout_core.models.outcome import ApplyErrorOutcome

if TYPE_CHECKING:
    from job_scout_core.models.listing import ListingSummary
    from job_scout_core.models.outcome import ApplyOutcome
    from job_scout_core.state import RunState

logger = structlog.get_logger()


class ApplyFlowAgent(BaseAgent):
    """Resolve each listing's apply flow one at a time, in extraction order.

    Every listing handed to the resolver comes back as exactly one
    ``EnrichedListing``; the resolver never raises, so none are dropped.
    """

    agent_name = "apply_flow"

    async def run(self, state: RunState) -> RunState:
        """Populate ``state.enriched`` from ``state.listings``."""
        listings = state.listings
        cap = state.config.max_listings
        if cap is not None:
            listings = listings[:cap]

        self._log_start(
            {
                "listings": len(listings),
                "capped_from": len(state.listings) if cap is not None else None,
                "score_listings": state.config.score_listings,
            }
        )
        start = time.monotonic()
        budget = self.settings.agent_timeout_seconds
        resolver = ApplyFlowResolver(self.driver, self.settings)

        for position, listing in enumerate(listings, start=1):
            if budget is not None and time.monotonic() - start >= budget:
                self._exhaust_budget(state, listings[position - 1 :], budget)
                break
            bind_listing_context(listing.listing_url, position)
            try:
                await asyncio.sleep(self.settings.inter_listing_delay_seconds)
                enriched = await self._process(resolver, listing, state.config.score_listings)
                state.enriched.append(enriched)
                await asyncio.sleep(self.settings.inter_listing_delay_seconds)
            finally:
                unbind_listing_context()

        counts = state.outcome_counts()
        self._log_end(time.monotonic() - start, dict(counts))
        return state

    async def _process(
        self,
        resolver: ApplyFlowResolver,
        listing: ListingSummary,
        score_listings: bool,
    ) -> EnrichedListing:
        eligibility: list[EligibilityResult] = []
        on_loaded = self._scoring_hook(listing, eligibility) if score_listings else None

        async with trace_apply_flow(listing.listing_url) as span:
            outcome: ApplyOutcome = await resolver.resolve(
                listing.listing_url, on_loaded=on_loaded
            )
            if span is not None:
                span.set_attribute("apply.outcome", outcome.kind)

        logger.info(
            "listing_processed",
            title=listing.title,
            company=listing.company,
            outcome=outcome.kind,
            url=outcome.url,
        )
        return EnrichedListing.from_summary(
            listing, outcome, eligibility[0] if eligibility else None
        )

    def _exhaust_budget(
        self, state: RunState, remaining: list[ListingSummary], budget: float
    ) -> None:
        """Give every listing the budget did not reach an error outcome."""
        outcome = ApplyErrorOutcome(message="run time budget exhausted")
        state.enriched.extend(EnrichedListing.from_summary(item, outcome) for item in remaining)
        msg = f"Apply budget of {budget}s exhausted with {len(remaining)} listings left"
        self._record_error(state, TimeoutError(msg))

    def _scoring_hook(
        self, listing: ListingSummary, sink: list[EligibilityResult]
    ) -> OnLoaded:
        """Build a hook that scores the loaded detail page into ``sink``.

        Reading the page can fail on layout changes; that is treated like
        a scorer failure and fails open.
        """

        async def _score_detail() -> None:
            try:
                detail = await read_job_detail(self.driver)
            except Exception as e:
                logger.warning("job_detail_unreadable", error=str(e))
                sink.append(
                    EligibilityResult(
                        is_eligible=True,
                        match_percentage=0.0,
                        reason=f"Detail page unreadable: {e}",
                    )
                )
                return
            sink.append(
                score(
                    listing.title,
                    detail.description,
                    detail.skill_chips,
                    applicants=detail.applicants,
                    openings=detail.openings,
                )
            )

        return _score_detail
