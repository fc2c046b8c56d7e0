"""Search pager agent: reads the result count and walks every results page."""

from __future__ import annotations

import asyncio
import re
import time
from typing import TYPE_CHECKING

import structlog

from job_scout_agents.agents.base import BaseAgent
from job_scout_agents.tools.listing_extractor import ListingExtractor
from job_scout_agents.tools.scroll_loader import ScrollLoader
from job_scout_agents.tools.search_url import build_search_url, compute_page_count
from job_scout_core.constants import RESULTS_CONTAINER_SELECTOR, TOTAL_COUNT_SELECTOR
from job_scout_core.exceptions import NavigationError

if TYPE_CHECKING:
    from job_scout_core.models.listing import ListingSummary
    from job_scout_core.models.search import SearchParams
    from job_scout_core.state import RunState

logger = structlog.get_logger()


def parse_total_count(text: str | None) -> int:
    """Parse a subtitle like '1,234 results' into an int; 0 when unreadable."""
    if not text:
        return 0
    match = re.search(r"\d[\d,]*", text)
    if match is None:
        return 0
    return int(match.group(0).replace(",", ""))


class SearchPagerAgent(BaseAgent):
    """Collect title-filtered listings from every page of a search."""

    agent_name = "search_pager"

    async def run(self, state: RunState) -> RunState:
        """Read the total count, then page through results into ``state.listings``."""
        params = state.config.search
        self._log_start({"keywords": params.keywords, "location": params.location})
        start = time.monotonic()

        state.total_results = await self.fetch_total_count(params)
        state.listings = await self.paginate(params, state.total_results, state)

        self._log_end(
            time.monotonic() - start,
            {
                "total_results": state.total_results,
                "pages_scanned": state.pages_scanned,
                "listings_found": len(state.listings),
            },
        )
        return state

    async def fetch_total_count(self, params: SearchParams) -> int:
        """Open page 1 and read the declared result count."""
        await self.driver.navigate(
            build_search_url(params, 1),
            timeout_ms=self.settings.navigation_timeout_ms,
        )
        element = await self.driver.wait_for_selector(
            TOTAL_COUNT_SELECTOR,
            timeout_ms=self.settings.results_wait_timeout_ms,
        )
        text = await element.text_content() if element is not None else None
        total = parse_total_count(text)
        logger.info("total_results_read", total=total, raw=text)

        await asyncio.sleep(self.settings.post_count_delay_seconds)
        return total

    async def paginate(
        self,
        params: SearchParams,
        total_count: int,
        state: RunState | None = None,
    ) -> list[ListingSummary]:
        """Scan pages 1..N and return listings in page order, then card order.

        A page whose list never renders, or that fails in any other way, is
        abandoned with zero listings; the next page still runs.
        """
        page_count = compute_page_count(total_count)
        listings: list[ListingSummary] = []
        loader = ScrollLoader(self.driver, self.settings)
        extractor = ListingExtractor(self.driver)

        for page in range(1, page_count + 1):
            try:
                page_listings = await self._scan_page(params, page, loader, extractor)
            except Exception as e:
                if state is not None:
                    self._record_error(state, e, page=page)
                else:
                    logger.error("page_failed", page=page, error=str(e))
                continue

            if state is not None:
                state.pages_scanned += 1
            listings.extend(page_listings)
            logger.info(
                "page_scanned",
                page=page,
                of=page_count,
                listings=len(page_listings),
                running_total=len(listings),
            )

        return listings

    async def _scan_page(
        self,
        params: SearchParams,
        page: int,
        loader: ScrollLoader,
        extractor: ListingExtractor,
    ) -> list[ListingSummary]:
        await self.driver.navigate(
            build_search_url(params, page),
            timeout_ms=self.settings.navigation_timeout_ms,
        )
        container = await self.driver.wait_for_selector(
            RESULTS_CONTAINER_SELECTOR,
            timeout_ms=self.settings.results_wait_timeout_ms,
        )
        if container is None:
            msg = f"Results list did not render on page {page}"
            raise NavigationError(msg)

        await loader.load_all()
        return await extractor.extract()
