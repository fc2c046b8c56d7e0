"""Infinite-scroll loader for the virtualized results list.

The results list only mounts cards near the viewport, so reaching the
bottom of the scroll container says nothing about whether every card has
loaded. Instead the loader scrolls in bursts and watches the rendered item
count until it stops growing for a number of consecutive polls.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from job_scout_agents.tools.polling import poll_until
from job_scout_core.constants import RESULTS_LIST_SELECTOR

if TYPE_CHECKING:
    from job_scout_core.config.settings import Settings
    from job_scout_core.interfaces.driver import NavigationDriver

logger = structlog.get_logger()

# Scrolls the list's parent in fixed steps; resolves after the burst window.
_SCROLL_BURST_JS = """
([listSelector, step, intervalMs, burstMs]) => {
  const list = document.querySelector(listSelector);
  const container = list ? list.parentElement : null;
  if (!container) {
    return false;
  }
  return new Promise((resolve) => {
    const timer = setInterval(() => {
      container.scrollTop += step;
      if (container.scrollTop + container.clientHeight >= container.scrollHeight) {
        clearInterval(timer);
      }
    }, intervalMs);
    setTimeout(() => {
      clearInterval(timer);
      resolve(true);
    }, burstMs);
  });
}
"""

_ITEM_COUNT_JS = """
(listSelector) => {
  const list = document.querySelector(listSelector);
  return list ? list.children.length : 0;
}
"""


class StabilizationTracker:
    """Tracks consecutive polls without growth in the rendered item count."""

    def __init__(self, max_no_change: int = 2) -> None:
        """Initialize with the streak length that counts as stable."""
        self.max_no_change = max_no_change
        self.last_count = 0
        self.no_change_streak = 0
        self.readings = 0

    def observe(self, count: int) -> bool:
        """Record a reading; True once the list has stabilized."""
        self.readings += 1
        if count > self.last_count:
            self.last_count = count
            self.no_change_streak = 0
        else:
            self.no_change_streak += 1
        return self.no_change_streak >= self.max_no_change


class ScrollLoader:
    """Drives the results container until all virtualized items have rendered."""

    def __init__(
        self,
        driver: NavigationDriver,
        settings: Settings,
        list_selector: str = RESULTS_LIST_SELECTOR,
    ) -> None:
        """Initialize with the driver, timing settings, and list selector."""
        self._driver = driver
        self._settings = settings
        self._list_selector = list_selector

    async def load_all(self) -> int:
        """Scroll until stabilized or the wall-clock ceiling; returns the final count."""
        tracker = StabilizationTracker(self._settings.scroll_max_no_change)

        async def _scroll_and_count() -> int:
            await self._driver.evaluate(
                _SCROLL_BURST_JS,
                [
                    self._list_selector,
                    self._settings.scroll_step_px,
                    self._settings.scroll_interval_ms,
                    self._settings.scroll_burst_ms,
                ],
            )
            await asyncio.sleep(self._settings.scroll_settle_seconds)
            count = int(await self._driver.evaluate(_ITEM_COUNT_JS, self._list_selector) or 0)
            logger.debug("scroll_poll", count=count, streak=tracker.no_change_streak)
            return count

        result = await poll_until(
            _scroll_and_count,
            tracker.observe,
            interval=0.0,
            timeout=self._settings.scroll_max_seconds,
        )

        if not result.satisfied:
            logger.warning(
                "scroll_ceiling_reached",
                count=tracker.last_count,
                readings=tracker.readings,
                ceiling_seconds=self._settings.scroll_max_seconds,
            )
        else:
            logger.info("scroll_stabilized", count=tracker.last_count, readings=tracker.readings)
        return tracker.last_count
