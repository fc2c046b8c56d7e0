"""Apply-flow resolver: clicks a listing's Apply control and classifies the result.

The job board is inconsistent about where "Apply" leads: sometimes a new
tab (``target="_blank"``), sometimes an in-place redirect, sometimes only an
offsite anchor in the DOM. None of these signals is reliable on its own, so
the resolver arms listeners for the first two before clicking, races them,
and falls back to the DOM scan.

States, per listing::

    Navigated -> ButtonSearch -> Clicked -> AwaitingSignal -> Classified

Every path ends in exactly one ``ApplyOutcome``; nothing raises past
``resolve``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from job_scout_agents.tools.polling import poll_until, race_signals
from job_scout_core.constants import (
    APPLY_BUTTON_SELECTORS,
    DETAIL_PANEL_SELECTOR,
    OFFSITE_APPLY_LINK_SELECTOR,
)
from job_scout_core.exceptions import (
    ClassificationIndeterminateError,
    ElementNotFoundError,
    TransientUiError,
)
from job_scout_core.models.outcome import (
    ApplyErrorOutcome,
    ApplyOutcome,
    ApplySuccess,
    EasyApplyOutcome,
    NotFoundOutcome,
)

if TYPE_CHECKING:
    from job_scout_core.config.settings import Settings
    from job_scout_core.interfaces.driver import NavigationDriver, PageHandle
    from job_scout_core.signals import PendingSignal

logger = structlog.get_logger()

_EASY_APPLY_LABEL = "easy apply"

_OFFSITE_LINK_JS = """
(selector) => {
  const link = document.querySelector(selector);
  return link ? link.href : null;
}
"""

OnLoaded = Callable[[], Awaitable[None]]


def is_external_url(url: str | None, board_domain: str) -> bool:
    """Whether ``url`` is a real http(s) page outside the job board's domain."""
    if not url or url == "about:blank":
        return False
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return False
    host = parsed.hostname.lower()
    domain = board_domain.lower()
    return not (host == domain or host.endswith(f".{domain}"))


class ApplyFlowResolver:
    """Drives the apply interaction for one listing at a time."""

    def __init__(self, driver: NavigationDriver, settings: Settings) -> None:
        """Initialize with the navigation driver and timing settings."""
        self._driver = driver
        self._settings = settings

    def _is_external(self, url: str | None) -> bool:
        return is_external_url(url, self._settings.board_domain)

    async def resolve(
        self,
        listing_url: str,
        *,
        on_loaded: OnLoaded | None = None,
    ) -> ApplyOutcome:
        """Run the apply flow for a listing page and classify the outcome.

        ``on_loaded`` runs once the detail page has settled, before the
        apply control is touched.
        """
        log = logger.bind(listing_url=listing_url)
        try:
            outcome = await self._run(listing_url, on_loaded)
        except ElementNotFoundError as e:
            outcome = NotFoundOutcome(message=str(e))
        except ClassificationIndeterminateError as e:
            outcome = ApplyErrorOutcome(message=str(e))
        except Exception as e:
            log.error("apply_flow_error", error_type=type(e).__name__, error=str(e))
            outcome = ApplyErrorOutcome(message=str(e) or type(e).__name__)

        log.info(
            "apply_flow_classified",
            outcome=outcome.kind,
            url=outcome.url,
            message=outcome.message,
        )
        return outcome

    async def _run(self, listing_url: str, on_loaded: OnLoaded | None) -> ApplyOutcome:
        # Navigated
        await self._driver.navigate(
            listing_url,
            wait_until="domcontentloaded",
            timeout_ms=self._settings.navigation_timeout_ms,
        )
        # The detail panel mounts after route completion, so settle first
        await asyncio.sleep(self._settings.detail_settle_seconds)
        panel = await self._driver.wait_for_selector(
            DETAIL_PANEL_SELECTOR,
            timeout_ms=self._settings.detail_panel_timeout_ms,
        )
        if panel is None:
            logger.warning("detail_panel_missing", listing_url=listing_url)

        if on_loaded is not None:
            await on_loaded()

        initial_url = await self._driver.current_url()

        # ButtonSearch
        selector, label = await self._find_apply_button()
        if _EASY_APPLY_LABEL in label.lower():
            return EasyApplyOutcome()

        # Clicked
        pages_before = await self._driver.list_open_pages()
        new_page_signal = self._driver.expect_new_page()
        navigation_signal = self._driver.expect_navigation(accept=self._is_external)
        try:
            try:
                await self._click_apply(selector)
            except TransientUiError as e:
                return ApplyErrorOutcome(message=f"Apply button could not be clicked: {e}")

            # AwaitingSignal
            winner = await race_signals(
                [
                    (new_page_signal, self._settings.new_page_timeout_seconds),
                    (navigation_signal, self._settings.navigation_signal_timeout_seconds),
                ]
            )
            await asyncio.sleep(self._settings.post_click_settle_seconds)

            # Classified
            return await self._classify(winner, new_page_signal, initial_url)
        finally:
            new_page_signal.cancel()
            navigation_signal.cancel()
            await self._close_spawned_pages(pages_before)

    async def _find_apply_button(self) -> tuple[str, str]:
        """Locate the apply control; returns (selector, label)."""

        async def _locate() -> tuple[str, str] | None:
            for selector in APPLY_BUTTON_SELECTORS:
                handle = await self._driver.wait_for_selector(
                    selector,
                    timeout_ms=self._settings.button_selector_timeout_ms,
                    visible=True,
                )
                if handle is not None:
                    label = (await handle.text_content() or "").strip()
                    return selector, label
            return None

        result = await poll_until(
            _locate,
            lambda found: found is not None,
            interval=self._settings.button_search_interval_seconds,
            max_attempts=self._settings.button_search_attempts,
        )
        if not result.satisfied or result.value is None:
            msg = "Apply button not found"
            raise ElementNotFoundError(msg)

        selector, label = result.value
        logger.debug("apply_button_found", selector=selector, label=label)
        return selector, label

    async def _click_apply(self, selector: str) -> None:
        """Click the apply control, retrying transient failures with a fresh handle."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._settings.click_attempts),
            wait=wait_fixed(self._settings.click_interval_seconds),
            retry=retry_if_exception_type(TransientUiError),
            reraise=True,
        ):
            with attempt:
                await self._click_once(selector, attempt.retry_state.attempt_number)

    async def _click_once(self, selector: str, attempt: int) -> None:
        handle = await self._driver.wait_for_selector(
            selector,
            timeout_ms=self._settings.button_selector_timeout_ms,
            visible=True,
        )
        if handle is None:
            msg = f"{selector} no longer visible"
            raise TransientUiError(msg)

        try:
            await handle.click(timeout=self._settings.button_selector_timeout_ms)
            return
        except Exception as e:
            logger.debug("native_click_failed", attempt=attempt, error=str(e))

        try:
            await handle.dispatch_event("click")
        except Exception as e:
            logger.warning("apply_click_failed", attempt=attempt, error=str(e))
            raise TransientUiError(str(e)) from e

    async def _classify(
        self,
        winner: tuple[PendingSignal[Any], Any] | None,
        new_page_signal: PendingSignal[PageHandle],
        initial_url: str,
    ) -> ApplyOutcome:
        if winner is not None and winner[0] is new_page_signal:
            url = await self._resolve_new_page(winner[1])
            if url is not None:
                return ApplySuccess(external_url=url)

        current_url = await self._driver.current_url()
        if current_url != initial_url and self._is_external(current_url):
            return ApplySuccess(
                external_url=current_url,
                message="External URL captured from current page",
            )

        href = await self._driver.evaluate(_OFFSITE_LINK_JS, OFFSITE_APPLY_LINK_SELECTOR)
        if isinstance(href, str) and self._is_external(href):
            return ApplySuccess(
                external_url=href,
                message="External URL found in page content",
            )

        msg = "Could not capture external application URL"
        raise ClassificationIndeterminateError(msg)

    async def _resolve_new_page(self, page: PageHandle) -> str | None:
        """Poll a freshly opened tab until it lands off-domain, then close it.

        A tab mid-redirect can fail to report its URL; such reads count as a
        failed attempt.
        """

        async def _read_url() -> str:
            return page.url

        result = await poll_until(
            _read_url,
            self._is_external,
            interval=self._settings.new_page_poll_interval_seconds,
            max_attempts=self._settings.new_page_poll_attempts,
            swallow=(Exception,),
        )
        if result.satisfied:
            await asyncio.sleep(self._settings.new_page_settle_seconds)

        if not page.is_closed():
            await page.close()

        if not result.satisfied:
            logger.info("new_page_unresolved", last_url=result.value, attempts=result.attempts)
            return None
        return result.value

    async def _close_spawned_pages(self, pages_before: list[PageHandle]) -> None:
        """Close any tab opened during the flow that is still open."""
        try:
            pages_now = await self._driver.list_open_pages()
            for page in pages_now:
                if any(page is known for known in pages_before) or page.is_closed():
                    continue
                logger.debug("closing_spawned_page", url=page.url)
                await page.close()
        except Exception as e:
            logger.warning("spawned_page_cleanup_failed", error=str(e))
