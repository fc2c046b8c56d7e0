"""Playwright-backed navigation driver."""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType
from typing import TYPE_CHECKING, Any

import structlog

from job_scout_core.exceptions import BrowserLaunchError, NavigationError
from job_scout_core.signals import PendingSignal

if TYPE_CHECKING:
    from playwright.async_api import (
        Browser,
        BrowserContext,
        ElementHandle,
        Frame,
        Page,
        Playwright,
    )

logger = structlog.get_logger()


class PlaywrightDriver:
    """Steers one main page in a Chromium context.

    Use as an async context manager; the browser lives for the duration of
    the ``async with`` block.
    """

    def __init__(
        self,
        headless: bool = True,
        viewport: tuple[int, int] = (1000, 768),
        default_timeout_ms: int = 30000,
    ) -> None:
        """Initialize with launch options; nothing starts until ``start``."""
        self._headless = headless
        self._viewport = viewport
        self._default_timeout_ms = default_timeout_ms
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    async def __aenter__(self) -> PlaywrightDriver:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def start(self) -> None:
        """Launch Chromium and open the main page."""
        from playwright.async_api import async_playwright

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self._headless)
            width, height = self._viewport
            self._context = await self._browser.new_context(
                viewport={"width": width, "height": height}
            )
            self._context.set_default_timeout(self._default_timeout_ms)
            self._context.set_default_navigation_timeout(self._default_timeout_ms)
            self._page = await self._context.new_page()
        except Exception as e:
            await self.close()
            msg = f"Failed to launch browser: {e}"
            raise BrowserLaunchError(msg) from e
        logger.info("browser_launched", headless=self._headless)

    async def close(self) -> None:
        """Close the browser; pending page operations fail with an error."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning("browser_close_failed", error=str(e))
        if self._playwright is not None:
            await self._playwright.stop()
        self._browser = None
        self._context = None
        self._page = None
        self._playwright = None

    @property
    def page(self) -> Page:
        """The main page."""
        if self._page is None:
            msg = "Browser not started"
            raise NavigationError(msg)
        return self._page

    @property
    def context(self) -> BrowserContext:
        """The browser context owning every tab."""
        if self._context is None:
            msg = "Browser not started"
            raise NavigationError(msg)
        return self._context

    async def navigate(
        self,
        url: str,
        *,
        wait_until: str = "domcontentloaded",
        timeout_ms: int | None = None,
    ) -> None:
        """Navigate the main page; raises NavigationError on failure."""
        from playwright.async_api import Error as PlaywrightError

        try:
            await self.page.goto(
                url,
                wait_until=wait_until,  # type: ignore[arg-type]
                timeout=timeout_ms if timeout_ms is not None else self._default_timeout_ms,
            )
        except PlaywrightError as e:
            msg = f"Navigation to {url} failed: {e.message}"
            raise NavigationError(msg) from e

    async def wait_for_selector(
        self,
        selector: str,
        *,
        timeout_ms: int,
        visible: bool = False,
    ) -> ElementHandle | None:
        """Wait for an element; None when it never appears."""
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        try:
            return await self.page.wait_for_selector(
                selector,
                timeout=timeout_ms,
                state="visible" if visible else "attached",
            )
        except PlaywrightTimeoutError:
            return None

    async def evaluate(self, expression: str, arg: Any = None) -> Any:  # noqa: ANN401
        """Evaluate a JS function in the main page."""
        return await self.page.evaluate(expression, arg)

    async def current_url(self) -> str:
        """URL of the main page."""
        return self.page.url

    async def list_open_pages(self) -> list[Page]:
        """All tabs in the context, main page included."""
        return list(self.context.pages)

    def expect_new_page(self) -> PendingSignal[Page]:
        """Arm a signal that fires with the next tab the context opens."""
        context = self.context
        signal: PendingSignal[Page] = PendingSignal("new_page")
        context.on("page", signal.fire)
        signal.on_cancel(lambda: context.remove_listener("page", signal.fire))
        return signal

    def expect_navigation(
        self, accept: Callable[[str], bool] | None = None
    ) -> PendingSignal[str]:
        """Arm a signal that fires with the main page's next committed URL passing ``accept``."""
        page = self.page
        signal: PendingSignal[str] = PendingSignal("same_page_navigation", accept)

        def _on_frame_navigated(frame: Frame) -> None:
            if frame == page.main_frame:
                signal.fire(frame.url)

        page.on("framenavigated", _on_frame_navigated)
        signal.on_cancel(lambda: page.remove_listener("framenavigated", _on_frame_navigated))
        return signal

    async def type_text(self, selector: str, text: str) -> None:
        """Fill an input on the main page."""
        await self.page.fill(selector, text)

    async def click(self, selector: str, *, timeout_ms: int | None = None) -> None:
        """Click an element on the main page."""
        await self.page.click(
            selector,
            timeout=timeout_ms if timeout_ms is not None else self._default_timeout_ms,
        )

    async def cookies(self) -> list[dict[str, Any]]:
        """Cookies of the browser context."""
        return [dict(c) for c in await self.context.cookies()]

    async def set_cookies(self, cookies: list[dict[str, Any]]) -> None:
        """Add cookies to the browser context."""
        await self.context.add_cookies(cookies)  # type: ignore[arg-type]
