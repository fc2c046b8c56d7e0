"""In-memory NavigationDriver for exercising the browser flows offline."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from job_scout_core.exceptions import NavigationError
from job_scout_core.signals import PendingSignal

Action = Callable[[], None]


class FakePage:
    """A browser tab with a mutable URL."""

    def __init__(self, url: str = "about:blank") -> None:
        self.url = url
        self.closed = False

    async def close(self) -> None:
        self.closed = True

    def is_closed(self) -> bool:
        return self.closed


class FakeElement:
    """A DOM element whose clicks run scripted side effects."""

    def __init__(
        self,
        text: str = "",
        on_click: Action | None = None,
        click_error: Exception | None = None,
        dispatch_error: Exception | None = None,
    ) -> None:
        self.text = text
        self.on_click = on_click
        self.click_error = click_error
        self.dispatch_error = dispatch_error
        self.clicks = 0
        self.dispatches = 0

    async def text_content(self) -> str | None:
        return self.text

    async def click(self, *, timeout: float) -> None:
        if self.click_error is not None:
            raise self.click_error
        self.clicks += 1
        if self.on_click is not None:
            self.on_click()

    async def dispatch_event(self, type: str) -> None:  # noqa: A002
        if self.dispatch_error is not None:
            raise self.dispatch_error
        self.dispatches += 1
        if self.on_click is not None:
            self.on_click()


class FakeDriver:
    """Scripted stand-in for the Playwright driver.

    ``elements`` maps selectors to elements (or to callables returning one,
    for elements that depend on the current page). ``on_evaluate`` answers
    in-page scripts. ``navigate_errors`` maps URLs to the error raised when
    navigating there.
    """

    def __init__(self, url: str = "about:blank") -> None:
        self.main_page = FakePage(url)
        self.pages: list[FakePage] = [self.main_page]
        self.elements: dict[str, FakeElement | Callable[[], FakeElement | None]] = {}
        self.on_evaluate: Callable[[str, Any], Any] = lambda expression, arg: None
        self.navigate_errors: dict[str, Exception] = {}
        self.visited: list[str] = []
        self.typed: dict[str, str] = {}
        self.clicked: list[str] = []
        self.stored_cookies: list[dict[str, Any]] = []
        self.new_page_signals: list[PendingSignal[FakePage]] = []
        self.navigation_signals: list[PendingSignal[str]] = []
        self.entered = False
        self.exited = False

    async def __aenter__(self) -> FakeDriver:
        self.entered = True
        return self

    async def __aexit__(self, *exc: object) -> None:
        self.exited = True

    @property
    def url(self) -> str:
        return self.main_page.url

    # --- scripted browser events ---

    def open_page(self, url: str) -> FakePage:
        """Simulate the context opening a new tab."""
        page = FakePage(url)
        self.pages.append(page)
        for signal in list(self.new_page_signals):
            signal.fire(page)
        return page

    def commit_navigation(self, url: str) -> None:
        """Simulate the main page committing a navigation."""
        self.main_page.url = url
        for signal in list(self.navigation_signals):
            signal.fire(url)

    # --- NavigationDriver ---

    async def navigate(
        self,
        url: str,
        *,
        wait_until: str = "domcontentloaded",
        timeout_ms: int | None = None,
    ) -> None:
        self.visited.append(url)
        if url in self.navigate_errors:
            raise self.navigate_errors[url]
        self.main_page.url = url

    async def wait_for_selector(
        self,
        selector: str,
        *,
        timeout_ms: int,
        visible: bool = False,
    ) -> FakeElement | None:
        entry = self.elements.get(selector)
        if callable(entry) and not isinstance(entry, FakeElement):
            return entry()
        return entry

    async def evaluate(self, expression: str, arg: Any = None) -> Any:  # noqa: ANN401
        return self.on_evaluate(expression, arg)

    async def current_url(self) -> str:
        return self.main_page.url

    async def list_open_pages(self) -> list[FakePage]:
        return [p for p in self.pages if not p.closed]

    def expect_new_page(self) -> PendingSignal[FakePage]:
        signal: PendingSignal[FakePage] = PendingSignal("new_page")
        self.new_page_signals.append(signal)
        signal.on_cancel(lambda: self.new_page_signals.remove(signal))
        return signal

    def expect_navigation(
        self, accept: Callable[[str], bool] | None = None
    ) -> PendingSignal[str]:
        signal: PendingSignal[str] = PendingSignal("same_page_navigation", accept)
        self.navigation_signals.append(signal)
        signal.on_cancel(lambda: self.navigation_signals.remove(signal))
        return signal

    async def type_text(self, selector: str, text: str) -> None:
        self.typed[selector] = text

    async def click(self, selector: str, *, timeout_ms: int | None = None) -> None:
        self.clicked.append(selector)
        element = await self.wait_for_selector(selector, timeout_ms=timeout_ms or 0)
        if element is None:
            msg = f"No element for {selector}"
            raise NavigationError(msg)
        await element.click(timeout=timeout_ms or 0)

    async def cookies(self) -> list[dict[str, Any]]:
        return list(self.stored_cookies)

    async def set_cookies(self, cookies: list[dict[str, Any]]) -> None:
        self.stored_cookies.extend(cookies)
