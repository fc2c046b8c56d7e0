"""Abstract browser capability consumed by the scraping components."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from job_scout_core.signals import PendingSignal


@runtime_checkable
class PageHandle(Protocol):
    """A browser tab other than the one the driver steers."""

    @property
    def url(self) -> str:
        """Current URL of the tab."""
        ...

    async def close(self) -> None:
        """Close the tab."""
        ...

    def is_closed(self) -> bool:
        """Whether the tab has been closed."""
        ...


@runtime_checkable
class ElementHandle(Protocol):
    """A resolved DOM element."""

    async def text_content(self) -> str | None:
        """Text content of the element."""
        ...

    async def click(self, *, timeout: float) -> None:
        """Native click; raises when the element is obscured or detached."""
        ...

    async def dispatch_event(self, type: str) -> None:  # noqa: A002
        """Synthetic DOM event, bypassing hit-testing."""
        ...


@runtime_checkable
class NavigationDriver(Protocol):
    """Headless browser steering a single main page."""

    async def navigate(
        self,
        url: str,
        *,
        wait_until: str = "domcontentloaded",
        timeout_ms: int | None = None,
    ) -> None:
        """Navigate the main page; raises NavigationError on failure."""
        ...

    async def wait_for_selector(
        self,
        selector: str,
        *,
        timeout_ms: int,
        visible: bool = False,
    ) -> ElementHandle | None:
        """Wait for an element; None when it never appears."""
        ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any:  # noqa: ANN401
        """Evaluate a JS function in the main page and return serializable data."""
        ...

    async def current_url(self) -> str:
        """URL of the main page."""
        ...

    async def list_open_pages(self) -> list[PageHandle]:
        """All tabs in the browser context, main page included."""
        ...

    def expect_new_page(self) -> PendingSignal[PageHandle]:
        """Arm a signal that fires with the next tab the context opens."""
        ...

    def expect_navigation(
        self, accept: Callable[[str], bool] | None = None
    ) -> PendingSignal[str]:
        """Arm a signal that fires with the main page's next committed URL passing ``accept``."""
        ...

    async def type_text(self, selector: str, text: str) -> None:
        """Fill an input on the main page."""
        ...

    async def click(self, selector: str, *, timeout_ms: int | None = None) -> None:
        """Click an element on the main page."""
        ...

    async def cookies(self) -> list[dict[str, Any]]:
        """Cookies of the browser context."""
        ...

    async def set_cookies(self, cookies: list[dict[str, Any]]) -> None:
        """Add cookies to the browser context."""
        ...
