"""One-shot browser event subscriptions."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class PendingSignal(Generic[T]):
    """A one-shot subscription armed before the action that triggers it.

    The event source calls ``fire``; the first value that passes ``accept``
    wins and later values are ignored. ``cancel`` detaches the underlying
    listener and is safe to call more than once.
    """

    def __init__(self, name: str, accept: Callable[[T], bool] | None = None) -> None:
        """Create an unfired signal bound to the running event loop."""
        self.name = name
        self._accept = accept
        self._future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._detach: Callable[[], None] | None = None

    def on_cancel(self, detach: Callable[[], None]) -> None:
        """Register the callback that removes the event listener."""
        self._detach = detach

    def fire(self, value: T) -> None:
        """Deliver an event value."""
        if self._future.done():
            return
        if self._accept is not None and not self._accept(value):
            return
        self._future.set_result(value)

    @property
    def fired(self) -> bool:
        """Whether a value has been delivered."""
        return self._future.done() and not self._future.cancelled()

    async def wait(self, timeout: float) -> T | None:
        """Wait up to ``timeout`` seconds for the value; None when it never came."""
        if self._future.cancelled():
            return None
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout)
        except TimeoutError:
            return None

    def cancel(self) -> None:
        """Detach the listener and drop any pending wait."""
        if self._detach is not None:
            detach, self._detach = self._detach, None
            detach()
        if not self._future.done():
            self._future.cancel()
