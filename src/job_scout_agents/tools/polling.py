"""Bounded polling and signal-race helpers shared by the browser components."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import structlog

from job_scout_core.signals import PendingSignal

logger = structlog.get_logger()

T = TypeVar("T")


@dataclass
class PollResult(Generic[T]):
    """Result of a poll loop."""

    value: T | None
    satisfied: bool
    attempts: int


async def poll_until(
    probe: Callable[[], Awaitable[T]],
    predicate: Callable[[T], bool],
    *,
    interval: float,
    max_attempts: int | None = None,
    timeout: float | None = None,
    swallow: tuple[type[BaseException], ...] = (),
) -> PollResult[T]:
    """Call ``probe`` until ``predicate`` holds, attempts run out, or the deadline passes.

    At least one of ``max_attempts`` / ``timeout`` must be given so every
    loop has an upper bound. Exceptions listed in ``swallow`` count as a
    failed attempt; anything else propagates.
    """
    if max_attempts is None and timeout is None:
        msg = "poll_until needs max_attempts or timeout"
        raise ValueError(msg)

    deadline = None if timeout is None else time.monotonic() + timeout
    attempts = 0
    value: T | None = None

    while True:
        attempts += 1
        try:
            value = await probe()
        except swallow as e:
            logger.debug("poll_probe_failed", attempt=attempts, error=str(e))
        else:
            if predicate(value):
                return PollResult(value=value, satisfied=True, attempts=attempts)

        if max_attempts is not None and attempts >= max_attempts:
            break
        if deadline is not None and time.monotonic() + interval >= deadline:
            break
        await asyncio.sleep(interval)

    return PollResult(value=value, satisfied=False, attempts=attempts)


async def race_signals(
    entries: Sequence[tuple[PendingSignal[Any], float]],
) -> tuple[PendingSignal[Any], Any] | None:
    """Wait for the first signal that delivers a value within its own ceiling.

    Each entry pairs an armed signal with its timeout in seconds. Signals
    that time out simply drop out of the race. Returns the winning signal
    with its value, or None when nothing fired. Every signal is cancelled
    (listener detached) before returning.
    """
    tasks: dict[asyncio.Task[Any], PendingSignal[Any]] = {
        asyncio.ensure_future(signal.wait(timeout)): signal for signal, timeout in entries
    }
    pending = set(tasks)
    winner: tuple[PendingSignal[Any], Any] | None = None

    try:
        while pending and winner is None:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            # Deterministic pick when several settle in the same tick
            for task in sorted(done, key=lambda t: _entry_index(entries, tasks[t])):
                if task.cancelled():
                    continue
                value = task.result()
                if value is not None:
                    winner = (tasks[task], value)
                    break
    finally:
        for task in pending:
            task.cancel()
        for signal, _ in entries:
            signal.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    if winner is not None:
        logger.debug("signal_race_won", signal=winner[0].name)
    else:
        logger.debug("signal_race_empty", signals=[s.name for s, _ in entries])
    return winner


def _entry_index(
    entries: Sequence[tuple[PendingSignal[Any], float]],
    signal: PendingSignal[Any],
) -> int:
    """Position of a signal in the race entries."""
    for i, (candidate, _) in enumerate(entries):
        if candidate is signal:
            return i
    return len(entries)
