"""Base agent with step logging and error recording."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import structlog

from job_scout_core.exceptions import NavigationError
from job_scout_core.models.run import StepError

if TYPE_CHECKING:
    from job_scout_core.config.settings import Settings
    from job_scout_core.interfaces.driver import NavigationDriver
    from job_scout_core.state import RunState

logger = structlog.get_logger()


class BaseAgent(ABC):
    """Abstract base class for all pipeline agents.

    Agents that steer the browser receive the shared driver; output agents
    are constructed without one.
    """

    agent_name: str = "base"

    def __init__(self, settings: Settings, driver: NavigationDriver | None = None) -> None:
        """Initialize with settings and the optional shared driver."""
        self.settings = settings
        self._driver = driver

    @property
    def driver(self) -> NavigationDriver:
        """The shared navigation driver; raises when the agent was built without one."""
        if self._driver is None:
            msg = f"{self.agent_name} requires a navigation driver"
            raise NavigationError(msg)
        return self._driver

    @abstractmethod
    async def run(self, state: RunState) -> RunState:
        """Execute the agent's task. Must be implemented by subclasses."""
        ...

    def _log_start(self, context: dict[str, object] | None = None) -> None:
        """Log agent execution start."""
        logger.info(
            "agent_start",
            agent=self.agent_name,
            **(context or {}),
        )

    def _log_end(
        self, duration: float, context: dict[str, object] | None = None
    ) -> None:
        """Log agent execution end with duration."""
        logger.info(
            "agent_end",
            agent=self.agent_name,
            duration_seconds=round(duration, 2),
            **(context or {}),
        )

    def _record_error(
        self,
        state: RunState,
        error: Exception,
        is_fatal: bool = False,
        page: int | None = None,
        listing_url: str | None = None,
    ) -> None:
        """Record an error in the run state."""
        step_error = StepError(
            step_name=self.agent_name,
            error_type=type(error).__name__,
            error_message=str(error),
            page=page,
            listing_url=listing_url,
            is_fatal=is_fatal,
        )
        state.errors.append(step_error)
        logger.error(
            "agent_error",
            agent=self.agent_name,
            error_type=type(error).__name__,
            error=str(error),
            page=page,
            listing_url=listing_url,
            is_fatal=is_fatal,
        )
