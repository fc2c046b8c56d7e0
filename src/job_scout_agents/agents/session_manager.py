"""Session manager agent: restores saved cookies or logs in once."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from job_scout_agents.agents.base import BaseAgent
from job_scout_agents.tools.factories import create_session_store
from job_scout_core.constants import (
    LOGGED_IN_MARKER_SELECTOR,
    LOGIN_PASSWORD_SELECTOR,
    LOGIN_SUBMIT_SELECTOR,
    LOGIN_URL,
    LOGIN_USERNAME_SELECTOR,
)
from job_scout_core.exceptions import SessionError
from job_scout_core.models.session import Session

if TYPE_CHECKING:
    from job_scout_core.config.settings import Settings
    from job_scout_core.interfaces.driver import NavigationDriver
    from job_scout_core.interfaces.session_store import SessionStore
    from job_scout_core.state import RunState

logger = structlog.get_logger()


class SessionManagerAgent(BaseAgent):
    """Make the browser context authenticated before any search runs.

    A stored session that passes ``SessionStore.is_valid`` is applied as-is;
    otherwise the agent logs in with the configured credentials and saves
    the resulting cookies for the next run.
    """

    agent_name = "session_manager"

    def __init__(
        self,
        settings: Settings,
        driver: NavigationDriver | None = None,
        store: SessionStore | None = None,
    ) -> None:
        """Initialize with settings, driver, and an optional session store."""
        super().__init__(settings, driver)
        self._store = store or create_session_store(settings)

    async def run(self, state: RunState) -> RunState:
        """Restore or create the session; raises SessionError when neither works."""
        self._log_start({"session_file": str(self.settings.session_file)})
        start = time.monotonic()

        session = self._load_saved()
        if session is not None and self._store.is_valid(session):
            await self.driver.set_cookies(session.cookies)
            state.session_restored = True
            logger.info("session_restored", cookies=len(session.cookies))
        else:
            await self._login()
            cookies = await self.driver.cookies()
            self._store.save(Session(cookies=cookies))

        self._log_end(time.monotonic() - start, {"restored": state.session_restored})
        return state

    def _load_saved(self) -> Session | None:
        """Load the stored session; an unreadable file is treated as absent."""
        try:
            return self._store.load()
        except SessionError as e:
            logger.warning("session_unreadable", error=str(e))
            return None

    async def _login(self) -> None:
        """Log in through the board's login form."""
        email = self.settings.linkedin_email
        password = self.settings.linkedin_password
        if not email or password is None:
            msg = "No saved session and no credentials configured"
            raise SessionError(msg)

        logger.info("login_start", email=email)
        await self.driver.navigate(
            LOGIN_URL, timeout_ms=self.settings.navigation_timeout_ms
        )
        await self.driver.type_text(LOGIN_USERNAME_SELECTOR, email)
        await self.driver.type_text(LOGIN_PASSWORD_SELECTOR, password.get_secret_value())
        await self.driver.click(LOGIN_SUBMIT_SELECTOR)

        marker = await self.driver.wait_for_selector(
            LOGGED_IN_MARKER_SELECTOR,
            timeout_ms=self.settings.navigation_timeout_ms,
        )
        if marker is None:
            msg = "Login did not reach the signed-in page"
            raise SessionError(msg)
        logger.info("login_complete")
