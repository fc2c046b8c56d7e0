"""Tests for the session manager agent."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from job_scout_agents.agents.session_manager import SessionManagerAgent
from job_scout_core.constants import (
    LOGGED_IN_MARKER_SELECTOR,
    LOGIN_PASSWORD_SELECTOR,
    LOGIN_SUBMIT_SELECTOR,
    LOGIN_URL,
    LOGIN_USERNAME_SELECTOR,
)
from job_scout_core.exceptions import SessionError
from job_scout_core.models.run import RunConfig
from job_scout_core.models.search import SearchParams
from job_scout_core.models.session import Session
from job_scout_core.state import RunState
from tests.mocks.mock_driver import FakeDriver, FakeElement
from tests.mocks.mock_settings import make_settings

COOKIE = {"name": "li_at", "value": "abc", "domain": ".linkedin.com", "path": "/"}


def _state() -> RunState:
    return RunState(config=RunConfig(search=SearchParams(keywords="react")))


def _store(session: Session | None, valid: bool = True) -> MagicMock:
    store = MagicMock()
    store.load.return_value = session
    store.is_valid.return_value = valid
    return store


def _login_page(driver: FakeDriver, signed_in: bool = True) -> None:
    driver.elements[LOGIN_SUBMIT_SELECTOR] = FakeElement("Sign in")
    if signed_in:
        driver.elements[LOGGED_IN_MARKER_SELECTOR] = FakeElement("menu")
    driver.stored_cookies = [COOKIE]


@pytest.mark.unit
class TestSessionManagerAgent:
    """Test session restore and login."""

    @pytest.mark.asyncio
    async def test_valid_session_skips_login(self) -> None:
        """A valid stored session is applied without visiting the login page."""
        driver = FakeDriver()
        store = _store(Session(cookies=[COOKIE]))

        state = await SessionManagerAgent(make_settings(), driver, store).run(_state())

        assert state.session_restored is True
        assert driver.stored_cookies == [COOKIE]
        assert driver.visited == []
        store.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_and_save(self) -> None:
        """Without a session the agent logs in and saves the cookies."""
        driver = FakeDriver()
        _login_page(driver)
        store = _store(None)

        state = await SessionManagerAgent(make_settings(), driver, store).run(_state())

        assert state.session_restored is False
        assert driver.visited == [LOGIN_URL]
        assert driver.typed[LOGIN_USERNAME_SELECTOR] == "user@example.com"
        assert driver.typed[LOGIN_PASSWORD_SELECTOR] == "secret"
        saved = store.save.call_args.args[0]
        assert saved.cookies == [COOKIE]

    @pytest.mark.asyncio
    async def test_invalid_session_triggers_login(self) -> None:
        """A session that fails is_valid is replaced by a fresh login."""
        driver = FakeDriver()
        _login_page(driver)
        store = _store(Session(cookies=[]), valid=False)

        await SessionManagerAgent(make_settings(), driver, store).run(_state())

        assert driver.visited == [LOGIN_URL]
        store.save.assert_called_once()

    @pytest.mark.asyncio
    async def test_unreadable_session_triggers_login(self) -> None:
        """A corrupt session file is treated as missing."""
        driver = FakeDriver()
        _login_page(driver)
        store = _store(None)
        store.load.side_effect = SessionError("bad json")

        await SessionManagerAgent(make_settings(), driver, store).run(_state())

        store.save.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_credentials(self) -> None:
        """No session and no password is a session error."""
        driver = FakeDriver()
        store = _store(None)

        with pytest.raises(SessionError, match="credentials"):
            await SessionManagerAgent(
                make_settings(linkedin_password=None), driver, store
            ).run(_state())

    @pytest.mark.asyncio
    async def test_login_not_confirmed(self) -> None:
        """A login that never reaches the signed-in page is a session error."""
        driver = FakeDriver()
        _login_page(driver, signed_in=False)
        store = _store(None)

        with pytest.raises(SessionError, match="signed-in"):
            await SessionManagerAgent(make_settings(), driver, store).run(_state())
        store.save.assert_not_called()
