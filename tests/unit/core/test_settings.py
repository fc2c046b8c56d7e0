"""Tests for application settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from job_scout_core.config.settings import Settings


@pytest.mark.unit
class TestSettings:
    """Test defaults, env loading and validators."""

    def test_defaults(self) -> None:
        """Timing defaults match the board's observed behaviour."""
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.board_domain == "linkedin.com"
        assert settings.session_file == Path("./linkedin_session.json")
        assert settings.results_wait_timeout_ms == 60000
        assert settings.scroll_max_no_change == 2
        assert settings.inter_listing_delay_seconds == 2.0
        assert settings.new_page_timeout_seconds == 15.0
        assert settings.navigation_signal_timeout_seconds == 30.0
        assert settings.linkedin_password is None

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings read JS_-prefixed environment variables."""
        monkeypatch.setenv("JS_HEADLESS", "false")
        monkeypatch.setenv("JS_LINKEDIN_PASSWORD", "hunter2")
        monkeypatch.setenv("JS_SCROLL_MAX_SECONDS", "30")

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.headless is False
        assert settings.linkedin_password is not None
        assert settings.linkedin_password.get_secret_value() == "hunter2"
        assert settings.scroll_max_seconds == 30.0

    def test_sendgrid_requires_key(self) -> None:
        """Selecting SendGrid without a key is rejected."""
        with pytest.raises(ValidationError, match="sendgrid_api_key"):
            Settings(_env_file=None, email_provider="sendgrid")  # type: ignore[call-arg]

    def test_scroll_streak_positive(self) -> None:
        """A zero stabilization streak is rejected."""
        with pytest.raises(ValidationError, match="scroll_max_no_change"):
            Settings(_env_file=None, scroll_max_no_change=0)  # type: ignore[call-arg]
