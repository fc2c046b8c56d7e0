"""Factory functions for creating tool instances from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from job_scout_agents.tools.browser import PlaywrightDriver
    from job_scout_agents.tools.email_sender import EmailSender
    from job_scout_core.config.settings import Settings
    from job_scout_core.interfaces.session_store import SessionStore


def create_driver(settings: Settings) -> PlaywrightDriver:
    """Create the Playwright driver; start it with ``async with``."""
    from job_scout_agents.tools.browser import PlaywrightDriver

    return PlaywrightDriver(
        headless=settings.headless,
        viewport=(settings.viewport_width, settings.viewport_height),
        default_timeout_ms=settings.navigation_timeout_ms,
    )


def create_session_store(settings: Settings) -> SessionStore:
    """Create the file-backed session store at ``settings.session_file``."""
    from job_scout_agents.tools.session_store import FileSessionStore

    return FileSessionStore(settings.session_file)


def create_email_sender(settings: Settings) -> EmailSender:
    """Create an email sender for the configured provider."""
    from job_scout_agents.tools.email_sender import EmailSender

    return EmailSender(
        provider=settings.email_provider,
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_user=settings.smtp_user,
        smtp_password=(
            settings.smtp_password.get_secret_value() if settings.smtp_password else ""
        ),
        sendgrid_api_key=(
            settings.sendgrid_api_key.get_secret_value() if settings.sendgrid_api_key else ""
        ),
    )
