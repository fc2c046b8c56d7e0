"""Shared mock Settings factory for unit tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock


def make_settings(**overrides: object) -> MagicMock:
    """Create a mock Settings with sensible defaults.

    Every delay is zero so flows run instantly against the fake driver.
    Override any attribute via keyword arguments.
    """
    settings = MagicMock()
    settings.linkedin_email = "user@example.com"
    settings.linkedin_password.get_secret_value.return_value = "secret"
    settings.board_domain = "linkedin.com"
    settings.session_file = Path("/tmp/job-scout-test/session.json")
    settings.headless = True
    settings.viewport_width = 1000
    settings.viewport_height = 768
    settings.navigation_timeout_ms = 1000

    settings.results_wait_timeout_ms = 1000
    settings.post_count_delay_seconds = 0.0

    settings.scroll_step_px = 300
    settings.scroll_interval_ms = 0
    settings.scroll_burst_ms = 0
    settings.scroll_settle_seconds = 0.0
    settings.scroll_max_no_change = 2
    settings.scroll_max_seconds = 5.0

    settings.detail_settle_seconds = 0.0
    settings.detail_panel_timeout_ms = 1000
    settings.button_search_attempts = 3
    settings.button_search_interval_seconds = 0.0
    settings.button_selector_timeout_ms = 100
    settings.click_attempts = 3
    settings.click_interval_seconds = 0.0
    settings.new_page_timeout_seconds = 0.2
    settings.navigation_signal_timeout_seconds = 0.2
    settings.post_click_settle_seconds = 0.0
    settings.new_page_poll_attempts = 3
    settings.new_page_poll_interval_seconds = 0.0
    settings.new_page_settle_seconds = 0.0

    settings.inter_listing_delay_seconds = 0.0
    settings.agent_timeout_seconds = None
    settings.output_dir = Path("/tmp/job-scout-test/output")

    settings.email_provider = "smtp"
    settings.smtp_host = "smtp.test.com"
    settings.smtp_port = 587
    settings.smtp_user = "user@test.com"
    settings.smtp_password = None
    settings.sendgrid_api_key = None
    settings.report_recipient = "reports@test.com"

    settings.log_level = "INFO"
    settings.log_format = "console"
    settings.otel_exporter = "none"
    settings.otel_endpoint = "http://localhost:4317"
    settings.otel_service_name = "job-scout-test"

    for key, value in overrides.items():
        setattr(settings, key, value)

    return settings
