"""Application settings using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for job-scout."""

    model_config = SettingsConfigDict(env_prefix="JS_", env_file=".env")

    # --- Job board account ---
    linkedin_email: str = Field(
        default="",
        description="Login email, only used when no saved session exists",
    )
    linkedin_password: SecretStr | None = Field(
        default=None,
        description="Login password, only used when no saved session exists",
    )
    board_domain: str = Field(
        default="linkedin.com",
        description="Host suffix of the job board; URLs on it are never external",
    )

    # --- Session ---
    session_file: Path = Field(
        default=Path("./linkedin_session.json"),
        description="JSON file holding the saved cookie set",
    )

    # --- Browser ---
    headless: bool = Field(default=True, description="Run Chromium headless")
    viewport_width: int = Field(default=1000, description="Browser viewport width")
    viewport_height: int = Field(default=768, description="Browser viewport height")
    navigation_timeout_ms: int = Field(
        default=30000,
        description="Default timeout for navigation and page operations",
    )

    # --- Search paging ---
    results_wait_timeout_ms: int = Field(
        default=60000,
        description="Ceiling for the results list container to appear",
    )
    post_count_delay_seconds: float = Field(
        default=5.0,
        description="Pause between reading the total count and paging",
    )

    # --- Infinite scroll ---
    scroll_step_px: int = Field(default=300, description="Pixels per scroll step")
    scroll_interval_ms: int = Field(default=100, description="Delay between scroll steps")
    scroll_burst_ms: int = Field(default=2000, description="Length of one scroll burst")
    scroll_settle_seconds: float = Field(
        default=2.0,
        description="Wait after each burst for lazy content to mount",
    )
    scroll_max_no_change: int = Field(
        default=2,
        description="Consecutive non-growing polls that count as stabilized",
    )
    scroll_max_seconds: float = Field(
        default=120.0,
        description="Wall-clock ceiling for one page's scroll loop",
    )

    # --- Apply flow ---
    detail_settle_seconds: float = Field(
        default=5.0,
        description="Fixed delay after navigating to a listing",
    )
    detail_panel_timeout_ms: int = Field(
        default=20000,
        description="Wait for the job detail panel to mount",
    )
    button_search_attempts: int = Field(default=3, description="Apply button lookups")
    button_search_interval_seconds: float = Field(
        default=2.0, description="Delay between apply button lookups"
    )
    button_selector_timeout_ms: int = Field(
        default=5000, description="Per-selector wait while looking for the apply button"
    )
    click_attempts: int = Field(default=3, description="Apply button click attempts")
    click_interval_seconds: float = Field(
        default=2.0, description="Delay between click attempts"
    )
    new_page_timeout_seconds: float = Field(
        default=15.0, description="Ceiling for a new tab to open after the click"
    )
    navigation_signal_timeout_seconds: float = Field(
        default=30.0, description="Ceiling for same-page navigation after the click"
    )
    post_click_settle_seconds: float = Field(
        default=3.0, description="Pause after the signal race before classifying"
    )
    new_page_poll_attempts: int = Field(
        default=10, description="URL polls on a newly opened tab"
    )
    new_page_poll_interval_seconds: float = Field(
        default=1.0, description="Delay between URL polls on a new tab"
    )
    new_page_settle_seconds: float = Field(
        default=2.0, description="Pause before closing a resolved tab"
    )

    # --- Listing loop ---
    inter_listing_delay_seconds: float = Field(
        default=2.0,
        description="Pause before and after each listing is processed",
    )
    agent_timeout_seconds: float | None = Field(
        default=None,
        description=(
            "Optional ceiling for a single pipeline step; the apply step spends it"
            " as a budget and marks listings it cannot reach as errors"
        ),
    )

    # --- Output ---
    output_dir: Path = Field(
        default=Path("./files"),
        description="Directory for spreadsheet output",
    )

    # --- Email ---
    email_provider: Literal["sendgrid", "smtp"] = Field(
        default="smtp",
        description="Email delivery provider",
    )
    sendgrid_api_key: SecretStr | None = Field(
        default=None,
        description="SendGrid API key (required if email_provider=sendgrid)",
    )
    smtp_host: str = Field(default="smtp.gmail.com", description="SMTP server hostname")
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_user: str = Field(default="", description="SMTP username and sender address")
    smtp_password: SecretStr | None = Field(default=None, description="SMTP password")
    report_recipient: str = Field(
        default="",
        description="Address that receives the run report",
    )

    # --- Observability ---
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: Literal["console", "json"] = Field(
        default="console", description="Log renderer"
    )
    otel_exporter: Literal["none", "console", "otlp"] = Field(
        default="none", description="OpenTelemetry span exporter"
    )
    otel_endpoint: str = Field(
        default="http://localhost:4317", description="OTLP collector endpoint"
    )
    otel_service_name: str = Field(
        default="job-scout", description="service.name resource attribute"
    )

    @model_validator(mode="after")
    def validate_email_config(self) -> Settings:
        """Require an API key when SendGrid is selected."""
        if self.email_provider == "sendgrid" and not self.sendgrid_api_key:
            msg = "sendgrid_api_key required when email_provider=sendgrid"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_scroll_config(self) -> Settings:
        """Stabilization needs at least one non-growing poll."""
        if self.scroll_max_no_change < 1:
            msg = "scroll_max_no_change must be >= 1"
            raise ValueError(msg)
        return self
