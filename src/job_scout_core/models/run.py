"""Run configuration and result models."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from job_scout_core.models.search import SearchParams


class RunConfig(BaseModel):
    """Configuration for a single pipeline run."""

    run_id: str = Field(
        default_factory=lambda: f"run_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S')}",
        description="Unique run identifier",
    )
    search: SearchParams = Field(description="Search parameters for this run")
    dry_run: bool = Field(default=False, description="Skip email, generate files only")
    output_formats: list[str] = Field(
        default_factory=lambda: ["xlsx"], description="Output file formats (csv, xlsx)"
    )
    max_listings: int | None = Field(
        default=None, description="Cap listings sent through the apply flow"
    )
    score_listings: bool = Field(
        default=False, description="Score each listing on its detail page"
    )


class StepError(BaseModel):
    """Record of an error that occurred during a pipeline step."""

    step_name: str = Field(description="Name of the step that errored")
    error_type: str = Field(description="Exception class name")
    error_message: str = Field(description="Error description")
    page: int | None = Field(default=None, description="Search page, if applicable")
    listing_url: str | None = Field(default=None, description="Listing, if applicable")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the error occurred"
    )
    is_fatal: bool = Field(default=False, description="Whether this error stopped the run")


class RunResult(BaseModel):
    """Summary of a completed pipeline run."""

    run_id: str = Field(description="Run identifier")
    status: Literal["success", "partial", "failed"] = Field(description="Overall run status")
    total_results: int = Field(description="Result count declared by the search page")
    pages_scanned: int = Field(description="Search pages that yielded a rendered list")
    listings_found: int = Field(description="Listings that passed the title filter")
    external_urls_captured: int = Field(description="Listings with a success outcome")
    easy_apply_count: int = Field(description="Listings with an easy-apply outcome")
    not_found_count: int = Field(description="Listings with no apply control")
    error_count: int = Field(description="Listings with an error outcome")
    output_files: list[Path] = Field(description="Paths to generated output files")
    email_sent: bool = Field(description="Whether the report was emailed")
    errors: list[StepError] = Field(description="All step errors encountered during run")
    duration_seconds: float = Field(description="Total run duration in seconds")
    completed_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the run completed"
    )
