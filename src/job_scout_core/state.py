"""Mutable run state passed through the pipeline."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from job_scout_core.models.listing import EnrichedListing, ListingSummary
from job_scout_core.models.run import RunConfig, RunResult, StepError


@dataclass
class RunState:
    """Mutable state passed through the pipeline steps."""

    config: RunConfig

    # Step outputs
    session_restored: bool = False
    total_results: int = 0
    pages_scanned: int = 0
    listings: list[ListingSummary] = field(default_factory=list)
    enriched: list[EnrichedListing] = field(default_factory=list)
    output_files: list[str] = field(default_factory=list)
    email_sent: bool = False

    # Cross-cutting
    errors: list[StepError] = field(default_factory=list)
    run_result: RunResult | None = None

    @property
    def successful_captures(self) -> list[EnrichedListing]:
        """Enriched listings whose apply flow captured an external URL."""
        return [e for e in self.enriched if e.apply_outcome.is_success]

    def outcome_counts(self) -> Counter[str]:
        """Number of enriched listings per outcome kind."""
        return Counter(e.apply_outcome.kind for e in self.enriched)

    def build_result(
        self,
        status: str,
        duration_seconds: float,
    ) -> RunResult:
        """Build a RunResult from current state."""
        counts = self.outcome_counts()
        return RunResult(
            run_id=self.config.run_id,
            status=status,
            total_results=self.total_results,
            pages_scanned=self.pages_scanned,
            listings_found=len(self.listings),
            external_urls_captured=counts["success"],
            easy_apply_count=counts["easy_apply"],
            not_found_count=counts["not_found"],
            error_count=counts["error"],
            output_files=[Path(f) for f in self.output_files],
            email_sent=self.email_sent,
            errors=self.errors,
            duration_seconds=duration_seconds,
            completed_at=datetime.now(UTC),
        )
