"""Listing models: extracted summaries and enriched records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from job_scout_core.models.eligibility import EligibilityResult
from job_scout_core.models.outcome import ApplyOutcome


class ListingSummary(BaseModel):
    """One job card as rendered on a search results page."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1, description="Job title")
    company: str = Field(default="N/A", description="Hiring company")
    location: str = Field(default="N/A", description="Location line from the card")
    easy_apply_badge: bool = Field(
        default=False, description="Whether the card shows the Easy Apply badge"
    )
    listing_url: str = Field(default="N/A", description="Job detail page URL")


class EnrichedListing(ListingSummary):
    """A listing after the apply flow ran, the unit handed to the sinks."""

    apply_outcome: ApplyOutcome = Field(description="Classified apply-flow result")
    eligibility: EligibilityResult | None = Field(
        default=None, description="Detail-page score, when scoring is enabled"
    )

    @classmethod
    def from_summary(
        cls,
        summary: ListingSummary,
        outcome: ApplyOutcome,
        eligibility: EligibilityResult | None = None,
    ) -> EnrichedListing:
        """Attach an outcome to an extracted summary."""
        return cls(
            **summary.model_dump(),
            apply_outcome=outcome,
            eligibility=eligibility,
        )
