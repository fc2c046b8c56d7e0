"""Eligibility scoring models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class JobDetailInfo(BaseModel):
    """Text read from a job detail page for scoring."""

    description: str = Field(default="", description="Lower-cased description text")
    skill_chips: list[str] = Field(
        default_factory=list, description="Lower-cased skill chip texts"
    )
    applicants: int | None = Field(default=None, description="Applicant count, if shown")
    openings: int = Field(default=1, ge=1, description="Number of openings")


class ScoreBreakdown(BaseModel):
    """Raw scoring numbers behind a match percentage."""

    model_config = ConfigDict(frozen=True)

    total: float = 0.0
    max: float = 0.0
    bonus: float = 0.0


class EligibilityResult(BaseModel):
    """Outcome of scoring a listing against the skill model."""

    model_config = ConfigDict(frozen=True)

    is_eligible: bool = Field(description="Whether the listing passes every gate")
    match_percentage: float = Field(ge=0.0, le=100.0, description="Weighted match 0-100")
    matched_skills: list[str] = Field(
        default_factory=list, description="Skill names matched, in taxonomy order"
    )
    skills: list[str] = Field(default_factory=list, description="Skill chips seen")
    reason: str | None = Field(default=None, description="Why the listing was rejected")
    score: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
