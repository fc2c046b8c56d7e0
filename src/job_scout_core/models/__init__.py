"""Domain models for job-scout."""

from job_scout_core.models.eligibility import EligibilityResult, JobDetailInfo, ScoreBreakdown
from job_scout_core.models.listing import EnrichedListing, ListingSummary
from job_scout_core.models.outcome import (
    ApplyErrorOutcome,
    ApplyOutcome,
    ApplySuccess,
    EasyApplyOutcome,
    NotFoundOutcome,
    OutcomeKind,
)
from job_scout_core.models.run import RunConfig, RunResult, StepError
from job_scout_core.models.search import (
    DatePosted,
    ExperienceLevel,
    JobType,
    SearchParams,
    SortBy,
)
from job_scout_core.models.session import Session

__all__ = [
    "ApplyErrorOutcome",
    "ApplyOutcome",
    "ApplySuccess",
    "DatePosted",
    "EasyApplyOutcome",
    "EligibilityResult",
    "EnrichedListing",
    "ExperienceLevel",
    "JobDetailInfo",
    "JobType",
    "ListingSummary",
    "NotFoundOutcome",
    "OutcomeKind",
    "RunConfig",
    "RunResult",
    "ScoreBreakdown",
    "SearchParams",
    "Session",
    "SortBy",
    "StepError",
]
