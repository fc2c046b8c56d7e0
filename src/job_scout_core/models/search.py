"""Search parameter model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class DatePosted(StrEnum):
    """Posting-age filter."""

    PAST_24_HOURS = "past24hours"
    PAST_WEEK = "pastWeek"
    PAST_MONTH = "pastMonth"


class ExperienceLevel(StrEnum):
    """Seniority filter values accepted by the job board."""

    INTERNSHIP = "internship"
    ENTRY = "entry"
    ASSOCIATE = "associate"
    MID_SENIOR = "mid-senior"
    DIRECTOR = "director"
    EXECUTIVE = "executive"


class JobType(StrEnum):
    """Employment type filter values."""

    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    TEMPORARY = "temporary"
    INTERNSHIP = "internship"
    VOLUNTEER = "volunteer"
    OTHER = "other"


class SortBy(StrEnum):
    """Result ordering."""

    RELEVANCE = "relevance"
    RECENT = "recent"


class SearchParams(BaseModel):
    """Job search parameters, built once per run."""

    model_config = ConfigDict(frozen=True)

    keywords: str = Field(default="", description="Free-text search keywords")
    location: str = Field(default="", description="Location filter")
    date_posted: DatePosted = Field(
        default=DatePosted.PAST_24_HOURS, description="Posting-age filter"
    )
    experience_level: frozenset[ExperienceLevel] = Field(
        default_factory=frozenset, description="Accepted experience levels"
    )
    job_type: frozenset[JobType] = Field(
        default_factory=frozenset, description="Accepted employment types"
    )
    remote: bool = Field(default=False, description="Only remote positions")
    sort_by: SortBy = Field(default=SortBy.RELEVANCE, description="Result ordering")
