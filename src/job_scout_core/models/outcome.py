"""Apply-flow outcome variants.

Every listing that enters the apply flow leaves it with exactly one of these.
``ApplyOutcome`` is a discriminated union on ``kind`` so exported records
round-trip through JSON without losing the variant.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class _OutcomeBase(BaseModel):
    """Shared behaviour for outcome variants."""

    model_config = ConfigDict(frozen=True)

    message: str = Field(default="", description="Human-readable explanation")

    @property
    def url(self) -> str | None:
        """External application URL, if one was captured."""
        return None

    @property
    def is_success(self) -> bool:
        """Whether an external URL was captured."""
        return False


class ApplySuccess(_OutcomeBase):
    """The apply flow reached an off-domain application page."""

    kind: Literal["success"] = "success"
    external_url: str = Field(description="Captured external application URL")
    message: str = Field(default="External application URL captured")

    @property
    def url(self) -> str | None:
        """External application URL."""
        return self.external_url

    @property
    def is_success(self) -> bool:
        """Always true for this variant."""
        return True


class EasyApplyOutcome(_OutcomeBase):
    """The listing uses the on-site application path; no click was issued."""

    kind: Literal["easy_apply"] = "easy_apply"
    message: str = Field(default="Easy Apply job")


class NotFoundOutcome(_OutcomeBase):
    """No apply control could be located."""

    kind: Literal["not_found"] = "not_found"
    message: str = Field(default="Apply button not found")


class ApplyErrorOutcome(_OutcomeBase):
    """The flow failed or could not be classified."""

    kind: Literal["error"] = "error"
    message: str = Field(default="Could not capture external application URL")


ApplyOutcome = Annotated[
    ApplySuccess | EasyApplyOutcome | NotFoundOutcome | ApplyErrorOutcome,
    Field(discriminator="kind"),
]

OutcomeKind = Literal["success", "easy_apply", "not_found", "error"]
