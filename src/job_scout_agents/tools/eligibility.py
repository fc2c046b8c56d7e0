"""Title filter and weighted skill scorer for job listings."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import structlog

from job_scout_core.constants import (
    APPLICANTS_PER_OPENING,
    DESCRIPTION_SELECTOR,
    DETAIL_STAT_SELECTOR,
    FULLSTACK_NODE_KEYWORDS,
    FULLSTACK_TITLE_PATTERN,
    KEYWORD_TRIPLETS,
    MIN_APPLICANT_LIMIT,
    MIN_MATCH_PERCENTAGE,
    SKILL_CHIP_SELECTOR,
    SKILL_SETS,
    TITLE_DENY_KEYWORDS,
    TITLE_REQUIRED_PATTERN,
)
from job_scout_core.models.eligibility import EligibilityResult, JobDetailInfo, ScoreBreakdown

if TYPE_CHECKING:
    from job_scout_core.interfaces.driver import NavigationDriver

logger = structlog.get_logger()

_TITLE_REQUIRED_RE = re.compile(TITLE_REQUIRED_PATTERN, re.IGNORECASE)
_FULLSTACK_RE = re.compile(FULLSTACK_TITLE_PATTERN, re.IGNORECASE)

_JOB_DETAIL_JS = """
([chipSelector, descriptionSelector, statSelector]) => {
  const skillChips = Array.from(document.querySelectorAll(chipSelector))
    .map((chip) => chip.textContent.toLowerCase().trim());
  const descriptionElement = document.querySelector(descriptionSelector);
  const description = descriptionElement ? descriptionElement.innerText.toLowerCase() : "";
  const stats = Array.from(document.querySelectorAll(statSelector));
  const readStat = (label) => {
    const el = stats.find((s) => s.textContent.includes(label));
    const value = el ? el.querySelector("span:last-child") : null;
    return value ? value.textContent.replace(/,/g, "") : null;
  };
  return {
    skillChips,
    description,
    applicants: readStat("Applicants:"),
    openings: readStat("Openings:"),
  };
}
"""


def filter_job_title(title: str) -> bool:
    """Whether a title names a developer/engineer role with no denied keyword."""
    if not _TITLE_REQUIRED_RE.search(title):
        return False
    lowered = title.lower()
    return not any(keyword in lowered for keyword in TITLE_DENY_KEYWORDS)


def check_fullstack_requirements(
    title: str,
    description: str,
    skill_chips: Sequence[str],
) -> bool:
    """Fullstack titles must mention a Node/backend keyword in the text or chips."""
    if not _FULLSTACK_RE.search(title):
        return True
    description = description.lower()
    chips = [chip.lower() for chip in skill_chips]
    return any(
        keyword in description or any(keyword in chip for chip in chips)
        for keyword in FULLSTACK_NODE_KEYWORDS
    )


def _has_skill(variations: Sequence[str], text: str) -> bool:
    """Substring match, also trying each variation with its first '.' or '-' removed."""
    return any(
        v in text or v.replace(".", "", 1) in text or v.replace("-", "", 1) in text
        for v in variations
    )


def _in_chips(variations: Sequence[str], chips: Sequence[str]) -> bool:
    return any(v in chip for v in variations for chip in chips)


def applicant_limit(openings: int) -> int:
    """Applicant ceiling for a posting, scaled by its number of openings."""
    return max(APPLICANTS_PER_OPENING * openings, MIN_APPLICANT_LIMIT)


def score(
    title: str,
    description: str,
    skill_chips: Sequence[str],
    applicants: int | None = None,
    openings: int = 1,
) -> EligibilityResult:
    """Score a listing against the skill taxonomy.

    Fails open: any internal error yields an eligible result with a zero
    score, so a scorer bug never silently removes listings from the run.
    """
    try:
        return _score(title, description, skill_chips, applicants, openings)
    except Exception as e:
        logger.error("eligibility_score_failed", title=title, error=str(e))
        return EligibilityResult(
            is_eligible=True,
            match_percentage=0.0,
            reason=f"Scoring failed: {e}",
        )


def _score(
    title: str,
    description: str,
    skill_chips: Sequence[str],
    applicants: int | None,
    openings: int,
) -> EligibilityResult:
    if not filter_job_title(title):
        return EligibilityResult(
            is_eligible=False, match_percentage=0.0, reason="Invalid job title"
        )

    description = description.lower()
    chips = [chip.lower().strip() for chip in skill_chips]

    if not check_fullstack_requirements(title, description, chips):
        return EligibilityResult(
            is_eligible=False,
            match_percentage=0.0,
            skills=chips,
            reason="Fullstack job lacks Node.js requirement",
        )

    total = 0.0
    max_possible = 0.0
    matched: list[str] = []

    for name, primary, related, weight in SKILL_SETS:
        max_possible += weight
        if _has_skill(primary, description) or _in_chips(primary, chips):
            total += weight
            matched.append(name)
        elif _has_skill(related, description) or _in_chips(related, chips):
            total += weight * 0.5
            matched.append(f"{name} (related)")

    bonus = 0.0
    for triplet in KEYWORD_TRIPLETS:
        if all(keyword in description for keyword in triplet):
            bonus += 1.0
            logger.debug("keyword_triplet_matched", triplet="+".join(triplet))

    total += bonus
    percentage = min(total / (max_possible + len(KEYWORD_TRIPLETS)) * 100, 100.0)

    limit = applicant_limit(openings)
    under_limit = applicants is None or applicants < limit
    is_eligible = percentage >= MIN_MATCH_PERCENTAGE and under_limit

    reason = None
    if percentage < MIN_MATCH_PERCENTAGE:
        reason = f"Match {percentage:.1f}% below {MIN_MATCH_PERCENTAGE:.0f}%"
    elif not under_limit:
        reason = f"{applicants} applicants exceeds limit {limit}"

    logger.info(
        "listing_scored",
        title=title,
        match_percentage=round(percentage, 1),
        matched_skills=matched,
        applicants=applicants,
        openings=openings,
        applicant_limit=limit,
        is_eligible=is_eligible,
    )
    return EligibilityResult(
        is_eligible=is_eligible,
        match_percentage=percentage,
        matched_skills=matched,
        skills=chips,
        reason=reason,
        score=ScoreBreakdown(total=total, max=max_possible, bonus=bonus),
    )


async def read_job_detail(driver: NavigationDriver) -> JobDetailInfo:
    """Read description, skill chips, and applicant stats from a detail page."""
    raw: dict[str, Any] = await driver.evaluate(
        _JOB_DETAIL_JS,
        [SKILL_CHIP_SELECTOR, DESCRIPTION_SELECTOR, DETAIL_STAT_SELECTOR],
    )
    return JobDetailInfo(
        description=str(raw.get("description") or ""),
        skill_chips=[str(c) for c in raw.get("skillChips") or []],
        applicants=_parse_count(raw.get("applicants")),
        openings=_parse_count(raw.get("openings")) or 1,
    )


def _parse_count(value: object) -> int | None:
    """Parse a stat value like '1,204'; None when absent or non-numeric."""
    if value is None:
        return None
    digits = re.sub(r"[^\d]", "", str(value))
    return int(digits) if digits else None
