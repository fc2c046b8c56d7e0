"""Search URL construction."""

from __future__ import annotations

import math
from urllib.parse import urlencode

from job_scout_core.constants import (
    DATE_POSTED_FILTERS,
    EXPERIENCE_FILTERS,
    JOB_TYPE_FILTERS,
    PAGE_SIZE,
    REMOTE_FILTER_CODE,
    SEARCH_BASE_URL,
    SEARCH_ORIGIN,
    SORT_BY_CODES,
)
from job_scout_core.models.search import SearchParams


def build_search_url(params: SearchParams, page: int = 1) -> str:
    """Build the results URL for a 1-based page number."""
    query: list[tuple[str, str]] = []

    if params.keywords:
        query.append(("keywords", params.keywords))
    if params.location:
        query.append(("location", params.location))

    query.append(("f_TPR", DATE_POSTED_FILTERS[params.date_posted.value]))

    # Sorted so the URL is stable across runs
    for level in sorted(params.experience_level):
        query.append(("f_E", EXPERIENCE_FILTERS[level.value]))
    for job_type in sorted(params.job_type):
        query.append(("f_JT", JOB_TYPE_FILTERS[job_type.value]))

    if params.remote:
        query.append(("f_WT", REMOTE_FILTER_CODE))

    query.append(("sortBy", SORT_BY_CODES[params.sort_by.value]))
    query.append(("origin", SEARCH_ORIGIN))
    query.append(("refresh", "true"))
    query.append(("start", str((page - 1) * PAGE_SIZE)))

    return f"{SEARCH_BASE_URL}?{urlencode(query)}"


def compute_page_count(total_count: int, page_size: int = PAGE_SIZE) -> int:
    """Number of result pages to visit; always at least one."""
    return max(math.ceil(max(total_count, 0) / page_size), 1)
