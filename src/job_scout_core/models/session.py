"""Persisted browser session."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class Session(BaseModel):
    """Cookie set captured after a successful login."""

    cookies: list[dict[str, Any]] = Field(
        default_factory=list, description="Browser cookies, in browser order"
    )
    saved_at: datetime | None = Field(
        default_factory=lambda: datetime.now(UTC), description="When the session was saved"
    )
