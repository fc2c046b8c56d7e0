"""Abstract session store interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from job_scout_core.models.session import Session


@runtime_checkable
class SessionStore(Protocol):
    """Persists the logged-in cookie set between runs."""

    def load(self) -> Session | None:
        """Return the saved session, or None when nothing is stored."""
        ...

    def save(self, session: Session) -> None:
        """Persist a session, replacing any previous one."""
        ...

    def is_valid(self, session: Session) -> bool:
        """Whether a loaded session may be trusted without logging in again."""
        ...
