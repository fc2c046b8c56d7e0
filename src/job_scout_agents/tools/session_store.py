"""File-backed session store."""

from __future__ import annotations

from pathlib import Path

import structlog
from pydantic import ValidationError

from job_scout_core.exceptions import SessionError
from job_scout_core.models.session import Session

logger = structlog.get_logger()


class FileSessionStore:
    """Stores the cookie set as JSON at a fixed path."""

    def __init__(self, path: Path) -> None:
        """Initialize with the session file path."""
        self.path = path

    def load(self) -> Session | None:
        """Load the saved session, or None when the file does not exist."""
        if not self.path.exists():
            return None
        try:
            session = Session.model_validate_json(self.path.read_text())
        except (OSError, ValidationError) as e:
            msg = f"Failed to load session {self.path}: {e}"
            raise SessionError(msg) from e
        logger.info("session_loaded", path=str(self.path), cookies=len(session.cookies))
        return session

    def save(self, session: Session) -> None:
        """Write the session, creating parent directories as needed."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(session.model_dump_json(indent=2))
        except OSError as e:
            msg = f"Failed to save session {self.path}: {e}"
            raise SessionError(msg) from e
        logger.info("session_saved", path=str(self.path), cookies=len(session.cookies))

    def is_valid(self, session: Session) -> bool:
        """Any stored session with cookies is trusted; there is no expiry check yet."""
        return bool(session.cookies)
