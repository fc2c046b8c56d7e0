"""Public interface re-exports for job_scout_core."""

from job_scout_core.interfaces.driver import ElementHandle, NavigationDriver, PageHandle
from job_scout_core.interfaces.session_store import SessionStore

__all__ = [
    "ElementHandle",
    "NavigationDriver",
    "PageHandle",
    "SessionStore",
]
