"""Custom exception hierarchy for job-scout."""

from __future__ import annotations


class JobScoutError(Exception):
    """Base exception for all job-scout errors."""


class BrowserLaunchError(JobScoutError):
    """Raised when the headless browser cannot be started."""


class NavigationError(JobScoutError):
    """Raised when a navigation or page wait fails or times out."""


class ElementNotFoundError(JobScoutError):
    """Raised when an expected control is missing from the page."""


class ClassificationIndeterminateError(JobScoutError):
    """Raised when the apply flow ran but no authoritative signal resolved."""


class TransientUiError(JobScoutError):
    """Raised when a click is intercepted or the control is obscured.

    Always retried by the component that raised it.
    """


class SessionError(JobScoutError):
    """Raised when the saved session cannot be loaded, saved, or established."""


class ExportError(JobScoutError):
    """Raised when writing the spreadsheet output fails."""


class EmailDeliveryError(JobScoutError):
    """Raised when email sending fails."""
