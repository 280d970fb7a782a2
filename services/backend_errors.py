"""
backend_errors.py
-----------------
Custom exception hierarchy for the MCQ backend client.
"""

from typing import Optional


class BackendServiceError(Exception):
    """Base exception for backend client errors."""

    @property
    def user_message(self) -> str:
        return str(self)


class BackendRequestError(BackendServiceError):
    """Raised on a transport failure or a non-2xx backend response."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail

    @property
    def user_message(self) -> str:
        """Backend-provided detail when present, otherwise the raw message."""
        return self.detail or str(self)


class LaunchRejectedError(BackendServiceError):
    """Raised when the backend declines to start a job."""


class SetupAlreadyRunningError(LaunchRejectedError):
    """Raised when a setup job is already running on the backend."""

    def __init__(self, setup_id: Optional[str] = None):
        super().__init__("Setup is already in progress")
        self.setup_id = setup_id
