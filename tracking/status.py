# tracking/status.py
"""
Data shape and transition rules for a single asynchronous backend job.

Pure logic, no I/O. The backend is trusted but omits fields that do not
apply to a job kind, so normalization never raises.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from constants import Lifecycle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobHandle:
    id: str
    kind: str


@dataclass(frozen=True)
class JobStatus:
    lifecycle: str = Lifecycle.IDLE
    message: str = ""
    step: Optional[str] = None
    processed_links: int = 0
    total_links: int = 0
    mcqs_found: int = 0
    artifact_ref: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.lifecycle in Lifecycle.TERMINAL

    @property
    def is_running(self) -> bool:
        return self.lifecycle == Lifecycle.RUNNING

    @property
    def is_idle(self) -> bool:
        return self.lifecycle == Lifecycle.IDLE


def _non_negative_int(value: Any) -> int:
    """Coerce a numeric field, treating missing or malformed values as 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


def _lifecycle_from(raw: Mapping[str, Any]) -> str:
    status = raw.get("status")
    if status is None and any(
        key in raw for key in ("is_setup_complete", "setup_in_progress", "setup_error")
    ):
        # Global setup-state payload rather than a per-job one
        if raw.get("is_setup_complete"):
            return Lifecycle.COMPLETED
        if raw.get("setup_in_progress"):
            return Lifecycle.RUNNING
        # Neither running nor complete: the setup job is gone
        return Lifecycle.ERROR
    return Lifecycle.FROM_BACKEND.get(str(status).lower(), Lifecycle.RUNNING)


def normalize_status(raw: Optional[Mapping[str, Any]]) -> JobStatus:
    """
    Normalize a raw status payload into a JobStatus.

    Args:
        raw: Whatever the status endpoint (or extraction launch) returned

    Returns:
        JobStatus with numeric fields defaulted to 0 and optional fields to None
    """
    if not isinstance(raw, Mapping):
        raw = {}

    lifecycle = _lifecycle_from(raw)
    error_message = _optional_str(raw.get("error_message") or raw.get("setup_error"))
    message = raw.get("progress")
    if message is None:
        message = raw.get("message")
    if message is None and lifecycle == Lifecycle.ERROR:
        message = error_message

    return JobStatus(
        lifecycle=lifecycle,
        message="" if message is None else str(message),
        step=_optional_str(raw.get("step")),
        processed_links=_non_negative_int(raw.get("processed_links")),
        total_links=_non_negative_int(raw.get("total_links")),
        mcqs_found=_non_negative_int(raw.get("mcqs_found")),
        artifact_ref=_optional_str(raw.get("pdf_url")),
        error_message=error_message,
    )


class JobStatusModel:
    """
    Owns the JobStatus of one job kind.

    State machine: idle -> running -> {completed, error}. Terminal states are
    left only through reset().
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._status = JobStatus()

    @property
    def status(self) -> JobStatus:
        return self._status

    def apply(self, raw: Optional[Mapping[str, Any]]) -> JobStatus:
        new_status = normalize_status(raw)
        current = self._status

        if current.is_terminal:
            logger.warning(
                f"[{self.kind}] Ignoring {new_status.lifecycle} update after terminal "
                f"{current.lifecycle}"
            )
            return current

        if new_status.lifecycle != current.lifecycle:
            logger.info(
                f"[{self.kind}] {current.lifecycle} -> {new_status.lifecycle}"
                + (f": {new_status.message}" if new_status.message else "")
            )
        self._status = new_status
        return new_status

    def reset(self) -> JobStatus:
        if not self._status.is_idle:
            logger.info(f"[{self.kind}] {self._status.lifecycle} -> idle (reset)")
        self._status = JobStatus()
        return self._status
