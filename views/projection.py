# views/projection.py
"""
Presentation-only values derived from a JobStatus.

Everything here is a pure function recomputed on every render; nothing is
cached or stored.
"""

import math
from dataclasses import dataclass

from constants import BADGE_CLASSES, EXAM_TYPES, Lifecycle
from tracking.status import JobStatus
from utils.core import clamp


class Panel:
    FORM = "form"
    PROGRESS = "progress"
    RESULT = "result"
    FAILURE = "failure"


@dataclass(frozen=True)
class Affordances:
    can_submit: bool
    can_reset: bool
    can_download: bool
    can_retry_setup: bool
    show_link_progress: bool


def progress_percentage(status: JobStatus) -> int:
    """
    Links processed as a whole percentage.

    0 when total_links is 0 (display fallback, not an error). Halves round up.
    """
    if not status or status.total_links <= 0:
        return 0
    ratio = 100 * status.processed_links / status.total_links
    return int(clamp(math.floor(ratio + 0.5), 0, 100))


def badge_cls(lifecycle: str) -> str:
    return BADGE_CLASSES.get(lifecycle, BADGE_CLASSES[Lifecycle.IDLE])


def panel(status: JobStatus) -> str:
    """Which extraction panel to render for the current lifecycle."""
    return {
        Lifecycle.RUNNING: Panel.PROGRESS,
        Lifecycle.COMPLETED: Panel.RESULT,
        Lifecycle.ERROR: Panel.FAILURE,
    }.get(status.lifecycle, Panel.FORM)


def affordances(status: JobStatus) -> Affordances:
    lifecycle = status.lifecycle
    return Affordances(
        can_submit=lifecycle == Lifecycle.IDLE,
        can_reset=lifecycle in Lifecycle.TERMINAL,
        can_download=lifecycle == Lifecycle.COMPLETED and bool(status.artifact_ref),
        can_retry_setup=lifecycle != Lifecycle.RUNNING,
        show_link_progress=status.total_links > 0,
    )


def format_label(pdf_format: str) -> str:
    return "Text" if pdf_format == "text" else "Image"


def format_description(pdf_format: str) -> str:
    return (
        "Text-based PDF"
        if pdf_format == "text"
        else "Image-based PDF with screenshots"
    )


def exam_label(exam_type: str) -> str:
    return EXAM_TYPES.get(exam_type, exam_type)
