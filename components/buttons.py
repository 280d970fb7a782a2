"""Button, badge and progress components for the MCQ Extractor client."""

from typing import Optional

from fasthtml.common import *
from monsterui.all import *

from constants import STYLES
from views.projection import badge_cls

MAIN_PANEL_ID = "main-panel"


def action_button(text: str, path: str, kind: str = "primary", **kwargs) -> Button:
    """
    HTMX button that POSTs to `path` and swaps the main panel with the response.

    kind: 'primary' | 'success' | 'neutral' | 'danger'
    """
    cls_key = f"btn_{kind}"
    return Button(
        text,
        cls=STYLES.get(cls_key, STYLES["btn_primary"]),
        hx_post=path,
        hx_target=f"#{MAIN_PANEL_ID}",
        hx_swap="outerHTML",
        **kwargs,
    )


def download_button(href: Optional[str]) -> A:
    """Plain navigation to the backend-provided artifact URL."""
    return A(
        "📥 Download PDF",
        href=href,
        target="_blank",
        rel="noopener",
        cls=STYLES["btn_success"],
    )


def status_badge(lifecycle: str) -> Span:
    return Span(lifecycle, cls=f"{STYLES['badge']} {badge_cls(lifecycle)}")


def progress_bar(percentage: int, el_id: Optional[str] = None) -> Div:
    """Horizontal bar filled to `percentage` (0-100)."""
    return Div(
        Div(cls=STYLES["progress_fill"], style=f"width: {percentage}%"),
        cls=STYLES["progress_track"],
        id=el_id,
        role="progressbar",
        aria_valuenow=str(percentage),
        aria_valuemin="0",
        aria_valuemax="100",
    )


def spinner(label: str) -> Div:
    return Div(
        Div(cls=STYLES["spinner"]),
        Span(label, cls="text-lg font-medium"),
        cls="flex items-center justify-center",
    )
