# views/page.py
from fasthtml.common import *
from monsterui.all import *

from components.buttons import MAIN_PANEL_ID
from constants import FORMAT_INFO
from tracking.gate import GateState, SetupGate
from views.extraction import render_extraction_panel
from views.setup import render_setup_panel


def is_refreshing(gate: SetupGate) -> bool:
    """True while the panel on screen belongs to a job that is still being polled."""
    if gate.state == GateState.SETTING_UP:
        return True
    return gate.is_unlocked and gate.extraction.status.is_running


def render_main_panel(gate: SetupGate, client, refresh_seconds: float = 2.0) -> Div:
    """
    Single view switching on setup completion.

    While a job is running the panel re-fetches itself every
    `refresh_seconds`; refresh attributes are dropped once it is terminal.
    """
    body = (
        render_extraction_panel(gate.form, gate.extraction, client)
        if gate.is_unlocked
        else render_setup_panel(gate)
    )
    refreshing = is_refreshing(gate)

    # HTMX will replace the entire outer div on each poll
    return Div(
        body,
        id=MAIN_PANEL_ID,
        hx_get="/panel" if refreshing else None,
        hx_trigger=f"every {refresh_seconds:g}s" if refreshing else None,
        hx_swap="outerHTML" if refreshing else None,
    )


def render_format_info() -> Div:
    return Div(
        H3("ℹ️ Format Information", cls="text-lg font-semibold text-blue-800 mb-2"),
        Div(
            *[
                Div(
                    Span(f"{title}:", cls="font-medium text-blue-700"),
                    Span(text, cls="text-blue-600 ml-2"),
                )
                for title, text in FORMAT_INFO
            ],
            cls="space-y-2 text-sm",
        ),
        cls="mt-6 bg-blue-50 border border-blue-200 rounded-lg p-4",
    )


def render_header(exam_type: str) -> Div:
    return Div(
        H1(
            f"📚 {exam_type}-Focused Testbook MCQ Extractor",
            cls="text-4xl font-bold text-gray-900 mb-2",
        ),
        P(
            f"Extract {exam_type}-relevant MCQs with Smart Topic Filtering from Testbook",
            cls="text-gray-600 mb-2",
        ),
        P(
            "✨ Only extracts MCQs where your topic appears in the question body!",
            cls="text-sm text-blue-600 font-medium",
        ),
        cls="text-center mb-8",
    )
