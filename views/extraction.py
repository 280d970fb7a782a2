# views/extraction.py
from fasthtml.common import *
from monsterui.all import *

from components.buttons import (
    action_button,
    download_button,
    progress_bar,
    spinner,
    status_badge,
)
from components.errors import InlineError, StatusAlert
from constants import CARD_BASE, CARD_HEADER, EXAM_TYPES, PDF_FORMATS, STYLES
from tracking.tracker import JobTracker
from validators import ExtractionForm
from views.projection import (
    Panel,
    affordances,
    exam_label,
    format_description,
    format_label,
    panel,
    progress_percentage,
)


def _select(name: str, label: str, options: dict, selected: str) -> Div:
    return Div(
        Label(label, fr=name, cls=STYLES["label"]),
        Select(
            *[
                Option(text, value=value, selected=value == selected)
                for value, text in options.items()
            ],
            id=name,
            name=name,
            cls=STYLES["input"],
        ),
    )


def render_extraction_form(form: ExtractionForm, tracker: JobTracker) -> Form:
    """Topic / exam type / PDF format form with any local or launch errors."""
    errors = list(tracker.validation_errors)
    if tracker.launch_error:
        errors.append(tracker.launch_error)

    return Form(
        Div(
            Label(
                'Enter Topic (e.g., "Heart", "Physics", "Mathematics")',
                fr="topic",
                cls=STYLES["label"],
            ),
            Input(
                type="text",
                id="topic",
                name="topic",
                value=form.topic,
                placeholder="e.g., Heart, Physics, Mathematics",
                cls=STYLES["input"],
            ),
        ),
        _select(
            "exam_type",
            "Select Exam Type",
            {value: exam_label(value) for value in EXAM_TYPES},
            form.exam_type,
        ),
        _select("pdf_format", "Select PDF Format", PDF_FORMATS, form.pdf_format),
        InlineError(*errors) if errors else None,
        Button(
            f"🚀 Generate {form.exam_type} MCQ PDF ({format_label(form.pdf_format)} Format)",
            type="submit",
            cls=STYLES["btn_primary"],
        ),
        hx_post="/extract",
        hx_target="#main-panel",
        hx_swap="outerHTML",
        cls="space-y-4",
    )


def render_extraction_progress(form: ExtractionForm, tracker: JobTracker) -> Div:
    status = tracker.status
    return Div(
        spinner(
            f"Generating {form.exam_type} MCQ PDF ({format_label(form.pdf_format)} Format)..."
        ),
        Div(
            Div(
                Span("Status:", cls="text-sm font-medium text-gray-600"),
                status_badge(status.lifecycle),
                cls="flex justify-between items-center",
            ),
            Div(Strong("Progress:"), f" {status.message}", cls="text-sm text-gray-700"),
            (
                Div(
                    Div(
                        Span(
                            f"Links processed: {status.processed_links}/{status.total_links}"
                        ),
                        Span(f"MCQs found: {status.mcqs_found}"),
                        cls="flex justify-between text-xs text-gray-600",
                    ),
                    progress_bar(progress_percentage(status), el_id="extraction-progress"),
                    Span(
                        f"{progress_percentage(status)}%",
                        cls="text-xs text-gray-600",
                        id="extraction-percentage",
                    ),
                    cls="space-y-1",
                )
                if affordances(status).show_link_progress
                else None
            ),
            cls="bg-gray-50 rounded-lg p-4 space-y-2",
        ),
        cls="space-y-4",
    )


def render_extraction_result(form: ExtractionForm, tracker: JobTracker, client) -> Div:
    status = tracker.status
    can_download = affordances(status).can_download
    return StatusAlert(
        "PDF Generated Successfully!",
        P(
            f'Found {status.mcqs_found} {form.exam_type} MCQs related to "{form.topic}"',
            cls="text-green-700 text-sm mb-2",
        ),
        P(
            f"Format: {format_description(form.pdf_format)}",
            cls="text-green-600 text-xs mb-4",
        ),
        Div(
            download_button(client.artifact_url(status.artifact_ref)) if can_download else None,
            action_button("🔄 Extract Another Topic", "/extract/reset", kind="neutral"),
            cls="flex space-x-3",
        ),
        type="success",
    )


def render_extraction_failure(tracker: JobTracker) -> Div:
    status = tracker.status
    return StatusAlert(
        "Error Occurred",
        P(status.message or status.error_message or "", cls="text-red-700 text-sm mb-4"),
        action_button("🔄 Try Again", "/extract/reset", kind="danger"),
        type="error",
    )


def render_extraction_panel(form: ExtractionForm, tracker: JobTracker, client) -> Div:
    """Extraction card body, chosen from the tracker's current lifecycle."""
    current = panel(tracker.status)
    body = (
        render_extraction_form(form, tracker)
        if current == Panel.FORM
        else render_extraction_progress(form, tracker)
    )

    return Div(
        Div(
            Div(H2("Extract MCQs by Topic", cls="text-xl font-semibold text-white"), cls=CARD_HEADER),
            Div(body, cls="p-6"),
            cls=CARD_BASE,
        ),
        render_extraction_result(form, tracker, client) if current == Panel.RESULT else None,
        render_extraction_failure(tracker) if current == Panel.FAILURE else None,
        id="extraction-panel",
    )
