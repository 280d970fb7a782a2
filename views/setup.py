# views/setup.py
from fasthtml.common import *
from monsterui.all import *

from components.buttons import action_button, spinner, status_badge
from components.errors import InlineError, InlineNotice, StatusAlert, get_setup_error_hints
from constants import CARD_BASE, CARD_HEADER
from tracking.gate import GateState, SetupGate
from views.projection import affordances


def _notices(gate: SetupGate) -> list:
    tracker = gate.setup
    items = []
    if tracker.notice:
        items.append(InlineNotice(tracker.notice))
    if tracker.launch_error:
        items.append(InlineError(tracker.launch_error))
    if gate.initial_error and gate.state == GateState.LOCKED:
        items.append(InlineError(f"Could not check setup state: {gate.initial_error}"))
    return items


def render_setup_locked(gate: SetupGate) -> Div:
    return Div(
        P(
            "The extraction backend needs a one-time browser environment setup "
            "before MCQs can be extracted.",
            cls="text-gray-700 text-sm",
        ),
        *_notices(gate),
        action_button("⚙️ Run Setup", "/setup", kind="primary"),
        cls="space-y-4",
    )


def render_setup_running(gate: SetupGate) -> Div:
    status = gate.setup.status
    return Div(
        spinner("Setting up the extraction environment..."),
        *_notices(gate),
        Div(
            Div(
                Span("Status:", cls="text-sm font-medium text-gray-600"),
                status_badge(status.lifecycle),
                cls="flex justify-between items-center",
            ),
            (
                Div(Strong("Step:"), f" {status.step}", cls="text-sm text-gray-700")
                if status.step
                else None
            ),
            (
                Div(Strong("Progress:"), f" {status.message}", cls="text-sm text-gray-700")
                if status.message
                else None
            ),
            cls="bg-gray-50 rounded-lg p-4 space-y-2",
        ),
        cls="space-y-4",
    )


def render_setup_failed(gate: SetupGate) -> Div:
    status = gate.setup.status
    message = status.error_message or status.message or "Setup failed"
    return Div(
        *_notices(gate),
        StatusAlert(
            "Setup Failed",
            P(message, cls="text-red-700 text-sm mb-2"),
            Ul(
                *[Li(h, cls="text-xs text-gray-600") for h in get_setup_error_hints(message)],
                cls="list-disc list-inside space-y-1 mb-4",
            ),
            (
                action_button("🔄 Retry Setup", "/setup/retry", kind="danger")
                if affordances(status).can_retry_setup
                else None
            ),
            type="error",
        ),
    )


def render_setup_panel(gate: SetupGate) -> Div:
    state = gate.state
    if state == GateState.SETTING_UP:
        body = render_setup_running(gate)
    elif state == GateState.FAILED:
        body = render_setup_failed(gate)
    else:
        body = render_setup_locked(gate)

    return Div(
        Div(
            Div(H2("Environment Setup", cls="text-xl font-semibold text-white"), cls=CARD_HEADER),
            Div(body, cls="p-6"),
            cls=CARD_BASE,
        ),
        id="setup-panel",
    )
