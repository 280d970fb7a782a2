"""
Unified error and alert components.
Standardizes error, notice and success display across the client.
"""

from fasthtml.common import *
from monsterui.all import *

COLOR_SCHEMES = {
    "error": {
        "bg": "bg-red-50",
        "border": "border-red-200",
        "title": "text-red-800",
        "text": "text-red-700",
        "icon": "⚠️",
    },
    "warning": {
        "bg": "bg-yellow-50",
        "border": "border-yellow-200",
        "title": "text-yellow-800",
        "text": "text-yellow-700",
        "icon": "⚠️",
    },
    "info": {
        "bg": "bg-blue-50",
        "border": "border-blue-200",
        "title": "text-blue-800",
        "text": "text-blue-700",
        "icon": "ℹ️",
    },
    "success": {
        "bg": "bg-green-50",
        "border": "border-green-200",
        "title": "text-green-800",
        "text": "text-green-700",
        "icon": "📄",
    },
}


def StatusAlert(title: str, *content, type: str = "error", **kwargs) -> Div:
    """
    Standardized alert box with a title and arbitrary body content.

    Args:
        title: Alert title (e.g., "Error Occurred")
        *content: Body components (paragraphs, buttons)
        type: Alert type - "error", "warning", "info", "success"

    Example:
        >>> StatusAlert("Error Occurred", P("failed to fetch job status"))
    """
    scheme = COLOR_SCHEMES.get(type, COLOR_SCHEMES["error"])
    return Div(
        H3(
            f"{scheme['icon']} {title}",
            cls=f"text-lg font-semibold mb-2 {scheme['title']}",
        ),
        *content,
        cls=f"mt-6 border rounded-lg p-4 {scheme['bg']} {scheme['border']}",
        **kwargs,
    )


def InlineError(*messages: str) -> Div:
    """Small red box listing local validation or launch errors."""
    return Div(
        *[P(m, cls="text-red-800 text-sm") for m in messages],
        cls="bg-red-50 border border-red-200 rounded-lg p-3",
    )


def InlineNotice(message: str) -> Div:
    """Informational (non-error) notice, e.g. setup already in progress."""
    return Div(
        P(message, cls="text-blue-800 text-sm"),
        cls="bg-blue-50 border border-blue-200 rounded-lg p-3",
    )


def get_setup_error_hints(error_text: str) -> list:
    """
    Suggest next steps for a failed setup job.

    The backend message itself is always shown verbatim; these hints are
    shown underneath it.

    Example:
        >>> get_setup_error_hints("Playwright browser download timed out")
        ['Check the backend host has network access', ...]
    """
    error_lower = (error_text or "").lower()

    hint_mappings = {
        "timeout": [
            "Check the backend host has network access",
            "Retry setup once the connection is stable",
        ],
        "timed out": [
            "Check the backend host has network access",
            "Retry setup once the connection is stable",
        ],
        "playwright": [
            "Make sure Playwright can install its browsers on the backend host",
            "Retry setup to force a clean reinstall",
        ],
        "browser": [
            "Make sure Playwright can install its browsers on the backend host",
            "Retry setup to force a clean reinstall",
        ],
        "permission": [
            "Check the backend process can write to its install directory",
        ],
    }

    for pattern, hints in hint_mappings.items():
        if pattern in error_lower:
            return hints

    return ["Retry setup to reset the backend environment"]
