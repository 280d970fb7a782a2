# components/__init__.py
# Re-exports for clean imports

from components.buttons import (
    MAIN_PANEL_ID,
    action_button,
    download_button,
    progress_bar,
    spinner,
    status_badge,
)
from components.errors import (
    InlineError,
    InlineNotice,
    StatusAlert,
    get_setup_error_hints,
)

__all__ = [
    # Buttons & indicators
    "MAIN_PANEL_ID",
    "action_button",
    "download_button",
    "progress_bar",
    "spinner",
    "status_badge",
    # Alerts
    "InlineError",
    "InlineNotice",
    "StatusAlert",
    "get_setup_error_hints",
]
