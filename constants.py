"""
Application constants for the MCQ Extractor client.
Centralized configuration for job kinds, lifecycle values, UI styling and form data.
"""

# =============================================================================
# JOB KINDS & LIFECYCLE
# =============================================================================


class JobKind:
    """Backend job kinds tracked by the client."""

    SETUP = "setup"
    EXTRACTION = "extraction"


class Lifecycle:
    """Coarse lifecycle of a tracked job."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"

    TERMINAL = frozenset({COMPLETED, ERROR})

    # Raw backend status strings -> lifecycle
    FROM_BACKEND = {
        "started": RUNNING,
        "running": RUNNING,
        "pending": RUNNING,
        "queued": RUNNING,
        "completed": COMPLETED,
        "error": ERROR,
        "failed": ERROR,
    }


# =============================================================================
# POLLING
# =============================================================================
DEFAULT_POLL_INTERVAL = 2.0  # seconds

# Fixed messages synthesized when a status request fails in transport
STATUS_FETCH_FAILED = {
    JobKind.SETUP: "failed to fetch setup status",
    JobKind.EXTRACTION: "failed to fetch job status",
}

# Handle id used when attaching to a setup job whose id the backend did not report
CURRENT_SETUP_ID = "current"

SETUP_ALREADY_RUNNING_NOTICE = "Setup is already in progress. Tracking the running job."
START_EXTRACTION_FAILED = "Failed to start MCQ generation"

# =============================================================================
# BACKEND ENDPOINTS
# =============================================================================
SETUP_STATE_PATH = "/api/setup-status"
SETUP_START_PATH = "/api/setup"
SETUP_POLL_PATH = "/api/setup-status/{id}"
SETUP_FORCE_RESET_PATH = "/api/setup/force-reset"
EXTRACTION_START_PATH = "/api/generate-mcq-pdf"
EXTRACTION_POLL_PATH = "/api/job-status/{id}"

# =============================================================================
# FORM OPTIONS
# =============================================================================
EXAM_TYPES = {
    "SSC": "SSC (Staff Selection Commission)",
    "BPSC": "BPSC (Bihar Public Service Commission)",
}
PDF_FORMATS = {
    "text": "Text Form (Traditional PDF with text)",
    "image": "Image Form (Screenshots of MCQ pages)",
}
DEFAULT_EXAM_TYPE = "SSC"
DEFAULT_PDF_FORMAT = "text"

FORMAT_INFO = [
    ("Text Format", "Traditional PDF with extracted text, questions, and answers"),
    (
        "Image Format",
        "Screenshots of actual Testbook pages showing MCQs with original formatting",
    ),
    (
        "Exam Types",
        "SSC (Staff Selection Commission) and BPSC (Bihar Public Service Commission)",
    ),
]

# =============================================================================
# CSS CLASS CONSTANTS
# =============================================================================
CARD_BASE = "bg-white rounded-xl shadow-lg overflow-hidden"
CARD_HEADER = "bg-gradient-to-r from-blue-600 to-indigo-600 px-6 py-4"
PAGE_BG = "min-h-screen bg-gradient-to-br from-blue-50 to-indigo-100"

# Badge colors keyed by lifecycle
BADGE_CLASSES = {
    Lifecycle.IDLE: "bg-gray-100 text-gray-800",
    Lifecycle.RUNNING: "bg-blue-100 text-blue-800",
    Lifecycle.COMPLETED: "bg-green-100 text-green-800",
    Lifecycle.ERROR: "bg-red-100 text-red-800",
}

STYLES = {
    "input": "w-full px-4 py-3 border border-gray-300 rounded-lg focus:ring-2 focus:ring-blue-500 focus:border-transparent outline-none transition-colors",
    "label": "block text-sm font-medium text-gray-700 mb-2",
    "btn_primary": "w-full bg-blue-600 hover:bg-blue-700 text-white font-medium py-3 px-4 rounded-lg transition-colors duration-200",
    "btn_success": "bg-green-600 hover:bg-green-700 text-white font-medium py-2 px-4 rounded-lg transition-colors duration-200",
    "btn_neutral": "bg-gray-600 hover:bg-gray-700 text-white font-medium py-2 px-4 rounded-lg transition-colors duration-200",
    "btn_danger": "bg-red-600 hover:bg-red-700 text-white font-medium py-2 px-4 rounded-lg transition-colors duration-200",
    "badge": "px-2 py-1 rounded text-xs font-medium",
    "progress_track": "w-full bg-gray-200 rounded-full h-2",
    "progress_fill": "bg-blue-600 h-2 rounded-full transition-all duration-500",
    "spinner": "animate-spin rounded-full h-8 w-8 border-b-2 border-blue-600 mr-3",
}
