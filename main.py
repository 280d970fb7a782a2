"""
Main entry point for the MCQ Extractor web client.
A single view that switches from environment setup to topic extraction.
"""

import logging
from typing import Optional

from dotenv import load_dotenv
from fasthtml.common import *
from monsterui.all import *

from constants import PAGE_BG
from controllers import PanelController
from services.backend_client import BackendClient
from services.config import ClientConfig, setup_logging
from tracking.gate import SetupGate
from views.page import render_format_info, render_header

# Get logger instance
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

config = ClientConfig.from_env()

# One client instance per process: one gate, one tracker per job kind
_client: Optional[BackendClient] = None
_gate: Optional[SetupGate] = None


def get_client() -> BackendClient:
    global _client
    if _client is None:
        _client = BackendClient(config)
    return _client


def get_gate() -> SetupGate:
    global _gate
    if _gate is None:
        _gate = SetupGate(get_client(), interval=config.poll_interval)
    return _gate


def get_controller() -> PanelController:
    return PanelController(get_gate(), get_client(), config.poll_interval)


async def shutdown():
    """Cancel polling tasks and close the HTTP client."""
    global _gate, _client
    if _gate is not None:
        _gate.close()
        _gate = None
    if _client is not None:
        await _client.close()
        _client = None
    logger.info("Client shut down, polling cancelled")


# --- App Initialization ---
hdrs = Theme.blue.headers()

app, rt = fast_app(
    hdrs=hdrs,
    title="Testbook MCQ Extractor",
    on_shutdown=[shutdown],
)


def init_app():
    """Initialize application components.

    This function should be called at application startup.
    It sets up logging for the web client.
    """
    setup_logging(config.log_level)
    logger.info(f"MCQ Extractor client using backend {config.backend_url}")


init_app()


@rt
async def index():
    controller = get_controller()
    await controller.gate.initialize()
    return Title("Testbook MCQ Extractor"), Div(
        Div(
            Div(
                render_header(controller.gate.form.exam_type),
                controller.render(),
                render_format_info(),
                cls="max-w-2xl mx-auto",
            ),
            cls="container mx-auto px-4 py-8",
        ),
        cls=PAGE_BG,
    )


@rt("/panel")
async def panel():
    return await get_controller().panel()


@rt("/setup", methods=["POST"])
async def start_setup():
    return await get_controller().start_setup()


@rt("/setup/retry", methods=["POST"])
async def retry_setup():
    return await get_controller().retry_setup()


@rt("/extract", methods=["POST"])
async def extract(topic: str = "", exam_type: str = "SSC", pdf_format: str = "text"):
    return await get_controller().submit_extraction(topic, exam_type, pdf_format)


@rt("/extract/reset", methods=["POST"])
async def reset_extraction():
    return await get_controller().reset_extraction()


serve()
