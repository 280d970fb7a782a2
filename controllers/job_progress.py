# controllers/job_progress.py

import logging

from services.backend_errors import BackendServiceError
from tracking.gate import SetupGate
from tracking.poller import PollerBusyError
from tracking.tracker import TrackerBusyError
from validators import ExtractionForm, ExtractionValidationError
from views.page import render_main_panel

logger = logging.getLogger(__name__)


class PanelController:
    """
    HTMX handlers for the single main panel.

    Every action returns the re-rendered panel; errors worth showing are
    recorded on the trackers and rendered there, so handlers never raise.
    """

    def __init__(self, gate: SetupGate, client, refresh_seconds: float = 2.0):
        self.gate = gate
        self.client = client
        self.refresh_seconds = refresh_seconds

    def render(self):
        return render_main_panel(self.gate, self.client, self.refresh_seconds)

    async def panel(self):
        """Polled every refresh interval while a job is running."""
        # ✅ Debug level: hit every couple of seconds
        logger.debug(f"Panel refresh, gate state: {self.gate.state}")
        await self.gate.initialize()
        return self.render()

    async def start_setup(self):
        logger.info("Setup requested")
        try:
            await self.gate.start_setup()
        except (TrackerBusyError, PollerBusyError) as e:
            logger.warning(f"Ignoring setup request: {e}")
        except BackendServiceError as e:
            # Recorded on the setup tracker as launch_error
            logger.error(f"❌ Setup launch failed: {e}")
        return self.render()

    async def retry_setup(self):
        logger.info("Setup retry requested")
        try:
            await self.gate.retry_setup()
        except BackendServiceError as e:
            logger.error(f"❌ Setup retry failed: {e}")
        return self.render()

    async def submit_extraction(self, topic: str, exam_type: str, pdf_format: str):
        form = ExtractionForm(topic=topic, exam_type=exam_type, pdf_format=pdf_format)
        if not self.gate.is_unlocked:
            logger.warning("Extraction submitted before setup completed")
            return self.render()

        try:
            await self.gate.submit_extraction(form)
        except ExtractionValidationError as e:
            # Errors render under the form, which keeps what the user typed
            logger.info(f"Extraction form rejected: {e}")
        except TrackerBusyError as e:
            logger.warning(f"Ignoring extraction submit: {e}")
        except BackendServiceError as e:
            logger.error(f"❌ Extraction launch failed: {e}")
        return self.render()

    async def reset_extraction(self):
        self.gate.reset_form()
        return self.render()
