# tracking/gate.py
"""
SetupGate: keeps the extraction form hidden until the backend setup job
has completed, and owns the extraction form state.
"""

import asyncio
import logging
from dataclasses import asdict
from typing import Optional

from constants import (
    CURRENT_SETUP_ID,
    DEFAULT_POLL_INTERVAL,
    SETUP_ALREADY_RUNNING_NOTICE,
    JobKind,
    Lifecycle,
)
from services.backend_errors import BackendRequestError, SetupAlreadyRunningError
from tracking.launcher import LaunchResult
from tracking.status import JobHandle, JobStatus
from tracking.tracker import JobTracker, TrackerBusyError
from validators import ExtractionForm

logger = logging.getLogger(__name__)


class GateState:
    """Where the gate stands relative to setup completion."""

    CHECKING = "checking"  # initial setup-state query not done yet
    LOCKED = "locked"  # setup incomplete, no job running
    SETTING_UP = "setting_up"  # a setup job is being polled
    FAILED = "failed"  # setup job ended in error
    UNLOCKED = "unlocked"  # extraction form available


class SetupGate:
    """
    Compose one JobTracker per job kind behind the setup check.

    Usage:
        gate = SetupGate(client)
        await gate.initialize()
        if not gate.is_unlocked:
            await gate.start_setup()
    """

    def __init__(self, client, interval: float = DEFAULT_POLL_INTERVAL):
        self.client = client
        self.setup = JobTracker(JobKind.SETUP, client, interval=interval)
        self.extraction = JobTracker(JobKind.EXTRACTION, client, interval=interval)
        self.form = ExtractionForm()
        self.setup_complete = False
        self.initialized = False
        self.initial_error: Optional[str] = None
        self._init_lock = asyncio.Lock()
        self.setup.add_terminal_listener(self._on_setup_terminal)

    # --------------------------
    # State
    # --------------------------

    @property
    def state(self) -> str:
        if self.setup_complete:
            return GateState.UNLOCKED
        if self.setup.is_active or self.setup.status.is_running:
            return GateState.SETTING_UP
        if not self.initialized:
            return GateState.CHECKING
        if self.setup.status.lifecycle == Lifecycle.ERROR:
            return GateState.FAILED
        return GateState.LOCKED

    @property
    def is_unlocked(self) -> bool:
        return self.setup_complete

    # --------------------------
    # Setup flow
    # --------------------------

    async def initialize(self) -> str:
        """
        Query setup state once. Safe to call repeatedly and concurrently: only
        the first call reaches the backend, later callers wait for its result.
        """
        async with self._init_lock:
            if not self.initialized:
                await self._load_setup_state()
        return self.state

    async def _load_setup_state(self) -> None:
        try:
            state = await self.client.get_setup_state()
        except BackendRequestError as e:
            self.initial_error = e.user_message
            self.initialized = True
            logger.error(f"Failed to query setup state: {e}")
            return

        self.initialized = True
        if state.get("is_setup_complete"):
            logger.info("✅ Backend setup already complete")
            self.setup_complete = True
        elif state.get("setup_in_progress"):
            # A previous session left setup running: attach, never relaunch
            setup_id = state.get("setup_id") or CURRENT_SETUP_ID
            if not self.setup.is_active:
                logger.info(f"Setup already in progress, attaching to {setup_id}")
                self.setup.attach(JobHandle(str(setup_id), JobKind.SETUP))
        elif state.get("setup_error"):
            logger.warning(f"Backend reports setup error: {state['setup_error']}")
            self.setup.model.apply(
                {"status": "error", "error_message": state["setup_error"]}
            )

    async def start_setup(self) -> Optional[LaunchResult]:
        """
        Launch the setup job. If the backend says setup is already running,
        surface that as a notice and track the running job instead.
        """
        try:
            return await self.setup.submit()
        except SetupAlreadyRunningError as e:
            self._track_running_setup(e.setup_id)
            return None

    async def retry_setup(self) -> Optional[LaunchResult]:
        """Force-reset, discard the previous setup job, relaunch."""
        self.setup_complete = False
        try:
            return await self.setup.retry()
        except SetupAlreadyRunningError as e:
            self._track_running_setup(e.setup_id)
            return None

    def _track_running_setup(self, setup_id: Optional[str]) -> None:
        if not self.setup.is_active:
            self.setup.attach(JobHandle(str(setup_id or CURRENT_SETUP_ID), JobKind.SETUP))
        self.setup.notice = SETUP_ALREADY_RUNNING_NOTICE

    def _on_setup_terminal(self, status: JobStatus) -> None:
        if status.lifecycle == Lifecycle.COMPLETED:
            logger.info("✅ Setup completed, extraction unlocked")
            self.setup_complete = True

    # --------------------------
    # Extraction flow
    # --------------------------

    async def submit_extraction(self, form: ExtractionForm) -> LaunchResult:
        """Remember the form and launch an extraction job (gate must be unlocked)."""
        if not self.setup_complete:
            raise RuntimeError("Extraction is unavailable until setup completes")
        if self.extraction.is_active or self.extraction.status.is_running:
            raise TrackerBusyError("An extraction job is already running")
        self.form = form
        return await self.extraction.submit(form)

    def reset_form(self) -> None:
        """Restore form defaults and clear any prior extraction job."""
        self.form = ExtractionForm()
        self.extraction.reset()
        logger.debug(f"Extraction form reset: {asdict(self.form)}")

    def close(self) -> None:
        """Cancel every polling session."""
        self.setup.close()
        self.extraction.close()
