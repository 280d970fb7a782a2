# tracking/tracker.py
"""
Reusable job-tracking component, parametrized by job kind.

Composes a JobStatusModel, a JobLauncher and a Poller so the setup and
extraction flows share one implementation.
"""

import inspect
import logging
from typing import Callable, List, Optional

from constants import DEFAULT_POLL_INTERVAL, START_EXTRACTION_FAILED, JobKind
from services.backend_errors import (
    BackendRequestError,
    LaunchRejectedError,
    SetupAlreadyRunningError,
)
from tracking.launcher import JobLauncher, LaunchResult
from tracking.poller import Poller, PollerBusyError
from tracking.status import JobHandle, JobStatus, JobStatusModel
from validators import ExtractionForm, ExtractionValidationError

logger = logging.getLogger(__name__)

StatusListener = Callable[[JobStatus], None]


async def _notify(listeners: List[StatusListener], status: JobStatus) -> None:
    for listener in list(listeners):
        result = listener(status)
        if inspect.isawaitable(result):
            await result


class TrackerBusyError(RuntimeError):
    """Raised when submitting while a job of the same kind is still running."""


class JobTracker:
    """Track one job kind: launch, poll, reset."""

    def __init__(
        self,
        kind: str,
        client,
        interval: float = DEFAULT_POLL_INTERVAL,
        launcher: Optional[JobLauncher] = None,
    ):
        self.kind = kind
        self.client = client
        self.model = JobStatusModel(kind)
        self.launcher = launcher or JobLauncher(client)
        self.poller = Poller(client.fetch_status, self.model, interval=interval)
        self.handle: Optional[JobHandle] = None
        self.validation_errors: List[str] = []
        self.notice: Optional[str] = None
        self.launch_error: Optional[str] = None
        self._update_listeners: List[StatusListener] = []
        self._terminal_listeners: List[StatusListener] = []

    # --------------------------
    # Read-only views
    # --------------------------

    @property
    def status(self) -> JobStatus:
        return self.model.status

    @property
    def is_active(self) -> bool:
        return self.poller.active

    def add_update_listener(self, listener: StatusListener) -> None:
        self._update_listeners.append(listener)

    def add_terminal_listener(self, listener: StatusListener) -> None:
        self._terminal_listeners.append(listener)

    async def wait(self) -> JobStatus:
        """Wait for the current polling session to end; return the last status."""
        await self.poller.wait()
        return self.status

    # --------------------------
    # Operations
    # --------------------------

    async def submit(self, payload: Optional[ExtractionForm] = None) -> LaunchResult:
        """
        Launch a new job of this kind and start polling it.

        Validation and backend errors are recorded on the tracker for display
        and re-raised to the caller.
        """
        if self.is_active or self.status.is_running:
            raise TrackerBusyError(f"A {self.kind} job is already running")

        self.launch_error = None
        try:
            result = await self.launcher.launch(self.kind, payload)
        except ExtractionValidationError as e:
            self.validation_errors = list(e.errors)
            raise
        except SetupAlreadyRunningError:
            self.validation_errors = []
            raise
        except (BackendRequestError, LaunchRejectedError) as e:
            self.validation_errors = []
            self.launch_error = self._launch_error_message(e)
            logger.error(f"Failed to start {self.kind} job: {e}")
            raise
        self.validation_errors = []
        await self._begin(result)
        return result

    def _launch_error_message(self, error: Exception) -> str:
        if isinstance(error, BackendRequestError) and error.detail:
            return error.detail
        if self.kind == JobKind.EXTRACTION:
            return START_EXTRACTION_FAILED
        return error.user_message

    async def _begin(self, result: LaunchResult) -> None:
        self.model.reset()
        self.notice = None
        if self.kind == JobKind.EXTRACTION:
            # The launch response already carries the initial status fields
            status = self.model.apply(result.initial)
        else:
            status = self.model.apply({"status": "running", **result.initial})

        if status.is_terminal:
            # Finished (or failed) before the first poll: nothing to track
            self.handle = result.handle
            await self._on_terminal(status)
            return
        self.attach(result.handle)

    def attach(self, handle: JobHandle) -> None:
        """Start polling an existing job handle (PollerBusyError if already polling)."""
        if self.poller.active:
            raise PollerBusyError(f"A {self.kind} job is already being polled")
        self.handle = handle
        if not self.status.is_running:
            self.model.reset()
            self.model.apply({"status": "running"})
        self.poller.start(handle, on_update=self._on_update, on_terminal=self._on_terminal)

    async def retry(self) -> LaunchResult:
        """Force-reset the backend job state and relaunch (setup only)."""
        if self.kind != JobKind.SETUP:
            raise ValueError("Only the setup job supports retry")

        self.launch_error = None
        try:
            result = await self.launcher.retry_setup(on_reset=self._discard)
        except SetupAlreadyRunningError:
            raise
        except (BackendRequestError, LaunchRejectedError) as e:
            self.launch_error = self._launch_error_message(e)
            logger.error(f"Retrying {self.kind} job failed: {e}")
            raise
        await self._begin(result)
        return result

    def reset(self) -> None:
        """Cancel polling and return to idle."""
        self._discard()
        self.validation_errors = []
        self.notice = None
        self.launch_error = None

    def close(self) -> None:
        """Cancel any polling session (view unmount / shutdown)."""
        self.poller.stop()

    def _discard(self) -> None:
        self.poller.stop()
        self.handle = None
        self.model.reset()

    async def _on_update(self, status: JobStatus) -> None:
        await _notify(self._update_listeners, status)

    async def _on_terminal(self, status: JobStatus) -> None:
        job_id = self.handle.id if self.handle else "?"
        logger.info(f"{self.kind} job {job_id} finished: {status.lifecycle}")
        await _notify(self._terminal_listeners, status)
