# tracking/launcher.py
"""
One-shot job start requests and interpretation of their immediate response.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from constants import JobKind
from services.backend_errors import (
    BackendRequestError,
    LaunchRejectedError,
    SetupAlreadyRunningError,
)
from tracking.status import JobHandle
from validators import (
    ExtractionForm,
    ExtractionFormValidator,
    ExtractionValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaunchResult:
    """An accepted launch: the new job handle plus the raw launch response."""

    handle: JobHandle
    initial: Dict[str, Any] = field(default_factory=dict)


class JobLauncher:
    """Issue start requests for setup and extraction jobs."""

    def __init__(self, client):
        self.client = client

    async def launch(self, kind: str, payload: Optional[ExtractionForm] = None) -> LaunchResult:
        """
        Start a job of `kind`.

        Raises:
            ExtractionValidationError: extraction form failed local validation
                (no request is sent)
            SetupAlreadyRunningError: the backend reports setup already running
            BackendRequestError: transport failure or non-2xx response
        """
        if kind == JobKind.SETUP:
            return await self._launch_setup()
        if kind == JobKind.EXTRACTION:
            return await self._launch_extraction(payload)
        raise ValueError(f"Unknown job kind: {kind!r}")

    async def _launch_setup(self) -> LaunchResult:
        response = await self.client.start_setup()
        status = str(response.get("status", "")).lower()
        setup_id = response.get("setup_id")

        if status == "running":
            logger.info(f"Setup already in progress (setup_id={setup_id})")
            raise SetupAlreadyRunningError(setup_id=setup_id)
        if not setup_id:
            raise LaunchRejectedError(f"Setup start returned no setup_id: {response}")

        logger.info(f"🚀 Setup job started: {setup_id}")
        return LaunchResult(JobHandle(str(setup_id), JobKind.SETUP), response)

    async def _launch_extraction(self, form: Optional[ExtractionForm]) -> LaunchResult:
        form = form or ExtractionForm()
        errors = ExtractionFormValidator.validate(form)
        if errors:
            raise ExtractionValidationError(errors)

        response = await self.client.start_extraction(**form.to_payload())
        job_id = response.get("job_id")
        if not job_id:
            raise LaunchRejectedError(f"Extraction start returned no job_id: {response}")

        logger.info(
            f"🚀 Extraction job {job_id} started: topic={form.topic!r} "
            f"exam_type={form.exam_type} pdf_format={form.pdf_format}"
        )
        return LaunchResult(JobHandle(str(job_id), JobKind.EXTRACTION), response)

    async def retry_setup(self, on_reset: Optional[Callable[[], None]] = None) -> LaunchResult:
        """
        Force-reset the backend setup state, discard local state, relaunch setup.

        The force-reset request is always issued first. A failure at either
        step aborts and propagates.
        """
        try:
            await self.client.force_reset_setup()
        except BackendRequestError as e:
            logger.error(f"Force-reset of setup failed: {e}")
            raise
        logger.info("Setup state force-reset")

        if on_reset is not None:
            on_reset()
        return await self.launch(JobKind.SETUP)
