# tracking/poller.py
"""
Cancellable repeating status poller.

One asyncio task per active session. Each tick awaits its status request
before the next one is scheduled, so at most one request per handle is ever
in flight and updates arrive strictly in order.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from constants import DEFAULT_POLL_INTERVAL, STATUS_FETCH_FAILED, Lifecycle
from services.backend_errors import BackendRequestError
from tracking.status import JobHandle, JobStatus, JobStatusModel

logger = logging.getLogger(__name__)

StatusCallback = Callable[[JobStatus], Union[None, Awaitable[None]]]
FetchStatus = Callable[[JobHandle], Awaitable[dict]]


class PollerBusyError(RuntimeError):
    """Raised when starting a poller that already has an active session."""


async def _maybe_await(result: Any) -> None:
    if inspect.isawaitable(result):
        await result


def _fetch_failed_payload(kind: str) -> dict:
    message = STATUS_FETCH_FAILED[kind]
    return {"status": "error", "progress": message, "error_message": message}


def _current_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        # No running loop (sync cleanup path)
        return None


@dataclass(frozen=True)
class PollHandle:
    """Handle to a started polling session; its only capability is cancel()."""

    poller: "Poller"
    handle: JobHandle

    def cancel(self) -> None:
        self.poller.stop()


class Poller:
    """
    Poll a job's status at a fixed cadence until it reaches a terminal state.

    The first request is issued one interval after start(). The cadence is
    measured from request issuance; a request slower than the interval is
    followed immediately by the next one instead of overlapping it.
    """

    def __init__(
        self,
        fetch_status: FetchStatus,
        model: JobStatusModel,
        interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self._fetch_status = fetch_status
        self.model = model
        self.interval = interval
        self._task: Optional[asyncio.Task] = None
        self._handle: Optional[JobHandle] = None
        self._active = False
        self.requests_issued = 0

    @property
    def active(self) -> bool:
        return self._active

    @property
    def handle(self) -> Optional[JobHandle]:
        return self._handle

    def start(
        self,
        handle: JobHandle,
        on_update: Optional[StatusCallback] = None,
        on_terminal: Optional[StatusCallback] = None,
    ) -> PollHandle:
        """Begin polling `handle`. Must be called from a running event loop."""
        if self._active:
            raise PollerBusyError(
                f"Poller for {self.model.kind} already tracking {self._handle.id}"
            )

        self._handle = handle
        self._active = True
        self._task = asyncio.get_running_loop().create_task(
            self._run(handle, on_update, on_terminal),
            name=f"poll-{handle.kind}-{handle.id}",
        )
        logger.info(f"Polling {handle.kind} job {handle.id} every {self.interval}s")
        return PollHandle(self, handle)

    def stop(self) -> None:
        """Deactivate and cancel the session. Idempotent."""
        was_active = self._active
        self._active = False
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()
        if was_active and self._handle is not None:
            logger.info(f"Stopped polling {self._handle.kind} job {self._handle.id}")

    async def wait(self) -> None:
        """Wait for the current session (if any) to finish or be cancelled."""
        task = self._task
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _run(
        self,
        handle: JobHandle,
        on_update: Optional[StatusCallback],
        on_terminal: Optional[StatusCallback],
    ) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.interval

        try:
            while self._active:
                delay = next_tick - loop.time()
                if delay > 0:
                    await asyncio.sleep(delay)
                if not self._active:
                    break

                # Cadence is measured from issuance of this request
                next_tick = loop.time() + self.interval
                status = await self._tick(handle)

                await _maybe_await(on_update(status) if on_update else None)
                if status.lifecycle in Lifecycle.TERMINAL:
                    # Deactivate before anything else can request another status
                    self.stop()
                    await _maybe_await(on_terminal(status) if on_terminal else None)
                    break
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"Polling {handle.kind} job {handle.id} crashed")
            # End the job so a new one can be submitted
            self.stop()
            self.model.apply(_fetch_failed_payload(handle.kind))
        finally:
            if self._task is _current_task():
                self._active = False
                self._task = None

    async def _tick(self, handle: JobHandle) -> JobStatus:
        self.requests_issued += 1
        logger.debug(f"Polling {handle.kind} job {handle.id}")
        try:
            payload = await self._fetch_status(handle)
        except BackendRequestError as e:
            logger.error(f"❌ {STATUS_FETCH_FAILED[handle.kind]} for {handle.id}: {e}")
            return self.model.apply(_fetch_failed_payload(handle.kind))
        return self.model.apply(payload)
