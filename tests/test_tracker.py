"""
JobTracker tests: submit/poll/reset flow shared by setup and extraction.
"""

import httpx
import pytest

from conftest import TEST_INTERVAL, connect_error, settle
from constants import START_EXTRACTION_FAILED, JobKind, Lifecycle
from services.backend_errors import BackendRequestError, SetupAlreadyRunningError
from tracking.poller import PollerBusyError
from tracking.status import JobHandle
from tracking.tracker import JobTracker, TrackerBusyError
from validators import EMPTY_TOPIC_ERROR, ExtractionForm, ExtractionValidationError

EXTRACT_PATH = "/api/generate-mcq-pdf"


def extraction_tracker(client, interval=TEST_INTERVAL):
    return JobTracker(JobKind.EXTRACTION, client, interval=interval)


@pytest.mark.asyncio
async def test_submit_applies_launch_response_then_polls(backend, client):
    backend.on("POST", EXTRACT_PATH, {"job_id": "j1", "status": "started"})
    backend.on(
        "GET",
        "/api/job-status/j1",
        {"status": "completed", "mcqs_found": 4, "pdf_url": "/api/download/a.pdf"},
    )
    tracker = extraction_tracker(client)

    await tracker.submit(ExtractionForm("Heart"))
    assert tracker.status.lifecycle == Lifecycle.RUNNING
    assert tracker.handle == JobHandle("j1", JobKind.EXTRACTION)

    final = await tracker.wait()

    assert final.lifecycle == Lifecycle.COMPLETED
    assert final.artifact_ref == "/api/download/a.pdf"
    assert not tracker.is_active


@pytest.mark.asyncio
async def test_validation_errors_are_recorded_and_cleared(backend, client):
    backend.on("POST", EXTRACT_PATH, {"job_id": "j1", "status": "started"})
    backend.on("GET", "/api/job-status/j1", {"status": "running"})
    tracker = extraction_tracker(client, interval=60)

    with pytest.raises(ExtractionValidationError):
        await tracker.submit(ExtractionForm("  "))
    assert tracker.validation_errors == [EMPTY_TOPIC_ERROR]
    assert tracker.status.lifecycle == Lifecycle.IDLE

    await tracker.submit(ExtractionForm("Heart"))
    assert tracker.validation_errors == []
    tracker.close()


@pytest.mark.asyncio
async def test_submit_while_running_is_rejected(backend, client):
    backend.on("POST", EXTRACT_PATH, {"job_id": "j1", "status": "started"})
    tracker = extraction_tracker(client, interval=60)
    await tracker.submit(ExtractionForm("Heart"))

    with pytest.raises(TrackerBusyError):
        await tracker.submit(ExtractionForm("Lungs"))

    assert backend.count("POST", EXTRACT_PATH) == 1
    tracker.close()


@pytest.mark.asyncio
async def test_launch_failure_without_detail_uses_generic_message(backend, client):
    backend.on("POST", EXTRACT_PATH, connect_error)
    tracker = extraction_tracker(client)

    with pytest.raises(BackendRequestError):
        await tracker.submit(ExtractionForm("Heart"))

    assert tracker.launch_error == START_EXTRACTION_FAILED
    assert tracker.status.lifecycle == Lifecycle.IDLE
    assert not tracker.is_active


@pytest.mark.asyncio
async def test_launch_failure_with_detail_shows_detail(backend, client):
    backend.on(
        "POST", EXTRACT_PATH, httpx.Response(400, json={"detail": "Setup not complete"})
    )
    tracker = extraction_tracker(client)

    with pytest.raises(BackendRequestError):
        await tracker.submit(ExtractionForm("Heart"))

    assert tracker.launch_error == "Setup not complete"


@pytest.mark.asyncio
async def test_reset_cancels_polling_and_returns_to_idle(backend, client):
    backend.on("POST", EXTRACT_PATH, {"job_id": "j1", "status": "started"})
    backend.on("GET", "/api/job-status/j1", {"status": "running"})
    tracker = extraction_tracker(client)
    await tracker.submit(ExtractionForm("Heart"))
    await settle()

    tracker.reset()
    count_at_reset = backend.count("GET", "/api/job-status/j1")
    await settle()

    assert backend.count("GET", "/api/job-status/j1") == count_at_reset
    assert tracker.status.lifecycle == Lifecycle.IDLE
    assert tracker.handle is None
    assert not tracker.is_active


@pytest.mark.asyncio
async def test_listeners_see_updates_and_terminal(backend, client):
    backend.on("POST", EXTRACT_PATH, {"job_id": "j1", "status": "started"})
    backend.on(
        "GET",
        "/api/job-status/j1",
        {"status": "running", "processed_links": 1, "total_links": 2},
        {"status": "error", "progress": "Error: scrape failed"},
    )
    tracker = extraction_tracker(client)
    updates, terminals = [], []
    tracker.add_update_listener(updates.append)

    async def on_terminal(status):
        terminals.append(status)

    tracker.add_terminal_listener(on_terminal)

    await tracker.submit(ExtractionForm("Heart"))
    await tracker.wait()

    assert [s.lifecycle for s in updates] == [Lifecycle.RUNNING, Lifecycle.ERROR]
    assert terminals == [updates[-1]]
    assert terminals[0].message == "Error: scrape failed"


@pytest.mark.asyncio
async def test_attach_polls_without_launching(backend, client):
    backend.on("GET", "/api/setup-status/s0", {"status": "completed"})
    tracker = JobTracker(JobKind.SETUP, client, interval=TEST_INTERVAL)

    tracker.attach(JobHandle("s0", JobKind.SETUP))
    assert tracker.status.lifecycle == Lifecycle.RUNNING
    await tracker.wait()

    assert backend.count("POST", "/api/setup") == 0
    assert tracker.status.lifecycle == Lifecycle.COMPLETED


@pytest.mark.asyncio
async def test_attach_while_polling_is_rejected(backend, client):
    backend.on("GET", "/api/setup-status/s0", {"status": "running"})
    tracker = JobTracker(JobKind.SETUP, client, interval=60)
    tracker.attach(JobHandle("s0", JobKind.SETUP))

    with pytest.raises(PollerBusyError):
        tracker.attach(JobHandle("s1", JobKind.SETUP))

    tracker.close()


@pytest.mark.asyncio
async def test_setup_already_running_is_not_a_launch_error(backend, client):
    backend.on("POST", "/api/setup", {"status": "running", "setup_id": "s0"})
    tracker = JobTracker(JobKind.SETUP, client, interval=60)

    with pytest.raises(SetupAlreadyRunningError):
        await tracker.submit()

    assert tracker.launch_error is None


@pytest.mark.asyncio
async def test_retry_discards_previous_setup(backend, client):
    backend.on(
        "POST",
        "/api/setup",
        {"setup_id": "s1", "status": "started"},
        {"setup_id": "s2", "status": "started"},
    )
    backend.on(
        "GET",
        "/api/setup-status/s1",
        {"status": "error", "progress": "Error: chromium missing"},
    )
    backend.on("POST", "/api/setup/force-reset", {"message": "reset"})
    backend.on("GET", "/api/setup-status/s2", {"status": "running"})
    tracker = JobTracker(JobKind.SETUP, client, interval=TEST_INTERVAL)

    await tracker.submit()
    await tracker.wait()
    assert tracker.status.lifecycle == Lifecycle.ERROR

    await tracker.retry()

    assert tracker.handle == JobHandle("s2", JobKind.SETUP)
    assert tracker.status.lifecycle == Lifecycle.RUNNING
    assert tracker.status.message == ""
    tracker.close()


@pytest.mark.asyncio
async def test_retry_is_setup_only(client):
    with pytest.raises(ValueError):
        await extraction_tracker(client).retry()


@pytest.mark.asyncio
async def test_terminal_launch_response_is_not_polled(backend, client):
    backend.on(
        "POST",
        EXTRACT_PATH,
        {
            "job_id": "j1",
            "status": "completed",
            "mcqs_found": 3,
            "pdf_url": "/api/download/heart.pdf",
        },
    )
    tracker = extraction_tracker(client)
    terminals = []
    tracker.add_terminal_listener(terminals.append)

    await tracker.submit(ExtractionForm("Heart"))
    await settle()

    assert tracker.status.lifecycle == Lifecycle.COMPLETED
    assert tracker.status.artifact_ref == "/api/download/heart.pdf"
    assert tracker.handle == JobHandle("j1", JobKind.EXTRACTION)
    assert terminals == [tracker.status]
    assert not tracker.is_active
    assert backend.count("GET", "/api/job-status/j1") == 0


@pytest.mark.asyncio
async def test_new_submission_allowed_after_listener_crash(backend, client):
    backend.on("POST", EXTRACT_PATH, {"job_id": "j1", "status": "started"})
    backend.on("GET", "/api/job-status/j1", {"status": "running"})
    tracker = extraction_tracker(client)

    calls = []

    def flaky_listener(status):
        calls.append(status)
        if len(calls) == 1:
            raise RuntimeError("listener failed")

    tracker.add_update_listener(flaky_listener)
    await tracker.submit(ExtractionForm("Heart"))
    final = await tracker.wait()

    assert final.lifecycle == Lifecycle.ERROR
    assert not tracker.is_active

    await tracker.submit(ExtractionForm("Heart"))
    assert tracker.status.lifecycle == Lifecycle.RUNNING
    tracker.close()
