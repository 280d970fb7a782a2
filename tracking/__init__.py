# tracking/__init__.py
"""
Job-lifecycle tracking for the MCQ Extractor client.
"""

from tracking.gate import GateState, SetupGate
from tracking.launcher import JobLauncher, LaunchResult
from tracking.poller import PollHandle, Poller, PollerBusyError
from tracking.status import JobHandle, JobStatus, JobStatusModel, normalize_status
from tracking.tracker import JobTracker, TrackerBusyError

__all__ = [
    "GateState",
    "JobHandle",
    "JobLauncher",
    "JobStatus",
    "JobStatusModel",
    "JobTracker",
    "LaunchResult",
    "PollHandle",
    "Poller",
    "PollerBusyError",
    "SetupGate",
    "TrackerBusyError",
    "normalize_status",
]
