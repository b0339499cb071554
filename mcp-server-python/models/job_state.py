"""
Type-safe lifecycle states for a single CodeLens review job.

``JobPhase`` names the controller's current phase and ``JobState`` is the
immutable value the controller publishes at every transition. Phases inherit
from ``(str, Enum)`` so they serialize naturally in tool responses.

Canonical transitions for one job:
    idle | terminal  ->  submitting
    submitting  ->  queued | failed
    queued  ->  polling(0)
    polling(n)  ->  polling(n + 1) | completed | timed_out
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class JobPhase(str, Enum):
    """Enum for the phases of a review job."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    QUEUED = "queued"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


TERMINAL_PHASES = frozenset({JobPhase.COMPLETED, JobPhase.FAILED, JobPhase.TIMED_OUT})
IN_PROGRESS_PHASES = frozenset({JobPhase.SUBMITTING, JobPhase.QUEUED, JobPhase.POLLING})

_STATUS_MESSAGES = {
    JobPhase.IDLE: "Idle",
    JobPhase.SUBMITTING: "Queueing job...",
    JobPhase.QUEUED: "Analyzing repository...",
    JobPhase.POLLING: "Waiting for results...",
    JobPhase.COMPLETED: "Completed",
    JobPhase.TIMED_OUT: "Timeout: no response after waiting",
}


class JobState(BaseModel):
    """Snapshot of the controller's current phase and its payload."""

    model_config = ConfigDict(frozen=True)

    phase: JobPhase = JobPhase.IDLE
    repo_url: Optional[str] = None
    job_id: Optional[str] = None
    attempt: Optional[int] = Field(default=None, ge=0)
    artifact: Any = None
    reason: Optional[str] = None

    @classmethod
    def idle(cls) -> "JobState":
        return cls()

    @classmethod
    def submitting(cls, repo_url: str) -> "JobState":
        return cls(phase=JobPhase.SUBMITTING, repo_url=repo_url)

    @classmethod
    def queued(cls, repo_url: str, job_id: str) -> "JobState":
        return cls(phase=JobPhase.QUEUED, repo_url=repo_url, job_id=job_id)

    @classmethod
    def polling(cls, repo_url: str, job_id: str, attempt: int) -> "JobState":
        return cls(phase=JobPhase.POLLING, repo_url=repo_url, job_id=job_id, attempt=attempt)

    @classmethod
    def completed(cls, repo_url: str, job_id: str, artifact: Any) -> "JobState":
        return cls(phase=JobPhase.COMPLETED, repo_url=repo_url, job_id=job_id, artifact=artifact)

    @classmethod
    def failed(cls, repo_url: str, reason: str) -> "JobState":
        return cls(phase=JobPhase.FAILED, repo_url=repo_url, reason=reason)

    @classmethod
    def timed_out(cls, repo_url: str, job_id: str, attempts: int) -> "JobState":
        return cls(phase=JobPhase.TIMED_OUT, repo_url=repo_url, job_id=job_id, attempt=attempts)

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def in_progress(self) -> bool:
        """True while a submission or poll sequence is outstanding."""
        return self.phase in IN_PROGRESS_PHASES

    @property
    def status_message(self) -> str:
        """The single human-readable status line for this state."""
        if self.phase == JobPhase.FAILED:
            return f"Error: {self.reason}"
        return _STATUS_MESSAGES[self.phase]
