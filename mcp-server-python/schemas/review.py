"""Pydantic schemas for the review job tools."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import field_validator

from models.job_state import JobPhase, JobState
from schemas.common import StrictIgnoreRequest, StrictResponse, validate_non_empty_str


class SubmitReviewRequest(StrictIgnoreRequest):
    """Request schema for submit_review."""

    repo_url: str

    @field_validator("repo_url")
    @classmethod
    def validate_repo_url(cls, value: str) -> str:
        return validate_non_empty_str(value, "repo_url")


class ReviewStateResponse(StrictResponse):
    """Snapshot of the shared controller's job state."""

    phase: JobPhase
    status_message: str
    in_progress: bool
    repo_url: Optional[str] = None
    review_id: Optional[str] = None
    attempt: Optional[int] = None
    max_attempts: int
    artifact: Any = None
    reason: Optional[str] = None

    @classmethod
    def from_state(cls, state: JobState, max_attempts: int) -> "ReviewStateResponse":
        return cls(
            phase=state.phase,
            status_message=state.status_message,
            in_progress=state.in_progress,
            repo_url=state.repo_url,
            review_id=state.job_id,
            attempt=state.attempt,
            max_attempts=max_attempts,
            artifact=state.artifact,
            reason=state.reason,
        )
