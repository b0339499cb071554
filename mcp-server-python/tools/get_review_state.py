"""MCP tool handlers that read or reset the shared review job."""

from typing import Any, Dict

from models.errors import create_internal_error
from schemas.review import ReviewStateResponse
from utils.job_controller import JobController


def get_review_state(controller: JobController) -> Dict[str, Any]:
    """
    Return the current review state snapshot.

    The artifact is only present once the phase is ``completed``.
    """
    try:
        return ReviewStateResponse.from_state(
            controller.state, controller.max_attempts
        ).model_dump(mode="json")
    except Exception as e:
        return create_internal_error(str(e), original_error=e).to_dict()


def cancel_review(controller: JobController) -> Dict[str, Any]:
    """Drop the active review (late responses are ignored) and return to idle."""
    try:
        state = controller.cancel()
        return ReviewStateResponse.from_state(state, controller.max_attempts).model_dump(mode="json")
    except Exception as e:
        return create_internal_error(str(e), original_error=e).to_dict()
