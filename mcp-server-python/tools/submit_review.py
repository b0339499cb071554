"""
MCP tool handler for submit_review.

Validates the repository reference and hands it to the shared job
controller, which supersedes any review already in flight.
"""

from typing import Any, Dict

from pydantic import ValidationError

from models.errors import ToolError, create_internal_error
from schemas.review import ReviewStateResponse, SubmitReviewRequest
from utils.job_controller import JobController
from utils.pydantic_error_mapper import map_pydantic_validation_error


async def submit_review(controller: JobController, args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Submit a repository or pull request for review.

    Args:
        controller: The shared job controller
        args: Dictionary containing:
            - repo_url (str): Repository or PR reference; trimmed, must be non-empty

    Returns:
        Review state snapshot taken when polling has been scheduled, or the
        failed state if the service rejected the submission.

        On error, returns:
        {
            "error": {
                "code": str,         # VALIDATION_ERROR or INTERNAL_ERROR
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        request = SubmitReviewRequest.model_validate(args)
        state = await controller.submit(request.repo_url)
        return ReviewStateResponse.from_state(state, controller.max_attempts).model_dump(mode="json")

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(str(e), original_error=e).to_dict()
