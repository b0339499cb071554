"""
Error model for the CodeLens review tools.

Provides structured error codes and sanitized error messages.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Structured error codes for the review job lifecycle."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SUBMISSION_ERROR = "SUBMISSION_ERROR"
    POLL_TRANSIENT = "POLL_TRANSIENT"
    TIMEOUT = "TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ToolError(Exception):
    """Base exception for tool errors with structured error information."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None
    ):
        """
        Initialize a tool error.

        Args:
            code: The error code
            message: Human-readable error message
            retryable: Whether the operation can be retried
            original_error: The original exception if this wraps another error
        """
        self.code = code
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary format for MCP response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "retryable": self.retryable
            }
        }


def sanitize_stack_trace(error_msg: str) -> str:
    """
    Remove stack traces from error messages.

    Args:
        error_msg: The original error message

    Returns:
        Error message without stack trace
    """
    # Take only the first line (usually the most relevant)
    lines = error_msg.split('\n')
    if lines:
        return lines[0].strip()
    return error_msg


def redact_secret(error_msg: str, secret: Optional[str]) -> str:
    """
    Replace every occurrence of a credential in a message.

    Args:
        error_msg: The original error message
        secret: The credential to hide; empty or None leaves the message as-is

    Returns:
        Message with the credential replaced by a placeholder
    """
    if not secret:
        return error_msg
    return error_msg.replace(secret, "[redacted]")


def create_validation_error(message: str) -> ToolError:
    """
    Create a validation error.

    Args:
        message: Description of the validation failure

    Returns:
        ToolError with VALIDATION_ERROR code
    """
    return ToolError(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        retryable=False
    )


def create_submission_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create a submission error.

    Submissions are never retried automatically; a retry is a fresh submit.

    Args:
        message: Description of the rejected or failed creation call
        original_error: The original exception

    Returns:
        ToolError with SUBMISSION_ERROR code
    """
    return ToolError(
        code=ErrorCode.SUBMISSION_ERROR,
        message=message,
        retryable=False,
        original_error=original_error
    )


def create_poll_transient_error(
    job_id: str,
    message: str,
    original_error: Optional[Exception] = None
) -> ToolError:
    """
    Create a transient polling error.

    Args:
        job_id: The job being polled
        message: Why this attempt did not yield an artifact
        original_error: The original exception

    Returns:
        ToolError with POLL_TRANSIENT code
    """
    return ToolError(
        code=ErrorCode.POLL_TRANSIENT,
        message=f"Poll for {job_id} not ready: {sanitize_stack_trace(message)}",
        retryable=True,
        original_error=original_error
    )


def create_timeout_error(job_id: str, attempts: int) -> ToolError:
    """
    Create a timeout error for an exhausted polling budget.

    Args:
        job_id: The job that never produced an artifact
        attempts: Number of poll attempts made

    Returns:
        ToolError with TIMEOUT code
    """
    return ToolError(
        code=ErrorCode.TIMEOUT,
        message=f"No artifact for {job_id} after {attempts} attempts",
        retryable=True
    )


def create_internal_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create an internal error for unexpected exceptions.

    Args:
        message: Description of the internal error
        original_error: The original exception

    Returns:
        ToolError with INTERNAL_ERROR code
    """
    sanitized_message = sanitize_stack_trace(message)

    return ToolError(
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {sanitized_message}",
        retryable=True,
        original_error=original_error
    )
