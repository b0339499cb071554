#!/usr/bin/env python3
"""
MCP Server entry point for CodeLens repository reviews.

This server lets an LLM agent submit a GitHub repository or pull request to
the remote CodeLens analysis service and observe the review as it moves from
submission through polling to a completed, failed, or timed-out state.

The server uses the FastMCP framework to expose the review tools to LLM
agents via the Model Context Protocol. A single job controller is shared by
all tools, so at most one review is active at a time.

Usage:
    python server.py

The server runs in stdio mode by default, which is the standard transport
for MCP servers that are invoked by LLM agents.
"""

import logging

from mcp.server.fastmcp import FastMCP

from config import get_config
from tools.get_review_state import cancel_review, get_review_state
from tools.submit_review import submit_review
from utils.job_controller import JobController
from utils.review_client import ReviewServiceClient

config = get_config()

controller = JobController(
    ReviewServiceClient(
        base_url=config.backend_url,
        api_key=config.api_key,
        timeout=config.request_timeout_seconds,
    ),
    max_attempts=config.poll_max_attempts,
    poll_interval_seconds=config.poll_interval_seconds,
)

mcp = FastMCP(
    name=config.server_name,
    instructions=(
        "This server runs AI code reviews of GitHub repositories and pull requests. "
        "\n\n"
        "Use submit_review to start a review; it returns as soon as the job is queued. "
        "Use get_review_state to check progress. The review is finished when in_progress is false: "
        "phase 'completed' carries the artifact, 'failed' carries a reason, and 'timed_out' means "
        "the service produced no result within the polling budget. "
        "Only one review runs at a time: submitting again replaces the active review. "
        "Use cancel_review to drop the active review."
    ),
)


@mcp.tool(
    name="submit_review",
    description=(
        "Submit a GitHub repository or pull request URL for AI code review. "
        "Replaces any review already in progress. "
        "Returns the review state once polling has started, or the failure if the service rejected the job."
    ),
)
async def submit_review_tool(repo_url: str) -> dict:
    """
    Submit a repository or pull request for review.

    Args:
        repo_url: Repository or PR reference, e.g. https://github.com/owner/repo.
            Surrounding whitespace is trimmed; an empty value is rejected
            without contacting the service.

    Returns:
        Dictionary with structure:
        {
            "phase": str,            # submitting, queued, polling, completed, failed, timed_out
            "status_message": str,   # Human-readable status line
            "in_progress": bool,
            "repo_url": str,
            "review_id": str|None,
            "attempt": int|None,     # Current poll attempt (0-based)
            "max_attempts": int,
            "artifact": Any,         # Only set when phase is completed
            "reason": str|None       # Only set when phase is failed
        }

        On error, returns:
        {
            "error": {
                "code": str,         # VALIDATION_ERROR or INTERNAL_ERROR
                "message": str,
                "retryable": bool
            }
        }

    Examples:
        submit_review_tool(repo_url="https://github.com/owner/repo")
        submit_review_tool(repo_url="https://github.com/owner/repo/pull/42")
    """
    return await submit_review(controller, {"repo_url": repo_url})


@mcp.tool(
    name="get_review_state",
    description=(
        "Get the current state of the active code review: phase, status message, "
        "poll attempt, and the review artifact once completed."
    ),
)
def get_review_state_tool() -> dict:
    """
    Return the current review state snapshot.

    Returns:
        Same structure as submit_review_tool. Before any submission the
        phase is 'idle'.
    """
    return get_review_state(controller)


@mcp.tool(
    name="cancel_review",
    description=(
        "Cancel the active code review. Late responses for it are discarded "
        "and the state returns to idle."
    ),
)
def cancel_review_tool() -> dict:
    """Cancel the active review and return the idle state snapshot."""
    return cancel_review(controller)


def main():
    """
    Main entry point for the MCP server.

    Runs the server in stdio mode, which is the standard transport
    for MCP servers that are invoked by LLM agents.
    """
    config.setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("Starting CodeLens MCP Server")
    logger.info(f"Server name: {config.server_name}")
    logger.info(
        f"Polling: {config.poll_max_attempts} attempts every {config.poll_interval_seconds}s"
    )

    warnings = config.validate()
    for warning in warnings:
        logger.warning(warning)

    logger.info("Server starting in stdio mode")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
