#!/usr/bin/env python3
"""
Manual smoke test for the review job controller against a live backend.

Uses CODELENS_BACKEND_URL / CODELENS_API_KEY from the environment (or .env).

Tests:
1. Blank input is rejected without contacting the service
2. A real repository reaches a terminal state, printing every transition

Usage:
    python manual_smoke_test.py https://github.com/owner/repo
"""

import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from config import get_config
from models.errors import ErrorCode, ToolError
from models.job_state import JobPhase, JobState
from utils.job_controller import JobController
from utils.review_client import ReviewServiceClient


def print_state(state: JobState) -> None:
    attempt = f" (attempt {state.attempt})" if state.phase == JobPhase.POLLING else ""
    print(f"🔄 {state.phase.value}{attempt}: {state.status_message}")


async def run(repo_url: str) -> int:
    config = get_config()
    config.setup_logging()

    print("=" * 80)
    print("MANUAL SMOKE TEST: review job controller")
    print("=" * 80)
    print(f"\n🌐 Backend: {config.backend_url or '<not configured>'}")
    print(f"📄 Repository: {repo_url}")

    controller = JobController(
        ReviewServiceClient(
            base_url=config.backend_url,
            api_key=config.api_key,
            timeout=config.request_timeout_seconds,
        ),
        max_attempts=config.poll_max_attempts,
        poll_interval_seconds=config.poll_interval_seconds,
    )
    controller.subscribe(print_state)

    try:
        print("\n" + "=" * 80)
        print("TEST 1: Reject blank input")
        print("=" * 80)
        try:
            await controller.submit("   ")
        except ToolError as e:
            if e.code != ErrorCode.VALIDATION_ERROR or controller.state.phase != JobPhase.IDLE:
                print(f"❌ TEST 1 FAILED: unexpected {e.code.value} / {controller.state.phase.value}")
                return 1
            print(f"✅ TEST 1 PASSED: {e.message}")
        else:
            print("❌ TEST 1 FAILED: blank input was accepted")
            return 1

        print("\n" + "=" * 80)
        print("TEST 2: Review reaches a terminal state")
        print("=" * 80)
        await controller.submit(repo_url)
        state = await controller.wait()

        if state.phase == JobPhase.COMPLETED:
            print("✅ TEST 2 PASSED: review completed")
            print(json.dumps(state.artifact, indent=2))
            return 0

        print(f"❌ TEST 2 ENDED IN {state.phase.value}: {state.status_message}")
        return 1
    finally:
        await controller.aclose()


def main() -> int:
    if len(sys.argv) != 2:
        print(__doc__)
        return 2
    return asyncio.run(run(sys.argv[1]))


if __name__ == "__main__":
    sys.exit(main())
