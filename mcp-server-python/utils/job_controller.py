"""
Submission and result-polling state machine for a single review job.

The controller owns one ``JobState`` value. ``submit`` exchanges a repository
reference for a review_id, then a background asyncio task polls
``/artifacts/{review_id}`` on a fixed schedule until the artifact arrives or
the attempt budget runs out.

Every lifecycle carries an epoch token. A new submission advances the epoch,
and every write re-checks it, so responses that belong to a superseded job
are dropped on arrival even if cancelling its task did not stop them.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from models.errors import (
    create_internal_error,
    create_poll_transient_error,
    create_submission_error,
    create_timeout_error,
    create_validation_error,
    redact_secret,
)
from models.job_state import JobState
from utils.review_client import ReviewServiceClient, ReviewServiceError

logger = logging.getLogger(__name__)

StateObserver = Callable[[JobState], None]

DEFAULT_MAX_ATTEMPTS = 40
DEFAULT_POLL_INTERVAL_SECONDS = 3.0


class JobController:
    """Single-job lifecycle: submit, poll, and publish state to observers."""

    def __init__(
        self,
        client: ReviewServiceClient,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """
        Args:
            client: Transport for the analysis service
            max_attempts: Poll attempts before the job times out
            poll_interval_seconds: Delay before every poll attempt, including the first
            sleep: Awaitable delay function (default: asyncio.sleep)
        """
        self._client = client
        self.max_attempts = max_attempts
        self.poll_interval_seconds = poll_interval_seconds
        self._sleep = sleep or asyncio.sleep

        self._state = JobState.idle()
        self._epoch = 0
        self._observers: List[StateObserver] = []
        self._poll_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> JobState:
        return self._state

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """
        Register an observer called synchronously with every new state.

        Returns:
            A function that removes the observer again
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self, epoch: int, state: JobState) -> bool:
        """Install ``state`` if ``epoch`` is still current; return whether it was."""
        if epoch != self._epoch:
            logger.debug(
                f"Dropping {state.phase.value} for superseded job {state.job_id or state.repo_url}"
            )
            return False

        self._state = state
        logger.debug(f"Job state -> {state.phase.value} ({state.status_message})")
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception:
                logger.exception(f"State observer {observer!r} failed on {state.phase.value}")
        return True

    def _supersede(self) -> int:
        """Invalidate the active lifecycle and return the new epoch."""
        self._epoch += 1
        task, self._poll_task = self._poll_task, None
        if task is not None and not task.done():
            task.cancel()
        return self._epoch

    def _reason(self, error: Exception) -> str:
        return redact_secret(str(error), getattr(self._client, "api_key", None))

    async def submit(self, ref: str) -> JobState:
        """
        Start a review for ``ref``, superseding any job already in flight.

        Returns once polling has been scheduled or the submission has failed.

        Args:
            ref: Repository or pull request reference, e.g. a GitHub URL

        Returns:
            The controller state when the call returns

        Raises:
            ToolError: VALIDATION_ERROR if ``ref`` is empty after trimming. No
                request is made and the current state is left untouched.
        """
        repo_url = ref.strip() if isinstance(ref, str) else ""
        if not repo_url:
            raise create_validation_error("Invalid repo_url: cannot be empty")

        epoch = self._supersede()
        self._publish(epoch, JobState.submitting(repo_url))
        logger.info(f"Submitting review for {repo_url}")

        try:
            job_id = await self._client.create_review(repo_url)
        except ReviewServiceError as e:
            error = create_submission_error(self._reason(e), original_error=e)
            if self._publish(epoch, JobState.failed(repo_url, error.message)):
                logger.error(f"Submit failed for {repo_url}: {error.message}")
            return self._state
        except asyncio.CancelledError:
            self._publish(epoch, JobState.failed(repo_url, "Submission cancelled"))
            raise
        except Exception as e:  # noqa: BLE001 - a crashed submit must still reach a terminal state
            error = create_internal_error(self._reason(e), original_error=e)
            if self._publish(epoch, JobState.failed(repo_url, error.message)):
                logger.exception(f"Submit crashed for {repo_url}")
            return self._state

        if not self._publish(epoch, JobState.queued(repo_url, job_id)):
            return self._state
        logger.info(f"Review {job_id} queued for {repo_url}")

        self._publish(epoch, JobState.polling(repo_url, job_id, 0))
        self._poll_task = asyncio.create_task(self._poll(epoch, repo_url, job_id))
        return self._state

    async def _poll(self, epoch: int, repo_url: str, job_id: str) -> None:
        """Poll for the artifact on a fixed schedule until success or timeout."""
        for attempt in range(self.max_attempts):
            await self._sleep(self.poll_interval_seconds)
            if epoch != self._epoch:
                return

            try:
                artifact = await self._client.fetch_artifact(job_id)
            except Exception as e:  # noqa: BLE001 - every failed poll is transient
                if epoch != self._epoch:
                    return
                warning = create_poll_transient_error(job_id, self._reason(e), original_error=e)
                logger.warning(
                    f"Polling warning (attempt {attempt + 1}/{self.max_attempts}): {warning.message}"
                )
            else:
                if self._publish(epoch, JobState.completed(repo_url, job_id, artifact)):
                    logger.info(f"Review {job_id} completed after {attempt + 1} attempt(s)")
                return

            if attempt + 1 < self.max_attempts:
                self._publish(epoch, JobState.polling(repo_url, job_id, attempt + 1))

        if self._publish(epoch, JobState.timed_out(repo_url, job_id, self.max_attempts)):
            logger.warning(create_timeout_error(job_id, self.max_attempts).message)

    async def wait(self) -> JobState:
        """Wait for the active poll sequence to finish and return the resulting state."""
        while True:
            task = self._poll_task
            if task is None or task.done():
                return self._state
            await asyncio.wait({task})

    def cancel(self) -> JobState:
        """Supersede the active job without starting a new one and return to idle."""
        epoch = self._supersede()
        self._publish(epoch, JobState.idle())
        logger.info("Review job cancelled")
        return self._state

    async def aclose(self) -> None:
        """Stop polling and close the underlying HTTP client."""
        task = self._poll_task
        self._supersede()
        if task is not None:
            await asyncio.wait({task})
        await self._client.close()
