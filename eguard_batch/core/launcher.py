"""Job launching with duplicate-run protection."""

import logging
from collections.abc import Generator
from contextlib import contextmanager

from tenacity import retry, stop_after_attempt, wait_random_exponential

from eguard_batch.adapters.base import LockAdapter
from eguard_batch.core.common.exceptions import JobExecutionAlreadyRunningError
from eguard_batch.core.execution.job_executor import JobExecutor
from eguard_batch.core.jobs.definition import Job
from eguard_batch.core.jobs.execution import JobExecution, JobParameters
from eguard_batch.utils.logging import ContextLogger, _default_logger


class JobLauncher:
    """
    Launches jobs synchronously and records them in the job's repository.

    Usage:
        >>> launcher = JobLauncher(lock_adapter=InMemoryLockAdapter())
        >>> execution = launcher.run(event_job, JobParameters({"time": 1}))
        >>> execution.status
        <BatchStatus.COMPLETED: 'completed'>
    """

    # Constants
    MIN_LOCK_TTL = 1
    DEFAULT_LOCK_TTL = 300

    def __init__(
        self,
        lock_adapter: LockAdapter | None = None,
        lock_ttl_seconds: int = DEFAULT_LOCK_TTL,
        lock_prefix: str = "batch:lock:",
        job_executor: JobExecutor | None = None,
        verbose: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize job launcher.

        Args:
            lock_adapter: Lock guarding concurrent launches (optional)
            lock_ttl_seconds: Lock TTL, should exceed the longest job run
            lock_prefix: Lock key prefix
            job_executor: Custom job executor (default: JobExecutor)
            verbose: Enable verbose logging
            logger: Custom logger (uses default if None)

        Raises:
            ValueError: If parameters are invalid
        """
        if lock_ttl_seconds < self.MIN_LOCK_TTL:
            raise ValueError(f"lock_ttl_seconds must be >= {self.MIN_LOCK_TTL}")
        if not lock_prefix:
            raise ValueError("lock_prefix cannot be empty")

        self.lock = lock_adapter
        self.lock_ttl_seconds = lock_ttl_seconds
        self.lock_prefix = lock_prefix
        self.verbose = verbose

        base_logger = logger or _default_logger
        self.logger = ContextLogger(base_logger, {"component": "JobLauncher"})
        self.job_executor = job_executor or JobExecutor(self.logger, verbose=verbose)

    def run(self, job: Job, parameters: JobParameters | None = None) -> JobExecution:
        """
        Run a job to completion in the calling thread.

        Failed jobs are returned with FAILED status, not raised.

        Args:
            job: Job to run
            parameters: Identifying job parameters (default: empty)

        Returns:
            Finished job execution

        Raises:
            JobExecutionAlreadyRunningError: If the job is running elsewhere
            JobInstanceAlreadyCompleteError: If these parameters already completed
        """
        parameters = parameters if parameters is not None else JobParameters()
        lock_key = f"{self.lock_prefix}{job.name}"

        with self._acquire_lock_context(lock_key) as lock_acquired:
            if not lock_acquired:
                self.logger.warning("Job launch skipped, lock held", job_name=job.name)
                raise JobExecutionAlreadyRunningError(job.name)

            job_execution = job.job_repository.create_job_execution(job.name, parameters)
            job_logger = self.logger.with_context(
                job_name=job.name, job_execution_id=job_execution.id
            )
            job_logger.info("Job launched", parameters=parameters.to_dict())

            self.job_executor.execute(job, job_execution)

            if job_execution.status.is_unsuccessful():
                job_logger.error(
                    "Job failed",
                    status=job_execution.status.value,
                    exit_message=job_execution.exit_message,
                )
            else:
                job_logger.info("Job completed", status=job_execution.status.value)

            return job_execution

    @contextmanager
    def _acquire_lock_context(self, lock_key: str) -> Generator[bool, None, None]:
        """Context manager for lock acquisition and release with retry."""
        if self.lock is None:
            yield True
            return

        lock_acquired = False
        try:
            lock_acquired = self.lock.acquire(lock_key, self.lock_ttl_seconds, blocking=False)
            yield lock_acquired
        finally:
            if lock_acquired:
                self._try_release_lock(lock_key)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_random_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _release_lock_with_retry(self, lock_key: str) -> None:
        """Release lock with automatic retry and jitter."""
        self.lock.release(lock_key)

    def _try_release_lock(self, lock_key: str) -> None:
        """Try to release lock; the TTL frees it eventually if this fails."""
        try:
            self._release_lock_with_retry(lock_key)
        except Exception as e:
            self.logger.warning(
                "Failed to release lock, it will expire after its TTL",
                lock_key=lock_key,
                ttl_seconds=self.lock_ttl_seconds,
                error=str(e),
            )
