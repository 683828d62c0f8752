"""Abstract base classes for adapters."""

import itertools
from abc import ABC, abstractmethod
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from eguard_batch.core.common.exceptions import TransactionError
from eguard_batch.core.jobs.execution import JobExecution, JobParameters, StepExecution


class JobRepository(ABC):
    """Job repository abstract class (system of record for executions)."""

    @abstractmethod
    def create_job_execution(self, job_name: str, parameters: JobParameters) -> JobExecution:
        """
        Create and store a new execution for a job.

        ┌──────────────────────────────────────────────────────────────┐
        │                   IMPLEMENTATION CONTRACT                     │
        ├──────────────────────────────────────────────────────────────┤
        │ WHO IMPLEMENTS: Repository adapter developer                 │
        │ WHO CALLS:      JobLauncher                                  │
        │ WHEN CALLED:    Once per launch, before any step runs        │
        ├──────────────────────────────────────────────────────────────┤
        │ MUST:                                                        │
        │  ✓ Assign a unique integer id to the execution               │
        │  ✓ Return it in STARTING status                              │
        │  ✓ Refuse a second running execution of the same job         │
        │  ✓ Refuse to re-run a COMPLETED (job_name, parameters) pair  │
        └──────────────────────────────────────────────────────────────┘

        Args:
            job_name: Job name
            parameters: Identifying job parameters

        Returns:
            New job execution

        Raises:
            JobExecutionAlreadyRunningError: If the job has a running execution
            JobInstanceAlreadyCompleteError: If the instance already completed
        """
        pass

    @abstractmethod
    def update(self, job_execution: JobExecution) -> None:
        """
        Persist the current state of a job execution.

        Raises:
            JobExecutionNotFoundError: If the execution was never created here
        """
        pass

    @abstractmethod
    def add_step_execution(self, step_execution: StepExecution) -> None:
        """
        Register a new step execution and assign its id.

        ┌──────────────────────────────────────────────────────────────┐
        │ WHO CALLS:      StepExecutor                                 │
        │ WHEN CALLED:    Before the tasklet's transaction begins      │
        └──────────────────────────────────────────────────────────────┘
        """
        pass

    @abstractmethod
    def update_step_execution(self, step_execution: StepExecution) -> None:
        """Persist the current state of a step execution."""
        pass

    @abstractmethod
    def get_job_execution(self, execution_id: int) -> JobExecution | None:
        """
        Get an execution by id.

        Returns:
            The execution, or None if not found
        """
        pass

    @abstractmethod
    def get_last_job_execution(
        self, job_name: str, parameters: JobParameters | None = None
    ) -> JobExecution | None:
        """
        Get the most recently created execution of a job.

        Args:
            job_name: Job name
            parameters: Restrict to this instance (None = any parameters)
        """
        pass

    @abstractmethod
    def find_job_executions(self, job_name: str) -> list[JobExecution]:
        """All executions of a job, newest first."""
        pass


class TransactionStatus:
    """Handle for one transaction started by a TransactionManager."""

    _ids = itertools.count(1)

    def __init__(self, resource: Any = None) -> None:
        self.transaction_id = next(self._ids)
        self.resource = resource
        self.completed = False
        self.rollback_only = False

    def set_rollback_only(self) -> None:
        """Force the transaction to roll back instead of committing."""
        self.rollback_only = True

    def __repr__(self) -> str:
        return (
            f"TransactionStatus(id={self.transaction_id}, completed={self.completed}, "
            f"rollback_only={self.rollback_only})"
        )


class TransactionManager(ABC):
    """
    Transaction manager abstract class.

    Provides the "begin, run one unit of work, commit or roll back" boundary
    around a single step.
    """

    @abstractmethod
    def begin(self) -> TransactionStatus:
        """
        Begin a transaction.

        Raises:
            TransactionError: If a transaction cannot be started
        """
        pass

    @abstractmethod
    def commit(self, status: TransactionStatus) -> None:
        """
        Commit a transaction.

        ┌──────────────────────────────────────────────────────────────┐
        │ MUST:                                                        │
        │  ✓ Mark status.completed                                     │
        │  ✓ Roll back instead when status.rollback_only is set, then  │
        │    raise TransactionError                                    │
        │  ✓ Raise TransactionError when status is already completed   │
        └──────────────────────────────────────────────────────────────┘
        """
        pass

    @abstractmethod
    def rollback(self, status: TransactionStatus) -> None:
        """
        Roll a transaction back and mark status.completed.

        Raises:
            TransactionError: If status is already completed
        """
        pass

    @contextmanager
    def transaction(self) -> Generator[TransactionStatus, None, None]:
        """
        Run the enclosed block in one transaction.

        Commits when the block returns, rolls back and re-raises when it
        raises.

        Example:
            >>> with transaction_manager.transaction():
            ...     event_repository.save(event)
        """
        status = self.begin()
        try:
            yield status
        except BaseException:
            if not status.completed:
                self.rollback(status)
            raise
        self.commit(status)

    @staticmethod
    def _ensure_active(status: TransactionStatus) -> None:
        if status.completed:
            raise TransactionError(
                f"Transaction {status.transaction_id} is already completed"
            )


class TransactionalResource(ABC):
    """In-memory resource whose state can be captured and restored."""

    @abstractmethod
    def snapshot(self) -> Any:
        """Capture enough state to undo later changes."""
        pass

    @abstractmethod
    def restore(self, snapshot: Any) -> None:
        """Return to a state captured by snapshot()."""
        pass


class LockAdapter(ABC):
    """Lock adapter abstract class."""

    @abstractmethod
    def acquire(self, lock_key: str, ttl_seconds: int, blocking: bool = False) -> bool:
        """
        Acquire a lock.

        ┌──────────────────────────────────────────────────────────────┐
        │ WHO CALLS:      JobLauncher                                  │
        │ WHEN CALLED:    Before creating a job execution              │
        └──────────────────────────────────────────────────────────────┘

        Args:
            lock_key: Unique lock identifier (e.g., "batch:lock:eventJob")
            ttl_seconds: Time-to-live for the lock in seconds
            blocking: If True, wait until lock is available

        Returns:
            True if lock acquired, False otherwise
        """
        pass

    @abstractmethod
    def release(self, lock_key: str) -> bool:
        """
        Release a lock.

        Returns:
            True if lock released, False if lock not held
        """
        pass
