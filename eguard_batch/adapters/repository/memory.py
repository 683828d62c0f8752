"""In-memory job repository."""

import itertools
import threading

from eguard_batch.adapters.base import JobRepository
from eguard_batch.core.common.exceptions import (
    JobExecutionAlreadyRunningError,
    JobExecutionNotFoundError,
    JobInstanceAlreadyCompleteError,
)
from eguard_batch.core.jobs.execution import JobExecution, JobParameters, StepExecution
from eguard_batch.core.state import BatchStatus


class InMemoryJobRepository(JobRepository):
    """
    In-memory job repository (for testing and single-process deployments).

    Executions are kept as live objects; nothing survives a restart.

    Example:
        >>> repository = InMemoryJobRepository()
        >>> execution = repository.create_job_execution("eventJob", JobParameters())
        >>> execution.status
        <BatchStatus.STARTING: 'starting'>
    """

    def __init__(self) -> None:
        self._job_executions: dict[int, JobExecution] = {}
        self._step_executions: dict[int, StepExecution] = {}
        self._job_ids = itertools.count(1)
        self._step_ids = itertools.count(1)
        self._lock = threading.RLock()

    def create_job_execution(self, job_name: str, parameters: JobParameters) -> JobExecution:
        """Create a job execution after checking running and completed instances."""
        with self._lock:
            for existing in self._executions_of(job_name):
                if existing.is_running:
                    raise JobExecutionAlreadyRunningError(job_name, existing.id)
                if (
                    existing.parameters == parameters
                    and existing.status is BatchStatus.COMPLETED
                ):
                    raise JobInstanceAlreadyCompleteError(job_name, parameters.to_dict())

            execution = JobExecution(job_name, parameters, execution_id=next(self._job_ids))
            self._job_executions[execution.id] = execution
            return execution

    def update(self, job_execution: JobExecution) -> None:
        with self._lock:
            if job_execution.id not in self._job_executions:
                raise JobExecutionNotFoundError(
                    f"Job execution {job_execution.id} was not created by this repository"
                )
            self._job_executions[job_execution.id] = job_execution

    def add_step_execution(self, step_execution: StepExecution) -> None:
        with self._lock:
            if step_execution.job_execution_id not in self._job_executions:
                raise JobExecutionNotFoundError(
                    f"Job execution {step_execution.job_execution_id} was not created "
                    "by this repository"
                )
            step_execution.id = next(self._step_ids)
            self._step_executions[step_execution.id] = step_execution

    def update_step_execution(self, step_execution: StepExecution) -> None:
        with self._lock:
            if step_execution.id not in self._step_executions:
                raise JobExecutionNotFoundError(
                    f"Step execution {step_execution.id} was not added to this repository"
                )
            self._step_executions[step_execution.id] = step_execution

    def get_job_execution(self, execution_id: int) -> JobExecution | None:
        with self._lock:
            return self._job_executions.get(execution_id)

    def get_last_job_execution(
        self, job_name: str, parameters: JobParameters | None = None
    ) -> JobExecution | None:
        with self._lock:
            for execution in self._executions_of(job_name):
                if parameters is None or execution.parameters == parameters:
                    return execution
            return None

    def find_job_executions(self, job_name: str) -> list[JobExecution]:
        with self._lock:
            return self._executions_of(job_name)

    def get_step_execution(self, step_execution_id: int) -> StepExecution | None:
        with self._lock:
            return self._step_executions.get(step_execution_id)

    def _executions_of(self, job_name: str) -> list[JobExecution]:
        """Executions of a job, newest first (must hold the lock)."""
        executions = [e for e in self._job_executions.values() if e.job_name == job_name]
        executions.sort(key=lambda e: e.id, reverse=True)
        return executions
