"""Execution records: parameters, job/step executions and tasklet context."""

from collections.abc import Iterator, Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Any

from eguard_batch.core.common.exceptions import InvalidStatusTransitionError
from eguard_batch.core.state import BatchStatus
from eguard_batch.utils.time import utc_now

ParameterValue = str | int | float | bool | datetime


class JobParameters(Mapping[str, ParameterValue]):
    """
    Immutable parameters identifying a job instance.

    Together with the job name, parameters decide whether a launch is a new
    instance or a re-run of one that already completed.

    Example:
        >>> params = JobParameters({"time": 1700000000000})
        >>> params.with_value("run_by", "scheduler")["run_by"]
        'scheduler'
    """

    _ALLOWED_TYPES = (str, int, float, bool, datetime)

    def __init__(self, values: Mapping[str, ParameterValue] | None = None) -> None:
        values = dict(values or {})
        for key, value in values.items():
            if not isinstance(key, str) or not key:
                raise ValueError(f"Job parameter names must be non-empty strings, got {key!r}")
            if not isinstance(value, self._ALLOWED_TYPES):
                raise ValueError(
                    f"Unsupported type {type(value).__name__} for job parameter '{key}'"
                )
        self._values = MappingProxyType(values)

    def __getitem__(self, key: str) -> ParameterValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, JobParameters):
            return dict(self._values) == dict(other._values)
        return NotImplemented

    def __repr__(self) -> str:
        return f"JobParameters({dict(self._values)!r})"

    def with_value(self, key: str, value: ParameterValue) -> "JobParameters":
        """Return a copy with ``key`` set to ``value``."""
        return JobParameters({**self._values, key: value})

    def to_dict(self) -> dict[str, ParameterValue]:
        return dict(self._values)


def _transition(current: BatchStatus, next_status: BatchStatus, label: str) -> BatchStatus:
    if current == next_status:
        return current
    if not current.can_transition_to(next_status):
        raise InvalidStatusTransitionError(
            f"{label} cannot move from {current.value} to {next_status.value}"
        )
    return next_status


class JobExecution:
    """A single run of a job with a given set of parameters."""

    def __init__(
        self,
        job_name: str,
        parameters: JobParameters | None = None,
        execution_id: int | None = None,
    ) -> None:
        self.id: int | None = execution_id
        self.job_name: str = job_name
        self.parameters: JobParameters = parameters or JobParameters()
        self.status: BatchStatus = BatchStatus.STARTING
        self.create_time: datetime = utc_now()
        self.start_time: datetime | None = None
        self.end_time: datetime | None = None
        self.exit_message: str | None = None
        self.step_executions: list["StepExecution"] = []
        self.failure_exceptions: list[BaseException] = []

    @property
    def is_running(self) -> bool:
        return self.status.is_running()

    def set_status(self, status: BatchStatus) -> None:
        """
        Move to ``status``.

        Raises:
            InvalidStatusTransitionError: If the transition is not allowed
        """
        self.status = _transition(self.status, status, f"Job execution {self.id}")

    def add_failure_exception(self, error: BaseException) -> None:
        self.failure_exceptions.append(error)

    def all_failure_exceptions(self) -> list[BaseException]:
        """Job level failures followed by the failures of every step."""
        errors = list(self.failure_exceptions)
        for step_execution in self.step_executions:
            errors.extend(step_execution.failure_exceptions)
        return errors

    def get_step_execution(self, step_name: str) -> "StepExecution | None":
        for step_execution in self.step_executions:
            if step_execution.step_name == step_name:
                return step_execution
        return None

    def __repr__(self) -> str:
        return (
            f"JobExecution(id={self.id}, job_name={self.job_name!r}, "
            f"status={self.status.value}, parameters={self.parameters.to_dict()!r})"
        )


class StepExecution:
    """A single run of a step inside a job execution."""

    def __init__(self, step_name: str, job_execution: JobExecution) -> None:
        self.id: int | None = None
        self.step_name: str = step_name
        self.job_execution: JobExecution = job_execution
        self.status: BatchStatus = BatchStatus.STARTING
        self.start_time: datetime | None = None
        self.end_time: datetime | None = None
        self.exit_message: str | None = None

        # Counters
        self.read_count: int = 0
        self.write_count: int = 0
        self.commit_count: int = 0
        self.rollback_count: int = 0

        self.failure_exceptions: list[BaseException] = []
        job_execution.step_executions.append(self)

    @property
    def job_execution_id(self) -> int | None:
        return self.job_execution.id

    def set_status(self, status: BatchStatus) -> None:
        self.status = _transition(self.status, status, f"Step execution '{self.step_name}'")

    def add_failure_exception(self, error: BaseException) -> None:
        self.failure_exceptions.append(error)

    def apply(self, contribution: "StepContribution") -> None:
        """Fold committed tasklet counters into this execution."""
        self.read_count += contribution.read_count
        self.write_count += contribution.write_count

    def __repr__(self) -> str:
        return (
            f"StepExecution(id={self.id}, step_name={self.step_name!r}, "
            f"status={self.status.value}, write_count={self.write_count})"
        )


class StepContribution:
    """
    Counters a tasklet updates while it runs.

    They are only folded into the StepExecution once the step's transaction
    commits, so a rolled back run leaves the counts untouched.
    """

    def __init__(self, step_execution: StepExecution) -> None:
        self.step_execution = step_execution
        self.read_count = 0
        self.write_count = 0

    def increment_read_count(self, count: int = 1) -> None:
        self.read_count += count

    def increment_write_count(self, count: int = 1) -> None:
        self.write_count += count


class ChunkContext:
    """Context handed to a tasklet for one invocation."""

    def __init__(self, step_execution: StepExecution) -> None:
        self.step_execution = step_execution
        self.attributes: dict[str, Any] = {}

    @property
    def job_parameters(self) -> JobParameters:
        return self.step_execution.job_execution.parameters

    @property
    def step_name(self) -> str:
        return self.step_execution.step_name
