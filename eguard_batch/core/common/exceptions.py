"""Custom exceptions for eguard-batch.

Hierarchy:
    BatchError
    ├── BatchConfigurationError
    │   └── JobDefinitionError
    ├── BatchLookupError
    │   ├── StepNotFoundError
    │   ├── JobNotRegisteredError
    │   └── JobExecutionNotFoundError
    └── BatchStateError
        ├── JobExecutionAlreadyRunningError
        ├── JobInstanceAlreadyCompleteError
        ├── InvalidStatusTransitionError
        └── TransactionError
"""


class BatchError(Exception):
    """Base exception for batch framework errors."""

    pass


# Configuration errors


class BatchConfigurationError(BatchError):
    """Jobs, steps or collaborators were wired incorrectly."""

    pass


class JobDefinitionError(BatchConfigurationError):
    """A Job or Step descriptor is invalid."""

    pass


# Lookup errors


class BatchLookupError(BatchError):
    """A named job, step or execution could not be found."""

    pass


class StepNotFoundError(BatchLookupError):
    """Step name is not part of the job."""

    pass


class JobNotRegisteredError(BatchLookupError):
    """Job name is not known to the scheduler."""

    def __init__(self, job_name: str) -> None:
        self.job_name = job_name
        super().__init__(
            f"Job '{job_name}' is not scheduled. "
            "Call scheduler.schedule(job, cron) before running it by name."
        )


class JobExecutionNotFoundError(BatchLookupError):
    """Execution id is unknown to the job repository."""

    pass


# State errors


class BatchStateError(BatchError):
    """Operation is not allowed in the current execution state."""

    pass


class JobExecutionAlreadyRunningError(BatchStateError):
    """An execution of the same job is already running."""

    def __init__(self, job_name: str, execution_id: int | None = None) -> None:
        self.job_name = job_name
        self.execution_id = execution_id
        detail = f" (execution {execution_id})" if execution_id is not None else ""
        super().__init__(f"Job '{job_name}' is already running{detail}")


class JobInstanceAlreadyCompleteError(BatchStateError):
    """The job already completed with identical parameters."""

    def __init__(self, job_name: str, parameters: object) -> None:
        self.job_name = job_name
        self.parameters = parameters
        super().__init__(
            f"Job '{job_name}' already completed with parameters {parameters}. "
            "Launch it with different parameters to run it again."
        )


class InvalidStatusTransitionError(BatchStateError):
    """Execution status cannot move to the requested status."""

    pass


class TransactionError(BatchStateError):
    """Transaction could not be started, committed or rolled back."""

    pass
