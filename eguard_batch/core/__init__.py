"""Core batch components.

The launcher and scheduler depend on adapter contracts and are exported from
the top-level package instead.
"""

from eguard_batch.core.common import (
    BatchConfigurationError,
    BatchError,
    BatchLookupError,
    BatchStateError,
    InvalidStatusTransitionError,
    JobDefinitionError,
    JobExecutionAlreadyRunningError,
    JobExecutionNotFoundError,
    JobInstanceAlreadyCompleteError,
    JobNotRegisteredError,
    StepNotFoundError,
    TransactionError,
)
from eguard_batch.core.execution import JobExecutor, StepExecutor
from eguard_batch.core.jobs import (
    CallableTasklet,
    ChunkContext,
    Job,
    JobExecution,
    JobParameters,
    Step,
    StepContribution,
    StepExecution,
    Tasklet,
    build_job,
    build_step,
)
from eguard_batch.core.state import BatchStatus

__all__ = [
    # Status
    "BatchStatus",
    # Exceptions
    "BatchError",
    "BatchConfigurationError",
    "BatchLookupError",
    "BatchStateError",
    "JobDefinitionError",
    "StepNotFoundError",
    "JobNotRegisteredError",
    "JobExecutionNotFoundError",
    "JobExecutionAlreadyRunningError",
    "JobInstanceAlreadyCompleteError",
    "InvalidStatusTransitionError",
    "TransactionError",
    # Descriptors
    "Job",
    "Step",
    "Tasklet",
    "CallableTasklet",
    "build_job",
    "build_step",
    # Execution records
    "JobParameters",
    "JobExecution",
    "StepExecution",
    "StepContribution",
    "ChunkContext",
    # Execution
    "StepExecutor",
    "JobExecutor",
]
