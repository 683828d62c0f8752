"""Common components shared across core modules."""

from eguard_batch.core.common.exceptions import (
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

__all__ = [
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
]
