"""Unit tests for the exception hierarchy."""

import pytest

from eguard_batch import (
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


class TestExceptionHierarchy:
    """Tests for exception base classes."""

    @pytest.mark.parametrize(
        "error_class,base",
        [
            (JobDefinitionError, BatchConfigurationError),
            (StepNotFoundError, BatchLookupError),
            (JobNotRegisteredError, BatchLookupError),
            (JobExecutionNotFoundError, BatchLookupError),
            (JobExecutionAlreadyRunningError, BatchStateError),
            (JobInstanceAlreadyCompleteError, BatchStateError),
            (InvalidStatusTransitionError, BatchStateError),
            (TransactionError, BatchStateError),
        ],
    )
    def test_subclasses(self, error_class, base):
        assert issubclass(error_class, base)
        assert issubclass(error_class, BatchError)

    def test_bases_are_batch_errors(self):
        for base in (BatchConfigurationError, BatchLookupError, BatchStateError):
            assert issubclass(base, BatchError)


class TestExceptionMessages:
    """Tests for exceptions carrying context."""

    def test_job_not_registered(self):
        error = JobNotRegisteredError("eventJob")

        assert error.job_name == "eventJob"
        assert "schedule" in str(error)

    def test_already_running(self):
        error = JobExecutionAlreadyRunningError("eventJob", 3)

        assert error.execution_id == 3
        assert str(error) == "Job 'eventJob' is already running (execution 3)"

    def test_already_running_without_id(self):
        assert str(JobExecutionAlreadyRunningError("eventJob")) == "Job 'eventJob' is already running"

    def test_already_complete(self):
        error = JobInstanceAlreadyCompleteError("eventJob", {"time": 1})

        assert error.parameters == {"time": 1}
        assert "different parameters" in str(error)
