"""Batch status enumeration."""

from enum import Enum


class BatchStatus(str, Enum):
    """Status of a job or step execution."""

    STARTING = "starting"  # Created by the repository, not yet running
    STARTED = "started"  # Currently executing
    COMPLETED = "completed"  # Finished and committed
    FAILED = "failed"  # Finished with an error, side effects rolled back

    def __str__(self) -> str:
        return self.value

    def is_running(self) -> bool:
        """Check if an execution in this status is still in flight."""
        return self in (BatchStatus.STARTING, BatchStatus.STARTED)

    def is_unsuccessful(self) -> bool:
        return self is BatchStatus.FAILED

    def can_transition_to(self, next_status: "BatchStatus") -> bool:
        """Check if moving to ``next_status`` is allowed."""
        return next_status in _VALID_TRANSITIONS[self]


# STARTING -> FAILED covers executions that die before the first step begins
_VALID_TRANSITIONS: dict[BatchStatus, frozenset[BatchStatus]] = {
    BatchStatus.STARTING: frozenset({BatchStatus.STARTED, BatchStatus.FAILED}),
    BatchStatus.STARTED: frozenset({BatchStatus.COMPLETED, BatchStatus.FAILED}),
    BatchStatus.COMPLETED: frozenset(),
    BatchStatus.FAILED: frozenset(),
}
