"""Tasklet step execution under a single transaction."""

from eguard_batch.core.jobs.definition import Step
from eguard_batch.core.jobs.execution import (
    ChunkContext,
    JobExecution,
    StepContribution,
    StepExecution,
)
from eguard_batch.core.state import BatchStatus
from eguard_batch.utils.logging import ContextLogger
from eguard_batch.utils.time import utc_now


class StepExecutor:
    """
    Runs a step's tasklet exactly once inside one transaction.

    The tasklet's side effects and the contribution counters are committed
    together or discarded together. Failures are recorded on the step
    execution and never retried.
    """

    def __init__(self, logger: ContextLogger, verbose: bool = False) -> None:
        self.logger = logger
        self.verbose = verbose

    def execute(self, step: Step, job_execution: JobExecution) -> StepExecution:
        """
        Execute a step for the given job execution.

        Args:
            step: Step descriptor
            job_execution: Owning job execution (already STARTED)

        Returns:
            Finished step execution (COMPLETED or FAILED)
        """
        repository = step.job_repository
        step_execution = StepExecution(step.name, job_execution)
        repository.add_step_execution(step_execution)

        step_logger = self.logger.with_context(
            step_name=step.name, step_execution_id=step_execution.id
        )

        step_execution.set_status(BatchStatus.STARTED)
        step_execution.start_time = utc_now()
        repository.update_step_execution(step_execution)

        if self.verbose:
            step_logger.info("Step started")

        contribution = StepContribution(step_execution)
        chunk_context = ChunkContext(step_execution)
        transaction_manager = step.transaction_manager
        status = None

        try:
            status = transaction_manager.begin()
            step.tasklet.execute(contribution, chunk_context)
            transaction_manager.commit(status)
        except Exception as e:
            if status is not None:
                self._rollback(step, status, step_execution, step_logger)
            step_execution.add_failure_exception(e)
            step_execution.exit_message = f"{type(e).__name__}: {e}"
            step_execution.set_status(BatchStatus.FAILED)
            step_logger.error(
                "Step failed",
                exc_info=True,
                error=str(e),
                error_type=type(e).__name__,
            )
        else:
            step_execution.apply(contribution)
            step_execution.commit_count += 1
            step_execution.set_status(BatchStatus.COMPLETED)
            if self.verbose:
                step_logger.info(
                    "Step completed",
                    read_count=step_execution.read_count,
                    write_count=step_execution.write_count,
                )

        step_execution.end_time = utc_now()
        repository.update_step_execution(step_execution)
        return step_execution

    def _rollback(
        self,
        step: Step,
        status,
        step_execution: StepExecution,
        step_logger: ContextLogger,
    ) -> None:
        """Roll back unless the transaction manager already did."""
        step_execution.rollback_count += 1
        if status.completed:
            return
        try:
            step.transaction_manager.rollback(status)
        except Exception as rollback_error:
            step_execution.add_failure_exception(rollback_error)
            step_logger.error(
                "Rollback failed",
                error=str(rollback_error),
                error_type=type(rollback_error).__name__,
            )
