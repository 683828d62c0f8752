"""Linear job execution."""

from eguard_batch.core.execution.step_executor import StepExecutor
from eguard_batch.core.jobs.definition import Job
from eguard_batch.core.jobs.execution import JobExecution
from eguard_batch.core.state import BatchStatus
from eguard_batch.utils.logging import ContextLogger
from eguard_batch.utils.time import utc_now


class JobExecutor:
    """
    Runs a job's steps in order and tracks the job execution's status.

    Separated from JobLauncher to isolate "how a job runs" from "whether it
    may run" (locks, repository instance checks).
    """

    def __init__(
        self,
        logger: ContextLogger,
        step_executor: StepExecutor | None = None,
        verbose: bool = False,
    ) -> None:
        self.logger = logger
        self.verbose = verbose
        self.step_executor = step_executor or StepExecutor(logger, verbose=verbose)

    def execute(self, job: Job, job_execution: JobExecution) -> JobExecution:
        """
        Execute every step of ``job``, stopping at the first failure.

        Args:
            job: Job descriptor
            job_execution: Execution created by the job repository (STARTING)

        Returns:
            The same execution, COMPLETED or FAILED
        """
        repository = job.job_repository
        job_logger = self.logger.with_context(
            job_name=job.name, job_execution_id=job_execution.id
        )

        try:
            job_execution.set_status(BatchStatus.STARTED)
            job_execution.start_time = utc_now()
            repository.update(job_execution)

            for step in job.steps:
                step_execution = self.step_executor.execute(step, job_execution)
                if step_execution.status is BatchStatus.FAILED:
                    job_execution.exit_message = f"Step '{step.name}' failed"
                    job_execution.set_status(BatchStatus.FAILED)
                    break
            else:
                job_execution.set_status(BatchStatus.COMPLETED)
        except Exception as e:
            # Repository or bookkeeping failure outside any tasklet
            job_execution.add_failure_exception(e)
            job_execution.exit_message = f"{type(e).__name__}: {e}"
            job_execution.set_status(BatchStatus.FAILED)
            job_logger.error("Job execution aborted", exc_info=True, error=str(e))

        job_execution.end_time = utc_now()
        repository.update(job_execution)

        if self.verbose:
            job_logger.info("Job finished", status=job_execution.status.value)

        return job_execution
