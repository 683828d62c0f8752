"""Job descriptors and execution records."""

from eguard_batch.core.jobs.definition import (
    CallableTasklet,
    Job,
    Step,
    Tasklet,
    build_job,
    build_step,
)
from eguard_batch.core.jobs.execution import (
    ChunkContext,
    JobExecution,
    JobParameters,
    StepContribution,
    StepExecution,
)

__all__ = [
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
]
