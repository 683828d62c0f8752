"""Job and step execution components."""

from eguard_batch.core.execution.job_executor import JobExecutor
from eguard_batch.core.execution.step_executor import StepExecutor

__all__ = [
    "JobExecutor",
    "StepExecutor",
]
