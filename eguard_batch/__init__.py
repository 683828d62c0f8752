"""
eguard-batch - Tasklet batch jobs for the eGuard safety platform

Usage:
    from eguard_batch import (
        InMemoryJobRepository,
        InMemoryTransactionManager,
        JobLauncher,
        JobParameters,
    )
    from eguard_batch.domain import (
        InMemoryAreaRepository,
        InMemoryEmployeeRepository,
        InMemoryEventRepository,
    )
    from eguard_batch.jobs import create_event_job
    from eguard_batch.tasklets import EventTasklet

    job_repository = InMemoryJobRepository()
    events = InMemoryEventRepository()
    transaction_manager = InMemoryTransactionManager([events])

    tasklet = EventTasklet(
        InMemoryAreaRepository(areas),
        InMemoryEmployeeRepository(employees),
        events,
    )

    # eventJob -> eventStep -> EventTasklet (one transaction)
    event_job = create_event_job(job_repository, transaction_manager, tasklet)

    execution = JobLauncher().run(event_job, JobParameters({"time": 1}))
    print(execution.status)

    # Or wire everything, scheduled every five minutes
    from eguard_batch.app import create_event_application

    app = create_event_application(area_repo, employee_repo, events)
    app.start()
"""

# Core first: adapter modules import from it
from eguard_batch.core import (
    BatchConfigurationError,
    BatchError,
    BatchLookupError,
    BatchStateError,
    BatchStatus,
    CallableTasklet,
    ChunkContext,
    InvalidStatusTransitionError,
    Job,
    JobDefinitionError,
    JobExecution,
    JobExecutionAlreadyRunningError,
    JobExecutionNotFoundError,
    JobInstanceAlreadyCompleteError,
    JobNotRegisteredError,
    JobParameters,
    Step,
    StepContribution,
    StepExecution,
    StepNotFoundError,
    Tasklet,
    TransactionError,
    build_job,
    build_step,
)
from eguard_batch.adapters.lock import InMemoryLockAdapter
from eguard_batch.adapters.repository import InMemoryJobRepository
from eguard_batch.adapters.transaction import InMemoryTransactionManager
from eguard_batch.core.launcher import JobLauncher
from eguard_batch.core.scheduler import JobScheduler

__all__ = [
    # Core
    "Job",
    "Step",
    "Tasklet",
    "CallableTasklet",
    "build_job",
    "build_step",
    "JobParameters",
    "JobExecution",
    "StepExecution",
    "StepContribution",
    "ChunkContext",
    "BatchStatus",
    "JobLauncher",
    "JobScheduler",
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
    # Adapters
    "InMemoryJobRepository",
    "InMemoryTransactionManager",
    "InMemoryLockAdapter",
]
