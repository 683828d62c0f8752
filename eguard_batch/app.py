"""Application wiring for the batch jobs.

Every collaborator is created or passed in explicitly here; nothing is
looked up from a global registry.
"""

import logging
import random
from collections.abc import Callable

from eguard_batch.adapters.base import (
    JobRepository,
    LockAdapter,
    TransactionalResource,
    TransactionManager,
)
from eguard_batch.adapters.lock import InMemoryLockAdapter
from eguard_batch.adapters.repository import InMemoryJobRepository
from eguard_batch.adapters.transaction import InMemoryTransactionManager
from eguard_batch.core.jobs.definition import Job
from eguard_batch.core.jobs.execution import JobExecution
from eguard_batch.core.launcher import JobLauncher
from eguard_batch.core.scheduler import JobScheduler
from eguard_batch.domain.repositories import AreaRepository, EmployeeRepository, EventRepository
from eguard_batch.jobs.event_job import create_event_job
from eguard_batch.tasklets.event import EventTasklet

# Every five minutes
EVENT_JOB_CRON = "*/5 * * * *"
EVENT_JOB_DESCRIPTION = "check all areas and employees and record new incidents"


class BatchApplication:
    """The wired event job together with its launcher and scheduler."""

    def __init__(
        self,
        job: Job,
        job_repository: JobRepository,
        transaction_manager: TransactionManager,
        launcher: JobLauncher,
        scheduler: JobScheduler,
    ) -> None:
        self.job = job
        self.job_repository = job_repository
        self.transaction_manager = transaction_manager
        self.launcher = launcher
        self.scheduler = scheduler

    def start(self) -> None:
        """Start cron triggering (non-blocking)."""
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()

    def run_event_job(self) -> JobExecution:
        """Run the event job now with a fresh ``time`` parameter."""
        return self.scheduler.run_job(self.job.name)


def create_event_application(
    area_repository: AreaRepository,
    employee_repository: EmployeeRepository,
    event_repository: EventRepository,
    *,
    job_repository: JobRepository | None = None,
    transaction_manager: TransactionManager | None = None,
    lock_adapter: LockAdapter | None = None,
    cron: str = EVENT_JOB_CRON,
    timezone: str = "UTC",
    rng: random.Random | None = None,
    incident_chance_percent: int = 5,
    name_decoder: Callable[[str], str] | None = None,
    lock_ttl_seconds: int = JobLauncher.DEFAULT_LOCK_TTL,
    verbose: bool = False,
    logger: logging.Logger | None = None,
) -> BatchApplication:
    """
    Wire the event job and schedule it.

    Defaults are in-memory: an InMemoryJobRepository, an
    InMemoryTransactionManager enlisting ``event_repository`` when it is a
    TransactionalResource, and an InMemoryLockAdapter.

    Args:
        area_repository: Source of monitored areas
        employee_repository: Source of employees
        event_repository: Event storage written by the tasklet
        job_repository: Job metadata repository
        transaction_manager: Transaction boundary for the event step
        lock_adapter: Lock preventing overlapping runs
        cron: Crontab expression for the event job
        timezone: Timezone the cron expression is evaluated in
        rng: Random source for the tasklet
        incident_chance_percent: Chance of a new incident per check
        name_decoder: Turns stored employee names into display names for logs
        lock_ttl_seconds: Launcher lock TTL
        verbose: Enable verbose logging
        logger: Custom logger

    Returns:
        BatchApplication, not yet started

    Raises:
        ValueError: If any configuration value is invalid
    """
    job_repository = job_repository or InMemoryJobRepository()
    if transaction_manager is None:
        transaction_manager = InMemoryTransactionManager()
        if isinstance(event_repository, TransactionalResource):
            transaction_manager.register(event_repository)

    event_tasklet = EventTasklet(
        area_repository,
        employee_repository,
        event_repository,
        rng=rng,
        incident_chance_percent=incident_chance_percent,
        name_decoder=name_decoder,
        logger=logger,
    )
    job = create_event_job(job_repository, transaction_manager, event_tasklet)

    launcher = JobLauncher(
        lock_adapter=lock_adapter or InMemoryLockAdapter(),
        lock_ttl_seconds=lock_ttl_seconds,
        verbose=verbose,
        logger=logger,
    )
    scheduler = JobScheduler(launcher, timezone=timezone, verbose=verbose, logger=logger)
    scheduler.schedule(job, cron, description=EVENT_JOB_DESCRIPTION)

    return BatchApplication(job, job_repository, transaction_manager, launcher, scheduler)
