"""Event job definition.

``eventJob`` is a single-step job: ``eventStep`` runs the EventTasklet once
inside one transaction. Collaborators are passed in by the application's
startup routine.
"""

from eguard_batch.adapters.base import JobRepository, TransactionManager
from eguard_batch.core.jobs.definition import Job, Step, Tasklet, build_job, build_step

EVENT_JOB_NAME = "eventJob"
EVENT_STEP_NAME = "eventStep"


def build_event_job(job_repository: JobRepository, event_step: Step) -> Job:
    """
    Build the job that runs the EventTasklet.

    Args:
        job_repository: Repository storing job execution metadata
        event_step: Step wrapping the EventTasklet

    Returns:
        Job named "eventJob" that starts and ends with ``event_step``
    """
    return build_job(EVENT_JOB_NAME, job_repository, event_step)


def build_event_step(
    job_repository: JobRepository,
    transaction_manager: TransactionManager,
    event_tasklet: Tasklet,
) -> Step:
    """
    Build the step that runs the EventTasklet.

    Args:
        job_repository: Repository storing step execution metadata
        transaction_manager: Transaction boundary around the tasklet
        event_tasklet: Tasklet holding the event generation logic

    Returns:
        Step named "eventStep"
    """
    return build_step(EVENT_STEP_NAME, job_repository, transaction_manager, event_tasklet)


def create_event_job(
    job_repository: JobRepository,
    transaction_manager: TransactionManager,
    event_tasklet: Tasklet,
) -> Job:
    """Build ``eventStep`` and the ``eventJob`` around it."""
    event_step = build_event_step(job_repository, transaction_manager, event_tasklet)
    return build_event_job(job_repository, event_step)
