"""Job definitions."""

from eguard_batch.jobs.event_job import (
    EVENT_JOB_NAME,
    EVENT_STEP_NAME,
    build_event_job,
    build_event_step,
    create_event_job,
)

__all__ = [
    "EVENT_JOB_NAME",
    "EVENT_STEP_NAME",
    "build_event_job",
    "build_event_step",
    "create_event_job",
]
