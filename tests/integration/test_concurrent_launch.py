"""Concurrent launches of the same job from several launchers."""

import threading
from unittest.mock import MagicMock

import pytest

from eguard_batch import (
    BatchStatus,
    JobExecutionAlreadyRunningError,
    JobLauncher,
    JobParameters,
    Tasklet,
    build_job,
    build_step,
)


class SlowTasklet(Tasklet):
    """Tasklet that holds the step open until released."""

    def __init__(self):
        self.calls = 0
        self.started = threading.Event()
        self.release = threading.Event()
        self._mutex = threading.Lock()

    def execute(self, contribution, chunk_context):
        with self._mutex:
            self.calls += 1
        self.started.set()
        self.release.wait(timeout=5)


@pytest.fixture
def slow_tasklet():
    return SlowTasklet()


@pytest.fixture
def job(job_repository, transaction_manager, slow_tasklet):
    step = build_step("eventStep", job_repository, transaction_manager, slow_tasklet)
    return build_job("eventJob", job_repository, step)


@pytest.mark.parametrize("with_lock", [True, False])
def test_only_one_run_at_a_time(job, job_repository, lock_adapter, slow_tasklet, with_lock):
    """A second launch while the first is running is refused (lock or repository)."""
    launchers = [
        JobLauncher(lock_adapter=lock_adapter if with_lock else None, logger=MagicMock())
        for _ in range(3)
    ]
    results = []
    refused = []

    def run_first():
        results.append(launchers[0].run(job, JobParameters({"time": 1})))

    first = threading.Thread(target=run_first)
    first.start()
    assert slow_tasklet.started.wait(timeout=5)

    for n, launcher in enumerate(launchers[1:], start=2):
        try:
            launcher.run(job, JobParameters({"time": n}))
        except JobExecutionAlreadyRunningError:
            refused.append(n)

    slow_tasklet.release.set()
    first.join(timeout=5)

    assert refused == [2, 3]
    assert slow_tasklet.calls == 1
    assert [e.status for e in results] == [BatchStatus.COMPLETED]
    assert len(job_repository.find_job_executions("eventJob")) == 1


def test_next_launch_after_finish(job, lock_adapter, slow_tasklet):
    slow_tasklet.release.set()
    launcher = JobLauncher(lock_adapter=lock_adapter, logger=MagicMock())

    launcher.run(job, JobParameters({"time": 1}))
    execution = launcher.run(job, JobParameters({"time": 2}))

    assert execution.status is BatchStatus.COMPLETED
    assert slow_tasklet.calls == 2
