"""End-to-end tests: scheduler -> launcher -> eventJob -> EventTasklet."""

import itertools
import random
from unittest.mock import MagicMock

import pytest

from eguard_batch import (
    BatchStatus,
    JobExecutionAlreadyRunningError,
    JobInstanceAlreadyCompleteError,
    JobParameters,
)
from eguard_batch.app import create_event_application
from eguard_batch.domain import Area, AreaIncident, Event, InMemoryEventRepository


@pytest.fixture
def make_app(area_repository, employee_repository, event_repository, monkeypatch):
    # Distinct "time" parameter for every run, even within one millisecond
    ticks = itertools.count(1_700_000_000_000)
    monkeypatch.setattr("eguard_batch.core.scheduler.epoch_millis", lambda: next(ticks))

    apps = []

    def make(**kwargs):
        kwargs.setdefault("logger", MagicMock())
        app = create_event_application(
            area_repository, employee_repository, event_repository, **kwargs
        )
        apps.append(app)
        return app

    yield make
    for app in apps:
        app.stop()


class TestEventJobRun:
    """A run of the event job through the whole stack."""

    def test_run_creates_events(self, make_app, event_repository, fixed_random):
        app = make_app(rng=fixed_random(99))

        execution = app.run_event_job()

        assert execution.status is BatchStatus.COMPLETED
        step_execution = execution.get_step_execution("eventStep")
        assert step_execution.status is BatchStatus.COMPLETED
        assert step_execution.read_count == 5
        assert step_execution.write_count == 5
        assert step_execution.commit_count == 1
        assert len(event_repository.find_all()) == 5

    def test_tasklet_runs_once_per_run(self, make_app, event_repository, fixed_random):
        app = make_app(rng=fixed_random(99))

        app.run_event_job()
        second = app.run_event_job()

        # Second run finds every subject with an open incident
        assert second.status is BatchStatus.COMPLETED
        assert second.get_step_execution("eventStep").write_count == 0
        assert len(event_repository.find_all()) == 5
        assert len(app.job_repository.find_job_executions("eventJob")) == 2

    def test_run_has_time_parameter(self, make_app, fixed_random):
        app = make_app(rng=fixed_random(0))

        execution = app.run_event_job()

        assert isinstance(execution.parameters["time"], int)

    def test_seeded_run_is_reproducible(self, area_repository, employee_repository):
        results = []
        for _ in range(2):
            events = InMemoryEventRepository()
            app = create_event_application(
                area_repository,
                employee_repository,
                events,
                rng=random.Random(1234),
                incident_chance_percent=50,
                logger=MagicMock(),
            )
            app.run_event_job()
            results.append(
                [(e.area, e.employee, e.area_incident, e.employee_incident) for e in events.find_all()]
            )

        assert results[0] == results[1]

    def test_trigger_callback_runs_job(self, make_app, fixed_random):
        """The APScheduler callback launches a new execution."""
        app = make_app(rng=fixed_random(0))

        app.scheduler._run_scheduled("eventJob")

        executions = app.job_repository.find_job_executions("eventJob")
        assert [e.status for e in executions] == [BatchStatus.COMPLETED]


class TestEventJobFailure:
    """Failures roll back the step and mark the execution FAILED."""

    def test_failure_rolls_back_events(
        self, make_app, event_repository, employee_repository, fixed_random
    ):
        employee_repository.find_all = _raise(RuntimeError("employee service down"))
        app = make_app(rng=fixed_random(99))

        execution = app.run_event_job()

        # Area events were saved before the failure and then rolled back
        assert execution.status is BatchStatus.FAILED
        assert event_repository.find_all() == []

        step_execution = execution.get_step_execution("eventStep")
        assert step_execution.status is BatchStatus.FAILED
        assert step_execution.rollback_count == 1
        assert step_execution.write_count == 0
        assert "employee service down" in step_execution.exit_message

        stored = app.job_repository.get_job_execution(execution.id)
        assert stored.status is BatchStatus.FAILED

    def test_pre_existing_events_survive_rollback(
        self, make_app, event_repository, employee_repository, fixed_random
    ):
        area = Area(id=99, name="창고", factory_id=1)
        existing = event_repository.save(Event.for_area(area, AreaIncident.FLOOD))
        employee_repository.find_all = _raise(RuntimeError("employee service down"))
        app = make_app(rng=fixed_random(99))

        app.run_event_job()

        assert [e.id for e in event_repository.find_all()] == [existing.id]

    def test_next_run_after_failure(self, make_app, employee_repository, fixed_random):
        original = employee_repository.find_all
        employee_repository.find_all = _raise(RuntimeError("employee service down"))
        app = make_app(rng=fixed_random(99))
        assert app.run_event_job().status is BatchStatus.FAILED

        employee_repository.find_all = original
        assert app.run_event_job().status is BatchStatus.COMPLETED


class TestOverlappingRuns:
    """Duplicate-run protection across launches."""

    def test_locked_job_is_refused(self, make_app, lock_adapter, fixed_random):
        app = make_app(rng=fixed_random(0), lock_adapter=lock_adapter)
        lock_adapter.acquire("batch:lock:eventJob", ttl_seconds=60, owner_id="other-process")

        with pytest.raises(JobExecutionAlreadyRunningError):
            app.run_event_job()

        assert app.job_repository.find_job_executions("eventJob") == []

    def test_same_parameters_twice(self, make_app, fixed_random):
        app = make_app(rng=fixed_random(0))
        params = JobParameters({"time": 1})
        app.launcher.run(app.job, params)

        with pytest.raises(JobInstanceAlreadyCompleteError):
            app.launcher.run(app.job, params)


def _raise(error):
    def fail():
        raise error

    return fail
