"""Common test fixtures and helpers."""

import random
from collections.abc import Callable

import pytest

from eguard_batch import (
    InMemoryJobRepository,
    InMemoryLockAdapter,
    InMemoryTransactionManager,
    Tasklet,
)
from eguard_batch.domain import (
    Area,
    Employee,
    InMemoryAreaRepository,
    InMemoryEmployeeRepository,
    InMemoryEventRepository,
)


class FixedRandom(random.Random):
    """Random source whose randrange always returns ``roll``."""

    def __init__(self, roll: int) -> None:
        super().__init__(0)
        self.roll = roll

    def randrange(self, *args, **kwargs) -> int:
        return self.roll


class RecordingTasklet(Tasklet):
    """Tasklet that counts its invocations."""

    def __init__(self, writes: int = 0) -> None:
        self.calls = 0
        self.writes = writes
        self.parameters = []

    def execute(self, contribution, chunk_context) -> None:
        self.calls += 1
        self.parameters.append(chunk_context.job_parameters)
        contribution.increment_write_count(self.writes)


class FailingTasklet(Tasklet):
    """Tasklet that runs ``before`` and then raises."""

    def __init__(
        self,
        error: Exception | None = None,
        before: Callable[[], None] | None = None,
    ) -> None:
        self.calls = 0
        self.error = error or RuntimeError("tasklet exploded")
        self.before = before

    def execute(self, contribution, chunk_context) -> None:
        self.calls += 1
        if self.before is not None:
            self.before()
        raise self.error


@pytest.fixture
def fixed_random():
    """Factory for random sources with a fixed roll (99 = always an incident)."""
    return FixedRandom


@pytest.fixture
def recording_tasklet():
    return RecordingTasklet()


@pytest.fixture
def failing_tasklet():
    """Factory for tasklets that raise."""
    return FailingTasklet


@pytest.fixture
def job_repository():
    """Create in-memory job repository."""
    return InMemoryJobRepository()


@pytest.fixture
def event_repository():
    """Create in-memory event repository."""
    return InMemoryEventRepository()


@pytest.fixture
def transaction_manager(event_repository):
    """Create transaction manager enlisting the event repository."""
    return InMemoryTransactionManager([event_repository])


@pytest.fixture
def lock_adapter():
    """Create in-memory lock adapter."""
    return InMemoryLockAdapter()


@pytest.fixture
def areas():
    return [
        Area(id=1, name="조립 라인 A", factory_id=1),
        Area(id=2, name="도장 부스", factory_id=1),
    ]


@pytest.fixture
def employees():
    return [
        Employee(id=10, name="worker-10", factory_id=1),
        Employee(id=11, name="worker-11", factory_id=1),
        Employee(id=12, name="worker-12", factory_id=1),
    ]


@pytest.fixture
def area_repository(areas):
    return InMemoryAreaRepository(areas)


@pytest.fixture
def employee_repository(employees):
    return InMemoryEmployeeRepository(employees)
