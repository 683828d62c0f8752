"""Domain repositories and their in-memory implementations."""

import copy
import itertools
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from eguard_batch.adapters.base import TransactionalResource
from eguard_batch.domain.models import Area, Employee, Event


class AreaRepository(ABC):
    """Read access to monitored areas."""

    @abstractmethod
    def find_all(self) -> list[Area]:
        pass


class EmployeeRepository(ABC):
    """Read access to employees."""

    @abstractmethod
    def find_all(self) -> list[Employee]:
        pass


class EventRepository(ABC):
    """Incident event storage."""

    @abstractmethod
    def save(self, event: Event) -> Event:
        """
        Store an event, assigning an id to new ones.

        Returns:
            The saved event
        """
        pass

    @abstractmethod
    def find_latest_unresolved_by_area(self, area: Area) -> Event | None:
        """Most recently created unresolved event of ``area``, if any."""
        pass

    @abstractmethod
    def find_latest_unresolved_by_employee(self, employee: Employee) -> Event | None:
        """Most recently created unresolved event of ``employee``, if any."""
        pass

    @abstractmethod
    def find_all(self) -> list[Event]:
        pass


class InMemoryAreaRepository(AreaRepository):
    def __init__(self, areas: Iterable[Area] = ()) -> None:
        self._areas = list(areas)

    def add(self, area: Area) -> None:
        self._areas.append(area)

    def find_all(self) -> list[Area]:
        return list(self._areas)


class InMemoryEmployeeRepository(EmployeeRepository):
    def __init__(self, employees: Iterable[Employee] = ()) -> None:
        self._employees = list(employees)

    def add(self, employee: Employee) -> None:
        self._employees.append(employee)

    def find_all(self) -> list[Employee]:
        return list(self._employees)


class InMemoryEventRepository(EventRepository, TransactionalResource):
    """
    In-memory event storage that takes part in in-memory transactions.

    Register it with InMemoryTransactionManager so a failed step discards
    the events saved during it.
    """

    def __init__(self) -> None:
        self._events: dict[int, Event] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def save(self, event: Event) -> Event:
        with self._lock:
            if event.id is None:
                event.id = next(self._ids)
            self._events[event.id] = event
            return event

    def find_latest_unresolved_by_area(self, area: Area) -> Event | None:
        return self._latest(lambda e: e.area is not None and e.area.id == area.id)

    def find_latest_unresolved_by_employee(self, employee: Employee) -> Event | None:
        return self._latest(lambda e: e.employee is not None and e.employee.id == employee.id)

    def find_all(self) -> list[Event]:
        with self._lock:
            return sorted(self._events.values(), key=lambda e: e.id)

    def snapshot(self) -> dict[int, Event]:
        with self._lock:
            # Events are mutable (resolved flag), copy them
            return copy.deepcopy(self._events)

    def restore(self, snapshot: dict[int, Event]) -> None:
        with self._lock:
            self._events = dict(snapshot)

    def _latest(self, predicate: Callable[[Event], bool]) -> Event | None:
        with self._lock:
            candidates = [e for e in self._events.values() if not e.resolved and predicate(e)]
        if not candidates:
            return None
        # Ties on created_at fall back to insertion order
        return max(candidates, key=lambda e: (e.created_at, e.id))
