"""Safety monitoring domain: incident types, entities and repositories."""

from eguard_batch.domain.incidents import (
    AreaIncident,
    EmployeeIncident,
    EmployeeRole,
    IncidentPriority,
)
from eguard_batch.domain.models import Area, Employee, Event
from eguard_batch.domain.repositories import (
    AreaRepository,
    EmployeeRepository,
    EventRepository,
    InMemoryAreaRepository,
    InMemoryEmployeeRepository,
    InMemoryEventRepository,
)

__all__ = [
    # Incident types
    "IncidentPriority",
    "AreaIncident",
    "EmployeeIncident",
    "EmployeeRole",
    # Entities
    "Area",
    "Employee",
    "Event",
    # Repositories
    "AreaRepository",
    "EmployeeRepository",
    "EventRepository",
    "InMemoryAreaRepository",
    "InMemoryEmployeeRepository",
    "InMemoryEventRepository",
]
