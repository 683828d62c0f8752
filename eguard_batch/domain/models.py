"""Safety monitoring entities used by the batch tasklets."""

from dataclasses import dataclass, field
from datetime import datetime

from eguard_batch.domain.incidents import AreaIncident, EmployeeIncident, EmployeeRole
from eguard_batch.utils.time import utc_now


@dataclass(frozen=True)
class Area:
    """A monitored work area inside a factory."""

    id: int
    name: str
    factory_id: int
    location: str | None = None


@dataclass(frozen=True)
class Employee:
    """A factory employee. ``name`` may be stored encrypted."""

    id: int
    name: str
    factory_id: int
    role: EmployeeRole = EmployeeRole.WORKER
    employee_number: str | None = None


@dataclass
class Event:
    """
    An incident recorded against either an area or an employee.

    Exactly one of ``area`` / ``employee`` is set, with the matching
    incident type.
    """

    area: Area | None = None
    employee: Employee | None = None
    area_incident: AreaIncident | None = None
    employee_incident: EmployeeIncident | None = None
    resolved: bool = False
    created_at: datetime = field(default_factory=utc_now)
    id: int | None = None

    def __post_init__(self) -> None:
        if (self.area is None) == (self.employee is None):
            raise ValueError("Event must reference exactly one of area or employee")
        if self.area is not None and self.employee_incident is not None:
            raise ValueError("Area events cannot carry an employee incident")
        if self.employee is not None and self.area_incident is not None:
            raise ValueError("Employee events cannot carry an area incident")

    @classmethod
    def for_area(cls, area: Area, incident: AreaIncident) -> "Event":
        return cls(area=area, area_incident=incident)

    @classmethod
    def for_employee(cls, employee: Employee, incident: EmployeeIncident) -> "Event":
        return cls(employee=employee, employee_incident=incident)
