"""Unit tests for incident enums and domain entities."""

import pytest

from eguard_batch.domain import (
    Area,
    AreaIncident,
    Employee,
    EmployeeIncident,
    EmployeeRole,
    Event,
    IncidentPriority,
)


class TestIncidents:
    """Tests for incident enums."""

    def test_area_incident_attributes(self):
        assert AreaIncident.GAS_LEAK.label == "가스 누출"
        assert AreaIncident.GAS_LEAK.priority is IncidentPriority.CRITICAL
        assert AreaIncident.NOISE_ISSUE.priority is IncidentPriority.WARNING

    def test_abnormal_excludes_normal(self):
        area_incidents = AreaIncident.abnormal()
        employee_incidents = EmployeeIncident.abnormal()

        assert AreaIncident.NORMAL not in area_incidents
        assert len(area_incidents) == len(AreaIncident) - 1
        assert EmployeeIncident.NORMAL not in employee_incidents
        assert EmployeeIncident.ON_LEAVE in employee_incidents
        assert len(employee_incidents) == 4

    def test_priority_prefix(self):
        assert IncidentPriority.CRITICAL.prefix == "[긴급] "

    def test_role_str(self):
        assert str(EmployeeRole.MANAGER) == "manager"


class TestEvent:
    """Tests for Event validation."""

    @pytest.fixture
    def area(self):
        return Area(id=1, name="도장 부스", factory_id=1)

    @pytest.fixture
    def employee(self):
        return Employee(id=10, name="worker-10", factory_id=1)

    def test_area_event(self, area):
        event = Event.for_area(area, AreaIncident.FIRE)

        assert event.area is area
        assert event.area_incident is AreaIncident.FIRE
        assert event.employee is None
        assert not event.resolved
        assert event.id is None
        assert event.created_at.tzinfo is not None

    def test_employee_event(self, employee):
        event = Event.for_employee(employee, EmployeeIncident.INJURY)

        assert event.employee is employee
        assert event.employee_incident is EmployeeIncident.INJURY

    def test_requires_a_subject(self):
        with pytest.raises(ValueError, match="exactly one"):
            Event(area_incident=AreaIncident.FIRE)

    def test_rejects_two_subjects(self, area, employee):
        with pytest.raises(ValueError, match="exactly one"):
            Event(area=area, employee=employee)

    def test_rejects_mismatched_incident(self, area, employee):
        with pytest.raises(ValueError, match="employee incident"):
            Event(area=area, employee_incident=EmployeeIncident.INJURY)
        with pytest.raises(ValueError, match="area incident"):
            Event(employee=employee, area_incident=AreaIncident.FIRE)

    def test_entities_are_frozen(self, area):
        with pytest.raises(AttributeError):
            area.name = "renamed"
