"""Tasklet that raises random incidents for areas and employees."""

import logging
import random
from collections.abc import Callable

from eguard_batch.core.jobs.definition import Tasklet
from eguard_batch.core.jobs.execution import ChunkContext, StepContribution
from eguard_batch.domain.incidents import AreaIncident, EmployeeIncident
from eguard_batch.domain.models import Event
from eguard_batch.domain.repositories import (
    AreaRepository,
    EmployeeRepository,
    EventRepository,
)
from eguard_batch.utils.logging import ContextLogger, _default_logger


class EventTasklet(Tasklet):
    """
    Checks every area and employee and records new incidents.

    An area (or employee) whose latest unresolved event already carries an
    incident is left alone. Everyone else gets a new unresolved event with a
    random non-NORMAL incident, with ``incident_chance_percent`` probability.
    """

    def __init__(
        self,
        area_repository: AreaRepository,
        employee_repository: EmployeeRepository,
        event_repository: EventRepository,
        rng: random.Random | None = None,
        incident_chance_percent: int = 5,
        name_decoder: Callable[[str], str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Args:
            area_repository: Source of monitored areas
            employee_repository: Source of employees
            event_repository: Where new events are saved
            rng: Random source (default: a new random.Random)
            incident_chance_percent: Chance (0-100) of a new incident per check
            name_decoder: Turns stored employee names into display names for logs

        Raises:
            ValueError: If incident_chance_percent is outside 0..100
        """
        if not 0 <= incident_chance_percent <= 100:
            raise ValueError("incident_chance_percent must be between 0 and 100")

        self.area_repository = area_repository
        self.employee_repository = employee_repository
        self.event_repository = event_repository
        self.rng = rng or random.Random()
        self.incident_chance_percent = incident_chance_percent
        self.name_decoder = name_decoder or (lambda name: name)
        self.logger = ContextLogger(logger or _default_logger, {"component": "EventTasklet"})

    def execute(self, contribution: StepContribution, chunk_context: ChunkContext) -> None:
        self._check_areas(contribution)
        self._check_employees(contribution)

    def _check_areas(self, contribution: StepContribution) -> None:
        for area in self.area_repository.find_all():
            contribution.increment_read_count()
            latest = self.event_repository.find_latest_unresolved_by_area(area)
            if latest is not None and latest.area_incident is not None:
                continue
            if not self._incident_occurs():
                continue

            incident = self.rng.choice(AreaIncident.abnormal())
            self.event_repository.save(Event.for_area(area, incident))
            contribution.increment_write_count()
            self.logger.info(
                f"New incident in area [{area.name}]: {incident.label}",
                area_id=area.id,
                incident=incident.name,
            )

    def _check_employees(self, contribution: StepContribution) -> None:
        for employee in self.employee_repository.find_all():
            contribution.increment_read_count()
            latest = self.event_repository.find_latest_unresolved_by_employee(employee)
            if latest is not None and latest.employee_incident is not None:
                continue
            if not self._incident_occurs():
                continue

            incident = self.rng.choice(EmployeeIncident.abnormal())
            self.event_repository.save(Event.for_employee(employee, incident))
            contribution.increment_write_count()
            self.logger.info(
                f"New incident for employee [{self.name_decoder(employee.name)}]: "
                f"{incident.label}",
                employee_id=employee.id,
                incident=incident.name,
            )

    def _incident_occurs(self) -> bool:
        # randrange(100) >= 95 for the default 5%
        return self.rng.randrange(100) >= 100 - self.incident_chance_percent
