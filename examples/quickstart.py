"""eGuard Batch Quick Start Example - in-memory event job."""

import logging
import random
import time

from eguard_batch import BatchStatus
from eguard_batch.app import create_event_application
from eguard_batch.domain import (
    Area,
    Employee,
    InMemoryAreaRepository,
    InMemoryEmployeeRepository,
    InMemoryEventRepository,
)
from eguard_batch.utils.logging import setup_logger


def main():
    """Run the event job once by hand, then let the scheduler take over."""
    print("=== eGuard Batch Quick Start ===\n")

    # 1. Domain data
    print("1. Creating repositories...")
    areas = InMemoryAreaRepository(
        [
            Area(id=1, name="조립 라인 A", factory_id=1),
            Area(id=2, name="도장 부스", factory_id=1),
            Area(id=3, name="자재 창고", factory_id=1),
        ]
    )
    employees = InMemoryEmployeeRepository(
        [Employee(id=n, name=f"worker-{n}", factory_id=1) for n in range(10, 20)]
    )
    events = InMemoryEventRepository()

    # 2. Wire the application (in-memory job repository, transactions and lock)
    print("2. Wiring eventJob...")
    app = create_event_application(
        areas,
        employees,
        events,
        rng=random.Random(42),
        incident_chance_percent=30,  # Higher than the default 5% so the demo shows incidents
        timezone="Asia/Seoul",
        verbose=True,
        logger=setup_logger(level=logging.INFO),
    )
    next_run = app.scheduler.next_fire_time(app.job.name)
    print(f"   ✓ {app.job.name} scheduled, next trigger at {next_run:%H:%M:%S} UTC\n")

    # 3. Manual run
    print("3. Running eventJob now...")
    execution = app.run_event_job()
    step_execution = execution.get_step_execution("eventStep")
    print(f"   ✓ status={execution.status} read={step_execution.read_count} "
          f"written={step_execution.write_count}\n")

    for event in events.find_all():
        if event.area is not None:
            print(f"   - [{event.area.name}] {event.area_incident.priority.prefix}"
                  f"{event.area_incident.message}")
        else:
            print(f"   - [{event.employee.name}] {event.employee_incident.priority.prefix}"
                  f"{event.employee_incident.message}")

    # 4. Second run skips everyone who still has an open incident
    print("\n4. Running again...")
    execution = app.run_event_job()
    print(f"   ✓ status={execution.status} total events={len(events.find_all())}\n")
    assert execution.status is BatchStatus.COMPLETED

    # 5. Cron triggering
    print("5. Starting scheduler (Ctrl+C to stop)...")
    app.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nStopping scheduler...")
    finally:
        app.stop()
        print("   ✓ Scheduler stopped")


if __name__ == "__main__":
    main()
