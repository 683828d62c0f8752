"""Cron-based job scheduler (APScheduler)."""

import logging
import threading
from datetime import datetime, timedelta

from apscheduler.schedulers.background import BackgroundScheduler  # type: ignore[import-untyped]
from apscheduler.triggers.cron import CronTrigger  # type: ignore[import-untyped]
from croniter import croniter

from eguard_batch.core.common.exceptions import JobNotRegisteredError
from eguard_batch.core.jobs.definition import Job
from eguard_batch.core.jobs.execution import JobExecution, JobParameters
from eguard_batch.core.launcher import JobLauncher
from eguard_batch.utils.logging import ContextLogger, _default_logger
from eguard_batch.utils.time import epoch_millis, get_timezone, utc_now


_WEEKDAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def _weekday_field_to_names(field: str) -> str:
    """
    Rewrite a numeric crontab day-of-week field with weekday names.

    Crontab counts 0 (or 7) as Sunday while APScheduler counts 0 as Monday,
    so numbers are expanded to names which both agree on.

    Raises:
        ValueError: If the field mixes names with numbers or is malformed
    """
    if not any(c.isdigit() for c in field):
        return field

    days: set[int] = set()
    for part in field.split(","):
        values, _, step = part.partition("/")
        if values == "*":
            start, end = 0, 6
        elif "-" in values:
            first, last = values.split("-", 1)
            start, end = int(first), int(last)
        else:
            start = int(values)
            end = 7 if step else start
        if not 0 <= start <= end <= 7:
            raise ValueError(f"Invalid day-of-week: {part!r}")
        days.update(day % 7 for day in range(start, end + 1, int(step) if step else 1))

    return ",".join(_WEEKDAY_NAMES[day] for day in sorted(days))


class _ScheduledJob:
    """A job bound to its cron expression and trigger."""

    def __init__(self, job: Job, cron: str, trigger: CronTrigger, description: str) -> None:
        self.job = job
        self.cron = cron
        self.trigger = trigger
        self.description = description


class JobScheduler:
    """
    Runs jobs on cron schedules.

    Uses APScheduler BackgroundScheduler internally, so ``start()`` returns
    immediately. Every triggered run gets a fresh ``time`` parameter (epoch
    milliseconds), which makes it a new job instance.

    Usage:
        >>> scheduler = JobScheduler(launcher, timezone="Asia/Seoul")
        >>> scheduler.schedule(event_job, "*/5 * * * *", description="check areas and employees")
        >>> scheduler.start()
        >>> scheduler.stop()
    """

    TIME_PARAMETER = "time"

    def __init__(
        self,
        launcher: JobLauncher,
        timezone: str = "UTC",
        verbose: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize job scheduler.

        Args:
            launcher: Launcher used for every run
            timezone: IANA timezone the cron expressions are evaluated in
            verbose: Enable verbose logging
            logger: Custom logger (uses default if None)

        Raises:
            ValueError: If timezone is invalid
        """
        if launcher is None:
            raise ValueError("launcher is required")

        self.launcher = launcher
        self.timezone = timezone
        self._tz = get_timezone(timezone)
        self.verbose = verbose

        base_logger = logger or _default_logger
        self.logger = ContextLogger(base_logger, {"component": "JobScheduler"})

        self._jobs: dict[str, _ScheduledJob] = {}
        self._registry_lock = threading.RLock()
        self._running = False

        self._apscheduler = BackgroundScheduler(timezone=self._tz, daemon=True)

    def schedule(self, job: Job, cron: str, description: str | None = None) -> None:
        """
        Schedule ``job`` on a 5-field crontab expression (thread-safe).

        Scheduling a job name again replaces its previous schedule.

        Args:
            job: Job to run
            cron: Crontab expression, e.g. "*/5 * * * *"
            description: Text used in start/finish log lines (default: job name)

        Raises:
            ValueError: If the cron expression is invalid
        """
        trigger = self._build_trigger(job.name, cron)

        with self._registry_lock:
            # Pending jobs (scheduler not started) are not deduplicated by replace_existing
            if job.name in self._jobs:
                self._apscheduler.remove_job(job.name)
            self._jobs[job.name] = _ScheduledJob(job, cron, trigger, description or job.name)
            self._apscheduler.add_job(
                func=self._run_scheduled,
                trigger=trigger,
                args=(job.name,),
                id=job.name,
                name=job.name,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )

        if self.verbose:
            self.logger.info("Job scheduled", job_name=job.name, cron=cron)

    def unschedule(self, job_name: str) -> None:
        """
        Remove a job's schedule.

        Raises:
            JobNotRegisteredError: If the job is not scheduled
        """
        with self._registry_lock:
            if job_name not in self._jobs:
                raise JobNotRegisteredError(job_name)
            del self._jobs[job_name]
            self._apscheduler.remove_job(job_name)

    def get_scheduled_job_names(self) -> list[str]:
        with self._registry_lock:
            return sorted(self._jobs)

    def get_job(self, job_name: str) -> Job:
        return self._get_scheduled(job_name).job

    def run_job(self, job_name: str) -> JobExecution:
        """
        Run a scheduled job now, in the calling thread.

        Args:
            job_name: Name of a scheduled job

        Returns:
            Finished job execution

        Raises:
            JobNotRegisteredError: If the job is not scheduled
        """
        scheduled = self._get_scheduled(job_name)
        parameters = JobParameters({self.TIME_PARAMETER: epoch_millis()})

        self.logger.info(f"**** [start] {scheduled.description}", job_name=job_name)
        execution = self.launcher.run(scheduled.job, parameters)
        self.logger.info(
            f"**** [done] {scheduled.description}",
            job_name=job_name,
            status=execution.status.value,
        )
        return execution

    def next_fire_time(self, job_name: str, after: datetime | None = None) -> datetime:
        """
        Next time the job's cron expression fires, in UTC.

        Args:
            job_name: Name of a scheduled job
            after: Reference time (default: now)
        """
        scheduled = self._get_scheduled(job_name)
        # Triggers match the reference time itself; step past it
        base = (after or utc_now()).astimezone(self._tz) + timedelta(microseconds=1)
        return scheduled.trigger.get_next_fire_time(None, base).astimezone(get_timezone("UTC"))

    def start(self) -> None:
        """
        Start scheduler (non-blocking).

        Raises:
            RuntimeError: If already running
        """
        if self._running:
            raise RuntimeError("Scheduler is already running")

        self.logger.info("Starting scheduler", jobs=",".join(self.get_scheduled_job_names()))
        self._apscheduler.start()
        self._running = True

    def stop(self, wait: bool = True) -> None:
        """Stop scheduler, waiting for running jobs by default."""
        if not self._running:
            return

        self._apscheduler.shutdown(wait=wait)
        self._running = False
        self.logger.info("Scheduler stopped")

    def is_running(self) -> bool:
        return self._running

    def _build_trigger(self, job_name: str, cron: str) -> CronTrigger:
        if not isinstance(cron, str) or len(cron.split()) != 5 or not croniter.is_valid(cron):
            raise ValueError(f"Invalid cron expression for job '{job_name}': {cron!r}")

        fields = cron.split()
        try:
            fields[4] = _weekday_field_to_names(fields[4])
            return CronTrigger.from_crontab(" ".join(fields), timezone=self._tz)
        except ValueError as e:
            raise ValueError(f"Invalid cron expression for job '{job_name}': {cron!r}") from e

    def _get_scheduled(self, job_name: str) -> _ScheduledJob:
        with self._registry_lock:
            scheduled = self._jobs.get(job_name)
        if scheduled is None:
            raise JobNotRegisteredError(job_name)
        return scheduled

    def _run_scheduled(self, job_name: str) -> None:
        """APScheduler entry point; errors are logged so the next trigger still fires."""
        try:
            self.run_job(job_name)
        except Exception as e:
            self.logger.error(
                "Scheduled run failed",
                exc_info=True,
                job_name=job_name,
                error=str(e),
                error_type=type(e).__name__,
            )
