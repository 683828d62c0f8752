"""Job and step descriptors."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from eguard_batch.core.common.exceptions import JobDefinitionError, StepNotFoundError
from eguard_batch.core.jobs.execution import ChunkContext, StepContribution

if TYPE_CHECKING:
    from eguard_batch.adapters.base import JobRepository, TransactionManager


class Tasklet(ABC):
    """Unit of work run once per step execution."""

    @abstractmethod
    def execute(self, contribution: StepContribution, chunk_context: ChunkContext) -> None:
        """
        Run the unit of work.

        Any exception raised here fails the step and rolls its transaction back.

        Args:
            contribution: Counters folded into the step execution on commit
            chunk_context: Step execution, job parameters and scratch attributes
        """
        pass


class CallableTasklet(Tasklet):
    """Adapts a zero-argument callable into a Tasklet."""

    def __init__(self, func: Callable[[], object]) -> None:
        if not callable(func):
            raise JobDefinitionError(f"Tasklet target {func!r} is not callable")
        self.func = func

    def execute(self, contribution: StepContribution, chunk_context: ChunkContext) -> None:
        self.func()

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"CallableTasklet({name})"


def _require_name(kind: str, name: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise JobDefinitionError(f"{kind} name must be a non-empty string, got {name!r}")


@dataclass(frozen=True)
class Step:
    """A named step: one tasklet execution under one transaction manager."""

    name: str
    job_repository: "JobRepository" = field(repr=False)
    transaction_manager: "TransactionManager" = field(repr=False)
    tasklet: Tasklet

    def __post_init__(self) -> None:
        _require_name("Step", self.name)
        if self.job_repository is None:
            raise JobDefinitionError(f"Step '{self.name}' requires a job repository")
        if self.transaction_manager is None:
            raise JobDefinitionError(f"Step '{self.name}' requires a transaction manager")
        if not isinstance(self.tasklet, Tasklet):
            raise JobDefinitionError(
                f"Step '{self.name}' requires a Tasklet, got {type(self.tasklet).__name__}"
            )


@dataclass(frozen=True)
class Job:
    """A named, linear sequence of steps."""

    name: str
    job_repository: "JobRepository" = field(repr=False)
    steps: tuple[Step, ...]

    def __post_init__(self) -> None:
        _require_name("Job", self.name)
        if self.job_repository is None:
            raise JobDefinitionError(f"Job '{self.name}' requires a job repository")

        steps = tuple(self.steps)
        if not steps:
            raise JobDefinitionError(f"Job '{self.name}' must have at least one step")
        for step in steps:
            if not isinstance(step, Step):
                raise JobDefinitionError(
                    f"Job '{self.name}' steps must be Step instances, got {type(step).__name__}"
                )

        names = [step.name for step in steps]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise JobDefinitionError(
                f"Job '{self.name}' has duplicate step names: {', '.join(duplicates)}"
            )

        # frozen dataclass
        object.__setattr__(self, "steps", steps)

    @property
    def start_step(self) -> Step:
        return self.steps[0]

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]

    def get_step(self, step_name: str) -> Step:
        """
        Look up a step by name.

        Raises:
            StepNotFoundError: If the job has no such step
        """
        for step in self.steps:
            if step.name == step_name:
                return step
        raise StepNotFoundError(f"Job '{self.name}' has no step named '{step_name}'")


def build_step(
    name: str,
    job_repository: "JobRepository",
    transaction_manager: "TransactionManager",
    tasklet: Tasklet | Callable[[], object],
) -> Step:
    """
    Build a tasklet step.

    Args:
        name: Step name
        job_repository: Repository recording the step's executions
        transaction_manager: Transaction boundary for the tasklet
        tasklet: Tasklet, or a zero-argument callable wrapped in CallableTasklet

    Returns:
        Immutable Step

    Raises:
        JobDefinitionError: If any argument is invalid
    """
    if tasklet is not None and not isinstance(tasklet, Tasklet):
        tasklet = CallableTasklet(tasklet)
    return Step(
        name=name,
        job_repository=job_repository,
        transaction_manager=transaction_manager,
        tasklet=tasklet,
    )


def build_job(name: str, job_repository: "JobRepository", start: Step, *next_steps: Step) -> Job:
    """
    Build a linear job that begins with ``start``.

    Example:
        >>> step = build_step("eventStep", repository, transaction_manager, tasklet)
        >>> job = build_job("eventJob", repository, step)
        >>> job.step_names
        ['eventStep']

    Raises:
        JobDefinitionError: If any argument is invalid
    """
    if start is None:
        raise JobDefinitionError(f"Job '{name}' requires a start step")
    return Job(name=name, job_repository=job_repository, steps=(start, *next_steps))
