"""
Saga runner.

A saga is a declarative list of steps spanning independent systems with
no shared transaction. Each step carries its own failure policy instead
of being rolled back atomically.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from scholarfi.infrastructure.monitoring import get_logger, metrics

logger = get_logger(__name__)


class FailurePolicy(str, Enum):
    """What the runner does when a step raises."""

    ABORT = "abort"  # re-raise, remaining steps do not run
    DEGRADE = "degrade"  # log, record, continue with the next step
    SKIP = "skip"  # log, record, stop the run without raising


class StepStatus(str, Enum):
    """Recorded outcome of a step."""

    SUCCEEDED = "succeeded"
    DEGRADED = "degraded"
    SKIPPED = "skipped"
    ABORTED = "aborted"


@dataclass(frozen=True)
class SagaStep:
    """
    One step of a saga.

    The action receives the shared saga context and writes its outputs
    into it.
    """

    name: str
    action: Callable[[Any], Awaitable[None]]
    on_failure: FailurePolicy = FailurePolicy.ABORT


@dataclass(frozen=True)
class StepOutcome:
    """Outcome of a single executed step."""

    name: str
    status: StepStatus
    error: Optional[str] = None


@dataclass
class SagaReport:
    """Ordered outcomes of one saga run."""

    saga: str
    outcomes: List[StepOutcome] = field(default_factory=list)
    skipped: bool = False

    def status_of(self, name: str) -> Optional[StepStatus]:
        """Status of a step, or None if it never ran."""
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome.status
        return None

    def succeeded(self, name: str) -> bool:
        return self.status_of(name) == StepStatus.SUCCEEDED


class SagaRunner:
    """
    Executes saga steps strictly in order.

    Business rules:
    - ABORT failures propagate to the caller unchanged
    - DEGRADE failures are logged and the run continues
    - SKIP failures are logged and the run stops without error
    """

    def __init__(self, name: str, steps: Sequence[SagaStep]):
        """
        Initialize runner.

        Args:
            name: Saga name (logs and metrics)
            steps: Steps in execution order
        """
        self.name = name
        self.steps = list(steps)

    def _record(self, report: SagaReport, outcome: StepOutcome) -> None:
        report.outcomes.append(outcome)
        metrics.saga_step_outcomes_total.labels(
            saga=self.name, step=outcome.name, status=outcome.status.value
        ).inc()

    async def run(self, context: Any) -> SagaReport:
        """
        Run all steps against a context.

        Args:
            context: Mutable object shared by the step actions

        Returns:
            SagaReport with one outcome per executed step

        Raises:
            Exception: Whatever an ABORT step raised
        """
        report = SagaReport(saga=self.name)

        for step in self.steps:
            try:
                await step.action(context)
            except Exception as e:
                if step.on_failure == FailurePolicy.ABORT:
                    logger.error(f"[{self.name}] {step.name} failed, aborting: {e}")
                    self._record(
                        report, StepOutcome(step.name, StepStatus.ABORTED, str(e))
                    )
                    raise

                if step.on_failure == FailurePolicy.SKIP:
                    logger.warning(f"[{self.name}] {step.name} skipped run: {e}")
                    self._record(
                        report, StepOutcome(step.name, StepStatus.SKIPPED, str(e))
                    )
                    report.skipped = True
                    break

                logger.warning(f"[{self.name}] {step.name} failed, continuing: {e}")
                self._record(
                    report, StepOutcome(step.name, StepStatus.DEGRADED, str(e))
                )
                continue

            self._record(report, StepOutcome(step.name, StepStatus.SUCCEEDED))

        return report
