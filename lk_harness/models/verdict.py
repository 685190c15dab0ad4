"""
Verdict data models for the harness.

These capture the outcome of one supervised run:
- What the unit of work did (ExecutionOutcome)
- How that outcome is classified (Verdict)
- The full record handed to the reporter (SupervisionResult)
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any


class Verdict(Enum):
    """Classified outcome of a supervised run."""

    SUCCESS = "success"  # Deadline fired, no application error
    FAILURE = "failure"  # Application raised before the deadline
    PREMATURE_EXIT = "premature_exit"  # Clean return before the deadline
    UNBOUNDED_SUCCESS = "unbounded_success"  # No deadline, clean return
    UNBOUNDED_FAILURE = "unbounded_failure"  # No deadline, application raised

    @property
    def passed(self) -> bool:
        return self in (Verdict.SUCCESS, Verdict.UNBOUNDED_SUCCESS)

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1


@dataclass(frozen=True)
class ExecutionOutcome:
    """What was observed of the unit of work.

    completed=False means the deadline fired first; error is then
    always None since nothing the work did afterwards is observed.
    """

    completed: bool
    error: Optional[BaseException] = None

    @classmethod
    def timed_out(cls) -> "ExecutionOutcome":
        return cls(completed=False)

    @classmethod
    def returned(cls, error: Optional[BaseException] = None) -> "ExecutionOutcome":
        return cls(completed=True, error=error)


def classify(outcome: ExecutionOutcome, deadline_set: bool) -> Verdict:
    """Derive the verdict from an outcome and whether a deadline was armed.

    Args:
        outcome: What the supervisor observed
        deadline_set: Whether the run had a deadline

    Returns:
        Verdict enum value
    """
    if not deadline_set:
        if not outcome.completed:
            # Unbounded runs only return once the work does
            raise ValueError("unbounded run cannot time out")
        return Verdict.UNBOUNDED_FAILURE if outcome.error is not None else Verdict.UNBOUNDED_SUCCESS

    if not outcome.completed:
        return Verdict.SUCCESS
    if outcome.error is not None:
        return Verdict.FAILURE
    return Verdict.PREMATURE_EXIT


@dataclass
class SupervisionResult:
    """Complete result of a supervised run.

    This is what the supervisor returns and the reporter consumes.
    """

    verdict: Verdict
    outcome: ExecutionOutcome
    deadline: Optional[float]
    start_time: datetime
    end_time: datetime

    @property
    def error(self) -> Optional[BaseException]:
        return self.outcome.error

    @property
    def passed(self) -> bool:
        return self.verdict.passed

    @property
    def exit_code(self) -> int:
        return self.verdict.exit_code

    @property
    def elapsed_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    def summary(self) -> str:
        """Human-readable summary."""
        limit = f"{self.deadline:g}s" if self.deadline is not None else "unbounded"
        text = f"{self.verdict.value} after {self.elapsed_seconds:.2f}s (deadline: {limit})"
        if self.error is not None:
            text += f": {self.error}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "verdict": self.verdict.value,
            "passed": self.passed,
            "exit_code": self.exit_code,
            "deadline_seconds": self.deadline,
            "completed": self.outcome.completed,
            "error": str(self.error) if self.error is not None else None,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }
