"""
Deadline supervision for the harness.

Runs a unit of work on its own thread and races it against a deadline.
The verdict comes from which of the two finished first, not from what
the work would eventually have returned.
"""

from datetime import datetime
from typing import Callable, Optional
import logging
import queue
import threading

from ..exceptions import ApplicationError, SupervisionError
from ..models.verdict import ExecutionOutcome, SupervisionResult, classify

logger = logging.getLogger(__name__)

Work = Callable[[threading.Event], None]


class DeadlineSupervisor:
    """Races a unit of work against an optional deadline.

    The work receives a threading.Event that is set when the deadline
    fires, so deadline-aware work can begin shutting down. The supervisor
    does not wait for that to happen: it returns as soon as the deadline
    fires and abandons the worker thread. The worker is a daemon thread,
    so it does not keep the process alive.

    Usage:
        supervisor = DeadlineSupervisor(deadline=30.0)
        result = supervisor.supervise(run_app)
        print(result.verdict)

    Attributes:
        deadline: Seconds to wait, or None to wait for the work forever
    """

    def __init__(self, deadline: Optional[float] = None):
        if deadline is not None and deadline <= 0:
            raise SupervisionError(f"deadline must be positive, got {deadline}")
        if deadline is not None and deadline > threading.TIMEOUT_MAX:
            raise SupervisionError(f"deadline too long, got {deadline}")
        self.deadline = deadline

    def supervise(self, work: Work) -> SupervisionResult:
        """Run work once and classify how it ended.

        Args:
            work: Callable taking the stop event. Returning means a clean
                exit, raising means the application failed.

        Returns:
            SupervisionResult with the verdict and the observed outcome

        Raises:
            SupervisionError: If work is not callable
        """
        if not callable(work):
            raise SupervisionError(f"work must be callable, got {type(work).__name__}")

        # Single slot, single writer
        done: "queue.Queue[ExecutionOutcome]" = queue.Queue(maxsize=1)
        stop = threading.Event()

        start_time = datetime.now()
        worker = threading.Thread(
            target=self._run,
            args=(work, stop, done),
            name="supervised-work",
            daemon=True,
        )
        worker.start()

        if self.deadline is None:
            logger.debug("Supervising without a deadline")
            outcome = done.get()
        else:
            logger.debug(f"Supervising with a {self.deadline:g}s deadline")
            try:
                outcome = done.get(timeout=self.deadline)
            except queue.Empty:
                stop.set()
                outcome = ExecutionOutcome.timed_out()
                logger.debug("Deadline reached, leaving work to wind down on its own")

        end_time = datetime.now()
        verdict = classify(outcome, deadline_set=self.deadline is not None)

        result = SupervisionResult(
            verdict=verdict,
            outcome=outcome,
            deadline=self.deadline,
            start_time=start_time,
            end_time=end_time,
        )
        logger.info(f"Supervised run finished: {result.summary()}")
        return result

    @staticmethod
    def _run(work: Work, stop: threading.Event, done: "queue.Queue[ExecutionOutcome]") -> None:
        """Worker thread body. Puts exactly one outcome on the queue."""
        try:
            work(stop)
        except SystemExit as e:
            done.put(ExecutionOutcome.returned(_exit_error(e)))
        except BaseException as e:
            # Includes KeyboardInterrupt raised by the application itself
            logger.debug(f"Work raised {type(e).__name__}: {e}")
            done.put(ExecutionOutcome.returned(e))
        else:
            done.put(ExecutionOutcome.returned())


def _exit_error(exc: SystemExit) -> Optional[BaseException]:
    """Map sys.exit() inside the work to an error, or None for status 0."""
    code = exc.code
    if code is None or code == 0:
        return None
    if isinstance(code, int):
        return ApplicationError(f"exited with status {code}", exit_code=code)
    # sys.exit("message") prints the message and exits 1
    return ApplicationError(str(code))


def supervise(deadline: Optional[float], work: Work) -> SupervisionResult:
    """Convenience wrapper around DeadlineSupervisor."""
    return DeadlineSupervisor(deadline).supervise(work)
