"""
Verdict reporting for the harness.

Turns a supervision result into a process exit code, a diagnostic line
on stderr (failures only) and, when metrics are enabled, a counter bump.
"""

from typing import Optional, TextIO
import logging

import click

from ..models.verdict import SupervisionResult, Verdict
from .metrics import HarnessMetrics

logger = logging.getLogger(__name__)

PREMATURE_EXIT_MESSAGE = "Application finished too quickly"
FAILURE_MESSAGE = "Application failed: {error}"


class VerdictReporter:
    """Reports the verdict of a supervised run.

    Success is silent: whatever the application printed before the
    deadline is the only output. Diagnostics never go to stdout, which
    stays reserved for the application.

    Usage:
        reporter = VerdictReporter(metrics=HarnessMetrics())
        exit_code = reporter.report(result)
        sys.exit(exit_code)

    Attributes:
        metrics: Counters to update, or None when metrics are disabled
        stream: Where diagnostics go (stderr when None)
    """

    def __init__(
        self,
        metrics: Optional[HarnessMetrics] = None,
        stream: Optional[TextIO] = None,
    ):
        self.metrics = metrics
        self.stream = stream

    def report(self, result: SupervisionResult) -> int:
        """Report a result and return the exit code for it."""
        verdict = result.verdict
        logger.debug(f"Reporting verdict: {result.to_dict()}")

        if self.metrics is not None:
            self.metrics.record(verdict)

        message = self.diagnostic(result)
        if message is not None:
            click.echo(message, file=self.stream, err=True)

        return verdict.exit_code

    @staticmethod
    def diagnostic(result: SupervisionResult) -> Optional[str]:
        """Diagnostic text for a result, or None when it passed."""
        if result.verdict.passed:
            return None
        if result.verdict is Verdict.PREMATURE_EXIT:
            return PREMATURE_EXIT_MESSAGE
        return FAILURE_MESSAGE.format(error=result.error)
