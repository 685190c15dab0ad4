"""
Reporting layer for the harness.

Handles:
- Verdict to exit code mapping and diagnostics
- Prometheus success/failure counters
"""

from .metrics import HarnessMetrics
from .reporter import VerdictReporter

__all__ = [
    "HarnessMetrics",
    "VerdictReporter",
]
