"""
Data models for the harness.

Public exports:
- Verdict enum and the classify() function
- ExecutionOutcome and SupervisionResult
"""

from .verdict import (
    Verdict,
    ExecutionOutcome,
    SupervisionResult,
    classify,
)

__all__ = [
    "Verdict",
    "ExecutionOutcome",
    "SupervisionResult",
    "classify",
]
