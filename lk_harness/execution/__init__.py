"""
Execution layer for the harness.

Handles:
- Deadline supervision (racing the application against a timer)
- The `lk` application command table
"""

from .supervisor import DeadlineSupervisor, supervise
from .application import AppContext, build_app, register_commands, run_app

__all__ = [
    # Supervision
    "DeadlineSupervisor",
    "supervise",
    # Application
    "AppContext",
    "build_app",
    "register_commands",
    "run_app",
]
