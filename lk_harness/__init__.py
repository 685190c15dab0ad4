"""
lk-harness - Deadline test harness for the lk realtime client.

This package provides:
- Deadline supervision (race the application against a timer)
- Verdict reporting (exit codes, stderr diagnostics, Prometheus counters)
- TURN REST API credential minting

Quick start:
    from lk_harness import DeadlineSupervisor, VerdictReporter, run_app

    supervisor = DeadlineSupervisor(deadline=30.0)
    result = supervisor.supervise(lambda stop: run_app(["exec", "./bot.sh"], stop))

    exit_code = VerdictReporter().report(result)

CLI usage:
    lk-harness --deadline 30s -- exec ./bot.sh
"""

__version__ = "0.1.0"

# Core exports
from .config import (
    HarnessConfig,
    SupervisorConfig,
    MetricsConfig,
    LoggingConfig,
    parse_duration,
)
from .exceptions import (
    HarnessError,
    ConfigurationError,
    ApplicationError,
    SupervisionError,
)
from .credential import Credential, new_credential

# Model exports
from .models import Verdict, ExecutionOutcome, SupervisionResult, classify

# Execution exports
from .execution import DeadlineSupervisor, supervise, build_app, register_commands, run_app

# Reporting exports
from .reporting import HarnessMetrics, VerdictReporter

__all__ = [
    # Version
    "__version__",
    # Config
    "HarnessConfig",
    "SupervisorConfig",
    "MetricsConfig",
    "LoggingConfig",
    "parse_duration",
    # Exceptions
    "HarnessError",
    "ConfigurationError",
    "ApplicationError",
    "SupervisionError",
    # Credentials
    "Credential",
    "new_credential",
    # Models
    "Verdict",
    "ExecutionOutcome",
    "SupervisionResult",
    "classify",
    # Execution
    "DeadlineSupervisor",
    "supervise",
    "build_app",
    "register_commands",
    "run_app",
    # Reporting
    "HarnessMetrics",
    "VerdictReporter",
]
