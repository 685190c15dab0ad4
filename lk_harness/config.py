"""
Configuration management for the harness.

Supports:
- Programmatic configuration via dataclasses
- YAML file loading
- Environment variable overrides (including .env files)
- Go-style duration strings for the deadline ("30s", "1m30s", "500ms")
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Any, Dict, Union
import math
import os
import re
import threading

import yaml

from .exceptions import ConfigurationError

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_FULL = re.compile(r"[+-]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:ns|us|µs|ms|s|m|h))+|[+-]?0")


def parse_duration(value: str) -> float:
    """Parse a duration string into seconds.

    Accepts the same notation as Go's time.ParseDuration: one or more
    decimal numbers, each with a unit suffix (ns, us, ms, s, m, h),
    optionally preceded by a sign. A bare "0" is also accepted by the
    grammar. Only positive durations up to threading.TIMEOUT_MAX are
    valid deadlines, so "0", "-5s" and anything longer than that limit
    are rejected rather than returned.

    Args:
        value: Duration string such as "30s" or "1m30s"

    Returns:
        Duration in seconds

    Raises:
        ConfigurationError: If the string is malformed, not positive or
            too long to wait for
    """
    text = value.strip() if isinstance(value, str) else ""
    if not text or not _DURATION_FULL.fullmatch(text):
        raise ConfigurationError(f"invalid duration: {value!r}")

    seconds = sum(
        float(number) * _DURATION_UNITS[unit]
        for number, unit in _DURATION_PART.findall(text)
    )
    if text.startswith("-"):
        seconds = -seconds
    _check_deadline(seconds, value)
    return seconds


def _check_deadline(seconds: float, value: Any) -> None:
    if not math.isfinite(seconds):
        raise ConfigurationError(f"invalid duration: {value!r}")
    if seconds <= 0:
        raise ConfigurationError(f"deadline must be positive: {value!r}")
    if seconds > threading.TIMEOUT_MAX:
        raise ConfigurationError(f"deadline too long: {value!r}")


def _coerce_deadline(value: Union[None, int, float, str]) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigurationError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        _check_deadline(float(value), value)
        return float(value)
    return parse_duration(value)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SupervisorConfig:
    """Configuration for the deadline supervisor.

    The deadline may be given as seconds or as a duration string.
    None means the run is unbounded.
    """

    deadline: Optional[Union[float, str]] = None

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Normalise the deadline to seconds and check it."""
        self.deadline = _coerce_deadline(self.deadline)

    @property
    def bounded(self) -> bool:
        return self.deadline is not None


@dataclass
class MetricsConfig:
    """Configuration for the success/failure counters endpoint."""

    enabled: bool = False
    port: int = 9090
    addr: str = ""  # empty = all interfaces

    def __post_init__(self):
        self.validate()

    def validate(self):
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"metrics port out of range: {self.port}")


@dataclass
class LoggingConfig:
    """Configuration for log verbosity."""

    verbose: bool = False
    quiet: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.verbose and self.quiet:
            raise ConfigurationError("verbose and quiet are mutually exclusive")


@dataclass
class HarnessConfig:
    """Master configuration for the harness.

    Example usage:
        # Defaults (unbounded run, no metrics)
        config = HarnessConfig.default()

        # From file
        config = HarnessConfig.from_yaml(Path("harness.yaml"))

        # Programmatic
        config = HarnessConfig(
            supervisor=SupervisorConfig(deadline="30s"),
            metrics=MetricsConfig(enabled=True),
        )
    """

    supervisor: SupervisorConfig = field(default_factory=SupervisorConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "HarnessConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            HarnessConfig instance

        Raises:
            ConfigurationError: If file not found or invalid
        """
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "HarnessConfig":
        """Create HarnessConfig from dictionary."""
        try:
            return cls(
                supervisor=SupervisorConfig(**(data.get("supervisor") or {})),
                metrics=MetricsConfig(**(data.get("metrics") or {})),
                logging=LoggingConfig(**(data.get("logging") or {})),
            )
        except TypeError as e:
            raise ConfigurationError(f"Unknown config key: {e}")

    @classmethod
    def default(cls) -> "HarnessConfig":
        """Create configuration with all defaults."""
        return cls()

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> "HarnessConfig":
        """Apply environment variable overrides in place.

        Supported environment variables:
        - LK_HARNESS_DEADLINE: Deadline duration string (e.g. "30s")
        - LK_HARNESS_METRICS: Enable the metrics endpoint (true/false)
        - LK_HARNESS_METRICS_PORT: Metrics endpoint port
        - LK_HARNESS_METRICS_ADDR: Metrics endpoint bind address
        """
        environ = os.environ if environ is None else environ

        if deadline := environ.get("LK_HARNESS_DEADLINE"):
            self.supervisor.deadline = parse_duration(deadline)

        if enabled := environ.get("LK_HARNESS_METRICS"):
            self.metrics.enabled = _parse_bool(enabled)
        if port := environ.get("LK_HARNESS_METRICS_PORT"):
            try:
                self.metrics.port = int(port)
            except ValueError:
                raise ConfigurationError(f"invalid metrics port: {port!r}")
            self.metrics.validate()
        if addr := environ.get("LK_HARNESS_METRICS_ADDR"):
            self.metrics.addr = addr

        return self

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "HarnessConfig":
        """Create configuration with environment variable overrides."""
        return cls.default().apply_env(environ)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary (for serialization)."""
        return {
            "supervisor": {
                "deadline": self.supervisor.deadline,
            },
            "metrics": {
                "enabled": self.metrics.enabled,
                "port": self.metrics.port,
                "addr": self.metrics.addr,
            },
            "logging": {
                "verbose": self.logging.verbose,
                "quiet": self.logging.quiet,
            },
        }

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False)
