"""
Command line interface for the harness.

Usage:
    lk-harness --deadline 30s -- room join --identity bot my-room
    lk-harness --deadline 1m --metrics -- exec ./load-test.sh
    python -m lk_harness -- turn-credential --format json

Everything after the harness options is passed to the `lk` application.
"""

from pathlib import Path
from typing import Optional, Tuple
import logging

import click
from click.core import ParameterSource
from dotenv import load_dotenv

from .. import __version__
from ..config import HarnessConfig, parse_duration
from ..exceptions import ConfigurationError
from ..execution.application import run_app
from ..execution.supervisor import DeadlineSupervisor
from ..reporting.metrics import HarnessMetrics
from ..reporting.reporter import VerdictReporter

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool, quiet: bool):
    """Configure logging based on verbosity.

    The default level is WARNING so that a successful run prints nothing.

    Args:
        verbose: Enable debug logging
        quiet: Suppress all but errors
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def _deadline_option(ctx, param, value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return parse_duration(value)
    except ConfigurationError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


def load_config(
    ctx: click.Context,
    config_path: Optional[Path],
    deadline: Optional[float],
    metrics: bool,
    metrics_port: Optional[int],
    metrics_addr: Optional[str],
    verbose: bool,
    quiet: bool,
) -> HarnessConfig:
    """Merge defaults, config file, environment and command line options.

    Raises:
        ConfigurationError: If any source holds an invalid value
    """
    if config_path is not None:
        config = HarnessConfig.from_yaml(config_path)
    else:
        config = HarnessConfig.default()

    config.apply_env()

    # Command line wins
    if deadline is not None:
        config.supervisor.deadline = deadline
    if ctx.get_parameter_source("metrics") == ParameterSource.COMMANDLINE:
        config.metrics.enabled = metrics
    if metrics_port is not None:
        config.metrics.port = metrics_port
        config.metrics.validate()
    if metrics_addr is not None:
        config.metrics.addr = metrics_addr
    if verbose:
        config.logging.verbose = True
    if quiet:
        config.logging.quiet = True
    config.logging.validate()

    return config


@click.command(
    "lk-harness",
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": ["-h", "--help"],
    },
)
@click.version_option(__version__, prog_name="lk-harness")
@click.option(
    "--deadline", "-d",
    callback=_deadline_option,
    help="How long the application must keep running, e.g. 30s or 1m30s (default: unbounded)",
)
@click.option(
    "--metrics/--no-metrics",
    default=False,
    help="Expose success/failure counters for Prometheus",
)
@click.option(
    "--metrics-port",
    type=int,
    default=None,
    help="Port for the metrics endpoint (default: 9090)",
)
@click.option(
    "--metrics-addr",
    default=None,
    help="Bind address for the metrics endpoint (default: all interfaces)",
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config YAML",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Quiet output (errors only)")
@click.argument("app_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def harness(
    ctx: click.Context,
    deadline: Optional[float],
    metrics: bool,
    metrics_port: Optional[int],
    metrics_addr: Optional[str],
    config_path: Optional[Path],
    verbose: bool,
    quiet: bool,
    app_args: Tuple[str, ...],
):
    """Run the lk application against a deadline.

    Exits 0 when the application is still running once the deadline
    passes, and 1 when it fails or returns before the deadline. Without
    a deadline the application's own result decides.

    Example:
        lk-harness --deadline 30s -- exec ./bot.sh
    """
    try:
        config = load_config(
            ctx, config_path, deadline, metrics, metrics_port, metrics_addr, verbose, quiet
        )
    except ConfigurationError as e:
        raise click.UsageError(str(e), ctx=ctx)

    setup_logging(config.logging.verbose, config.logging.quiet)
    logger.debug(f"Configuration: {config.to_dict()}")

    harness_metrics = None
    if config.metrics.enabled:
        harness_metrics = HarnessMetrics()
        harness_metrics.serve(config.metrics.port, config.metrics.addr)

    supervisor = DeadlineSupervisor(config.supervisor.deadline)
    result = supervisor.supervise(lambda stop: run_app(app_args, stop))

    reporter = VerdictReporter(metrics=harness_metrics)
    ctx.exit(reporter.report(result))


def main():
    """Main entry point."""
    load_dotenv()
    harness(prog_name="lk-harness")


if __name__ == "__main__":
    main()
