"""
`exec` command: run an external program as the application.

The program runs until it exits or the harness deadline fires. On the
deadline it is terminated (then killed after a grace period) and the
command returns cleanly, since the harness has already decided the run.

The harness exits as soon as the deadline fires, usually before the
worker thread notices the stop event, so programs still running at
interpreter exit are shut down from an atexit hook.
"""

import atexit
import shutil
import subprocess
import threading
from typing import Dict, List
import logging

import click

from ..exceptions import ApplicationError

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1

# Live programs and their grace periods
_live: Dict[subprocess.Popen, float] = {}
_live_lock = threading.Lock()


def run_program(argv: List[str], stop: threading.Event, grace: float = 5.0) -> None:
    """Run argv until it exits or stop is set.

    Args:
        argv: Program and arguments
        stop: Event signalling that the program should be shut down
        grace: Seconds to wait after SIGTERM before SIGKILL

    Raises:
        ApplicationError: If the program is missing or exits non-zero
    """
    if not argv:
        raise ApplicationError("no program given")

    program = shutil.which(argv[0])
    if program is None:
        raise ApplicationError(f"program not found: {argv[0]}", exit_code=127)

    logger.debug(f"Starting {' '.join(argv)}")
    proc = subprocess.Popen([program, *argv[1:]])
    with _live_lock:
        _live[proc] = grace

    try:
        while True:
            try:
                code = proc.wait(timeout=POLL_INTERVAL)
                break
            except subprocess.TimeoutExpired:
                if stop.is_set():
                    _shutdown(proc, grace)
                    return
    finally:
        with _live_lock:
            _live.pop(proc, None)

    logger.debug(f"{argv[0]} exited with status {code}")
    if code != 0:
        raise ApplicationError(f"{argv[0]} exited with status {code}", exit_code=code)


def _shutdown(proc: subprocess.Popen, grace: float) -> None:
    logger.debug(f"Stopping pid {proc.pid}")
    proc.terminate()
    try:
        proc.wait(timeout=grace)
    except subprocess.TimeoutExpired:
        logger.warning(f"pid {proc.pid} ignored SIGTERM, killing")
        proc.kill()
        proc.wait()


@atexit.register
def shutdown_live_programs() -> None:
    """Terminate every program still running, SIGTERM then SIGKILL."""
    with _live_lock:
        live = list(_live.items())
        _live.clear()

    for proc, grace in live:
        if proc.poll() is None:
            _shutdown(proc, grace)


@click.command(
    "exec",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.option(
    "--grace",
    type=float,
    default=5.0,
    show_default=True,
    help="Seconds to wait for the program to exit after the deadline",
)
@click.argument("argv", nargs=-1, type=click.UNPROCESSED, required=True)
@click.pass_obj
def exec_command(obj, grace: float, argv):
    """Run an external program until it exits or the deadline fires."""
    run_program(list(argv), obj.stop, grace=grace)
