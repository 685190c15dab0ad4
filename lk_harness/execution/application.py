"""
The `lk` application and its command table.

The harness treats the application as a black box: build_app() assembles
the click group from the registered command groups, and run_app() invokes
it once with the supervisor's stop event attached to the click context.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import logging
import threading

import click

from ..exceptions import ApplicationError

logger = logging.getLogger(__name__)

APP_NAME = "lk"

_command_table: List[click.Command] = []


@dataclass
class AppContext:
    """Shared state handed to every command through click's ctx.obj.

    Attributes:
        stop: Set when the harness deadline fires. Long-running
            commands should watch it and wind down.
        verbose: Whether debug logging was requested
    """

    stop: threading.Event = field(default_factory=threading.Event)
    verbose: bool = False


def register_commands(*commands: click.Command) -> None:
    """Add commands (or command groups) to the application."""
    for command in commands:
        if any(existing.name == command.name for existing in _command_table):
            raise ValueError(f"command already registered: {command.name}")
        _command_table.append(command)


def registered_commands() -> List[click.Command]:
    return list(_command_table)


def build_app(commands: Optional[Sequence[click.Command]] = None) -> click.Group:
    """Assemble the application from the command table.

    Args:
        commands: Commands to install. Defaults to the built-in commands
            plus everything passed to register_commands().

    Returns:
        The `lk` click group
    """
    if commands is None:
        from ..commands import BUILTIN_COMMANDS

        commands = list(BUILTIN_COMMANDS) + registered_commands()

    @click.group(name=APP_NAME)
    @click.option("--verbose", is_flag=True, help="Enable debug logging")
    @click.pass_context
    def app(ctx: click.Context, verbose: bool):
        """CLI client exercised by the harness."""
        obj = ctx.ensure_object(AppContext)
        obj.verbose = verbose
        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)

    for command in commands:
        app.add_command(command)

    return app


def run_app(
    args: Sequence[str],
    stop: Optional[threading.Event] = None,
    app: Optional[click.Group] = None,
) -> None:
    """Run the application once, as the harness's unit of work.

    Args:
        args: Command line for the application (without the program name)
        stop: Event the harness sets when its deadline fires
        app: Application to run (defaults to build_app())

    Raises:
        ApplicationError: If the application exits with a non-zero status
        click.ClickException: On usage errors inside the application
    """
    if app is None:
        app = build_app()
    obj = AppContext(stop=stop if stop is not None else threading.Event())

    logger.debug(f"Running {APP_NAME} {' '.join(args)}")
    rv = app.main(
        args=list(args),
        prog_name=APP_NAME,
        standalone_mode=False,
        obj=obj,
    )

    # Non-standalone click returns the exit code of ctx.exit()
    if isinstance(rv, int) and not isinstance(rv, bool) and rv != 0:
        raise ApplicationError(f"{APP_NAME} exited with status {rv}", exit_code=rv)
