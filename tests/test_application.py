"""Tests for the lk application command table and built-in commands."""

import json
import sys
import threading
import time

import click
import pytest

from lk_harness import ApplicationError, DeadlineSupervisor, Verdict
from lk_harness.execution import application
from lk_harness.execution.application import (
    AppContext,
    build_app,
    register_commands,
    run_app,
)
from lk_harness.commands import program, run_program


@pytest.fixture
def empty_table(monkeypatch):
    """Isolate the global command table."""
    table = []
    monkeypatch.setattr(application, "_command_table", table)
    return table


@click.command("exit-with")
@click.argument("code", type=int)
@click.pass_context
def exit_with(ctx, code):
    """Exit with the given status."""
    ctx.exit(code)


@click.command("whoami")
@click.pass_obj
def whoami(obj):
    """Echo whether the stop event is set."""
    click.echo(f"stopped={obj.stop.is_set()}")


class TestCommandTable:
    """Test application assembly."""

    def test_builtin_commands_installed(self, empty_table):
        app = build_app()
        assert set(app.commands) == {"turn-credential", "exec"}

    def test_registered_commands_installed(self, empty_table):
        register_commands(whoami)
        assert "whoami" in build_app().commands

    def test_duplicate_registration_rejected(self, empty_table):
        register_commands(whoami)
        with pytest.raises(ValueError):
            register_commands(whoami)

    def test_explicit_command_list(self):
        app = build_app([exit_with])
        assert list(app.commands) == ["exit-with"]


class TestRunApp:
    """Test running the application once."""

    def test_runs_command(self, capsys):
        run_app(["whoami"], app=build_app([whoami]))
        assert capsys.readouterr().out == "stopped=False\n"

    def test_stop_event_reaches_command(self, capsys):
        stop = threading.Event()
        stop.set()
        run_app(["whoami"], stop, app=build_app([whoami]))
        assert "stopped=True" in capsys.readouterr().out

    def test_nonzero_exit_raises(self):
        with pytest.raises(ApplicationError) as exc_info:
            run_app(["exit-with", "4"], app=build_app([exit_with]))
        assert exc_info.value.exit_code == 4
        assert "status 4" in str(exc_info.value)

    def test_zero_exit_is_clean(self):
        run_app(["exit-with", "0"], app=build_app([exit_with]))

    def test_help_is_clean(self, capsys):
        run_app(["--help"], app=build_app([whoami]))
        assert "whoami" in capsys.readouterr().out

    def test_unknown_command_raises_usage_error(self):
        with pytest.raises(click.UsageError):
            run_app(["no-such-command"], app=build_app([whoami]))

    def test_verbose_flag(self, capsys):
        run_app(["--verbose", "whoami"], app=build_app([whoami]))
        assert "stopped=False" in capsys.readouterr().out

    def test_app_context_defaults(self):
        ctx = AppContext()
        assert not ctx.stop.is_set()
        assert ctx.verbose is False


class TestTurnCredentialCommand:
    """Test the turn-credential command."""

    def test_text_output(self, capsys):
        run_app(["turn-credential", "--secret", "s3cret"])
        out = capsys.readouterr().out
        assert out.startswith("username: ")
        assert ":lk\n" in out
        assert "password: " in out

    def test_json_output(self, capsys, monkeypatch):
        monkeypatch.setenv("LK_TURN_SECRET", "from-env")
        run_app(["turn-credential", "--format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert data["username"].endswith(":lk")
        assert len(data["password"]) == 28


class TestExecCommand:
    """Test running external programs."""

    def test_clean_exit(self):
        run_program([sys.executable, "-c", "pass"], threading.Event())

    def test_nonzero_exit_raises(self):
        with pytest.raises(ApplicationError) as exc_info:
            run_program([sys.executable, "-c", "import sys; sys.exit(3)"], threading.Event())
        assert exc_info.value.exit_code == 3

    def test_missing_program(self):
        with pytest.raises(ApplicationError) as exc_info:
            run_program(["definitely-not-a-real-program-xyz"], threading.Event())
        assert exc_info.value.exit_code == 127

    def test_empty_argv(self):
        with pytest.raises(ApplicationError):
            run_program([], threading.Event())

    def test_stop_terminates_program(self):
        """Program is shut down once the stop event is set."""
        stop = threading.Event()
        threading.Timer(0.2, stop.set).start()

        start = time.monotonic()
        run_program([sys.executable, "-c", "import time; time.sleep(30)"], stop, grace=2.0)
        assert time.monotonic() - start < 10

    def test_live_program_stopped_at_exit(self):
        """Programs the worker never got to stop are shut down on exit."""
        stop = threading.Event()
        errors = []

        def run():
            try:
                run_program([sys.executable, "-c", "import time; time.sleep(30)"], stop, grace=1.0)
            except ApplicationError as e:
                errors.append(e)

        worker = threading.Thread(target=run, daemon=True)
        worker.start()

        for _ in range(100):
            with program._live_lock:
                live = list(program._live)
            if live:
                break
            time.sleep(0.05)
        assert len(live) == 1

        program.shutdown_live_programs()

        assert live[0].poll() is not None
        worker.join(5)
        assert not worker.is_alive()
        assert program._live == {}

    def test_finished_program_not_tracked(self):
        run_program([sys.executable, "-c", "pass"], threading.Event())
        assert program._live == {}

    def test_through_run_app(self):
        with pytest.raises(ApplicationError):
            run_app(["exec", "--", sys.executable, "-c", "import sys; sys.exit(2)"])


class TestSupervisedApplication:
    """Test the application as the supervised unit of work."""

    def test_long_running_program_succeeds(self):
        argv = ["exec", "--grace", "1", "--", sys.executable, "-c", "import time; time.sleep(30)"]
        result = DeadlineSupervisor(deadline=0.5).supervise(lambda stop: run_app(argv, stop))
        assert result.verdict is Verdict.SUCCESS

    def test_quick_program_is_premature(self):
        argv = ["exec", "--", sys.executable, "-c", "pass"]
        result = DeadlineSupervisor(deadline=10).supervise(lambda stop: run_app(argv, stop))
        assert result.verdict is Verdict.PREMATURE_EXIT

    def test_failing_program_is_failure(self):
        argv = ["exec", "--", sys.executable, "-c", "import sys; sys.exit(5)"]
        result = DeadlineSupervisor(deadline=10).supervise(lambda stop: run_app(argv, stop))
        assert result.verdict is Verdict.FAILURE
        assert result.error.exit_code == 5
