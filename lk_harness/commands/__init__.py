"""
Built-in application commands.

Other command groups are added with
lk_harness.execution.application.register_commands().
"""

from .credential import turn_credential
from .program import exec_command, run_program

BUILTIN_COMMANDS = (turn_credential, exec_command)

__all__ = [
    "BUILTIN_COMMANDS",
    "turn_credential",
    "exec_command",
    "run_program",
]
