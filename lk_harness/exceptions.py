"""
Exception hierarchy for the harness.

All exceptions inherit from HarnessError for easy catching.
"""


class HarnessError(Exception):
    """Base exception for the harness.

    All other exceptions in this module inherit from this,
    allowing callers to catch any harness error with a single except.
    """
    pass


class ConfigurationError(HarnessError):
    """Error in configuration.

    Raised when:
    - A deadline duration cannot be parsed
    - Config file not found or not valid YAML
    - Config validation fails (e.g., non-positive deadline)

    Always raised before any supervised run starts.
    """
    pass


class ApplicationError(HarnessError):
    """The wrapped application signalled failure without raising.

    Raised when:
    - The application exits with a non-zero status
    - An external program started by `exec` exits non-zero

    Exceptions raised by the application itself are passed through
    unchanged; this only covers failures that are not exceptions.
    """

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class SupervisionError(HarnessError):
    """The supervisor was used incorrectly.

    Raised when:
    - The unit of work is not callable

    Note: A run that ends in a failure verdict is NOT this error.
    """
    pass
