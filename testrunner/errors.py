"""Errors that stop the supervisor before or while launching the child."""

EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_CONFIG_ERROR = 3
EXIT_TIMEOUT = 124
EXIT_CANNOT_EXECUTE = 126
EXIT_NOT_FOUND = 127


class TestRunnerError(Exception):
    """Base class for fatal supervisor errors reported on stderr."""

    __test__ = False

    exit_code = EXIT_FAILURE


class ArgumentError(TestRunnerError):
    """Raised when the command line is malformed or incomplete."""

    exit_code = EXIT_USAGE


class HelpRequested(TestRunnerError):
    """Raised when ``--help`` appears before the command."""

    exit_code = EXIT_USAGE


class ConfigurationError(TestRunnerError):
    """Raised when the environment or a directory option is unusable."""

    exit_code = EXIT_CONFIG_ERROR


class SpawnError(TestRunnerError):
    """Raised when the child process cannot be started."""

    def __init__(self, executable: str, error: OSError) -> None:
        super().__init__(f"{executable}: {error.strerror or error}")
        self.executable = executable
        if isinstance(error, FileNotFoundError):
            self.exit_code = EXIT_NOT_FOUND
        elif isinstance(error, PermissionError):
            self.exit_code = EXIT_CANNOT_EXECUTE
        else:
            self.exit_code = EXIT_FAILURE
