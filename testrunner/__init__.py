"""Process supervisor that runs one test command under a timeout."""

from testrunner.cli import main
from testrunner.supervisor import RunResult, Supervisor

__all__ = ["RunResult", "Supervisor", "main"]
