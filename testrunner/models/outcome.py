"""Models for raw termination data and its normalized classification."""

import os
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, kw_only=True)
class TerminationInfo:
    """Raw OS-level result of a finished process.

    Built once by the platform-specific constructors below and consumed by
    the exit classifier. Nothing downstream inspects ``os.name``.
    """

    platform: Literal["posix", "windows"]
    exit_code: int | None = None
    signal: int | None = None
    core_dumped: bool = False

    @classmethod
    def from_wait_status(cls, status: int) -> "TerminationInfo":
        """Decode a POSIX ``waitpid`` status word."""
        if os.WIFSIGNALED(status):
            return cls(
                platform="posix",
                signal=os.WTERMSIG(status),
                core_dumped=os.WCOREDUMP(status),
            )
        return cls(platform="posix", exit_code=os.WEXITSTATUS(status))

    @classmethod
    def from_windows_exit_code(cls, code: int) -> "TerminationInfo":
        """Wrap a Windows exit code, normalized to its unsigned 32-bit form."""
        return cls(platform="windows", exit_code=code & 0xFFFFFFFF)


@dataclass(frozen=True, kw_only=True)
class NormalExit:
    """Child exited on its own with an exit code."""

    code: int


@dataclass(frozen=True, kw_only=True)
class Signaled:
    """Child was terminated by a POSIX signal."""

    signal: int
    cored: bool = False


@dataclass(frozen=True, kw_only=True)
class PlatformFault:
    """Child died with a known Windows fault exit code."""

    raw_code: int
    fault_name: str


@dataclass(frozen=True, kw_only=True)
class TimedOut:
    """Child outlived its deadline and was terminated by the supervisor.

    ``termination`` is what the OS reported after the kill. On Windows the
    kill looks like a plain exit and adds nothing to the report.
    """

    timeout: float
    termination: "NormalExit | Signaled | PlatformFault | None" = None


type Termination = NormalExit | Signaled | PlatformFault
type Outcome = NormalExit | Signaled | PlatformFault | TimedOut
