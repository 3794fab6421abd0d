"""Spawning, terminating and reaping the child process."""

import logging
import os
import subprocess
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field

from testrunner.errors import SpawnError
from testrunner.models.outcome import TerminationInfo

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class ChildProcess(ABC):
    """Handle to the single child of a supervisor run.

    Waiting for exit and reaping are separate steps so the timeout path can
    signal the child without racing the reap. Termination is sent at most
    once.
    """

    popen: subprocess.Popen[bytes] = field(repr=False)
    terminated: bool = field(default=False, init=False)
    reaped: bool = field(default=False, init=False)

    @property
    def pid(self) -> int:
        return self.popen.pid

    @abstractmethod
    def wait_for_exit(self) -> None:
        """Block until the child has exited, without reaping it."""

    @abstractmethod
    def _send_termination(self, sig: int) -> None:
        """Deliver the platform's termination request."""

    @abstractmethod
    def _collect(self) -> TerminationInfo:
        """Reap the exited child and return its raw termination data."""

    def terminate(self, sig: int) -> bool:
        """Request termination once.

        Returns:
            True if a request was sent by this call, False if one had
            already been sent or the child was already reaped.

        """
        if self.terminated or self.reaped:
            return False
        self.terminated = True
        log.debug("Terminating child pid=%d with signal %d", self.pid, sig)
        self._send_termination(sig)
        return True

    def reap(self) -> TerminationInfo:
        """Reap the child exactly once, blocking until it has exited."""
        if self.reaped:
            raise RuntimeError(f"Child pid={self.pid} was already reaped")
        info = self._collect()
        self.reaped = True
        log.debug("Reaped child pid=%d: %s", self.pid, info)
        return info


POLL_INTERVAL = 0.05


@dataclass(kw_only=True)
class PosixChildProcess(ChildProcess):
    """Child on a POSIX system, reporting signals and core dumps."""

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _status: int | None = field(default=None, init=False, repr=False)

    def wait_for_exit(self) -> None:
        if hasattr(os, "waitid"):
            # WNOWAIT keeps the zombie, so the pid stays valid for a kill.
            try:
                os.waitid(os.P_PID, self.pid, os.WEXITED | os.WNOWAIT)
            except ChildProcessError:
                log.debug("Child pid=%d was reaped while waiting", self.pid)
            return

        # Without waitid, reap under the lock so a kill never hits a reused pid.
        while True:
            with self._lock:
                if self._status is not None:
                    return
                pid, status = os.waitpid(self.pid, os.WNOHANG)
                if pid:
                    self._status = status
                    return
            time.sleep(POLL_INTERVAL)

    def _send_termination(self, sig: int) -> None:
        with self._lock:
            if self._status is not None:
                return
            try:
                os.kill(self.pid, sig)
            except ProcessLookupError:
                log.debug("Child pid=%d already gone", self.pid)

    def _collect(self) -> TerminationInfo:
        self.wait_for_exit()
        with self._lock:
            status = self._status
        if status is None:
            _, status = os.waitpid(self.pid, 0)
        # Keep Popen from trying to reap the pid again.
        self.popen.returncode = os.waitstatus_to_exitcode(status)
        return TerminationInfo.from_wait_status(status)


@dataclass(kw_only=True)
class WindowsChildProcess(ChildProcess):
    """Child on Windows; a killed process just reports an exit code."""

    def wait_for_exit(self) -> None:
        self.popen.wait()

    def _send_termination(self, sig: int) -> None:
        self.popen.kill()

    def _collect(self) -> TerminationInfo:
        return TerminationInfo.from_windows_exit_code(self.popen.wait())


def spawn(command: Sequence[str]) -> ChildProcess:
    """Start the child with inherited standard streams and untouched argv.

    Raises:
        SpawnError: If the executable cannot be found or run

    """
    try:
        popen = subprocess.Popen(list(command))
    except OSError as e:
        raise SpawnError(command[0], e) from e

    log.debug("Spawned child pid=%d: %s", popen.pid, command)
    if os.name == "nt":
        return WindowsChildProcess(popen=popen)
    return PosixChildProcess(popen=popen)
