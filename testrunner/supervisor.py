"""Supervisor core: launch one child, race its timeout, report the outcome."""

import asyncio
import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from testrunner.classifier import classify, describe, exit_code_for
from testrunner.config import Settings
from testrunner.lifecycle import LifecycleLogger, report
from testrunner.models.invocation import Invocation
from testrunner.models.outcome import Outcome, TimedOut
from testrunner.monitor import TimeoutMonitor
from testrunner.process import ChildProcess, spawn
from testrunner.workdir import apply_chdir

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class RunContext:
    """Per-run state threaded from launch through wait to report."""

    invocation: Invocation
    lifecycle: LifecycleLogger
    monitor: TimeoutMonitor
    kill_signal: int
    started_at: datetime | None = None
    elapsed: float | None = None

    @classmethod
    def create(cls, invocation: Invocation, settings: Settings) -> "RunContext":
        options = invocation.options
        return cls(
            invocation=invocation,
            lifecycle=LifecycleLogger(label=invocation.label, enabled=options.verbose),
            monitor=TimeoutMonitor(timeout=options.timeout),
            kill_signal=settings.kill_signal,
        )


@dataclass(frozen=True, kw_only=True)
class RunResult:
    """Classified outcome of a run and the exit code to propagate."""

    outcome: Outcome
    exit_code: int
    elapsed: float


@dataclass(kw_only=True)
class Supervisor:
    """Runs exactly one child per invocation.

    The child handle is owned here; the timeout monitor only reports that
    the deadline passed and the supervisor decides to terminate.
    """

    settings: Settings = field(default_factory=Settings)
    spawner: Callable[[Sequence[str]], ChildProcess] = spawn

    async def run(self, invocation: Invocation) -> RunResult:
        """Run the invocation's command and classify how it ended.

        Raises:
            ConfigurationError: If the working directory cannot be applied
            SpawnError: If the child cannot be started

        """
        context = RunContext.create(invocation, self.settings)
        apply_chdir(invocation.options.chdir)

        context.started_at = datetime.now(timezone.utc)
        context.lifecycle.begin(invocation.command, context.started_at)
        _flush_standard_streams()

        child = self.spawner(invocation.command)
        context.monitor.start()
        try:
            outcome = await self._wait(child, context)
        finally:
            if not child.reaped:
                # Interrupted mid-run; leave no live or unreaped child behind.
                child.terminate(context.kill_signal)
                child.reap()

        context.lifecycle.end(outcome)
        return RunResult(
            outcome=outcome,
            exit_code=exit_code_for(outcome),
            elapsed=context.elapsed or 0.0,
        )

    async def _wait(self, child: ChildProcess, context: RunContext) -> Outcome:
        monitor = context.monitor
        completion = asyncio.ensure_future(asyncio.to_thread(child.wait_for_exit))

        if await monitor.race(completion):
            child.terminate(context.kill_signal)
            await completion
            context.elapsed = monitor.elapsed()
            termination = classify(child.reap())
            outcome: Outcome = TimedOut(
                timeout=monitor.timeout or 0.0, termination=termination
            )
            log.info(
                "Child pid=%d timed out after %.3fs", child.pid, context.elapsed
            )
            report(describe(outcome))
            return outcome

        await completion
        context.elapsed = monitor.elapsed()
        outcome = classify(child.reap())
        report(monitor.warning_lines(context.elapsed))
        report(describe(outcome))
        return outcome


def _flush_standard_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        if stream is not None:
            stream.flush()
