"""Begin/end markers and other contract lines written to stderr."""

import logging
import shlex
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from testrunner.classifier import summarize
from testrunner.models.outcome import Outcome

PREFIX = "testrunner"
CHILD_KIND = "process"

report_log = logging.getLogger("testrunner.report")


def report(lines: Iterable[str]) -> None:
    """Write supervisor-authored lines to stderr, one record per line."""
    for line in lines:
        report_log.info("%s", line)


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with second precision."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _render_argument(arg: str) -> str:
    """Shell-quote an argument, escaping line breaks to keep one line."""
    if "\n" in arg or "\r" in arg:
        return repr(arg)
    return shlex.quote(arg)


@dataclass(frozen=True, kw_only=True)
class LifecycleLogger:
    """Emits begin/end markers for one labelled child when enabled."""

    label: str
    enabled: bool

    def begin_line(self, command: Sequence[str], moment: datetime) -> str:
        detail = " ".join(_render_argument(arg) for arg in command)
        return (
            f"{PREFIX}: begin {self.label} @{format_timestamp(moment)}: "
            f"[{CHILD_KIND}] {detail}"
        )

    def end_line(self, outcome: Outcome) -> str:
        return f"{PREFIX}: end {self.label}: {summarize(outcome)}"

    def begin(self, command: Sequence[str], moment: datetime | None = None) -> None:
        if self.enabled:
            report([self.begin_line(command, moment or datetime.now(timezone.utc))])

    def end(self, outcome: Outcome) -> None:
        if self.enabled:
            report([self.end_line(outcome)])
