"""Tests for exit classification and its rendering."""

import pytest

from testrunner.classifier import (
    classify,
    describe,
    exit_code_for,
    format_timeout,
    summarize,
)
from testrunner.errors import EXIT_TIMEOUT
from testrunner.models.outcome import (
    NormalExit,
    Outcome,
    PlatformFault,
    Signaled,
    TerminationInfo,
    TimedOut,
)
from testrunner.testing.factories import TerminationInfoFactory


class TestClassify:
    """Tests for classify function."""

    def test_clean_exit(self) -> None:
        """Classifies exit code 0 as a normal exit."""
        assert classify(TerminationInfoFactory.build()) == NormalExit(code=0)

    def test_nonzero_exit(self) -> None:
        """Classifies a nonzero POSIX exit code as a normal exit."""
        info = TerminationInfoFactory.build(exit_code=42)

        assert classify(info) == NormalExit(code=42)

    def test_signal(self) -> None:
        """Classifies POSIX signal deaths."""
        info = TerminationInfoFactory.build(exit_code=None, signal=11, core_dumped=True)

        assert classify(info) == Signaled(signal=11, cored=True)

    @pytest.mark.parametrize(
        ("code", "name"),
        [
            (0xC0000005, "STATUS_ACCESS_VIOLATION"),
            (0xC0000094, "STATUS_INTEGER_DIVIDE_BY_ZERO"),
            (0xC00000FD, "STATUS_STACK_OVERFLOW"),
        ],
    )
    def test_windows_fault(self, code: int, name: str) -> None:
        """Classifies known Windows fault codes with their names."""
        info = TerminationInfo.from_windows_exit_code(code)

        assert classify(info) == PlatformFault(raw_code=code, fault_name=name)

    def test_unknown_windows_code_is_normal_exit(self) -> None:
        """Treats unclassified Windows codes as ordinary exits."""
        info = TerminationInfo.from_windows_exit_code(0xDEADBEEF)

        assert classify(info) == NormalExit(code=0xDEADBEEF)

    def test_fault_code_on_posix_is_not_a_fault(self) -> None:
        """Only Windows exit codes map to platform faults."""
        info = TerminationInfoFactory.build(exit_code=0xC0000005)

        assert classify(info) == NormalExit(code=0xC0000005)


@pytest.mark.parametrize(
    ("outcome", "lines"),
    [
        (NormalExit(code=0), []),
        (NormalExit(code=3), []),
        (Signaled(signal=6), ["Process exited due to signal 6"]),
        (
            Signaled(signal=11, cored=True),
            ["Process exited due to signal 11; dumped core"],
        ),
        (
            PlatformFault(raw_code=0xC0000005, fault_name="STATUS_ACCESS_VIOLATION"),
            ["Process exited with exit code 0xC0000005 (STATUS_ACCESS_VIOLATION)"],
        ),
        (
            TimedOut(timeout=2, termination=Signaled(signal=15)),
            ["Timed out after 2 seconds", "Process exited due to signal 15"],
        ),
        (
            TimedOut(timeout=0.5, termination=NormalExit(code=1)),
            ["Timed out after 0.5 seconds"],
        ),
        (TimedOut(timeout=10), ["Timed out after 10 seconds"]),
    ],
)
def test_describe(outcome: Outcome, lines: list[str]) -> None:
    """Renders stderr lines; normal exits stay silent."""
    assert describe(outcome) == lines


@pytest.mark.parametrize(
    ("outcome", "summary"),
    [
        (NormalExit(code=0), "exit code 0"),
        (NormalExit(code=7), "exit code 7"),
        (Signaled(signal=9), "signal 9"),
        (Signaled(signal=11, cored=True), "signal 11, dumped core"),
        (
            PlatformFault(
                raw_code=0xC0000094, fault_name="STATUS_INTEGER_DIVIDE_BY_ZERO"
            ),
            "exit code 0xC0000094 (STATUS_INTEGER_DIVIDE_BY_ZERO)",
        ),
        (
            TimedOut(timeout=3, termination=Signaled(signal=15)),
            "timed out after 3 seconds, signal 15",
        ),
        (
            TimedOut(timeout=3, termination=NormalExit(code=1)),
            "timed out after 3 seconds",
        ),
    ],
)
def test_summarize(outcome: Outcome, summary: str) -> None:
    """Renders the end-marker suffix."""
    assert summarize(outcome) == summary


@pytest.mark.parametrize(
    ("outcome", "code"),
    [
        (NormalExit(code=0), 0),
        (NormalExit(code=5), 5),
        (Signaled(signal=15), 143),
        (Signaled(signal=11, cored=True), 139),
        (PlatformFault(raw_code=0xC0000005, fault_name="X"), 0xC0000005),
        (TimedOut(timeout=1, termination=Signaled(signal=15)), EXIT_TIMEOUT),
    ],
)
def test_exit_code_for(outcome: Outcome, code: int) -> None:
    """Maps outcomes to the supervisor's exit code."""
    assert exit_code_for(outcome) == code


def test_timeout_exit_code_is_distinct() -> None:
    """Uses a timeout code that differs from success and signal codes."""
    assert EXIT_TIMEOUT not in (0, 128 + 15, 128 + 9)


@pytest.mark.parametrize(
    ("timeout", "text"), [(2, "2"), (2.0, "2"), (0.25, "0.25"), (90, "90")]
)
def test_format_timeout(timeout: float, text: str) -> None:
    """Drops trailing zeros from whole-second timeouts."""
    assert format_timeout(timeout) == text
