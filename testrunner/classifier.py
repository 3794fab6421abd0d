"""Classify how a child process terminated."""

from collections.abc import Mapping

from testrunner.errors import EXIT_TIMEOUT
from testrunner.models.outcome import (
    NormalExit,
    Outcome,
    PlatformFault,
    Signaled,
    Termination,
    TerminationInfo,
    TimedOut,
)

SIGNAL_EXIT_BASE = 128

WINDOWS_FAULTS: Mapping[int, str] = {
    0x80000003: "STATUS_BREAKPOINT",
    0xC0000005: "STATUS_ACCESS_VIOLATION",
    0xC0000008: "STATUS_INVALID_HANDLE",
    0xC000001D: "STATUS_ILLEGAL_INSTRUCTION",
    0xC000008C: "STATUS_ARRAY_BOUNDS_EXCEEDED",
    0xC000008E: "STATUS_FLOAT_DIVIDE_BY_ZERO",
    0xC0000091: "STATUS_FLOAT_OVERFLOW",
    0xC0000094: "STATUS_INTEGER_DIVIDE_BY_ZERO",
    0xC0000095: "STATUS_INTEGER_OVERFLOW",
    0xC0000096: "STATUS_PRIVILEGED_INSTRUCTION",
    0xC00000FD: "STATUS_STACK_OVERFLOW",
    0xC0000135: "STATUS_DLL_NOT_FOUND",
    0xC000013A: "STATUS_CONTROL_C_EXIT",
    0xC0000374: "STATUS_HEAP_CORRUPTION",
    0xC0000409: "STATUS_STACK_BUFFER_OVERRUN",
}


def classify(info: TerminationInfo) -> Termination:
    """Map raw termination data to a normalized outcome.

    Unknown nonzero Windows codes are ordinary exits, not faults.
    """
    if info.signal is not None:
        return Signaled(signal=info.signal, cored=info.core_dumped)

    code = info.exit_code if info.exit_code is not None else 0
    if info.platform == "windows" and code in WINDOWS_FAULTS:
        return PlatformFault(raw_code=code, fault_name=WINDOWS_FAULTS[code])
    return NormalExit(code=code)


def format_timeout(timeout: float) -> str:
    """Render a timeout the way users typed it (``2``, ``0.5``)."""
    return f"{timeout:g}"


def describe(outcome: Outcome) -> list[str]:
    """Return the stderr lines reporting an outcome.

    Normal exits are silent whatever their code. For a timeout, the
    timeout line comes first, followed by whatever the kill produced.
    """
    match outcome:
        case NormalExit():
            return []
        case Signaled(signal=sig, cored=cored):
            message = f"Process exited due to signal {sig}"
            return [f"{message}; dumped core" if cored else message]
        case PlatformFault(raw_code=raw_code, fault_name=fault_name):
            return [f"Process exited with exit code 0x{raw_code:08X} ({fault_name})"]
        case TimedOut(timeout=timeout, termination=termination):
            lines = [f"Timed out after {format_timeout(timeout)} seconds"]
            if termination is not None:
                lines.extend(describe(termination))
            return lines


def summarize(outcome: Outcome) -> str:
    """Return the end-marker suffix for an outcome."""
    match outcome:
        case NormalExit(code=code):
            return f"exit code {code}"
        case Signaled(signal=sig, cored=cored):
            return f"signal {sig}, dumped core" if cored else f"signal {sig}"
        case PlatformFault(raw_code=raw_code, fault_name=fault_name):
            return f"exit code 0x{raw_code:08X} ({fault_name})"
        case TimedOut(timeout=timeout, termination=termination):
            summary = f"timed out after {format_timeout(timeout)} seconds"
            if isinstance(termination, Signaled | PlatformFault):
                summary = f"{summary}, {summarize(termination)}"
            return summary


def exit_code_for(outcome: Outcome) -> int:
    """Return the supervisor's own exit code for an outcome."""
    match outcome:
        case NormalExit(code=code):
            return code
        case Signaled(signal=sig):
            return SIGNAL_EXIT_BASE + sig
        case PlatformFault(raw_code=raw_code):
            return raw_code
        case TimedOut():
            return EXIT_TIMEOUT
