"""CLI entry point for the test supervisor."""

import asyncio
import logging
import os
import signal
import sys
from collections.abc import Mapping, Sequence

from testrunner.arguments import PROG, split_arguments
from testrunner.classifier import SIGNAL_EXIT_BASE
from testrunner.config import Settings
from testrunner.errors import HelpRequested, TestRunnerError
from testrunner.lifecycle import report, report_log
from testrunner.supervisor import Supervisor

log = logging.getLogger("testrunner")


def configure_logging(settings: Settings) -> None:
    """Route diagnostics and contract lines to stderr.

    Diagnostics follow the configured level; contract lines are always
    written verbatim.
    """
    diagnostics = logging.StreamHandler(sys.stderr)
    diagnostics.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    log.handlers[:] = [diagnostics]
    log.setLevel(settings.log_level)
    log.propagate = False

    contract = logging.StreamHandler(sys.stderr)
    contract.setFormatter(logging.Formatter("%(message)s"))
    report_log.handlers[:] = [contract]
    report_log.setLevel(logging.INFO)
    report_log.propagate = False


async def run(argv: Sequence[str], environ: Mapping[str, str]) -> int:
    """Parse arguments, run the child once, and return the exit code."""
    settings = Settings.from_environ(environ)
    configure_logging(settings)

    invocation = split_arguments(argv)
    log.debug("Parsed invocation: %s", invocation)

    result = await Supervisor(settings=settings).run(invocation)
    log.debug(
        "Run finished: outcome=%s exit_code=%d elapsed=%.3fs",
        result.outcome,
        result.exit_code,
        result.elapsed,
    )
    return result.exit_code


def main(argv: Sequence[str] | None = None) -> int:
    """Console entry point; returns the exit code instead of exiting."""
    args = sys.argv[1:] if argv is None else argv
    configure_logging(Settings())
    try:
        return asyncio.run(run(args, os.environ))
    except KeyboardInterrupt:
        return SIGNAL_EXIT_BASE + int(signal.SIGINT)
    except HelpRequested as e:
        print(e, end="")
        return e.exit_code
    except TestRunnerError as e:
        report([f"{PROG}: {e}"])
        return e.exit_code


def console_main() -> None:
    """Entry point registered as the ``testrunner`` script."""
    sys.exit(main())
