"""Split supervisor options from the child's command line."""

import argparse
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from testrunner.errors import ArgumentError, HelpRequested
from testrunner.models.invocation import Invocation, SupervisorOptions

PROG = "testrunner"
SEPARATOR = "--"

# Options that consume the following token as their value.
_VALUE_OPTIONS = {
    "--label": "label",
    "--timeout": "timeout",
    "--chdir": "chdir",
    "-C": "chdir",
}


def build_parser() -> argparse.ArgumentParser:
    """Describe the options for usage output.

    Parsing itself is done by :func:`split_arguments`, since argparse would
    interpret option-like tokens that belong to the child.
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        usage=f"{PROG} [options] [--] <command> [args...]",
        description="Run a test command with a timeout and report how it ended.",
        add_help=False,
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log begin/end markers around the command",
    )
    parser.add_argument(
        "--label",
        metavar="TEXT",
        help="Name used in log lines (default: basename of the command)",
    )
    parser.add_argument(
        "--timeout",
        metavar="SECONDS",
        help="Kill the command if it runs longer than this",
    )
    parser.add_argument(
        "-C",
        "--chdir",
        metavar="PATH",
        help="Change to this directory before running the command",
    )
    parser.add_argument(
        "--help", action="store_true", help="Show this message and exit"
    )
    parser.add_argument(
        "command", nargs="?", help="Command to run; everything after it is passed through"
    )
    return parser


def format_usage() -> str:
    """Return the full help text printed for ``--help``."""
    return build_parser().format_help()


def split_arguments(argv: Sequence[str]) -> Invocation:
    """Separate supervisor options from the child command.

    Options are recognized only up to the first bare ``--`` or the first
    token that is not an option; everything from there on is the command
    and is kept exactly as given.

    Args:
        argv: Arguments following the program name

    Returns:
        The parsed invocation

    Raises:
        HelpRequested: If ``--help`` occurs before the command
        ArgumentError: If an option is unknown, lacks a value, or no
            command remains

    """
    options: dict[str, Any] = {}
    index = 0

    while index < len(argv):
        token = argv[index]

        if token == SEPARATOR:
            index += 1
            break
        if token == "--help":
            raise HelpRequested(format_usage())
        if token == "--verbose":
            options["verbose"] = True
            index += 1
            continue
        if token.startswith("--") and "=" in token:
            name, value = token.split("=", 1)
            if name not in _VALUE_OPTIONS:
                raise ArgumentError(f"unknown option: {name}")
            options[_VALUE_OPTIONS[name]] = value
            index += 1
            continue
        if token in _VALUE_OPTIONS:
            if index + 1 >= len(argv):
                raise ArgumentError(f"option {token} requires a value")
            options[_VALUE_OPTIONS[token]] = argv[index + 1]
            index += 2
            continue
        if token.startswith("-") and token != "-":
            raise ArgumentError(f"unknown option: {token}")
        break

    command = list(argv[index:])
    if not command:
        raise ArgumentError("not enough arguments")

    try:
        return Invocation(options=SupervisorOptions(**options), command=command)
    except ValidationError as e:
        raise ArgumentError(_describe_validation_error(e)) from None


def _describe_validation_error(error: ValidationError) -> str:
    details = error.errors()[0]
    option = str(details["loc"][-1])
    value = details.get("input")
    return f"invalid value for --{option}: {value!r} ({details['msg']})"
