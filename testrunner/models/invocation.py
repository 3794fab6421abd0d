"""Models for a single supervisor invocation."""

import math
from collections.abc import Sequence
from pathlib import PurePath
from typing import Any

from pydantic import Field, field_validator

from testrunner.models.base import Model


def sanitize_label(label: str) -> str:
    """Replace colons, which separate fields in lifecycle lines."""
    return label.replace(":", "__")


class SupervisorOptions(Model):
    """Options consumed by the supervisor itself, never by the child."""

    verbose: bool = Field(default=False, description="Emit lifecycle markers")
    label: str | None = Field(default=None, description="Display name in logs")
    timeout: float | None = Field(
        default=None, description="Maximum runtime of the child in seconds"
    )
    chdir: str | None = Field(
        default=None, description="Working directory for the child"
    )

    @field_validator("timeout")
    @classmethod
    def _check_timeout(cls, value: float | None) -> float | None:
        if value is not None and (not math.isfinite(value) or value <= 0):
            raise ValueError("must be a positive number of seconds")
        return value


class Invocation(Model):
    """Supervisor options plus the child's argv, fixed once parsed."""

    options: SupervisorOptions = Field(default_factory=SupervisorOptions)
    # Items are checked, not coerced: surrogate-escaped bytes from argv must
    # reach the child unchanged.
    command: tuple[Any, ...] = Field(..., min_length=1)

    @field_validator("command")
    @classmethod
    def _check_command(cls, value: Sequence[Any]) -> tuple[str, ...]:
        if not all(isinstance(arg, str) for arg in value):
            raise ValueError("command arguments must be strings")
        return tuple(value)

    @property
    def label(self) -> str:
        """Effective, sanitized label for lifecycle lines.

        Falls back to the basename of the child's executable when no
        explicit (non-empty) label was given.
        """
        label = self.options.label or PurePath(self.command[0]).name
        return sanitize_label(label or self.command[0])
