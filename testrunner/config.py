"""Environment-driven settings for the supervisor."""

import logging
import signal
from collections.abc import Mapping

from pydantic import BaseModel, ValidationError, field_validator

from testrunner.errors import ConfigurationError

ENV_PREFIX = "TESTRUNNER_"


class Settings(BaseModel):
    """Settings read from ``TESTRUNNER_*`` environment variables."""

    log_level: str = "WARNING"
    # Only used on POSIX; Windows always terminates the process outright.
    kill_signal: int = int(getattr(signal, "SIGTERM", 15))

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @field_validator("kill_signal", mode="before")
    @classmethod
    def _parse_signal(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip().isdigit():
            name = value.strip().upper()
            if not name.startswith("SIG"):
                name = f"SIG{name}"
            try:
                return int(signal.Signals[name])
            except KeyError:
                raise ValueError(f"unknown signal {value!r}") from None
        return value

    @field_validator("kill_signal")
    @classmethod
    def _check_signal(cls, value: int) -> int:
        # Signals has no member 0, so the no-op "signal" 0 is rejected too.
        try:
            return int(signal.Signals(value))
        except ValueError:
            raise ValueError(f"unknown signal {value}") from None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "Settings":
        """Load settings, raising ConfigurationError on invalid values."""
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        try:
            return cls(**values)
        except ValidationError as e:
            errors = "; ".join(
                f"{ENV_PREFIX}{str(err['loc'][0]).upper()}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(errors) from None
