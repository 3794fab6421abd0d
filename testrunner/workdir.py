"""Change the working directory the child will inherit."""

import logging
import os
from pathlib import Path

from testrunner.errors import ConfigurationError

log = logging.getLogger(__name__)


def apply_chdir(path: str | None) -> Path | None:
    """Change the supervisor's working directory before launch.

    Args:
        path: Target directory, or None to leave the directory alone

    Returns:
        The resolved directory changed into, or None if nothing was done

    Raises:
        ConfigurationError: If the path is missing or not a directory

    """
    if path is None:
        return None

    target = Path(path)
    if not target.exists():
        raise ConfigurationError(f"--chdir: {path}: no such directory")
    if not target.is_dir():
        raise ConfigurationError(f"--chdir: {path}: not a directory")

    try:
        os.chdir(target)
    except OSError as e:
        raise ConfigurationError(f"--chdir: {path}: {e.strerror or e}") from e

    resolved = Path.cwd()
    log.debug("Changed working directory to %s", resolved)
    return resolved
