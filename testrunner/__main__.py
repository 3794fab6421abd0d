"""Allow ``python -m testrunner``."""

from testrunner.cli import console_main

if __name__ == "__main__":  # pragma: no cover
    console_main()
