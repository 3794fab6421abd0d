"""Race a deadline against child completion."""

import asyncio
import logging
from dataclasses import dataclass, field

from testrunner.classifier import format_timeout

log = logging.getLogger(__name__)

# Fraction of the timeout that counts as "dangerously close" to it.
WARNING_MARGIN = 0.2


@dataclass(kw_only=True)
class TimeoutMonitor:
    """Deadline bookkeeping for one child.

    The monitor never touches the process. :meth:`race` only tells the
    caller whether the deadline passed first; terminating the child is up
    to the caller.
    """

    timeout: float | None
    margin: float = WARNING_MARGIN
    _started: float | None = field(default=None, init=False, repr=False)

    def start(self) -> None:
        """Mark the launch time the deadline is measured from."""
        self._started = asyncio.get_running_loop().time()

    def elapsed(self) -> float:
        """Seconds since :meth:`start`."""
        if self._started is None:
            raise RuntimeError("TimeoutMonitor.start() was not called")
        return asyncio.get_running_loop().time() - self._started

    async def race(self, completion: "asyncio.Future[object]") -> bool:
        """Wait for ``completion`` or the deadline, whichever comes first.

        Args:
            completion: Future resolved when the child has exited. It is
                never cancelled here.

        Returns:
            True if the deadline expired before completion, else False.
            A tie counts as completion.

        """
        if self.timeout is None:
            await asyncio.shield(completion)
            return False

        remaining = max(self.timeout - self.elapsed(), 0.0)
        timer = asyncio.ensure_future(asyncio.sleep(remaining))
        try:
            await asyncio.wait(
                {completion, timer}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            timer.cancel()

        if completion.done():
            return False

        log.debug("Deadline of %ss expired after %.3fs", self.timeout, self.elapsed())
        return True

    def is_dangerously_close(self, elapsed: float) -> bool:
        """Check whether a completed run came within the warning margin."""
        if self.timeout is None:
            return False
        return elapsed >= self.timeout * (1 - self.margin)

    def warning_lines(self, elapsed: float) -> list[str]:
        """Return the two-line warning for a run close to the timeout."""
        if self.timeout is None or not self.is_dangerously_close(elapsed):
            return []
        return [
            f"Warning: test duration ({elapsed:.1f} seconds) is dangerously close "
            f"to maximum permitted time ({format_timeout(self.timeout)} seconds)",
            "Warning: Either make the test faster, or increase the timeout (--timeout)",
        ]
