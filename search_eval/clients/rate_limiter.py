import asyncio
import logging

logger = logging.getLogger(__name__)


class RequestPacer:
    """Fixed delay between consecutive calls to the scoring endpoint.

    The first call goes out immediately; every later call waits
    ``delay_seconds``. This is a flat pause, not adaptive backpressure.
    """

    def __init__(self, delay_seconds: float = 1.0):
        self.delay_seconds = delay_seconds
        self._calls = 0

    def reset(self) -> None:
        """Forget previous calls so the next one is not delayed."""
        self._calls = 0

    async def wait(self) -> None:
        """Sleep before a call unless it is the first one."""
        if self._calls > 0 and self.delay_seconds > 0:
            logger.debug(f"Pacing scoring call, sleeping {self.delay_seconds:.1f}s")
            await asyncio.sleep(self.delay_seconds)
        self._calls += 1

    @property
    def calls(self) -> int:
        """Number of calls paced so far."""
        return self._calls
