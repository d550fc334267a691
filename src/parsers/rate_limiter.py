import asyncio


class RateLimiter:
    """Minimum-interval pacer for outbound provider requests.

    One instance per upstream API key; calls to ``acquire`` are serialized
    so concurrent scans never exceed ``max_rps`` against the provider.
    A non-positive ``max_rps`` disables pacing.
    """

    def __init__(self, max_rps: float) -> None:
        self._min_interval = 1.0 / max_rps if max_rps > 0 else 0.0
        self._last_request = 0.0
        self._lock = asyncio.Lock()

    @property
    def min_interval(self) -> float:
        return self._min_interval

    async def acquire(self) -> None:
        if self._min_interval == 0.0:
            return
        async with self._lock:
            loop = asyncio.get_running_loop()
            wait = self._min_interval - (loop.time() - self._last_request)
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_request = loop.time()
