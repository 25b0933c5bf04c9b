"""Single-flight slot for completion requests.

The shell protocol carries no request id, so a completion batch cannot be
matched to the request that caused it. The provider therefore keeps at most
one outstanding request per instance: callers arriving while a request is
in flight share its result, and the next delivered batch resolves all of them.
"""

import asyncio
from typing import Generic, TypeVar

from shellsuggest.logger import get_logger

logger = get_logger("suggest.single_flight")

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Holds at most one pending request.

    Every caller waits on a future of its own, so cancelling one caller only
    drops that caller's interest. The request stays pending until ``resolve``
    is called, even when nobody is waiting any more.

    Usage:
        flight = SingleFlight[list[str] | None]()

        # Requesting side
        result = await flight.join()

        # Delivering side
        flight.resolve(["git", "gci"])
    """

    def __init__(self) -> None:
        self._pending = False
        self._waiters: list[asyncio.Future[T]] = []

    @property
    def pending(self) -> bool:
        """True while a request waits to be resolved."""
        return self._pending

    @property
    def joiners(self) -> int:
        """Number of callers still waiting on the pending request."""
        return sum(1 for waiter in self._waiters if not waiter.done())

    def open(self) -> "asyncio.Future[T]":
        """Start a request when the slot is idle and return a future for the caller."""
        if not self._pending:
            self._pending = True
            self._waiters = []
        waiter: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        return waiter

    async def join(self) -> T:
        """Wait for the next resolved value."""
        return await self.open()

    def resolve(self, value: T) -> bool:
        """Resolve the pending request for every caller still waiting.

        Returns:
            True if a request was pending, False if the slot was idle
        """
        if not self._pending:
            logger.debug("No pending request to resolve, dropping result")
            return False
        waiters, self._waiters = self._waiters, []
        self._pending = False
        live = [waiter for waiter in waiters if not waiter.done()]
        logger.debug(f"Resolving request shared by {len(live)} caller(s)")
        for waiter in live:
            waiter.set_result(value)
        return True
