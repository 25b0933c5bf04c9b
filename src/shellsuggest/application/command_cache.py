"""Global command cache.

Enumerating every command the shell knows is expensive, so the shell pushes
the full list once (``CompletionsPwshCommands``) and it is kept for the life
of the process and persisted application-wide. One instance is created by
the composition root and handed to every provider that needs it.
"""

import asyncio
from typing import Any, Coroutine, Iterable, Optional

from pydantic import ValidationError

from shellsuggest.domain.protocols import StateProvider, StorageScope, scoped_key
from shellsuggest.domain.types import CompletionItem
from shellsuggest.logger import get_logger

logger = get_logger("suggest.command_cache")

CACHED_PWSH_COMMANDS_KEY = "terminal.suggest.pwshCommands"


class GlobalCommandCache:
    """Process-wide set of global command completions keyed by label.

    Lifecycle:
    - hydrated lazily from storage on first use when empty
    - replaced wholesale by ``replace()`` and persisted
    - ``clear()`` empties memory and removes the persisted copy

    Writes to storage are fire-and-forget. ``flush()`` waits for them.

    Example:
        >>> cache = GlobalCommandCache(FileStateProvider("~/.shellsuggest/state"))
        >>> await cache.ensure_hydrated()
        >>> cache.replace(items)
        >>> await cache.flush()
    """

    def __init__(
        self,
        state_provider: StateProvider,
        initial: Optional[Iterable[CompletionItem]] = None,
        scope: StorageScope = StorageScope.APPLICATION,
    ):
        """
        Args:
            state_provider: Backend for the persisted copy
            initial: Commands already known to the caller, skips hydration when non-empty
            scope: Storage scope of the persisted key
        """
        self._state_provider = state_provider
        self._key = scoped_key(scope, CACHED_PWSH_COMMANDS_KEY)
        self._items: dict[str, CompletionItem] = {}
        self._pending_writes: set[asyncio.Task] = set()
        self._hydration: Optional[asyncio.Future[None]] = None
        # Bumped by replace() and clear()
        self._generation = 0
        if initial is not None:
            self.add(initial)
        self._hydrated = bool(self._items)

    @property
    def storage_key(self) -> str:
        return self._key

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, label: object) -> bool:
        return label in self._items

    def is_empty(self) -> bool:
        return not self._items

    def snapshot(self) -> list[CompletionItem]:
        """Return the cached commands in insertion order."""
        return list(self._items.values())

    def add(self, items: Iterable[CompletionItem]) -> None:
        """Add items, keeping the first item seen for each label."""
        for item in items:
            self._items.setdefault(item.label, item)

    async def ensure_hydrated(self) -> None:
        """Load the persisted copy once per process if the cache is empty.

        Concurrent callers share one load. Unreadable or invalid stored data
        leaves the cache empty, and stored data read after a ``replace()`` or
        ``clear()`` is discarded.
        """
        while not self._hydrated:
            hydration = self._hydration
            if hydration is None:
                await self._hydrate()
            else:
                await asyncio.shield(hydration)

    async def _hydrate(self) -> None:
        hydration: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._hydration = hydration
        generation = self._generation
        try:
            items = [] if self._items else await self._load_persisted()
            if self._generation != generation:
                logger.debug("Cache changed while loading, discarding persisted global commands")
            elif items:
                self.add(items)
                logger.info(f"Hydrated {len(self._items)} global commands from storage")
            self._hydrated = True
        finally:
            self._hydration = None
            hydration.set_result(None)

    async def _load_persisted(self) -> list[CompletionItem]:
        try:
            data = await self._state_provider.load(self._key)
        except (IOError, ValueError) as e:
            logger.warning(f"Could not read cached global commands: {e}")
            return []

        if data is None:
            logger.debug("No persisted global commands found")
            return []

        try:
            if not isinstance(data, list):
                raise TypeError(f"expected a list, got {type(data).__name__}")
            return [CompletionItem.from_dict(entry) for entry in data]
        except (TypeError, ValidationError) as e:
            logger.warning(f"Ignoring invalid cached global commands: {e}")
            return []

    def replace(self, items: Iterable[CompletionItem]) -> None:
        """Replace the whole cache and persist the result."""
        self._generation += 1
        self._items.clear()
        self.add(items)
        self._hydrated = True
        logger.info(f"Global command cache replaced with {len(self._items)} commands")
        self._schedule(self._persist([item.to_dict() for item in self._items.values()]))

    def clear(self) -> None:
        """Empty the cache and remove the persisted copy."""
        self._generation += 1
        self._items.clear()
        # Nothing left in storage to hydrate from
        self._hydrated = True
        logger.info("Global command cache cleared")
        self._schedule(self._remove())

    async def flush(self) -> None:
        """Wait for scheduled storage writes to finish."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes))

    async def _persist(self, data: list[dict[str, Any]]) -> None:
        try:
            await self._state_provider.save(self._key, data)
            logger.debug(f"Persisted {len(data)} global commands under '{self._key}'")
        except Exception as e:
            logger.warning(f"Failed to persist global commands: {e}")

    async def _remove(self) -> None:
        try:
            await self._state_provider.delete(self._key)
        except Exception as e:
            logger.warning(f"Failed to remove persisted global commands: {e}")

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Called outside an event loop (CLI), write synchronously
            asyncio.run(coro)
            return
        task = loop.create_task(coro)
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)
