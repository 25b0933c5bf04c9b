"""In-memory state provider.

Keeps persisted values in a dictionary for tests and for running without a
state directory. Values are lost when the process exits.
"""

import copy
from typing import Any

from shellsuggest.logger import get_logger

logger = get_logger(__name__)


class InMemoryStateProvider:
    """Dictionary-backed StateProvider.

    Values are deep-copied on save and load so callers cannot mutate the
    stored copy.

    Example:
        >>> provider = InMemoryStateProvider()
        >>> await provider.save("application:terminal.suggest.pwshCommands", [])
        >>> await provider.exists("application:terminal.suggest.pwshCommands")
        True
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    async def save(self, key: str, data: Any) -> None:
        self._data[key] = copy.deepcopy(data)
        logger.debug(f"Saved state: key='{key}'")

    async def load(self, key: str) -> Any | None:
        if key not in self._data:
            logger.debug(f"State not found: key='{key}'")
            return None
        return copy.deepcopy(self._data[key])

    async def exists(self, key: str) -> bool:
        return key in self._data

    async def delete(self, key: str) -> None:
        """Delete a key. Idempotent."""
        if key in self._data:
            del self._data[key]
            logger.debug(f"Deleted state: key='{key}'")
        else:
            logger.debug(f"Delete called on non-existent key: '{key}' (no-op)")

    def clear_all(self) -> None:
        """Clear all stored state. Utility for tests."""
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data
