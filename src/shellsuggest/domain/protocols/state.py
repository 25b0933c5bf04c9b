"""State provider protocol for persisted application state.

This protocol defines the interface for persistence backends (in-memory,
file system, ...) used by the global command cache. Keys are namespaced by a
scope so application-wide state never collides with per-window state.
"""

from enum import Enum
from typing import Any, Protocol

__all__ = ["StateProvider", "StorageScope", "scoped_key"]


class StorageScope(str, Enum):
    """Lifetime of a persisted value."""

    APPLICATION = "application"
    """Shared by every window and survives restarts."""
    WORKSPACE = "workspace"
    """Shared by the windows of one workspace."""


def scoped_key(scope: StorageScope, key: str) -> str:
    """Build the storage key for ``key`` in ``scope``.

    Example:
        >>> scoped_key(StorageScope.APPLICATION, "terminal.suggest.pwshCommands")
        'application:terminal.suggest.pwshCommands'
    """
    return f"{scope.value}:{key}"


class StateProvider(Protocol):
    """Protocol for state persistence providers.

    Providers store JSON-compatible values under string keys. Callers pass
    keys built with ``scoped_key``.

    Example:
        >>> provider = FileStateProvider(base_dir="~/.shellsuggest/state")
        >>> await provider.save(key, [{"label": "git"}])
        >>> await provider.load(key)
        [{'label': 'git'}]
    """

    async def save(self, key: str, data: Any) -> None:
        """Save a JSON-compatible value under a key.

        Raises:
            IOError: If the storage operation fails
            ValueError: If data is not JSON-serializable
        """
        ...

    async def load(self, key: str) -> Any | None:
        """Load the value stored under a key.

        Returns:
            The stored value, or None if the key doesn't exist

        Raises:
            IOError: If the storage read fails
            ValueError: If the stored data is corrupted
        """
        ...

    async def exists(self, key: str) -> bool:
        """Check if a value is stored under a key."""
        ...

    async def delete(self, key: str) -> None:
        """Delete a key. Silently succeeds if the key doesn't exist."""
        ...
