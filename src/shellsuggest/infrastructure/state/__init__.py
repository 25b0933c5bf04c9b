"""State persistence infrastructure.

Concrete implementations of the StateProvider protocol.
"""

from shellsuggest.infrastructure.state.memory import InMemoryStateProvider
from shellsuggest.infrastructure.state.file import FileStateProvider

__all__ = [
    "InMemoryStateProvider",
    "FileStateProvider",
]
