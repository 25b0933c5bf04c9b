"""Event system for host communication.

Example:
    ```python
    from shellsuggest.domain.events import EventBus, SuggestionAccepted

    event_bus = EventBus()

    def write_to_shell(event: SuggestionAccepted):
        pty.write(event.sequence)

    event_bus.subscribe(SuggestionAccepted, write_to_shell)
    ```
"""

from .bus import EventBus
from .types import (
    Bell,
    CompletionsReceived,
    CompletionsRequested,
    Event,
    SuggestionAccepted,
)

__all__ = [
    "EventBus",
    "Event",
    "Bell",
    "CompletionsReceived",
    "CompletionsRequested",
    "SuggestionAccepted",
]
