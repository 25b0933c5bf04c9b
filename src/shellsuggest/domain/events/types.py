"""Events the completion provider exposes to its host.

The host subscribes to these on the provider's ``EventBus`` to drive the
suggest widget and to forward outbound sequences to the shell.
"""

import time
from dataclasses import dataclass, field


@dataclass
class Event:
    """Base class for all events.

    The timestamp field is automatically set when the event is created.
    """

    timestamp: float = field(default_factory=time.time, init=False)
    """Timestamp when the event was created (Unix timestamp)."""


@dataclass
class CompletionsReceived(Event):
    """Published whenever a ``Completions`` message arrives from the shell,
    before it is decoded."""


@dataclass
class CompletionsRequested(Event):
    """Published when a contextual completion request is sent to the shell."""


@dataclass
class SuggestionAccepted(Event):
    """Published with a byte sequence the host must write to the shell.

    Despite the name this carries every outbound trigger (request
    completions, request global commands, enable extra sources), mirroring
    the channel the suggest widget uses to write an accepted completion.

    Attributes:
        sequence: Escape sequence to write to the shell's input
    """

    sequence: str
    """Escape sequence to write to the shell's input."""


@dataclass
class Bell(Event):
    """Published when the shell rings the terminal bell outside any OSC sequence."""
