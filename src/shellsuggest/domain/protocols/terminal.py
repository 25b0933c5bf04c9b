"""Terminal view protocols used by the completion provider."""

from typing import Callable, Protocol

__all__ = ["OscHandler", "TerminalView", "AcceptanceClock"]

OscHandler = Callable[[str], bool]
"""Receives the data of one OSC sequence, returns True when it was handled."""


class TerminalView(Protocol):
    """The terminal the provider is attached to.

    Example:
        >>> provider.activate(terminal)
        >>> terminal.is_attached  # rendered into the UI
        True
    """

    @property
    def is_attached(self) -> bool:
        """Whether the terminal is rendered into a UI element."""
        ...

    def has_focus(self) -> bool:
        """Whether keyboard focus is inside the terminal."""
        ...

    def on_data(self, listener: Callable[[str], None]) -> None:
        """Register a listener for user input sent to the shell."""
        ...

    def register_osc_handler(self, identifier: int, handler: OscHandler) -> None:
        """Register a handler for OSC sequences with the given identifier."""
        ...


class AcceptanceClock(Protocol):
    """Source of the timestamp of the last accepted suggestion."""

    @property
    def last_accepted_timestamp(self) -> float:
        """Unix timestamp of the last accepted suggestion, 0 when none."""
        ...
