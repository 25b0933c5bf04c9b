"""Headless terminal used to drive the provider from captured output."""

from dataclasses import dataclass
from typing import Callable

from shellsuggest.domain.events import EventBus
from shellsuggest.domain.protocols import OscHandler
from shellsuggest.infrastructure.terminal.osc import OscStreamParser


@dataclass
class StaticPromptInput:
    """Prompt input model with a fixed line and cursor at its end by default."""

    value: str = ""
    cursor_index: int = -1
    ghost_text_index: int = -1

    def __post_init__(self) -> None:
        if self.cursor_index < 0:
            self.cursor_index = len(self.value)

    @property
    def prefix(self) -> str:
        return self.value[: self.cursor_index]

    @property
    def suffix(self) -> str:
        return self.value[self.cursor_index :]


class HeadlessTerminal:
    """TerminalView without a UI.

    Output written with ``write_output`` goes through an ``OscStreamParser``;
    user input written with ``send_input`` reaches the data listeners. The
    terminal counts as attached and focused unless told otherwise.
    """

    def __init__(self, event_bus: EventBus | None = None, focused: bool = True, attached: bool = True):
        self.parser = OscStreamParser(event_bus)
        self.focused = focused
        self.attached = attached
        self._data_listeners: list[Callable[[str], None]] = []

    @property
    def is_attached(self) -> bool:
        return self.attached

    def has_focus(self) -> bool:
        return self.focused

    def on_data(self, listener: Callable[[str], None]) -> None:
        self._data_listeners.append(listener)

    def register_osc_handler(self, identifier: int, handler: OscHandler) -> None:
        self.parser.register_osc_handler(identifier, handler)

    def send_input(self, data: str) -> None:
        for listener in self._data_listeners:
            listener(data)

    def write_output(self, chunk: str) -> str:
        """Feed shell output, returning its visible text."""
        return self.parser.feed(chunk)
