"""OSC sequence scanner.

Splits terminal output into plain text and ``ESC ] <id> ; <data>``
sequences terminated by BEL or ``ESC \\``, and dispatches the data to the
handler registered for the identifier. A BEL outside any sequence is passed
through to the host as a ``Bell`` event.
"""

from enum import Enum
from typing import Optional, Union

from shellsuggest.domain.events import Bell, EventBus
from shellsuggest.domain.protocols import OscHandler
from shellsuggest.logger import get_logger

logger = get_logger("terminal.osc")

ESC = "\x1b"
BEL = "\x07"
OSC_INTRODUCER = "]"
STRING_TERMINATOR = "\\"


class _State(Enum):
    GROUND = "ground"
    ESCAPE = "escape"
    OSC = "osc"
    OSC_ESCAPE = "osc_escape"


class OscStreamParser:
    """Incremental OSC scanner.

    Sequences may be split across chunks; the partial sequence is buffered
    until its terminator arrives.

    Example:
        >>> parser = OscStreamParser()
        >>> parser.register_osc_handler(633, provider.handle_sequence)
        >>> parser.feed("PS> \\x1b]633;Completions;0;3;3;[]\\x07")
        'PS> '
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self._event_bus = event_bus
        self._handlers: dict[int, list[OscHandler]] = {}
        self._state = _State.GROUND
        self._buffer: list[str] = []

    def register_osc_handler(self, identifier: int, handler: OscHandler) -> None:
        self._handlers.setdefault(identifier, []).append(handler)

    def feed(self, chunk: str) -> str:
        """Scan a chunk of output.

        Completed sequences and bells are dispatched once the whole chunk
        was scanned, in stream order. An exception raised by a handler
        propagates and the events after it in the same chunk are dropped.

        Returns:
            The chunk with all OSC sequences removed
        """
        text: list[str] = []
        # Bells and OSC data in stream order
        events: list[Union[Bell, str]] = []

        for char in chunk:
            if self._state is _State.GROUND:
                if char == ESC:
                    self._state = _State.ESCAPE
                elif char == BEL:
                    events.append(Bell())
                    text.append(char)
                else:
                    text.append(char)
            elif self._state is _State.ESCAPE:
                if char == OSC_INTRODUCER:
                    self._state = _State.OSC
                    self._buffer = []
                elif char == ESC:
                    text.append(ESC)
                else:
                    # Not an OSC, keep the escape sequence as output
                    text.append(ESC + char)
                    self._state = _State.GROUND
            elif self._state is _State.OSC:
                if char == BEL:
                    events.append("".join(self._buffer))
                    self._state = _State.GROUND
                elif char == ESC:
                    self._state = _State.OSC_ESCAPE
                else:
                    self._buffer.append(char)
            else:
                if char == STRING_TERMINATOR:
                    events.append("".join(self._buffer))
                    self._state = _State.GROUND
                else:
                    # Malformed terminator, drop the sequence
                    logger.debug("Dropping OSC sequence with invalid terminator")
                    self._state = _State.GROUND
                    text.append(char)

        for event in events:
            if isinstance(event, Bell):
                if self._event_bus is not None:
                    self._event_bus.publish(event)
            else:
                self._dispatch(event)

        return "".join(text)

    def _dispatch(self, sequence: str) -> bool:
        identifier, _, data = sequence.partition(";")
        try:
            handlers = self._handlers.get(int(identifier), [])
        except ValueError:
            logger.debug(f"Ignoring OSC sequence with identifier '{identifier}'")
            return False
        for handler in handlers:
            if handler(data):
                return True
        return False
