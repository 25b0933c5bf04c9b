"""Wire decoder for the shell integration's completion messages.

Messages arrive as the data of an OSC 633 sequence::

    Completions;<replacementIndex>;<replacementLength>;<cursorIndex>;<json>
    CompletionsPwshCommands;<batchType>;<json>

The JSON payload is polymorphic. It may be a single record object, a single
positional tuple, a list of objects or a list of tuples. ``sniff_shape``
names the form explicitly and ``decode`` maps every form onto
``RawCompletion`` records.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from shellsuggest.domain.exceptions import ProtocolDecodeError
from shellsuggest.domain.types import RawCompletion
from shellsuggest.logger import get_logger

logger = get_logger("suggest.wire")

OSC_IDENTIFIER = 633
"""OSC identifier used by the shell integration script."""

FIELD_SEPARATOR = ";"

# Keys of the object form
TEXT_KEY = "CompletionText"
KIND_KEY = "ResultType"
TOOLTIP_KEY = "ToolTip"
ICON_KEY = "CustomIcon"


class SuggestCommand(str, Enum):
    """Command tokens understood by the completion core."""

    COMPLETIONS = "Completions"
    COMPLETIONS_PWSH_COMMANDS = "CompletionsPwshCommands"


class WireShape(Enum):
    """Forms a completion payload can take."""

    EMPTY = "empty"
    OBJECT = "object"
    TUPLE = "tuple"
    OBJECT_LIST = "object_list"
    TUPLE_LIST = "tuple_list"


@dataclass(frozen=True)
class CompletionsMessage:
    """A per-request completion batch.

    Attributes:
        replacement_index: Start of the span to replace, as computed by the shell
        replacement_length: Length of the span to replace
        cursor_index: Cursor position reported by the shell (informational)
        payload: Raw JSON payload, may be empty
    """

    replacement_index: Optional[int]
    replacement_length: Optional[int]
    cursor_index: Optional[int]
    payload: str


@dataclass(frozen=True)
class PwshCommandsMessage:
    """A full replacement of the global command list."""

    batch_type: str
    payload: str


def split_message(data: str) -> tuple[str, list[str]]:
    """Split OSC data into its command token and ``;``-separated arguments."""
    command, *args = data.split(FIELD_SEPARATOR)
    return command, args


def _payload_after(data: str, field_count: int) -> str:
    parts = data.split(FIELD_SEPARATOR, field_count)
    if len(parts) <= field_count:
        return ""
    return parts[field_count]


def _parse_int(value: Optional[str], name: str, data: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ProtocolDecodeError(f"Invalid {name} {value!r} in completion message", data) from e


def parse_completions_message(data: str) -> CompletionsMessage:
    """Parse the data of a ``Completions`` message.

    The payload is everything after the fourth separator and may itself
    contain ``;``.

    Raises:
        ProtocolDecodeError: If a numeric argument is not an integer
    """
    _, args = split_message(data)
    padded = args + [None] * (3 - len(args))
    return CompletionsMessage(
        replacement_index=_parse_int(padded[0], "replacement index", data),
        replacement_length=_parse_int(padded[1], "replacement length", data),
        cursor_index=_parse_int(padded[2], "cursor index", data),
        payload=_payload_after(data, 4),
    )


def parse_pwsh_commands_message(data: str) -> PwshCommandsMessage:
    """Parse the data of a ``CompletionsPwshCommands`` message."""
    _, args = split_message(data)
    return PwshCommandsMessage(
        batch_type=args[0] if args else "",
        payload=_payload_after(data, 2),
    )


def load_payload(payload: str) -> Any:
    """Parse a JSON payload. An empty payload yields None.

    Raises:
        ProtocolDecodeError: If the payload is not valid JSON
    """
    if not payload:
        return None
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        logger.error(f"Malformed completion payload ({len(payload)} chars): {e}")
        raise ProtocolDecodeError(f"Malformed completion payload: {e}", payload) from e


def sniff_shape(payload: Any) -> WireShape:
    """Classify a parsed payload by looking at its first element."""
    if payload is None or payload == [] or payload == "":
        return WireShape.EMPTY
    if not isinstance(payload, list):
        return WireShape.OBJECT
    first = payload[0]
    if isinstance(first, str):
        return WireShape.TUPLE
    if isinstance(first, list):
        return WireShape.TUPLE_LIST
    return WireShape.OBJECT_LIST


def _optional_str(value: Any, name: str, record: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ProtocolDecodeError(f"Completion {name} must be a string, got {value!r}", record)
    return value


def _make_raw(text: Any, kind: Any, tooltip: Any, icon: Any, record: Any) -> RawCompletion:
    if not isinstance(text, str):
        raise ProtocolDecodeError(f"Completion text must be a string, got {text!r}", record)
    if isinstance(kind, bool) or not isinstance(kind, int):
        raise ProtocolDecodeError(f"Completion result type must be an integer, got {kind!r}", record)
    return RawCompletion(
        text=text,
        result_kind=kind,
        tooltip=_optional_str(tooltip, "tooltip", record),
        custom_icon_id=_optional_str(icon, "custom icon", record),
    )


def _from_tuple(record: Any) -> RawCompletion:
    if not isinstance(record, list) or len(record) < 2:
        raise ProtocolDecodeError(f"Positional completion needs at least 2 fields: {record!r}", record)
    padded = record + [None] * (4 - len(record))
    return _make_raw(padded[0], padded[1], padded[2], padded[3], record)


def _from_object(record: Any) -> RawCompletion:
    if not isinstance(record, dict):
        raise ProtocolDecodeError(f"Completion record must be an object: {record!r}", record)
    if TEXT_KEY not in record or KIND_KEY not in record:
        raise ProtocolDecodeError(f"Completion record is missing {TEXT_KEY} or {KIND_KEY}: {record!r}", record)
    return _make_raw(record[TEXT_KEY], record[KIND_KEY], record.get(TOOLTIP_KEY), record.get(ICON_KEY), record)


def decode(payload: Any) -> list[RawCompletion]:
    """Turn a parsed payload into raw completion records.

    Args:
        payload: Result of ``load_payload``

    Returns:
        Records in wire order, empty for an empty payload

    Raises:
        ProtocolDecodeError: If a record does not match its form
    """
    shape = sniff_shape(payload)
    if shape is WireShape.EMPTY:
        return []
    if shape is WireShape.OBJECT:
        return [_from_object(payload)]
    if shape is WireShape.TUPLE:
        return [_from_tuple(payload)]
    if shape is WireShape.TUPLE_LIST:
        return [_from_tuple(record) for record in payload]
    return [_from_object(record) for record in payload]


def decode_text(payload: str) -> list[RawCompletion]:
    """Parse and decode a JSON payload in one step."""
    return decode(load_payload(payload))
