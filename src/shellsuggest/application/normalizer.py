"""Completion normalizer.

Maps raw shell completions onto ``CompletionItem``. Normalization is total:
unknown result kinds fall back to default presentation instead of raising.
"""

import re
from typing import Iterable, Optional

from shellsuggest.domain.types import (
    KEYWORD_KINDS,
    CompletionItem,
    Icon,
    RawCompletion,
    ResultKind,
    detect_separator,
    ends_with_separator,
    host_separator,
    resolve_icon_id,
)

KIND_ICONS: dict[int, Icon] = {
    ResultKind.TEXT: Icon.SYMBOL_TEXT,
    ResultKind.HISTORY: Icon.HISTORY,
    ResultKind.COMMAND: Icon.SYMBOL_METHOD,
    ResultKind.FILE: Icon.SYMBOL_FILE,
    ResultKind.DIRECTORY: Icon.FOLDER,
    ResultKind.PROPERTY: Icon.SYMBOL_PROPERTY,
    ResultKind.METHOD: Icon.SYMBOL_METHOD,
    ResultKind.PARAMETER_NAME: Icon.SYMBOL_VARIABLE,
    ResultKind.PARAMETER_VALUE: Icon.SYMBOL_VALUE,
    ResultKind.VARIABLE: Icon.SYMBOL_VARIABLE,
    ResultKind.NAMESPACE: Icon.SYMBOL_NAMESPACE,
    ResultKind.TYPE: Icon.SYMBOL_INTERFACE,
    ResultKind.KEYWORD: Icon.SYMBOL_KEYWORD,
    ResultKind.DYNAMIC_KEYWORD: Icon.SYMBOL_KEYWORD,
}
DEFAULT_ICON = Icon.SYMBOL_TEXT

# Location history navigation (`cd -`, `cd +`) and relative dirs keep their label as is
_UNSUFFIXED_DIRECTORIES = frozenset({".", "..", "-", "+"})

_EXECUTABLE_EXTENSION = re.compile(r"\.[a-z0-9]{2,4}$", re.IGNORECASE)


def icon_for(result_kind: int, custom_icon_id: Optional[str] = None) -> Icon:
    """Pick the icon for a completion.

    A known custom icon wins, otherwise the kind table decides.
    """
    custom = resolve_icon_id(custom_icon_id)
    if custom is not None:
        return custom
    return KIND_ICONS.get(result_kind, DEFAULT_ICON)


def suffix_directory(label: str, default_separator: Optional[str] = None) -> str:
    """Make sure a directory label ends in a path separator.

    The separator already used inside the label is preferred, then
    ``default_separator``, then the host's separator.
    """
    if label in _UNSUFFIXED_DIRECTORIES or ends_with_separator(label):
        return label
    separator = detect_separator(label) or default_separator or host_separator()
    return label + separator


def is_executable_candidate(raw: RawCompletion) -> bool:
    """Commands with a short file extension (``git.exe``) rank as files."""
    return raw.result_kind == ResultKind.COMMAND and _EXECUTABLE_EXTENSION.search(raw.text) is not None


def normalize(
    raw: RawCompletion,
    replacement_index: int,
    replacement_length: int,
    default_separator: Optional[str] = None,
) -> CompletionItem:
    """Convert one raw completion into a ``CompletionItem``.

    Args:
        raw: Completion as decoded from the wire
        replacement_index: Start of the span replaced on acceptance
        replacement_length: Length of the span replaced on acceptance
        default_separator: Separator appended to directories whose label has none

    Returns:
        The normalized item
    """
    label = raw.text
    if raw.result_kind == ResultKind.DIRECTORY:
        label = suffix_directory(label, default_separator)

    detail = raw.tooltip if raw.tooltip is not None else label

    # The icon reflects what the shell sent; flags use the reclassified kind
    icon = icon_for(raw.result_kind, raw.custom_icon_id)
    kind = ResultKind.FILE if is_executable_candidate(raw) else raw.result_kind

    return CompletionItem(
        label=label,
        detail=detail,
        icon=icon,
        is_file=kind == ResultKind.FILE,
        is_directory=kind == ResultKind.DIRECTORY,
        is_keyword=kind in KEYWORD_KINDS,
        replacement_index=max(replacement_index, 0),
        replacement_length=max(replacement_length, 0),
    )


def normalize_all(
    raws: Iterable[RawCompletion],
    replacement_index: int,
    replacement_length: int,
    default_separator: Optional[str] = None,
) -> list[CompletionItem]:
    return [normalize(raw, replacement_index, replacement_length, default_separator) for raw in raws]
