"""Shared domain types."""

from shellsuggest.domain.types.completion import (
    KEYWORD_KINDS,
    CompletionItem,
    PromptInputSnapshot,
    RawCompletion,
    ResultKind,
)
from shellsuggest.domain.types.icons import Icon, resolve_icon_id
from shellsuggest.domain.types.shell import (
    SEPARATORS,
    ShellType,
    detect_separator,
    ends_with_separator,
    host_separator,
    normalize_path_separator,
)

__all__ = [
    "KEYWORD_KINDS",
    "CompletionItem",
    "PromptInputSnapshot",
    "RawCompletion",
    "ResultKind",
    "Icon",
    "resolve_icon_id",
    "SEPARATORS",
    "ShellType",
    "detect_separator",
    "ends_with_separator",
    "host_separator",
    "normalize_path_separator",
]
