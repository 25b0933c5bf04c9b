"""Exceptions raised by the shell completion core."""

from typing import Any


class SuggestError(Exception):
    """Base class for shellsuggest errors."""


class ProtocolDecodeError(SuggestError, ValueError):
    """Raised when a completion payload cannot be parsed.

    Attributes:
        payload: The raw payload text that failed to parse
    """

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class UnsupportedShellError(SuggestError):
    """Raised when the completion provider is attached to a shell it cannot serve."""

    def __init__(self, shell_type: Any):
        super().__init__(f"PwshCompletionProvider can only be used with PowerShell, got {shell_type!r}")
        self.shell_type = shell_type
