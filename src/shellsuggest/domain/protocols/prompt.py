"""Prompt input model protocol."""

from typing import Protocol

__all__ = ["PromptInputModel"]


class PromptInputModel(Protocol):
    """Live prompt input as tracked by the terminal's command detection.

    The completion core only reads from it. ``ghost_text_index`` is -1 when no
    ghost text is shown.
    """

    @property
    def value(self) -> str: ...

    @property
    def prefix(self) -> str: ...

    @property
    def suffix(self) -> str: ...

    @property
    def cursor_index(self) -> int: ...

    @property
    def ghost_text_index(self) -> int: ...
