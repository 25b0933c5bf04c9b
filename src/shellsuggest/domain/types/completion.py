"""Completion data model.

Raw completions arrive from the shell integration script; the normalizer turns
them into ``CompletionItem`` instances that the host UI ranks and renders.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shellsuggest.domain.protocols.prompt import PromptInputModel
from shellsuggest.domain.types.icons import Icon


class ResultKind(IntEnum):
    """PowerShell ``CompletionResultType`` codes.

    The set is closed. Codes outside of it are carried as plain integers and
    fall back to default presentation.
    """

    TEXT = 0
    HISTORY = 1
    COMMAND = 2
    FILE = 3
    DIRECTORY = 4
    PROPERTY = 5
    METHOD = 6
    PARAMETER_NAME = 7
    PARAMETER_VALUE = 8
    VARIABLE = 9
    NAMESPACE = 10
    TYPE = 11
    KEYWORD = 12
    DYNAMIC_KEYWORD = 13


KEYWORD_KINDS = frozenset({ResultKind.KEYWORD, ResultKind.DYNAMIC_KEYWORD})


@dataclass(frozen=True)
class RawCompletion:
    """A completion record as sent by the shell.

    Attributes:
        text: Completion text inserted on acceptance
        result_kind: ResultKind code (may be outside the known set)
        tooltip: Optional description shown next to the label
        custom_icon_id: Optional codicon key chosen by the shell
    """

    text: str
    result_kind: int
    tooltip: Optional[str] = None
    custom_icon_id: Optional[str] = None


class CompletionItem(BaseModel):
    """Normalized completion consumed by the suggest UI.

    ``replacement_index``/``replacement_length`` describe the half-open span of
    the input line replaced when the item is accepted.
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Text inserted on acceptance")
    detail: str = Field(..., description="Secondary text, tooltip or label")
    icon: Icon = Field(default=Icon.SYMBOL_TEXT, description="Icon shown in the widget")
    is_file: bool = False
    is_directory: bool = False
    is_keyword: bool = False
    replacement_index: int = Field(default=0, ge=0)
    replacement_length: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_single_flag(self) -> "CompletionItem":
        if sum((self.is_file, self.is_directory, self.is_keyword)) > 1:
            raise ValueError("At most one of is_file, is_directory and is_keyword may be set")
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompletionItem":
        """Rebuild an item from ``to_dict()`` output.

        Raises:
            pydantic.ValidationError: If the data does not describe an item
        """
        return cls.model_validate(data)


@dataclass(frozen=True)
class PromptInputSnapshot:
    """Read-only copy of the prompt input at the time a batch arrived.

    Attributes:
        value: Full input line
        prefix: Text before the cursor
        suffix: Text after the cursor
        cursor_index: Cursor position within ``value``
        ghost_text_index: Start of ghost text, -1 when there is none
    """

    value: str
    prefix: str
    suffix: str
    cursor_index: int
    ghost_text_index: int = -1

    @classmethod
    def capture(cls, model: PromptInputModel) -> "PromptInputSnapshot":
        return cls(
            value=model.value,
            prefix=model.prefix,
            suffix=model.suffix,
            cursor_index=model.cursor_index,
            ghost_text_index=model.ghost_text_index,
        )
