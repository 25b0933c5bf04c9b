"""Shell types and path separator helpers."""

import os
from enum import Enum

SEPARATORS: tuple[str, ...] = ("/", "\\")
"""Path separators recognised in completion labels."""


class ShellType(str, Enum):
    """Shells a terminal may be running."""

    POWERSHELL = "pwsh"
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    GIT_BASH = "gitbash"
    CMD = "cmd"
    PYTHON = "python"


def host_separator() -> str:
    """Return the path separator of the host platform."""
    return os.sep


def detect_separator(text: str) -> str | None:
    """Return the first path separator found in ``text``, if any."""
    for char in text:
        if char in SEPARATORS:
            return char
    return None


def ends_with_separator(text: str) -> bool:
    return bool(text) and text[-1] in SEPARATORS


def normalize_path_separator(text: str, separator: str) -> str:
    """Rewrite every recognised path separator in ``text`` to ``separator``.

    Example:
        >>> normalize_path_separator("src/foo\\\\bar", "/")
        'src/foo/bar'
    """
    if separator not in SEPARATORS:
        raise ValueError(f"Unsupported path separator: {separator!r}")
    return "".join(separator if char in SEPARATORS else char for char in text)
