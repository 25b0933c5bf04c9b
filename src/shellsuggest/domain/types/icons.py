"""Icons attached to completion items.

Values are codicon identifiers understood by the host UI. Custom icon ids sent
by the shell use the camelCase codicon key (``symbolMethod``, ``gitBranch``).
"""

from enum import Enum


class Icon(str, Enum):
    """Codicon identifiers used for terminal completions."""

    SYMBOL_TEXT = "symbol-text"
    HISTORY = "history"
    SYMBOL_METHOD = "symbol-method"
    SYMBOL_FILE = "symbol-file"
    FOLDER = "folder"
    SYMBOL_PROPERTY = "symbol-property"
    SYMBOL_VARIABLE = "symbol-variable"
    SYMBOL_VALUE = "symbol-value"
    SYMBOL_NAMESPACE = "symbol-namespace"
    SYMBOL_INTERFACE = "symbol-interface"
    SYMBOL_KEYWORD = "symbol-keyword"
    SYMBOL_FIELD = "symbol-field"
    SYMBOL_ENUM = "symbol-enum"
    SYMBOL_CLASS = "symbol-class"
    SYMBOL_CONSTANT = "symbol-constant"
    SYMBOL_EVENT = "symbol-event"
    SYMBOL_OPERATOR = "symbol-operator"
    SYMBOL_PARAMETER = "symbol-parameter"
    FILE = "file"
    FILE_CODE = "file-code"
    FILE_ZIP = "file-zip"
    GIT_BRANCH = "git-branch"
    GIT_COMMIT = "git-commit"
    TAG = "tag"
    TERMINAL = "terminal"
    GEAR = "gear"
    REMOTE = "remote"
    ARROW_LEFT = "arrow-left"
    ARROW_RIGHT = "arrow-right"

    @property
    def key(self) -> str:
        """The camelCase codicon key, e.g. ``symbolMethod``."""
        head, *rest = self.value.split("-")
        return head + "".join(part.capitalize() for part in rest)


_BY_KEY: dict[str, Icon] = {icon.key: icon for icon in Icon}


def resolve_icon_id(icon_id: str | None) -> Icon | None:
    """Look up an icon by its codicon key or identifier.

    Args:
        icon_id: ``symbolMethod`` style key or ``symbol-method`` style id

    Returns:
        The matching icon, or None when the id is empty or unknown
    """
    if not icon_id:
        return None
    icon = _BY_KEY.get(icon_id)
    if icon is not None:
        return icon
    try:
        return Icon(icon_id)
    except ValueError:
        return None
