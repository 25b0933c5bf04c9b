"""Configuration for the terminal suggest core."""

from dataclasses import dataclass, field
from pathlib import Path

from shellsuggest.utils import env_flag, get_state_dir

SUGGEST_ENABLED_SETTING = "terminal.integrated.suggest.enabled"
BUILTIN_COMPLETIONS_SETTING = "terminal.integrated.suggest.builtinCompletions"


@dataclass
class SuggestConfig:
    """Configuration for terminal suggestions.

    Attributes:
        enabled: Master switch for the suggest feature
        pwsh_code: Ask the shell to enable the editor's own command completions
        pwsh_git: Ask the shell to enable git completions
        storage_dir: Directory holding persisted application state
    """

    enabled: bool = True
    pwsh_code: bool = True
    pwsh_git: bool = True
    storage_dir: Path = field(default_factory=lambda: get_state_dir() / "state")


def load_suggest_config() -> SuggestConfig:
    """Load suggest configuration from environment variables.

    Reads ``SUGGEST_ENABLED``, ``SUGGEST_PWSH_CODE`` and ``SUGGEST_PWSH_GIT``.
    The storage directory follows ``SHELLSUGGEST_HOME``.
    """
    return SuggestConfig(
        enabled=env_flag("SUGGEST_ENABLED", True),
        pwsh_code=env_flag("SUGGEST_PWSH_CODE", True),
        pwsh_git=env_flag("SUGGEST_PWSH_GIT", True),
    )
