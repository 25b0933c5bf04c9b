"""
Utility functions for shellsuggest.
"""

import os
from pathlib import Path

DEFAULT_STATE_DIR = "~/.shellsuggest"


def get_state_dir() -> Path:
    """
    Get the directory holding logs and persisted application state.

    Honours ``SHELLSUGGEST_HOME`` and creates the directory if needed.

    Returns:
        Absolute path to the state directory
    """
    state_dir = Path(os.getenv("SHELLSUGGEST_HOME", DEFAULT_STATE_DIR)).expanduser().resolve()
    state_dir.mkdir(parents=True, exist_ok=True)
    return state_dir


def env_flag(name: str, default: bool) -> bool:
    """
    Read a boolean flag from the environment.

    Args:
        name: Environment variable name
        default: Value used when the variable is unset

    Returns:
        True for "true"/"1"/"yes" (case-insensitive), False otherwise
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")
