"""File-based state provider.

Persists each key as a JSON file in a state directory so the global command
cache survives restarts.
"""

import json
from pathlib import Path
from typing import Any

from shellsuggest.logger import get_logger

logger = get_logger(__name__)


class FileStateProvider:
    """JSON file StateProvider.

    Each key maps to ``<base_dir>/<key>.json`` with ``:`` replaced by ``__``
    and ``/`` by ``_``. Writes go to a temporary file that is then renamed
    over the target, so a crash never leaves a half-written file behind.

    Example:
        >>> provider = FileStateProvider(base_dir="~/.shellsuggest/state")
        >>> await provider.save("application:terminal.suggest.pwshCommands", [])
        >>> # Creates: ~/.shellsuggest/state/application__terminal.suggest.pwshCommands.json
    """

    def __init__(self, base_dir: str | Path = "~/.shellsuggest/state"):
        """
        Args:
            base_dir: Directory for state files. Supports ~ expansion and is
                created if it doesn't exist.

        Raises:
            IOError: If the directory cannot be created
        """
        self.base_dir = Path(base_dir).expanduser().resolve()
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory {self.base_dir}: {e}")
            raise IOError(f"Cannot create state directory: {e}") from e
        logger.debug(f"FileStateProvider initialized: base_dir={self.base_dir}")

    def get_file_path(self, key: str) -> Path:
        """Path of the JSON file holding ``key``."""
        safe_name = key.replace(":", "__").replace("/", "_")
        return self.base_dir / f"{safe_name}.json"

    async def save(self, key: str, data: Any) -> None:
        """Write ``data`` as JSON.

        Raises:
            IOError: If the file cannot be written
            ValueError: If data is not JSON-serializable
        """
        filepath = self.get_file_path(key)
        temp_filepath = filepath.with_suffix(".json.tmp")

        try:
            with open(temp_filepath, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            temp_filepath.replace(filepath)
            logger.debug(f"Saved state to file: key='{key}', size={filepath.stat().st_size} bytes")

        except (TypeError, ValueError) as e:
            logger.error(f"Data not JSON-serializable for key '{key}': {e}")
            temp_filepath.unlink(missing_ok=True)
            raise ValueError(f"Cannot serialize data: {e}") from e

        except OSError as e:
            logger.error(f"Failed to write state file for key '{key}': {e}")
            temp_filepath.unlink(missing_ok=True)
            raise IOError(f"Cannot write state file: {e}") from e

    async def load(self, key: str) -> Any | None:
        """Read the JSON stored under ``key``.

        Returns:
            The decoded value, or None if the file doesn't exist

        Raises:
            IOError: If the file cannot be read
            ValueError: If the file is not valid JSON
        """
        filepath = self.get_file_path(key)
        if not filepath.exists():
            logger.debug(f"State file not found: key='{key}', path={filepath}")
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted JSON in state file '{filepath}': {e}")
            raise ValueError(f"Corrupted state file: {e}") from e
        except OSError as e:
            logger.error(f"Failed to read state file '{filepath}': {e}")
            raise IOError(f"Cannot read state file: {e}") from e

    async def exists(self, key: str) -> bool:
        return self.get_file_path(key).exists()

    async def delete(self, key: str) -> None:
        """Remove the file for ``key``. Idempotent.

        Raises:
            IOError: If the file exists but cannot be removed
        """
        filepath = self.get_file_path(key)
        try:
            filepath.unlink(missing_ok=True)
            logger.debug(f"Deleted state file: key='{key}'")
        except OSError as e:
            logger.error(f"Failed to delete state file '{filepath}': {e}")
            raise IOError(f"Cannot delete state file: {e}") from e
