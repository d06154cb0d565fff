"""In-memory configuration holder and its durable JSON file."""

import json
import threading
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from autocommit.errors import ParseError, StorageError
from autocommit.models.config import AppConfig


class ConfigStore:
    """Owns the current configuration.

    Readers get a deep copy and writers replace the whole record. The lock is
    held only while copying, never across I/O or an await.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self._lock = threading.Lock()
        self._config = (config or AppConfig()).model_copy(deep=True)

    def get(self) -> AppConfig:
        with self._lock:
            return self._config.model_copy(deep=True)

    def replace(self, config: AppConfig) -> None:
        snapshot = config.model_copy(deep=True)
        with self._lock:
            self._config = snapshot


class ConfigFile:
    """The persisted configuration record."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[AppConfig]:
        """Read the stored configuration, or None when nothing was saved yet."""
        if not self.path.exists():
            logger.debug(f"No config file at {self.path}")
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read config: {e}") from e

        try:
            return AppConfig.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ParseError(f"Failed to parse config: {e}") from e

    def save(self, config: AppConfig) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(config.model_dump(), indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to save config: {e}") from e
        logger.info(f"Configuration saved to {self.path}")
