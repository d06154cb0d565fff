"""Environment driven settings for the remote service and config location."""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash-exp"
DEFAULT_HTTP_TIMEOUT = 120.0
APP_DIR_NAME = "auto-commit-app"
CONFIG_FILE_NAME = "config.json"


def config_home() -> Path:
    """Base directory for per-user application configuration."""
    override = os.getenv("AUTOCOMMIT_CONFIG_HOME")
    if override:
        return Path(override).expanduser().resolve()
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser()
    if os.name == "nt" and os.getenv("APPDATA"):
        return Path(os.environ["APPDATA"])
    return Path.home() / ".config"


@dataclass(frozen=True)
class Settings:
    """Where to reach Gemini and where to keep the config file."""

    api_base: str = DEFAULT_API_BASE
    model: str = DEFAULT_MODEL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    config_dir: Path = field(default_factory=lambda: config_home() / APP_DIR_NAME)

    @property
    def generate_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/models/{self.model}:generateContent"

    @property
    def config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from AUTOCOMMIT_* environment variables.

        Call ``dotenv.load_dotenv()`` first to pick up a local ``.env`` file.
        """
        timeout = os.getenv("AUTOCOMMIT_HTTP_TIMEOUT")
        return cls(
            api_base=os.getenv("AUTOCOMMIT_API_BASE", DEFAULT_API_BASE),
            model=os.getenv("AUTOCOMMIT_MODEL", DEFAULT_MODEL),
            http_timeout=float(timeout) if timeout else DEFAULT_HTTP_TIMEOUT,
            config_dir=config_home() / APP_DIR_NAME,
        )
