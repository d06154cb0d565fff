"""Control surface of the auto-commit engine.

``AutoCommitApp`` exposes one method per user-facing operation and wires the
config store, the persisted config file, the pipeline and the scheduler
together. Notifications from the scheduler go through an ``EventBus``.
"""

from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from autocommit.config_store import ConfigFile, ConfigStore
from autocommit.models.config import AppConfig
from autocommit.models.state import CommitOutcome
from autocommit.nodes.api_key_validator import ApiKeyValidator
from autocommit.nodes.message_generator import GeminiClient, MessageGenerator
from autocommit.scheduler import Scheduler
from autocommit.settings import Settings
from autocommit.workflow import CommitPipeline

Listener = Callable[[str, str], None]
FolderPicker = Callable[[], Optional[str]]


class EventBus:
    """Fans scheduler notifications out to subscribed listeners."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def emit(self, event: str, payload: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, payload)
            except Exception:
                logger.exception(f"Event listener failed for {event}")


def prompt_for_folder() -> Optional[str]:
    """Terminal folder picker. An empty answer cancels."""
    answer = input("Repository folder (leave empty to cancel): ").strip()
    if not answer:
        return None
    return str(Path(answer).expanduser().resolve())


class AutoCommitApp:
    """Process-wide state and operations, created once at startup."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        config_store: Optional[ConfigStore] = None,
        config_file: Optional[ConfigFile] = None,
        pipeline: Optional[CommitPipeline] = None,
        validator: Optional[ApiKeyValidator] = None,
        events: Optional[EventBus] = None,
        seconds_per_minute: float = 60.0,
    ):
        self.settings = settings or Settings.from_env()
        client = GeminiClient(self.settings)
        self.config_store = config_store or ConfigStore()
        self.config_file = config_file or ConfigFile(self.settings.config_path)
        self.pipeline = pipeline or CommitPipeline(message_generator=MessageGenerator(client))
        self.validator = validator or ApiKeyValidator(client)
        self.events = events or EventBus()
        self.scheduler = Scheduler(
            self.config_store,
            self.run_commit,
            self.events.emit,
            seconds_per_minute=seconds_per_minute,
        )

    async def run_commit(self, repo_path: str) -> CommitOutcome:
        """Run the pipeline once against repo_path with the stored credential."""
        api_key = self.config_store.get().gemini_api_key
        return await self.pipeline.run(repo_path, api_key)

    def save_config(self, config: AppConfig) -> None:
        self.config_store.replace(config)
        self.config_file.save(config)

    def get_config(self) -> AppConfig:
        return self.config_store.get()

    def load_config_from_file(self) -> AppConfig:
        """Load the persisted config into memory; defaults when none was saved."""
        config = self.config_file.load()
        if config is None:
            return AppConfig()
        self.config_store.replace(config)
        return config

    def start_auto_commit(self) -> None:
        self.scheduler.start()

    def stop_auto_commit(self) -> None:
        self.scheduler.stop()

    def select_directory(self, picker: Optional[FolderPicker] = None) -> Optional[str]:
        """Ask the user for a repository folder; None means cancelled."""
        path = (picker or prompt_for_folder)()
        if path is None:
            logger.info("No folder was selected")
        return path

    async def test_api_key(self, api_key: str) -> str:
        return await self.validator.validate(api_key)

    async def launch(self) -> bool:
        """Load persisted settings and honour auto-start. Returns whether the scheduler started."""
        config = self.load_config_from_file()
        if config.auto_start and config.auto_commit_enabled:
            self.start_auto_commit()
            return True
        logger.info("Auto-start disabled, scheduler not started")
        return False
