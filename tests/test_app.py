"""Tests for the control surface facade."""

import asyncio
from pathlib import Path

import pytest

from autocommit.app import AutoCommitApp, EventBus
from autocommit.config_store import ConfigFile
from autocommit.errors import ConcurrencyError, ConfigError
from autocommit.models.config import AppConfig
from autocommit.nodes.api_key_validator import VALID_KEY_MESSAGE, ApiKeyValidator
from autocommit.nodes.message_generator import MessageGenerator
from autocommit.scheduler import COMMIT_STATUS_EVENT
from autocommit.settings import Settings
from autocommit.workflow import CommitPipeline

from conftest import FakeGemini, gemini_reply


@pytest.fixture
def make_app(tmp_path):
    def create(fake: FakeGemini) -> AutoCommitApp:
        settings = Settings(config_dir=tmp_path / "config")
        return AutoCommitApp(
            settings=settings,
            pipeline=CommitPipeline(message_generator=MessageGenerator(fake.client())),
            validator=ApiKeyValidator(fake.client()),
            seconds_per_minute=0.02,
        )

    return create


def test_load_without_file_returns_defaults_and_keeps_memory(make_app):
    app = make_app(FakeGemini())
    app.config_store.replace(AppConfig(repo_path="/in-memory"))

    assert app.load_config_from_file() == AppConfig()
    assert app.get_config().repo_path == "/in-memory"


def test_save_then_load_restores_config(make_app, tmp_path):
    app = make_app(FakeGemini())
    config = AppConfig(repo_path="/repo", interval_minutes=10, gemini_api_key="key")

    app.save_config(config)
    fresh = make_app(FakeGemini())

    assert (tmp_path / "config" / "config.json").exists()
    assert fresh.load_config_from_file() == config
    assert fresh.get_config() == config


@pytest.mark.asyncio
async def test_run_commit_uses_stored_credential(make_app, work_repo):
    fake = FakeGemini(body=gemini_reply("feat(readme): expand"))
    app = make_app(fake)
    app.config_store.replace(AppConfig(gemini_api_key="stored-key"))
    (Path(work_repo.working_dir) / "README.md").write_text("expanded\n")

    outcome = await app.run_commit(work_repo.working_dir)

    assert outcome.message == "feat(readme): expand"
    assert fake.requests[0].headers["x-goog-api-key"] == "stored-key"


@pytest.mark.asyncio
async def test_run_commit_without_credential(make_app, work_repo):
    app = make_app(FakeGemini())
    (Path(work_repo.working_dir) / "README.md").write_text("expanded\n")

    with pytest.raises(ConfigError):
        await app.run_commit(work_repo.working_dir)


@pytest.mark.asyncio
async def test_scheduler_emits_through_event_bus(make_app, work_repo):
    app = make_app(FakeGemini(body=gemini_reply("docs: scheduled")))
    received = []
    app.events.subscribe(lambda event, payload: received.append((event, payload)))
    app.config_store.replace(AppConfig(repo_path=work_repo.working_dir, gemini_api_key="key", interval_minutes=1))
    (Path(work_repo.working_dir) / "README.md").write_text("scheduled change\n")

    app.start_auto_commit()
    with pytest.raises(ConcurrencyError):
        app.start_auto_commit()

    async def until_received():
        while not received:
            await asyncio.sleep(0.01)

    await asyncio.wait_for(until_received(), 5.0)
    app.stop_auto_commit()
    await app.scheduler.wait_closed()

    assert received[0] == (COMMIT_STATUS_EVENT, "docs: scheduled")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "auto_start, enabled, expected",
    [(True, True, True), (True, False, False), (False, True, False)],
)
async def test_launch_honours_auto_start(make_app, tmp_path, auto_start, enabled, expected):
    ConfigFile(tmp_path / "config" / "config.json").save(
        AppConfig(repo_path=str(tmp_path), auto_start=auto_start, auto_commit_enabled=enabled, interval_minutes=50)
    )
    app = make_app(FakeGemini())

    assert await app.launch() is expected
    assert app.scheduler.is_running is expected

    app.stop_auto_commit()
    await app.scheduler.wait_closed()


def test_select_directory(make_app):
    app = make_app(FakeGemini())

    assert app.select_directory(lambda: "/picked") == "/picked"
    assert app.select_directory(lambda: None) is None


@pytest.mark.asyncio
async def test_test_api_key_ignores_stored_credential(make_app):
    fake = FakeGemini(body={})
    app = make_app(fake)
    app.config_store.replace(AppConfig(gemini_api_key="stored"))

    assert await app.test_api_key("typed-in") == VALID_KEY_MESSAGE
    assert fake.requests[0].headers["x-goog-api-key"] == "typed-in"


def test_event_bus_isolates_failing_listener():
    bus = EventBus()
    received = []

    def broken(event, payload):
        raise RuntimeError("boom")

    bus.subscribe(broken)
    bus.subscribe(lambda event, payload: received.append(payload))
    bus.emit("commit-status", "feat: x")

    assert received == ["feat: x"]
