"""Shared fixtures: throwaway repositories and a fake Gemini endpoint."""

import json
from pathlib import Path
from typing import List, Optional

import httpx
import pytest
from git import Repo

from autocommit.nodes.diff_collector import DiffCollector
from autocommit.nodes.message_generator import GeminiClient, MessageGenerator
from autocommit.settings import Settings
from autocommit.workflow import CommitPipeline


def gemini_reply(text: str) -> dict:
    """Body of a successful generateContent response with one candidate."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeGemini:
    """Records requests and answers every one of them the same way."""

    def __init__(self, status_code: int = 200, body: Optional[dict] = None, text: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.text = text
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body if self.body is not None else {})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> GeminiClient:
        return GeminiClient(Settings(), transport=self.transport)

    def payload(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


def commit_file(repo: Repo, name: str, content: str, message: str):
    """Write a file in the working tree and commit it."""
    path = Path(repo.working_dir) / name
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message)


@pytest.fixture
def remote_repo(tmp_path):
    """Bare repository acting as the push target."""
    return Repo.init(tmp_path / "remote.git", bare=True)


@pytest.fixture
def work_repo(tmp_path, remote_repo):
    """Repository with one pushed commit and an upstream configured."""
    repo = Repo.init(tmp_path / "work")
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test Author")
        config.set_value("user", "email", "author@example.com")
        config.set_value("commit", "gpgsign", "false")

    commit_file(repo, "README.md", "# Project\n", "Initial commit")
    repo.create_remote("origin", remote_repo.git_dir)
    repo.git.push("--set-upstream", "origin", repo.active_branch.name)
    return repo


@pytest.fixture
def make_pipeline():
    """Factory for a pipeline talking to a FakeGemini."""

    def create(fake: FakeGemini, max_chars: int = 10000) -> CommitPipeline:
        return CommitPipeline(
            diff_collector=DiffCollector(max_chars=max_chars),
            message_generator=MessageGenerator(fake.client()),
        )

    return create
