"""Tests for repository opening and mutations."""

import shutil
from pathlib import Path

import pytest
from git import Repo

from autocommit.errors import GitError
from autocommit.git_ops import GitMutator, open_repository


def test_open_missing_path(tmp_path):
    with pytest.raises(GitError, match="does not exist"):
        open_repository(str(tmp_path / "missing"))


def test_open_plain_directory(tmp_path):
    with pytest.raises(GitError, match="Not a git repository"):
        open_repository(str(tmp_path))


def test_open_empty_path():
    with pytest.raises(GitError):
        open_repository("")


def test_stage_commit_and_publish(work_repo, remote_repo):
    (Path(work_repo.working_dir) / "notes.txt").write_text("remember the milk\n")
    (Path(work_repo.working_dir) / "README.md").unlink()
    mutator = GitMutator(open_repository(work_repo.working_dir))

    mutator.stage_all()
    staged = {d.a_path or d.b_path for d in work_repo.index.diff("HEAD")}
    assert staged == {"notes.txt", "README.md"}

    sha = mutator.commit("docs(notes): add shopping list")
    assert work_repo.head.commit.hexsha == sha
    assert work_repo.head.commit.message.strip() == "docs(notes): add shopping list"

    mutator.publish()
    branch = work_repo.active_branch.name
    assert remote_repo.commit(branch).hexsha == sha


def test_publish_sets_upstream_for_new_branch(work_repo, remote_repo):
    work_repo.git.checkout("-b", "feature/auto")
    (Path(work_repo.working_dir) / "feature.txt").write_text("new\n")
    mutator = GitMutator(work_repo)
    mutator.stage_all()
    sha = mutator.commit("feat(feature): add file")

    mutator.publish()

    assert remote_repo.commit("feature/auto").hexsha == sha
    assert work_repo.active_branch.tracking_branch() is not None


def test_commit_with_nothing_staged_fails(work_repo):
    with pytest.raises(GitError, match="git commit failed"):
        GitMutator(work_repo).commit("chore: nothing")


def test_push_failure_keeps_local_commit(work_repo, remote_repo):
    shutil.rmtree(remote_repo.git_dir)
    (Path(work_repo.working_dir) / "lost.txt").write_text("offline\n")
    mutator = GitMutator(work_repo)
    mutator.stage_all()
    sha = mutator.commit("feat: work offline")

    with pytest.raises(GitError, match="git push failed"):
        mutator.publish()

    assert Repo(work_repo.working_dir).head.commit.hexsha == sha
