"""
Repository access and mutations: open, stage, commit and push.

Every GitPython failure is translated into GitError. Nothing here rolls back:
a failed push leaves the commit in place, a failed commit leaves the index
staged.
"""

from git import Repo
from git.exc import GitError as GitPythonError
from git.exc import InvalidGitRepositoryError, NoSuchPathError
from loguru import logger

from autocommit.errors import GitError


def open_repository(repo_path: str) -> Repo:
    """Open the repository at repo_path."""
    if not repo_path:
        raise GitError("No repository path configured")
    try:
        return Repo(repo_path)
    except NoSuchPathError as e:
        raise GitError(f"Repository path does not exist: {repo_path}") from e
    except InvalidGitRepositoryError as e:
        raise GitError(f"Not a git repository: {repo_path}") from e


def _describe(e: GitPythonError) -> str:
    stderr = getattr(e, "stderr", "") or ""
    return stderr.strip() or str(e)


class GitMutator:
    """Applies the durable side effects of a pipeline run to one repository."""

    def __init__(self, repo: Repo):
        self.repo = repo

    def stage_all(self) -> None:
        """Stage every pending change, including untracked and deleted files."""
        try:
            self.repo.git.add("--all")
        except GitPythonError as e:
            raise GitError(f"git add failed: {_describe(e)}") from e

    def commit(self, message: str) -> str:
        """Commit the index and return the new HEAD hash."""
        try:
            self.repo.git.commit("-m", message)
            return self.repo.head.commit.hexsha
        except GitPythonError as e:
            raise GitError(f"git commit failed: {_describe(e)}") from e

    def publish(self) -> None:
        """Push the current branch.

        A branch without an upstream is pushed to the first remote and the
        upstream is recorded, so later runs can use a plain push.
        """
        try:
            args = self._upstream_args()
            logger.debug(f"Pushing with arguments: {args or 'none'}")
            self.repo.git.push(*args)
        except GitPythonError as e:
            raise GitError(f"git push failed: {_describe(e)}") from e

    def _upstream_args(self) -> list:
        if self.repo.head.is_detached or not self.repo.remotes:
            return []
        branch = self.repo.active_branch
        if branch.tracking_branch() is not None:
            return []
        return ["--set-upstream", self.repo.remotes[0].name, branch.name]
