"""
Pipeline state models for a single commit run.
"""

from dataclasses import dataclass
from typing import Optional, TypedDict

from git import Repo

NO_CHANGES_MESSAGE = "No changes to commit"


@dataclass(frozen=True)
class DiffSummary:
    """Staged changes rendered for the language model."""

    stat: str
    body: str
    truncated: bool = False

    @property
    def text(self) -> str:
        return f"{self.stat}\n\n{self.body}"


@dataclass(frozen=True)
class CommitOutcome:
    """Result of a pipeline run: the commit message, or no message when
    there was nothing to commit."""

    message: Optional[str] = None

    @classmethod
    def no_changes(cls) -> "CommitOutcome":
        return cls(message=None)

    @property
    def committed(self) -> bool:
        return self.message is not None

    def __str__(self) -> str:
        return self.message if self.message is not None else NO_CHANGES_MESSAGE


class CommitState(TypedDict, total=False):
    """State container passed between pipeline nodes.

    Using TypedDict for LangGraph compatibility. total=False means all fields
    are optional.
    """

    # Inputs
    repo_path: str  # Repository to commit
    api_key: str  # Credential for the message generator

    # Detection
    repo: Repo  # Opened repository
    has_changes: bool  # Whether the working tree had pending changes

    staged: bool  # Whether pending changes were added to the index

    # Generation
    diff_summary: DiffSummary  # Staged changes, truncated to the budget
    raw_message: str  # Text returned by the model, untouched
    message: str  # Cleaned commit message

    # Publication
    commit_sha: str  # Hash of the created commit
    pushed: bool  # Whether the push succeeded
