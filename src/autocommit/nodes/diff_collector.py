"""Change detection and bounded diff summaries for staged changes."""

import unicodedata

from git import Repo
from git.exc import GitError as GitPythonError
from loguru import logger

from autocommit.errors import GitError
from autocommit.models.state import DiffSummary

# Keeps the prompt inside the model's input limits.
MAX_DIFF_CHARS = 10000

_JOINERS = {"\u200c", "\u200d"}


def _continues_previous(char: str) -> bool:
    """True when char only makes sense attached to the character before it."""
    if char in _JOINERS:
        return True
    # Combining, enclosing and spacing marks, variation selectors included
    return unicodedata.category(char) in ("Mn", "Me", "Mc")


def truncate_text(text: str, limit: int) -> str:
    """Cut text to at most limit characters without splitting a character
    from the marks that modify it."""
    if len(text) <= limit:
        return text

    cut = limit
    while cut > 0 and _continues_previous(text[cut]):
        cut -= 1
    # A joiner right before the cut would dangle
    while cut > 0 and text[cut - 1] in _JOINERS:
        cut -= 1
    return text[:cut]


class DiffCollector:
    """Inspects a repository and renders its staged changes for the prompt."""

    def __init__(self, max_chars: int = MAX_DIFF_CHARS):
        self.max_chars = max_chars

    def has_pending_changes(self, repo: Repo) -> bool:
        try:
            return repo.is_dirty(index=True, working_tree=True, untracked_files=True)
        except GitPythonError as e:
            raise GitError(f"git status failed: {e}") from e

    def _cached_diff(self, repo: Repo, *args: str) -> str:
        # Raw bytes so a non UTF-8 file cannot break decoding
        output = repo.git.diff("--cached", *args, stdout_as_string=False)
        return output.decode("utf-8", errors="replace")

    def summarize(self, repo: Repo) -> DiffSummary:
        """Build the stat and (possibly truncated) body of the staged diff."""
        try:
            stat = self._cached_diff(repo, "--stat")
            body = self._cached_diff(repo)
        except GitPythonError as e:
            raise GitError(f"git diff failed: {e}") from e

        truncated = len(body) > self.max_chars
        if truncated:
            logger.debug(f"Truncating diff body from {len(body)} to {self.max_chars} characters")
            body = truncate_text(body, self.max_chars)

        return DiffSummary(stat=stat, body=body, truncated=truncated)
