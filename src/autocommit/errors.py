"""Error taxonomy for the autocommit engine.

Every failure that leaves a pipeline run, the scheduler or the config layer
is one of these. Messages are plain text meant to be shown to the user as is.
"""

from typing import Optional


class AutoCommitError(Exception):
    """Base class for all autocommit failures."""


class StorageError(AutoCommitError):
    """Reading or writing the persisted configuration failed."""


class GitError(AutoCommitError):
    """A repository could not be opened, staged, committed or pushed."""


class NetworkError(AutoCommitError):
    """The remote text-generation service could not be reached."""


class ApiError(AutoCommitError):
    """The remote service answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ParseError(AutoCommitError):
    """Persisted or remote data could not be decoded."""


class NoCandidateError(AutoCommitError):
    """The remote service answered but produced no usable text."""


class ConfigError(AutoCommitError):
    """Required configuration is missing or unusable."""


class ConcurrencyError(AutoCommitError):
    """The scheduler was started while already running."""
