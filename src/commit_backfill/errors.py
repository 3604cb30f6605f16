"""Exceptions raised while backfilling commit history."""


class BackfillError(Exception):
    """Base class for every error the backfill tool reports."""


class RepositoryError(BackfillError):
    """The repository could not be prepared for backfilling."""


class RepositoryOpenError(RepositoryError):
    """The path is missing or is not a git repository."""


class IndexReadError(RepositoryError):
    """The staging index could not be read."""


class TreeWriteError(RepositoryError):
    """The staged index could not be written as a tree object."""


class SignatureError(RepositoryError):
    """The author signature could not be resolved from git config."""


class NameRetrievalError(SignatureError):
    """``user.name`` is not configured."""


class EmailRetrievalError(SignatureError):
    """``user.email`` is not configured."""


class CommitObjectError(BackfillError):
    """A commit object could not be written to the object database."""


class ResetHeadError(BackfillError):
    """The branch head could not be reset to the final commit."""
