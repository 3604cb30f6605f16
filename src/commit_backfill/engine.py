"""GitPython-backed repository engine used by the scheduler."""

import configparser
import re
from pathlib import Path
from typing import Tuple, Union

from git import Actor, Commit, Repo, Tree
from git.exc import BadName, BadObject, GitError, InvalidGitRepositoryError, NoSuchPathError
from git.index.fun import write_tree_from_cache
from gitdb.db import MemoryDB
from gitdb.util import bin_to_hex, hex_to_bin

from .errors import (
    CommitObjectError,
    EmailRetrievalError,
    IndexReadError,
    NameRetrievalError,
    RepositoryOpenError,
    ResetHeadError,
    SignatureError,
    TreeWriteError,
)
from .logging import get_logger
from .models import CommitRequest

logger = get_logger(__name__)

IDENTITY_PATTERN = re.compile(r"^\s*(?P<name>[^<>\r\n]+?)\s*<(?P<email>[^<>\r\n]+)>\s*$")


def format_identity(name: str, email: str) -> str:
    """Render a name and email as a git identity string."""
    return f"{name} <{email}>"


def parse_identity(identity: str) -> Tuple[str, str]:
    """
    Split ``"Name <email>"`` into its parts.

    Raises:
        ValueError: If the string is not a git identity
    """
    match = IDENTITY_PATTERN.match(identity)
    if not match:
        raise ValueError(f"Invalid author identity (expected 'Name <email>'): {identity!r}")
    return match.group("name"), match.group("email")


class RepositoryEngine:
    """Thin wrapper over a git repository: trees, identities, commits and HEAD."""

    def __init__(self, repo: Repo):
        self.repo = repo

    @classmethod
    def open(cls, repo_path: Union[str, Path]) -> "RepositoryEngine":
        """
        Open an existing repository.

        Args:
            repo_path: Path to the repository working tree

        Raises:
            RepositoryOpenError: If the path is missing or not a repository
        """
        try:
            repo = Repo(repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            logger.error(f"Failed to open git repository at {repo_path}: {e}")
            raise RepositoryOpenError(f"Invalid git repository: {repo_path}") from e
        logger.debug(f"Opened repository at {repo.working_tree_dir}")
        return cls(repo)

    def read_default_tree(self, write: bool = True) -> str:
        """
        Return the id of the tree recorded by the staged index.

        Args:
            write: Store the tree objects in the repository. With False the
                id is computed in memory and the object database is untouched.

        Raises:
            IndexReadError: If the index cannot be read
            TreeWriteError: If the index cannot be turned into a tree,
                e.g. because it holds unmerged entries
        """
        try:
            index = self.repo.index
            entries = sorted(index.entries.values(), key=lambda entry: (entry.path, entry.stage))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read index: {e}")
            raise IndexReadError(f"Could not read the staging index: {e}") from e

        try:
            if write:
                tree_id = index.write_tree().hexsha
            else:
                binsha, _ = write_tree_from_cache(entries, MemoryDB(), slice(0, len(entries)))
                tree_id = bin_to_hex(binsha).decode("ascii")
        except (OSError, ValueError, GitError) as e:
            logger.error(f"Failed to write tree from index: {e}")
            raise TreeWriteError(f"Could not write a tree from the index: {e}") from e

        logger.debug(f"Tree {tree_id} from {len(entries)} index entries (stored: {write})")
        return tree_id

    def resolve_author_identity(self) -> Tuple[str, str]:
        """Return the ``(name, email)`` configured for this repository."""
        try:
            reader = self.repo.config_reader()
            name = reader.get_value("user", "name")
        except (configparser.NoSectionError, configparser.NoOptionError) as e:
            logger.error("git config user.name is not set")
            raise NameRetrievalError("Could not read user.name from git config") from e
        except (configparser.Error, OSError) as e:
            logger.error(f"Failed to read git config: {e}")
            raise SignatureError(f"Could not read git config: {e}") from e

        try:
            email = reader.get_value("user", "email")
        except (configparser.NoSectionError, configparser.NoOptionError) as e:
            logger.error("git config user.email is not set")
            raise EmailRetrievalError("Could not read user.email from git config") from e

        # values such as numeric emails come back as int
        return str(name), str(email)

    def write_commit_object(self, request: CommitRequest) -> str:
        """
        Store a commit object for the request without touching any ref.

        Returns:
            Hex id of the new commit

        Raises:
            CommitObjectError: If the object database rejects the write
        """
        try:
            actor = Actor(*parse_identity(request.author))
            parents = [] if request.is_initial else [Commit(self.repo, hex_to_bin(request.parent))]
            commit = Commit.create_from_tree(
                self.repo,
                Tree(self.repo, hex_to_bin(request.tree)),
                request.message,
                parent_commits=parents,
                head=False,
                author=actor,
                committer=actor,
                author_date=request.timestamp,
                commit_date=request.timestamp,
            )
        except (OSError, ValueError, GitError) as e:
            logger.error(f"Failed to write commit object at {request.timestamp.isoformat()}: {e}")
            raise CommitObjectError(f"Could not write commit object: {e}") from e
        return commit.hexsha

    def read_commit_payload(self, commit_id: str) -> bytes:
        """Return the raw body of a stored commit object."""
        try:
            return self.repo.odb.stream(hex_to_bin(commit_id)).read()
        except (BadObject, OSError, ValueError, GitError) as e:
            logger.error(f"Failed to read commit object {commit_id}: {e}")
            raise CommitObjectError(f"Could not read commit object {commit_id}: {e}") from e

    def reset_head_mixed(self, commit_id: str) -> None:
        """Point the current branch at ``commit_id`` and reset the index, leaving files alone."""
        try:
            commit = self.repo.commit(commit_id)
            self.repo.head.reset(commit, index=True, working_tree=False)
        except (BadName, BadObject, ValueError, GitError) as e:
            logger.error(f"Failed to reset HEAD to {commit_id}: {e}")
            raise ResetHeadError(f"Could not reset HEAD to {commit_id}: {e}") from e
        logger.info(f"Reset HEAD to {commit_id}")
