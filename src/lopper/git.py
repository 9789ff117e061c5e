"""Git repository operations."""

import logging
from collections.abc import Iterable
from pathlib import Path

from git import GitCommandError, GitCommandNotFound, InvalidGitRepositoryError, NoSuchPathError, Repo

logger = logging.getLogger(__name__)

PROTECT_CONFIG_KEY = "lopper.protect"

# Full ref names carry no markers or color codes, whatever the user's git config
BRANCH_FORMAT = "--format=%(refname)"
HEADS_PREFIX = "refs/heads/"


class GitError(Exception):
    """Git operation error."""


class NotARepositoryError(GitError):
    """The given path is not a usable git repository."""


class RepositoryAccessError(GitError):
    """A read-only git query failed."""


class DeleteError(GitError):
    """Deleting a single branch failed."""

    def __init__(self, branch: str, message: str) -> None:
        """Initialize error.

        Args:
            branch: Name of the branch that could not be deleted
            message: Message reported by git
        """
        super().__init__(f"Failed to delete branch '{branch}': {message}")
        self.branch = branch
        self.message = message


def ensure_repository(path: Path) -> Path:
    """Check that ``path`` holds a ``.git`` entry before anything else runs."""
    if not (path / ".git").exists():
        raise NotARepositoryError(f"Not a git repository: {path}")
    return path


def sanitize_branch_lines(lines: Iterable[str]) -> list[str]:
    """Turn ``git branch --format=%(refname)`` output into branch names.

    Only ``refs/heads/`` entries are kept, so the detached HEAD entry git lists
    is dropped while a branch that happens to be named ``(foo)`` survives.
    """
    branches = []
    for line in lines:
        ref = line.strip()
        if ref.startswith(HEADS_PREFIX) and len(ref) > len(HEADS_PREFIX):
            branches.append(ref[len(HEADS_PREFIX) :])
    return branches


def _command_message(err: GitCommandError) -> str:
    """Extract git's own message from a command error."""
    message = (err.stderr or "").strip()
    if message.startswith("stderr:"):
        message = message[len("stderr:") :].strip().strip("'").strip()
    return message or str(err)


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        self.path = path
        try:
            self.repo: Repo = Repo(path)
        except (InvalidGitRepositoryError, NoSuchPathError, GitCommandError, ValueError) as err:
            raise NotARepositoryError(f"Failed to open repository: {err}") from err
        if self.repo.bare:
            raise NotARepositoryError("Cannot operate on bare repository")

    def _branch_listing(self, *args: str) -> list[str]:
        """Run ``git branch`` with ``args`` and return branch names."""
        logger.debug("Running git branch %s in %s", " ".join(args), self.path)
        try:
            output = self.repo.git.branch(BRANCH_FORMAT, *args)
        except GitCommandNotFound as err:
            raise RepositoryAccessError(f"git executable not found: {err}") from err
        except GitCommandError as err:
            raise RepositoryAccessError(f"Failed to list branches: {_command_message(err)}") from err
        return sanitize_branch_lines(output.splitlines())

    def list_local_branches(self) -> list[str]:
        """List local branches in the order git reports them."""
        return self._branch_listing("--list")

    def list_merged_branches(self) -> set[str]:
        """List local branches already merged into HEAD."""
        return set(self._branch_listing("--merged"))

    def get_current_branch(self) -> str:
        """Get current branch name.

        Raises:
            RepositoryAccessError: If git fails or HEAD is detached
        """
        try:
            current = self.repo.git.branch("--show-current").strip()
        except GitCommandNotFound as err:
            raise RepositoryAccessError(f"git executable not found: {err}") from err
        except GitCommandError as err:
            raise RepositoryAccessError(f"Failed to get current branch: {_command_message(err)}") from err
        if not current:
            raise RepositoryAccessError("Failed to get current branch: HEAD is detached")
        return current

    def get_configured_protected(self) -> list[str]:
        """Read extra protected branch names from the repository's git config."""
        try:
            output = self.repo.git.config("--get-all", PROTECT_CONFIG_KEY)
        except GitCommandError as err:
            # git config exits with 1 when the key is not set
            if err.status == 1:
                return []
            raise RepositoryAccessError(f"Failed to read {PROTECT_CONFIG_KEY}: {_command_message(err)}") from err
        return [line.strip() for line in output.splitlines() if line.strip()]

    def delete_branch(self, branch_name: str) -> None:
        """Delete a local branch with the safe ``-d`` flag.

        Raises:
            DeleteError: If git refuses or fails to delete the branch
        """
        logger.debug("Deleting branch %s in %s", branch_name, self.path)
        try:
            self.repo.git.branch("-d", branch_name)
        except GitCommandNotFound as err:
            raise DeleteError(branch_name, f"git executable not found: {err}") from err
        except GitCommandError as err:
            raise DeleteError(branch_name, _command_message(err)) from err
