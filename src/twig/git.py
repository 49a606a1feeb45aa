"""Git repository operations."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from git import CommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

logger = logging.getLogger(__name__)

BRANCH_MARKERS = ("*", "+")  # checked out here, checked out in a linked worktree
DETACHED_PREFIXES = ("(HEAD detached", "(no branch")

LIST_BRANCHES_ARGS = ("branch", "--no-color")
LIST_UNMERGED_ARGS = ("branch", "--no-color", "--no-merged")


class DeletionMode(Enum):
    """How a branch gets deleted."""

    SAFE = "-d"  # Refuses branches with unmerged commits
    FORCED = "-D"


class GitError(Exception):
    """Git operation error."""


class ExecutionError(GitError):
    """A git invocation failed.

    The message is the raw error text reported by git and is meant to be shown
    to the user verbatim.
    """

    def __init__(self, message: str, command: tuple[str, ...] = ()) -> None:
        """Initialize error.

        Args:
            message: Raw error text
            command: Argument vector of the failed invocation
        """
        super().__init__(message)
        self.command = command


@dataclass(frozen=True)
class CommandOutcome:
    """Result of a single git invocation."""

    command: tuple[str, ...]
    status: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Anything on stderr counts as a failure, even with a zero exit status."""
        return self.status == 0 and not self.stderr.strip()

    def raise_for_error(self) -> "CommandOutcome":
        """Raise ExecutionError unless the invocation succeeded."""
        if not self.ok:
            message = self.stderr.strip() or f"{' '.join(self.command)} exited with status {self.status}"
            raise ExecutionError(message, command=self.command)
        return self


def parse_branch_output(output: str) -> list[str]:
    """Turn `git branch` output into an ordered list of branch names."""
    branches = []
    for line in output.splitlines():
        # Each line starts with a two column prefix: a marker and a space
        marker, name = line[:1], line[2:].strip()
        if marker not in BRANCH_MARKERS or line[1:2] != " ":
            marker, name = "", line.strip()
        if not name:
            continue
        if marker == "*" and name.startswith(DETACHED_PREFIXES):
            continue
        branches.append(name)
    return branches


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
        except (InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"fatal: not a git repository: {err}") from err

    def run(self, *args: str) -> CommandOutcome:
        """Run a git subcommand and capture its outcome without raising."""
        command = ("git",) + args
        logger.debug("Running %s", command)
        try:
            status, stdout, stderr = getattr(self.repo.git, args[0])(
                *args[1:],
                with_extended_output=True,
                with_exceptions=False,
            )
        except CommandError as err:
            # git missing from PATH and similar spawn failures
            outcome = CommandOutcome(command, status=1, stderr=str(err))
        else:
            outcome = CommandOutcome(command, status=status, stdout=stdout, stderr=stderr)
        logger.debug("%s exited with status %s", command, outcome.status)
        return outcome

    def list_branches(self) -> list[str]:
        """Get the names of all local branches.

        Raises:
            ExecutionError: If git reports an error
        """
        outcome = self.run(*LIST_BRANCHES_ARGS).raise_for_error()
        return parse_branch_output(outcome.stdout)

    def list_unmerged_branches(self) -> list[str]:
        """Get the names of local branches not merged into the current branch."""
        outcome = self.run(*LIST_UNMERGED_ARGS).raise_for_error()
        return parse_branch_output(outcome.stdout)

    def is_unmerged(self, branch_name: str) -> bool:
        """Check if a branch has commits not merged into the current branch.

        Merge status can change between calls, so this always asks git again.
        """
        return branch_name in self.list_unmerged_branches()

    def delete_branch(self, branch_name: str, mode: DeletionMode = DeletionMode.SAFE) -> CommandOutcome:
        """Delete a single local branch.

        Raises:
            ExecutionError: If git refuses or fails to delete the branch
        """
        return self.run("branch", mode.value, branch_name).raise_for_error()
