"""Test configuration and fixtures."""

import io
from pathlib import Path
from typing import Generator

import pytest
from git import Actor, Repo
from rich.console import Console

from twig.git import CommandOutcome, DeletionMode, ExecutionError
from twig.menu import Prompter


@pytest.fixture
def test_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a repository with a merged and an unmerged branch.

    Branches: main (checked out), feature/merged (merged into main),
    wip (one commit not in main).
    """
    local_path = tmp_path / "local"
    local_path.mkdir()
    local_repo = Repo.init(local_path)

    author = Actor("Test User", "test@example.com")
    with local_repo.config_writer() as config:
        config.set_value("user", "name", author.name)
        config.set_value("user", "email", author.email)

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)

    # Whatever the default branch is called, make it main
    if local_repo.active_branch.name != "main":
        local_repo.active_branch.rename("main")
    main_branch = local_repo.heads.main

    def create_branch(name: str, content: str, merge: bool = False) -> None:
        """Create a branch with one commit on top of main."""
        main_branch.checkout()
        branch = local_repo.create_head(name)
        branch.checkout()

        test_file = local_path / f"{name.replace('/', '_')}.txt"
        test_file.write_text(content)
        local_repo.index.add([test_file.name])
        local_repo.index.commit(f"Add {name}", author=author)

        main_branch.checkout()
        if merge:
            local_repo.git.merge(name, "--no-ff")

    create_branch("feature/merged", "Merged branch content", merge=True)
    create_branch("wip", "Work in progress")

    yield local_path


class FakeRepo:
    """In-memory stand-in for GitRepo that records every call."""

    def __init__(
        self,
        branches: list[str],
        unmerged: tuple[str, ...] = (),
        list_error: str = "",
        check_error: str = "",
        delete_error: str = "",
    ) -> None:
        self.branches = list(branches)
        self.unmerged = set(unmerged)
        self.list_error = list_error
        self.check_error = check_error
        self.delete_error = delete_error
        self.calls: list[tuple] = []

    def list_branches(self) -> list[str]:
        self.calls.append(("list",))
        if self.list_error:
            raise ExecutionError(self.list_error, command=("git", "branch", "--no-color"))
        return list(self.branches)

    def is_unmerged(self, branch_name: str) -> bool:
        self.calls.append(("check", branch_name))
        if self.check_error:
            raise ExecutionError(self.check_error, command=("git", "branch", "--no-color", "--no-merged"))
        return branch_name in self.unmerged

    def delete_branch(self, branch_name: str, mode: DeletionMode = DeletionMode.SAFE) -> CommandOutcome:
        self.calls.append(("delete", branch_name, mode))
        command = ("git", "branch", mode.value, branch_name)
        if self.delete_error:
            raise ExecutionError(self.delete_error, command=command)
        if mode is DeletionMode.SAFE and branch_name in self.unmerged:
            raise ExecutionError(f"error: the branch '{branch_name}' is not fully merged", command=command)
        self.branches.remove(branch_name)
        self.unmerged.discard(branch_name)
        return CommandOutcome(command, stdout=f"Deleted branch {branch_name} (was 1a2b3c4).")

    @property
    def deletions(self) -> list[tuple]:
        return [call for call in self.calls if call[0] == "delete"]


@pytest.fixture
def fake_repo() -> type[FakeRepo]:
    """Factory for in-memory repositories."""
    return FakeRepo


@pytest.fixture
def console() -> Console:
    """A console that renders plain text into memory."""
    return Console(file=io.StringIO(), width=100, color_system=None, force_terminal=False)


@pytest.fixture
def make_prompter(console: Console):
    """Build a prompter that reads the given answers."""

    def _make(answers: str) -> Prompter:
        return Prompter(console, io.StringIO(answers))

    return _make
