"""The list, pick, delete cycle."""

import logging
from enum import Enum
from typing import Optional, Protocol

from rich.markup import escape

from twig.git import CommandOutcome, DeletionMode, ExecutionError
from twig.menu import QUIT, Prompter, present_menu

logger = logging.getLogger(__name__)

FORCE_PROMPT = (
    "Looks like the branch you want to delete is unmerged. Be careful! "
    "You will lose some changes. Do you still want to delete it?"
)


class LoopState(Enum):
    """Interaction loop state."""

    LISTING = "listing"
    PRESENTING = "presenting"
    CONFIRMING_FORCE = "confirming_force"
    DELETING = "deleting"
    QUITTING = "quitting"
    FAILED = "failed"


TERMINAL_STATES = frozenset({LoopState.QUITTING, LoopState.FAILED})


class BranchSource(Protocol):
    """What the loop needs from a repository."""

    def list_branches(self) -> list[str]: ...

    def is_unmerged(self, branch_name: str) -> bool: ...

    def delete_branch(self, branch_name: str, mode: DeletionMode = DeletionMode.SAFE) -> CommandOutcome: ...


class DeleteLoop:
    """Repeatedly list branches, let the user pick one and delete it.

    Only a successful deletion triggers a relist. A declined force confirmation
    or a failed deletion goes back to the menu with the branches already shown.
    """

    def __init__(self, repo: BranchSource, prompter: Prompter) -> None:
        self.repo = repo
        self.prompter = prompter
        self.console = prompter.console
        self.state = LoopState.LISTING
        self.branches: list[str] = []
        self.selected: Optional[str] = None
        self.mode = DeletionMode.SAFE
        self.error: Optional[ExecutionError] = None

    def run(self) -> LoopState:
        """Drive the loop until the user quits or listing fails."""
        handlers = {
            LoopState.LISTING: self._list,
            LoopState.PRESENTING: self._present,
            LoopState.CONFIRMING_FORCE: self._confirm_force,
            LoopState.DELETING: self._delete,
        }
        while self.state not in TERMINAL_STATES:
            next_state = handlers[self.state]()
            logger.debug("%s -> %s", self.state.name, next_state.name)
            self.state = next_state
        return self.state

    def _list(self) -> LoopState:
        self.console.print("\n[cyan]Loading branches...[/cyan]")
        try:
            self.branches = self.repo.list_branches()
        except ExecutionError as err:
            self.error = err
            self.console.print(f"\n[yellow]{escape(str(err))}[/yellow]\n")
            return LoopState.FAILED
        return LoopState.PRESENTING

    def _present(self) -> LoopState:
        self.selected = None
        choice = present_menu(self.prompter, self.branches)
        if choice is QUIT:
            return LoopState.QUITTING

        self.selected = choice
        self.console.print(f"\n[cyan]Attempting to delete branch {escape(choice)}...[/cyan]")
        try:
            unmerged = self.repo.is_unmerged(choice)
        except ExecutionError as err:
            self._report_failure(err, "Error while checking whether the branch is merged.")
            return LoopState.PRESENTING

        if unmerged:
            return LoopState.CONFIRMING_FORCE
        self.mode = DeletionMode.SAFE
        return LoopState.DELETING

    def _confirm_force(self) -> LoopState:
        if self.prompter.confirm(FORCE_PROMPT):
            self.mode = DeletionMode.FORCED
            return LoopState.DELETING
        self.console.print(
            f"\n[bold cyan]Cool! Your work is valuable. We didn't delete branch {escape(self.selected)}.[/bold cyan]"
        )
        return LoopState.PRESENTING

    def _delete(self) -> LoopState:
        branch_name = self.selected
        self.console.print(f"\n[cyan]Deleting branch {escape(branch_name)}[/cyan]")
        try:
            self.repo.delete_branch(branch_name, self.mode)
        except ExecutionError as err:
            self._report_failure(err)
            return LoopState.PRESENTING
        finally:
            self.mode = DeletionMode.SAFE
        self.console.print(f"\n[bold green]Branch {escape(branch_name)} deleted successfully![/bold green]")
        return LoopState.LISTING

    def _report_failure(self, err: ExecutionError, headline: str = "Error while deleting the branch.") -> None:
        logger.debug("Command %s failed", err.command)
        self.console.print(f"\n[red]{headline} Check error below and try again.[/red]")
        self.console.print(f"\n[yellow]{escape(str(err))}[/yellow]\n")
