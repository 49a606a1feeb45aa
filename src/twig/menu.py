"""Numbered branch menu and prompt handling."""

import logging
from typing import TextIO, Union

from rich.console import Console
from rich.markup import escape
from rich.table import Table

logger = logging.getLogger(__name__)

QUIT_TOKEN = "q"
INVALID_ENTRY = "Invalid Entry"


class _Quit:
    """Sentinel returned when the user asks to leave the menu."""

    def __repr__(self) -> str:
        return "QUIT"


QUIT = _Quit()

Selection = Union[str, _Quit]


class ValidationError(ValueError):
    """Menu input that is neither the quit token nor a valid branch number."""


class Prompter:
    """Reads answers from an input stream and renders prompts on a rich console.

    The stream is owned for the lifetime of the ``with`` block and closed on
    exit, whichever way the block is left.
    """

    def __init__(self, console: Console, stream: TextIO) -> None:
        self.console = console
        self.stream = stream

    def __enter__(self) -> "Prompter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self.stream.closed

    def close(self) -> None:
        if not self.stream.closed:
            self.stream.close()

    def ask(self, prompt: str) -> str:
        """Show a prompt and return the answer line.

        Raises:
            EOFError: If the input stream is exhausted
        """
        self.console.print(prompt, end="", markup=False, highlight=False, soft_wrap=True)
        line = self.stream.readline()
        if not line:
            raise EOFError("input stream closed")
        return line.strip()

    def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question. Anything but yes, including end of input, means no."""
        try:
            answer = self.ask(f"{prompt} [y/N] ")
        except EOFError:
            self.console.print()
            return False
        return answer.lower() in ("y", "yes")


def parse_selection(raw: str, branches: list[str]) -> Selection:
    """Map a typed menu entry to a branch name or QUIT.

    Raises:
        ValidationError: If the entry is not the quit token or a number in range
    """
    token = raw.strip()
    if token.lower() == QUIT_TOKEN:
        return QUIT
    try:
        index = int(token)
    except ValueError as err:
        raise ValidationError(f"Not a number: {token!r}") from err
    if not 1 <= index <= len(branches):
        raise ValidationError(f"Out of range: {index}")
    return branches[index - 1]


def create_branch_table(branches: list[str]) -> Table:
    """Create a table listing branches with their menu numbers."""
    table = Table(
        title="Local Branches",
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    table.add_column("#", style="magenta", justify="right", no_wrap=True)
    table.add_column("Branch", style="cyan", no_wrap=True)
    for number, branch_name in enumerate(branches, start=1):
        table.add_row(str(number), escape(branch_name))
    return table


def present_menu(prompter: Prompter, branches: list[str]) -> Selection:
    """Show the branches and keep asking until the user picks one or quits."""
    console = prompter.console
    prompt = f"Which branch do you want to delete? (1-{len(branches)}, {QUIT_TOKEN} to quit) "
    if not branches:
        prompt = f"Nothing to delete. Press {QUIT_TOKEN} to quit "

    console.print()
    if branches:
        console.print(create_branch_table(branches))
    else:
        console.print("[yellow]No local branches found[/yellow]")

    while True:
        try:
            raw = prompter.ask(prompt)
        except EOFError:
            console.print()
            return QUIT
        try:
            return parse_selection(raw, branches)
        except ValidationError as err:
            logger.debug("Rejected menu entry: %s", err)
            console.print(f"[red]{INVALID_ENTRY}[/red]")
