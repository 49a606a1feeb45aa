"""Command line interface for twig."""

import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from twig import __version__
from twig.git import GitError, GitRepo
from twig.log import setup_logging
from twig.loop import DeleteLoop
from twig.menu import Prompter

app = typer.Typer(help="Interactively delete local git branches")
console = Console()


def version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"twig {__version__}")
        raise typer.Exit()


@app.command()
def main(
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """Pick local branches to delete from a numbered menu."""
    setup_logging(verbose)
    console.print("\n[black on cyan]Welcome. Let's do some housekeeping on your git repository.[/black on cyan]\n")
    # Failures are reported, not signalled through the exit code
    with Prompter(console, sys.stdin) as prompter:
        try:
            repo = GitRepo(path)
        except GitError as err:
            console.print(f"\n[yellow]{escape(str(err))}[/yellow]\n")
        else:
            DeleteLoop(repo, prompter).run()
        finally:
            console.print("\n[cyan]Goodbye.[/cyan]")


if __name__ == "__main__":
    app()
