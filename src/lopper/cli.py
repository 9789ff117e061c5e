"""Command line interface for lopper."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print
from rich.console import Console
from rich.markup import escape

from lopper import __version__
from lopper.config import parse_protect_option, resolve_protected
from lopper.flow import Mode, run_cleanup
from lopper.git import GitError, GitRepo, ensure_repository
from lopper.ui import RichUI

app = typer.Typer(
    help=(
        "Find local branches already merged into your current branch and, optionally, delete them. "
        "Without a command, only shows what could be cleaned. Remote branches are never touched."
    )
)
console = Console()

RepoOption = Annotated[Optional[Path], typer.Option("--repo", "-r", help="Path to git repository")]
ProtectOption = Annotated[
    str, typer.Option("--protect", "-p", help="Comma-separated branch names or patterns to protect")
]
KeepGoingOption = Annotated[
    bool, typer.Option("--keep-going", help="Keep deleting the remaining branches after a failure")
]


def version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        print(f"lopper {__version__}")
        raise typer.Exit()


def run(ctx: typer.Context, mode: Mode, repo: Optional[Path], protect: str, keep_going: bool = False) -> None:
    """Run a flow against the repository, turning git errors into exit code 1."""
    options = ctx.obj or {}
    path = repo or options.get("repo") or Path(".")
    extra = parse_protect_option(options.get("protect", "")) + parse_protect_option(protect)

    try:
        ensure_repository(path)
        git_repo = GitRepo(path)
        protected = resolve_protected(git_repo.get_configured_protected(), extra)
        result = run_cleanup(git_repo, mode, protected, RichUI(console), keep_going=keep_going)
    except GitError as err:
        print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err

    if result.exit_code:
        raise typer.Exit(code=result.exit_code)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    repo: RepoOption = None,
    protect: ProtectOption = "",
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging")] = False,
    version: Annotated[
        Optional[bool], typer.Option("--version", callback=version_callback, is_eager=True, help="Show version")
    ] = None,
) -> None:
    """Show branches that could be cleaned and why. Nothing is deleted."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    ctx.obj = {"repo": repo, "protect": protect}
    if ctx.invoked_subcommand is None:
        run(ctx, Mode.DRY_RUN, None, "")


@app.command()
def clean(
    ctx: typer.Context,
    repo: RepoOption = None,
    protect: ProtectOption = "",
    keep_going: KeepGoingOption = False,
) -> None:
    """Delete every deletable branch after two confirmations."""
    run(ctx, Mode.CLEAN, repo, protect, keep_going)


@app.command()
def pick(
    ctx: typer.Context,
    repo: RepoOption = None,
    protect: ProtectOption = "",
    keep_going: KeepGoingOption = False,
) -> None:
    """Select which deletable branches to delete."""
    run(ctx, Mode.PICK, repo, protect, keep_going)


if __name__ == "__main__":
    app()
