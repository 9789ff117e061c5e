"""Rich terminal rendering and prompts."""

from collections.abc import Sequence
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from lopper.classify import Classification
from lopper.flow import CleanupResult
from lopper.git import DeleteError

YES_ANSWERS = ("y", "yes")


def parse_selection(text: str, count: int) -> list[int]:
    """Parse a selection such as ``1,3-4`` into sorted zero-based indexes.

    ``all`` selects everything and a blank answer selects nothing.

    Raises:
        ValueError: If a part is not a number or range within ``1..count``
    """
    text = text.strip().lower()
    if not text:
        return []
    if text == "all":
        return list(range(count))

    chosen: set[int] = set()
    for part in text.replace(" ", ",").split(","):
        if not part:
            continue
        start, sep, end = part.partition("-")
        try:
            first = int(start)
            last = int(end) if sep else first
        except ValueError as err:
            raise ValueError(f"Invalid selection: {part!r}") from err
        if first < 1 or last > count or first > last:
            raise ValueError(f"Selection out of range: {part!r} (choose 1-{count})")
        chosen.update(range(first - 1, last))
    return sorted(chosen)


class RichUI:
    """Terminal implementation of the branch UI."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize with a console, or a new one writing to stdout."""
        self.console = console or Console()

    def _ask(self, prompt: str) -> Optional[str]:
        """Read one line, or None when input is exhausted."""
        try:
            return self.console.input(prompt)
        except EOFError:
            self.console.print()
            return None

    def show_candidates(self, classification: Classification, current_branch: str) -> None:
        """Render the deletable branches with their reason and the current branch."""
        table = Table(
            title="Deletable Branches",
            show_header=True,
            header_style="bold",
            title_style="bold blue",
            show_edge=True,
        )
        table.add_column("Branch", style="cyan", no_wrap=True)
        table.add_column("Reason for deletion", style="bold yellow", no_wrap=True)
        for branch, reason in classification.reasons.items():
            table.add_row(escape(branch), escape(reason))

        self.console.print(table)
        self.console.print(f"Current branch: [bold green]{escape(current_branch)}[/bold green]")

    def show_selection(self, branches: Sequence[str]) -> None:
        """Echo the branches picked for deletion."""
        names = ", ".join(f"[cyan]{escape(branch)}[/cyan]" for branch in branches)
        self.console.print(f"Selected: {names}")

    def select(self, classification: Classification) -> list[str]:
        """Let the user pick branches by number."""
        options = classification.branches
        reasons = classification.reasons
        self.console.print("[bold]Select branches to delete[/bold]")
        for number, branch in enumerate(options, start=1):
            self.console.print(f"  {number}. [cyan]{escape(branch)}[/cyan] | {escape(reasons[branch])}")

        while True:
            answer = self._ask("Branches to delete (e.g. 1,3-4, 'all', blank for none): ")
            if answer is None:
                return []
            try:
                indexes = parse_selection(answer, len(options))
            except ValueError as err:
                self.console.print(f"[red]{escape(str(err))}[/red]")
                continue
            return [options[i] for i in indexes]

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question; only y or yes counts as yes."""
        answer = self._ask(f"{message} (y/n) ")
        return answer is not None and answer.strip().lower() in YES_ANSWERS

    def nothing_to_clean(self) -> None:
        """Report that no branch can be cleaned."""
        self.console.print(
            Panel(
                "[green]Nothing to clean ✨[/green]",
                style="green",
                padding=(0, 2),
                expand=False,
            )
        )

    def nothing_selected(self) -> None:
        """Report an empty pick."""
        self.console.print("[yellow]No branches selected[/yellow]")

    def declined(self) -> None:
        """Report that the confirmation was declined."""
        self.console.print("\n[yellow]No branches were deleted.[/yellow] 🛑")

    def deleted(self, branch: str) -> None:
        """Report a deleted branch."""
        self.console.print(f"Branch [cyan]{escape(branch)}[/cyan] deleted successfully.")

    def delete_failed(self, error: DeleteError) -> None:
        """Report a branch git refused to delete."""
        self.console.print(f"[red]Error deleting branch '{escape(error.branch)}':[/red] {escape(error.message)}")

    def show_summary(self, result: CleanupResult) -> None:
        """Print the outcome of a delete batch."""
        if result.deleted:
            self.console.print(f"\n[bold green]Cleaned a total of {len(result.deleted)} branch(es)[/bold green] 🧹")
        else:
            self.console.print("\n[yellow]No branches were deleted[/yellow] 🤔")

        if result.failures:
            failed = ", ".join(escape(err.branch) for err in result.failures)
            self.console.print(f"[red]Failed to delete {len(result.failures)} branch(es):[/red] {failed}")
        if result.skipped:
            skipped = ", ".join(escape(branch) for branch in result.skipped)
            self.console.print(f"[yellow]Skipped after failure:[/yellow] {skipped}")
