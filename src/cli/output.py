"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
status lines, a spinner for the publish step, and the run summary.
Supports verbosity levels and --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner


class OutputHandler:
    """Writes user-facing messages for a mirror run.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> with handler.spinner("Committing mirror snapshot..."):
        ...     sha = repo.commit_all_and_push(message)
        >>> handler.print_summary(listing_pages=3, pages_written=61, commit_sha=sha)
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Shown at verbosity 1 and above."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Shown at verbosity 2 and above, dimmed."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        """Print raw text (git output, paths) without markup parsing."""
        self.console.print(message, markup=False)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Show a spinner while the wrapped block runs."""
        with Live(Spinner("dots", text=message), console=self.console, refresh_per_second=10):
            yield

    def print_summary(
        self,
        listing_pages: int,
        pages_written: int,
        commit_sha: Optional[str] = None,
        published: bool = True,
    ) -> None:
        """Display mirror run summary.

        Args:
            listing_pages: Number of listing pages walked
            pages_written: Number of page files written
            commit_sha: SHA of the snapshot commit (None if nothing committed)
            published: Whether the publish step ran
        """
        self.console.print("\n[bold]Mirror Summary:[/bold]")
        self.console.print(f"  Pages written: {pages_written}")
        self.console.print(f"  Listing pages: {listing_pages}")
        self.console.print()

        if not published:
            self.warning("Snapshot not committed (--no-commit)")
        elif commit_sha is None:
            self.success("Mirror already up to date; nothing to commit")
        else:
            self.success(f"Snapshot committed: {commit_sha[:8]}")
