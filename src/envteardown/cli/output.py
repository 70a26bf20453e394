"""Console output for destroy runs."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from envteardown.teardown.base import Reporter
from envteardown.teardown.destroy import DestroyResult, DestroyStatus


class ConsoleReporter(Reporter):
    """Reports teardown progress on a rich console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def prompt(self, message: str) -> str:
        return self.console.input(f"[bold yellow]{escape(message)}[/bold yellow] (yes/no): ")

    def step(self, message: str) -> None:
        self.console.print(f"[bold cyan]step:[/bold cyan] {escape(message)}")

    def note(self, message: str) -> None:
        self.console.print(f"[dim]{escape(message)}[/dim]")


def print_result(console: Console, result: DestroyResult) -> None:
    """Show the summary panel for a completed run; skipped and cancelled runs already said so."""
    if result.status != DestroyStatus.COMPLETED:
        return

    console.print()
    console.print(Panel.fit(
        f"[green]✓ Environment destroyed[/green]\n\n"
        f"Environment: {escape(result.state.env_id) or '(unnamed)'}\n"
        f"Provider: {result.state.iaas.value or 'none recorded'}\n"
        f"Checkpoints saved: {result.checkpoints}\n"
        f"Duration: {result.duration:.2f}s",
        title="Destroy Complete",
        border_style="green"
    ))
