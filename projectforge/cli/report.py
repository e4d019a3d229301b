from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from projectforge.executor.types import RunResult, TaskEvent, TaskStatus

_LABELS = {
    TaskStatus.RUNNING: "[cyan]...[/cyan]",
    TaskStatus.SUCCEEDED: "[green]OK[/green]",
    TaskStatus.SKIPPED: "[dim]SKIP[/dim]",
    TaskStatus.WARNED: "[yellow]WARN[/yellow]",
    TaskStatus.FAILED: "[bold red]FAIL[/bold red]",
    TaskStatus.CANCELLED: "[dim]CANCELLED[/dim]",
}


class ConsoleReporter:
    """Prints one line per task notification."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False, soft_wrap=True)

    def __call__(self, event: TaskEvent) -> None:
        line = f"{_LABELS[event.status]} {escape(event.title)}"
        if event.message:
            line += f": {escape(event.message)}"
        self.console.print(line)

    def summary(self, rr: RunResult) -> None:
        done = sum(
            1 for r in rr.results.values() if r.status is TaskStatus.SUCCEEDED
        )
        self.console.print(
            f"{done} succeeded, {len(rr.skipped)} skipped, {len(rr.warned)} warned, "
            f"{len(rr.failed)} failed, {len(rr.cancelled)} cancelled"
        )
