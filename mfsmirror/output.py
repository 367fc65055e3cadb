"""Output formatting for the command line."""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape


class OutputFormatter:
    """Render status messages, sync events and summaries.

    Human-readable output goes through rich consoles, informational text to
    stdout and errors/warnings to stderr. With ``json_output`` enabled, events
    and summaries are written as one JSON object per line instead.
    """

    def __init__(self, json_output: bool = False, quiet: bool = False):
        self.json_output = json_output
        self.quiet = quiet
        self.console = Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    def print(self, message: str = "") -> None:
        if not self.quiet and not self.json_output:
            self.console.print(message)

    def info(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(escape(message))

    def success(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        self.err_console.print(
            f"[yellow]Warning:[/yellow] {escape(message)}", soft_wrap=True
        )

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)

    def output_json(self, data: Any) -> None:
        self.console.print(json.dumps(data), markup=False, soft_wrap=True)

    def event(self, kind: str, path: str) -> None:
        """Report one side effect of a sync.

        Args:
            kind: Event kind (FILE, SAME, DELETE or FLUSH)
            path: Remote path the event applies to
        """
        if self.quiet:
            return
        if self.json_output:
            self.console.print(
                json.dumps({"event": kind.lower(), "path": path}),
                markup=False,
                soft_wrap=True,
            )
        else:
            self.console.print(f"{kind} {path}", markup=False, soft_wrap=True)
