"""Rich rendering and line input for the interactive session."""
from __future__ import annotations

from typing import Callable, Iterable, Mapping, Optional

from rich.console import Console, Group
from rich.json import JSON
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..errors import PersistenceError
from ..workflows.models import Step
from ..workflows.request import ResolvedRequest

PromptFn = Callable[[str], str]

_VALUE_LIMIT = 60
_BODY_LIMIT = 100


def truncate(value: str, limit: int) -> str:
    if len(value) > limit:
        return value[: limit - 3] + "..."
    return value


def _default_prompt() -> PromptFn:
    from prompt_toolkit import PromptSession
    from prompt_toolkit.history import InMemoryHistory

    session: PromptSession[str] = PromptSession(history=InMemoryHistory())
    return lambda message: session.prompt(f"{message} ")


class ConsoleView:
    """Presentation/input collaborator backed by a rich console."""

    def __init__(self, console: Console, prompt: Optional[PromptFn] = None) -> None:
        self.console = console
        self._prompt = prompt

    # ------------------------------------------------------------------
    # input
    # ------------------------------------------------------------------
    def ask(self, prompt: str) -> str:
        if self._prompt is None:
            self._prompt = _default_prompt()
        return self._prompt(prompt)

    # ------------------------------------------------------------------
    # step rendering
    # ------------------------------------------------------------------
    def preview(self, index: int, step: Step, request: ResolvedRequest) -> None:
        self.console.print(
            f"\n[bold]Preparing[/] [blue]Step {index + 1}[/]: [green]{escape(step.name)}[/]",
            highlight=False,
        )
        lines = Table.grid(padding=(0, 1))
        lines.add_column(style="bold")
        lines.add_column()
        lines.add_row("Method:", Text(request.method, style="magenta"))
        lines.add_row("URL:", Text(request.url, style="cyan"))
        lines.add_row("Auth:", Text(request.auth_label, style="blue"))
        if request.body is None:
            payload = Text("None", style="dim")
        else:
            payload = JSON.from_data(request.body)
        lines.add_row("Payload:", payload)
        self.console.print(Panel(lines, title="Request Preview", title_align="left"))

    def response(self, status: int, body: str) -> None:
        style = "green" if 200 <= status < 300 else "red"
        line = Text("   Response: ")
        line.append(str(status), style=style)
        line.append(" ")
        line.append(truncate(body, _BODY_LIMIT), style="dim")
        self.console.print(line)

    def saved(self, name: str, value: str) -> None:
        line = Text("   Saved ")
        line.append(name, style="yellow")
        line.append(": ")
        line.append(value, style="green")
        self.console.print(line)

    def persisted(self, error: Optional[PersistenceError]) -> None:
        if error is None:
            self.console.print("   Variables saved to config file", style="dim")
        else:
            self.console.print(f"   [yellow]Warning: Failed to save config:[/] {escape(str(error))}")

    # ------------------------------------------------------------------
    # session rendering
    # ------------------------------------------------------------------
    def menu(self, next_step: Optional[Step], cursor: int) -> None:
        options = Table.grid(padding=(0, 2))
        options.add_column(justify="right")
        options.add_column()
        options.add_row("[bold yellow]v[/]", "Show all variables")
        options.add_row("[bold yellow]s[/]", "Set/update variable")
        options.add_row("[bold yellow]l[/]", "List all requests")
        options.add_row("[bold green]n[/]", "Execute next request")
        options.add_row("[bold green]a[/]", "Execute all remaining")
        options.add_row("[bold blue]1-N[/]", "Execute specific step (e.g., '3')")
        options.add_row("[bold red]q[/]", "Quit")
        if next_step is not None:
            footer = Text.assemble(("Next: ", "bold"), (f"Step {cursor + 1}", "blue"), ": ", (next_step.name, "green"))
        else:
            footer = Text("All requests completed", style="green")
        self.console.print(Panel(Group(options, Text(""), footer), title="Menu Options", title_align="left"))

    def variables(self, values: Mapping[str, str]) -> None:
        if not values:
            self.console.print(Panel(Text("No variables set", style="dim"), title="Current Variables", title_align="left"))
            return
        table = Table(title="Current Variables", title_justify="left", show_header=False)
        table.add_column(style="yellow")
        table.add_column(style="cyan", overflow="fold")
        for name, value in values.items():
            display = Text("<empty>", style="dim") if not value else Text(truncate(value, _VALUE_LIMIT))
            table.add_row(Text(name), display)
        self.console.print(table)

    def requests(self, steps: Iterable[Step], cursor: int) -> None:
        table = Table(title="Available Requests", title_justify="left")
        table.add_column("", justify="center")
        table.add_column("#", justify="right", style="bold")
        table.add_column("Method", style="magenta")
        table.add_column("Endpoint", style="cyan")
        table.add_column("Name", style="green")
        for index, step in enumerate(steps):
            if index < cursor:
                marker = Text("done", style="green")
            elif index == cursor:
                marker = Text("next", style="blue")
            else:
                marker = Text("pending", style="dim")
            table.add_row(marker, str(index + 1), Text(step.method.upper()), Text(step.endpoint), Text(step.name))
        self.console.print(table)

    def info(self, message: str) -> None:
        self.console.print(message, markup=False, highlight=False)

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/]")

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/] {escape(message)}")


__all__ = ["ConsoleView", "PromptFn", "truncate"]
