"""Entry point for the apiline CLI."""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from .config import ApilineSettings, load_config
from .errors import DefinitionParseError
from .transport import HttpTransport
from .tui.console import ConsoleView
from .tui.repl import ApilineRepl
from .watch import FileChangeSignal
from .workflows import StepExecutor, WorkflowEngine, YamlDefinitionSource

app = typer.Typer(add_completion=False, rich_markup_mode="rich")


def _create_console(use_color: bool) -> Console:
    return Console(no_color=not use_color, highlight=use_color)


def _configure_logging(console: Console, verbose: bool) -> None:
    logger = logging.getLogger("apiline")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(console=console, show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _show_splash(console: Console, config: Path) -> None:
    console.print(
        Panel(
            f"[dim]Watching: {escape(str(config))}\nConfig will auto-reload on file changes[/]",
            title="[bold blue]APIline - Interactive API Workflow Tool[/]",
        )
    )


def _load_settings(settings_path: Optional[Path], console: Console) -> ApilineSettings:
    try:
        return load_config(settings_path)
    except (ValidationError, tomllib.TOMLDecodeError) as exc:
        console.print(f"[bold red]Invalid settings:[/] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=2) from exc


@app.command()
def run(
    config: Path = typer.Argument(..., help="Workflow definition (YAML) to execute"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Server base URL"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="Default API key for admin authentication"),
    start_from: Optional[int] = typer.Option(None, "--start-from", min=1, help="Start from specific step number"),
    settings_path: Optional[Path] = typer.Option(None, "--settings", "-c", help="Settings file (TOML)"),
    color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Force colored output on or off"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print settings and requests, then exit"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Interactive CLI tool for executing API workflows step-by-step."""
    settings = _load_settings(settings_path, _create_console(color if color is not None else True))
    updates: dict[str, object] = {}
    if base_url is not None:
        updates["base_url"] = base_url.rstrip("/")
    if api_key is not None:
        updates["api_key"] = api_key
    if color is not None:
        updates["use_color"] = color
    if updates:
        settings = settings.model_copy(update=updates)

    console = _create_console(settings.use_color)
    _configure_logging(console, verbose)

    source = YamlDefinitionSource(config)
    try:
        definition = source.load()
    except DefinitionParseError as exc:
        console.print(f"[bold red]Error:[/] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc

    view = ConsoleView(console)
    if dry_run:
        console.print(Panel(settings.model_dump_json(indent=2), title="configuration"))
        view.requests(definition.steps, 0)
        view.variables(definition.variables)
        return

    start_at = start_from - 1 if start_from is not None else 0
    with HttpTransport(timeout=settings.request_timeout) as transport, FileChangeSignal(
        config, interval=settings.watch_interval
    ) as signal:
        executor = StepExecutor(
            transport=transport,
            source=source,
            view=view,
            base_url=settings.base_url,
            default_admin_key=settings.api_key,
            jwt_variable=settings.jwt_variable,
        )
        engine = WorkflowEngine(definition, source=source, executor=executor, start_at=start_at)
        repl = ApilineRepl(engine, view, signal)
        _show_splash(console, config)
        try:
            repl.run()
        except KeyboardInterrupt:
            console.print("\nGoodbye!")


def entrypoint() -> None:
    """Typer entrypoint for `apiline`."""
    app()


if __name__ == "__main__":  # pragma: no cover
    entrypoint()
