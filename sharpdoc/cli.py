"""CLI entry point for sharpdoc."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from sharpdoc.annotator import BatchOrchestrator, BatchReport
from sharpdoc.config import SharpdocConfig, load_config
from sharpdoc.config.loader import DEFAULT_CONFIG_TEMPLATE
from sharpdoc.llm import ResilientCompletionClient, create_llm_provider
from sharpdoc.output import OutputSink
from sharpdoc.workspace import NoInputError

app = typer.Typer(
    name="sharpdoc",
    help="Generate XML documentation comments for C# declarations.",
)

config_app = typer.Typer(help="Manage sharpdoc configuration.")
app.add_typer(config_app, name="config")

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Global state
_config: SharpdocConfig | None = None


def _get_config() -> SharpdocConfig:
    if _config is None:
        return load_config()
    return _config


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.INFO),
        format="%(levelname)s:%(name)s:%(message)s",
    )
    # SDK request logs are noise at info level.
    for name in ("httpx", "openai", "anthropic"):
        logging.getLogger(name).setLevel(logging.WARNING)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to sharpdoc.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _configure_logging(_config.log_level)


def _display_report(report: BatchReport) -> None:
    table = Table(title=f"Files ({len(report.files)})")
    table.add_column("File", style="cyan")
    table.add_column("Annotated", justify="right", style="green")
    table.add_column("Skipped", justify="right")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Status")
    for result in report.files:
        if result.written:
            status = "[green]written[/green]"
        else:
            status = f"[red]{escape(result.error or 'failed')}[/red]"
        table.add_row(
            str(result.path),
            str(result.report.annotated),
            str(result.report.skipped + result.report.unchanged),
            str(result.report.failed),
            status,
        )
    rprint(table)
    rprint(
        f"[bold]{report.written}[/bold] file(s) written, "
        f"[bold]{report.failed}[/bold] failed, "
        f"[bold]{report.annotated}[/bold] declaration(s) annotated"
    )


@app.command()
def annotate(
    folder: Path = typer.Option(..., "--folder", "-f", help="Root folder to search"),
    api_key: str | None = typer.Option(
        None, "--api-key", help="API key (defaults to the env var named by llm.api_key_env)"
    ),
    glob: str | None = typer.Option(
        None, "--glob", "-g", help="Glob of .sln, .csproj or .cs files (default: **/*.csproj)"
    ),
) -> None:
    """Write generated doc comments into every matching C# file, in place."""
    cfg = _get_config()
    if not folder.is_dir():
        rprint(f"[red]Error:[/red] Folder not found: {folder}")
        raise typer.Exit(1)

    try:
        provider = create_llm_provider(cfg.llm, api_key)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    client = ResilientCompletionClient(provider, cfg.retry)
    sink = OutputSink()
    orchestrator = BatchOrchestrator(
        client, sink, settings=cfg.annotate, discovery=cfg.discovery
    )

    try:
        report = asyncio.run(orchestrator.run(folder, glob))
    except NoInputError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _display_report(report)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default sharpdoc.yaml in current directory."""
    target = Path("sharpdoc.yaml")
    if target.exists() and not force:
        rprint("[yellow]sharpdoc.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
