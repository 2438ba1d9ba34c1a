"""Colony CLI - run scripted swarms from YAML definitions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from colony import __version__
from colony.config import ColonyConfig
from colony.logging import configure_logging, get_logger
from colony.swarm import Message, MasterWorkerCoordinator, Swarm, SwarmError, load_swarm

app = typer.Typer(
    name="colony",
    help="Coordinate a swarm of agents on a task.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()
logger = get_logger("cli")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold cyan]colony[/bold cyan] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
):
    """Colony - registry, ledger, and coordination for cooperating agents."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _result_text(result: Any) -> str:
    if result is None:
        return "(no result)"
    if isinstance(result, Message):
        return result.content
    return getattr(result, "final_answer", str(result))


def ledger_table(swarm: Swarm) -> Table:
    """Render the swarm ledger as a table."""
    table = Table(title=f"Ledger ({len(swarm.messages)} messages)")
    table.add_column("ID", style="cyan")
    table.add_column("Type", style="bold")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Content")

    for message in swarm.messages:
        content = message.content if len(message.content) <= 60 else message.content[:57] + "..."
        table.add_row(
            message.id[:8],
            message.message_type.value,
            message.sender_id,
            ", ".join(message.recipient_ids) or "*",
            content,
        )
    return table


def _load(swarm_file: Path, config: ColonyConfig | None = None) -> Swarm:
    """Load a swarm, then apply strategy settings given outside the swarm file."""
    try:
        swarm = load_swarm(swarm_file)
        if config is not None:
            override = config.coordinator_override()
            if override is not None:
                logger.info(f"Coordinator from settings: {type(override).__name__}")
                swarm.coordinator = override
            elif "max_workers" in config.explicit and isinstance(
                swarm.coordinator, MasterWorkerCoordinator
            ):
                swarm.coordinator = MasterWorkerCoordinator(
                    swarm.coordinator.master_id, max_workers=config.max_workers
                )
    except SwarmError as exc:
        console.print(f"[red]Invalid swarm:[/red] {exc}")
        raise typer.Exit(1) from exc
    return swarm


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def run(
    swarm_file: Annotated[Path, typer.Argument(help="YAML swarm definition.")],
    task: Annotated[str, typer.Argument(help="Task for the swarm.")],
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="Colony config YAML.")
    ] = None,
    coordinator: Annotated[
        str | None,
        typer.Option("--coordinator", help="Override the strategy: default or master_worker."),
    ] = None,
    master: Annotated[
        str | None, typer.Option("--master", "-m", help="Master agent for master_worker.")
    ] = None,
    show_ledger: Annotated[
        bool, typer.Option("--ledger/--no-ledger", help="Print the message ledger.")
    ] = True,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON instead of tables.")] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show coordination logs on stderr.")
    ] = False,
):
    """Run TASK through the swarm defined in SWARM_FILE.

    Strategy settings from --coordinator/--master, COLONY_* variables or the
    config file replace the coordinator named in SWARM_FILE.
    """
    try:
        config = ColonyConfig.load(config_file)
    except SwarmError as exc:
        console.print(f"[red]Invalid config:[/red] {exc}")
        raise typer.Exit(1) from exc
    configure_logging(config, verbose=verbose)

    config.select_strategy(coordinator, master)
    swarm = _load(swarm_file, config)

    try:
        result = swarm.run(task)
    except SwarmError as exc:
        console.print(f"[red]Swarm failed:[/red] {exc}")
        raise typer.Exit(1) from exc

    if as_json:
        payload = {
            "result": _result_text(result),
            "messages": [m.to_dict() for m in swarm.messages],
        }
        console.print_json(json.dumps(payload))
        return

    console.print(Panel(_result_text(result), title="Result", border_style="green"))
    if show_ledger:
        console.print(ledger_table(swarm))


@app.command()
def validate(
    swarm_file: Annotated[Path, typer.Argument(help="YAML swarm definition.")],
):
    """Check a swarm definition and list its agents."""
    swarm = _load(swarm_file)

    table = Table(title=f"Swarm: {swarm_file.name}")
    table.add_column("Agent", style="cyan")
    table.add_column("Role")
    master_id = getattr(swarm.coordinator, "master_id", None)
    for name in swarm.agents:
        table.add_row(name, "master" if name == master_id else "agent")
    console.print(table)
    console.print(f"[green]Valid[/green] ({type(swarm.coordinator).__name__})")
