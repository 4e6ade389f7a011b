import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.table import Table

from vault_graph.models.graph import Graph
from vault_graph.services.config import AppConfig, get_config
from vault_graph.services.graph import GraphService
from vault_graph.services.vault import VaultError, VaultService

logger = logging.getLogger(__name__)

APP_HELP = """
vault-graph: Explore the link graph of a markdown vault.

Notes link to each other with [[wikilinks]] or [text](note.md) links.
Every command re-reads the vault, so output always matches what is on disk.

COMMANDS:
- graph:     Every note and link in the vault.
- stats:     Orphans, hubs and links pointing at missing notes.
- backlinks: Notes that link to a given note.
- outlinks:  Links written inside a given note.
- local:     The neighbourhood of a note, a few hops deep.
"""

app = typer.Typer(name="vault-graph", help=APP_HELP, no_args_is_help=True)


def _graph_service(ctx: typer.Context) -> GraphService:
    config: AppConfig = ctx.obj["config"]
    try:
        return GraphService(VaultService(config=config))
    except VaultError as exc:
        print(f"[red]Error: {exc.message}[/red]")
        raise typer.Exit(code=1)


def _print_graph(graph: Graph, title: str) -> None:
    table = Table(title=f"{title} ({len(graph.nodes)} notes, {len(graph.edges)} links)")
    table.add_column("Note", style="cyan")
    table.add_column("Out", justify="right")
    table.add_column("Back", justify="right")
    table.add_column("Total", justify="right", style="magenta")
    for node in graph.nodes:
        table.add_row(node.id, str(node.outlinks), str(node.backlinks), str(node.links))
    print(table)

    if graph.edges:
        edges = Table(title="Links")
        edges.add_column("From", style="cyan")
        edges.add_column("To", style="green")
        edges.add_column("Alias", style="dim")
        for edge in graph.edges:
            edges.add_row(edge.source, edge.target, edge.alias or "")
        print(edges)


@app.callback()
def main(
    ctx: typer.Context,
    vault: Optional[Path] = typer.Option(None, "--vault", "-v", help="Vault directory. Defaults to $VAULT_PATH or the current directory."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override $LOG_LEVEL (DEBUG, INFO, WARNING...)."),
):
    """
    Configure the vault location and logging for all commands.
    """
    try:
        config = get_config()
        updates = {}
        if vault is not None:
            updates["vault_path"] = str(vault)
        if log_level is not None:
            updates["log_level"] = log_level
        if updates:
            config = AppConfig(**{**config.model_dump(), **updates})
    except ValueError as exc:
        print(f"[red]Invalid configuration: {exc}[/red]")
        raise typer.Exit(code=1)

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.obj = {"config": config}


@app.command("graph")
def graph_command(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the full link graph of the vault.
    """
    graph = asyncio.run(_graph_service(ctx).build_graph())

    if json_output:
        typer.echo(graph.model_dump_json())
        return

    _print_graph(graph, "Vault graph")


@app.command("stats")
def stats_command(
    ctx: typer.Context,
    hubs: int = typer.Option(10, "--hubs", "-n", help="How many of the most connected notes to list"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Summarize the graph: totals, orphan notes, hubs and unresolved links.
    """
    stats = asyncio.run(_graph_service(ctx).get_statistics(hub_count=hubs))

    if json_output:
        typer.echo(stats.model_dump_json())
        return

    print(f"[bold]Notes:[/bold] {stats.total_nodes}  [bold]Links:[/bold] {stats.total_edges}")

    table = Table(title="Hubs")
    table.add_column("Note", style="cyan")
    table.add_column("Connections", justify="right", style="magenta")
    for hub in stats.hubs:
        table.add_row(hub.path, str(hub.connections))
    print(table)

    print(f"\n[bold]Orphans ({len(stats.orphans)}):[/bold]")
    for orphan in stats.orphans:
        print(f"  [dim]{orphan}[/dim]")

    print(f"\n[bold]Unresolved links ({len(stats.unresolved_links)}):[/bold]")
    for name in stats.unresolved_links:
        print(f"  [yellow]{name}[/yellow]")


@app.command("backlinks")
def backlinks_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Note path or name (extension optional)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List the notes that link to a note.
    """
    result = asyncio.run(_graph_service(ctx).get_backlinks(path))

    if json_output:
        typer.echo(result.model_dump_json())
        return

    if not result.backlinks:
        print(f"[yellow]No backlinks to {result.path}[/yellow]")
        return

    table = Table(title=f"Backlinks to {result.path}")
    table.add_column("From", style="cyan")
    table.add_column("Alias", style="dim")
    for entry in result.backlinks:
        table.add_row(entry.source, entry.context or "")
    print(table)


@app.command("outlinks")
def outlinks_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Note path or name (extension optional)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List the links written in a note, marking the ones that point nowhere.
    """
    result = asyncio.run(_graph_service(ctx).get_outlinks(path))

    if json_output:
        typer.echo(result.model_dump_json())
        return

    if not result.outlinks:
        print(f"[yellow]No outlinks from {result.path}[/yellow]")
        return

    table = Table(title=f"Outlinks from {result.path}")
    table.add_column("To", style="cyan")
    table.add_column("Resolved")
    table.add_column("Alias", style="dim")
    for entry in result.outlinks:
        status = "[green]yes[/green]" if entry.resolved else "[red]no[/red]"
        table.add_row(entry.target, status, entry.alias or "")
    print(table)


@app.command("local")
def local_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Centre note path or name (extension optional)"),
    depth: int = typer.Option(1, "--depth", "-d", help="How many hops from the centre note"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the subgraph within a few hops of a note.
    """
    graph = asyncio.run(_graph_service(ctx).get_local_graph(path, depth=depth))

    if json_output:
        typer.echo(graph.model_dump_json())
        return

    if not graph.nodes:
        print(f"[yellow]Note not found: {path}[/yellow]")
        return

    _print_graph(graph, f"Local graph of {path} (depth {depth})")


if __name__ == "__main__":
    app()
