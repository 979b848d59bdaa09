"""Cache management commands."""

from pathlib import Path
from typing import Optional

import typer

from ..orchestrator import open_cache
from . import app
from ._common import cli_errors, console, resolve_config, resolve_root


@app.command()
def cache_info(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="Workspace root", file_okay=False),
):
    """Show discovery cache information and statistics."""
    with cli_errors(ctx):
        root = resolve_root(path)
        config = resolve_config(ctx, root)
        with open_cache(root, config) as cache:
            stats = cache.stats()

    console.print("[bold cyan]lintgate Cache Info[/bold cyan]")
    console.print()

    if stats.get("enabled"):
        console.print("Status: [green]Enabled[/green]")
        console.print(f"Directory: [blue]{stats.get('directory', 'N/A')}[/blue]")
        console.print(f"Entries: [yellow]{stats.get('size', 0)}[/yellow]")
        console.print(f"Size: [yellow]{stats.get('volume', 0)} bytes[/yellow]")
        console.print(f"TTL: [yellow]{stats.get('ttl_seconds', 0)}s[/yellow]")
    else:
        console.print("Status: [red]Disabled[/red]")


@app.command()
def cache_clear(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="Workspace root", file_okay=False),
):
    """Clear the discovery cache."""
    with cli_errors(ctx):
        root = resolve_root(path)
        config = resolve_config(ctx, root)

        if not config.cache_enabled:
            console.print("[yellow]Cache is disabled[/yellow]")
            raise typer.Exit(0)

        with open_cache(root, config) as cache:
            cache.clear()
    console.print("[green]Cache cleared successfully[/green]")
