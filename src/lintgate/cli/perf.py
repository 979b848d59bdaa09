"""Perf command: measure and summarize build durations."""

from pathlib import Path
from typing import Optional

import typer

from ..perf import analyze_performance, measure_command
from . import app
from ._common import cli_errors, console, resolve_config, resolve_root

ACTIONS = ("build", "analyze", "monitor")


@app.command()
def perf(
    ctx: typer.Context,
    action: str = typer.Argument(..., help="One of: build, analyze, monitor"),
    path: Optional[Path] = typer.Argument(
        None,
        help="Workspace root (defaults to the current directory)",
        file_okay=False,
        dir_okay=True,
    ),
):
    """
    Build performance monitor.

      [bold]build[/bold]    run the build and log its duration

      [bold]analyze[/bold]  summarize logged build durations

      [bold]monitor[/bold]  run the build, log it, exit 1 on failure
    """
    if action not in ACTIONS:
        console.print(f"[red]Unknown action:[/red] {action} (expected one of {', '.join(ACTIONS)})")
        raise typer.Exit(1)

    with cli_errors(ctx):
        root = resolve_root(path)
        config = resolve_config(ctx, root)

        if action == "analyze":
            summary = analyze_performance(
                root / config.perf.log_file,
                slow_build_ms=config.perf.slow_build_ms,
                fast_build_ms=config.perf.fast_build_ms,
            )
            if summary is None:
                console.print("[yellow]No build performance data available[/yellow]")
                return
            console.print("[bold cyan]Build performance analysis[/bold cyan]")
            console.print(f"  Total builds: {summary.count}")
            console.print(f"  Average: {summary.average_ms:.2f}ms ({summary.average_ms / 60000:.1f}min)")
            console.print(f"  Fastest: {summary.fastest_ms:.2f}ms ({summary.fastest_ms / 60000:.1f}min)")
            console.print(f"  Slowest: {summary.slowest_ms:.2f}ms ({summary.slowest_ms / 60000:.1f}min)")
            if summary.assessment == "slow":
                console.print("[yellow]Average build time is high - consider optimization[/yellow]")
            elif summary.assessment == "good":
                console.print("[green]Build performance is good[/green]")
            return

        operation = "build" if action == "build" else "monitored_build"
        sample = measure_command(root, config, operation=operation)
        console.print(f"{operation}: {sample.duration_ms:.2f}ms")
        if action == "monitor":
            if sample.success:
                console.print("[green]Build completed successfully[/green]")
            else:
                console.print("[red]Build failed[/red]")
                raise typer.Exit(1)
