"""Lint command: run the tiered lint orchestration and score it."""

from pathlib import Path
from typing import Optional

import typer

from ..orchestrator import run_quality_lint
from . import app
from ._common import cli_errors, console, resolve_config, resolve_root
from ._display import print_lint_summary, print_plan, print_result


@app.command()
def lint(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(
        None,
        help="Workspace root (defaults to the current directory)",
        file_okay=False,
        dir_okay=True,
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Ignore the discovery cache and rescan the workspace",
    ),
):
    """
    Discover packages, lint them tier by tier and record the quality score.

    Exits 1 when the score falls below [bold]lint_fail_below[/bold] (70 by default).

    [bold cyan]Examples:[/bold cyan]

      lintgate lint

      lintgate lint ../monorepo --no-cache
    """
    with cli_errors(ctx):
        root = resolve_root(path)
        overrides = {"cache_enabled": False} if no_cache else {}
        config = resolve_config(ctx, root, **overrides)

        console.print("[bold cyan]Quality lint[/bold cyan]: analysing workspace packages")
        console.print()

        report = run_quality_lint(
            root,
            config,
            on_plan=lambda plan: print_plan(
                plan, config.medium_concurrency, config.light_concurrency
            ),
            on_result=print_result,
        )
        if report.total_packages == 0:
            console.print("[green]No packages to lint[/green]")
        print_lint_summary(report, config.report_path(root))

        if report.quality_score < config.lint_fail_below:
            raise typer.Exit(1)
