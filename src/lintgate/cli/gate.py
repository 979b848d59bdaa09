"""Gate commands: full quality analysis and the gate decision alone."""

import time
from pathlib import Path
from typing import Optional

import typer

from ..config import OrchestratorConfig
from ..gate import QualityGate
from ..models import GateResult
from ..orchestrator import run_quality_lint
from . import app
from ._common import cli_errors, console, resolve_config, resolve_root
from ._display import print_check, print_gate_result, print_lint_summary


def _run_gate(root: Path, config: OrchestratorConfig, include_build: bool, report=None) -> GateResult:
    console.print("[bold cyan]Starting quality gate analysis[/bold cyan]")
    console.print()
    start = time.monotonic()
    gate = QualityGate(root, config, on_check=print_check)
    result = gate.run_all(include_build=include_build, report=report)
    print_gate_result(result, time.monotonic() - start)
    return result


@app.command()
def check(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(
        None,
        help="Workspace root (defaults to the current directory)",
        file_okay=False,
        dir_okay=True,
    ),
    include_build: bool = typer.Option(
        False,
        "--include-build",
        help="Include build verification (slower)",
    ),
):
    """
    Run a fresh lint pass, then the full quality gate.

    Exit codes: 0 = gate passed, 1 = gate failed or orchestration error.

    [bold cyan]Examples:[/bold cyan]

      lintgate check

      lintgate check --include-build
    """
    with cli_errors(ctx):
        root = resolve_root(path)
        config = resolve_config(ctx, root)

        report = run_quality_lint(root, config)
        print_lint_summary(report, config.report_path(root))
        console.print()

        result = _run_gate(root, config, include_build, report=report.to_dict())
        raise typer.Exit(result.exit_code)


@app.command()
def gate(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(
        None,
        help="Workspace root (defaults to the current directory)",
        file_okay=False,
        dir_okay=True,
    ),
    include_build: bool = typer.Option(
        False,
        "--include-build",
        help="Include build verification (slower)",
    ),
):
    """
    Run the quality gate, reusing the existing lint report when present.

    Without a report, a lint pass runs first.

    [bold cyan]Examples:[/bold cyan]

      lintgate gate

      lintgate gate /path/to/workspace --include-build
    """
    with cli_errors(ctx):
        root = resolve_root(path)
        config = resolve_config(ctx, root)
        result = _run_gate(root, config, include_build)
        raise typer.Exit(result.exit_code)
