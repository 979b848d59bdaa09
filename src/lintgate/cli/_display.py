"""Console rendering for lint summaries and gate results."""

from pathlib import Path

from rich.table import Table

from ..models import CheckResult, GateCheck, GateResult, Tier, TierPlan
from ..report import RunReport, rate_score
from ._common import console

_RATING_STYLE = {
    "EXCELLENT": ("bold green", "Code quality is outstanding"),
    "GOOD": ("green", "Code quality meets standards"),
    "FAIR": ("yellow", "Code quality needs improvement"),
    "POOR": ("bold red", "Urgent code quality fixes needed"),
}


def print_plan(plan: TierPlan, medium_concurrency: int, light_concurrency: int) -> None:
    console.print("[bold]Package distribution:[/bold]")
    console.print(f"  Heavy:  {len(plan.heavy)} packages (sequential)")
    console.print(f"  Medium: {len(plan.medium)} packages (concurrency: {medium_concurrency})")
    console.print(f"  Light:  {len(plan.light)} packages (concurrency: {light_concurrency})")
    console.print()


def print_result(tier: Tier, name: str, result: CheckResult) -> None:
    seconds = round((result.duration_ms or 0) / 1000)
    if result.failed:
        console.print(f"  [red]✗[/red] {name} [dim]({tier.value}, {seconds}s)[/dim] failed to lint")
    else:
        console.print(
            f"  [green]✓[/green] {name} [dim]({tier.value}, {seconds}s)[/dim] "
            f"{result.errors} errors, {result.warnings} warnings"
        )


def print_lint_summary(report: RunReport, report_path: Path) -> None:
    trend = report.trend
    arrow = "[green]↗[/green]" if trend >= 0 else "[red]↘[/red]"
    sign = "+" if trend > 0 else ""
    duration = round((report.duration_ms or 0) / 1000)

    console.print()
    console.print("[bold cyan]QUALITY REPORT SUMMARY[/bold cyan]")
    console.print("═" * 50)
    console.print(f"Packages:      {report.linted_packages}/{report.total_packages}")
    console.print(f"Errors:        {report.errors}")
    console.print(f"Warnings:      {report.warnings}")
    console.print(f"Quality score: {report.quality_score}% {arrow} ({sign}{trend:.1f})")
    console.print(f"Duration:      {duration}s")

    rating = rate_score(report.quality_score)
    style, blurb = _RATING_STYLE[rating]
    console.print(f"[{style}]{rating}[/{style}] - {blurb}")
    console.print(f"Full report: [blue]{report_path}[/blue]")


def print_check(check: GateCheck) -> None:
    mark = "[green]✓[/green]" if check.passed else "[red]✗[/red]"
    console.print(f"{mark} {check.name}: {check.message}")


def print_gate_result(result: GateResult, duration_s: float) -> None:
    console.print()
    console.print(f"Total analysis time: {round(duration_s)}s")
    console.print()
    console.print("[bold cyan]QUALITY GATE RESULTS[/bold cyan]")
    console.print("═" * 50)

    table = Table(show_header=True, pad_edge=True)
    table.add_column("Check", min_width=20)
    table.add_column("Result")
    table.add_column("Detail")
    for check in result.checks:
        status = "[green]PASS[/green]" if check.passed else "[red]FAIL[/red]"
        table.add_row(check.name, status, check.message)
    console.print(table)

    console.print(f"Checks: {result.passed_count}/{len(result.checks)} passed")
    console.print(f"Score:  {result.score}%")
    status = "[bold green]PASSED[/bold green]" if result.passed else "[bold red]FAILED[/bold red]"
    console.print(f"Status: {status}")

    if result.recommendations:
        console.print()
        console.print("[bold]RECOMMENDATIONS:[/bold]")
        for i, rec in enumerate(result.recommendations, 1):
            console.print(f"{i}. {rec}")

    console.print()
    if result.passed:
        console.print("[green]Quality gate passed. Code is ready for merge.[/green]")
    else:
        console.print("[red]Quality gate failed. Please address the issues above.[/red]")
