"""Shared CLI helpers."""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

import typer
from rich.console import Console

from ..config import OrchestratorConfig, load_config
from ..exceptions import InvalidPathError, LintGateError
from ..logging_config import get_logger, setup_logging

console = Console()

logger = get_logger(__name__)


def resolve_root(path: Optional[Path]) -> Path:
    root = (path or Path.cwd()).resolve()
    if not root.is_dir():
        raise InvalidPathError(root, "Workspace root is not a directory")
    return root


def resolve_config(ctx: typer.Context, root: Path, **overrides: Any) -> OrchestratorConfig:
    """Configure logging and build settings from global CLI options."""
    obj = ctx.obj or {}
    verbose = bool(obj.get("verbose"))
    quiet = bool(obj.get("quiet"))
    log_file = obj.get("log_file")
    setup_logging(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)
    return load_config(
        config_file=obj.get("config_file"),
        workspace=root,
        verbose=verbose,
        quiet=quiet,
        **overrides,
    )


@contextmanager
def cli_errors(ctx: typer.Context) -> Iterator[None]:
    """Map failures to exit codes: LintGateError and unexpected errors -> 1."""
    verbose = bool((ctx.obj or {}).get("verbose"))
    try:
        yield
    except typer.Exit:
        raise
    except LintGateError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)
