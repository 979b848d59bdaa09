"""External tool invocation.

Every lint, type-check, format, audit and build tool is an opaque subprocess.
Only its combined text output and exit status are consumed; a timeout or a
missing executable is reported as a failed ToolOutput rather than raised.

Tools run in their own session so that a timeout kills the whole process
group, including workers the tool spawned.
"""

import os
import re
import shlex
import signal
import subprocess
import time
from pathlib import Path
from typing import List, Sequence, Union

from .logging_config import get_logger
from .models import ToolOutput

logger = get_logger(__name__)

# Exit status reported when the executable itself cannot be started
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124

# Seconds to wait for pipes to drain after the process group is killed
_DRAIN_TIMEOUT = 5

_POSIX = hasattr(os, "killpg")

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def split_command(template: str, **params: object) -> List[str]:
    """Split a command template shell-style, then fill placeholders per token.

    Only ``{name}`` placeholders named in ``params`` are replaced; any other
    braces (e.g. an ``{ts,tsx}`` glob) are passed through untouched.
    Placeholder values are never re-split, so paths with spaces stay whole.

    >>> split_command("pnpm audit --audit-level {audit_level}", audit_level="high")
    ['pnpm', 'audit', '--audit-level', 'high']

    Raises:
        ValueError: If the template has unbalanced quotes
    """
    values = {key: str(value) for key, value in params.items()}

    def _fill(match: "re.Match[str]") -> str:
        return values.get(match.group(1), match.group(0))

    return [_PLACEHOLDER_RE.sub(_fill, token) for token in shlex.split(template)]


def validate_template(template: str, label: str, required: Sequence[str] = ()) -> None:
    """Check that a command template splits and carries its placeholders.

    Raises:
        ValueError: With ``label`` in the message
    """
    try:
        tokens = shlex.split(template)
    except ValueError as e:
        raise ValueError(f"{label} is not a valid command: {e}")
    found = {name for token in tokens for name in _PLACEHOLDER_RE.findall(token)}
    missing = [name for name in required if name not in found]
    if missing:
        raise ValueError(f"{label} must contain {', '.join('{' + m + '}' for m in missing)}")


class ToolRunner:
    """Runs a tool to completion or until its timeout."""

    def run(
        self,
        args: Sequence[str],
        cwd: Union[str, Path],
        timeout: float,
    ) -> ToolOutput:
        if not args:
            return ToolOutput(returncode=EXIT_NOT_FOUND, output="empty command", duration_ms=0)

        logger.debug(f"Running: {' '.join(args)} (timeout={timeout}s)")
        start = time.monotonic()
        try:
            proc = subprocess.Popen(
                list(args),
                cwd=str(cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                start_new_session=_POSIX,
            )
        except OSError as e:
            logger.warning(f"Cannot start {args[0]}: {e}")
            return ToolOutput(returncode=EXIT_NOT_FOUND, output=str(e), duration_ms=_elapsed_ms(start))

        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            _kill_process_group(proc)
            try:
                proc.communicate(timeout=_DRAIN_TIMEOUT)
            except subprocess.TimeoutExpired:
                logger.debug(f"Output pipes of {args[0]} still open after kill")
            duration_ms = _elapsed_ms(start)
            logger.warning(f"Timed out after {timeout}s: {' '.join(args)}")
            return ToolOutput(
                returncode=EXIT_TIMEOUT, output="", duration_ms=duration_ms, timed_out=True
            )

        output = stdout or ""
        if stderr:
            output = f"{output}\n{stderr}" if output else stderr
        return ToolOutput(
            returncode=proc.returncode, output=output, duration_ms=_elapsed_ms(start)
        )


def _kill_process_group(proc: subprocess.Popen) -> None:
    if not _POSIX:
        proc.kill()
        return
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        logger.debug(f"Process group {proc.pid} already exited")


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
