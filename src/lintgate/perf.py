"""Build performance monitor.

Each measured build appends one line to the perf log:

    2026-10-19T09:30:00+00:00 [build] 81234.50ms {"success": true, "command": "pnpm run build"}

``analyze_performance`` reads back the ``[build]`` lines and summarizes them.
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import OrchestratorConfig
from .logging_config import get_logger
from .runner import ToolRunner, split_command

logger = get_logger(__name__)

_DURATION_RE = re.compile(r"(\d+\.\d+)ms")


@dataclass(frozen=True)
class PerfSample:
    operation: str
    duration_ms: float
    success: bool


@dataclass(frozen=True)
class PerfSummary:
    count: int
    average_ms: float
    fastest_ms: float
    slowest_ms: float
    assessment: Optional[str]  # "slow", "good", or None in between


def log_performance(log_path: Path, operation: str, duration_ms: float, details: dict) -> None:
    timestamp = datetime.now(timezone.utc).isoformat()
    line = f"{timestamp} [{operation}] {duration_ms:.2f}ms {json.dumps(details)}\n"
    with open(log_path, "a", encoding="utf-8") as f:
        f.write(line)


def measure_command(
    root: Path,
    config: OrchestratorConfig,
    operation: str = "build",
    runner: Optional[ToolRunner] = None,
) -> PerfSample:
    """Run the build command once and log its duration."""
    runner = runner or ToolRunner()
    perf_cfg = config.perf
    command = split_command(perf_cfg.build_command)
    out = runner.run(command, cwd=root, timeout=perf_cfg.timeout_seconds)

    details = {"success": out.ok, "command": perf_cfg.build_command}
    if not out.ok:
        details["error"] = "timed out" if out.timed_out else f"exit {out.returncode}"
    log_performance(Path(root) / perf_cfg.log_file, operation, float(out.duration_ms), details)

    logger.info(f"{operation}: {out.duration_ms}ms ({'ok' if out.ok else 'failed'})")
    return PerfSample(operation=operation, duration_ms=float(out.duration_ms), success=out.ok)


def analyze_performance(
    log_path: Path,
    slow_build_ms: float = 300_000.0,
    fast_build_ms: float = 120_000.0,
) -> Optional[PerfSummary]:
    """Summarize ``[build]`` entries of the perf log; None when there are none."""
    if not Path(log_path).exists():
        return None

    durations = []
    with open(log_path, encoding="utf-8") as f:
        for line in f:
            if "[build]" not in line:
                continue
            match = _DURATION_RE.search(line)
            durations.append(float(match.group(1)) if match else 0.0)

    if not durations:
        return None

    average = sum(durations) / len(durations)
    if average > slow_build_ms:
        assessment: Optional[str] = "slow"
    elif average < fast_build_ms:
        assessment = "good"
    else:
        assessment = None

    return PerfSummary(
        count=len(durations),
        average_ms=average,
        fastest_ms=min(durations),
        slowest_ms=max(durations),
        assessment=assessment,
    )
