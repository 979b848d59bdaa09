"""Run report: aggregation, quality scoring, trend and persistence.

The baseline (previous run's score) is loaded explicitly and handed to the
RunReport at construction; ``finalize()`` computes the score and overwrites
the report file, so the baseline is always captured before it is replaced.
"""

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ReportError, ReportPersistenceError
from .logging_config import get_logger
from .models import CheckResult

logger = get_logger(__name__)

DEFAULT_ISSUES_PER_PACKAGE = 10

# (lower bound, label) checked top-down
RATINGS = (
    (95.0, "EXCELLENT"),
    (85.0, "GOOD"),
    (70.0, "FAIR"),
)


def compute_quality_score(
    errors: int,
    warnings: int,
    linted_packages: int,
    issues_per_package: int = DEFAULT_ISSUES_PER_PACKAGE,
) -> float:
    """Normalize issue counts to a 0-100 score.

    score = clamp(100 - issues / (issues_per_package * linted) * 100, 0, 100)

    With nothing linted the score is 100 when there are no issues and 0
    otherwise.
    """
    total_issues = errors + warnings
    max_issues = issues_per_package * linted_packages
    if max_issues <= 0:
        return 100.0 if total_issues == 0 else 0.0
    score = 100.0 - (total_issues / max_issues) * 100.0
    return round(max(0.0, min(100.0, score)), 2)


def rate_score(score: float) -> str:
    for bound, label in RATINGS:
        if score >= bound:
            return label
    return "POOR"


def load_report(path: Path) -> Optional[Dict[str, Any]]:
    """Read a persisted report, or None if missing or unreadable."""
    p = Path(path)
    if not p.exists():
        return None
    try:
        with open(p, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Cannot read report {p}: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Report {p} is not a JSON object")
        return None
    return data


def load_previous_score(path: Path) -> float:
    """Baseline score of the last persisted run; 0.0 if there is none."""
    data = load_report(path)
    if data is None:
        logger.info(f"No baseline report at {path}")
        return 0.0
    try:
        return float(data.get("quality_score") or 0.0)
    except (TypeError, ValueError):
        return 0.0


class RunReport:
    """Aggregate outcome of one orchestration pass.

    Totals are incremented as results are added and never recomputed from
    ``package_results``.
    """

    def __init__(
        self,
        total_packages: int = 0,
        previous_score: float = 0.0,
        issues_per_package: int = DEFAULT_ISSUES_PER_PACKAGE,
    ):
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.total_packages = total_packages
        self.linted_packages = 0
        self.errors = 0
        self.warnings = 0
        self.package_results: Dict[str, CheckResult] = {}
        self.quality_score = 0.0
        self.duration_ms: Optional[int] = None
        self.issues_per_package = issues_per_package
        self._previous_score = float(previous_score)
        self._started = time.monotonic()
        self._finalized = False

    @property
    def previous_score(self) -> float:
        return self._previous_score

    @property
    def trend(self) -> float:
        """Score change relative to the baseline run."""
        return round(self.quality_score - self._previous_score, 2)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add_package_result(self, name: str, result: CheckResult) -> None:
        if self._finalized:
            raise ReportError(f"Report already finalized; cannot add result for {name}")
        if name in self.package_results:
            raise ValueError(f"Result for package '{name}' already recorded")
        self.package_results[name] = result
        self.errors += result.errors
        self.warnings += result.warnings
        self.linted_packages += 1

    def calculate_quality_score(self) -> float:
        self.quality_score = compute_quality_score(
            self.errors, self.warnings, self.linted_packages, self.issues_per_package
        )
        return self.quality_score

    def finalize(self, path: Path) -> "RunReport":
        """Score the run and write the report to ``path``.

        The report is written on every run, improvement or not.

        Raises:
            ReportError: If the report was already finalized
            ReportPersistenceError: If the report cannot be written
        """
        if self._finalized:
            raise ReportError("Report already finalized")

        self.duration_ms = int((time.monotonic() - self._started) * 1000)
        self.calculate_quality_score()
        self._finalized = True

        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as e:
            raise ReportPersistenceError(path, str(e))

        logger.info(f"Saved report (score {self.quality_score}) to {path}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "total_packages": self.total_packages,
            "linted_packages": self.linted_packages,
            "errors": self.errors,
            "warnings": self.warnings,
            "package_results": {
                name: result.to_dict() for name, result in self.package_results.items()
            },
            "quality_score": self.quality_score,
            "previous_score": self._previous_score,
            "trend": self.trend,
            "duration_ms": self.duration_ms,
        }
