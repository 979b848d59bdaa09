"""Lint output parsing and batch attribution.

Counting is deliberately coarse: any line containing ``error`` counts as one
error and any line containing ``warning`` as one warning (case-sensitive, a
line may count for both). Batch totals are split evenly across members.
"""

import math
from typing import Optional, Tuple

from .models import CheckResult, CheckStatus

ERROR_TOKEN = "error"
WARNING_TOKEN = "warning"


def parse_lint_output(output: str) -> Tuple[int, int]:
    """Return ``(errors, warnings)`` counted line by line."""
    errors = 0
    warnings = 0
    for line in output.split("\n"):
        if ERROR_TOKEN in line:
            errors += 1
        if WARNING_TOKEN in line:
            warnings += 1
    return errors, warnings


def split_evenly(total: int, members: int) -> int:
    """Per-member share of a batch total, ``total / members`` rounded half up.

    The shares are an approximation: they need not add back up to ``total``.
    """
    if members < 1:
        raise ValueError("members must be at least 1")
    return int(math.floor(total / members + 0.5))


def failed_result(duration_ms: Optional[int] = None) -> CheckResult:
    """Result recorded for a package whose invocation failed or timed out."""
    return CheckResult(errors=1, warnings=0, duration_ms=duration_ms, status=CheckStatus.FAILED)


def result_from_output(output: str, duration_ms: Optional[int] = None) -> CheckResult:
    errors, warnings = parse_lint_output(output)
    return CheckResult(errors=errors, warnings=warnings, duration_ms=duration_ms)
