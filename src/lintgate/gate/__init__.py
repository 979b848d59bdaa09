"""Quality gate: independent pass/fail checks aggregated into one verdict."""

from .engine import QualityGate, compute_gate_result, recommendation_for
from .security import (
    SECURITY_PATTERNS,
    SecurityFinding,
    count_comment_debt,
    iter_source_files,
    scan_security,
)

__all__ = [
    "QualityGate",
    "compute_gate_result",
    "recommendation_for",
    "SECURITY_PATTERNS",
    "SecurityFinding",
    "count_comment_debt",
    "iter_source_files",
    "scan_security",
]
