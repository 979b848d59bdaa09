"""
lintgate - Workspace Quality Orchestrator

Discovers the lintable packages of a multi-package workspace, lints them
under a tiered concurrency policy, folds the results into a 0-100 quality
score with run-over-run trend, and gates releases on that score plus a set
of independent checks.
"""

__version__ = "0.1.0"

from .categorizer import categorize
from .config import GateConfig, OrchestratorConfig, load_config
from .discovery import discover_packages
from .gate import QualityGate, compute_gate_result
from .models import CheckResult, GateCheck, GateResult, Package, Tier
from .orchestrator import run_quality_lint
from .report import RunReport, compute_quality_score

__all__ = [
    "run_quality_lint",  # Main entry point
    "QualityGate",
    "compute_gate_result",
    "discover_packages",
    "categorize",
    "compute_quality_score",
    "load_config",
    "OrchestratorConfig",
    "GateConfig",
    "RunReport",
    "Package",
    "Tier",
    "CheckResult",
    "GateCheck",
    "GateResult",
]
