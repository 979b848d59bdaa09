"""Lint orchestration pipeline.

    load baseline -> discover -> categorize -> tiered run -> finalize report
"""

from pathlib import Path
from typing import Callable, Optional

from .cache import PackageCache
from .categorizer import categorize
from .config import OrchestratorConfig
from .discovery import discover_packages
from .logging_config import get_logger
from .models import TierPlan
from .report import RunReport, load_previous_score
from .runner import ToolRunner
from .scheduler import ProgressCallback, TieredScheduler

logger = get_logger(__name__)


def open_cache(root: Path, config: OrchestratorConfig) -> PackageCache:
    return PackageCache(
        cache_dir=str(config.cache_path(root)),
        ttl_seconds=config.cache_ttl_seconds,
        enabled=config.cache_enabled,
    )


def run_quality_lint(
    root: Path,
    config: OrchestratorConfig,
    runner: Optional[ToolRunner] = None,
    cache: Optional[PackageCache] = None,
    on_result: Optional[ProgressCallback] = None,
    on_plan: Optional[Callable[[TierPlan], None]] = None,
) -> RunReport:
    """Run one full orchestration pass and persist its report.

    Args:
        root: Workspace root
        config: Orchestrator configuration
        runner: Tool runner (a subprocess runner by default)
        cache: Discovery cache; opened from config when omitted
        on_result: Optional per-package progress callback
        on_plan: Optional callback receiving the tier plan before execution

    Returns:
        The finalized RunReport

    Raises:
        ReportPersistenceError: If the report can't be written
    """
    root = Path(root)
    report_path = config.report_path(root)
    previous_score = load_previous_score(report_path)

    own_cache = cache is None
    if own_cache:
        cache = open_cache(root, config)
    try:
        packages = discover_packages(root, config, cache=cache)
    finally:
        if own_cache:
            cache.close()

    report = RunReport(
        total_packages=len(packages),
        previous_score=previous_score,
        issues_per_package=config.issues_per_package,
    )

    if not packages:
        logger.info("No packages to lint")
        return report.finalize(report_path)

    plan = categorize(packages, config)
    if on_plan is not None:
        on_plan(plan)
    TieredScheduler(root, config, runner=runner, on_result=on_result).run(plan, report)
    return report.finalize(report_path)
