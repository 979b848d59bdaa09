"""Tiered lint execution.

    heavy   one invocation per package, strictly sequential, largest first,
            per-package timeout
    medium  one batch invocation, tool-side concurrency cap (default 4)
    light   one batch invocation, tool-side concurrency cap (default 8)

Any failure or timeout is recorded as a failed result (1 error, 0 warnings)
for every package in the invocation's scope; the run always continues.
In ``per-package`` attribution mode, batch tiers run each member on its own
instead of splitting the batch totals evenly.
"""

import os
from pathlib import Path
from typing import Callable, List, Optional

from .config import OrchestratorConfig
from .logging_config import get_logger
from .models import CategorizedPackage, CheckResult, CheckStatus, Tier, TierPlan
from .parsing import failed_result, parse_lint_output, result_from_output, split_evenly
from .report import RunReport
from .runner import ToolRunner, split_command

logger = get_logger(__name__)

# Called after each recorded result: (tier, package name, result)
ProgressCallback = Callable[[Tier, str, CheckResult], None]


class TieredScheduler:
    """Runs the lint command for every package of a TierPlan."""

    def __init__(
        self,
        root: Path,
        config: OrchestratorConfig,
        runner: Optional[ToolRunner] = None,
        on_result: Optional[ProgressCallback] = None,
    ):
        self.root = Path(root)
        self.config = config
        self.runner = runner or ToolRunner()
        self.on_result = on_result

    def run(self, plan: TierPlan, report: RunReport) -> RunReport:
        """Execute heavy, then medium, then light, recording into ``report``."""
        logger.info(
            f"Tier distribution: heavy={len(plan.heavy)} "
            f"medium={len(plan.medium)} light={len(plan.light)}"
        )
        self.run_heavy(plan.heavy, report)
        self.run_batch(Tier.MEDIUM, plan.medium, self.config.medium_concurrency, report)
        self.run_batch(Tier.LIGHT, plan.light, self.config.light_concurrency, report)
        return report

    # ── Command construction ─────────────────────────────────────

    def _filter_arg(self, pkg: CategorizedPackage) -> List[str]:
        rel = os.path.relpath(pkg.package.path, self.root).replace(os.sep, "/")
        return split_command(self.config.filter_template, path=rel)

    def single_command(self, pkg: CategorizedPackage) -> List[str]:
        return split_command(self.config.lint_command) + self._filter_arg(pkg)

    def batch_command(self, members: List[CategorizedPackage], concurrency: int) -> List[str]:
        args = split_command(self.config.lint_command)
        for pkg in members:
            args.extend(self._filter_arg(pkg))
        args.extend(split_command(self.config.batch_args, concurrency=concurrency))
        return args

    # ── Tiers ────────────────────────────────────────────────────

    def _record(self, tier: Tier, name: str, result: CheckResult, report: RunReport) -> None:
        report.add_package_result(name, result)
        if self.on_result is not None:
            self.on_result(tier, name, result)

    def _run_single(self, pkg: CategorizedPackage, timeout: int) -> CheckResult:
        out = self.runner.run(self.single_command(pkg), cwd=self.root, timeout=timeout)
        if not out.ok:
            reason = "timed out" if out.timed_out else f"exit {out.returncode}"
            logger.warning(f"Lint failed for {pkg.name} ({reason})")
            return failed_result(out.duration_ms)
        return result_from_output(out.output, out.duration_ms)

    def run_heavy(self, members: List[CategorizedPackage], report: RunReport) -> None:
        for pkg in members:
            logger.info(f"Linting {pkg.name} (heavy, weight {pkg.weight})")
            result = self._run_single(pkg, self.config.heavy_timeout_seconds)
            self._record(Tier.HEAVY, pkg.name, result, report)

    def run_batch(
        self,
        tier: Tier,
        members: List[CategorizedPackage],
        concurrency: int,
        report: RunReport,
    ) -> None:
        if not members:
            return

        timeout = self.config.batch_timeout_seconds
        if self.config.attribution == "per-package":
            for pkg in members:
                self._record(tier, pkg.name, self._run_single(pkg, timeout), report)
            return

        logger.info(f"Linting {len(members)} {tier.value} packages (concurrency {concurrency})")
        out = self.runner.run(self.batch_command(members, concurrency), cwd=self.root, timeout=timeout)

        if not out.ok:
            reason = "timed out" if out.timed_out else f"exit {out.returncode}"
            logger.warning(f"{tier.value.capitalize()} batch failed ({reason})")
            for pkg in members:
                self._record(tier, pkg.name, failed_result(out.duration_ms), report)
            return

        errors, warnings = parse_lint_output(out.output)
        logger.info(f"{tier.value.capitalize()} batch: {errors} errors, {warnings} warnings")
        share = CheckResult(
            errors=split_evenly(errors, len(members)),
            warnings=split_evenly(warnings, len(members)),
            duration_ms=out.duration_ms,
            status=CheckStatus.SUCCESS,
        )
        for pkg in members:
            self._record(tier, pkg.name, share, report)
