"""Quality gate decision engine.

Runs an ordered list of independent checks, each yielding GateCheck records,
and turns them into a single verdict:

    score  = round(100 * passed / total), halves rounded up
    passed = score >= pass_percentage   (default 85)

A checker that raises becomes a failed check carrying the exception text;
nothing a checker does can abort the gate.
"""

import math
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config import OrchestratorConfig
from ..logging_config import get_logger
from ..models import GateCheck, GateResult
from ..orchestrator import run_quality_lint
from ..report import RunReport, load_report
from ..runner import EXIT_NOT_FOUND, ToolRunner, split_command
from .security import count_comment_debt, iter_source_files, scan_security

logger = get_logger(__name__)

CheckCallback = Callable[[GateCheck], None]
LintRunner = Callable[[], RunReport]


def recommendation_for(check: GateCheck) -> str:
    return f"Fix: {check.name} - {check.message}"


def compute_gate_result(checks: Sequence[GateCheck], pass_percentage: int = 85) -> GateResult:
    """Aggregate checks into the final verdict."""
    total = len(checks)
    passed_count = sum(1 for c in checks if c.passed)
    score = int(math.floor(100 * passed_count / total + 0.5)) if total else 0
    return GateResult(
        checks=tuple(checks),
        score=score,
        passed=score >= pass_percentage,
        recommendations=tuple(recommendation_for(c) for c in checks if not c.passed),
    )


class QualityGate:
    """Collects gate checks for one workspace and renders the verdict."""

    def __init__(
        self,
        root: Path,
        config: OrchestratorConfig,
        runner: Optional[ToolRunner] = None,
        lint_runner: Optional[LintRunner] = None,
        on_check: Optional[CheckCallback] = None,
    ):
        self.root = Path(root)
        self.config = config
        self.runner = runner or ToolRunner()
        self.lint_runner = lint_runner or (
            lambda: run_quality_lint(self.root, self.config, runner=self.runner)
        )
        self.on_check = on_check
        self.checks: List[GateCheck] = []

    def add_check(self, check: GateCheck) -> None:
        self.checks.append(check)
        if check.passed:
            logger.info(f"{check.name}: {check.message}")
        else:
            logger.warning(f"{check.name}: {check.message}")
        if self.on_check is not None:
            self.on_check(check)

    def _guarded(self, name: str, checker: Callable[[], List[GateCheck]]) -> None:
        try:
            results = checker()
        except Exception as e:
            logger.debug(f"Checker {name} raised", exc_info=True)
            results = [GateCheck(name=name, passed=False, message=f"Check failed: {e}")]
        for check in results:
            self.add_check(check)

    def run_all(
        self,
        include_build: bool = False,
        report: Optional[Dict[str, Any]] = None,
    ) -> GateResult:
        """Run every check in order and compute the verdict.

        Each call starts from an empty check list.

        Args:
            include_build: Also run the (slow) build verification check
            report: Lint report to judge; loaded or produced when omitted
        """
        self.checks = []
        gate_cfg = self.config.gate
        self._guarded("Lint Quality", lambda: self.check_lint_quality(report))
        self._guarded("Type Check", self.check_typecheck)
        self._guarded("Security Scan", self.check_security)
        self._guarded("Formatting", self.check_formatting)
        self._guarded("TODO Comments", self.check_comment_debt)
        self._guarded("Dependencies", self.check_dependencies)
        if include_build:
            self._guarded("Build", self.check_build)

        return compute_gate_result(self.checks, gate_cfg.pass_percentage)

    # ── Lint report ──────────────────────────────────────────────

    def _obtain_report(self) -> Optional[Dict[str, Any]]:
        report_path = self.config.report_path(self.root)
        if not report_path.exists():
            logger.info("No lint report found, running quality lint first")
            return self.lint_runner().to_dict()
        return load_report(report_path)

    def check_lint_quality(self, report: Optional[Dict[str, Any]] = None) -> List[GateCheck]:
        gate_cfg = self.config.gate
        if report is None:
            report = self._obtain_report()
        if report is None:
            return [GateCheck("Lint Quality", False, "Lint quality report is unreadable")]

        score = float(report.get("quality_score", 0.0))
        errors = int(report.get("errors", 0))
        warnings = int(report.get("warnings", 0))
        return [
            GateCheck(
                name="Lint Quality Score",
                passed=score >= gate_cfg.min_quality_score,
                message=f"{score:g}% (min: {gate_cfg.min_quality_score:g}%)",
                score=score,
            ),
            GateCheck(
                name="Error Count",
                passed=errors <= gate_cfg.max_errors,
                message=f"{errors} errors (max: {gate_cfg.max_errors})",
            ),
            GateCheck(
                name="Warning Count",
                passed=warnings <= gate_cfg.max_warnings,
                message=f"{warnings} warnings (max: {gate_cfg.max_warnings})",
            ),
        ]

    # ── External tools ───────────────────────────────────────────

    def _run_tool(self, command: List[str], timeout: int) -> bool:
        return self.runner.run(command, cwd=self.root, timeout=timeout).ok

    def check_typecheck(self) -> List[GateCheck]:
        ok = self._run_tool(
            split_command(self.config.gate.typecheck_command),
            self.config.gate.check_timeout_seconds,
        )
        message = "All files type-check successfully" if ok else "Type checking errors detected"
        return [GateCheck("Type Check", ok, message)]

    def check_formatting(self) -> List[GateCheck]:
        ok = self._run_tool(
            split_command(self.config.gate.format_command),
            self.config.gate.check_timeout_seconds,
        )
        message = "Code formatting is consistent" if ok else "Code formatting issues detected"
        return [GateCheck("Formatting", ok, message)]

    def check_dependencies(self) -> List[GateCheck]:
        gate_cfg = self.config.gate
        out = self.runner.run(
            split_command(gate_cfg.audit_command, audit_level=gate_cfg.audit_level),
            cwd=self.root,
            timeout=gate_cfg.check_timeout_seconds,
        )
        if out.ok:
            return [GateCheck("Dependencies", True, "No critical dependency vulnerabilities")]
        if out.timed_out or out.returncode == EXIT_NOT_FOUND:
            return [GateCheck("Dependencies", False, "Dependency check failed")]
        return [GateCheck("Dependencies", False, "Dependency vulnerabilities detected")]

    def check_build(self) -> List[GateCheck]:
        ok = self._run_tool(
            split_command(self.config.gate.build_command),
            self.config.gate.build_timeout_seconds,
        )
        message = (
            "Build process completes successfully" if ok else "Build process failed or timed out"
        )
        return [GateCheck("Build", ok, message)]

    # ── Source scans ─────────────────────────────────────────────

    def _source_dir(self) -> Path:
        candidate = self.root / self.config.packages_dir
        return candidate if candidate.is_dir() else self.root

    def check_security(self) -> List[GateCheck]:
        gate_cfg = self.config.gate
        files = list(
            iter_source_files(
                self._source_dir(),
                gate_cfg.security_extensions,
                self.config.skip_dirs,
                limit=gate_cfg.security_max_files,
            )
        )
        findings = scan_security(files, self.root)
        if not findings:
            return [GateCheck("Security Scan", True, "No security issues detected")]
        return [
            GateCheck(
                "Security Scan",
                False,
                f"{len(findings)} potential security issues found",
                score=float(len(findings)),
            )
        ]

    def check_comment_debt(self) -> List[GateCheck]:
        gate_cfg = self.config.gate
        files = list(
            iter_source_files(
                self._source_dir(), gate_cfg.security_extensions, self.config.skip_dirs
            )
        )
        count = count_comment_debt(files)
        return [
            GateCheck(
                "TODO Comments",
                count < gate_cfg.max_todo_comments,
                f"{count} TODO/FIXME comments found (limit: {gate_cfg.max_todo_comments})",
                score=float(count),
            )
        ]
