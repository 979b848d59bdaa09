"""Data models for lintgate"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Tier(str, Enum):
    """Execution tier: decides isolation and concurrency policy."""

    HEAVY = "heavy"
    MEDIUM = "medium"
    LIGHT = "light"


class CheckStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class Package:
    """A discovered lintable sub-project of the workspace."""

    name: str
    path: str
    last_modified: float
    has_type_checking: bool
    has_tests: bool
    is_private: bool
    size_bytes: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Package":
        return cls(
            name=str(d["name"]),
            path=str(d["path"]),
            last_modified=float(d["last_modified"]),
            has_type_checking=bool(d["has_type_checking"]),
            has_tests=bool(d["has_tests"]),
            is_private=bool(d["is_private"]),
            size_bytes=int(d["size_bytes"]),
        )


@dataclass(frozen=True)
class CategorizedPackage:
    """A package together with its derived weight and tier for one run."""

    package: Package
    weight: int
    tier: Tier

    @property
    def name(self) -> str:
        return self.package.name


@dataclass
class TierPlan:
    """Packages bucketed by tier, each list largest-first."""

    heavy: List[CategorizedPackage] = field(default_factory=list)
    medium: List[CategorizedPackage] = field(default_factory=list)
    light: List[CategorizedPackage] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.heavy) + len(self.medium) + len(self.light)


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one package's lint analysis."""

    errors: int
    warnings: int
    duration_ms: Optional[int] = None
    status: CheckStatus = CheckStatus.SUCCESS

    def __post_init__(self) -> None:
        if self.errors < 0 or self.warnings < 0:
            raise ValueError("errors and warnings must be non-negative")

    @property
    def failed(self) -> bool:
        return self.status is CheckStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "errors": self.errors,
            "warnings": self.warnings,
            "duration_ms": self.duration_ms,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class ToolOutput:
    """Combined text output and exit status of one external tool invocation."""

    returncode: int
    output: str
    duration_ms: int
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


@dataclass(frozen=True)
class GateCheck:
    """One named pass/fail criterion of the quality gate."""

    name: str
    passed: bool
    message: str
    score: Optional[float] = None


@dataclass(frozen=True)
class GateResult:
    """Final gate verdict."""

    checks: tuple
    score: int
    passed: bool
    recommendations: tuple

    @property
    def passed_count(self) -> int:
        return sum(1 for c in self.checks if c.passed)

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1
