"""Pipeline exceptions: discovery and report persistence."""

from pathlib import Path

from .base import LintGateError


class DiscoveryError(LintGateError):
    """Base class for package discovery errors."""

    pass


class ManifestError(DiscoveryError):
    """Raised when a package manifest cannot be read or parsed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot parse manifest: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class ReportError(LintGateError):
    """Base class for run report errors."""

    pass


class ReportPersistenceError(ReportError):
    """Raised when the run report cannot be written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot write report: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
