"""Exception hierarchy for lintgate."""

from .base import LintGateError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)
from .pipeline import (
    DiscoveryError,
    ManifestError,
    ReportError,
    ReportPersistenceError,
)

__all__ = [
    "LintGateError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "DiscoveryError",
    "ManifestError",
    "ReportError",
    "ReportPersistenceError",
]
