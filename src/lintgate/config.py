"""Configuration loading and management for lintgate.

Every policy constant of the pipeline (tier boundaries, cache TTL, timeouts,
concurrency caps, gate thresholds) lives here. Configuration sources are
merged in priority order:
    1. Defaults (defined in OrchestratorConfig)
    2. Global config (~/.lintgate.toml)
    3. Workspace config (<workspace>/lintgate.toml)
    4. Explicit config file
    5. Environment variables (LINTGATE_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(heavy_timeout_seconds=60)
    >>> config.heavy_timeout_seconds
    60
    >>> config.gate.min_quality_score
    80.0
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .runner import validate_template

Verbosity = Literal["quiet", "normal", "verbose"]
Attribution = Literal["even-split", "per-package"]

ATTRIBUTION_MODES = ("even-split", "per-package")


@dataclass(frozen=True)
class GateConfig:
    """Thresholds and external commands for the quality gate.

    Attributes:
        Lint report thresholds:
            min_quality_score: Lowest acceptable lint quality score (0-100)
            max_errors: Highest acceptable total error count
            max_warnings: Highest acceptable total warning count

        Comment debt:
            max_todo_comments: Marker line count must stay strictly below this

        Verdict:
            pass_percentage: Share of passing checks (0-100) required to pass

        External commands (shell-style templates, split with shlex):
            typecheck_command: Type checker over the whole workspace
            format_command: Formatting checker
            audit_command: Dependency vulnerability scanner; ``{audit_level}``
                is replaced with ``audit_level``
            build_command: Optional build verification

        Security scan:
            security_extensions: File suffixes scanned for anti-patterns
            security_max_files: Upper bound on files scanned
    """

    min_quality_score: float = 80.0
    max_errors: int = 0
    max_warnings: int = 10
    max_todo_comments: int = 50
    pass_percentage: int = 85

    typecheck_command: str = "pnpm run typecheck"
    format_command: str = "pnpm run format:check"
    audit_command: str = "pnpm audit --audit-level {audit_level}"
    audit_level: str = "moderate"
    build_command: str = "pnpm run build:fast"

    check_timeout_seconds: int = 600
    build_timeout_seconds: int = 300

    security_extensions: list[str] = field(default_factory=lambda: [".ts", ".js"])
    security_max_files: int = 100

    def __post_init__(self) -> None:
        """Validate gate thresholds."""
        if not 0.0 <= self.min_quality_score <= 100.0:
            raise ValueError("min_quality_score must be between 0 and 100")
        if not 0 <= self.pass_percentage <= 100:
            raise ValueError("pass_percentage must be between 0 and 100")
        if self.max_errors < 0:
            raise ValueError("max_errors must be non-negative")
        if self.max_warnings < 0:
            raise ValueError("max_warnings must be non-negative")
        if self.max_todo_comments < 0:
            raise ValueError("max_todo_comments must be non-negative")
        if self.check_timeout_seconds < 1 or self.build_timeout_seconds < 1:
            raise ValueError("gate timeouts must be at least 1 second")
        if self.security_max_files < 1:
            raise ValueError("security_max_files must be at least 1")
        for label in ("typecheck_command", "format_command", "audit_command", "build_command"):
            validate_template(getattr(self, label), label)


@dataclass(frozen=True)
class PerfConfig:
    """Build performance monitor settings."""

    build_command: str = "pnpm run build"
    log_file: str = "build-performance.log"
    timeout_seconds: int = 3600
    # Average build durations (ms) used for the assessment line
    slow_build_ms: float = 300_000.0
    fast_build_ms: float = 120_000.0

    def __post_init__(self) -> None:
        if self.timeout_seconds < 1:
            raise ValueError("perf timeout_seconds must be at least 1")
        if self.fast_build_ms > self.slow_build_ms:
            raise ValueError("fast_build_ms must not exceed slow_build_ms")
        validate_template(self.build_command, "build_command")


@dataclass(frozen=True)
class OrchestratorConfig:
    """Configuration for a lint orchestration run.

    Attributes:
        Discovery:
            packages_dir: Directory under the workspace root holding packages
            manifest_name: Per-package manifest file
            lint_script: Manifest script that marks a package lintable
            test_scripts: Manifest scripts that mark a package as tested
            typecheck_config: File whose presence marks type checking
            skip_dirs: Vendor/build directories never descended into

        Caching:
            cache_enabled: Reuse discovery results across runs
            cache_dir: Cache directory, relative to the workspace root
            cache_ttl_seconds: Age after which the discovery cache is stale

        Categorization:
            large_size_bytes / medium_size_bytes: size weight boundaries
            critical_patterns / important_patterns: fnmatch name patterns
            heavy_weight_threshold / medium_weight_threshold: tier boundaries

        Execution:
            lint_command: Lint runner command template
            filter_template: Per-package target selector
            batch_args: Extra arguments for batch runs (``{concurrency}``)
            heavy_timeout_seconds: Timeout per heavy package
            batch_timeout_seconds: Timeout per medium/light batch
            medium_concurrency / light_concurrency: batch concurrency caps
            attribution: ``even-split`` or ``per-package`` for batch tiers

        Scoring:
            issues_per_package: Tolerated issues per linted package
            lint_fail_below: ``lintgate lint`` exits 1 below this score
            report_file: RunReport path, relative to the workspace root
    """

    # Discovery
    packages_dir: str = "packages"
    manifest_name: str = "package.json"
    lint_script: str = "lint"
    test_scripts: list[str] = field(default_factory=lambda: ["test", "test:unit"])
    typecheck_config: str = "tsconfig.json"
    skip_dirs: list[str] = field(
        default_factory=lambda: [
            "node_modules",
            "dist",
            "build",
            "out",
            "coverage",
            "vendor",
            ".git",
            ".turbo",
            ".next",
            ".cache",
        ]
    )

    # Caching
    cache_enabled: bool = True
    cache_dir: str = ".lintgate-cache"
    cache_ttl_seconds: int = 3600

    # Categorization
    large_size_bytes: int = 1_000_000
    medium_size_bytes: int = 500_000
    critical_patterns: list[str] = field(
        default_factory=lambda: ["*nodes-base*", "n8n", "*editor-ui*"]
    )
    important_patterns: list[str] = field(
        default_factory=lambda: ["*core*", "*cli*", "*design-system*"]
    )
    heavy_weight_threshold: int = 4
    medium_weight_threshold: int = 2

    # Execution
    lint_command: str = "turbo run lint --cache-dir=.turbo"
    filter_template: str = "--filter=./{path}"
    batch_args: str = "--parallel --concurrency={concurrency}"
    heavy_timeout_seconds: int = 120
    batch_timeout_seconds: int = 300
    medium_concurrency: int = 4
    light_concurrency: int = 8
    attribution: Attribution = "even-split"

    # Scoring and report
    issues_per_package: int = 10
    lint_fail_below: float = 70.0
    report_file: str = "lint-quality-report.json"

    # Output control
    verbosity: Verbosity = "normal"

    gate: GateConfig = field(default_factory=GateConfig)
    perf: PerfConfig = field(default_factory=PerfConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.cache_ttl_seconds < 0:
            raise ValueError("cache_ttl_seconds must be non-negative")

        if self.large_size_bytes < self.medium_size_bytes:
            raise ValueError("large_size_bytes must be >= medium_size_bytes")
        if self.medium_size_bytes < 0:
            raise ValueError("medium_size_bytes must be non-negative")
        if self.heavy_weight_threshold <= self.medium_weight_threshold:
            raise ValueError("heavy_weight_threshold must exceed medium_weight_threshold")

        if self.heavy_timeout_seconds < 1 or self.batch_timeout_seconds < 1:
            raise ValueError("timeouts must be at least 1 second")
        if self.medium_concurrency < 1 or self.light_concurrency < 1:
            raise ValueError("concurrency caps must be at least 1")
        if self.attribution not in ATTRIBUTION_MODES:
            raise ValueError(f"attribution must be one of {', '.join(ATTRIBUTION_MODES)}")
        validate_template(self.lint_command, "lint_command")
        validate_template(self.filter_template, "filter_template", required=("path",))
        validate_template(self.batch_args, "batch_args")

        if self.issues_per_package < 1:
            raise ValueError("issues_per_package must be at least 1")
        if not 0.0 <= self.lint_fail_below <= 100.0:
            raise ValueError("lint_fail_below must be between 0 and 100")

    def report_path(self, root: Path) -> Path:
        return Path(root) / self.report_file

    def cache_path(self, root: Path) -> Path:
        return Path(root) / self.cache_dir


DEFAULT_CONFIG = OrchestratorConfig()

# TOML section name -> nested dataclass
_SECTIONS = {"gate": GateConfig, "perf": PerfConfig}


def load_config(
    config_file: Optional[Path] = None,
    workspace: Optional[Path] = None,
    **overrides: Any,
) -> OrchestratorConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        workspace: Workspace root searched for ``lintgate.toml``
            (defaults to the current directory)
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated OrchestratorConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".lintgate.toml"
    if global_config.exists():
        _merge(merged, _load_config_file(global_config, "global config"))

    project_config = (workspace or Path.cwd()) / "lintgate.toml"
    if project_config.exists():
        _merge(merged, _load_config_file(project_config, "workspace config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        _merge(merged, _load_config_file(config_file, "config file"))

    _merge(merged, _load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    _merge(merged, overrides)

    for section, section_cls in _SECTIONS.items():
        value = merged.pop(section, None)
        if value is None:
            continue
        if isinstance(value, dict):
            try:
                merged[section] = section_cls(**value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid [{section}] config: {e}")
        elif isinstance(value, section_cls):
            merged[section] = value

    try:
        return OrchestratorConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _merge(target: dict, source: dict) -> None:
    """Merge ``source`` into ``target``; section tables merge key by key."""
    for key, value in source.items():
        if key in _SECTIONS and isinstance(value, dict) and isinstance(target.get(key), dict):
            target[key] = {**target[key], **value}
        else:
            target[key] = value


def _load_config_file(path: Path, label: str) -> dict:
    try:
        return _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from LINTGATE_* environment variables.

    Top-level fields map to ``LINTGATE_<FIELD>``; gate and perf fields map to
    ``LINTGATE_GATE_<FIELD>`` and ``LINTGATE_PERF_<FIELD>``. List fields are
    not settable from the environment.

    Returns:
        Dict of field_name -> parsed_value for any LINTGATE_* vars found.
    """
    result = _env_for(OrchestratorConfig, "LINTGATE_")
    for section, section_cls in _SECTIONS.items():
        section_values = _env_for(section_cls, f"LINTGATE_{section.upper()}_")
        if section_values:
            result[section] = section_values
    return result


def _env_for(cls: type, prefix: str) -> dict[str, Any]:
    type_hints = get_type_hints(cls)
    result: dict[str, Any] = {}

    for field_name in cls.__dataclass_fields__:
        if field_name in _SECTIONS:
            continue
        env_key = f"{prefix}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns:
        Parsed value or None if the field type is not settable from env

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
