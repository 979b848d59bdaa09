"""Tests for configuration loading and validation."""

import os

import pytest

from lintgate.config import GateConfig, OrchestratorConfig, PerfConfig, load_config
from lintgate.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep the user's home config and LINTGATE_* variables out of the way."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("LINTGATE_"):
            monkeypatch.delenv(key)
    return home


class TestDefaults:
    def test_pipeline_defaults(self):
        cfg = OrchestratorConfig()
        assert cfg.cache_ttl_seconds == 3600
        assert cfg.heavy_timeout_seconds == 120
        assert cfg.batch_timeout_seconds == 300
        assert cfg.medium_concurrency == 4
        assert cfg.light_concurrency == 8
        assert cfg.heavy_weight_threshold == 4
        assert cfg.medium_weight_threshold == 2
        assert cfg.issues_per_package == 10
        assert cfg.attribution == "even-split"

    def test_gate_defaults(self):
        gate = OrchestratorConfig().gate
        assert gate.min_quality_score == 80.0
        assert gate.max_errors == 0
        assert gate.max_warnings == 10
        assert gate.max_todo_comments == 50
        assert gate.pass_percentage == 85

    def test_paths(self, tmp_path):
        cfg = OrchestratorConfig()
        assert cfg.report_path(tmp_path) == tmp_path / "lint-quality-report.json"
        assert cfg.cache_path(tmp_path) == tmp_path / ".lintgate-cache"


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"cache_ttl_seconds": -1},
            {"medium_size_bytes": 2_000_000},
            {"heavy_weight_threshold": 2},
            {"heavy_timeout_seconds": 0},
            {"light_concurrency": 0},
            {"attribution": "round-robin"},
            {"issues_per_package": 0},
            {"lint_fail_below": 101.0},
            {"lint_command": "npx eslint 'src"},
            {"filter_template": "--filter=./packages"},
        ],
    )
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            OrchestratorConfig(**kwargs)

    def test_gate_rejects_bad_percentage(self):
        with pytest.raises(ValueError):
            GateConfig(pass_percentage=120)

    def test_perf_rejects_inverted_thresholds(self):
        with pytest.raises(ValueError):
            PerfConfig(slow_build_ms=1000.0, fast_build_ms=2000.0)

    def test_accepts_brace_glob_lint_command(self):
        cfg = OrchestratorConfig(lint_command="npx eslint 'src/**/*.{ts,tsx}'")
        assert cfg.lint_command.endswith("{ts,tsx}'")

    def test_gate_rejects_unsplittable_command(self):
        with pytest.raises(ValueError, match="audit_command"):
            GateConfig(audit_command="pnpm audit \"--level")

    def test_bad_template_fails_at_load(self, tmp_path):
        (tmp_path / "lintgate.toml").write_text("filter_template = \"--filter=all\"\n")
        with pytest.raises(ConfigurationError, match="filter_template"):
            load_config(workspace=tmp_path)


class TestLoadConfig:
    def test_no_files_gives_defaults(self, tmp_path):
        assert load_config(workspace=tmp_path) == OrchestratorConfig()

    def test_workspace_file(self, tmp_path):
        (tmp_path / "lintgate.toml").write_text(
            'heavy_timeout_seconds = 60\n'
            'critical_patterns = ["*api*"]\n'
            '\n'
            '[gate]\n'
            'max_warnings = 25\n'
        )
        cfg = load_config(workspace=tmp_path)
        assert cfg.heavy_timeout_seconds == 60
        assert cfg.critical_patterns == ["*api*"]
        assert cfg.gate.max_warnings == 25
        assert cfg.gate.max_errors == 0

    def test_global_then_workspace_sections_merge(self, tmp_path, isolated_env):
        (isolated_env / ".lintgate.toml").write_text("[gate]\nmax_errors = 3\nmax_warnings = 4\n")
        (tmp_path / "lintgate.toml").write_text("[gate]\nmax_warnings = 7\n")
        cfg = load_config(workspace=tmp_path)
        assert cfg.gate.max_errors == 3
        assert cfg.gate.max_warnings == 7

    def test_explicit_file_wins_over_workspace(self, tmp_path):
        (tmp_path / "lintgate.toml").write_text("light_concurrency = 2\n")
        explicit = tmp_path / "ci.toml"
        explicit.write_text("light_concurrency = 16\n")
        assert load_config(config_file=explicit, workspace=tmp_path).light_concurrency == 16

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=tmp_path / "nope.toml", workspace=tmp_path)

    def test_invalid_toml(self, tmp_path):
        (tmp_path / "lintgate.toml").write_text("this is = = not toml")
        with pytest.raises(ConfigurationError):
            load_config(workspace=tmp_path)

    def test_unknown_key(self, tmp_path):
        (tmp_path / "lintgate.toml").write_text("no_such_option = 1\n")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(workspace=tmp_path)

    def test_invalid_section_value(self, tmp_path):
        (tmp_path / "lintgate.toml").write_text("[gate]\npass_percentage = 300\n")
        with pytest.raises(ConfigurationError, match=r"\[gate\]"):
            load_config(workspace=tmp_path)

    def test_env_vars(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LINTGATE_CACHE_ENABLED", "false")
        monkeypatch.setenv("LINTGATE_MEDIUM_CONCURRENCY", "2")
        monkeypatch.setenv("LINTGATE_GATE_MIN_QUALITY_SCORE", "90.5")
        monkeypatch.setenv("LINTGATE_PERF_BUILD_COMMAND", "make build")
        cfg = load_config(workspace=tmp_path)
        assert cfg.cache_enabled is False
        assert cfg.medium_concurrency == 2
        assert cfg.gate.min_quality_score == 90.5
        assert cfg.perf.build_command == "make build"

    def test_env_var_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "lintgate.toml").write_text("[gate]\nmax_errors = 5\n")
        monkeypatch.setenv("LINTGATE_GATE_MAX_ERRORS", "1")
        assert load_config(workspace=tmp_path).gate.max_errors == 1

    def test_bad_env_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LINTGATE_CACHE_ENABLED", "maybe")
        with pytest.raises(ConfigurationError, match="LINTGATE_CACHE_ENABLED"):
            load_config(workspace=tmp_path)

    def test_overrides_win(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LINTGATE_CACHE_ENABLED", "true")
        cfg = load_config(workspace=tmp_path, cache_enabled=False)
        assert cfg.cache_enabled is False

    def test_verbose_and_quiet_flags(self, tmp_path):
        assert load_config(workspace=tmp_path, verbose=True).verbosity == "verbose"
        assert load_config(workspace=tmp_path, quiet=True).verbosity == "quiet"
        assert load_config(workspace=tmp_path, verbose=False, quiet=False).verbosity == "normal"
