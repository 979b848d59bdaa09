"""Tests for the build performance monitor."""

import json

from lintgate.perf import analyze_performance, log_performance, measure_command


class TestLogPerformance:
    def test_line_format(self, tmp_path):
        log = tmp_path / "build-performance.log"
        log_performance(log, "build", 1234.5, {"success": True})
        line = log.read_text().strip()
        timestamp, op, duration, details = line.split(" ", 3)
        assert op == "[build]"
        assert duration == "1234.50ms"
        assert json.loads(details) == {"success": True}
        assert "T" in timestamp

    def test_appends(self, tmp_path):
        log = tmp_path / "perf.log"
        log_performance(log, "build", 1.0, {})
        log_performance(log, "build", 2.0, {})
        assert len(log.read_text().splitlines()) == 2


class TestAnalyzePerformance:
    def test_missing_log(self, tmp_path):
        assert analyze_performance(tmp_path / "none.log") is None

    def test_no_build_entries(self, tmp_path):
        log = tmp_path / "perf.log"
        log_performance(log, "monitored_build", 10.0, {})
        assert analyze_performance(log) is None

    def test_summary(self, tmp_path):
        log = tmp_path / "perf.log"
        for ms in (60_000.0, 90_000.0, 120_000.0):
            log_performance(log, "build", ms, {"success": True})
        summary = analyze_performance(log)
        assert summary.count == 3
        assert summary.average_ms == 90_000.0
        assert summary.fastest_ms == 60_000.0
        assert summary.slowest_ms == 120_000.0
        assert summary.assessment == "good"

    def test_slow_assessment(self, tmp_path):
        log = tmp_path / "perf.log"
        log_performance(log, "build", 400_000.0, {})
        assert analyze_performance(log).assessment == "slow"

    def test_in_between(self, tmp_path):
        log = tmp_path / "perf.log"
        log_performance(log, "build", 200_000.0, {})
        assert analyze_performance(log).assessment is None


class TestMeasureCommand:
    def test_logs_successful_build(self, tmp_path, config, runner_factory, outputs):
        runner = runner_factory([("pnpm run build", outputs.ok(duration_ms=4200))])
        sample = measure_command(tmp_path, config, runner=runner)

        assert sample.success is True
        assert sample.duration_ms == 4200.0
        assert runner.calls[0]["timeout"] == 3600
        line = (tmp_path / "build-performance.log").read_text()
        assert "[build] 4200.00ms" in line
        assert '"command": "pnpm run build"' in line

    def test_logs_failure_reason(self, tmp_path, config, runner_factory, outputs):
        runner = runner_factory([("pnpm", outputs.timed_out())])
        sample = measure_command(tmp_path, config, operation="monitored_build", runner=runner)

        assert sample.success is False
        line = (tmp_path / "build-performance.log").read_text()
        assert "[monitored_build]" in line
        assert '"error": "timed out"' in line
