"""Tests for lint output parsing and even-split attribution."""

import pytest

from lintgate.models import CheckStatus
from lintgate.parsing import failed_result, parse_lint_output, result_from_output, split_evenly


class TestParseLintOutput:
    def test_counts_lines_with_tokens(self):
        output = "\n".join(
            [
                "src/a.ts",
                "  1:1  error  Unexpected var",
                "  2:5  warning  Missing return type",
                "  3:1  error  no-undef",
                "✖ 3 problems",
            ]
        )
        assert parse_lint_output(output) == (2, 1)

    def test_line_can_count_for_both(self):
        assert parse_lint_output("1 error and 1 warning") == (1, 1)

    def test_case_sensitive(self):
        assert parse_lint_output("ERROR: boom\nWarning: careful") == (0, 0)

    def test_one_count_per_line(self):
        assert parse_lint_output("error error error") == (1, 0)

    def test_empty_output(self):
        assert parse_lint_output("") == (0, 0)

    def test_substring_match(self):
        # "errors" and "warnings" contain the tokens
        assert parse_lint_output("0 errors, 0 warnings") == (1, 1)


class TestSplitEvenly:
    def test_even_split(self):
        assert split_evenly(6, 3) == 2

    def test_rounds_half_up(self):
        assert split_evenly(5, 2) == 3
        assert split_evenly(1, 2) == 1

    def test_rounds_down_below_half(self):
        assert split_evenly(1, 3) == 0
        assert split_evenly(4, 3) == 1

    def test_zero_total(self):
        assert split_evenly(0, 8) == 0

    def test_rejects_empty_batch(self):
        with pytest.raises(ValueError):
            split_evenly(3, 0)


class TestResults:
    def test_failed_result(self):
        result = failed_result(42)
        assert (result.errors, result.warnings) == (1, 0)
        assert result.status is CheckStatus.FAILED
        assert result.duration_ms == 42

    def test_result_from_output(self):
        result = result_from_output("x error\ny warning\nz warning", 10)
        assert (result.errors, result.warnings) == (1, 2)
        assert result.status is CheckStatus.SUCCESS
