"""Tests for weighted package categorization."""

import pytest

from lintgate.categorizer import (
    assign_tier,
    categorize,
    compute_weight,
    priority_weight,
    size_weight,
)
from lintgate.config import OrchestratorConfig
from lintgate.models import Package, Tier


def _pkg(name="pkg", size=0, typecheck=False, tests=False):
    return Package(
        name=name,
        path=f"/ws/packages/{name}",
        last_modified=0.0,
        has_type_checking=typecheck,
        has_tests=tests,
        is_private=False,
        size_bytes=size,
    )


@pytest.fixture
def cfg():
    return OrchestratorConfig(cache_enabled=False)


class TestWeights:
    def test_size_weight_boundaries(self, cfg):
        assert size_weight(500_000, cfg) == 0
        assert size_weight(500_001, cfg) == 1
        assert size_weight(1_000_000, cfg) == 1
        assert size_weight(1_000_001, cfg) == 2

    def test_priority_critical_beats_important(self, cfg):
        # "n8n-core" matches no critical pattern exactly, but "*core*" is important
        assert priority_weight("n8n-core", cfg) == 1
        assert priority_weight("n8n", cfg) == 2
        assert priority_weight("@n8n/nodes-base", cfg) == 2
        assert priority_weight("editor-ui-cli", cfg) == 2

    def test_priority_none(self, cfg):
        assert priority_weight("utils", cfg) == 0

    def test_priority_is_case_sensitive(self, cfg):
        assert priority_weight("CORE", cfg) == 0

    def test_custom_patterns(self):
        cfg = OrchestratorConfig(critical_patterns=["api"], important_patterns=["web-*"])
        assert priority_weight("api", cfg) == 2
        assert priority_weight("web-app", cfg) == 1
        assert priority_weight("api-client", cfg) == 0

    def test_compute_weight_is_additive(self, cfg):
        pkg = _pkg(name="@scope/core", size=2_000_000, typecheck=True, tests=True)
        assert compute_weight(pkg, cfg) == 2 + 2 + 1


class TestTierAssignment:
    @pytest.mark.parametrize(
        "weight,tier",
        [
            (0, Tier.LIGHT),
            (1, Tier.LIGHT),
            (2, Tier.MEDIUM),
            (3, Tier.MEDIUM),
            (4, Tier.HEAVY),
            (6, Tier.HEAVY),
        ],
    )
    def test_boundaries(self, cfg, weight, tier):
        assert assign_tier(weight, cfg) is tier

    def test_configurable_thresholds(self):
        cfg = OrchestratorConfig(heavy_weight_threshold=5, medium_weight_threshold=3)
        assert assign_tier(4, cfg) is Tier.MEDIUM
        assert assign_tier(2, cfg) is Tier.LIGHT


class TestCategorize:
    def test_every_package_lands_in_exactly_one_tier(self, cfg):
        packages = [
            _pkg("n8n", size=2_000_000, typecheck=True, tests=True),
            _pkg("util-a", typecheck=True, tests=True),
            _pkg("util-b"),
            _pkg("design-system", size=600_000),
        ]
        plan = categorize(packages, cfg)
        names = [c.name for c in plan.heavy + plan.medium + plan.light]
        assert sorted(names) == sorted(p.name for p in packages)
        assert len(plan) == 4

    def test_tiers_and_weights(self, cfg):
        plan = categorize(
            [
                _pkg("n8n", size=2_000_000, typecheck=True, tests=True),  # 6
                _pkg("util-a", typecheck=True, tests=True),  # 2
                _pkg("util-b", tests=True),  # 1
            ],
            cfg,
        )
        assert [c.name for c in plan.heavy] == ["n8n"]
        assert plan.heavy[0].weight == 6
        assert [c.name for c in plan.medium] == ["util-a"]
        assert [c.name for c in plan.light] == ["util-b"]
        assert plan.light[0].tier is Tier.LIGHT

    def test_largest_first_within_tier(self, cfg):
        plan = categorize(
            [
                _pkg("small-core", size=1_100_000, typecheck=True, tests=True),
                _pkg("big-core", size=5_000_000, typecheck=True, tests=True),
                _pkg("mid-core", size=2_000_000, typecheck=True, tests=True),
            ],
            cfg,
        )
        assert [c.name for c in plan.heavy] == ["big-core", "mid-core", "small-core"]

    def test_empty_input(self, cfg):
        plan = categorize([], cfg)
        assert len(plan) == 0

    def test_does_not_mutate_input_order(self, cfg):
        packages = [_pkg("a", size=1), _pkg("b", size=10)]
        categorize(packages, cfg)
        assert [p.name for p in packages] == ["a", "b"]
