"""Weighted package categorization.

weight = size weight (0-2) + complexity weight (0-2) + priority weight (0-2)

    heavy   weight >= heavy_weight_threshold   (default 4)
    medium  weight >= medium_weight_threshold  (default 2)
    light   otherwise

Packages are sorted by size, largest first, before bucketing; the heavy tier
relies on that order for its sequential run.
"""

from fnmatch import fnmatchcase
from typing import Iterable, List

from .config import OrchestratorConfig
from .models import CategorizedPackage, Package, Tier, TierPlan


def size_weight(size_bytes: int, config: OrchestratorConfig) -> int:
    if size_bytes > config.large_size_bytes:
        return 2
    if size_bytes > config.medium_size_bytes:
        return 1
    return 0


def complexity_weight(package: Package) -> int:
    return int(package.has_type_checking) + int(package.has_tests)


def priority_weight(name: str, config: OrchestratorConfig) -> int:
    if _matches(name, config.critical_patterns):
        return 2
    if _matches(name, config.important_patterns):
        return 1
    return 0


def _matches(name: str, patterns: Iterable[str]) -> bool:
    return any(fnmatchcase(name, pattern) for pattern in patterns)


def compute_weight(package: Package, config: OrchestratorConfig) -> int:
    return (
        size_weight(package.size_bytes, config)
        + complexity_weight(package)
        + priority_weight(package.name, config)
    )


def assign_tier(weight: int, config: OrchestratorConfig) -> Tier:
    if weight >= config.heavy_weight_threshold:
        return Tier.HEAVY
    if weight >= config.medium_weight_threshold:
        return Tier.MEDIUM
    return Tier.LIGHT


def categorize(packages: List[Package], config: OrchestratorConfig) -> TierPlan:
    """Bucket packages into tiers, largest first within each tier."""
    plan = TierPlan()
    buckets = {Tier.HEAVY: plan.heavy, Tier.MEDIUM: plan.medium, Tier.LIGHT: plan.light}

    for package in sorted(packages, key=lambda p: p.size_bytes, reverse=True):
        weight = compute_weight(package, config)
        tier = assign_tier(weight, config)
        buckets[tier].append(CategorizedPackage(package=package, weight=weight, tier=tier))

    return plan
