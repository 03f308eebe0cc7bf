# src/peerboard/domain/services/scoring_config.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Category-based scoring configuration.

Purpose:
    Describe which metrics take part in category scoring, how much each
    metric weighs inside its category, and how much each category weighs in
    the total. Provide a default configuration derived from metric
    priorities and a validator that lists every problem it finds.

Layer:
    domain

Notes:
    - This module is pure domain logic:
        * No logging.
        * No I/O.
    - Weights are percentages. Metric weights are relative within their
      category; enabled category weights must sum to 100.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from peerboard.domain.enums.scoring import NormalizationMethod

HIGH_PRIORITY = 7
MEDIUM_PRIORITY = 5
DEFAULT_MIN_DATA_COMPLETENESS = 0.5
DEFAULT_MAX_METRICS_PER_CATEGORY = 10
_WEIGHT_TOLERANCE = 0.01


class PrioritizedMetric(Protocol):
    """Anything carrying an id, a category, and a 0-10 priority."""

    @property
    def metric_id(self) -> str: ...

    @property
    def category(self) -> str: ...

    @property
    def priority(self) -> float: ...


@dataclass(frozen=True, slots=True)
class ScoringMetricConfig:
    """One metric's place in category scoring."""

    metric_id: str
    weight: float
    category: str
    enabled: bool = True


@dataclass(frozen=True, slots=True)
class ScoringCategoryConfig:
    """A category, its share of the total, and its metrics."""

    category: str
    weight: float
    metrics: tuple[ScoringMetricConfig, ...] = ()
    enabled: bool = True

    @property
    def enabled_metrics(self) -> tuple[ScoringMetricConfig, ...]:
        return tuple(m for m in self.metrics if m.enabled)


@dataclass(frozen=True, slots=True)
class ScoringConfiguration:
    """Complete category scoring setup.

    Attributes:
        categories:
            Category configurations in display order.
        normalization_method:
            How each metric's values are mapped onto 0-100.
        include_missing_data:
            When True, an item missing a metric scores a neutral 50 for it
            instead of leaving it out.
        min_data_completeness:
            Share of items (0-1) that must have a metric for it to count.
        max_metrics_per_category:
            Cap used when a default configuration is derived.
    """

    categories: tuple[ScoringCategoryConfig, ...] = ()
    normalization_method: NormalizationMethod = NormalizationMethod.PERCENTILE
    include_missing_data: bool = False
    min_data_completeness: float = DEFAULT_MIN_DATA_COMPLETENESS
    max_metrics_per_category: int = DEFAULT_MAX_METRICS_PER_CATEGORY

    @property
    def enabled_categories(self) -> tuple[ScoringCategoryConfig, ...]:
        return tuple(c for c in self.categories if c.enabled)


@dataclass(frozen=True, slots=True)
class ScoringConfigValidation:
    valid: bool
    errors: tuple[str, ...] = ()


def _category_config(
    category: str, metrics: list[PrioritizedMetric], *, floor_priority: float
) -> ScoringCategoryConfig:
    priorities = [m.priority or floor_priority for m in metrics]
    total = sum(priorities)
    return ScoringCategoryConfig(
        category=category,
        weight=100.0,
        metrics=tuple(
            ScoringMetricConfig(
                metric_id=m.metric_id,
                weight=(p / total) * 100 if total > 0 else 100 / len(metrics),
                category=category,
            )
            for m, p in zip(metrics, priorities, strict=True)
        ),
    )


def default_scoring_config(
    metrics: Iterable[PrioritizedMetric],
    *,
    max_metrics_per_category: int = DEFAULT_MAX_METRICS_PER_CATEGORY,
) -> ScoringConfiguration:
    """Derive a configuration from metric priorities.

    High-priority metrics (7 and up) are used first. When none exist the
    medium tier (5 and up) is tried, then every metric. Within a category the
    strongest metrics are kept up to ``max_metrics_per_category`` and weighted
    by priority; the categories that remain share the total equally.

    Returns:
        ScoringConfiguration: Possibly with no categories when ``metrics`` is
        empty.
    """
    by_category: dict[str, list[PrioritizedMetric]] = {}
    for metric in metrics:
        by_category.setdefault(metric.category, []).append(metric)

    categories: list[ScoringCategoryConfig] = []
    for threshold, floor_priority in ((HIGH_PRIORITY, 0.0), (MEDIUM_PRIORITY, 0.0), (None, 1.0)):
        for category, members in by_category.items():
            chosen = sorted(
                (m for m in members if threshold is None or m.priority >= threshold),
                key=lambda m: -m.priority,
            )[:max_metrics_per_category]
            if chosen:
                categories.append(
                    _category_config(category, chosen, floor_priority=floor_priority)
                )
        if categories:
            break

    share = 100.0 / len(categories) if categories else 0.0
    return ScoringConfiguration(
        categories=tuple(
            ScoringCategoryConfig(
                category=c.category, weight=share, metrics=c.metrics, enabled=c.enabled
            )
            for c in categories
        ),
        max_metrics_per_category=max_metrics_per_category,
    )


def validate_scoring_config(config: ScoringConfiguration | None) -> ScoringConfigValidation:
    """Check ``config`` and collect every problem found."""
    if config is None:
        return ScoringConfigValidation(valid=False, errors=("configuration is missing",))
    if not config.categories:
        return ScoringConfigValidation(
            valid=False, errors=("at least one category must be enabled",)
        )

    errors: list[str] = []
    for category in config.enabled_categories:
        enabled = category.enabled_metrics
        if not enabled:
            errors.append(f'category "{category.category}" has no enabled metrics')
        if sum(m.weight for m in enabled) == 0:
            errors.append(f'category "{category.category}" has zero total weight')

    enabled_categories = config.enabled_categories
    if enabled_categories:
        total = sum(c.weight for c in enabled_categories)
        if abs(total - 100) > _WEIGHT_TOLERANCE:
            errors.append(f"category weights must sum to 100% (currently {total:.2f}%)")
    else:
        errors.append("at least one category must be enabled")

    if not 0 <= config.min_data_completeness <= 1:
        errors.append("min_data_completeness must be between 0 and 1")
    if config.max_metrics_per_category < 1:
        errors.append("max_metrics_per_category must be at least 1")

    return ScoringConfigValidation(valid=not errors, errors=tuple(errors))


__all__ = [
    "HIGH_PRIORITY",
    "MEDIUM_PRIORITY",
    "PrioritizedMetric",
    "ScoringCategoryConfig",
    "ScoringConfigValidation",
    "ScoringConfiguration",
    "ScoringMetricConfig",
    "default_scoring_config",
    "validate_scoring_config",
]
