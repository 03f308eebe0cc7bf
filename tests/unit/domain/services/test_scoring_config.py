# tests/unit/domain/services/test_scoring_config.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT

from __future__ import annotations

from dataclasses import dataclass

import pytest

from peerboard.domain.services.scoring_config import (
    ScoringCategoryConfig,
    ScoringConfiguration,
    ScoringMetricConfig,
    default_scoring_config,
    validate_scoring_config,
)


@dataclass(frozen=True)
class _Metric:
    metric_id: str
    category: str
    priority: float


def test_default_config_prefers_high_priority_metrics() -> None:
    metrics = [
        _Metric("pe", "Valuation", 9),
        _Metric("pb", "Valuation", 7),
        _Metric("beta", "Risk", 5),
        _Metric("roe", "Profitability", 8),
    ]

    config = default_scoring_config(metrics)

    assert [c.category for c in config.categories] == ["Valuation", "Profitability"]
    assert [c.weight for c in config.categories] == [50.0, 50.0]
    valuation = config.categories[0]
    assert [(m.metric_id, m.weight) for m in valuation.metrics] == [
        ("pe", pytest.approx(56.25)),
        ("pb", pytest.approx(43.75)),
    ]
    assert validate_scoring_config(config).valid


def test_default_config_falls_back_to_medium_then_all() -> None:
    medium = default_scoring_config([_Metric("beta", "Risk", 5), _Metric("pe", "Valuation", 2)])
    assert [c.category for c in medium.categories] == ["Risk"]

    low = default_scoring_config([_Metric("pe", "Valuation", 2), _Metric("pb", "Valuation", 0)])
    (category,) = low.categories
    assert category.weight == 100.0
    assert [(m.metric_id, m.weight) for m in category.metrics] == [
        ("pe", pytest.approx(100 * 2 / 3)),
        ("pb", pytest.approx(100 / 3)),
    ]


def test_default_config_caps_metrics_per_category() -> None:
    metrics = [_Metric(f"m{i}", "Valuation", 7 + i % 3) for i in range(6)]

    config = default_scoring_config(metrics, max_metrics_per_category=2)

    (category,) = config.categories
    assert [m.metric_id for m in category.metrics] == ["m2", "m5"]
    assert config.max_metrics_per_category == 2


def test_default_config_without_metrics_is_invalid() -> None:
    config = default_scoring_config([])

    assert config.categories == ()
    validation = validate_scoring_config(config)
    assert not validation.valid
    assert validation.errors == ("at least one category must be enabled",)


def test_validate_collects_every_problem() -> None:
    config = ScoringConfiguration(
        categories=(
            ScoringCategoryConfig(
                category="Valuation",
                weight=60,
                metrics=(ScoringMetricConfig("pe", 0, "Valuation"),),
            ),
            ScoringCategoryConfig(
                category="Risk",
                weight=30,
                metrics=(ScoringMetricConfig("beta", 50, "Risk", enabled=False),),
            ),
        ),
        min_data_completeness=1.5,
        max_metrics_per_category=0,
    )

    validation = validate_scoring_config(config)

    assert not validation.valid
    assert validation.errors == (
        'category "Valuation" has zero total weight',
        'category "Risk" has no enabled metrics',
        'category "Risk" has zero total weight',
        "category weights must sum to 100% (currently 90.00%)",
        "min_data_completeness must be between 0 and 1",
        "max_metrics_per_category must be at least 1",
    )


def test_validate_ignores_disabled_categories_in_weight_sum() -> None:
    config = ScoringConfiguration(
        categories=(
            ScoringCategoryConfig(
                category="Valuation",
                weight=100,
                metrics=(ScoringMetricConfig("pe", 1, "Valuation"),),
            ),
            ScoringCategoryConfig(category="Risk", weight=40, enabled=False),
        )
    )

    assert validate_scoring_config(config).valid


def test_validate_missing_config() -> None:
    assert validate_scoring_config(None).errors == ("configuration is missing",)
