# tests/unit/domain/services/test_metric_registry.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT

from __future__ import annotations

import pytest

from peerboard.domain.entities.record import Record
from peerboard.domain.enums.metric_format import AggregationPolicy, MetricFormat
from peerboard.domain.services.metric_registry import (
    BASIC_INFORMATION,
    CORE_METRICS,
    OTHER_CATEGORY,
    MetricDefinition,
    MetricRegistry,
    build_registry,
    discover_metrics,
    field_rule,
    humanize_field_name,
    infer_aggregation,
    infer_category,
    infer_format,
)


@pytest.mark.parametrize(
    ("field", "value", "expected"),
    [
        ("sector", "Tech", MetricFormat.TEXT),
        ("dividendYield", 1.2, MetricFormat.PERCENTAGE),
        ("grossMargin", 40.0, MetricFormat.PERCENTAGE),
        ("roe", 12.0, MetricFormat.PERCENTAGE),
        ("peRatio", 20.0, MetricFormat.RATIO),
        ("pe", 20.0, MetricFormat.RATIO),
        ("evToEbitda", 12.0, MetricFormat.RATIO),
        ("marketCap", 1e9, MetricFormat.CURRENCY),
        ("revenue", 1e9, MetricFormat.CURRENCY),
        ("annual_netIncome", 1e9, MetricFormat.CURRENCY),
        ("volume", 1e6, MetricFormat.NUMBER),
        ("employees", 1000, MetricFormat.NUMBER),
    ],
)
def test_infer_format(field: str, value: float | str, expected: MetricFormat) -> None:
    assert infer_format(field, value) is expected


@pytest.mark.parametrize(
    ("field", "expected"),
    [
        ("industry", BASIC_INFORMATION),
        ("marketCap", "Valuation"),
        ("peRatio", "Valuation"),
        ("revenue", OTHER_CATEGORY),
        ("grossMargin", "Profitability"),
        ("revenueGrowth", "Growth"),
        ("totalDebt", "Financial Health"),
        ("dividendPerShare", "Dividends"),
        ("volume", "Market Data"),
        ("employees", OTHER_CATEGORY),
    ],
)
def test_infer_category(field: str, expected: str) -> None:
    assert infer_category(field) == expected


def test_infer_aggregation() -> None:
    assert infer_aggregation("peRatio", MetricFormat.RATIO) is AggregationPolicy.WEIGHTED_AVERAGE
    assert infer_aggregation("roe", MetricFormat.PERCENTAGE) is AggregationPolicy.WEIGHTED_AVERAGE
    assert infer_aggregation("revenue", MetricFormat.CURRENCY) is AggregationPolicy.SUM
    assert infer_aggregation("avgPrice", MetricFormat.CURRENCY) is (
        AggregationPolicy.WEIGHTED_AVERAGE
    )
    assert infer_aggregation("eps", MetricFormat.CURRENCY) is AggregationPolicy.SUM
    assert infer_aggregation("sector", MetricFormat.TEXT) is AggregationPolicy.NONE
    assert infer_aggregation("volume", MetricFormat.NUMBER) is AggregationPolicy.NONE


def test_humanize_field_name() -> None:
    assert humanize_field_name("marketCap") == "Market Cap"
    assert humanize_field_name("annual_net_income") == "Annual Net Income"
    assert humanize_field_name("peRatio") == "Pe Ratio"


def test_discover_metrics_skips_identity_and_sorts() -> None:
    records = [
        Record({"ticker": "A", "name": "A Co", "marketCap": 1.0, "sector": "Tech"}),
        Record({"ticker": "B", "name": "B Co", "grossMargin": 40.0, "marketCap": 2.0}),
    ]

    discovered = discover_metrics(records)

    ids = [d.metric_id for d in discovered]
    assert ids == ["sector", "grossMargin", "marketCap"]
    assert all(d.compute(records[0]) == records[0].get(d.metric_id) for d in discovered)


def test_build_registry_places_core_metrics_first() -> None:
    record = Record({"ticker": "A", "name": "A Co", "marketCap": 1.0})

    registry = build_registry([record])

    assert registry.ids[:2] == ("ticker", "name")
    assert "marketCap" in registry
    assert len(registry) == 3
    assert registry.get("ticker").compute(record) == "A"  # type: ignore[union-attr]


def test_registry_keeps_first_definition_of_an_exact_id() -> None:
    extra = MetricDefinition(
        metric_id="ticker",
        name="Duplicate",
        category=OTHER_CATEGORY,
        format=MetricFormat.TEXT,
        aggregation=AggregationPolicy.NONE,
        compute=field_rule("ticker"),
    )

    registry = MetricRegistry(CORE_METRICS).with_definitions([extra])

    assert registry.ids == ("ticker", "name")
    assert registry.get("ticker").name == "Ticker"  # type: ignore[union-attr]
    assert registry.get("unknown") is None


def test_registry_keeps_fields_that_differ_only_in_case() -> None:
    first = Record({"ticker": "A", "name": "Alpha", "EPS": 2.0})
    second = Record({"ticker": "B", "name": "Beta", "eps": 3.0})

    registry = build_registry([first, second])

    assert "EPS" in registry
    assert "eps" in registry
    assert registry.get("EPS").compute(first) == 2.0  # type: ignore[union-attr]
    assert registry.get("eps").compute(second) == 3.0  # type: ignore[union-attr]
