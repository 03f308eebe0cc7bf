# src/peerboard/domain/services/metric_grouping.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Category grouping of metric definitions for display.

Purpose:
    Arrange metric definitions by category, splitting ``annual_`` and
    ``quarterly_`` prefixed fields into "Annual" / "Quarterly" subcategories.

Layer:
    domain
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from peerboard.domain.services.metric_registry import MetricDefinition

ANNUAL = "Annual"
QUARTERLY = "Quarterly"

_PERIOD_PREFIXES: tuple[tuple[str, str], ...] = (
    ("annual_", ANNUAL),
    ("quarterly_", QUARTERLY),
)


@dataclass
class MetricCategoryGroup:
    """Metrics sharing a category.

    Attributes:
        category:
            Category label.
        subcategories:
            Period subcategory name to its metrics; display names have the
            period prefix removed while ``metric_id`` keeps the original
            field name so values can still be looked up.
        direct_metrics:
            Metrics that belong to no period subcategory.
    """

    category: str
    subcategories: dict[str, list[MetricDefinition]] = field(default_factory=dict)
    direct_metrics: list[MetricDefinition] = field(default_factory=list)


def detect_period(metric_id: str) -> str | None:
    """Return "Annual"/"Quarterly" for prefixed ids, else ``None``."""
    lowered = metric_id.lower()
    for prefix, period in _PERIOD_PREFIXES:
        if lowered.startswith(prefix) or lowered.startswith(prefix.replace("_", " ")):
            return period
    return None


def group_metrics(metrics: Iterable[MetricDefinition]) -> list[MetricCategoryGroup]:
    """Group ``metrics`` by category in first-seen order."""
    groups: dict[str, MetricCategoryGroup] = {}
    for metric in metrics:
        group = groups.setdefault(metric.category, MetricCategoryGroup(category=metric.category))
        period = detect_period(metric.metric_id)
        if period is None:
            group.direct_metrics.append(metric)
            continue
        display_name = re.sub(rf"^{period}\s+", "", metric.name, flags=re.IGNORECASE)
        group.subcategories.setdefault(period, []).append(replace(metric, name=display_name))
    return list(groups.values())


__all__ = ["ANNUAL", "QUARTERLY", "MetricCategoryGroup", "detect_period", "group_metrics"]
