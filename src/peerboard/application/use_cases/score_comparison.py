# src/peerboard/application/use_cases/score_comparison.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Use Case: Score Comparison

Purpose:
    Rank the compared companies and groups. Metric values come from the
    metric engine (registry rules, custom formulas, group aggregation); the
    domain scoring service turns them into 0-100 scores and ranks.

Layer: application/use_cases

Notes:
    - Only entities whose record holds more than its identity fields are
      scored, and fewer than two such entities yield no scores.
    - Text metrics are not scored. Catalogue metrics score with the default
      priority and no favourable direction; custom metrics bring their own.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from peerboard.application.services.metric_engine import MetricEngine
from peerboard.application.use_cases.build_comparison_table import TableMetric
from peerboard.domain.entities.company import Company
from peerboard.domain.entities.comparison_group import ComparisonGroup
from peerboard.domain.entities.custom_metric import CustomMetric
from peerboard.domain.entities.record import Record, as_float
from peerboard.domain.enums.metric_format import MetricFormat
from peerboard.domain.services.scoring import (
    ItemScore,
    ScoringItem,
    ScoringMetric,
    calculate_category_scores,
    calculate_overall_scores,
)
from peerboard.domain.services.scoring_config import ScoringConfiguration

logger = logging.getLogger(__name__)

CUSTOM_METRICS_CATEGORY = "Custom Metrics"
MIN_SCORED_ITEMS = 2
_IDENTITY_ONLY_SIZE = 2


class ScoreComparison:
    """Use case producing ranked :class:`ItemScore` rows.

    Args:
        engine: Metric engine façade supplying records and metric values.
    """

    def __init__(self, engine: MetricEngine) -> None:
        self._engine = engine

    def _value(self, metric: TableMetric, record: Record) -> float | None:
        if isinstance(metric, CustomMetric):
            return self._engine.custom_metric_value(metric, record)
        return as_float(self._engine.core_metric_value(metric.metric_id, record))

    def scoring_inputs(
        self,
        companies: Sequence[Company],
        groups: Sequence[ComparisonGroup],
        metrics: Sequence[TableMetric],
    ) -> tuple[list[ScoringItem], list[ScoringMetric]]:
        """Collect the scored items and each metric's values across them."""
        records = self._engine.entity_records(companies, groups)
        labelled = [(c.company_id, c.label) for c in companies]
        labelled.extend((g.group_id, g.label) for g in groups)

        items: list[ScoringItem] = []
        item_records: list[Record] = []
        for entity_id, label in labelled:
            record = records.get(entity_id)
            if record is None or len(record) <= _IDENTITY_ONLY_SIZE:
                continue
            items.append(ScoringItem(item_id=entity_id, name=label))
            item_records.append(record)

        scoring_metrics: list[ScoringMetric] = []
        for metric in metrics:
            if metric.format is MetricFormat.TEXT:
                continue
            values = tuple(self._value(metric, record) for record in item_records)
            if isinstance(metric, CustomMetric):
                scoring_metrics.append(
                    ScoringMetric(
                        metric_id=metric.metric_id,
                        name=metric.name,
                        values=values,
                        priority=metric.priority,
                        better_direction=metric.better_direction,
                        category=CUSTOM_METRICS_CATEGORY,
                    )
                )
            else:
                scoring_metrics.append(
                    ScoringMetric(
                        metric_id=metric.metric_id,
                        name=metric.name,
                        values=values,
                        category=metric.category,
                    )
                )
        return items, scoring_metrics

    def execute(
        self,
        companies: Sequence[Company],
        groups: Sequence[ComparisonGroup],
        metrics: Sequence[TableMetric],
        *,
        config: ScoringConfiguration | None = None,
    ) -> list[ItemScore]:
        """Score and rank the compared entities.

        Args:
            companies: Tracked companies.
            groups: Comparison groups.
            metrics: Registry definitions and custom metrics to score on.
            config: Category configuration; priority scoring when omitted.

        Returns:
            list[ItemScore]: Sorted by overall rank.

        Raises:
            InvalidScoringConfigError: If ``config`` fails validation.
        """
        items, scoring_metrics = self.scoring_inputs(companies, groups, metrics)
        if len(items) < MIN_SCORED_ITEMS:
            scores: list[ItemScore] = []
        elif config is None:
            scores = calculate_overall_scores(items, scoring_metrics)
        else:
            scores = calculate_category_scores(items, scoring_metrics, config)

        logger.info(
            "Comparison scored",
            extra={
                "extra": {
                    "method": "priority" if config is None else "category",
                    "items": len(items),
                    "metrics": len(scoring_metrics),
                    "scored": len(scores),
                }
            },
        )
        return scores


__all__ = ["CUSTOM_METRICS_CATEGORY", "ScoreComparison"]
