# src/peerboard/application/services/metric_engine.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Metric Engine Façade

Purpose:
    Single entry point used by presentation, export, and storage layers to
    compute built-in metric values, evaluate custom formulas, and build the
    synthetic records of comparison groups.

Layer: application/services

Notes:
    - Nothing raised inside the domain services escapes this boundary for a
      data problem: missing data and formula failures become ``None``.
    - Formula failures are logged at DEBUG with their structured reason.
    - The façade keeps no per-call state; group records are rebuilt on every
      call from the companies passed in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from peerboard.config.settings import Settings
from peerboard.domain.entities.company import Company
from peerboard.domain.entities.comparison_group import ComparisonGroup
from peerboard.domain.entities.custom_metric import CustomMetric
from peerboard.domain.entities.record import Record
from peerboard.domain.enums.metric_format import MetricFormat
from peerboard.domain.services.aggregator import aggregate
from peerboard.domain.services.formula_evaluator import (
    DEFAULT_MAX_FORMULA_LENGTH,
    EvaluationFailure,
    evaluate,
)
from peerboard.domain.services.metric_registry import MetricRegistry
from peerboard.domain.services.value_formatter import (
    DEFAULT_CURRENCY_SYMBOL,
    DEFAULT_NO_DATA_MARKER,
    format_value,
)
from peerboard.types import FieldValue

logger = logging.getLogger(__name__)


class MetricEngine:
    """Façade over the registry, evaluator, aggregator, and formatter.

    Args:
        registry: Metric catalogue used for core metric lookups and for group
            aggregation policies.
        settings: Optional settings; when omitted, library defaults apply.
    """

    def __init__(self, registry: MetricRegistry, *, settings: Settings | None = None) -> None:
        self._registry = registry
        self._no_data_marker = settings.no_data_marker if settings else DEFAULT_NO_DATA_MARKER
        self._currency_symbol = settings.currency_symbol if settings else DEFAULT_CURRENCY_SYMBOL
        self._max_formula_length = (
            settings.max_formula_length if settings else DEFAULT_MAX_FORMULA_LENGTH
        )

    @property
    def registry(self) -> MetricRegistry:
        return self._registry

    @property
    def no_data_marker(self) -> str:
        return self._no_data_marker

    def core_metric_value(self, metric_id: str, record: Record) -> FieldValue:
        """Apply the registry rule for ``metric_id`` to ``record``.

        Returns:
            The metric value, or ``None`` when the id is unknown, the field is
            absent, or the rule fails on this record.
        """
        definition = self._registry.get(metric_id)
        if definition is None:
            return None
        try:
            return definition.compute(record)
        except (ArithmeticError, TypeError, ValueError) as exc:
            logger.warning(
                "Core metric rule failed",
                extra={
                    "extra": {
                        "metric_id": metric_id,
                        "ticker": record.ticker,
                        "error": type(exc).__name__,
                    }
                },
            )
            return None

    def custom_metric_value(self, custom_metric: CustomMetric, record: Record) -> float | None:
        """Evaluate ``custom_metric`` against ``record``; ``None`` on failure."""
        result = evaluate(custom_metric.formula, record, max_length=self._max_formula_length)
        if isinstance(result, EvaluationFailure):
            logger.debug(
                "Custom metric evaluation failed",
                extra={
                    "extra": {
                        "metric_id": custom_metric.metric_id,
                        "ticker": record.ticker,
                        "reason": result.reason.value,
                        "detail": result.message,
                        "identifiers": list(result.identifiers),
                    }
                },
            )
            return None
        return result

    def build_group_records(
        self,
        groups: Iterable[ComparisonGroup],
        companies: Sequence[Company],
    ) -> dict[str, Record]:
        """Aggregate every group into its synthetic record, keyed by group id."""
        return {group.group_id: aggregate(group, companies, self._registry) for group in groups}

    def entity_records(
        self,
        companies: Sequence[Company],
        groups: Iterable[ComparisonGroup],
    ) -> dict[str, Record]:
        """Merge company records (those with data) and group records by entity id."""
        records: dict[str, Record] = {
            company.company_id: company.record
            for company in companies
            if company.has_data and company.record is not None
        }
        records.update(self.build_group_records(groups, companies))
        return records

    def format(self, value: FieldValue, fmt: MetricFormat | str) -> str:
        """Format ``value`` with the configured marker and currency symbol."""
        return format_value(
            value,
            fmt,
            no_data_marker=self._no_data_marker,
            currency_symbol=self._currency_symbol,
        )


__all__ = ["MetricEngine"]
