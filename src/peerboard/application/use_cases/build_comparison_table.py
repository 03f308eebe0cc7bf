# src/peerboard/application/use_cases/build_comparison_table.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Use Case: Build Comparison Table

Purpose:
    Arrange formatted metric values as one row per metric and one column per
    compared entity (companies first, then groups). The resulting table is the
    single shape consumed by every exporter.

Layer: application/use_cases
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from peerboard.application.services.metric_engine import MetricEngine
from peerboard.domain.entities.company import Company
from peerboard.domain.entities.comparison_group import ComparisonGroup
from peerboard.domain.entities.custom_metric import CustomMetric
from peerboard.domain.entities.record import Record
from peerboard.domain.services.metric_registry import MetricDefinition
from peerboard.types import FieldValue

logger = logging.getLogger(__name__)

METRIC_COLUMN = "Metric"

type TableMetric = MetricDefinition | CustomMetric


@dataclass(frozen=True, slots=True)
class ComparisonRow:
    """One metric across all compared entities.

    Attributes:
        metric_id: Registry or custom metric identifier.
        label: Display name shown in the ``Metric`` column.
        cells: Formatted values, aligned with the table's entity columns.
    """

    metric_id: str
    label: str
    cells: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ComparisonTable:
    """Formatted comparison ready for display or export."""

    columns: tuple[str, ...]
    rows: tuple[ComparisonRow, ...]

    @property
    def entity_labels(self) -> tuple[str, ...]:
        return self.columns[1:]

    def as_dicts(self) -> list[dict[str, str]]:
        """Return each row keyed by column header.

        Duplicate entity labels keep only the last cell, as in any mapping;
        use :attr:`rows` when labels may collide.
        """
        return [
            dict(zip(self.columns, (row.label, *row.cells), strict=True)) for row in self.rows
        ]


class BuildComparisonTable:
    """Use case producing a :class:`ComparisonTable`.

    Args:
        engine: Metric engine façade used for values and formatting.
    """

    def __init__(self, engine: MetricEngine) -> None:
        self._engine = engine

    def _value(self, metric: TableMetric, record: Record) -> FieldValue:
        if isinstance(metric, CustomMetric):
            return self._engine.custom_metric_value(metric, record)
        return self._engine.core_metric_value(metric.metric_id, record)

    def execute(
        self,
        companies: Sequence[Company],
        groups: Sequence[ComparisonGroup],
        metrics: Sequence[TableMetric],
    ) -> ComparisonTable:
        """Build the table.

        Args:
            companies: Tracked companies, in column order.
            groups: Comparison groups, placed after the companies.
            metrics: Registry definitions and custom metrics, in row order.

        Returns:
            ComparisonTable: Header plus one formatted row per metric. Cells
            for an entity without a record hold the no-data marker.
        """
        records = self._engine.entity_records(companies, groups)
        entities: list[tuple[str, str]] = [(c.company_id, c.label) for c in companies]
        entities.extend((g.group_id, g.label) for g in groups)

        rows: list[ComparisonRow] = []
        for metric in metrics:
            cells: list[str] = []
            for entity_id, _ in entities:
                record = records.get(entity_id)
                if record is None:
                    cells.append(self._engine.no_data_marker)
                    continue
                cells.append(self._engine.format(self._value(metric, record), metric.format))
            rows.append(
                ComparisonRow(metric_id=metric.metric_id, label=metric.name, cells=tuple(cells))
            )

        logger.info(
            "Comparison table built",
            extra={
                "extra": {
                    "companies": len(companies),
                    "groups": len(groups),
                    "metrics": len(rows),
                }
            },
        )
        return ComparisonTable(
            columns=(METRIC_COLUMN, *(label for _, label in entities)),
            rows=tuple(rows),
        )


__all__ = [
    "METRIC_COLUMN",
    "BuildComparisonTable",
    "ComparisonRow",
    "ComparisonTable",
    "TableMetric",
]
