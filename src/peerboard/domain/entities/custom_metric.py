# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Custom Metric Entity

Purpose:
    User-authored metric defined by an arithmetic formula over record fields,
    plus the scoring hints (priority, favourable direction) used when items
    are ranked.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass

from peerboard.domain.enums.metric_format import MetricFormat
from peerboard.domain.enums.scoring import BetterDirection
from peerboard.domain.exceptions.entities import InvalidCustomMetricError

from .base import BaseEntity

DEFAULT_PRIORITY = 5
MAX_PRIORITY = 10


@dataclass(frozen=True, slots=True)
class CustomMetric(BaseEntity):
    """Formula-backed metric.

    Args:
        metric_id: Stable identifier.
        name: Display name.
        format: Output format; ``text`` is not allowed.
        formula: Arithmetic expression over record field names.
        priority: Scoring weight from 0 to 10; 0 leaves the metric out of
            scoring.
        better_direction: Favourable direction; ``None`` scores as higher.

    Raises:
        InvalidCustomMetricError: If fields are blank, the format is ``text``
            or unknown, or the priority is out of range.
    """

    metric_id: str
    name: str
    format: MetricFormat
    formula: str
    priority: int = DEFAULT_PRIORITY
    better_direction: BetterDirection | None = None

    def __post_init__(self) -> None:
        if not self.metric_id.strip():
            raise InvalidCustomMetricError("custom metric id must be non-empty")
        if not self.name.strip():
            raise InvalidCustomMetricError(
                "custom metric name must be non-empty", details={"id": self.metric_id}
            )
        try:
            fmt = MetricFormat(self.format)
        except ValueError as exc:
            raise InvalidCustomMetricError(
                f"unknown format: {self.format}", details={"id": self.metric_id}
            ) from exc
        if fmt is MetricFormat.TEXT:
            raise InvalidCustomMetricError(
                "custom metrics cannot use the text format", details={"id": self.metric_id}
            )
        if not 0 <= self.priority <= MAX_PRIORITY:
            raise InvalidCustomMetricError(
                f"priority must be between 0 and {MAX_PRIORITY}",
                details={"id": self.metric_id, "priority": self.priority},
            )
        object.__setattr__(self, "format", fmt)


__all__ = ["DEFAULT_PRIORITY", "MAX_PRIORITY", "CustomMetric"]
