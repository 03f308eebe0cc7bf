# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Metric output format and aggregation policy enumerations.

Purpose:
    Tag how a metric value is rendered for display and how a field is
    combined when several company records are collapsed into a group record.

Layer:
    domain

Notes:
    - Values are lower-case string identifiers suitable for JSON and storage.
"""

from __future__ import annotations

from enum import Enum


class MetricFormat(str, Enum):
    """Display format tag for a metric value."""

    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    RATIO = "ratio"
    NUMBER = "number"
    TEXT = "text"


class AggregationPolicy(str, Enum):
    """Rule used to derive a group's field value from its members."""

    SUM = "sum"
    WEIGHTED_AVERAGE = "weighted_average"
    NONE = "none"


__all__ = ["AggregationPolicy", "MetricFormat"]
