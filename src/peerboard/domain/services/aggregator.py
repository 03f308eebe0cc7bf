# src/peerboard/domain/services/aggregator.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Group record aggregation.

Purpose:
    Collapse the records of a group's loaded member companies into one
    synthetic record, applying each registry metric's aggregation policy.

Layer:
    domain

Notes:
    - This module is pure domain logic:
        * No logging.
        * No caching; the synthetic record is rebuilt on every call.
    - Sums use :func:`math.fsum`, so results do not depend on member order.
    - A field is left absent when any contributing value, or the result, is
      not finite (NaN, ±inf, or overflow).
    - ``marketCap`` (sum) and ``price`` (market-cap weighted average) are
      always computed by fixed rules and replace any registry policy for the
      same field, including when the fixed rule yields no value.
    - Absent and zero are distinct: a field nobody reports stays absent.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from peerboard.domain.entities.company import Company
from peerboard.domain.entities.comparison_group import ComparisonGroup
from peerboard.domain.entities.record import (
    IDENTITY_FIELDS,
    INDUSTRY_FIELD,
    NAME_FIELD,
    TICKER_FIELD,
    Record,
)
from peerboard.domain.enums.metric_format import AggregationPolicy
from peerboard.domain.services.metric_registry import MetricRegistry
from peerboard.types import FieldValue

MARKET_CAP_FIELD = "marketCap"
PRICE_FIELD = "price"
FIXED_RULE_FIELDS: frozenset[str] = frozenset({MARKET_CAP_FIELD, PRICE_FIELD})


def member_records(group: ComparisonGroup, companies: Iterable[Company]) -> list[Record]:
    """Return records of ``group`` members that currently have data.

    Members whose company is missing, not yet loaded, or failed are skipped.
    Order follows ``companies``.
    """
    return [
        company.record
        for company in companies
        if company.company_id in group and company.has_data and company.record is not None
    ]


def _finite_sum(values: Iterable[float]) -> float | None:
    """Exact sum of ``values``, or ``None`` if an input or the total is not finite."""
    terms = list(values)
    if not all(math.isfinite(term) for term in terms):
        return None
    try:
        total = math.fsum(terms)
    except OverflowError:
        return None
    return total if math.isfinite(total) else None


def _market_cap(record: Record) -> float:
    """Positive finite market cap of ``record``, else 0.0."""
    cap = record.number(MARKET_CAP_FIELD)
    return cap if cap is not None and 0 < cap < math.inf else 0.0


def total_market_cap(records: Sequence[Record]) -> float:
    """Sum of positive market caps across ``records`` (0.0 on overflow)."""
    return _finite_sum(_market_cap(record) for record in records) or 0.0


def sum_field(records: Sequence[Record], field: str) -> float | None:
    """Arithmetic sum of ``field`` over records that report it, else ``None``."""
    values = [value for record in records if (value := record.number(field)) is not None]
    return _finite_sum(values) if values else None


def weighted_average_field(records: Sequence[Record], field: str) -> float | None:
    """Market-cap weighted average of ``field``.

    Only records with both a numeric value and a positive market cap
    contribute. Returns ``None`` when nothing qualifies.
    """
    pairs = [
        (value, cap)
        for record in records
        if (value := record.number(field)) is not None and (cap := _market_cap(record)) > 0
    ]
    if not pairs:
        return None
    # (v * w) / w may drift in the last bit; one contributor is its own average.
    if len(pairs) == 1:
        value = pairs[0][0]
        return value if math.isfinite(value) else None

    weight_sum = _finite_sum(cap for _, cap in pairs)
    weighted = _finite_sum(value * cap for value, cap in pairs)
    if weight_sum is None or weighted is None or weight_sum <= 0:
        return None
    average = weighted / weight_sum
    return average if math.isfinite(average) else None


def _apply_policy(
    records: Sequence[Record], field: str, policy: AggregationPolicy, weight_total: float
) -> float | None:
    if policy is AggregationPolicy.SUM:
        return sum_field(records, field)
    if policy is AggregationPolicy.WEIGHTED_AVERAGE and weight_total > 0:
        return weighted_average_field(records, field)
    return None


def aggregate(
    group: ComparisonGroup,
    companies: Iterable[Company],
    registry: MetricRegistry,
) -> Record:
    """Build the synthetic record for ``group``.

    Args:
        group:
            Group whose members are aggregated.
        companies:
            All known companies; non-members and companies without data are
            ignored.
        registry:
            Metric catalogue supplying per-field aggregation policies.

    Returns:
        Record with ``ticker`` = group id and ``name`` = group name. When no
        member has data, only those two identity fields are present.
    """
    records = member_records(group, companies)
    identity: dict[str, FieldValue] = {TICKER_FIELD: group.group_id, NAME_FIELD: group.name}
    if not records:
        return Record(identity)

    fields: dict[str, FieldValue] = {
        **identity,
        INDUSTRY_FIELD: f"Group of {len(records)} companies",
    }

    weight_total = total_market_cap(records)
    for definition in registry:
        field = definition.metric_id
        if field in IDENTITY_FIELDS or field in FIXED_RULE_FIELDS:
            continue
        value = _apply_policy(records, field, definition.aggregation, weight_total)
        if value is not None:
            fields[field] = value

    market_cap = sum_field(records, MARKET_CAP_FIELD)
    if market_cap is not None:
        fields[MARKET_CAP_FIELD] = market_cap
    price = weighted_average_field(records, PRICE_FIELD)
    if price is not None:
        fields[PRICE_FIELD] = price

    return Record(fields)


__all__ = [
    "FIXED_RULE_FIELDS",
    "MARKET_CAP_FIELD",
    "PRICE_FIELD",
    "aggregate",
    "member_records",
    "sum_field",
    "total_market_cap",
    "weighted_average_field",
]
