# src/peerboard/domain/services/metric_registry.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Metric registry and field-driven metric discovery.

Purpose:
    Provide the ordered catalogue of built-in metric definitions consumed by
    the aggregator and the metric engine façade. The catalogue is a table of
    (id, name, category, format, aggregation policy, pure rule) rows; the
    engine depends only on that shape, never on particular rows.

Layer:
    domain

Notes:
    - This module is pure domain logic:
        * No logging.
        * No I/O.
    - Only ``ticker`` and ``name`` are predefined. Every other metric is
      discovered from the fields present across the compared records, with
      format, category, and aggregation policy inferred from the field name.
    - Ids are exact and case-sensitive: ``EPS`` and ``eps`` are distinct
      metrics. Re-registering an existing id keeps the first definition.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from peerboard.domain.entities.record import NAME_FIELD, TICKER_FIELD, Record
from peerboard.domain.enums.metric_format import AggregationPolicy, MetricFormat
from peerboard.types import FieldValue

BASIC_INFORMATION = "Basic Information"


@dataclass(frozen=True)
class MetricDefinition:
    """Registry row describing one built-in metric.

    Attributes:
        metric_id:
            Stable identifier. For field-backed metrics this is the record
            field name the aggregator reads and writes.
        name:
            Human-readable display name.
        category:
            Presentation grouping label (e.g., "Valuation").
        format:
            Output format tag used by the value formatter.
        aggregation:
            How the field is combined across group members.
        compute:
            Pure rule mapping a record to the metric value.
    """

    metric_id: str
    name: str
    category: str
    format: MetricFormat
    aggregation: AggregationPolicy
    compute: Callable[[Record], FieldValue]


def field_rule(field: str) -> Callable[[Record], FieldValue]:
    """Return a rule that reads ``field`` straight from a record."""

    def _rule(record: Record) -> FieldValue:
        return record.get(field)

    return _rule


class MetricRegistry:
    """Ordered, immutable catalogue of :class:`MetricDefinition` rows."""

    __slots__ = ("_by_id", "_definitions")

    def __init__(self, definitions: Iterable[MetricDefinition] = ()) -> None:
        ordered: list[MetricDefinition] = []
        seen: set[str] = set()
        for definition in definitions:
            if definition.metric_id in seen:
                continue
            seen.add(definition.metric_id)
            ordered.append(definition)
        self._definitions: tuple[MetricDefinition, ...] = tuple(ordered)
        self._by_id: dict[str, MetricDefinition] = {d.metric_id: d for d in ordered}

    def __iter__(self) -> Iterator[MetricDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, metric_id: object) -> bool:
        return metric_id in self._by_id

    def get(self, metric_id: str) -> MetricDefinition | None:
        return self._by_id.get(metric_id)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(d.metric_id for d in self._definitions)

    def with_definitions(self, definitions: Iterable[MetricDefinition]) -> MetricRegistry:
        """Return a registry extended with ``definitions`` (existing ids win)."""
        return MetricRegistry((*self._definitions, *definitions))


CORE_METRICS: tuple[MetricDefinition, ...] = (
    MetricDefinition(
        metric_id=TICKER_FIELD,
        name="Ticker",
        category=BASIC_INFORMATION,
        format=MetricFormat.TEXT,
        aggregation=AggregationPolicy.NONE,
        compute=lambda record: record.ticker,
    ),
    MetricDefinition(
        metric_id=NAME_FIELD,
        name="Company Name",
        category=BASIC_INFORMATION,
        format=MetricFormat.TEXT,
        aggregation=AggregationPolicy.NONE,
        compute=lambda record: record.name,
    ),
)


# --------------------------------------------------------------------------- #
# Name-based inference                                                        #
# --------------------------------------------------------------------------- #

# Long keywords match anywhere in the lower-cased field name. Short
# abbreviations ("pe", "ev", ...) only match whole words, so "revenue" is not
# read as containing "ev".
_PERCENTAGE_KEYWORDS = ("percent", "yield", "margin")
_PERCENTAGE_WORDS = ("roe", "roa")
_RATIO_KEYWORDS = ("ratio",)
_RATIO_WORDS = ("pe", "pb", "ps", "peg", "ev", "to")
_CURRENCY_KEYWORDS = (
    "cap", "price", "revenue", "income", "cash", "debt", "assets", "equity", "value",
    "ebitda", "book", "eps", "change", "high", "low", "open", "close", "avg",
)  # fmt: skip
_SUMMABLE_CURRENCY_KEYWORDS = (
    "cap", "revenue", "income", "assets", "debt", "equity", "cash", "value",
)  # fmt: skip
_AVERAGED_CURRENCY_KEYWORDS = ("price", "avg")

# Category rules are checked in order; the first match wins. Each rule is
# (category, substring keywords, whole-word keywords).
_CATEGORY_RULES: tuple[tuple[str, tuple[str, ...], tuple[str, ...]], ...] = (
    (
        BASIC_INFORMATION,
        ("ticker", "symbol", "name", "exchange", "industry", "sector"),
        (),
    ),
    ("Valuation", ("price", "cap", "value"), ("pe", "pb", "ps", "peg", "ev")),
    ("Profitability", ("margin", "profit", "income"), ("roe", "roa")),
    ("Growth", ("growth", "change"), ()),
    (
        "Financial Health",
        ("ratio", "debt", "cash", "assets", "equity", "current", "quick", "liquidity"),
        (),
    ),
    ("Dividends", ("dividend", "payout"), ()),
    (
        "Market Data",
        ("volume", "timestamp", "date", "high", "low", "open", "close", "avg"),
        (),
    ),
)
OTHER_CATEGORY = "Other"


def _words(field: str) -> set[str]:
    return set(humanize_field_name(field).lower().split())


def _matches(field: str, keywords: Iterable[str], words: Iterable[str] = ()) -> bool:
    name = field.lower()
    if any(keyword in name for keyword in keywords):
        return True
    return not _words(field).isdisjoint(words)


def infer_format(field: str, value: FieldValue) -> MetricFormat:
    """Infer a display format from a field name and sample value."""
    if isinstance(value, str):
        return MetricFormat.TEXT
    if _matches(field, _PERCENTAGE_KEYWORDS, _PERCENTAGE_WORDS):
        return MetricFormat.PERCENTAGE
    if _matches(field, _RATIO_KEYWORDS, _RATIO_WORDS):
        return MetricFormat.RATIO
    if _matches(field, _CURRENCY_KEYWORDS):
        return MetricFormat.CURRENCY
    return MetricFormat.NUMBER


def infer_category(field: str) -> str:
    """Infer a presentation category from a field name."""
    for category, keywords, words in _CATEGORY_RULES:
        if _matches(field, keywords, words):
            return category
    return OTHER_CATEGORY


def infer_aggregation(field: str, fmt: MetricFormat) -> AggregationPolicy:
    """Pick the aggregation policy for a discovered field."""
    if fmt in (MetricFormat.RATIO, MetricFormat.PERCENTAGE):
        return AggregationPolicy.WEIGHTED_AVERAGE
    if fmt is not MetricFormat.CURRENCY:
        return AggregationPolicy.NONE

    if _matches(field, _SUMMABLE_CURRENCY_KEYWORDS):
        return AggregationPolicy.SUM
    if _matches(field, _AVERAGED_CURRENCY_KEYWORDS):
        return AggregationPolicy.WEIGHTED_AVERAGE
    return AggregationPolicy.SUM


def humanize_field_name(field: str) -> str:
    """Turn ``camelCase`` / ``snake_case`` into ``Title Case`` words.

    Examples:
        >>> humanize_field_name("marketCap")
        'Market Cap'
        >>> humanize_field_name("annual_net_income")
        'Annual Net Income'
    """
    spaced = re.sub(r"([A-Z])", r" \1", field).replace("_", " ")
    return re.sub(r"\b\w", lambda m: m.group().upper(), spaced).strip()


def discover_metrics(records: Iterable[Record]) -> list[MetricDefinition]:
    """Derive metric definitions from every non-identity field in ``records``.

    A field seen in several records takes its format and category from its
    first occurrence. Results are ordered by (category, display name).
    """
    discovered: dict[str, MetricDefinition] = {}
    for record in records:
        for field, value in record.items():
            if field in (TICKER_FIELD, NAME_FIELD) or field in discovered:
                continue
            fmt = infer_format(field, value)
            discovered[field] = MetricDefinition(
                metric_id=field,
                name=humanize_field_name(field),
                category=infer_category(field),
                format=fmt,
                aggregation=infer_aggregation(field, fmt),
                compute=field_rule(field),
            )
    return sorted(discovered.values(), key=lambda d: (d.category, d.name))


def build_registry(records: Iterable[Record]) -> MetricRegistry:
    """Return the core metrics followed by metrics discovered from ``records``."""
    return MetricRegistry((*CORE_METRICS, *discover_metrics(records)))


__all__ = [
    "BASIC_INFORMATION",
    "CORE_METRICS",
    "OTHER_CATEGORY",
    "MetricDefinition",
    "MetricRegistry",
    "build_registry",
    "discover_metrics",
    "field_rule",
    "humanize_field_name",
    "infer_aggregation",
    "infer_category",
    "infer_format",
]
