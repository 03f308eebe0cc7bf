# src/peerboard/domain/services/scoring.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Peer scoring and ranking.

Purpose:
    Turn the metric values of compared items (companies and groups) into
    0-100 scores, a weighted total per item, and ranks (1 = best), either
    weighted directly by metric priority or by a category configuration.

Layer:
    domain

Notes:
    - This module is pure domain logic:
        * No logging.
        * No formula evaluation; callers pass values already computed by the
          metric engine, aligned with the item order.
    - Missing, NaN and infinite values never take part in normalization.
    - Ties keep item order: the earlier item gets the better rank.
"""

from __future__ import annotations

import bisect
import math
import statistics
from collections.abc import Sequence
from dataclasses import dataclass, replace

from peerboard.domain.entities.custom_metric import DEFAULT_PRIORITY
from peerboard.domain.enums.scoring import BetterDirection, NormalizationMethod, ValueIndicator
from peerboard.domain.exceptions.scoring import (
    InvalidScoringConfigError,
    InvalidScoringInputError,
)
from peerboard.domain.services.scoring_config import (
    ScoringConfiguration,
    validate_scoring_config,
)

NEUTRAL_SCORE = 50.0
MAX_SCORE = 100.0
_INDICATOR_TOLERANCE = 1e-4


@dataclass(frozen=True, slots=True)
class ScoringItem:
    """An item being ranked."""

    item_id: str
    name: str


@dataclass(frozen=True, slots=True)
class ScoringMetric:
    """A metric's values across items plus its scoring hints.

    Attributes:
        metric_id: Metric identifier.
        name: Display name.
        values: One value per item, in item order; ``None`` when absent.
        priority: Weight in priority scoring; 0 leaves the metric out.
        better_direction: ``LOWER`` inverts the score; ``None`` scores as
            ``HIGHER``.
        category: Category used by category scoring and default configs.
    """

    metric_id: str
    name: str
    values: tuple[float | None, ...]
    priority: float = DEFAULT_PRIORITY
    better_direction: BetterDirection | None = None
    category: str = ""


@dataclass(frozen=True, slots=True)
class MetricScore:
    metric_id: str
    metric_name: str
    score: float
    weight: float
    value: float | None
    rank: int


@dataclass(frozen=True, slots=True)
class MetricContribution:
    """A metric's share of one item's category score and of its total."""

    metric_id: str
    metric_name: str
    score: float
    weight: float
    value: float | None
    contribution: float


@dataclass(frozen=True, slots=True)
class CategoryScore:
    category: str
    score: float
    weight: float
    metrics: tuple[MetricContribution, ...] = ()


@dataclass(frozen=True, slots=True)
class ItemScore:
    """Scores of one item.

    Attributes:
        item_id: Item identifier.
        item_name: Display label.
        total_score: Weighted total on a 0-100 scale.
        metric_scores: Per-metric scores with per-metric ranks.
        rank: Overall rank, 1 = best.
        category_scores: Category breakdown (category scoring only).
        breakdown: Human-readable calculation (category scoring only).
    """

    item_id: str
    item_name: str
    total_score: float
    metric_scores: tuple[MetricScore, ...]
    rank: int
    category_scores: tuple[CategoryScore, ...] = ()
    breakdown: str = ""


def _finite(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def _rescaled(values: Sequence[float]) -> list[float]:
    """Divide by the largest magnitude, leaving min-max and z-scores unchanged."""
    largest = max(abs(v) for v in values)
    return [v / largest for v in values] if largest > 0 else list(values)


def normalize_values(
    values: Sequence[float], method: NormalizationMethod = NormalizationMethod.MIN_MAX
) -> list[float]:
    """Map finite ``values`` onto 0-100, position for position.

    A single value, or a set with no spread, scores a neutral 50 throughout.
    Percentile scoring gives tied values the lowest shared position. Values are
    rescaled first so spreads near the float limit do not overflow.
    """
    if not values:
        return []
    if len(values) == 1:
        return [NEUTRAL_SCORE]
    values = _rescaled(values)

    if method is NormalizationMethod.PERCENTILE:
        ordered = sorted(values)
        last = len(ordered) - 1
        return [bisect.bisect_left(ordered, v) / last * MAX_SCORE for v in values]

    if method is NormalizationMethod.Z_SCORE:
        mean = statistics.fmean(values)
        spread = statistics.pstdev(values, mu=mean)
        if spread == 0:
            return [NEUTRAL_SCORE] * len(values)
        return [
            min(MAX_SCORE, max(0.0, NEUTRAL_SCORE + (v - mean) / spread / 3 * NEUTRAL_SCORE))
            for v in values
        ]

    low, high = min(values), max(values)
    if high == low:
        return [NEUTRAL_SCORE] * len(values)
    return [(v - low) / (high - low) * MAX_SCORE for v in values]


def _orient(score: float, direction: BetterDirection | None) -> float:
    return MAX_SCORE - score if direction is BetterDirection.LOWER else score


def _metric_scores(
    metric: ScoringMetric, method: NormalizationMethod
) -> list[float | None]:
    """Oriented score per item; ``None`` where the item has no finite value."""
    finite = [(i, v) for i, v in enumerate(metric.values) if v is not None and math.isfinite(v)]
    normalized = normalize_values([v for _, v in finite], method)
    scores: list[float | None] = [None] * len(metric.values)
    for (position, _), score in zip(finite, normalized, strict=True):
        scores[position] = _orient(score, metric.better_direction)
    return scores


def _ranks(scores: Sequence[float]) -> list[int]:
    """1-based rank per position, highest score first, ties by position."""
    order = sorted(range(len(scores)), key=lambda i: -scores[i])
    ranks = [0] * len(scores)
    for rank, index in enumerate(order, start=1):
        ranks[index] = rank
    return ranks


def _check_alignment(items: Sequence[ScoringItem], metrics: Sequence[ScoringMetric]) -> None:
    for metric in metrics:
        if len(metric.values) != len(items):
            raise InvalidScoringInputError(
                f"metric '{metric.metric_id}' has {len(metric.values)} values "
                f"for {len(items)} items",
                details={"metric_id": metric.metric_id},
            )


def _ranked(scores: list[ItemScore]) -> list[ItemScore]:
    ranks = _ranks([s.total_score for s in scores])
    ordered = sorted(zip(ranks, scores, strict=True), key=lambda pair: pair[0])
    return [replace(s, rank=rank) for rank, s in ordered]


def calculate_overall_scores(
    items: Sequence[ScoringItem], metrics: Sequence[ScoringMetric]
) -> list[ItemScore]:
    """Score items by priority-weighted, min-max normalized metrics.

    Metrics with priority 0 are skipped. An item without a finite value for a
    metric scores 0 on it, and the total is the priority-weighted mean of
    the metric scores.

    Returns:
        list[ItemScore]: Sorted by rank; empty when there is nothing to score.

    Raises:
        InvalidScoringInputError: If a metric's values do not match ``items``.
    """
    active = [m for m in metrics if m.priority > 0]
    if not items or not active:
        return []
    _check_alignment(items, active)

    per_metric = {
        m.metric_id: [
            0.0 if s is None else s for s in _metric_scores(m, NormalizationMethod.MIN_MAX)
        ]
        for m in active
    }
    metric_ranks = {metric_id: _ranks(scores) for metric_id, scores in per_metric.items()}
    weight_total = math.fsum(m.priority for m in active)

    scores: list[ItemScore] = []
    for index, item in enumerate(items):
        metric_scores = tuple(
            MetricScore(
                metric_id=m.metric_id,
                metric_name=m.name,
                score=per_metric[m.metric_id][index],
                weight=m.priority,
                value=m.values[index],
                rank=metric_ranks[m.metric_id][index],
            )
            for m in active
        )
        total = math.fsum(s.score * s.weight for s in metric_scores) / weight_total
        scores.append(
            ItemScore(
                item_id=item.item_id,
                item_name=item.name,
                total_score=total,
                metric_scores=metric_scores,
                rank=0,
            )
        )
    return _ranked(scores)


def _breakdown(categories: Sequence[CategoryScore], total: float) -> str:
    lines = [f"Total Score: {total:.2f}", "", "Breakdown by Category:"]
    for category in categories:
        points = category.score * category.weight / MAX_SCORE
        lines.append(
            f"  {category.category} ({category.weight:.1f}% weight): "
            f"{category.score:.2f} -> {points:.2f} points"
        )
        if category.metrics:
            lines.append("    Metrics:")
            lines.extend(
                f"      - {m.metric_name}: {m.score:.2f} (weight: {m.weight:.1f}%, "
                f"contribution: {m.contribution:.3f} points)"
                for m in category.metrics
            )
    return "\n".join(lines)


def calculate_category_scores(
    items: Sequence[ScoringItem],
    metrics: Sequence[ScoringMetric],
    config: ScoringConfiguration,
) -> list[ItemScore]:
    """Score items per category, then combine categories by weight.

    A metric counts only when the share of items with a finite value reaches
    ``config.min_data_completeness``. Inside a category the score is the
    weighted mean of its metric scores; the total adds up each category
    score times its weight share. A metric's contribution is the number of
    total points it adds.

    Returns:
        list[ItemScore]: Sorted by rank, with category breakdowns.

    Raises:
        InvalidScoringConfigError: If ``config`` fails validation.
        InvalidScoringInputError: If a metric's values do not match ``items``.
    """
    validation = validate_scoring_config(config)
    if not validation.valid:
        raise InvalidScoringConfigError(
            "invalid scoring configuration", details={"errors": list(validation.errors)}
        )
    if not items:
        return []

    by_id = {m.metric_id: m for m in metrics}
    configured = {
        mc.metric_id: by_id[mc.metric_id]
        for category in config.enabled_categories
        for mc in category.enabled_metrics
        if mc.metric_id in by_id
    }
    _check_alignment(items, list(configured.values()))
    counted = {
        metric_id: _metric_scores(metric, config.normalization_method)
        for metric_id, metric in configured.items()
        if sum(_finite(v) for v in metric.values) / len(items) >= config.min_data_completeness
    }

    scores: list[ItemScore] = []
    for index, item in enumerate(items):
        category_scores: list[CategoryScore] = []
        metric_scores: list[MetricScore] = []
        for category in config.enabled_categories:
            entries: list[tuple[ScoringMetric, float, float, float | None]] = []
            for mc in category.enabled_metrics:
                if mc.metric_id not in counted:
                    continue
                metric = configured[mc.metric_id]
                score = counted[mc.metric_id][index]
                if score is not None:
                    entries.append((metric, score, mc.weight, metric.values[index]))
                elif config.include_missing_data:
                    entries.append((metric, NEUTRAL_SCORE, mc.weight, None))
            if not entries:
                continue

            weight_sum = math.fsum(weight for _, _, weight, _ in entries)
            category_score = (
                math.fsum(score * weight for _, score, weight, _ in entries) / weight_sum
                if weight_sum > 0
                else 0.0
            )
            contributions = tuple(
                MetricContribution(
                    metric_id=metric.metric_id,
                    metric_name=metric.name,
                    score=score,
                    weight=weight,
                    value=value,
                    contribution=(
                        score * weight / weight_sum * category.weight / MAX_SCORE
                        if weight_sum > 0
                        else 0.0
                    ),
                )
                for metric, score, weight, value in entries
            )
            category_scores.append(
                CategoryScore(
                    category=category.category,
                    score=category_score,
                    weight=category.weight,
                    metrics=contributions,
                )
            )
            metric_scores.extend(
                MetricScore(
                    metric_id=c.metric_id,
                    metric_name=c.metric_name,
                    score=c.score,
                    weight=c.weight,
                    value=c.value,
                    rank=0,
                )
                for c in contributions
            )

        total = math.fsum(c.score * c.weight / MAX_SCORE for c in category_scores)
        scores.append(
            ItemScore(
                item_id=item.item_id,
                item_name=item.name,
                total_score=total,
                metric_scores=tuple(metric_scores),
                rank=0,
                category_scores=tuple(category_scores),
                breakdown=_breakdown(category_scores, total),
            )
        )

    return _ranked(_with_metric_ranks(scores))


def _with_metric_ranks(scores: list[ItemScore]) -> list[ItemScore]:
    """Fill per-metric ranks; an item without a score on a metric counts as 0."""
    metric_ids = dict.fromkeys(ms.metric_id for s in scores for ms in s.metric_scores)
    ranks: dict[str, list[int]] = {}
    for metric_id in metric_ids:
        column = [
            next((ms.score for ms in s.metric_scores if ms.metric_id == metric_id), 0.0)
            for s in scores
        ]
        ranks[metric_id] = _ranks(column)

    return [
        replace(
            s,
            metric_scores=tuple(
                replace(ms, rank=ranks[ms.metric_id][index]) for ms in s.metric_scores
            ),
        )
        for index, s in enumerate(scores)
    ]


def value_indicator(
    value: float | None,
    all_values: Sequence[float | None],
    better_direction: BetterDirection | None = None,
) -> ValueIndicator | None:
    """Classify ``value`` against the other values of the same metric.

    The favourable extreme is ``BEST`` and the other extreme ``WORST``. A
    value at or beyond the 70th percentile position on the favourable side
    is ``GOOD``; at or beyond the 30th on the other side it is ``BAD``.
    Anything else, and any non-finite value, has no indicator.
    """
    if value is None or not math.isfinite(value):
        return None
    ordered = sorted(v for v in all_values if v is not None and math.isfinite(v))
    if not ordered:
        return None

    lower_is_better = better_direction is BetterDirection.LOWER
    best, worst = (ordered[0], ordered[-1]) if lower_is_better else (ordered[-1], ordered[0])
    if abs(value - best) < _INDICATOR_TOLERANCE:
        return ValueIndicator.BEST
    if abs(value - worst) < _INDICATOR_TOLERANCE:
        return ValueIndicator.WORST

    low_index = math.floor(len(ordered) * 0.3)
    high_index = math.ceil(len(ordered) * 0.7)
    low_cut = ordered[low_index]
    high_cut = ordered[high_index] if high_index < len(ordered) else None

    if lower_is_better:
        if value <= low_cut:
            return ValueIndicator.GOOD
        if high_cut is not None and value >= high_cut:
            return ValueIndicator.BAD
    else:
        if high_cut is not None and value >= high_cut:
            return ValueIndicator.GOOD
        if value <= low_cut:
            return ValueIndicator.BAD
    return None


__all__ = [
    "NEUTRAL_SCORE",
    "CategoryScore",
    "ItemScore",
    "MetricContribution",
    "MetricScore",
    "ScoringItem",
    "ScoringMetric",
    "calculate_category_scores",
    "calculate_overall_scores",
    "normalize_values",
    "value_indicator",
]
