# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Scoring enumerations.

Purpose:
    Tag which direction of a metric is favourable, how raw metric values are
    normalized to a 0-100 score, and the qualitative standing of one value
    among its peers.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum


class BetterDirection(str, Enum):
    """Which end of a metric's range scores highest."""

    HIGHER = "higher"
    LOWER = "lower"


class NormalizationMethod(str, Enum):
    """How one metric's values across items map onto 0-100."""

    MIN_MAX = "min-max"
    PERCENTILE = "percentile"
    Z_SCORE = "z-score"


class ValueIndicator(str, Enum):
    """Standing of a value among the values of the same metric."""

    BEST = "best"
    WORST = "worst"
    GOOD = "good"
    BAD = "bad"


__all__ = ["BetterDirection", "NormalizationMethod", "ValueIndicator"]
