# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Formula evaluation failure reasons.

Purpose:
    Stable identifiers for the ways a custom formula can fail to produce a
    finite number for a record.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum


class EvaluationFailureReason(str, Enum):
    """Reasons why a formula could not be evaluated."""

    EMPTY_FORMULA = "EMPTY_FORMULA"
    SYNTAX_ERROR = "SYNTAX_ERROR"
    UNKNOWN_IDENTIFIER = "UNKNOWN_IDENTIFIER"
    NON_NUMERIC_FIELD = "NON_NUMERIC_FIELD"
    NON_FINITE_RESULT = "NON_FINITE_RESULT"


__all__ = ["EvaluationFailureReason"]
