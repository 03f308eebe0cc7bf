# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Scoring Exceptions

Purpose:
    Errors raised when scoring inputs or a scoring configuration cannot be
    used to rank items.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class InvalidScoringInputError(DomainError):
    """Metric values are not aligned with the items being scored."""

    code = "INVALID_SCORING_INPUT"


class InvalidScoringConfigError(DomainError):
    """A scoring configuration failed validation; ``details["errors"]`` lists why."""

    code = "INVALID_SCORING_CONFIG"
