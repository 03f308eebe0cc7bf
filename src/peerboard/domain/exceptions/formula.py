# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Formula Exceptions

Purpose:
    Internal error types raised while tokenizing, parsing, or evaluating a
    custom metric formula. The evaluator maps each of them onto an
    :class:`EvaluationFailure`; they never cross the engine façade.

Layer: domain/exceptions
"""
from __future__ import annotations

from typing import Any

from peerboard.domain.enums.evaluation_failure_reason import EvaluationFailureReason

from .base import DomainError


class FormulaError(DomainError):
    """Base class for formula errors.

    Args:
        message: Human-readable description.
        identifiers: Field names involved in the failure, if any.
        details: Optional structured context.
    """

    code = "FORMULA_ERROR"
    reason: EvaluationFailureReason = EvaluationFailureReason.SYNTAX_ERROR

    def __init__(
        self,
        message: str = "",
        *,
        identifiers: tuple[str, ...] = (),
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.identifiers = identifiers


class EmptyFormulaError(FormulaError):
    """Formula is empty or whitespace only."""

    code = "FORMULA_EMPTY"
    reason = EvaluationFailureReason.EMPTY_FORMULA


class FormulaSyntaxError(FormulaError):
    """Formula does not match the arithmetic grammar."""

    code = "FORMULA_SYNTAX"
    reason = EvaluationFailureReason.SYNTAX_ERROR


class UnknownIdentifierError(FormulaError):
    """Formula references a field that is absent from the record."""

    code = "FORMULA_UNKNOWN_IDENTIFIER"
    reason = EvaluationFailureReason.UNKNOWN_IDENTIFIER


class NonNumericFieldError(FormulaError):
    """Formula references a field whose value is not a number."""

    code = "FORMULA_NON_NUMERIC_FIELD"
    reason = EvaluationFailureReason.NON_NUMERIC_FIELD


class NonFiniteResultError(FormulaError):
    """Evaluation divided by zero or produced an infinite/NaN result."""

    code = "FORMULA_NON_FINITE"
    reason = EvaluationFailureReason.NON_FINITE_RESULT
