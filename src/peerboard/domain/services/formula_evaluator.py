# src/peerboard/domain/services/formula_evaluator.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Restricted arithmetic formula evaluator.

Purpose:
    Evaluate user-authored custom metric formulas such as
    ``"marketCap / netIncome"`` against the numeric fields of a record.

Layer:
    domain

Notes:
    - This module is pure domain logic:
        * No logging.
        * No I/O.
        * No use of ``eval``, ``exec`` or ``compile``.
    - The grammar is closed and expression-only::

        expression := term (("+" | "-") term)*
        term       := unary (("*" | "/") unary)*
        unary      := "-" unary | primary
        primary    := NUMBER | IDENTIFIER | "(" expression ")"

      Anything else (calls, attribute access, subscripts, assignment,
      statement separators, other operators) is a syntax error.
    - Identifiers are opaque field-name tokens; keywords of any language are
      not special.
    - Failures are surfaced as :class:`EvaluationFailure` values instead of
      exceptions, so callers never receive a partial or garbage number.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from peerboard.domain.entities.record import as_float
from peerboard.domain.enums.evaluation_failure_reason import EvaluationFailureReason
from peerboard.domain.exceptions.formula import (
    EmptyFormulaError,
    FormulaError,
    FormulaSyntaxError,
    NonFiniteResultError,
    NonNumericFieldError,
    UnknownIdentifierError,
)

DEFAULT_MAX_FORMULA_LENGTH = 2000
MAX_NESTING_DEPTH = 64

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<number>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<identifier>[A-Za-z_$][A-Za-z0-9_$]*)
    |(?P<operator>[-+*/])
    |(?P<lparen>\()
    |(?P<rparen>\))
    """,
    re.VERBOSE,
)


# --------------------------------------------------------------------------- #
# Public result types                                                         #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class EvaluationFailure:
    """Structured failure for a formula evaluation.

    Attributes:
        reason:
            Machine-readable failure category.
        message:
            Human-readable description, suitable for logs and editor hints.
        identifiers:
            Field names implicated in the failure (missing or non-numeric
            fields); empty for syntax and arithmetic failures.
    """

    reason: EvaluationFailureReason
    message: str
    identifiers: tuple[str, ...] = ()


@dataclass(frozen=True)
class FormulaValidation:
    """Result of checking a formula against a set of available fields."""

    valid: bool
    missing_fields: tuple[str, ...] = ()
    error: str | None = None


# --------------------------------------------------------------------------- #
# Tokenizer                                                                   #
# --------------------------------------------------------------------------- #


class TokenKind(str, Enum):
    """Lexical token categories."""

    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    OPERATOR = "OPERATOR"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    END = "END"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    position: int


def tokenize(formula: str) -> list[Token]:
    """Split ``formula`` into tokens, terminated by an END token.

    Raises:
        FormulaSyntaxError: On any character outside the grammar.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(formula):
        match = _TOKEN_PATTERN.match(formula, pos)
        if match is None:
            raise FormulaSyntaxError(
                f"unexpected character {formula[pos]!r} at position {pos}",
                details={"position": pos},
            )
        group = match.lastgroup
        if group != "ws":
            tokens.append(Token(kind=TokenKind[group.upper()], text=match.group(), position=pos))
        pos = match.end()
    tokens.append(Token(kind=TokenKind.END, text="", position=len(formula)))
    return tokens


# --------------------------------------------------------------------------- #
# Expression tree                                                             #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    value: float

    def evaluate(self, env: Mapping[str, float]) -> float:
        return self.value


@dataclass(frozen=True, slots=True)
class FieldReference:
    name: str

    def evaluate(self, env: Mapping[str, float]) -> float:
        try:
            return env[self.name]
        except KeyError as exc:
            raise UnknownIdentifierError(
                f"unknown field '{self.name}'", identifiers=(self.name,)
            ) from exc


@dataclass(frozen=True, slots=True)
class Negation:
    operand: Expression

    def evaluate(self, env: Mapping[str, float]) -> float:
        return -self.operand.evaluate(env)


@dataclass(frozen=True, slots=True)
class OperatorChain:
    """Left-associative run of operators sharing one precedence level.

    ``a - b + c`` is stored as ``first=a, rest=(("-", b), ("+", c))`` and
    folded left to right, which keeps tree depth independent of formula
    length.
    """

    first: Expression
    rest: tuple[tuple[str, Expression], ...]

    def evaluate(self, env: Mapping[str, float]) -> float:
        result = self.first.evaluate(env)
        for operator, operand in self.rest:
            value = operand.evaluate(env)
            try:
                if operator == "+":
                    result = result + value
                elif operator == "-":
                    result = result - value
                elif operator == "*":
                    result = result * value
                else:
                    result = result / value
            except ZeroDivisionError as exc:
                raise NonFiniteResultError("division by zero") from exc
            except OverflowError as exc:
                raise NonFiniteResultError("arithmetic overflow") from exc
        return result


type Expression = NumberLiteral | FieldReference | Negation | OperatorChain


# --------------------------------------------------------------------------- #
# Parser                                                                      #
# --------------------------------------------------------------------------- #


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._index = 0
        self._depth = 0

    def parse(self) -> Expression:
        expression = self._expression()
        token = self._peek()
        if token.kind is not TokenKind.END:
            raise FormulaSyntaxError(
                f"unexpected {token.text!r} at position {token.position}",
                details={"position": token.position},
            )
        return expression

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _enter(self, token: Token) -> None:
        self._depth += 1
        if self._depth > MAX_NESTING_DEPTH:
            raise FormulaSyntaxError(
                f"formula nesting exceeds {MAX_NESTING_DEPTH} levels",
                details={"position": token.position},
            )

    def _expression(self) -> Expression:
        first = self._term()
        rest: list[tuple[str, Expression]] = []
        while self._peek().kind is TokenKind.OPERATOR and self._peek().text in "+-":
            operator = self._advance().text
            rest.append((operator, self._term()))
        return OperatorChain(first=first, rest=tuple(rest)) if rest else first

    def _term(self) -> Expression:
        first = self._unary()
        rest: list[tuple[str, Expression]] = []
        while self._peek().kind is TokenKind.OPERATOR and self._peek().text in "*/":
            operator = self._advance().text
            rest.append((operator, self._unary()))
        return OperatorChain(first=first, rest=tuple(rest)) if rest else first

    def _unary(self) -> Expression:
        token = self._peek()
        if token.kind is TokenKind.OPERATOR and token.text == "-":
            self._advance()
            self._enter(token)
            operand = self._unary()
            self._depth -= 1
            return Negation(operand=operand)
        return self._primary()

    def _primary(self) -> Expression:
        token = self._advance()
        if token.kind is TokenKind.NUMBER:
            return NumberLiteral(value=float(token.text))
        if token.kind is TokenKind.IDENTIFIER:
            return FieldReference(name=token.text)
        if token.kind is TokenKind.LPAREN:
            self._enter(token)
            inner = self._expression()
            closing = self._advance()
            if closing.kind is not TokenKind.RPAREN:
                raise FormulaSyntaxError(
                    f"expected ')' at position {closing.position}",
                    details={"position": closing.position},
                )
            self._depth -= 1
            return inner
        if token.kind is TokenKind.END:
            raise FormulaSyntaxError(
                "unexpected end of formula", details={"position": token.position}
            )
        raise FormulaSyntaxError(
            f"unexpected {token.text!r} at position {token.position}",
            details={"position": token.position},
        )


def _collect_identifiers(node: Expression, seen: dict[str, None]) -> None:
    if isinstance(node, FieldReference):
        seen.setdefault(node.name, None)
    elif isinstance(node, Negation):
        _collect_identifiers(node.operand, seen)
    elif isinstance(node, OperatorChain):
        _collect_identifiers(node.first, seen)
        for _, operand in node.rest:
            _collect_identifiers(operand, seen)


# --------------------------------------------------------------------------- #
# Compiled formula and entry points                                           #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class CompiledFormula:
    """Parsed formula ready for repeated evaluation.

    Attributes:
        source:
            The stripped formula text.
        expression:
            Root of the immutable expression tree.
        identifiers:
            Field names referenced by the formula, in first-use order.
    """

    source: str
    expression: Expression
    identifiers: tuple[str, ...]

    def evaluate(self, env: Mapping[str, float]) -> float:
        """Evaluate against a numeric environment.

        Raises:
            UnknownIdentifierError: If a referenced field is not in ``env``.
            NonFiniteResultError: On division by zero or a non-finite result.
        """
        missing = tuple(name for name in self.identifiers if name not in env)
        if missing:
            raise UnknownIdentifierError(
                f"unknown field(s): {', '.join(missing)}", identifiers=missing
            )
        result = self.expression.evaluate(env)
        if not math.isfinite(result):
            raise NonFiniteResultError(f"result is not finite ({result})")
        return result


def compile_formula(
    formula: str,
    *,
    max_length: int = DEFAULT_MAX_FORMULA_LENGTH,
) -> CompiledFormula:
    """Tokenize and parse ``formula``.

    Raises:
        EmptyFormulaError: If the formula is blank.
        FormulaSyntaxError: If it exceeds ``max_length`` or violates the
            grammar.
    """
    source = formula.strip() if isinstance(formula, str) else ""
    if not source:
        raise EmptyFormulaError("formula is empty")
    if len(source) > max_length:
        raise FormulaSyntaxError(
            f"formula exceeds {max_length} characters", details={"length": len(source)}
        )

    expression = _Parser(tokenize(source)).parse()
    seen: dict[str, None] = {}
    _collect_identifiers(expression, seen)
    return CompiledFormula(source=source, expression=expression, identifiers=tuple(seen))


def evaluate(
    formula: str,
    record: Mapping[str, Any],
    *,
    max_length: int = DEFAULT_MAX_FORMULA_LENGTH,
) -> float | EvaluationFailure:
    """Evaluate ``formula`` against the numeric fields of ``record``.

    Args:
        formula:
            Arithmetic expression over record field names.
        record:
            Record (or any field mapping). Only values that are numbers are
            visible to the formula.
        max_length:
            Upper bound on the stripped formula length.

    Returns:
        The finite result, or an :class:`EvaluationFailure`.
    """
    try:
        compiled = compile_formula(formula, max_length=max_length)
        env = {
            key: number
            for key, value in record.items()
            if (number := as_float(value)) is not None
        }

        missing = [name for name in compiled.identifiers if name not in env]
        non_numeric = tuple(name for name in missing if record.get(name) is not None)
        if non_numeric:
            raise NonNumericFieldError(
                f"non-numeric field(s): {', '.join(non_numeric)}", identifiers=non_numeric
            )
        return compiled.evaluate(env)
    except FormulaError as exc:
        return EvaluationFailure(reason=exc.reason, message=str(exc), identifiers=exc.identifiers)


def validate_formula(
    formula: str,
    available_fields: Iterable[str],
    *,
    max_length: int = DEFAULT_MAX_FORMULA_LENGTH,
) -> FormulaValidation:
    """Check that ``formula`` parses and references only ``available_fields``."""
    try:
        compiled = compile_formula(formula, max_length=max_length)
    except FormulaError as exc:
        return FormulaValidation(valid=False, error=str(exc))

    available = set(available_fields)
    missing = tuple(name for name in compiled.identifiers if name not in available)
    return FormulaValidation(valid=not missing, missing_fields=missing)


__all__ = [
    "DEFAULT_MAX_FORMULA_LENGTH",
    "MAX_NESTING_DEPTH",
    "CompiledFormula",
    "EvaluationFailure",
    "FieldReference",
    "FormulaValidation",
    "Negation",
    "NumberLiteral",
    "OperatorChain",
    "Token",
    "TokenKind",
    "compile_formula",
    "evaluate",
    "tokenize",
    "validate_formula",
]
