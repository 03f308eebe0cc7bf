# tests/unit/domain/services/test_formula_evaluator.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT

from __future__ import annotations

import pytest

from peerboard.domain.enums.evaluation_failure_reason import EvaluationFailureReason
from peerboard.domain.exceptions.formula import FormulaSyntaxError
from peerboard.domain.services.formula_evaluator import (
    MAX_NESTING_DEPTH,
    EvaluationFailure,
    FieldReference,
    OperatorChain,
    TokenKind,
    compile_formula,
    evaluate,
    tokenize,
    validate_formula,
)

RECORD = {
    "ticker": "AAPL",
    "name": "Apple",
    "sector": "Technology",
    "marketCap": 500.0,
    "netIncome": 25.0,
    "revenue": 100.0,
    "shares": 4,
    "zero": 0,
}


def _failure(result: float | EvaluationFailure) -> EvaluationFailure:
    assert isinstance(result, EvaluationFailure), f"expected failure, got {result!r}"
    return result


def test_tokenize_emits_kinds_and_positions() -> None:
    tokens = tokenize("a1 * (2.5e1 - $b)")

    assert [t.kind for t in tokens] == [
        TokenKind.IDENTIFIER,
        TokenKind.OPERATOR,
        TokenKind.LPAREN,
        TokenKind.NUMBER,
        TokenKind.OPERATOR,
        TokenKind.IDENTIFIER,
        TokenKind.RPAREN,
        TokenKind.END,
    ]
    assert tokens[3].text == "2.5e1"
    assert tokens[5].position == 14


@pytest.mark.parametrize(
    ("formula", "expected"),
    [
        ("marketCap / netIncome", 20.0),
        ("revenue - netIncome * 2", 50.0),
        ("(revenue - netIncome) * 2", 150.0),
        ("revenue / shares / 5", 5.0),
        ("revenue - netIncome - 25", 50.0),
        ("-netIncome + revenue", 75.0),
        ("--netIncome", 25.0),
        ("revenue * -1", -100.0),
        ("1.5e2 / 3", 50.0),
        (".5 * revenue", 50.0),
        ("  shares  ", 4.0),
    ],
)
def test_evaluate_matches_direct_arithmetic(formula: str, expected: float) -> None:
    assert evaluate(formula, RECORD) == pytest.approx(expected)


def test_division_by_zero_fails_instead_of_returning_infinity() -> None:
    failure = _failure(evaluate("marketCap / netIncome", {**RECORD, "netIncome": 0}))
    assert failure.reason is EvaluationFailureReason.NON_FINITE_RESULT


def test_overflowing_result_fails() -> None:
    failure = _failure(evaluate("1e308 * 1e308", RECORD))
    assert failure.reason is EvaluationFailureReason.NON_FINITE_RESULT


def test_missing_field_reports_unknown_identifier() -> None:
    failure = _failure(evaluate("revenueTTM - netIncome", RECORD))

    assert failure.reason is EvaluationFailureReason.UNKNOWN_IDENTIFIER
    assert failure.identifiers == ("revenueTTM",)


def test_text_field_reports_non_numeric() -> None:
    failure = _failure(evaluate("sector * 2", RECORD))

    assert failure.reason is EvaluationFailureReason.NON_NUMERIC_FIELD
    assert failure.identifiers == ("sector",)


def test_none_value_counts_as_absent() -> None:
    failure = _failure(evaluate("beta * 2", {**RECORD, "beta": None}))
    assert failure.reason is EvaluationFailureReason.UNKNOWN_IDENTIFIER


def test_boolean_value_is_not_a_number() -> None:
    failure = _failure(evaluate("flag + 1", {**RECORD, "flag": True}))
    assert failure.reason is EvaluationFailureReason.NON_NUMERIC_FIELD


def test_integer_beyond_float_range_elsewhere_in_record_is_ignored() -> None:
    assert evaluate("revenue + 1", {**RECORD, "huge": 10**400}) == 101.0


def test_integer_beyond_float_range_is_not_a_number() -> None:
    failure = _failure(evaluate("huge * 2", {**RECORD, "huge": 10**400}))

    assert failure.reason is EvaluationFailureReason.NON_NUMERIC_FIELD
    assert failure.identifiers == ("huge",)


@pytest.mark.parametrize("formula", ["", "   ", "\n\t"])
def test_blank_formula_fails(formula: str) -> None:
    failure = _failure(evaluate(formula, RECORD))
    assert failure.reason is EvaluationFailureReason.EMPTY_FORMULA


@pytest.mark.parametrize(
    "formula",
    [
        "__import__('os')",
        "__import__('os').system('echo hacked')",
        "revenue.real",
        "a.b",
        "a[0]",
        "a=1",
        "a;b",
        "lambda: 1",
        "revenue ** 2",
        "revenue % 3",
        "revenue // 2",
        "abs(revenue)",
        "revenue revenue",
        "(revenue",
        "revenue)",
        "revenue +",
        "* revenue",
        "+revenue",
        "()",
        "1..2",
        "'text'",
        "revenue if 1 else 2",
    ],
)
def test_non_arithmetic_constructs_fail_with_syntax_error(formula: str) -> None:
    failure = _failure(evaluate(formula, RECORD))
    assert failure.reason is EvaluationFailureReason.SYNTAX_ERROR


def test_formula_over_max_length_fails() -> None:
    failure = _failure(evaluate("revenue + 1", RECORD, max_length=5))
    assert failure.reason is EvaluationFailureReason.SYNTAX_ERROR


def test_nesting_limit_is_enforced() -> None:
    within = "(" * MAX_NESTING_DEPTH + "revenue" + ")" * MAX_NESTING_DEPTH
    beyond = "(" * (MAX_NESTING_DEPTH + 1) + "revenue" + ")" * (MAX_NESTING_DEPTH + 1)

    assert evaluate(within, RECORD) == 100.0
    assert _failure(evaluate(beyond, RECORD)).reason is EvaluationFailureReason.SYNTAX_ERROR
    assert _failure(evaluate("-" * 500 + "revenue", RECORD)).reason is (
        EvaluationFailureReason.SYNTAX_ERROR
    )


def test_long_operator_chain_evaluates_without_deep_recursion() -> None:
    formula = " + ".join(["shares"] * 1500)

    assert evaluate(formula, RECORD, max_length=len(formula)) == 6000.0


def test_compile_formula_collects_identifiers_in_first_use_order() -> None:
    compiled = compile_formula("b * (a - b) / c")

    assert compiled.identifiers == ("b", "a", "c")
    assert isinstance(compiled.expression, OperatorChain)
    assert compiled.expression.first == FieldReference("b")


def test_compile_formula_raises_internally() -> None:
    with pytest.raises(FormulaSyntaxError) as exc_info:
        compile_formula("a ** b")
    assert exc_info.value.reason is EvaluationFailureReason.SYNTAX_ERROR


def test_compiled_formula_is_reusable_and_deterministic() -> None:
    compiled = compile_formula("marketCap / netIncome")
    env = {"marketCap": 500.0, "netIncome": 25.0}

    assert compiled.evaluate(env) == compiled.evaluate(env) == 20.0


def test_validate_formula_reports_missing_fields() -> None:
    ok = validate_formula("a + b", ["a", "b", "c"])
    missing = validate_formula("a + d + e", ["a"])
    broken = validate_formula("a +", ["a"])

    assert ok.valid and ok.missing_fields == ()
    assert not missing.valid and missing.missing_fields == ("d", "e")
    assert not broken.valid and broken.error
