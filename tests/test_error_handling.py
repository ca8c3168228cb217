from __future__ import annotations

import pytest

from tests.support.harness import (
    ArityError,
    DivisionByZero,
    EvaluationError,
    IndexOutOfBounds,
    InvalidPattern,
    LexError,
    ParseError,
    TypeMismatch,
    UndefinedVariable,
    UnknownFunction,
    run_runtime_case,
)
from elang.runner import run
from elang.session import Session

SCENARIOS = [
    pytest.param("a = [1, 2, 3]; a[3]", None, IndexOutOfBounds, id="index-past-end"),
    pytest.param("a = [1, 2, 3]; a[-1]", None, IndexOutOfBounds, id="index-negative"),
    pytest.param("[][0]", None, IndexOutOfBounds, id="index-empty"),
    pytest.param("a = [1, 2, 3]; a[1.5]", None, TypeMismatch, id="index-fractional"),
    pytest.param('a = [1, 2, 3]; a["0"]', None, TypeMismatch, id="index-string"),
    pytest.param("5[0]", None, TypeMismatch, id="index-number-base"),
    pytest.param('"abc"[0]', None, TypeMismatch, id="index-string-base"),
    pytest.param("a = [[1]]; a[0][1]", None, IndexOutOfBounds, id="index-chain-inner"),
    pytest.param("1 +", None, ParseError, id="parse-error"),
    pytest.param("1 $ 2", None, LexError, id="lex-error"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_error_handling(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


LOCATION_CASES = [
    ("div-zero-at-operator", "6 / 0", DivisionByZero, "(line 1, col 3)"),
    ("undefined-at-identifier", "1 + missing", UndefinedVariable, "(line 1, col 5)"),
    ("index-at-index-expr", "[1, 2][5]", IndexOutOfBounds, "(line 1, col 8)"),
    ("logical-at-operand", "true && 1", TypeMismatch, "(line 1, col 9)"),
    ("arity-at-call", "len(1, 2)", ArityError, "(line 1, col 1)"),
    ("unary-at-operator", "1 + -true", TypeMismatch, "(line 1, col 5)"),
    ("inside-predicate", "filter([1], {@it > missing})", UndefinedVariable, "(line 1, col 20)"),
    ("second-line", "x = 1;\nmissing", UndefinedVariable, "(line 2, col 1)"),
]


@pytest.mark.parametrize(
    "name, source, exc_type, location",
    LOCATION_CASES,
    ids=[case[0] for case in LOCATION_CASES],
)
def test_error_location(name: str, source: str, exc_type: type, location: str) -> None:
    with pytest.raises(exc_type) as exc_info:
        run(source)

    message = str(exc_info.value)
    assert message.endswith(location)
    assert message.count("(line ") == 1


def test_index_message() -> None:
    with pytest.raises(IndexOutOfBounds, match=r"Index out of bounds: 3 \(array length 3\)"):
        run("[1, 2, 3][3]")


@pytest.mark.parametrize(
    "cls, kind",
    [
        (LexError, "LexError"),
        (ParseError, "ParseError"),
        (UndefinedVariable, "UndefinedVariable"),
        (TypeMismatch, "TypeMismatch"),
        (DivisionByZero, "DivisionByZero"),
        (IndexOutOfBounds, "IndexOutOfBounds"),
        (ArityError, "ArityError"),
        (UnknownFunction, "UnknownFunction"),
        (InvalidPattern, "InvalidPattern"),
    ],
)
def test_error_kinds(cls: type, kind: str) -> None:
    assert cls.kind == kind


def test_evaluation_errors_share_base() -> None:
    for cls in (UndefinedVariable, TypeMismatch, DivisionByZero, IndexOutOfBounds,
                ArityError, UnknownFunction, InvalidPattern):
        assert issubclass(cls, EvaluationError)


SESSION_ERROR_CASES = [
    ("div-zero", "6 / 0", "DivisionByZero: Division by zero (line 1, col 3)"),
    ("lex", "$", "LexError: Unexpected character '$' at line 1, col 1"),
    ("empty", "", "ParseError: Expression cannot be empty at line 1, col 1"),
    ("unclosed", "(1", "ParseError: Expected ')' to close parenthesis at line 1, col 3"),
    ("unknown", "nope()", "UnknownFunction: Unknown function: nope (line 1, col 1)"),
    (
        "it-outside",
        "@it",
        "UndefinedVariable: Variable @it is only available within collection function predicates (line 1, col 1)",
    ),
]


@pytest.mark.parametrize(
    "name, source, expected",
    SESSION_ERROR_CASES,
    ids=[case[0] for case in SESSION_ERROR_CASES],
)
def test_session_error_messages(name: str, source: str, expected: str) -> None:
    result = Session().evaluate(source)

    assert not result.success
    assert result.result is None
    assert result.error == expected
