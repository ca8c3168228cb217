from __future__ import annotations

import pytest

from tests.support.harness import (
    DivisionByZero,
    TypeMismatch,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param("2 + 3 * 4", ("number", 14), None, id="precedence-mul-over-add"),
    pytest.param("(2 + 3) * 4", ("number", 20), None, id="precedence-parens"),
    pytest.param("10 - 4 - 3", ("number", 3), None, id="sub-left-assoc"),
    pytest.param("100 / 10 / 5", ("number", 2), None, id="div-left-assoc"),
    pytest.param("7 / 2", ("number", 3.5), None, id="div-fractional"),
    pytest.param("0.1 + 0.2", ("number", 0.3), None, id="add-fractional"),
    pytest.param("3 + -5", ("number", -2), None, id="unary-minus-operand"),
    pytest.param("2 * -3", ("number", -6), None, id="unary-minus-mul"),
    pytest.param("--5", ("number", 5), None, id="double-negation"),
    pytest.param("-(2 + 3)", ("number", -5), None, id="negate-group"),
    pytest.param("1 - -1", ("number", 2), None, id="minus-minus"),
    pytest.param("6 / 0", None, DivisionByZero, id="div-zero"),
    pytest.param("0 / 0", None, DivisionByZero, id="div-zero-zero"),
    pytest.param("1 / (2 - 2)", None, DivisionByZero, id="div-zero-computed"),
    pytest.param('1 + "a"', None, TypeMismatch, id="add-number-string"),
    pytest.param('"a" + "b"', None, TypeMismatch, id="no-string-concat"),
    pytest.param("true + 1", None, TypeMismatch, id="add-bool"),
    pytest.param("[1] * 2", None, TypeMismatch, id="mul-array"),
    pytest.param('-"x"', None, TypeMismatch, id="negate-string"),
    pytest.param("1 < 2", ("bool", True), None, id="lt"),
    pytest.param("2 <= 2", ("bool", True), None, id="lte"),
    pytest.param("3 > 4", ("bool", False), None, id="gt"),
    pytest.param("3 >= 4", ("bool", False), None, id="gte"),
    pytest.param('"a" < "b"', None, TypeMismatch, id="lt-strings"),
    pytest.param("[1] >= [0]", None, TypeMismatch, id="gte-arrays"),
    pytest.param("1 < 2 < 3", None, TypeMismatch, id="chained-relational"),
    pytest.param("1 < 2 == true", ("bool", True), None, id="relational-then-equality"),
    pytest.param("1 == 1", ("bool", True), None, id="eq-numbers"),
    pytest.param("1 != 2", ("bool", True), None, id="neq-numbers"),
    pytest.param("1.0 == 1", ("bool", True), None, id="eq-number-forms"),
    pytest.param('"abc" == "abc"', ("bool", True), None, id="eq-strings"),
    pytest.param("'abc' == \"abc\"", ("bool", True), None, id="eq-strings-mixed-quotes"),
    pytest.param('"abc" == "abd"', ("bool", False), None, id="eq-strings-differ"),
    pytest.param('1 == "1"', ("bool", False), None, id="eq-cross-kind"),
    pytest.param('1 != "1"', ("bool", True), None, id="neq-cross-kind"),
    pytest.param("true == 1", ("bool", False), None, id="eq-bool-number"),
    pytest.param("[1, 2] == [1, 2]", ("bool", True), None, id="eq-arrays"),
    pytest.param("[1, [2]] == [1, [2]]", ("bool", True), None, id="eq-nested-arrays"),
    pytest.param("[1, 2] == [2, 1]", ("bool", False), None, id="eq-arrays-order"),
    pytest.param("[1] == [1, 1]", ("bool", False), None, id="eq-arrays-length"),
    pytest.param("[] != []", ("bool", False), None, id="neq-empty-arrays"),
    pytest.param("true && false", ("bool", False), None, id="and"),
    pytest.param("true || false", ("bool", True), None, id="or"),
    pytest.param("false || false || true", ("bool", True), None, id="or-chain"),
    pytest.param("true && true && false", ("bool", False), None, id="and-chain"),
    pytest.param("true || false && false", ("bool", True), None, id="and-over-or"),
    pytest.param("!true", ("bool", False), None, id="bang"),
    pytest.param("not false", ("bool", True), None, id="not-keyword"),
    pytest.param("not (1 == 2)", ("bool", True), None, id="not-group"),
    pytest.param("!!true", ("bool", True), None, id="double-bang"),
    pytest.param("not 1 == 2", None, TypeMismatch, id="not-binds-tight"),
    pytest.param("!0", None, TypeMismatch, id="bang-number"),
    pytest.param("false && (1/0 == 0)", ("bool", False), None, id="and-short-circuit"),
    pytest.param("true || (1/0 == 0)", ("bool", True), None, id="or-short-circuit"),
    pytest.param("true && (1/0 == 0)", None, DivisionByZero, id="and-evaluates-rhs"),
    pytest.param("false && 1", ("bool", False), None, id="short-circuit-skips-type-check"),
    pytest.param("1 && true", None, TypeMismatch, id="and-number-lhs"),
    pytest.param("true && 1", None, TypeMismatch, id="and-number-rhs"),
    pytest.param('false || "yes"', None, TypeMismatch, id="or-string-rhs"),
    pytest.param(" + ".join(["1"] * 5000), ("number", 5000), None, id="long-chain"),
    pytest.param("(" * 30 + "1" + ")" * 30, ("number", 1), None, id="deep-parens"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_operators(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)
