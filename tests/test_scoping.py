from __future__ import annotations

import pytest

from tests.support.harness import (
    DivisionByZero,
    UndefinedVariable,
    run_runtime_case,
)
from elang.runner import run
from elang.runtime import ElNumber, Frame, IT_NAME

SCENARIOS = [
    pytest.param("x = 5", ("number", 5), None, id="assign-returns-value"),
    pytest.param("x = 5; x", ("number", 5), None, id="assign-then-read"),
    pytest.param("x = 5; x = 10; x", ("number", 10), None, id="reassign-overwrites"),
    pytest.param("x = 5; y = 10; x + y", ("number", 15), None, id="multi-statement"),
    pytest.param("x = 1; x = x + 1; x", ("number", 2), None, id="self-reference"),
    pytest.param('s = "hi"; len(s)', ("number", 2), None, id="assign-string"),
    pytest.param("a = [1, 2, 3]; a[0]", ("number", 1), None, id="index-first"),
    pytest.param("a = [1, 2, 3]; a[2]", ("number", 3), None, id="index-last"),
    pytest.param("a = [[1, 2], [3]]; a[0][1]", ("number", 2), None, id="index-chain"),
    pytest.param("x = 1 == 1; x", ("bool", True), None, id="assign-equality"),
    pytest.param("X = 1; x = 2; X", ("number", 1), None, id="case-sensitive"),
    pytest.param("_a1 = 3; _a1", ("number", 3), None, id="underscore-name"),
    pytest.param("undefinedVar", None, UndefinedVariable, id="undefined"),
    pytest.param("x = 5; undefinedVar", None, UndefinedVariable, id="undefined-after-assign"),
    pytest.param("x = y", None, UndefinedVariable, id="assign-from-undefined"),
    pytest.param("@it", None, UndefinedVariable, id="it-outside-predicate"),
    pytest.param("@it + 1", None, UndefinedVariable, id="it-in-expression"),
    pytest.param("x = @it", None, UndefinedVariable, id="it-assigned"),
    pytest.param("filter([1], {true}); @it", None, UndefinedVariable, id="it-after-predicate"),
    pytest.param("x = 1 / 0", None, DivisionByZero, id="failed-assign"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_scoping(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_bindings_survive_failed_statement() -> None:
    frame = Frame()

    with pytest.raises(UndefinedVariable):
        run("x = 5; undefinedVar", frame)

    assert frame.get("x") == ElNumber(5.0)


def test_failed_assignment_does_not_bind() -> None:
    frame = Frame()

    with pytest.raises(DivisionByZero):
        run("x = 1 / 0", frame)

    assert not frame.has("x")


def test_frame_persists_across_runs() -> None:
    frame = Frame()
    run("count = 1", frame)
    run("count = count + 1", frame)
    assert frame.get("count") == ElNumber(2.0)


def test_array_bindings_do_not_alias() -> None:
    frame = Frame()
    run("a = [1, 2]; b = a; a = [9]", frame)
    assert run("b[0]", frame) == ElNumber(1.0)


def test_it_never_stored_in_vars() -> None:
    frame = Frame()
    run("filter([1, 2], {@it > 1})", frame)
    assert IT_NAME not in frame.vars
    with pytest.raises(UndefinedVariable):
        frame.current_it()


def test_undefined_variable_names_identifier() -> None:
    with pytest.raises(UndefinedVariable) as exc_info:
        run("1 + missing")

    assert exc_info.value.name == "missing"
    assert "missing" in str(exc_info.value)


def test_it_outside_predicate_message() -> None:
    with pytest.raises(UndefinedVariable, match="only available within collection function predicates"):
        run("@it")


def test_predicate_frame_stack() -> None:
    frame = Frame()

    with frame.predicate_frame(ElNumber(1.0)):
        with frame.predicate_frame(ElNumber(2.0)):
            assert frame.current_it() == ElNumber(2.0)
        assert frame.current_it() == ElNumber(1.0)

    with pytest.raises(UndefinedVariable):
        frame.current_it()
