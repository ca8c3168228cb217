from __future__ import annotations

from typing import Callable, List

from lark import Token

from ..runtime import (
    Frame,
    ElBool,
    ElNumber,
    ElValue,
    DivisionByZero,
    EvaluationError,
    TypeMismatch,
    kind_name,
)
from ..tree import Node
from ..utils import el_equals
from .common import attach_location
from .helpers import require_bool

EvalFunc = Callable[[Node, Frame], ElValue]

def as_op(x: Node) -> str:
    if isinstance(x, Token):
        return str(x.value)

    raise EvaluationError(f"Expected operator token, got {x!r}")

def eval_unary(op_node: Token, rhs_node: Node, frame: Frame, eval_func: EvalFunc) -> ElValue:
    rhs = eval_func(rhs_node, frame)

    match op_node:
        case Token(type='MINUS'):
            if not isinstance(rhs, ElNumber):
                raise TypeMismatch(f"Unary '-' expects a number; got {kind_name(rhs)}")
            return ElNumber(-rhs.value)
        case Token(type='NEG') | Token(type='NOT'):
            return ElBool(not require_bool(rhs, str(op_node.value)))
        case _:
            raise EvaluationError(f"Unsupported unary op {op_node.value!r}")

def eval_infix(children: List[Node], frame: Frame, eval_func: EvalFunc) -> ElValue:
    """Fold [lhs, op, rhs, op, rhs, ...] left to right."""
    it = iter(children)
    acc = eval_func(next(it), frame)

    for x in it:
        op = as_op(x)
        rhs = eval_func(next(it), frame)

        try:
            acc = apply_binary_operator(op, acc, rhs)
        except EvaluationError as e:
            attach_location(e, x)
            raise

    return acc

def eval_compare(children: List[Node], frame: Frame, eval_func: EvalFunc) -> ElValue:
    it = iter(children)
    acc = eval_func(next(it), frame)

    for x in it:
        op = as_op(x)
        rhs = eval_func(next(it), frame)

        try:
            acc = ElBool(compare_values(op, acc, rhs))
        except EvaluationError as e:
            attach_location(e, x)
            raise

    return acc

def eval_logical(kind: str, children: List[Node], frame: Frame, eval_func: EvalFunc) -> ElValue:
    """&& / || over Bool operands, stopping once the result is decided."""
    op = '&&' if kind == 'and' else '||'
    operands = [child for child in children if not isinstance(child, Token) or child.type not in ('AND', 'OR')]

    for child in operands:
        val = eval_func(child, frame)

        try:
            val = require_bool(val, op)
        except EvaluationError as e:
            attach_location(e, child)
            raise

        if kind == 'and' and not val:
            return ElBool(False)
        if kind == 'or' and val:
            return ElBool(True)

    return ElBool(kind == 'and')

def _numbers(op: str, lhs: ElValue, rhs: ElValue) -> tuple[float, float]:
    if isinstance(lhs, ElNumber) and isinstance(rhs, ElNumber):
        return lhs.value, rhs.value

    raise TypeMismatch(
        f"Operator '{op}' expects numbers; got {kind_name(lhs)} and {kind_name(rhs)}"
    )

def apply_binary_operator(op: str, lhs: ElValue, rhs: ElValue) -> ElValue:
    a, b = _numbers(op, lhs, rhs)

    match op:
        case '+':
            return ElNumber(a + b)
        case '-':
            return ElNumber(a - b)
        case '*':
            return ElNumber(a * b)
        case '/':
            if b == 0:
                raise DivisionByZero()
            return ElNumber(a / b)
    raise EvaluationError(f"Unknown operator {op}")

def compare_values(op: str, lhs: ElValue, rhs: ElValue) -> bool:
    match op:
        case '==':
            return el_equals(lhs, rhs)
        case '!=':
            return not el_equals(lhs, rhs)

    a, b = _numbers(op, lhs, rhs)

    match op:
        case '<':
            return a < b
        case '<=':
            return a <= b
        case '>':
            return a > b
        case '>=':
            return a >= b
        case _:
            raise EvaluationError(f"Unknown comparator {op}")
