from __future__ import annotations

from typing import Callable, Optional
from lark import Token

from .runtime import (
    Frame,
    ElAbsent,
    ElArray,
    ElBool,
    ElValue,
    EvaluationError,
    UnknownFunction,
    call_function,
    init_stdlib,
    is_known_function,
)

from .tree import Node, Tree, is_token, tree_children

from .eval.common import attach_location, expect_ident_token, token_number, token_string
from .eval.expr import eval_unary, eval_infix, eval_compare, eval_logical
from .eval.postfix import eval_index
from .eval.collections import eval_collection_call

# ---------------- Public API ----------------

def eval_expr(ast: Node, frame: Optional[Frame]=None) -> ElValue:
    init_stdlib()

    if frame is None:
        frame = Frame()

    return eval_node(ast, frame)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> ElValue:
    try:
        return _eval_node_inner(n, frame)
    except EvaluationError as e:
        attach_location(e, n)
        raise


def _eval_node_inner(n: Node, frame: Frame) -> ElValue:
    if is_token(n):
        return _eval_token(n, frame)

    handler = _NODE_DISPATCH.get(n.data)
    if handler is not None:
        return handler(n, frame)

    raise EvaluationError(f"Unknown node: {n.data}")

def _eval_sequence(n: Tree, frame: Frame) -> ElValue:
    # Earlier assignments stay bound if a later statement fails.
    result: ElValue = ElAbsent()

    for stmt in tree_children(n):
        result = eval_node(stmt, frame)

    return result

def _eval_assign(n: Tree, frame: Frame) -> ElValue:
    target, value_node = n.children
    name = expect_ident_token(target, "Assignment target")
    value = eval_node(value_node, frame)
    frame.define(name, value)
    return value

def _eval_array(n: Tree, frame: Frame) -> ElValue:
    return ElArray([eval_node(item, frame) for item in tree_children(n)])

def _eval_call(n: Tree, frame: Frame) -> ElValue:
    name_tok, args_node = n.children
    name = expect_ident_token(name_tok, "Function name")

    # Unknown names fail before any argument is evaluated.
    if not is_known_function(name):
        raise UnknownFunction(name)

    args = [eval_node(arg, frame) for arg in tree_children(args_node)]
    return call_function(name, args, frame)

def _eval_token(t: Token, frame: Frame) -> ElValue:
    handler = _TOKEN_DISPATCH.get(t.type)
    if handler:
        return handler(t, frame)

    if t.type == 'IDENT':
        return frame.get(t.value)

    raise EvaluationError(f"Unhandled token {t.type}:{t.value}")

_NODE_DISPATCH: dict[str, Callable[[Tree, Frame], ElValue]] = {
    'sequence': _eval_sequence,
    'assign': _eval_assign,
    'array': _eval_array,
    'unary': lambda n, frame: eval_unary(n.children[0], n.children[1], frame, eval_node),
    'or': lambda n, frame: eval_logical('or', n.children, frame, eval_node),
    'and': lambda n, frame: eval_logical('and', n.children, frame, eval_node),
    'compare': lambda n, frame: eval_compare(n.children, frame, eval_node),
    'add': lambda n, frame: eval_infix(n.children, frame, eval_node),
    'mul': lambda n, frame: eval_infix(n.children, frame, eval_node),
    'index': lambda n, frame: eval_index(n.children, frame, eval_node),
    'call': _eval_call,
    'collection_call': lambda n, frame: eval_collection_call(n.children, frame, eval_node),
}

_TOKEN_DISPATCH: dict[str, Callable[[Token, Frame], ElValue]] = {
    'NUMBER': token_number,
    'STRING': token_string,
    'TRUE': lambda _, __: ElBool(True),
    'FALSE': lambda _, __: ElBool(False),
    'IT': lambda _, frame: frame.current_it(),
}
