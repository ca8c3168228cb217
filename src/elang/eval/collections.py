from __future__ import annotations

from typing import Callable, List

from ..runtime import Frame, ElArray, ElBool, ElValue, EvaluationError, TypeMismatch, kind_name
from ..tree import Node, tree_children
from .common import expect_ident_token
from .helpers import is_truthy

EvalFunc = Callable[[Node, Frame], ElValue]

def _predicate_body(node: Node) -> Node:
    children = tree_children(node)
    if len(children) != 1:
        raise EvaluationError("Malformed predicate")
    return children[0]

def eval_collection_call(children: List[Node], frame: Frame, eval_func: EvalFunc) -> ElValue:
    """
    filter/all/any: evaluate the predicate once per element with @it bound
    to that element. all/any stop at the first element that decides the result.
    """
    name = expect_ident_token(children[0], "Collection function name")
    collection = eval_func(children[1], frame)
    body = _predicate_body(children[2])

    if not isinstance(collection, ElArray):
        raise TypeMismatch(f"{name}() requires an array; got {kind_name(collection)}")

    def check(item: ElValue) -> bool:
        with frame.predicate_frame(item):
            return is_truthy(eval_func(body, frame))

    match name:
        case 'filter':
            return ElArray([item for item in collection.items if check(item)])
        case 'all':
            return ElBool(all(check(item) for item in collection.items))
        case 'any':
            return ElBool(any(check(item) for item in collection.items))

    raise EvaluationError(f"Unknown collection function: {name}")
