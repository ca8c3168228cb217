from __future__ import annotations

from typing import Callable, Sequence

from ..runtime import Frame, ElArray, ElNumber, ElValue, EvaluationError, IndexOutOfBounds, TypeMismatch, kind_name
from ..tree import Node
from .common import attach_location

EvalFunc = Callable[[Node, Frame], ElValue]

def index_value(base: ElValue, idx: ElValue) -> ElValue:
    if not isinstance(base, ElArray):
        raise TypeMismatch(f"Cannot index {kind_name(base)}; only arrays support indexing")

    if not isinstance(idx, ElNumber):
        raise TypeMismatch(f"Array index must be a number; got {kind_name(idx)}")

    raw = idx.value
    if not raw.is_integer():
        raise TypeMismatch(f"Array index must be an integer; got {raw}")

    i = int(raw)
    if i < 0 or i >= len(base.items):
        raise IndexOutOfBounds(raw, len(base.items))

    return base.items[i]

def eval_index(children: Sequence[Node], frame: Frame, eval_func: EvalFunc) -> ElValue:
    """Apply a[i][j]... left to right over the flat index chain."""
    val = eval_func(children[0], frame)

    for idx_node in children[1:]:
        idx = eval_func(idx_node, frame)

        try:
            val = index_value(val, idx)
        except EvaluationError as e:
            attach_location(e, idx_node)
            raise

    return val
