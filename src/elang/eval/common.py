from __future__ import annotations

from types import SimpleNamespace
from typing import Any

from lark import Token

from ..runtime import ElNumber, ElString, ElValue, EvaluationError, TypeMismatch, kind_name
from ..tree import is_token, node_position, token_kind

def expect_ident_token(node: Any, context: str) -> str:
    if is_token(node) and token_kind(node) == 'IDENT':
        return str(node.value)

    raise TypeMismatch(f"{context} must be an identifier")

def require_number(value: ElValue, context: str) -> float:
    if isinstance(value, ElNumber):
        return value.value

    raise TypeMismatch(f"{context} expects a number; got {kind_name(value)}")

def token_number(token: Token, _: Any) -> ElNumber:
    return ElNumber(float(token.value))

def token_string(token: Token, _: Any) -> ElString:
    raw = token.value

    if len(raw) >= 2 and ((raw[0] == '"' and raw[-1] == '"') or (raw[0] == "'" and raw[-1] == "'")):
        raw = raw[1:-1]

    return ElString(raw)

def attach_location(exc: EvaluationError, node: Any) -> None:
    """Record node's line/column on exc unless an inner node already did."""
    if exc.el_meta is not None:
        return

    line, column = node_position(node)
    if line is None:
        return

    exc.el_meta = SimpleNamespace(line=line, column=column)
