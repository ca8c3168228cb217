"""Shared helpers for working with the lark Tree/Token nodes the parser builds."""
from __future__ import annotations
from typing import Iterator, List, Optional, Tuple, TypeGuard

from lark import Tree, Token
from typing_extensions import TypeAlias


Node: TypeAlias = Tree | Token


def is_tree(node: Node) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Node) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Node) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Node) -> List[Node]:
    if not is_tree(node):
        return []

    children = getattr(node, "children", None)
    if children is None:
        return []

    return list(children)

def token_kind(node: Node) -> Optional[str]:
    if not is_token(node):
        return None
    return str(node.type)

def iter_tokens(node: Node) -> Iterator[Token]:
    """Yield the leaf tokens of a subtree in source order."""
    if is_token(node):
        yield node
        return

    for child in tree_children(node):
        yield from iter_tokens(child)

def node_position(node: Node) -> Tuple[Optional[int], Optional[int]]:
    """Line/column of the first positioned token under node."""
    for tok in iter_tokens(node):
        line = getattr(tok, "line", None)
        if line is not None:
            return line, getattr(tok, "column", None)

    return None, None
