"""Built-in functions (len, contains, ...) registered via elang.runtime."""

from __future__ import annotations

import re
from typing import List

from .runtime import (
    register_function,
    ElArray,
    ElBool,
    ElNumber,
    ElString,
    ElValue,
    InvalidPattern,
    TypeMismatch,
    kind_name,
)
from .utils import value_in_list

def _describe_args(args: List[ElValue]) -> str:
    return ", ".join(kind_name(arg) for arg in args)

def _require_strings(name: str, args: List[ElValue]) -> List[str]:
    if not all(isinstance(arg, ElString) for arg in args):
        raise TypeMismatch(f"{name}() arguments must be strings; got {_describe_args(args)}")

    return [arg.value for arg in args]

def _require_index(name: str, value: ElValue, what: str) -> int:
    if not isinstance(value, ElNumber):
        raise TypeMismatch(f"{name}() {what} must be a number; got {kind_name(value)}")

    if not value.value.is_integer():
        raise TypeMismatch(f"{name}() {what} must be an integer; got {value.value}")

    return int(value.value)

@register_function("len", arity=1)
def std_len(_frame, args: List[ElValue]) -> ElNumber:
    match args[0]:
        case ElString(value=s):
            return ElNumber(float(len(s)))
        case ElArray(items=items):
            return ElNumber(float(len(items)))

    raise TypeMismatch(f"len() argument must be a string or array; got {kind_name(args[0])}")

@register_function("isEmpty", arity=1)
def std_is_empty(_frame, args: List[ElValue]) -> ElBool:
    match args[0]:
        case ElString(value=s):
            return ElBool(len(s) == 0)
        case ElArray(items=items):
            return ElBool(len(items) == 0)

    raise TypeMismatch(f"isEmpty() argument must be a string or array; got {kind_name(args[0])}")

@register_function("contains", arity=2)
def std_contains(_frame, args: List[ElValue]) -> ElBool:
    container, item = args

    match container:
        case ElArray(items=items):
            return ElBool(value_in_list(items, item))
        case ElString(value=text):
            if isinstance(item, ElString):
                return ElBool(item.value in text)
            raise TypeMismatch(f"contains() on a string requires a string value; got {kind_name(item)}")

    raise TypeMismatch(f"contains() first argument must be a string or array; got {kind_name(container)}")

@register_function("startsWith", arity=2)
def std_starts_with(_frame, args: List[ElValue]) -> ElBool:
    text, prefix = _require_strings("startsWith", args)
    return ElBool(text.startswith(prefix))

@register_function("endsWith", arity=2)
def std_ends_with(_frame, args: List[ElValue]) -> ElBool:
    text, suffix = _require_strings("endsWith", args)
    return ElBool(text.endswith(suffix))

@register_function("substring", arity=3)
def std_substring(_frame, args: List[ElValue]) -> ElString:
    recv, start_val, end_val = args

    if not isinstance(recv, ElString):
        raise TypeMismatch(f"substring() first argument must be a string; got {kind_name(recv)}")

    text = recv.value
    start = _require_index("substring", start_val, "start")
    end = _require_index("substring", end_val, "end")

    # Clamp into [0, len], then order the bounds.
    start = min(max(start, 0), len(text))
    end = min(max(end, 0), len(text))
    if start > end:
        start, end = end, start

    return ElString(text[start:end])

@register_function("matches", arity=2)
def std_matches(_frame, args: List[ElValue]) -> ElBool:
    text, pattern = _require_strings("matches", args)

    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise InvalidPattern(pattern, str(exc)) from exc

    return ElBool(compiled.search(text) is not None)
