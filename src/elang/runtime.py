from __future__ import annotations

import copy
import importlib
import math
from typing import Any, Callable, List, Optional

from .types import (
    ElAbsent, ElNumber, ElString, ElBool, ElArray,
    ElValue, ElFn, Frame, BuiltinFunction, Builtins,
    EvaluationError, UndefinedVariable, TypeMismatch, DivisionByZero,
    IndexOutOfBounds, ArityError, UnknownFunction, InvalidPattern,
    is_el_value, kind_name, IT_NAME, COLLECTION_CALLS,
)
from .logging_config import get_logger

logger = get_logger(__name__)

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_function hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("elang.stdlib")
    _STDLIB_INITIALIZED = True
    logger.debug("stdlib loaded: %s", ", ".join(sorted(Builtins.functions)))

def register_function(name: str, *, arity: Optional[int] = None):
    def dec(fn: ElFn):
        Builtins.functions[name] = BuiltinFunction(name=name, fn=fn, arity=arity)
        logger.debug("registered %s() arity=%s", name, arity)
        return fn

    return dec

def expect_arity(name: str, args: List[ElValue], expected: int) -> None:
    if len(args) != expected:
        noun = "argument" if expected == 1 else "arguments"
        raise ArityError(f"{name}() requires exactly {expected} {noun}; got {len(args)}")

def call_function(name: str, args: List[ElValue], frame: Frame) -> ElValue:
    init_stdlib()

    builtin = Builtins.functions.get(name)
    if builtin is None:
        raise UnknownFunction(name)

    if builtin.arity is not None:
        expect_arity(name, args, builtin.arity)

    return builtin.fn(frame, args)

def is_known_function(name: str) -> bool:
    init_stdlib()
    return name in Builtins.functions or name in COLLECTION_CALLS

def from_python(value: Any) -> ElValue:
    """Convert a host value (seed binding) into an elang value."""
    if is_el_value(value):
        return copy.deepcopy(value)

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ElBool(value)

    if isinstance(value, (int, float)):
        return ElNumber(float(value))

    if isinstance(value, str):
        return ElString(value)

    if isinstance(value, (list, tuple)):
        return ElArray([from_python(item) for item in value])

    if value is None:
        return ElAbsent()

    raise TypeError(f"Cannot convert {type(value).__name__} to an elang value")

def to_python(value: ElValue) -> Any:
    match value:
        case ElNumber(value=num):
            return int(num) if num.is_integer() and not math.isinf(num) else num
        case ElString(value=s):
            return s
        case ElBool(value=b):
            return b
        case ElArray(items=items):
            return [to_python(item) for item in items]
    return None
