from __future__ import annotations

import os
from typing import List

from .types import ElAbsent, ElArray, ElBool, ElNumber, ElString, ElValue

# About 17 parser frames per nesting level; 32 levels fit the default
# interpreter recursion limit.
MAX_DEPTH_CEILING = 32
DEFAULT_MAX_DEPTH = MAX_DEPTH_CEILING
DEFAULT_LOG_LEVEL = "WARNING"

_TRUTHY_FLAGS = {"1", "true", "yes", "on"}


def debug_py_trace_enabled() -> bool:
    return os.environ.get("ELANG_DEBUG_PY_TRACE", "").strip().lower() in _TRUTHY_FLAGS


def max_nesting_depth() -> int:
    """
    Parser nesting cap from ELANG_MAX_DEPTH.

    Malformed values use the default; larger values are clamped to
    MAX_DEPTH_CEILING.
    """
    raw = os.environ.get("ELANG_MAX_DEPTH")
    if raw is None:
        return DEFAULT_MAX_DEPTH

    try:
        value = int(raw.strip())
    except ValueError:
        return DEFAULT_MAX_DEPTH

    if value <= 0:
        return DEFAULT_MAX_DEPTH

    return min(value, MAX_DEPTH_CEILING)


def log_level_from_env() -> str:
    raw = os.environ.get("ELANG_LOG_LEVEL", "").strip()
    return raw.upper() if raw else DEFAULT_LOG_LEVEL


def value_in_list(seq: List[ElValue], value: ElValue) -> bool:
    for existing in seq:
        if el_equals(existing, value):
            return True

    return False


def el_equals(lhs: ElValue, rhs: ElValue) -> bool:
    """Structural equality; values of different kinds are never equal."""
    match (lhs, rhs):
        case (ElAbsent(), ElAbsent()):
            return True
        case (ElNumber(value=a), ElNumber(value=b)):
            return a == b
        case (ElString(value=a), ElString(value=b)):
            return a == b
        case (ElBool(value=a), ElBool(value=b)):
            return a == b
        case (ElArray(items=xs), ElArray(items=ys)):
            if len(xs) != len(ys):
                return False
            return all(el_equals(x, y) for x, y in zip(xs, ys))
        case _:
            return False
