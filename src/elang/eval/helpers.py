from __future__ import annotations

from ..runtime import ElAbsent, ElArray, ElBool, ElNumber, ElString, ElValue, TypeMismatch, kind_name

def is_truthy(val: ElValue) -> bool:
    match val:
        case ElBool(value=b):
            return b
        case ElAbsent():
            return False
        case ElNumber(value=num):
            return num != 0
        case ElString(value=s):
            return bool(s)
        case ElArray(items=items):
            return bool(items)
        case _:
            return True

def require_bool(val: ElValue, op: str) -> bool:
    """Logical operators accept only Bool operands."""
    if isinstance(val, ElBool):
        return val.value

    raise TypeMismatch(f"Operator '{op}' expects a boolean; got {kind_name(val)}")
