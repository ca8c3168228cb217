from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

# ---------- Value Model ----------

@dataclass
class ElAbsent:
    """No value produced; only seen before formatting."""

@dataclass
class ElNumber:
    value: float

@dataclass
class ElString:
    value: str

@dataclass
class ElBool:
    value: bool

@dataclass
class ElArray:
    items: List['ElValue'] = field(default_factory=list)

ElValue: TypeAlias = ElAbsent | ElNumber | ElString | ElBool | ElArray

_EL_VALUE_TYPES: Tuple[type, ...] = (ElAbsent, ElNumber, ElString, ElBool, ElArray)

def is_el_value(value: object) -> TypeGuard[ElValue]:
    return isinstance(value, _EL_VALUE_TYPES)

def kind_name(value: ElValue) -> str:
    """Display name of a value's kind, used in error messages."""
    match value:
        case ElNumber():
            return "Number"
        case ElString():
            return "String"
        case ElBool():
            return "Bool"
        case ElArray():
            return "Array"
        case ElAbsent():
            return "Absent"
    return type(value).__name__

# ---------- Builtin function registry ----------

ElFn = Callable[['Frame', List[ElValue]], ElValue]

@dataclass(frozen=True)
class BuiltinFunction:
    name: str
    fn: ElFn
    arity: Optional[int] = None

class Builtins:
    functions: Dict[str, BuiltinFunction] = {}

# Called with a {predicate} body rather than plain arguments.
COLLECTION_CALLS = frozenset({"filter", "all", "any"})

# ---------- Environment ----------

IT_NAME = "@it"

class Frame:
    """
    Session environment: persistent variable bindings plus the transient
    stack of predicate frames that bind @it.
    """

    def __init__(self):
        self.vars: Dict[str, ElValue] = {}
        self._it_stack: List[ElValue] = []

    def define(self, name: str, val: ElValue) -> None:
        self.vars[name] = val

    def get(self, name: str) -> ElValue:
        if name == IT_NAME:
            return self.current_it()

        if name in self.vars:
            return self.vars[name]

        raise UndefinedVariable(name)

    def has(self, name: str) -> bool:
        return name in self.vars

    def current_it(self) -> ElValue:
        if not self._it_stack:
            raise UndefinedVariable(
                IT_NAME, "Variable @it is only available within collection function predicates"
            )

        return self._it_stack[-1]

    @contextmanager
    def predicate_frame(self, item: ElValue) -> Iterator[None]:
        self._it_stack.append(item)

        try:
            yield
        finally:
            self._it_stack.pop()

    def clear(self) -> None:
        self.vars.clear()
        self._it_stack.clear()

# ---------- Exceptions ----------

class EvaluationError(Exception):
    kind = "EvaluationError"
    el_meta: Optional[object]

    def __init__(self, message: str):
        super().__init__(message)
        self.el_meta = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = super().__str__()

        meta = getattr(self, "el_meta", None)
        if meta is None:
            return msg

        line = getattr(meta, "line", None)
        col = getattr(meta, "column", None)

        if line is None:
            return msg

        if col is None:
            return f"{msg} (line {line})"

        return f"{msg} (line {line}, col {col})"

class UndefinedVariable(EvaluationError):
    kind = "UndefinedVariable"

    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(message or f"Variable '{name}' is not defined")
        self.name = name

class TypeMismatch(EvaluationError):
    kind = "TypeMismatch"

class DivisionByZero(EvaluationError):
    kind = "DivisionByZero"

    def __init__(self, message: str = "Division by zero"):
        super().__init__(message)

class IndexOutOfBounds(EvaluationError):
    kind = "IndexOutOfBounds"

    def __init__(self, index: float, length: int):
        shown = int(index) if float(index).is_integer() else index
        super().__init__(f"Index out of bounds: {shown} (array length {length})")
        self.index = index
        self.length = length

class ArityError(EvaluationError):
    kind = "ArityError"

class UnknownFunction(EvaluationError):
    kind = "UnknownFunction"

    def __init__(self, name: str):
        super().__init__(f"Unknown function: {name}")
        self.name = name

class InvalidPattern(EvaluationError):
    kind = "InvalidPattern"

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid regex pattern '{pattern}': {reason}")
        self.pattern = pattern
