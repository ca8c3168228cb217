"""elang: a small expression language with a session-based evaluator."""

from .formatter import format_value
from .lexer_rd import LexError, tokenize
from .parser_rd import ParseError, parse_source
from .runner import DEFAULT_BINDINGS, run
from .session import EvalResult, Session
from .types import (
    ArityError,
    DivisionByZero,
    EvaluationError,
    IndexOutOfBounds,
    InvalidPattern,
    TypeMismatch,
    UndefinedVariable,
    UnknownFunction,
)

__all__ = [
    "DEFAULT_BINDINGS",
    "EvalResult",
    "Session",
    "format_value",
    "parse_source",
    "run",
    "tokenize",
    "LexError",
    "ParseError",
    "EvaluationError",
    "UndefinedVariable",
    "TypeMismatch",
    "DivisionByZero",
    "IndexOutOfBounds",
    "ArityError",
    "UnknownFunction",
    "InvalidPattern",
]
