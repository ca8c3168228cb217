"""
Evaluation sessions.

A Session owns one Frame for its whole lifetime and turns every call into
an EvalResult; lexer, parser and evaluation errors never escape evaluate().
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .evaluator import eval_expr
from .formatter import format_value
from .lexer_rd import LexError
from .logging_config import get_logger
from .parser_rd import ParseError, parse_source
from .runtime import ElValue, EvaluationError, Frame, from_python

logger = get_logger(__name__)

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

CLOSED_MESSAGE = "session is closed"


@dataclass(frozen=True)
class EvalResult:
    success: bool
    result: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, text: str) -> "EvalResult":
        return cls(success=True, result=text)

    @classmethod
    def fail(cls, message: str) -> "EvalResult":
        return cls(success=False, error=message)

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "result": self.result}
        return {"success": False, "error": self.error}


def describe_error(exc: Exception) -> str:
    kind = getattr(exc, "kind", type(exc).__name__)
    return f"{kind}: {exc}"


class Session:
    """
    Persistent evaluation environment.

    Bindings passed to the constructor are seeded immediately and again on
    every reset().
    """

    def __init__(self, bindings: Optional[Mapping[str, Any]] = None):
        self.frame: Optional[Frame] = Frame()
        self.last_error: Optional[Exception] = None

        for name, value in (bindings or {}).items():
            self.seed(name, value)

        # Converted once; reset() re-applies these values.
        self._initial: Dict[str, ElValue] = copy.deepcopy(self.frame.vars)

    @property
    def closed(self) -> bool:
        return self.frame is None

    def seed(self, name: str, value: Any) -> None:
        if not isinstance(name, str) or not _IDENT_RE.fullmatch(name):
            raise ValueError(f"Invalid identifier: {name!r}")

        frame = self._require_frame()
        frame.define(name, from_python(value))

    def evaluate(self, source: str) -> EvalResult:
        if self.frame is None:
            return EvalResult.fail(CLOSED_MESSAGE)

        logger.debug("evaluate %r", source)
        self.last_error = None

        try:
            ast = parse_source(source)
            value = eval_expr(ast, self.frame)
        except (LexError, ParseError, EvaluationError) as exc:
            self.last_error = exc
            message = describe_error(exc)
            logger.debug("evaluate failed: %s", message)
            return EvalResult.fail(message)

        text = format_value(value)
        logger.debug("evaluate ok: %s", text)
        return EvalResult.ok(text)

    def get(self, name: str) -> Optional[ElValue]:
        if self.frame is None or not self.frame.has(name):
            return None
        return self.frame.vars[name]

    def names(self) -> List[str]:
        if self.frame is None:
            return []
        return sorted(self.frame.vars)

    def reset(self) -> None:
        frame = self._require_frame()
        frame.clear()

        for name, value in self._initial.items():
            frame.define(name, copy.deepcopy(value))

        logger.debug("session reset; %d binding(s) restored", len(self._initial))

    def close(self) -> None:
        if self.frame is not None:
            self.frame.clear()
        self.frame = None
        logger.debug("session closed")

    def _require_frame(self) -> Frame:
        if self.frame is None:
            raise RuntimeError(CLOSED_MESSAGE)
        return self.frame

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
