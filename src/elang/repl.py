"""Interactive REPL for elang, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
import traceback
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .formatter import format_value
from .logging_config import setup_logging
from .repl_highlight import ElangLexer
from .runner import DEFAULT_BINDINGS
from .session import Session
from .types import EvaluationError
from .utils import debug_py_trace_enabled, log_level_from_env

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
    "/vars": ("List variable bindings", ""),
}

_TRACE_ENV = "ELANG_DEBUG_PY_TRACE"


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _describe_vars(session: Session) -> List[str]:
    lines = []
    for name in session.names():
        value = session.get(name)
        if value is not None:
            lines.append(f"{name} = {format_value(value)}")
    return lines


def _handle_slash(line: str, session: Session) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[_TRACE_ENV] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(_TRACE_ENV, None)
        elif arg == "":
            # Toggle.
            if debug_py_trace_enabled():
                os.environ.pop(_TRACE_ENV, None)
            else:
                os.environ[_TRACE_ENV] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        session.reset()
        print("Environment reset.")
        return True

    if cmd == "/vars":
        lines = _describe_vars(session)
        print("\n".join(lines) if lines else "(no variables)")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def _print_py_trace(exc: Optional[Exception]) -> None:
    if not debug_py_trace_enabled() or not isinstance(exc, EvaluationError):
        return

    tb = exc.__traceback__
    if tb:
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(tb)), file=sys.stderr, end="")


def eval_line(text: str, session: Session) -> bool:
    """Evaluate one REPL line, printing the result or error. Returns success."""
    result = session.evaluate(text)

    if result.success:
        print(result.result)
        return True

    print(f"Error: {result.error}", file=sys.stderr)
    _print_py_trace(session.last_error)
    return False


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    session = Session(DEFAULT_BINDINGS)

    prompt: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=ElangLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print("elang repl (Ctrl-D to exit, / for commands)")

    with session:
        while True:
            try:
                text = prompt.prompt(">>> ")
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print("KeyboardInterrupt")
                continue

            text = _normalize(text)
            if not text.strip():
                continue

            if _handle_slash(text, session):
                continue

            eval_line(text, session)


def main() -> None:
    setup_logging(log_level_from_env())
    repl()


if __name__ == "__main__":
    main()
