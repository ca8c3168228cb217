from __future__ import annotations

import sys
from typing import Iterable, List, Optional

from .evaluator import eval_expr
from .logging_config import get_logger, setup_logging
from .parser_rd import parse_source
from .runtime import ElValue, Frame, init_stdlib
from .session import Session
from .utils import log_level_from_env

logger = get_logger(__name__)

DEFAULT_BINDINGS = {"myCollection": [1, 2, 3]}

_USAGE = "usage: elang [--log-level LEVEL] [--no-defaults] [SOURCE | -]"

def run(src: str, frame: Optional[Frame]=None) -> ElValue:
    """Parse and evaluate src; errors propagate to the caller."""
    init_stdlib()

    if frame is None:
        frame = Frame()

    ast = parse_source(src)
    return eval_expr(ast, frame)

def _load_source(arg: Optional[str]) -> List[str]:
    """
    Resolve CLI input into source lines.
    - None or "-" => every non-blank stdin line.
    - Otherwise the argument is a single literal source.
    """

    if arg is None or arg == "-":
        lines = [line.rstrip("\r\n") for line in sys.stdin]
        lines = [line for line in lines if line.strip()]
        if not lines:
            raise SystemExit("No input provided on stdin")
        return lines

    return [arg]

def evaluate_lines(session: Session, lines: Iterable[str]) -> int:
    """Evaluate each line in one session; returns the process exit status."""
    status = 0

    for line in lines:
        result = session.evaluate(line)

        if result.success:
            print(result.result)
        else:
            print(f"Error: {result.error}", file=sys.stderr)
            status = 1

    return status

def main(argv: Optional[List[str]] = None) -> int:
    log_level = log_level_from_env()
    use_defaults = True
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token.startswith("--log-level="):
            log_level = token.split("=", 1)[1]
            continue

        if token == "--log-level":
            try:
                log_level = next(it)
            except StopIteration:
                raise SystemExit("--log-level flag requires a level") from None
            continue

        if token == "--no-defaults":
            use_defaults = False
            continue

        if token in ("-h", "--help"):
            print(_USAGE)
            return 0

        if token.startswith("--"):
            raise SystemExit(f"Unknown option: {token}\n{_USAGE}")

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    setup_logging(log_level)
    lines = _load_source(arg)
    logger.debug("evaluating %d line(s)", len(lines))

    with Session(DEFAULT_BINDINGS if use_defaults else None) as session:
        return evaluate_lines(session, lines)

if __name__ == "__main__":
    sys.exit(main())
