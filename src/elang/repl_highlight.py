"""prompt_toolkit lexer for live elang syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as ElLexer, LexError
from .runtime import is_known_function
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "iterator": "bold ansimagenta",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.NOT: "keyword",
    TT.AND: "keyword",
    TT.OR: "keyword",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.IT: "iterator",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.EQ: "operator",
    TT.NEQ: "operator",
    TT.LT: "operator",
    TT.LTE: "operator",
    TT.GT: "operator",
    TT.GTE: "operator",
    TT.NEG: "operator",
    TT.ASSIGN: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LSQB: "punctuation",
    TT.RSQB: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.SEMI: "punctuation",
}


def _group_for(tokens: list[Tok], idx: int) -> str:
    tok = tokens[idx]

    if tok.type == TT.IDENT:
        nxt = tokens[idx + 1] if idx + 1 < len(tokens) else None
        if nxt is not None and nxt.type == TT.LPAR and is_known_function(tok.value):
            return "function"

    return _TT_GROUP.get(tok.type, "")


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    # Scan lazily so everything before a bad character still gets styled.
    tokens: list[Tok] = []
    error_at = None
    try:
        for tok in ElLexer(text).scan():
            if tok.type == TT.EOF:
                break
            tokens.append(tok)
    except LexError as exc:
        error_at = exc.pos

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        tok_text = str(tok.value)

        # Unstyled gap before token.
        if tok.pos > pos:
            result.append(("", text[pos:tok.pos]))

        style = GROUP_STYLE.get(_group_for(tokens, i), "")
        result.append((style, tok_text))
        pos = tok.pos + len(tok_text)

    if error_at is not None and error_at >= pos:
        if error_at > pos:
            result.append(("", text[pos:error_at]))
        result.append((GROUP_STYLE["error"], text[error_at:]))
        pos = len(text)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class ElangLexer(Lexer):
    """prompt_toolkit Lexer that highlights elang source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
