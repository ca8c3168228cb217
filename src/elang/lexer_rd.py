"""
Lexer for elang - Recursive Descent Parser

Tokenizes a single line of elang source into a stream of tokens.

Features:
- Lazy, single-pass tokenization (Lexer.scan is a generator)
- Position tracking (offset, line, column)
- Quoted string literals without escape processing
"""

from typing import Iterator, List, Optional

from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class LexError(Exception):
    """Lexical analysis error"""
    kind = "LexError"

    def __init__(self, message: str, line: int = 1, column: int = 1, pos: int = 0, char: Optional[str] = None):
        self.message = message
        self.line = line
        self.column = column
        self.pos = pos
        self.char = char
        super().__init__(f"{message} at line {line}, col {column}")


class Lexer:
    """
    elang lexer.

    Each Lexer instance walks its source exactly once; build a new one to
    tokenize again.
    """

    # Keyword mapping
    KEYWORDS = {
        'true': TT.TRUE,
        'True': TT.TRUE,
        'false': TT.FALSE,
        'False': TT.FALSE,
        'not': TT.NOT,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NEQ),
        ('<=', TT.LTE),
        ('>=', TT.GTE),
        ('&&', TT.AND),
        ('||', TT.OR),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('<', TT.LT),
        ('>', TT.GT),
        ('!', TT.NEG),
        ('=', TT.ASSIGN),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('[', TT.LSQB),
        (']', TT.RSQB),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        (',', TT.COMMA),
        (';', TT.SEMI),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        return list(self.scan())

    def scan(self) -> Iterator[Tok]:
        """Yield tokens one at a time, ending with EOF"""
        while True:
            self.skip_whitespace()
            if self.pos >= len(self.source):
                break
            yield self.scan_token()

        yield self.make(TT.EOF, None, self.line, self.column, self.pos)

    def scan_token(self) -> Tok:
        """Scan next token"""
        ch = self.peek()

        # String literals
        if ch in ('"', "'"):
            return self.scan_string()

        # Numbers
        if self._is_digit(ch):
            return self.scan_number()

        # Identifiers and keywords
        if ch.isascii() and (ch.isalpha() or ch == '_'):
            return self.scan_identifier()

        # Implicit iteration variable
        if ch == '@':
            return self.scan_it()

        # Operators and punctuation
        return self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self) -> Tok:
        """Scan string literal: "..." or '...'"""
        line, column, start = self.line, self.column, self.pos
        quote = self.advance()
        value = quote  # Keep opening quote

        while self.pos < len(self.source) and self.peek() != quote:
            value += self.advance()

        if self.pos >= len(self.source):
            raise LexError("Unterminated string", line, column, start, quote)

        value += self.advance()  # Closing quote
        return self.make(TT.STRING, value, line, column, start)

    def scan_number(self) -> Tok:
        """Scan number literal: digits with an optional fractional part"""
        line, column, start = self.line, self.column, self.pos
        value = ''

        # Integer part
        while self._is_digit(self.peek()):
            value += self.advance()

        # Decimal part
        if self.peek() == '.' and self._is_digit(self.peek(1)):
            value += self.advance()  # .
            while self._is_digit(self.peek()):
                value += self.advance()

        return self.make(TT.NUMBER, value, line, column, start)

    def scan_identifier(self) -> Tok:
        """Scan identifier or keyword"""
        line, column, start = self.line, self.column, self.pos
        value = ''

        while self._is_ident_char(self.peek()):
            value += self.advance()

        # Check if keyword
        token_type = self.KEYWORDS.get(value, TT.IDENT)
        return self.make(token_type, value, line, column, start)

    def scan_it(self) -> Tok:
        """Scan the @it literal"""
        line, column, start = self.line, self.column, self.pos

        if self.source.startswith('@it', self.pos) and not self._is_ident_char(self.peek(3)):
            self.advance(3)
            return self.make(TT.IT, '@it', line, column, start)

        raise LexError("Unexpected character '@' (only '@it' is allowed)", line, column, start, '@')

    def scan_operator(self) -> Tok:
        """Scan operators and punctuation"""
        line, column, start = self.line, self.column, self.pos

        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                return self.make(op_type, op_str, line, column, start)

        ch = self.peek()
        raise LexError(f"Unexpected character '{ch}'", line, column, start, ch)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = ''
        for _ in range(n):
            ch = self.source[self.pos] if self.pos < len(self.source) else '\0'
            result += ch
            self.pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return result

    def skip_whitespace(self) -> bool:
        """Skip whitespace, return True if any skipped"""
        skipped = False
        while self.pos < len(self.source) and self.peek().isspace():
            self.advance()
            skipped = True
        return skipped

    @staticmethod
    def _is_digit(ch: str) -> bool:
        return '0' <= ch <= '9'

    @staticmethod
    def _is_ident_char(ch: str) -> bool:
        return ch.isascii() and (ch.isalnum() or ch == '_')

    @staticmethod
    def make(token_type: TT, value, line: int, column: int, pos: int) -> Tok:
        return Tok(type=token_type, value=value, line=line, column=column, pos=pos)


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()


def iter_tokens(source: str) -> Iterator[Tok]:
    """Lazily tokenize source; a fresh lexer per call"""
    return Lexer(source).scan()
