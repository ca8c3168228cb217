"""
Recursive Descent Parser for elang

Structure:
- Lexer: Token stream from source (lexer_rd)
- Parser: Recursive descent, one method per precedence level
- AST: lark Tree/Token nodes consumed by the evaluator

Binary levels produce flat, interleaved children ([lhs, op, rhs, op, rhs])
so long operator chains never deepen the tree; the evaluator folds them
left to right.
"""

from typing import Optional, List, Sequence
from lark import Tree, Token

from .token_types import TT, Tok
from .types import COLLECTION_CALLS
from .utils import max_nesting_depth

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    kind = "ParseError"

    def __init__(self, message: str, token: Optional[Tok] = None, expected: Optional[str] = None):
        self.message = message
        self.token = token
        self.expected = expected
        self.found = _describe(token)
        self.line = token.line if token else None
        self.column = token.column if token else None
        self.pos = token.pos if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )


def _describe(token: Optional[Tok]) -> Optional[str]:
    if token is None:
        return None
    if token.type == TT.EOF:
        return "end of input"
    return repr(token.value)


_EQUALITY_OPS = (TT.EQ, TT.NEQ)
_RELATIONAL_OPS = (TT.LT, TT.GT, TT.LTE, TT.GTE)
_ADDITIVE_OPS = (TT.PLUS, TT.MINUS)
_MULTIPLICATIVE_OPS = (TT.STAR, TT.SLASH)
_UNARY_OPS = (TT.NEG, TT.NOT, TT.MINUS)


def _tok(tok: Tok) -> Token:
    """Convert a lexer token into a positioned lark Token."""
    return Token(tok.type.name, tok.value, start_pos=tok.pos, line=tok.line, column=tok.column)


class Parser:
    """
    Recursive descent parser for elang.

    Expression precedence (lowest to highest):
    1. or (||)
    2. and (&&)
    3. equality (==, !=)
    4. relational (<, >, <=, >=)
    5. additive (+, -)
    6. multiplicative (*, /)
    7. unary (!, not, -)
    8. postfix ([index])
    9. primary (literals, identifiers, calls, parens, arrays)
    """

    def __init__(self, tokens: Sequence[Tok], max_depth: Optional[int] = None):
        self.tokens = list(tokens)
        self.pos = 0
        self.current = self.tokens[0] if self.tokens else Tok(TT.EOF, None, 1, 1, 0)
        self.depth = 0
        self.max_depth = max_depth if max_depth is not None else max_nesting_depth()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self._eof()

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current = self.tokens[self.pos]
        else:
            self.current = self._eof()
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, expected: str, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {expected}, got {_describe(self.current)}"
            raise ParseError(msg, self.current, expected=expected)
        return self.advance()

    def _eof(self) -> Tok:
        if self.tokens and self.tokens[-1].type == TT.EOF:
            return self.tokens[-1]
        return Tok(TT.EOF, None, 1, 1, 0)

    def _nest(self) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            raise ParseError(
                f"Expression nested too deeply (limit {self.max_depth})", self.current
            )

    def _unnest(self) -> None:
        self.depth -= 1

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """Parse a semicolon-separated statement sequence"""
        stmts: List[Tree | Token] = []

        while not self.check(TT.EOF):
            # Empty statements (leading, repeated or trailing ';')
            if self.match(TT.SEMI):
                continue

            stmts.append(self.parse_statement())

            if self.check(TT.EOF):
                break
            self.expect(TT.SEMI, "';' or end of input")

        if not stmts:
            raise ParseError("Expression cannot be empty", self.current, expected="an expression")

        return Tree('sequence', stmts)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Tree | Token:
        """
        Parse a single statement: assignment or expression.

        Assignment is recognized by the IDENT '=' token pair; '==' and
        friends are distinct tokens and never reach this branch.
        """
        if self.check(TT.IDENT) and self.peek(1).type == TT.ASSIGN:
            name = self.advance()
            self.advance()  # =
            value = self.parse_expr()
            return Tree('assign', [_tok(name), value])

        expr = self.parse_expr()

        if self.check(TT.ASSIGN):
            raise ParseError(
                "Assignment target must be a bare identifier",
                self.current,
                expected="';' or end of input",
            )

        return expr

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Tree | Token:
        """Parse expression (top level)."""
        self._nest()
        try:
            return self.parse_or_expr()
        finally:
            self._unnest()

    def parse_or_expr(self) -> Tree | Token:
        """Parse logical OR: expr || expr"""
        return self._parse_flat('or', (TT.OR,), self.parse_and_expr)

    def parse_and_expr(self) -> Tree | Token:
        """Parse logical AND: expr && expr"""
        return self._parse_flat('and', (TT.AND,), self.parse_equality_expr)

    def parse_equality_expr(self) -> Tree | Token:
        """Parse equality: expr == expr, expr != expr"""
        return self._parse_flat('compare', _EQUALITY_OPS, self.parse_relational_expr)

    def parse_relational_expr(self) -> Tree | Token:
        """Parse ordering comparisons: <, >, <=, >="""
        return self._parse_flat('compare', _RELATIONAL_OPS, self.parse_add_expr)

    def parse_add_expr(self) -> Tree | Token:
        """Parse addition/subtraction: expr + expr"""
        return self._parse_flat('add', _ADDITIVE_OPS, self.parse_mul_expr)

    def parse_mul_expr(self) -> Tree | Token:
        """Parse multiplication/division: expr * expr"""
        return self._parse_flat('mul', _MULTIPLICATIVE_OPS, self.parse_unary_expr)

    def _parse_flat(self, label: str, ops: Sequence[TT], operand) -> Tree | Token:
        left = operand()

        if not self.check(*ops):
            return left

        # Collect operands and operators (interleaved)
        children: List[Tree | Token] = [left]
        while self.check(*ops):
            op = self.advance()
            children.append(_tok(op))
            children.append(operand())

        return Tree(label, children)

    def parse_unary_expr(self) -> Tree | Token:
        """Parse unary operators: -expr, !expr, not expr"""
        if self.check(*_UNARY_OPS):
            op = self.advance()
            self._nest()
            try:
                operand = self.parse_unary_expr()
            finally:
                self._unnest()
            return Tree('unary', [_tok(op), operand])

        return self.parse_postfix_expr()

    def parse_postfix_expr(self) -> Tree | Token:
        """Parse indexing: expr[index][index]..."""
        base = self.parse_primary_expr()

        if not self.check(TT.LSQB):
            return base

        children: List[Tree | Token] = [base]
        while self.match(TT.LSQB):
            children.append(self.parse_expr())
            self.expect(TT.RSQB, "']'", "Expected ']' to close index")

        return Tree('index', children)

    def parse_primary_expr(self) -> Tree | Token:
        """
        Parse primary expressions:
        - Literals (numbers, strings, true, false, @it)
        - Identifiers and function calls
        - Collection calls: filter/all/any(expr, {predicate})
        - Parenthesized expressions
        - Array literals
        """
        if self.check(TT.NUMBER, TT.STRING, TT.TRUE, TT.FALSE, TT.IT):
            return _tok(self.advance())

        if self.check(TT.IDENT):
            if self.peek(1).type != TT.LPAR:
                return _tok(self.advance())

            if self.current.value in COLLECTION_CALLS:
                return self.parse_collection_call()
            return self.parse_call()

        # Parenthesized expression
        if self.match(TT.LPAR):
            expr = self.parse_expr()
            self.expect(TT.RPAR, "')'", "Expected ')' to close parenthesis")
            return expr

        # Array literal
        if self.match(TT.LSQB):
            items = self.parse_arg_list(TT.RSQB)
            self.expect(TT.RSQB, "']'", "Expected ']' to close array literal")
            return Tree('array', items)

        if self.check(TT.EOF):
            raise ParseError("Unexpected end of input, expected an operand", self.current, expected="an operand")

        raise ParseError(
            f"Unexpected token {_describe(self.current)}", self.current, expected="an operand"
        )

    def parse_call(self) -> Tree:
        """Parse function call: name(args)"""
        name = self.advance()
        self.expect(TT.LPAR, "'('")
        args = self.parse_arg_list(TT.RPAR)
        self.expect(TT.RPAR, "')'", f"Expected ')' to close call to {name.value}()")
        return Tree('call', [_tok(name), Tree('args', args)])

    def parse_collection_call(self) -> Tree:
        """Parse collection call: filter|all|any(collection, {predicate})"""
        name = self.advance()
        fname = name.value
        self.expect(TT.LPAR, "'('")

        collection = self.parse_expr()
        self.expect(
            TT.COMMA, "','",
            f"{fname}() requires a collection and a {{predicate}}",
        )
        self.expect(
            TT.LBRACE, "'{'",
            f"{fname}() predicate must be enclosed in {{}}",
        )

        self._nest()
        try:
            body = self.parse_expr()
        finally:
            self._unnest()

        self.expect(TT.RBRACE, "'}'", f"{fname}() predicate must be enclosed in {{}}")
        self.expect(TT.RPAR, "')'", f"Expected ')' to close call to {fname}()")

        return Tree('collection_call', [_tok(name), collection, Tree('predicate', [body])])

    def parse_arg_list(self, closer: TT) -> List[Tree | Token]:
        """
        Parse comma-separated expressions up to (not including) closer.
        Returns an empty list when the closer follows immediately.
        """
        if self.check(closer):
            return []

        items = [self.parse_expr()]
        while self.match(TT.COMMA):
            items.append(self.parse_expr())

        return items

# ============================================================================
# Entry points
# ============================================================================

def parse(tokens: Sequence[Tok], max_depth: Optional[int] = None) -> Tree:
    """Parse a token sequence into a 'sequence' tree."""
    parser = Parser(tokens, max_depth=max_depth)
    tree = parser.parse()

    if not parser.check(TT.EOF):
        raise ParseError("Unexpected tokens after expression", parser.current, expected="end of input")
    return tree


def parse_source(source: str, max_depth: Optional[int] = None) -> Tree:
    """
    Parse elang source code to AST.

    Args:
        source: Source code to parse
        max_depth: Nesting cap; defaults to ELANG_MAX_DEPTH (clamped)
    """
    from .lexer_rd import tokenize

    tokens = tokenize(source)
    try:
        return parse(tokens, max_depth=max_depth)
    except RecursionError:
        # Only reachable with an explicit max_depth above the ceiling
        raise ParseError("Expression nested too deeply") from None
