"""len parser: converts a token stream into an arena AST.

Recursive descent with one token of lookahead (two for bindings and
lambdas). Binary operators use precedence climbing over a fixed table.

Syntax errors never abort the parse. The offending region becomes an ERROR
node, a Diagnostic is recorded, and parsing resumes at the next
synchronization token: ';', end of input, or a closer that an enclosing
group or product is waiting for.
"""

from __future__ import annotations

from types import MappingProxyType

from lenfront.ast import NodeKind, Tree
from lenfront.config import DEFAULT_CONFIG, FrontendConfig
from lenfront.errors import Diagnostic
from lenfront.lexer import tokenize
from lenfront.tokens import Position, Span, Token, TokenType


class Parser:
    """Recursive descent parser for len token streams."""

    def __init__(self, tokens: list[Token], config: FrontendConfig | None = None) -> None:
        self._tokens = [t for t in tokens if t.type != TokenType.COMMENT]
        if not self._tokens or self._tokens[-1].type != TokenType.EOF:
            end = self._tokens[-1].span.end if self._tokens else Position(1, 1, 0)
            self._tokens.append(Token(TokenType.EOF, "", "", Span.point(end)))
        self._config = config or DEFAULT_CONFIG
        self._pos = 0
        self._depth = 0
        self._closers: list[TokenType] = []
        self._tree = Tree()
        self._diagnostics: list[Diagnostic] = []

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        idx = self._pos + offset
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]  # EOF

    def _at(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _at_eof(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _at_sync(self) -> bool:
        tt = self._peek().type
        return tt in _STATEMENT_SYNC or tt in self._closers

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _span(self, index: int) -> Span:
        return self._tree.node(index).span

    # ------------------------------------------------------------------
    # Diagnostics and error placeholders
    # ------------------------------------------------------------------

    def _error(self, message: str, span: Span) -> None:
        self._diagnostics.append(Diagnostic.error(message, span))

    def _missing(self, message: str) -> int:
        """Record a diagnostic and a zero-width ERROR node at the current token."""
        span = Span.point(self._peek().span.start)
        self._error(message, self._peek().span)
        return self._tree.add(NodeKind.ERROR, span, message)

    def _skip_to_sync(self, message: str) -> int:
        """Consume tokens up to the next synchronization token as one ERROR node.

        Brackets opened while skipping are matched so that their closers are
        skipped too rather than taken as synchronization points.
        """
        start = self._peek().span.start
        end = start
        nesting = 0
        while not self._at_eof():
            tt = self._peek().type
            if tt == TokenType.SEMICOLON:
                break
            if nesting == 0 and tt in self._closers:
                break
            if tt in (TokenType.LPAREN, TokenType.LBRACE):
                nesting += 1
            elif tt in (TokenType.RPAREN, TokenType.RBRACE) and nesting > 0:
                nesting -= 1
            end = self._advance().span.end
        return self._tree.add(NodeKind.ERROR, Span(start, end), message)

    def _unexpected(self) -> int:
        tok = self._peek()
        message = f"unexpected {_describe(tok)}"
        self._error(message, tok.span)
        return self._skip_to_sync(message)

    # ------------------------------------------------------------------
    # Program and statements
    # ------------------------------------------------------------------

    def parse(self) -> tuple[Tree, list[Diagnostic]]:
        statements: list[int] = []

        while not self._at_eof():
            if self._at(TokenType.SEMICOLON):
                self._advance()
                continue

            statements.append(self._parse_statement())

            if self._at(TokenType.SEMICOLON):
                self._advance()
            elif not self._at_eof():
                tok = self._peek()
                message = f"expected ';' after statement, found {_describe(tok)}"
                self._error(message, tok.span)
                statements.append(self._skip_to_sync(message))

        span = Span(Position(1, 1, 0), self._peek().span.end)
        self._tree.root = self._tree.add(NodeKind.PROGRAM, span, "", tuple(statements))
        return self._tree, self._diagnostics

    def _parse_statement(self) -> int:
        if self._at(TokenType.IDENTIFIER) and self._peek(1).type == TokenType.BIND:
            name_tok = self._advance()
            self._advance()  # consume BIND
            value = self._parse_expression()
            span = Span.cover(name_tok.span, self._span(value))
            return self._tree.add(NodeKind.BINDING, span, name_tok.value, (value,))
        return self._parse_expression()

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> int:
        return self._parse_binary(_LOWEST_PRECEDENCE)

    def _parse_binary(self, min_prec: int) -> int:
        if self._depth >= self._config.max_depth:
            message = f"expression nested too deeply (limit {self._config.max_depth})"
            self._error(message, self._peek().span)
            return self._skip_to_sync(message)

        self._depth += 1
        try:
            left = self._parse_unary()
            while self._at(TokenType.SYMBOL):
                op = self._peek().value
                info = _BINARY_OPERATORS.get(op)
                if info is None:
                    break
                prec, right_assoc = info
                if prec < min_prec:
                    break
                self._advance()
                right = self._parse_binary(prec if right_assoc else prec + 1)
                span = Span.cover(self._span(left), self._span(right))
                left = self._tree.add(NodeKind.BINARY, span, op, (left, right))
            return left
        finally:
            self._depth -= 1

    def _parse_unary(self) -> int:
        ops: list[Token] = []
        while self._at(TokenType.SYMBOL) and self._peek().value in _PREFIX_OPERATORS:
            ops.append(self._advance())

        operand = self._parse_application()
        for op_tok in reversed(ops):
            span = Span.cover(op_tok.span, self._span(operand))
            operand = self._tree.add(NodeKind.UNARY, span, op_tok.value, (operand,))
        return operand

    def _parse_application(self) -> int:
        function = self._parse_atom()
        while self._at(*_ATOM_START):
            argument = self._parse_atom()
            span = Span.cover(self._span(function), self._span(argument))
            function = self._tree.add(NodeKind.CALL, span, "", (function, argument))
        return function

    def _parse_atom(self) -> int:
        tok = self._peek()
        tt = tok.type

        if tt == TokenType.NUMBER:
            self._advance()
            return self._tree.add(NodeKind.NUMBER, tok.span, tok.value)

        if tt == TokenType.STRING:
            self._advance()
            return self._tree.add(NodeKind.STRING, tok.span, tok.value)

        if tt == TokenType.KEYWORD:
            self._advance()
            return self._tree.add(NodeKind.BOOLEAN, tok.span, tok.value)

        if tt == TokenType.IDENTIFIER:
            if self._peek(1).type == TokenType.ARROW:
                return self._parse_lambda()
            self._advance()
            return self._tree.add(NodeKind.IDENTIFIER, tok.span, tok.value)

        if tt == TokenType.LPAREN:
            return self._parse_group()

        if tt == TokenType.LBRACE:
            return self._parse_product()

        if tt == TokenType.ERROR:
            # Already reported by the lexer
            self._advance()
            return self._tree.add(NodeKind.ERROR, tok.span, f"invalid token {tok.raw!r}")

        if self._at_sync():
            return self._missing("expected expression")

        return self._unexpected()

    def _parse_lambda(self) -> int:
        param_tok = self._advance()
        self._advance()  # consume ARROW
        body = self._parse_expression()
        span = Span.cover(param_tok.span, self._span(body))
        return self._tree.add(NodeKind.LAMBDA, span, param_tok.value, (body,))

    def _parse_group(self) -> int:
        open_tok = self._advance()  # consume LPAREN
        children: list[int] = []

        self._closers.append(TokenType.RPAREN)
        try:
            children.append(self._parse_expression())
            if not self._at_sync():
                children.append(self._unexpected())
        finally:
            self._closers.pop()

        if self._at(TokenType.RPAREN):
            end = self._advance().span.end
        else:
            self._error(f"expected ')' to close '(' at {_where(open_tok)}", self._peek().span)
            end = self._span(children[-1]).end
        return self._tree.add(NodeKind.GROUP, Span(open_tok.span.start, end), "", tuple(children))

    def _parse_product(self) -> int:
        open_tok = self._advance()  # consume LBRACE
        fields: list[int] = []
        seen: set[str] = set()

        self._closers.extend((TokenType.RBRACE, TokenType.COMMA))
        try:
            while not self._at(TokenType.RBRACE):
                if self._at_sync() and not self._at(TokenType.COMMA):
                    break
                fields.append(self._parse_field(seen))
                if self._at(TokenType.COMMA):
                    self._advance()
                elif not self._at_sync():
                    tok = self._peek()
                    message = f"expected ',' or '}}' after field, found {_describe(tok)}"
                    self._error(message, tok.span)
                    fields.append(self._skip_to_sync(message))
        finally:
            del self._closers[-2:]

        if self._at(TokenType.RBRACE):
            end = self._advance().span.end
        else:
            self._error(f"expected '}}' to close '{{' at {_where(open_tok)}", self._peek().span)
            end = self._span(fields[-1]).end if fields else open_tok.span.end
        return self._tree.add(NodeKind.PRODUCT, Span(open_tok.span.start, end), "", tuple(fields))

    def _parse_field(self, seen: set[str]) -> int:
        if self._at(TokenType.IDENTIFIER) and self._peek(1).type == TokenType.COLON:
            name_tok = self._advance()
            self._advance()  # consume COLON
            value = self._parse_expression()
            if name_tok.value in seen:
                self._diagnostics.append(
                    Diagnostic.warning(f"duplicate field {name_tok.value!r}", name_tok.span)
                )
            seen.add(name_tok.value)
            span = Span.cover(name_tok.span, self._span(value))
            return self._tree.add(NodeKind.FIELD, span, name_tok.value, (value,))

        if self._at_sync():
            return self._missing("expected field name")

        tok = self._peek()
        message = f"expected field name, found {_describe(tok)}"
        self._error(message, tok.span)
        return self._skip_to_sync(message)


# Module-level constants
_LOWEST_PRECEDENCE = 1

# operator -> (precedence, right associative); higher binds tighter
_BINARY_OPERATORS: MappingProxyType[str, tuple[int, bool]] = MappingProxyType(
    {
        "$": (1, True),
        "||": (2, False),
        "&&": (3, False),
        "==": (4, False),
        "!=": (4, False),
        "<": (5, False),
        "<=": (5, False),
        ">": (5, False),
        ">=": (5, False),
        "+": (6, False),
        "-": (6, False),
        "++": (6, False),
        "*": (7, False),
        "/": (7, False),
        "%": (7, False),
        "^": (8, True),
    }
)
_PREFIX_OPERATORS: frozenset[str] = frozenset({"-", "!"})
_STATEMENT_SYNC: frozenset[TokenType] = frozenset({TokenType.SEMICOLON, TokenType.EOF})
_ATOM_START: tuple[TokenType, ...] = (
    TokenType.NUMBER,
    TokenType.STRING,
    TokenType.KEYWORD,
    TokenType.IDENTIFIER,
    TokenType.LPAREN,
    TokenType.LBRACE,
    TokenType.ERROR,
)


def _describe(tok: Token) -> str:
    if tok.type == TokenType.EOF:
        return "end of input"
    return repr(tok.raw)


def _where(tok: Token) -> str:
    return f"{tok.span.start.line}:{tok.span.start.column}"


def parse(
    tokens: list[Token], config: FrontendConfig | None = None
) -> tuple[Tree, list[Diagnostic]]:
    """Parse a token list and return the tree and parser diagnostics."""
    return Parser(tokens, config).parse()


def parse_source(
    source: str, config: FrontendConfig | None = None
) -> tuple[Tree, list[Diagnostic]]:
    """Convenience function: lex and parse source text.

    The returned diagnostics hold the lexer's followed by the parser's.
    """
    tokens, lex_diagnostics = tokenize(source, config)
    tree, parse_diagnostics = parse(tokens, config)
    return tree, lex_diagnostics + parse_diagnostics
