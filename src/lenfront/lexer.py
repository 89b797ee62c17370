"""len lexer: converts source text into a flat token stream.

The lexer never raises on bad input. Malformed text becomes an ERROR token
(always at least one character wide) plus a Diagnostic, and scanning resumes
right after it.
"""

from __future__ import annotations

from lenfront.config import DEFAULT_CONFIG, FrontendConfig
from lenfront.errors import Diagnostic
from lenfront.tokens import (
    KEYWORDS,
    MAX_OPERATOR_LENGTH,
    OPERATORS,
    PUNCTUATION,
    Position,
    Span,
    Token,
    TokenType,
    is_digit,
    is_hex_digit,
    is_ident_char,
    is_ident_start,
    starts_symbol,
)

_SIMPLE_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "t": "\t", "r": "\r", "0": "\0"}


class Lexer:
    """Tokenize len source text into a stream of Token objects."""

    def __init__(self, source: str, config: FrontendConfig | None = None) -> None:
        self._source = source
        self._config = config or DEFAULT_CONFIG
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []
        self._diagnostics: list[Diagnostic] = []

    def tokenize(self) -> tuple[list[Token], list[Diagnostic]]:
        """Tokenize the full source and return the token and diagnostic lists."""
        while self._pos < len(self._source):
            self._lex_one()

        self._emit(TokenType.EOF, "", self._current_pos())
        return self._tokens, self._diagnostics

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, value: str, start: Position) -> Token:
        end = self._current_pos()
        raw = self._source[start.offset : end.offset]
        tok = Token(tt, value, raw, Span(start, end))
        self._tokens.append(tok)
        return tok

    def _emit_error(self, message: str, start: Position) -> Token:
        tok = self._emit(TokenType.ERROR, self._source[start.offset : self._pos], start)
        self._diagnostics.append(Diagnostic.error(message, tok.span))
        return tok

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _lex_one(self) -> None:
        ch = self._peek()

        if ch.isspace():
            self._skip_ws()
            return

        if ch == "/" and self._peek(1) == "/":
            self._lex_line_comment()
            return

        if ch == "/" and self._peek(1) == "*":
            self._lex_block_comment()
            return

        if ch == '"':
            self._lex_string()
            return

        if is_digit(ch):
            self._lex_number()
            return

        if is_ident_start(ch):
            self._lex_identifier()
            return

        if self._match_symbol(self._pos) is not None:
            self._lex_symbol()
            return

        self._lex_unexpected()

    def _skip_ws(self) -> None:
        while self._pos < len(self._source) and self._peek().isspace():
            self._advance()

    def _lex_identifier(self) -> None:
        start = self._current_pos()
        chars = []
        while self._pos < len(self._source) and is_ident_char(self._peek()):
            chars.append(self._advance())
        text = "".join(chars)
        tt = TokenType.KEYWORD if text in KEYWORDS else TokenType.IDENTIFIER
        self._emit(tt, text, start)

    # ------------------------------------------------------------------
    # Operators and punctuation
    # ------------------------------------------------------------------

    def _match_symbol(self, pos: int) -> str | None:
        """Return the longest operator/punctuation entry starting at pos."""
        if not starts_symbol(self._source[pos]):
            return None
        for length in range(MAX_OPERATOR_LENGTH, 0, -1):
            candidate = self._source[pos : pos + length]
            if len(candidate) == length and (candidate in OPERATORS or candidate in PUNCTUATION):
                return candidate
        return None

    def _lex_symbol(self) -> None:
        start = self._current_pos()
        text = self._match_symbol(self._pos)
        assert text is not None
        for _ in text:
            self._advance()
        self._emit(PUNCTUATION.get(text, TokenType.SYMBOL), text, start)

    def _starts_token(self, pos: int) -> bool:
        ch = self._source[pos]
        if ch.isspace() or ch == '"' or is_digit(ch) or is_ident_start(ch):
            return True
        return self._match_symbol(pos) is not None

    def _lex_unexpected(self) -> None:
        """Consume a run of unrecognised characters as one ERROR token."""
        start = self._current_pos()
        self._advance()
        while self._pos < len(self._source) and not self._starts_token(self._pos):
            self._advance()
        text = self._source[start.offset : self._pos]
        noun = "character" if len(text) == 1 else "characters"
        self._emit_error(f"unexpected {noun} {text!r}", start)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _lex_line_comment(self) -> None:
        start = self._current_pos()
        while self._pos < len(self._source) and self._peek() != "\n":
            self._advance()
        if self._config.keep_comments:
            text = self._source[start.offset : self._pos]
            self._emit(TokenType.COMMENT, text, start)

    def _lex_block_comment(self) -> None:
        start = self._current_pos()
        self._advance()  # consume /
        self._advance()  # consume *
        while self._pos < len(self._source):
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                if self._config.keep_comments:
                    text = self._source[start.offset : self._pos]
                    self._emit(TokenType.COMMENT, text, start)
                return
            self._advance()

        self._emit_error("unterminated block comment", start)

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def _lex_number(self) -> None:
        start = self._current_pos()
        error: str | None = None
        is_float = False

        self._lex_digits()

        if self._peek() == ".":
            is_float = True
            self._advance()
            if is_digit(self._peek()):
                self._lex_digits()
            else:
                error = "expected digits after decimal point"

        if error is None and self._peek() in ("e", "E"):
            after = self._peek(1)
            if is_digit(after) or (after in ("+", "-") and is_digit(self._peek(2))):
                is_float = True
                self._advance()  # consume e
                if after in ("+", "-"):
                    self._advance()
                self._lex_digits()
            elif after in ("+", "-") or not is_ident_char(after):
                self._advance()  # consume e
                if after in ("+", "-"):
                    self._advance()
                error = "expected digits in exponent"

        # Digits glued to identifier characters (12ab, 1_000) are one bad literal
        if is_ident_char(self._peek()):
            while self._pos < len(self._source) and is_ident_char(self._peek()):
                self._advance()
            if error is None:
                text = self._source[start.offset : self._pos]
                error = f"invalid numeric literal {text!r}"

        if error is not None:
            self._emit_error(error, start)
            return

        raw = self._source[start.offset : self._pos]
        value = raw if is_float else (raw.lstrip("0") or "0")
        self._emit(TokenType.NUMBER, value, start)

    def _lex_digits(self) -> None:
        while self._pos < len(self._source) and is_digit(self._peek()):
            self._advance()

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def _lex_string(self) -> None:
        start = self._current_pos()
        self._advance()  # consume opening quote

        chars: list[str] = []
        escape_diagnostics: list[Diagnostic] = []

        while True:
            ch = self._peek()
            if ch in ("", "\n"):
                # Escape problems inside an unterminated string are not reported
                self._emit_error("unterminated string literal", start)
                return
            if ch == '"':
                self._advance()
                self._emit(TokenType.STRING, "".join(chars), start)
                self._diagnostics.extend(escape_diagnostics)
                return
            if ch == "\\":
                self._lex_string_escape(chars, escape_diagnostics)
                continue
            chars.append(self._advance())

    def _lex_string_escape(self, chars: list[str], diagnostics: list[Diagnostic]) -> None:
        start = self._current_pos()
        self._advance()  # consume backslash

        ch = self._peek()

        if ch in ("", "\n"):
            chars.append("\\")
            return

        if ch in _SIMPLE_ESCAPES:
            self._advance()
            chars.append(_SIMPLE_ESCAPES[ch])
            return

        if ch == "x":
            self._advance()
            chars.append(self._lex_hex_escape(2, start, diagnostics))
            return

        if ch == "U":
            self._advance()
            chars.append(self._lex_hex_escape(8, start, diagnostics))
            return

        self._advance()
        chars.append(f"\\{ch}")
        span = Span(start, self._current_pos())
        diagnostics.append(Diagnostic.error(f"invalid escape sequence '\\{ch}'", span))

    def _lex_hex_escape(self, count: int, start: Position, diagnostics: list[Diagnostic]) -> str:
        """Read up to `count` hex digits and return the resolved character.

        On failure the raw escape text (or U+FFFD for an out-of-range code
        point) is returned and a diagnostic recorded.
        """
        digits = []
        while len(digits) < count and is_hex_digit(self._peek()):
            digits.append(self._advance())
        hex_str = "".join(digits)
        span = Span(start, self._current_pos())

        if len(digits) < count:
            diagnostics.append(
                Diagnostic.error(
                    f"incomplete escape: expected {count} hex digits, got {len(digits)}", span
                )
            )
            return self._source[start.offset : self._pos]

        codepoint = int(hex_str, 16)
        if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            diagnostics.append(
                Diagnostic.error(f"Unicode codepoint U+{hex_str} is out of range", span)
            )
            return "\ufffd"
        return chr(codepoint)


def tokenize(
    source: str, config: FrontendConfig | None = None
) -> tuple[list[Token], list[Diagnostic]]:
    """Convenience function: tokenize source text and return tokens and diagnostics."""
    return Lexer(source, config).tokenize()
