"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType


class TokenType(Enum):
    # Words
    IDENTIFIER = auto()  # [alpha_][alnum_]*
    KEYWORD = auto()  # true false

    # Literals
    NUMBER = auto()  # 12  1.5  2e10; value is canonical text
    STRING = auto()  # "..."; value is the unescaped content

    # Operators (fixed table, longest match wins)
    SYMBOL = auto()  # + - * / == && ...

    # Punctuation
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    COLON = auto()  # :
    COMMA = auto()  # ,
    SEMICOLON = auto()  # ;
    BIND = auto()  # =
    ARROW = auto()  # =>

    COMMENT = auto()  # // line or /* block */
    ERROR = auto()  # unrecognised or malformed input, value is the raw text

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open source range from start to end position."""

    start: Position
    end: Position

    @classmethod
    def point(cls, pos: Position) -> Span:
        return cls(pos, pos)

    @classmethod
    def cover(cls, first: Span, last: Span) -> Span:
        start = first.start if first.start.offset <= last.start.offset else last.start
        end = last.end if last.end.offset >= first.end.offset else first.end
        return cls(start, end)

    def __str__(self) -> str:
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with decoded value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span


KEYWORDS: frozenset[str] = frozenset({"true", "false"})

OPERATORS: frozenset[str] = frozenset(
    {
        "==", "!=", "<=", ">=", "&&", "||", "++",
        "+", "-", "*", "/", "%", "^", "<", ">", "!", "$",
    }
)

PUNCTUATION: MappingProxyType[str, TokenType] = MappingProxyType(
    {
        "=>": TokenType.ARROW,
        "=": TokenType.BIND,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "{": TokenType.LBRACE,
        "}": TokenType.RBRACE,
        ":": TokenType.COLON,
        ",": TokenType.COMMA,
        ";": TokenType.SEMICOLON,
    }
)

MAX_OPERATOR_LENGTH = 2

_SYMBOL_STARTS: frozenset[str] = frozenset(s[0] for s in (*OPERATORS, *PUNCTUATION))


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return "0" <= ch <= "9"


def is_ident_start(ch: str) -> bool:
    """Return True if ch may begin an identifier."""
    return ch.isalpha() or ch == "_"


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue an identifier."""
    return ch.isalnum() or ch == "_"


def is_hex_digit(ch: str) -> bool:
    """Return True if ch is a hexadecimal digit."""
    return ch != "" and ch in "0123456789abcdefABCDEF"


def starts_symbol(ch: str) -> bool:
    """Return True if ch begins some operator or punctuation entry."""
    return ch in _SYMBOL_STARTS
