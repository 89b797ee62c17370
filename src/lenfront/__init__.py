"""Lexer and parser frontend for the len expression language."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lenfront.config import FrontendConfig
    from lenfront.frontend import RunResult

__version__ = "0.1.0"


def tokenize(source: str | bytes, config: FrontendConfig | None = None) -> str:
    """Return the human-readable token dump of source."""
    from lenfront.frontend import tokenize_text

    return tokenize_text(source, config)


def run(source: str | bytes, config: FrontendConfig | None = None) -> RunResult:
    """Lex and parse source, returning token dump, AST dump and diagnostics."""
    from lenfront.frontend import run as _run

    return _run(source, config)
