"""Single-call entry points used by editors and the CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from lenfront.config import FrontendConfig
from lenfront.errors import Diagnostic, sort_diagnostics
from lenfront.lexer import tokenize
from lenfront.parser import parse
from lenfront.render import render_ast, render_tokens
from lenfront.tokens import Position, Span

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunResult:
    """Both renderings of one source buffer plus every diagnostic found."""

    tokens: str
    ast: str
    diagnostics: tuple[Diagnostic, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokens": self.tokens,
            "ast": self.ast,
            "diagnostics": [
                {
                    "severity": d.severity.value,
                    "message": d.message,
                    "start": {"line": d.span.start.line, "column": d.span.start.column},
                    "end": {"line": d.span.end.line, "column": d.span.end.column},
                }
                for d in self.diagnostics
            ],
        }


def decode_source(source: str | bytes) -> str:
    """Return source as text; invalid UTF-8 becomes U+FFFD rather than an error."""
    if isinstance(source, bytes):
        return source.decode("utf-8", errors="replace")
    return source


def tokenize_text(source: str | bytes, config: FrontendConfig | None = None) -> str:
    """Return the token dump for source, or an empty string on internal failure."""
    text = decode_source(source)
    try:
        tokens, _ = tokenize(text, config)
        return render_tokens(tokens)
    except Exception:
        logger.exception("internal error while tokenizing %d chars", len(text))
        return ""


def run(source: str | bytes, config: FrontendConfig | None = None) -> RunResult:
    """Lex and parse source once, returning the token and AST dumps.

    Never raises for any input. An unexpected internal failure is logged and
    reported as an "internal error" diagnostic alongside whatever renderings
    were completed before it.
    """
    text = decode_source(source)
    tokens_out = ""
    ast_out = ""
    diagnostics: list[Diagnostic] = []

    try:
        tokens, lex_diagnostics = tokenize(text, config)
        diagnostics.extend(lex_diagnostics)
        tokens_out = render_tokens(tokens)

        tree, parse_diagnostics = parse(tokens, config)
        diagnostics.extend(parse_diagnostics)
        ast_out = render_ast(tree)
        logger.debug(
            "run: %d chars, %d tokens, %d nodes, %d diagnostics",
            len(text),
            len(tokens),
            len(tree),
            len(diagnostics),
        )
    except Exception as exc:
        logger.exception("internal error while processing %d chars", len(text))
        end = Position(text.count("\n") + 1, len(text) - text.rfind("\n"), len(text))
        span = Span(Position(1, 1, 0), end)
        diagnostics.append(Diagnostic.error(f"internal error: {exc}", span))

    return RunResult(tokens_out, ast_out, sort_diagnostics(diagnostics))
