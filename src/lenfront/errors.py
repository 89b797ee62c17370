"""Diagnostics with formatted source context."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from lenfront.tokens import Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal lexical or syntactic problem, collected instead of raised."""

    severity: Severity
    message: str
    span: Span

    @classmethod
    def error(cls, message: str, span: Span) -> Diagnostic:
        return cls(Severity.ERROR, message, span)

    @classmethod
    def warning(cls, message: str, span: Span) -> Diagnostic:
        return cls(Severity.WARNING, message, span)

    def format(self, source: str, filename: str = "input.len") -> str:
        # Only "\n" ends a line, as in the lexer's positions
        lines = source.split("\n")
        line_idx = self.span.start.line - 1
        col = self.span.start.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].removesuffix("\r")
        else:
            source_line = ""

        # Underline the full span when on one line, otherwise to end of line
        if self.span.end.line == self.span.start.line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = max(1, len(source_line) - col + 1)

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.span.start.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"{self.severity.value}: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.span.start.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    """Return True if any diagnostic has ERROR severity."""
    return any(d.severity is Severity.ERROR for d in diagnostics)


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> tuple[Diagnostic, ...]:
    """Order diagnostics by start offset, keeping emission order for ties."""
    return tuple(sorted(diagnostics, key=lambda d: d.span.start.offset))
