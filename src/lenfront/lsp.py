"""Minimal LSP server for len, diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from lenfront import __version__
from lenfront.errors import Diagnostic as LenDiagnostic
from lenfront.errors import Severity
from lenfront.frontend import run
from lenfront.tokens import Position as LenPosition

server = LanguageServer(
    "lenfront-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)

_SEVERITY = {
    Severity.ERROR: DiagnosticSeverity.Error,
    Severity.WARNING: DiagnosticSeverity.Warning,
}


def _utf16_character(lines: list[str], pos: LenPosition) -> int:
    """Convert a 1-based code-point column into a 0-based UTF-16 offset."""
    line_idx = pos.line - 1
    line = lines[line_idx] if 0 <= line_idx < len(lines) else ""
    prefix = line[: pos.column - 1]
    return len(prefix.encode("utf-16-le", errors="surrogatepass")) // 2


def to_lsp(diag: LenDiagnostic, source: str) -> Diagnostic:
    """Convert a frontend diagnostic (1-based, code points) to an LSP one.

    LSP positions are 0-based and count UTF-16 code units.
    """
    lines = source.split("\n")
    start = diag.span.start
    end = diag.span.end
    return Diagnostic(
        range=Range(
            start=Position(line=start.line - 1, character=_utf16_character(lines, start)),
            end=Position(line=end.line - 1, character=_utf16_character(lines, end)),
        ),
        message=diag.message,
        severity=_SEVERITY[diag.severity],
        source="lenfront",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the len frontend and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    result = run(doc.source)
    diagnostics = [to_lsp(d, doc.source) for d in result.diagnostics]

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
