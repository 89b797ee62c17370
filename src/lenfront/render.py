"""Canonical text dumps of tokens, trees and diagnostics."""

from __future__ import annotations

import io
import sys
from collections.abc import Iterable
from typing import TextIO

from lenfront.ast import Node, NodeKind, Tree
from lenfront.errors import Diagnostic
from lenfront.tokens import Token

_LABELS: dict[NodeKind, str] = {
    NodeKind.PROGRAM: "Program",
    NodeKind.BINDING: "Binding",
    NodeKind.NUMBER: "Number",
    NodeKind.STRING: "String",
    NodeKind.BOOLEAN: "Boolean",
    NodeKind.IDENTIFIER: "Identifier",
    NodeKind.UNARY: "Unary",
    NodeKind.BINARY: "Binary",
    NodeKind.CALL: "Call",
    NodeKind.GROUP: "Group",
    NodeKind.LAMBDA: "Lambda",
    NodeKind.PRODUCT: "Product",
    NodeKind.FIELD: "Field",
    NodeKind.ERROR: "Error!",
}

# Kinds whose payload is printed verbatim after the label
_BARE_TEXT = frozenset(
    {
        NodeKind.BINDING,
        NodeKind.NUMBER,
        NodeKind.BOOLEAN,
        NodeKind.IDENTIFIER,
        NodeKind.UNARY,
        NodeKind.BINARY,
        NodeKind.LAMBDA,
        NodeKind.FIELD,
        NodeKind.ERROR,
    }
)


# Deeper lines keep this indentation and carry their depth as "[N] " instead,
# so the dump stays linear in the number of nodes.
MAX_INDENT_DEPTH = 32


def _indent(depth: int) -> str:
    if depth <= MAX_INDENT_DEPTH:
        return "  " * depth
    return "  " * MAX_INDENT_DEPTH + f"[{depth}] "


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token to *file*: span, kind, raw text, decoded value."""
    for tok in tokens:
        line = f"{str(tok.span):<11} {tok.type.name:<10} {tok.raw!r}"
        if tok.value != tok.raw:
            line += f" -> {tok.value!r}"
        file.write(line + "\n")


def dump_ast(tree: Tree, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable indented tree to *file*."""
    for depth, node in tree.walk():
        file.write(f"{_indent(depth)}{_label(node)} [{node.span}]\n")


def _label(node: Node) -> str:
    label = _LABELS[node.kind]
    if node.kind is NodeKind.STRING:
        return f"{label} {node.text!r}"
    if node.kind in _BARE_TEXT:
        return f"{label} {node.text}"
    return label


def render_tokens(tokens: Iterable[Token]) -> str:
    out = io.StringIO()
    dump_tokens(tokens, file=out)
    return out.getvalue()


def render_ast(tree: Tree) -> str:
    out = io.StringIO()
    dump_ast(tree, file=out)
    return out.getvalue()


def render_diagnostics(diagnostics: Iterable[Diagnostic]) -> str:
    return "".join(
        f"{d.span.start.line}:{d.span.start.column}: {d.severity.value}: {d.message}\n"
        for d in diagnostics
    )
