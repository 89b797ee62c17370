"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from lenfront.ast import Node, NodeKind, Tree
from lenfront.errors import Diagnostic
from lenfront.lexer import tokenize
from lenfront.parser import parse_source as _parse_source
from lenfront.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens, _ = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def lex_diags():
    """Return a helper that tokenizes source and returns only the diagnostics."""

    def _lex_diags(source: str) -> list[Diagnostic]:
        _, diagnostics = tokenize(source)
        return diagnostics

    return _lex_diags


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns (tree, diagnostics)."""

    def _parse(source: str) -> tuple[Tree, list[Diagnostic]]:
        return _parse_source(source)

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def statements(tree: Tree) -> list[Node]:
    """Return the top-level statement nodes of a parsed program."""
    return tree.children(tree.root)


def sexpr(tree: Tree, index: int | None = None) -> str:
    """Compact s-expression of a subtree, for terse structural assertions."""
    if index is None:
        index = tree.root
    node = tree.node(index)
    head = {
        NodeKind.NUMBER: node.text,
        NodeKind.STRING: repr(node.text),
        NodeKind.BOOLEAN: node.text,
        NodeKind.IDENTIFIER: node.text,
        NodeKind.ERROR: "<error>",
    }.get(node.kind)
    if head is not None and not node.children:
        return head
    parts = [node.kind.name.lower()]
    if node.text and node.kind is not NodeKind.ERROR:
        parts.append(node.text)
    parts.extend(sexpr(tree, child) for child in node.children)
    return "(" + " ".join(parts) + ")"
