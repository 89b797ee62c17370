"""AST node types and the per-parse node arena."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto

from lenfront.tokens import Span


class NodeKind(Enum):
    PROGRAM = auto()  # children: statements
    BINDING = auto()  # text: bound name, children: (value,)
    NUMBER = auto()  # text: canonical literal
    STRING = auto()  # text: decoded literal
    BOOLEAN = auto()  # text: "true" | "false"
    IDENTIFIER = auto()  # text: name
    UNARY = auto()  # text: operator, children: (operand,)
    BINARY = auto()  # text: operator, children: (left, right)
    CALL = auto()  # children: (function, argument)
    GROUP = auto()  # children: (inner,)
    LAMBDA = auto()  # text: parameter, children: (body,)
    PRODUCT = auto()  # children: fields
    FIELD = auto()  # text: field name, children: (value,)
    ERROR = auto()  # text: diagnostic message


@dataclass(frozen=True, slots=True)
class Node:
    """One arena entry. Children are referenced by arena index."""

    index: int
    kind: NodeKind
    text: str
    span: Span
    children: tuple[int, ...] = ()


class Tree:
    """Contiguous node store for one parse.

    Children are always added before their parent, so every child index is
    smaller than its parent's and the structure cannot contain cycles.
    """

    def __init__(self) -> None:
        self._nodes: list[Node] = []
        self.root = -1

    def __len__(self) -> int:
        return len(self._nodes)

    def add(self, kind: NodeKind, span: Span, text: str = "", children: tuple[int, ...] = ()) -> int:
        index = len(self._nodes)
        for child in children:
            if not 0 <= child < index:
                raise ValueError(f"child index {child} is not an earlier node")
        self._nodes.append(Node(index, kind, text, span, children))
        return index

    def node(self, index: int) -> Node:
        return self._nodes[index]

    def children(self, index: int) -> list[Node]:
        return [self._nodes[i] for i in self._nodes[index].children]

    @property
    def program(self) -> Node:
        return self._nodes[self.root]

    def walk(self, start: int | None = None) -> Iterator[tuple[int, Node]]:
        """Yield (depth, node) in pre-order without recursion."""
        if start is None:
            start = self.root
        if start < 0:
            return
        stack: list[tuple[int, int]] = [(0, start)]
        while stack:
            depth, index = stack.pop()
            node = self._nodes[index]
            yield depth, node
            for child in reversed(node.children):
                stack.append((depth + 1, child))

    def find(self, kind: NodeKind) -> list[Node]:
        """Return all reachable nodes of the given kind, in pre-order."""
        return [node for _, node in self.walk() if node.kind is kind]
