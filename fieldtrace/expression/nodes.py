# fieldtrace/expression/nodes.py
"""
Immutable expression tree.

A formula component compiles to a tree of five node types. Nodes are
frozen dataclasses, so a compiled field can be shared by value and never
changes after parsing.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Set, Tuple, Union


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Symbol:
    name: str


@dataclass(frozen=True)
class UnaryOp:
    op: str            # '+' | '-'
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    op: str            # '+' | '-' | '*' | '/' | '^'
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Call:
    name: str
    args: Tuple["Node", ...]


Node = Union[Number, Symbol, UnaryOp, BinaryOp, Call]


def walk(node: Node) -> Iterator[Node]:
    """Yield every node of the tree, parents before children."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if isinstance(current, UnaryOp):
            stack.append(current.operand)
        elif isinstance(current, BinaryOp):
            stack.extend((current.right, current.left))
        elif isinstance(current, Call):
            stack.extend(reversed(current.args))


def symbols(node: Node) -> Set[str]:
    """Names of all symbol references in the tree."""
    return {n.name for n in walk(node) if isinstance(n, Symbol)}


def to_string(node: Node) -> str:
    """Fully parenthesized text form, mainly for debugging and reprs."""
    if isinstance(node, Number):
        return repr(node.value)
    if isinstance(node, Symbol):
        return node.name
    if isinstance(node, UnaryOp):
        return f"({node.op}{to_string(node.operand)})"
    if isinstance(node, BinaryOp):
        return f"({to_string(node.left)} {node.op} {to_string(node.right)})"
    return f"{node.name}({', '.join(to_string(a) for a in node.args)})"
