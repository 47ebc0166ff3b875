# fieldtrace/expression/parser.py
"""
Formula parsing.

A formula is array notation ``[c1, c2(, c3)]``. The outer brackets are
split into components at top-level commas, then every component is read
with Python's own expression grammar (``ast.parse`` in ``eval`` mode) and
translated into the closed node set of :mod:`.nodes`. Anything outside
that set is rejected, so no parsed construct can reach the interpreter
unless it is a number, a symbol, an arithmetic operator, or a call to a
whitelisted function.
"""

from __future__ import annotations
import ast
from typing import List

from .errors import ComponentError, FormulaSyntaxError
from .functions import FUNCTIONS
from .nodes import BinaryOp, Call, Node, Number, Symbol, UnaryOp, walk

ARRAY_NOTATION_MESSAGE = "Function must be in array notation: [vx, vy] or [vx, vy, vz]"

_OPENERS = "([{"
_CLOSERS = ")]}"

_BINARY_OPS = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.Div: "/",
    ast.Pow: "^",
}

_UNARY_OPS = {
    ast.UAdd: "+",
    ast.USub: "-",
}

# Typographic operators users paste from documents
_TRANSLATIONS = str.maketrans({"−": "-", "×": "*", "÷": "/"})


class _Rejected(Exception):
    """Internal: component text uses something outside the grammar."""


def strip_array_notation(expression: str) -> str:
    """Return the text between the outer brackets."""
    expr = expression.strip()
    if not expr.startswith("[") or not expr.endswith("]"):
        raise FormulaSyntaxError(ARRAY_NOTATION_MESSAGE)
    return expr[1:-1]


def split_components(content: str) -> List[str]:
    """
    Split array content at commas that are not nested in brackets.

    A trailing empty component is dropped, so ``"x, y"`` and ``""`` give
    two and zero components respectively.
    """
    components = []
    current = []
    depth = 0

    for char in content:
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
            if depth < 0:
                raise FormulaSyntaxError("Unbalanced brackets in expression")
        elif char == "," and depth == 0:
            components.append("".join(current))
            current = []
            continue
        current.append(char)

    if depth != 0:
        raise FormulaSyntaxError("Unbalanced brackets in expression")

    if current:
        components.append("".join(current))
    return components


def parse_component(text: str, index: int = 0, max_nodes: int = 500, max_depth: int = 50) -> Node:
    """
    Parse one component into an expression tree.

    Raises
    ------
    ComponentError
        On malformed syntax, unsupported constructs, unknown functions,
        wrong arity, or when the size limits are exceeded.
    """
    source = text.strip().translate(_TRANSLATIONS).replace("^", "**")
    if not source:
        raise ComponentError(index, "Empty expression")

    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as e:
        raise ComponentError(index, f"Syntax error: {e.msg}") from None
    except (ValueError, RecursionError) as e:
        raise ComponentError(index, f"Syntax error: {e}") from None
    except MemoryError:
        raise ComponentError(index, "Expression nested too deeply") from None

    try:
        node = _convert(tree.body, 1, max_depth)
    except _Rejected as e:
        raise ComponentError(index, str(e)) from None

    n_nodes = sum(1 for _ in walk(node))
    if n_nodes > max_nodes:
        raise ComponentError(index, f"Expression too large ({n_nodes} nodes, limit {max_nodes})")
    return node


def _convert(node: ast.AST, level: int, max_depth: int) -> Node:
    if level > max_depth:
        raise _Rejected(f"Expression nested too deeply (limit {max_depth})")
    nxt = level + 1

    if isinstance(node, ast.Constant):
        value = node.value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _Rejected(f"Unsupported literal {value!r}")
        try:
            return Number(float(value))
        except OverflowError:
            raise _Rejected("Numeric literal out of range") from None

    if isinstance(node, ast.Name):
        return Symbol(node.id)

    if isinstance(node, ast.UnaryOp):
        op = _UNARY_OPS.get(type(node.op))
        if op is None:
            raise _Rejected(f"Unsupported operator {type(node.op).__name__}")
        return UnaryOp(op, _convert(node.operand, nxt, max_depth))

    if isinstance(node, ast.BinOp):
        op = _BINARY_OPS.get(type(node.op))
        if op is None:
            raise _Rejected(f"Unsupported operator {type(node.op).__name__}")
        return BinaryOp(op, _convert(node.left, nxt, max_depth), _convert(node.right, nxt, max_depth))

    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name):
            raise _Rejected("Only calls to named functions are allowed")
        name = node.func.id
        fn = FUNCTIONS.get(name)
        if fn is None:
            raise _Rejected(f"Unknown function '{name}'")
        if node.keywords or any(isinstance(a, ast.Starred) for a in node.args):
            raise _Rejected(f"Function '{name}' takes positional arguments only")
        if not fn.accepts(len(node.args)):
            raise _Rejected(
                f"Function '{name}' takes {fn.arity_text()} argument(s), got {len(node.args)}"
            )
        return Call(name, tuple(_convert(a, nxt, max_depth) for a in node.args))

    raise _Rejected(f"Unsupported syntax: {type(node).__name__}")
