# fieldtrace/expression/errors.py
"""Compile-time errors for vector field formulas."""

from __future__ import annotations
from typing import Sequence, Tuple


class ExpressionError(ValueError):
    """Base class for all formula compilation errors."""

    # Symbols collected before compilation stopped; set by the compiler
    variables: Sequence[str] = ()


class FormulaSyntaxError(ExpressionError):
    """The formula is not in array notation or has unbalanced brackets."""


class ComponentCountError(ExpressionError):
    """The number of components does not match the field dimension."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} components, got {actual}")


class ComponentError(ExpressionError):
    """A single component failed to parse or validate."""

    def __init__(self, index: int, message: str):
        self.index = index
        self.message = message
        super().__init__(f"Component {index}: {message}")


class InvalidVariableError(ExpressionError):
    """The formula references symbols other than the coordinate axes."""

    def __init__(self, names: Sequence[str], allowed: Sequence[str]):
        self.names: Tuple[str, ...] = tuple(sorted(names))
        self.allowed: Tuple[str, ...] = tuple(allowed)
        super().__init__(
            f"Invalid variables: {', '.join(self.names)}. Use {', '.join(self.allowed)}"
        )


class InvalidResultError(ExpressionError):
    """The formula compiled but produced no finite vector at any probe point."""
