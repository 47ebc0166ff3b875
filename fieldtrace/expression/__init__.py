# fieldtrace/expression/__init__.py
"""
Safe compilation of vector field formulas.

Formulas use array notation, one expression per component::

    [-y, x]
    [sin(z) + cos(y), sin(x) + cos(z), sin(y) + cos(x)]

Components may use numbers, the coordinate axes, ``pi`` and ``e``, the
operators ``+ - * / ^`` and a fixed whitelist of math functions. The
compiled evaluator interprets the parsed tree; it never executes code.
"""

from .compiler import (
    AXES,
    CompiledField,
    ParseResult,
    ProbeResult,
    as_position,
    compile_field,
    coordinate_names,
    parse,
    test_function,
)
from .errors import (
    ComponentCountError,
    ComponentError,
    ExpressionError,
    FormulaSyntaxError,
    InvalidResultError,
    InvalidVariableError,
)
from .functions import CONSTANTS, FUNCTIONS
from .presets import PRESETS, get_preset

__all__ = [
    "AXES",
    "CompiledField",
    "ParseResult",
    "ProbeResult",
    "as_position",
    "compile_field",
    "coordinate_names",
    "parse",
    "test_function",
    # Errors
    "ExpressionError",
    "FormulaSyntaxError",
    "ComponentCountError",
    "ComponentError",
    "InvalidVariableError",
    "InvalidResultError",
    # Whitelist
    "FUNCTIONS",
    "CONSTANTS",
    # Presets
    "PRESETS",
    "get_preset",
]
