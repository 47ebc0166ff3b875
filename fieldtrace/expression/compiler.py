# fieldtrace/expression/compiler.py
"""
Formula compilation and evaluation.

``parse`` turns formula text into a :class:`CompiledField`, an immutable
evaluator that interprets the expression trees directly. No code text is
ever generated or executed from user input.

Example
-------
>>> result = parse("[-y, x]", 2)
>>> result.variables
['x', 'y']
>>> result.evaluator({"x": 1.0, "y": 0.0})
(0.0, 1.0)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import math

import numpy as np

from ..utils.config import get_config
from ..utils.jax_utils import array_module, to_numpy
from .errors import ComponentCountError, ExpressionError, FormulaSyntaxError, InvalidVariableError
from .functions import CONSTANTS, FUNCTIONS, Backend
from .nodes import BinaryOp, Call, Node, Number, Symbol, UnaryOp, symbols, to_string
from .parser import parse_component, split_components, strip_array_notation

AXES: Tuple[str, str, str] = ("x", "y", "z")

PositionLike = Union[Mapping[str, float], Sequence[float]]

_DEFAULT_RNG = np.random.default_rng()


def coordinate_names(dimension: int) -> Tuple[str, ...]:
    """Axis names valid for a field of the given dimension."""
    if dimension not in (2, 3):
        raise ValueError(f"dimension must be 2 or 3, got {dimension}")
    return AXES[:dimension]


def as_position(position: PositionLike) -> Dict[str, float]:
    """Accept a mapping or an axis-ordered sequence and return a dict."""
    if isinstance(position, Mapping):
        return dict(position)
    return {axis: value for axis, value in zip(AXES, position)}


# ---------- Interpreter ----------

def _interpret(node: Node, scope: Mapping[str, Any], backend: Backend):
    xp = backend.xp
    if isinstance(node, Number):
        return node.value
    if isinstance(node, Symbol):
        return scope[node.name]
    if isinstance(node, UnaryOp):
        value = _interpret(node.operand, scope, backend)
        return xp.negative(value) if node.op == "-" else value
    if isinstance(node, BinaryOp):
        left = _interpret(node.left, scope, backend)
        right = _interpret(node.right, scope, backend)
        if node.op == "+":
            return xp.add(left, right)
        if node.op == "-":
            return xp.subtract(left, right)
        if node.op == "*":
            return xp.multiply(left, right)
        if node.op == "/":
            return xp.divide(left, right)
        return xp.power(left, right)
    if isinstance(node, Call):
        args = [_interpret(a, scope, backend) for a in node.args]
        return FUNCTIONS[node.name].impl(backend, *args)
    raise TypeError(f"Unknown node type {type(node).__name__}")


# ---------- Compiled field ----------

@dataclass(frozen=True)
class CompiledField:
    """
    Evaluator for a compiled vector field formula.

    Attributes
    ----------
    expression : str
        Source formula text
    dimension : int
        Number of vector components (2 or 3)
    components : tuple of Node
        One expression tree per component
    variables : tuple of str
        Sorted symbol names referenced by the formula
    """
    expression: str
    dimension: int
    components: Tuple[Node, ...]
    variables: Tuple[str, ...]
    rng: np.random.Generator = field(default=_DEFAULT_RNG, repr=False, compare=False)

    def __call__(self, position: PositionLike, params: Optional[Mapping[str, float]] = None):
        return self.evaluate(position, params)

    def _scope(self, values: Mapping[str, Any], params: Optional[Mapping[str, float]]) -> Dict[str, Any]:
        scope = dict(values)
        if params:
            scope.update(params)
        scope.update(CONSTANTS)
        return scope

    def evaluate(
        self, position: PositionLike, params: Optional[Mapping[str, float]] = None
    ) -> Optional[Tuple[float, ...]]:
        """
        Evaluate the field at one position.

        Returns one float per component (possibly non-finite), or None when
        evaluation faults (unbound symbol, non-numeric parameter, ...).
        """
        backend = Backend(np, None, self.rng)
        try:
            scope = self._scope(
                {k: np.float64(v) for k, v in as_position(position).items()}, params
            )
            with np.errstate(all="ignore"):
                return tuple(float(_interpret(c, scope, backend)) for c in self.components)
        except Exception:
            return None

    def evaluate_batch(
        self,
        points: np.ndarray,
        params: Optional[Mapping[str, float]] = None,
        backend: Optional[str] = None,
    ) -> np.ndarray:
        """
        Evaluate the field at many positions at once.

        Parameters
        ----------
        points : np.ndarray
            Positions, shape (N, D) with columns in x, y, z order
        params : mapping, optional
            Parameter bindings
        backend : str, optional
            'numpy' | 'jax'; defaults to the package configuration

        Returns
        -------
        np.ndarray
            Vectors, shape (N, dimension); rows may contain NaN/inf
        """
        cfg = get_config()
        xp = array_module(backend or cfg.backend)
        dtype = getattr(np, cfg.dtype)

        pts = np.asarray(points, dtype=dtype)
        if pts.ndim == 1:
            pts = pts.reshape(1, -1)
        if pts.ndim != 2 or pts.shape[1] > len(AXES):
            raise ValueError(f"Points must have shape (N, 2) or (N, 3), got {pts.shape}")

        n = pts.shape[0]
        columns = {AXES[i]: xp.asarray(pts[:, i]) for i in range(pts.shape[1])}
        scope = self._scope(columns, params)
        env = Backend(xp, (n,), self.rng)

        with np.errstate(all="ignore"):
            values = [
                xp.broadcast_to(xp.asarray(_interpret(c, scope, env), dtype=dtype), (n,))
                for c in self.components
            ]
            out = xp.stack(values, axis=1)
        return to_numpy(out).astype(dtype, copy=False)

    def __str__(self) -> str:
        return "[" + ", ".join(to_string(c) for c in self.components) + "]"


@dataclass(frozen=True)
class ParseResult:
    """Outcome of :func:`parse`: an evaluator or an error, never both."""
    evaluator: Optional[CompiledField]
    error: Optional[ExpressionError]
    variables: List[str]

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        return None if self.error is None else str(self.error)


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of :func:`test_function`."""
    success: bool
    error: Optional[str]
    tested_points: int
    valid_points: int = 0


def compile_field(
    expression: str,
    dimension: int,
    max_nodes: Optional[int] = None,
    max_depth: Optional[int] = None,
    max_length: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> CompiledField:
    """
    Compile a formula, raising on failure.

    Raises
    ------
    FormulaSyntaxError, ComponentCountError, ComponentError, InvalidVariableError
        The error carries a ``variables`` attribute with the symbols
        collected before compilation stopped.
    """
    allowed = coordinate_names(dimension)
    if not isinstance(expression, str):
        raise FormulaSyntaxError(f"Formula must be a string, got {type(expression).__name__}")
    cfg = get_config()
    max_nodes = cfg.max_nodes if max_nodes is None else max_nodes
    max_depth = cfg.max_depth if max_depth is None else max_depth
    max_length = cfg.max_length if max_length is None else max_length
    if len(expression) > max_length:
        raise FormulaSyntaxError(f"Formula too long ({len(expression)} characters, limit {max_length})")

    components = split_components(strip_array_notation(expression))
    if len(components) != dimension:
        raise ComponentCountError(dimension, len(components))

    trees = []
    found = set()
    for i, text in enumerate(components):
        try:
            tree = parse_component(text, i, max_nodes=max_nodes, max_depth=max_depth)
        except ExpressionError as e:
            e.variables = sorted(found)
            raise
        trees.append(tree)
        found |= symbols(tree) - set(CONSTANTS)

    variables = sorted(found)
    invalid = [v for v in variables if v not in allowed]
    if invalid:
        error = InvalidVariableError(invalid, allowed)
        error.variables = variables
        raise error

    return CompiledField(
        expression=expression.strip(),
        dimension=dimension,
        components=tuple(trees),
        variables=tuple(variables),
        rng=rng if rng is not None else _DEFAULT_RNG,
    )


def parse(expression: str, dimension: int) -> ParseResult:
    """
    Parse and compile a vector field formula.

    Compile errors are returned in the result, not raised.

    Parameters
    ----------
    expression : str
        Formula like ``"[-y, x]"`` or ``"[sin(x), cos(y), z]"``
    dimension : int
        Expected dimension (2 or 3)

    Returns
    -------
    ParseResult
        ``evaluator`` is None whenever ``error`` is set
    """
    try:
        compiled = compile_field(expression, dimension)
    except ExpressionError as e:
        return ParseResult(None, e, list(getattr(e, "variables", [])))
    return ParseResult(compiled, None, list(compiled.variables))


_PROBE_POINTS = ((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), (-1.0, 1.0, 1.0), (0.5, 0.5, 0.5))


def test_function(evaluator, dimension: int = 2, params: Optional[Mapping[str, float]] = None) -> ProbeResult:
    """
    Probe an evaluator at four canonical points.

    Succeeds when at least one point yields a finite vector with exactly
    ``dimension`` components. A cheap sanity check, not a proof.
    """
    if evaluator is None:
        return ProbeResult(False, "No function provided", 0)

    axes = coordinate_names(dimension)
    valid = 0
    for point in _PROBE_POINTS:
        position = dict(zip(axes, point))
        try:
            result = evaluator(position, params or {})
            ok = (
                result is not None
                and len(result) == dimension
                and all(math.isfinite(v) for v in result)
            )
        except Exception:
            ok = False
        if ok:
            valid += 1

    if valid == 0:
        return ProbeResult(False, "Function produces invalid results", len(_PROBE_POINTS))
    return ProbeResult(True, None, len(_PROBE_POINTS), valid)


# Not a pytest test despite the name
test_function.__test__ = False
