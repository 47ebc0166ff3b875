# fieldtrace/expression/functions.py
"""
Whitelisted functions and constants for field formulas.

Every implementation takes an evaluation backend first and works on
Python floats, NumPy arrays and jax.numpy arrays alike. Results follow
IEEE semantics: domain errors give NaN, overflow gives inf.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple
import math

import numpy as np


class Backend(NamedTuple):
    """Array namespace plus what `random` needs to draw samples."""
    xp: Any                              # numpy or jax.numpy
    shape: Optional[Tuple[int, ...]]     # None for scalar evaluation
    rng: np.random.Generator


@dataclass(frozen=True)
class FunctionSpec:
    min_args: int
    max_args: Optional[int]              # None = variadic
    impl: Callable[..., Any]

    def accepts(self, n_args: int) -> bool:
        if n_args < self.min_args:
            return False
        return self.max_args is None or n_args <= self.max_args

    def arity_text(self) -> str:
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args} to {self.max_args}"


def _unary(name: str) -> FunctionSpec:
    return FunctionSpec(1, 1, lambda b, x: getattr(b.xp, name)(x))


def _log(b: Backend, x, base=None):
    if base is None:
        return b.xp.log(x)
    return b.xp.divide(b.xp.log(x), b.xp.log(base))


def _round(b: Backend, x, digits=None):
    # Half away from zero
    xp = b.xp
    if digits is None:
        return xp.sign(x) * xp.floor(xp.abs(x) + 0.5)
    factor = xp.power(10.0, xp.floor(digits))
    scaled = x * factor
    return xp.sign(scaled) * xp.floor(xp.abs(scaled) + 0.5) / factor


def _hypot(b: Backend, *args):
    return b.xp.sqrt(reduce(b.xp.add, [a * a for a in args]))


def _random(b: Backend, *args):
    u = b.rng.random(b.shape) if b.shape is not None else b.rng.random()
    if not args:
        return u
    if len(args) == 1:
        lo, hi = 0.0, args[0]
    else:
        lo, hi = args
    return lo + u * (hi - lo)


FUNCTIONS: Dict[str, FunctionSpec] = {
    # Trigonometric
    "sin": _unary("sin"),
    "cos": _unary("cos"),
    "tan": _unary("tan"),
    "asin": _unary("arcsin"),
    "acos": _unary("arccos"),
    "atan": _unary("arctan"),
    "atan2": FunctionSpec(2, 2, lambda b, y, x: b.xp.arctan2(y, x)),
    # Hyperbolic
    "sinh": _unary("sinh"),
    "cosh": _unary("cosh"),
    "tanh": _unary("tanh"),
    # Roots, powers, logarithms
    "sqrt": _unary("sqrt"),
    "cbrt": _unary("cbrt"),
    "abs": _unary("abs"),
    "exp": _unary("exp"),
    "log": FunctionSpec(1, 2, _log),
    "log10": _unary("log10"),
    "log2": _unary("log2"),
    "pow": FunctionSpec(2, 2, lambda b, x, y: b.xp.power(x, y)),
    "hypot": FunctionSpec(1, None, _hypot),
    # Rounding
    "floor": _unary("floor"),
    "ceil": _unary("ceil"),
    "round": FunctionSpec(1, 2, _round),
    "sign": _unary("sign"),
    # Reductions
    "min": FunctionSpec(1, None, lambda b, *a: reduce(b.xp.minimum, a)),
    "max": FunctionSpec(1, None, lambda b, *a: reduce(b.xp.maximum, a)),
    # Non-deterministic
    "random": FunctionSpec(0, 2, _random),
}

CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}
