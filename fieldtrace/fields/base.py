# fieldtrace/fields/base.py
"""
Base protocols and domain geometry for vector fields.

Defines the Bounds box, the field-evaluator protocol and the position
helpers shared by the engine, integrators and sampling strategies.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence, Tuple, Union
import math
import numpy as np

from ..expression.compiler import AXES, PositionLike, as_position

Position = Dict[str, float]
Vector = Tuple[float, ...]


class FieldEvaluator(Protocol):
    """
    Protocol for compiled field functions.

    Any callable with this signature can back a VectorFieldEngine; the
    compiler's CompiledField is the standard implementation.
    """

    def __call__(self, position: Mapping[str, float], params: Mapping[str, float]) -> Optional[Sequence[float]]:
        """
        Evaluate the field.

        Parameters
        ----------
        position : mapping
            Axis name -> coordinate
        params : mapping
            Parameter bindings

        Returns
        -------
        sequence of float or None
            Vector components, or None on evaluation failure
        """
        ...


@dataclass(frozen=True)
class Bounds:
    """
    Axis-aligned domain box in 2D/3D.

    Attributes
    ----------
    min : (D,) lower corner, x/y[/z] order
    max : (D,) upper corner
    """
    min: Tuple[float, ...]
    max: Tuple[float, ...]

    def __post_init__(self):
        lo = tuple(float(v) for v in self.min)
        hi = tuple(float(v) for v in self.max)
        if len(lo) != len(hi):
            raise ValueError("min and max must have the same number of axes")
        if len(lo) not in (2, 3):
            raise ValueError(f"Bounds must have 2 or 3 axes, got {len(lo)}")
        if not all(a <= b for a, b in zip(lo, hi)):
            raise ValueError(f"Invalid bounds: min {lo} > max {hi}")
        object.__setattr__(self, "min", lo)
        object.__setattr__(self, "max", hi)

    @classmethod
    def default(cls, dimension: int) -> "Bounds":
        """±10 box for 2D fields, ±5 box for 3D fields."""
        if dimension == 2:
            return cls((-10.0, -10.0), (10.0, 10.0))
        if dimension == 3:
            return cls((-5.0, -5.0, -5.0), (5.0, 5.0, 5.0))
        raise ValueError(f"dimension must be 2 or 3, got {dimension}")

    @classmethod
    def from_any(cls, bounds: Union["Bounds", Mapping[str, Any], Sequence]) -> "Bounds":
        """
        Standardize bounds given in various formats.

        Accepts a Bounds, a mapping ``{"min": {"x": .., "y": ..}, "max": {...}}``
        (or with sequences instead of inner mappings), or an array of shape
        (2, D) ``[[xmin, ymin(, zmin)], [xmax, ymax(, zmax)]]``.
        """
        if isinstance(bounds, Bounds):
            return bounds
        if isinstance(bounds, Mapping):
            lo, hi = bounds["min"], bounds["max"]
            if isinstance(lo, Mapping):
                axes = [a for a in AXES if a in lo]
                return cls(tuple(lo[a] for a in axes), tuple(hi[a] for a in axes))
            return cls(tuple(lo), tuple(hi))
        arr = np.asarray(bounds, dtype=float)
        if arr.ndim != 2 or arr.shape[0] != 2:
            raise ValueError(f"Bounds array must have shape (2, D), got {arr.shape}")
        return cls(tuple(arr[0]), tuple(arr[1]))

    @property
    def dimension(self) -> int:
        return len(self.min)

    @property
    def axes(self) -> Tuple[str, ...]:
        return AXES[: self.dimension]

    def span(self) -> Tuple[float, ...]:
        return tuple(b - a for a, b in zip(self.min, self.max))

    def contains(self, position: PositionLike) -> bool:
        pos = as_position(position)
        return all(lo <= pos.get(a, lo) <= hi for a, lo, hi in zip(self.axes, self.min, self.max))

    def as_array(self) -> np.ndarray:
        """Bounds as a (2, D) array [[min...], [max...]]."""
        return np.array([self.min, self.max], dtype=float)

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            "min": dict(zip(self.axes, self.min)),
            "max": dict(zip(self.axes, self.max)),
        }


def offset_position(position: Mapping[str, float], vector: Sequence[float], scale: float) -> Position:
    """
    Return ``position + scale * vector`` by axis correspondence.

    Vector component i belongs to axis ``AXES[i]``; only axes present in
    both the position and the vector change, all others pass through.
    """
    result = dict(position)
    for axis, component in zip(AXES, vector):
        if axis in result:
            result[axis] = result[axis] + scale * component
    return result


def vector_norm(vector: Sequence[float]) -> float:
    return math.hypot(*vector)


def vector_norms(vectors: np.ndarray) -> np.ndarray:
    """Row-wise Euclidean norms of an (N, D) array, without overflow in the squares."""
    vectors = np.asarray(vectors, dtype=float)
    if vectors.shape[0] == 0:
        return np.zeros(0)
    return np.hypot.reduce(vectors, axis=1)
