# fieldtrace/fields/vector_field.py
"""
Vector field engine.

Owns the dimension, domain bounds, compiled evaluator and parameter
bindings of one field, and exposes point evaluation, grid sampling and
RK4 path integration. Evaluation never raises: any failure is reported
as None for that point.
"""

from __future__ import annotations
from dataclasses import dataclass
from itertools import product
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple, Union
import math

import numpy as np

from ..expression.compiler import PositionLike, as_position, coordinate_names
from ..integrators.base import Path
from ..integrators.rk4 import integrate_rk4
from .base import Bounds, FieldEvaluator, Position, Vector, vector_norm


@dataclass(frozen=True)
class FieldSample:
    """One grid sample: where it was taken and the field vector there."""
    position: Position
    vector: Vector


class VectorFieldEngine:
    """
    Evaluation engine for one vector field.

    Parameters
    ----------
    dimension : int
        2 or 3
    evaluator : FieldEvaluator
        Callable ``(position, params) -> vector or None``
    bounds : Bounds or bounds-like, optional
        Domain box; defaults to ±10 (2D) or ±5 (3D)
    """

    def __init__(
        self,
        dimension: int,
        evaluator: FieldEvaluator,
        bounds: Optional[Union[Bounds, Mapping, list]] = None,
    ):
        self.axes = coordinate_names(dimension)
        self.dimension = dimension
        if evaluator is None or not callable(evaluator):
            raise ValueError("evaluator must be callable")
        self.evaluator = evaluator
        self._bounds = self._check_bounds(Bounds.default(dimension) if bounds is None else bounds)
        self._params: Mapping[str, float] = MappingProxyType({})

    def __repr__(self) -> str:
        return f"VectorFieldEngine(dimension={self.dimension}, evaluator={self.evaluator!s}, bounds={self._bounds})"

    # ---------- State ----------

    @property
    def parameters(self) -> Mapping[str, float]:
        return self._params

    def set_parameters(self, bindings: Mapping[str, float]) -> None:
        """Replace all parameter bindings at once."""
        self._params = MappingProxyType(dict(bindings))

    def _check_bounds(self, bounds) -> Bounds:
        b = Bounds.from_any(bounds)
        if b.dimension < self.dimension:
            raise ValueError(f"{self.dimension}D field needs bounds for {self.dimension} axes, got {b.dimension}")
        return b

    def get_bounds(self) -> Bounds:
        return self._bounds

    def set_bounds(self, bounds: Union[Bounds, Mapping, list]) -> None:
        """Replace the domain box at once."""
        self._bounds = self._check_bounds(bounds)

    # ---------- Evaluation ----------

    def _merged(self, params: Optional[Mapping[str, float]]) -> Mapping[str, float]:
        if not params:
            return self._params
        merged = dict(self._params)
        merged.update(params)
        return merged

    def _validate(self, result) -> Optional[Vector]:
        if result is None or isinstance(result, (str, bytes)):
            return None
        values = tuple(result)
        if len(values) < self.dimension:
            return None
        head = tuple(float(v) for v in values[: self.dimension])
        if not all(math.isfinite(v) for v in head):
            return None
        return head

    def evaluate_at(self, position: PositionLike, params: Optional[Mapping[str, float]] = None) -> Optional[Vector]:
        """
        Evaluate the field at one position.

        Stored parameters are merged with ``params`` (the override wins).
        Returns exactly ``dimension`` finite components, or None if the
        evaluator fails or returns a wrong-shaped or non-finite result.
        """
        try:
            result = self.evaluator(as_position(position), self._merged(params))
            return self._validate(result)
        except Exception:
            return None

    def evaluate_many(
        self, points: np.ndarray, params: Optional[Mapping[str, float]] = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Evaluate the field at many positions.

        Parameters
        ----------
        points : np.ndarray
            Positions, shape (N, D), columns in x, y[, z] order

        Returns
        -------
        (np.ndarray, np.ndarray)
            Vectors, shape (N, dimension), with invalid rows zeroed, and
            the boolean validity mask, shape (N,)
        """
        pts = np.asarray(points, dtype=float)
        if pts.ndim == 1:
            pts = pts.reshape(1, -1)
        n = pts.shape[0]
        merged = self._merged(params)

        vectors = None
        batch = getattr(self.evaluator, "evaluate_batch", None)
        if batch is not None:
            try:
                out = np.array(batch(pts, merged), dtype=float)
                if out.shape == (n, self.dimension):
                    vectors = out
            except Exception:
                vectors = None

        if vectors is None:
            vectors = np.full((n, self.dimension), np.nan)
            retry = range(n)
        else:
            # Rows that overflowed a narrower batch dtype are retried in float64
            retry = np.flatnonzero(~np.all(np.isfinite(vectors), axis=1))
        for i in retry:
            v = self.evaluate_at(pts[i], params)
            vectors[i] = np.nan if v is None else v

        valid = np.all(np.isfinite(vectors), axis=1)
        vectors = np.where(valid[:, None], vectors, 0.0)
        return vectors, valid

    def get_magnitude(self, position: PositionLike, params: Optional[Mapping[str, float]] = None) -> float:
        """Euclidean norm of the field at ``position``; 0 when invalid."""
        v = self.evaluate_at(position, params)
        return 0.0 if v is None else vector_norm(v)

    # ---------- Sampling & integration ----------

    def grid_axes(self, resolution: int) -> List[np.ndarray]:
        """Evenly spaced coordinates per axis, endpoints included."""
        if resolution < 1:
            raise ValueError(f"resolution must be positive, got {resolution}")
        b = self._bounds
        return [np.linspace(lo, hi, int(resolution)) for lo, hi in zip(b.min, b.max)][: self.dimension]

    def sample_grid(self, resolution: int = 20, params: Optional[Mapping[str, float]] = None) -> List[FieldSample]:
        """
        Sample the field on a ``resolution**dimension`` grid over the bounds.

        Points where the field is invalid are left out, so the result may
        be shorter than the grid.
        """
        samples = []
        for coords in product(*self.grid_axes(resolution)):
            position = {axis: float(c) for axis, c in zip(self.axes, coords)}
            vector = self.evaluate_at(position, params)
            if vector is not None:
                samples.append(FieldSample(position, vector))
        return samples

    def integrate_rk4(
        self,
        seed: PositionLike,
        steps: int = 100,
        dt: float = 0.1,
        params: Optional[Mapping[str, float]] = None,
    ) -> Path:
        """Trace an RK4 path from ``seed``; may stop early (see integrate_rk4)."""
        return integrate_rk4(lambda p: self.evaluate_at(p, params), as_position(seed), steps, dt)
