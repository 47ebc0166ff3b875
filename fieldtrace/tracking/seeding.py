# fieldtrace/tracking/seeding.py
"""
Seed position generators.

Sampling grids for arrow and heatmap layouts, cell-centred streamline
seeds, and uniform random particle seeds. All generators return arrays of
shape (N, D) where D is the number of axes of the bounds box.
"""

from __future__ import annotations
from typing import List, Mapping, Optional, Sequence, Union
import math
import numpy as np

from ..expression.compiler import AXES
from ..fields.base import Bounds


def _as_bounds(bounds: Union[Bounds, Mapping, Sequence]) -> Bounds:
    return Bounds.from_any(bounds)


def positions_to_dicts(positions: np.ndarray) -> List[dict]:
    """Convert an (N, D) array into axis-keyed position dicts."""
    positions = np.asarray(positions, dtype=float)
    return [dict(zip(AXES, map(float, row))) for row in positions]


def plane_grid(bounds: Union[Bounds, Mapping, Sequence], resolution: int) -> np.ndarray:
    """
    Regular ``resolution x resolution`` grid over the x/y extent.

    Endpoints are included. In 3D the grid lies in the z = 0 plane.
    Ordering is x-major: index ``i * resolution + j`` holds (x_i, y_j).

    Returns
    -------
    np.ndarray
        Grid positions, shape (resolution**2, D)
    """
    b = _as_bounds(bounds)
    if resolution < 1:
        return np.zeros((0, b.dimension), dtype=float)

    xs = np.linspace(b.min[0], b.max[0], int(resolution))
    ys = np.linspace(b.min[1], b.max[1], int(resolution))
    X, Y = np.meshgrid(xs, ys, indexing="ij")

    columns = [X.ravel(), Y.ravel()]
    if b.dimension == 3:
        columns.append(np.zeros(X.size))
    return np.stack(columns, axis=1)


def streamline_seeds(bounds: Union[Bounds, Mapping, Sequence], count: int) -> np.ndarray:
    """
    Cell-centred seeds for streamline tracing.

    Places ``ceil(sqrt(count))**2`` seeds at ``(i + 0.5) / n`` of the x/y
    extent (z = 0 in 3D), then keeps the first ``count``.

    Returns
    -------
    np.ndarray
        Seed positions, shape (count, D)
    """
    b = _as_bounds(bounds)
    if count <= 0:
        return np.zeros((0, b.dimension), dtype=float)

    n = math.ceil(math.sqrt(count))
    fractions = (np.arange(n) + 0.5) / n
    xs = b.min[0] + fractions * (b.max[0] - b.min[0])
    ys = b.min[1] + fractions * (b.max[1] - b.min[1])
    X, Y = np.meshgrid(xs, ys, indexing="ij")

    columns = [X.ravel(), Y.ravel()]
    if b.dimension == 3:
        columns.append(np.zeros(X.size))
    return np.stack(columns, axis=1)[:count]


def random_seeds(
    n: int,
    bounds: Union[Bounds, Mapping, Sequence],
    rng_seed: Optional[int] = None,
) -> np.ndarray:
    """
    Uniformly sample n seed positions within bounds.

    Parameters
    ----------
    n : int
        Number of seed positions to generate
    bounds : Bounds or bounds-like
        Domain box
    rng_seed : int, optional
        Seed for reproducibility; None draws fresh entropy

    Returns
    -------
    np.ndarray
        Random seed positions, shape (n, D)
    """
    b = _as_bounds(bounds)
    if n <= 0:
        return np.zeros((0, b.dimension), dtype=float)

    rng = np.random.default_rng(rng_seed)
    u = rng.uniform(0.0, 1.0, size=(n, b.dimension))
    lo = np.asarray(b.min)
    hi = np.asarray(b.max)
    return lo + u * (hi - lo)
