# fieldtrace/tracking/boundary.py
"""
Boundary condition handlers for particle advection.

Toroidal wrapping keeps animated particles inside the domain box: a
coordinate that leaves through one face re-enters at the opposite face.
"""

from __future__ import annotations
from typing import Mapping, Protocol, Sequence, Union
import numpy as np

from ..fields.base import Bounds


class BoundaryCondition(Protocol):
    """Protocol for boundary condition functions."""

    def __call__(self, positions: np.ndarray) -> np.ndarray:
        """Apply boundary condition to positions, shape (N, D)."""
        ...


def apply_wraparound(x: np.ndarray, bounds: Bounds) -> np.ndarray:
    """
    Jump coordinates that left the box to the opposite bound.

    Each axis is handled independently, and only the axes the bounds box
    defines are touched (z wraps only for 3D bounds).

    Parameters
    ----------
    x : np.ndarray
        Positions, shape (N, D)
    bounds : Bounds
        Domain box

    Returns
    -------
    np.ndarray
        Wrapped positions, shape (N, D)
    """
    x = np.array(x, dtype=float, copy=True)
    n_axes = min(x.shape[1], bounds.dimension)
    lo = np.asarray(bounds.min[:n_axes])
    hi = np.asarray(bounds.max[:n_axes])

    head = x[:, :n_axes]
    head = np.where(head > hi, lo, head)
    head = np.where(head < lo, hi, head)
    x[:, :n_axes] = head
    return x


def wraparound_boundary(bounds: Union[Bounds, Mapping, Sequence]) -> BoundaryCondition:
    """
    Factory returning a callable that applies toroidal wrapping within bounds.

    Parameters
    ----------
    bounds : Bounds or bounds-like
        Domain box

    Returns
    -------
    BoundaryCondition
        Boundary condition function
    """
    bounds_std = Bounds.from_any(bounds)

    def _wrap_bc(x: np.ndarray) -> np.ndarray:
        return apply_wraparound(x, bounds_std)

    return _wrap_bc
