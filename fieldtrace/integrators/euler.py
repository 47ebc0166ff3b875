# fieldtrace/integrators/euler.py

from __future__ import annotations
from typing import Mapping, Optional, Tuple

import numpy as np

from ..fields.base import offset_position
from .base import FieldFn


def euler_step(field_fn: FieldFn, position: Mapping[str, float], dt: float) -> Optional[dict]:
    """
    Forward Euler step: p_{n+1} = p_n + dt * F(p_n).

    Returns None when the field is invalid at ``position``.
    """
    v = field_fn(position)
    if v is None:
        return None
    return offset_position(position, v, dt)


def euler_step_batch(
    positions: np.ndarray,
    vectors: np.ndarray,
    valid: np.ndarray,
    dt: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vectorized forward Euler update for many positions.

    Parameters
    ----------
    positions : np.ndarray
        Current positions, shape (N, D)
    vectors : np.ndarray
        Field vectors at the positions, shape (N, C); component i moves
        axis i, and only the first min(D, C) axes are updated
    valid : np.ndarray
        Boolean mask, shape (N,); invalid rows do not move
    dt : float
        Step size

    Returns
    -------
    (np.ndarray, np.ndarray)
        Updated positions, shape (N, D), and the mask of rows that moved
    """
    positions = np.asarray(positions, dtype=float)
    vectors = np.asarray(vectors, dtype=float)
    moved = np.asarray(valid, dtype=bool).copy()

    n_axes = min(positions.shape[1], vectors.shape[1])
    # Zero vectors leave particles in place
    moved &= np.any(vectors[:, :n_axes] != 0.0, axis=1)

    out = positions.copy()
    step = np.where(moved[:, None], vectors[:, :n_axes] * dt, 0.0)
    out[:, :n_axes] += step
    return out, moved
