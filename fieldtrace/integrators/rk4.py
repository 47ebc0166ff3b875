# fieldtrace/integrators/rk4.py

from __future__ import annotations
from typing import Mapping, Optional
import numbers

from ..fields.base import offset_position
from .base import FieldFn, Path


def rk4_step(field_fn: FieldFn, position: Mapping[str, float], dt: float) -> Optional[dict]:
    """
    Runge-Kutta 4 step for the autonomous ODE dp/dt = F(p).

    Parameters
    ----------
    field_fn : callable(position) -> vector or None
    position : current position, axis name -> coordinate
    dt : step size

    Returns
    -------
    next position, or None if any of the four stage evaluations is invalid
    """
    k1 = field_fn(position)
    if k1 is None:
        return None

    k2 = field_fn(offset_position(position, k1, 0.5 * dt))
    if k2 is None:
        return None

    k3 = field_fn(offset_position(position, k2, 0.5 * dt))
    if k3 is None:
        return None

    k4 = field_fn(offset_position(position, k3, dt))
    if k4 is None:
        return None

    slope = [(a + 2.0 * b + 2.0 * c + d) / 6.0 for a, b, c, d in zip(k1, k2, k3, k4)]
    return offset_position(position, slope, dt)


def integrate_rk4(field_fn: FieldFn, seed: Mapping[str, float], steps: int, dt: float) -> Path:
    """
    Trace a path through the field with RK4.

    Parameters
    ----------
    field_fn : callable(position) -> vector or None
    seed : starting position
    steps : number of steps (non-negative integer)
    dt : step size

    Returns
    -------
    Path
        Seed followed by every committed step. Integration stops at the
        first invalid stage evaluation, so the path may hold fewer than
        ``steps + 1`` positions.
    """
    if isinstance(steps, bool) or not isinstance(steps, numbers.Integral) or steps < 0:
        raise ValueError(f"steps must be a non-negative integer, got {steps!r}")

    current = dict(seed)
    path = [dict(current)]
    for _ in range(int(steps)):
        nxt = rk4_step(field_fn, current, dt)
        if nxt is None:
            break
        current = nxt
        path.append(dict(current))
    return tuple(path)
