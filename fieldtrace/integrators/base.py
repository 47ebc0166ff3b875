# fieldtrace/integrators/base.py

from __future__ import annotations
from typing import Callable, Mapping, Optional, Protocol, Sequence, Tuple

Position = Mapping[str, float]

# Field function signature: takes a position, returns a vector or None
FieldFn = Callable[[Position], Optional[Sequence[float]]]
"""
Field function protocol.

Parameters
----------
position : mapping
    Axis name -> coordinate

Returns
-------
sequence of float or None
    Vector at the position; None marks an invalid evaluation
"""

Path = Tuple[dict, ...]
"""Positions along an integrated curve, seed first."""


class StepFn(Protocol):
    """
    Protocol for single-step integrators.

    All steppers share this signature so streamline tracing and particle
    advection can swap schemes.
    """

    def __call__(self, field_fn: FieldFn, position: Position, dt: float) -> Optional[dict]:
        """
        Advance one position by one step.

        Parameters
        ----------
        field_fn : FieldFn
            Function returning the field vector at a position
        position : mapping
            Current position
        dt : float
            Step size

        Returns
        -------
        dict or None
            New position, or None if any field evaluation was invalid
        """
        ...
