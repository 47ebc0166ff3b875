"""
FieldTrace Integrators

Explicit stepping methods for tracing paths through a vector field. Each
single-step function follows the signature:

    new_position = step(field_fn, position, dt)

where:
- field_fn: callable position -> vector, or None when invalid
- position: mapping axis name -> coordinate
- dt: scalar step size

and returns None when the field could not be evaluated.
"""

from .base import FieldFn, Path, StepFn
from .euler import euler_step, euler_step_batch
from .rk4 import integrate_rk4, rk4_step

__all__ = [
    "FieldFn",
    "Path",
    "StepFn",
    "euler_step",
    "euler_step_batch",
    "rk4_step",
    "integrate_rk4",
]
