# fieldtrace/fields/__init__.py
"""
FieldTrace vector field classes.

- Bounds: axis-aligned domain box with per-dimension defaults
- FieldEvaluator: protocol for compiled field functions
- VectorFieldEngine: point evaluation, grid sampling, RK4 integration
"""

from .base import (
    Bounds,
    FieldEvaluator,
    Position,
    Vector,
    offset_position,
    vector_norm,
    vector_norms,
)

from .vector_field import (
    FieldSample,
    VectorFieldEngine,
)

__all__ = [
    "Bounds",
    "FieldEvaluator",
    "Position",
    "Vector",
    "offset_position",
    "vector_norm",
    "vector_norms",
    "FieldSample",
    "VectorFieldEngine",
]
