"""
FieldTrace: safe formula compilation and sampling of 2D/3D vector fields.

Turns a user-typed formula such as ``[-y, x]`` into an evaluator without
executing any code, then samples and integrates the field to produce
geometry for an interactive viewer:
- Whitelisted expression compiler with array-notation formulas
- Vector field engine with grid sampling and RK4 path tracing
- Arrow, streamline, particle and heatmap sampling strategies
- Optional JAX batch evaluation with NumPy fallbacks

Core workflow:
1. Compile a formula → parse / compile_field
2. Wrap it in an engine → VectorFieldEngine
3. Pick a mode → VisualizationMode (or FieldSession for all of it)
4. Hand the Geometry to a renderer
"""

from __future__ import annotations

# Version info
__version__ = "0.1.0"
__author__ = "FieldTrace Contributors"

# Essential utilities
from .utils.jax_utils import JAX_AVAILABLE  # noqa: F401
from .utils.config import configure, get_config, reset_config  # noqa: F401

# Expression compiler
from .expression import (  # noqa: F401
    CompiledField,
    ComponentCountError,
    ComponentError,
    ExpressionError,
    FormulaSyntaxError,
    InvalidResultError,
    InvalidVariableError,
    ParseResult,
    ProbeResult,
    PRESETS,
    compile_field,
    get_preset,
    parse,
    test_function,
)

# Fields and integration
from .fields import Bounds, VectorFieldEngine  # noqa: F401
from .integrators import euler_step, integrate_rk4, rk4_step  # noqa: F401

# Sampling strategies
from .tracking import (  # noqa: F401
    ParticleSystem,
    arrow_layout,
    heatmap_samples,
    streamline_seeds,
    trace_streamlines,
)

# Visualization
from .visualization import (  # noqa: F401
    Geometry,
    ModeKind,
    ModeState,
    VisualizationConfig,
    VisualizationMode,
)
from .session import FieldSession  # noqa: F401

# Core API exports
__all__ = [
    # Version
    "__version__",
    # Utilities
    "JAX_AVAILABLE",
    "configure",
    "get_config",
    "reset_config",
    # Expression compiler
    "CompiledField",
    "ParseResult",
    "ProbeResult",
    "compile_field",
    "parse",
    "test_function",
    "PRESETS",
    "get_preset",
    # Errors
    "ExpressionError",
    "FormulaSyntaxError",
    "ComponentCountError",
    "ComponentError",
    "InvalidVariableError",
    "InvalidResultError",
    # Fields and integration
    "Bounds",
    "VectorFieldEngine",
    "euler_step",
    "rk4_step",
    "integrate_rk4",
    # Sampling
    "ParticleSystem",
    "arrow_layout",
    "heatmap_samples",
    "streamline_seeds",
    "trace_streamlines",
    # Visualization
    "Geometry",
    "ModeKind",
    "ModeState",
    "VisualizationConfig",
    "VisualizationMode",
    "FieldSession",
]
