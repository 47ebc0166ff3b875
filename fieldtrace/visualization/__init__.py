"""
Visualization modes for FieldTrace.

- config: style settings handed back by the renderer
- geometry: float32 point/line/glyph data for the scene graph
- modes: arrow, streamline, particle and heatmap modes
"""

from .config import (
    DEFAULT_COLOR,
    VisualizationConfig,
    parse_color,
)

from .geometry import Geometry

from .modes import (
    DEFAULT_CONFIGS,
    ModeKind,
    ModeState,
    VisualizationMode,
)

__all__ = [
    # config
    "DEFAULT_COLOR",
    "VisualizationConfig",
    "parse_color",
    # geometry
    "Geometry",
    # modes
    "DEFAULT_CONFIGS",
    "ModeKind",
    "ModeState",
    "VisualizationMode",
]
