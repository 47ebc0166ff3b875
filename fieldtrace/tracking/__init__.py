# fieldtrace/tracking/__init__.py
"""
Sampling strategies over a vector field.

Main Components:
- Seeding: planar grids, cell-centred streamline seeds, random seeds
- BoundaryConditions: toroidal wraparound for animated particles
- Sampling: arrow layout, heatmap samples, streamline tracing
- ParticleSystem: Euler advection of (N, D) particle positions
"""

from .seeding import (
    plane_grid,
    positions_to_dicts,
    random_seeds,
    streamline_seeds,
)

from .boundary import (
    BoundaryCondition,
    apply_wraparound,
    wraparound_boundary,
)

from .sampling import (
    ArrowGlyph,
    HeatmapSamples,
    arrow_layout,
    heatmap_samples,
    magnitude_colors,
    marker_indices,
    path_to_array,
    trace_streamlines,
)

from .particles import (
    ADVECTION_SCALE,
    ParticleSystem,
    create_particle_system,
    to_points3d,
)

__all__ = [
    "plane_grid",
    "positions_to_dicts",
    "random_seeds",
    "streamline_seeds",
    "BoundaryCondition",
    "apply_wraparound",
    "wraparound_boundary",
    "ArrowGlyph",
    "HeatmapSamples",
    "arrow_layout",
    "heatmap_samples",
    "magnitude_colors",
    "marker_indices",
    "path_to_array",
    "trace_streamlines",
    "ADVECTION_SCALE",
    "ParticleSystem",
    "create_particle_system",
    "to_points3d",
]
