# fieldtrace/tracking/sampling.py
"""
Field sampling strategies for the visualization modes.

- arrow_layout: scaled arrow glyphs on a planar grid
- heatmap_samples: magnitude-coloured points on a planar grid
- trace_streamlines: RK4 paths from a set of seeds
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple, Union
import colorsys
import math
import numpy as np

from ..expression.compiler import AXES
from ..fields.base import vector_norms
from ..integrators.base import Path
from .seeding import plane_grid, positions_to_dicts

# Fraction of ``scale`` taken by the longest arrow
ARROW_LENGTH_FACTOR = 0.8

# Hue of the lowest magnitude (blue); the highest maps to 0 (red)
HEATMAP_HUE_RANGE = 240.0 / 360.0


@dataclass(frozen=True)
class ArrowGlyph:
    """
    One arrow of the arrow layout.

    Attributes
    ----------
    origin : (3,) display position (z = 0 for planar samples)
    direction : (3,) unit direction
    length : display length, at most ``scale * 0.8``
    magnitude : field magnitude at the origin
    """
    origin: Tuple[float, float, float]
    direction: Tuple[float, float, float]
    length: float
    magnitude: float


@dataclass(frozen=True)
class HeatmapSamples:
    """
    Valid heatmap samples with their colours.

    Attributes
    ----------
    positions : (N, D) sample positions
    magnitudes : (N,) field magnitudes
    normalized : (N,) magnitudes mapped to [0, 1]
    colors : (N, 3) float32 RGB in [0, 1]
    """
    positions: np.ndarray
    magnitudes: np.ndarray
    normalized: np.ndarray
    colors: np.ndarray

    def __len__(self) -> int:
        return int(self.magnitudes.shape[0])


def _grid_resolution(base_resolution: int, density: float) -> int:
    return max(0, math.ceil(base_resolution * density))


def _pad3(values: Sequence[float]) -> Tuple[float, float, float]:
    v = [float(c) for c in values[:3]]
    return tuple(v + [0.0] * (3 - len(v)))  # type: ignore[return-value]


def arrow_layout(
    engine,
    base_resolution: int = 15,
    density: float = 1.0,
    scale: float = 1.0,
    epsilon: float = 1e-6,
    params: Optional[Mapping[str, float]] = None,
) -> List[ArrowGlyph]:
    """
    Lay out arrow glyphs on a planar grid over the field bounds.

    The grid has ``ceil(base_resolution * density)`` points per axis over
    the x/y extent (z = 0 in 3D). Lengths are normalized by the largest
    magnitude on the grid so that the strongest arrow is exactly
    ``scale * 0.8`` long. Invalid samples and samples with magnitude below
    ``epsilon`` produce no glyph.

    Parameters
    ----------
    engine : VectorFieldEngine
        Field to sample
    base_resolution : int
        Grid points per axis at density 1
    density : float
        Resolution multiplier
    scale : float
        Display scale
    epsilon : float
        Magnitude below which a sample is skipped

    Returns
    -------
    list of ArrowGlyph
    """
    resolution = _grid_resolution(base_resolution, density)
    points = plane_grid(engine.get_bounds(), resolution)
    if points.shape[0] == 0:
        return []

    vectors, valid = engine.evaluate_many(points, params)
    magnitudes = vector_norms(vectors)
    valid = valid & np.isfinite(magnitudes)

    max_magnitude = float(magnitudes[valid].max()) if np.any(valid) else 0.0
    if max_magnitude == 0.0:
        max_magnitude = 1.0

    display = scale * ARROW_LENGTH_FACTOR
    glyphs = []
    for point, vector, magnitude, ok in zip(points, vectors, magnitudes, valid):
        if not ok or magnitude < epsilon:
            continue
        length = min(display * (magnitude / max_magnitude), display)
        glyphs.append(
            ArrowGlyph(
                origin=_pad3(point),
                direction=_pad3(vector / magnitude),
                length=float(length),
                magnitude=float(magnitude),
            )
        )
    return glyphs


def magnitude_colors(normalized: np.ndarray) -> np.ndarray:
    """
    Map normalized magnitudes to RGB.

    Hue runs from blue (0) to red (1) at full saturation and lightness 0.5.

    Returns
    -------
    np.ndarray
        RGB colours, shape (N, 3), float32
    """
    normalized = np.asarray(normalized, dtype=float).reshape(-1)
    hues = (1.0 - normalized) * HEATMAP_HUE_RANGE
    rgb = [colorsys.hls_to_rgb(h, 0.5, 1.0) for h in hues]
    return np.asarray(rgb, dtype=np.float32).reshape(-1, 3)


def heatmap_samples(
    engine,
    base_resolution: int = 30,
    density: float = 1.0,
    params: Optional[Mapping[str, float]] = None,
) -> HeatmapSamples:
    """
    Sample field magnitude on a planar grid and colour it.

    Magnitudes of the valid samples are normalized against their own
    min/max range; a zero range is treated as 1.
    """
    resolution = _grid_resolution(base_resolution, density)
    points = plane_grid(engine.get_bounds(), resolution)
    if points.shape[0] == 0:
        empty = np.zeros(0)
        return HeatmapSamples(points, empty, empty, np.zeros((0, 3), dtype=np.float32))

    vectors, valid = engine.evaluate_many(points, params)
    magnitudes = vector_norms(vectors)
    valid = valid & np.isfinite(magnitudes)
    points = points[valid]
    magnitudes = magnitudes[valid]

    if magnitudes.size:
        lo, hi = float(magnitudes.min()), float(magnitudes.max())
        span = (hi - lo) or 1.0
        normalized = (magnitudes - lo) / span
    else:
        normalized = np.zeros(0)

    return HeatmapSamples(points, magnitudes, normalized, magnitude_colors(normalized))


def trace_streamlines(
    engine,
    seeds: Union[np.ndarray, Sequence[Mapping[str, float]]],
    steps: int = 50,
    dt: float = 0.2,
    params: Optional[Mapping[str, float]] = None,
) -> List[Path]:
    """
    Trace one RK4 path per seed.

    Paths with fewer than 2 points (the field was invalid at the seed)
    are dropped.
    """
    if isinstance(seeds, np.ndarray):
        seeds = positions_to_dicts(seeds)

    paths = []
    for seed in seeds:
        path = engine.integrate_rk4(seed, steps=steps, dt=dt, params=params)
        if len(path) >= 2:
            paths.append(path)
    return paths


def marker_indices(n_points: int) -> range:
    """Indices of the direction markers along a path of ``n_points``."""
    return range(0, n_points, max(2, n_points // 20))


def path_to_array(path: Path) -> np.ndarray:
    """Path positions as (L, 3) float32; missing axes are 0."""
    out = np.zeros((len(path), 3), dtype=np.float32)
    for i, position in enumerate(path):
        for j, axis in enumerate(AXES):
            out[i, j] = position.get(axis, 0.0)
    return out
