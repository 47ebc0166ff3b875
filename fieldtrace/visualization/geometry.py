# fieldtrace/visualization/geometry.py
"""
Renderer-facing geometry produced by the visualization modes.

Everything is float32 with shape (N, 3), matching what a GPU scene graph
uploads directly.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import numpy as np


def _points(data) -> np.ndarray:
    arr = np.asarray(data, dtype=np.float32)
    if arr.size == 0:
        return np.zeros((0, 3), dtype=np.float32)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"expected shape (N, 3), got {arr.shape}")
    return arr


@dataclass
class Geometry:
    """
    Geometry for one rendered mode.

    Attributes
    ----------
    kind : str
        Mode that produced it ('arrow', 'streamline', 'particle', 'heatmap')
    points : np.ndarray
        Point or glyph-origin positions, shape (N, 3)
    colors : np.ndarray, optional
        Per-point RGB in [0, 1], shape (N, 3); None means uniform ``color``
    directions : np.ndarray, optional
        Arrow vectors already scaled to display length, shape (N, 3)
    lines : list of np.ndarray
        Polylines, each of shape (L, 3)
    point_size : float
        Marker radius
    color : int
        Uniform 24-bit colour
    opacity : float
        Material opacity
    """
    kind: str
    points: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float32))
    colors: Optional[np.ndarray] = None
    directions: Optional[np.ndarray] = None
    lines: List[np.ndarray] = field(default_factory=list)
    point_size: float = 0.1
    color: int = 0x0066FF
    opacity: float = 1.0

    def __post_init__(self):
        self.points = _points(self.points)
        if self.colors is not None:
            self.colors = _points(self.colors)
            if len(self.colors) != len(self.points):
                raise ValueError("colors must match points")
        if self.directions is not None:
            self.directions = _points(self.directions)
            if len(self.directions) != len(self.points):
                raise ValueError("directions must match points")
        self.lines = [_points(line) for line in self.lines]

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])

    @property
    def n_objects(self) -> int:
        """Number of drawable objects (points plus polylines)."""
        return self.n_points + len(self.lines)

    def is_empty(self) -> bool:
        return self.n_objects == 0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable representation."""
        return {
            "kind": self.kind,
            "points": self.points.tolist(),
            "colors": None if self.colors is None else self.colors.tolist(),
            "directions": None if self.directions is None else self.directions.tolist(),
            "lines": [line.tolist() for line in self.lines],
            "point_size": float(self.point_size),
            "color": f"#{self.color:06x}",
            "opacity": float(self.opacity),
        }
