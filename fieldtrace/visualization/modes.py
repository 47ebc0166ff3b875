# fieldtrace/visualization/modes.py
"""
Visualization modes.

One VisualizationMode class serves the four mode kinds (arrows,
streamlines, particles, heatmap); the kind selects the renderer from a
dispatch table. Each mode turns a VectorFieldEngine into a Geometry value
for the external scene graph.

Lifecycle::

    IDLE -> RENDERED -> (UPDATING <-> RENDERED) -> DISPOSED

``render()`` discards previous geometry and recomputes it, ``update(dt)``
advances animated particle modes, ``clear()`` returns to IDLE and
``dispose()`` is terminal.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union
import math

import numpy as np

from ..tracking.particles import ParticleSystem, create_particle_system, to_points3d
from ..tracking.sampling import (
    arrow_layout,
    heatmap_samples,
    marker_indices,
    path_to_array,
    trace_streamlines,
)
from ..tracking.seeding import streamline_seeds
from ..utils.config import get_config
from ..utils.logging import log
from .config import VisualizationConfig
from .geometry import Geometry

# Fraction of ``streamline_count * density`` actually seeded
STREAMLINE_SEED_FACTOR = 0.4

# Marker radii per unit of ``scale``
ARROW_HEAD_SIZE = 0.1
STREAMLINE_MARKER_SIZE = 0.15
PARTICLE_SIZE = 0.05
HEATMAP_POINT_SIZE = 0.2


class ModeKind(str, Enum):
    ARROW = "arrow"
    STREAMLINE = "streamline"
    PARTICLE = "particle"
    HEATMAP = "heatmap"

    @classmethod
    def parse(cls, value: Union["ModeKind", str]) -> "ModeKind":
        """Accept enum members, values, and plural names ('arrows')."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text.endswith("s"):
            text = text[:-1]
        try:
            return cls(text)
        except ValueError:
            names = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown visualization mode '{value}'. Available: {names}") from None


class ModeState(str, Enum):
    IDLE = "idle"
    RENDERED = "rendered"
    UPDATING = "updating"
    DISPOSED = "disposed"


DEFAULT_CONFIGS: Dict[ModeKind, VisualizationConfig] = {
    ModeKind.ARROW: VisualizationConfig(color=0x0066FF, opacity=1.0, scale=1.0, density=1.0),
    ModeKind.STREAMLINE: VisualizationConfig(color=0xFFFFFF, opacity=1.0, scale=1.0, density=1.5),
    ModeKind.PARTICLE: VisualizationConfig(color=0x0066FF, opacity=0.8, scale=1.0, density=1.0, animated=True),
    ModeKind.HEATMAP: VisualizationConfig(color=0x0066FF, opacity=1.0, scale=1.0, density=1.0),
}

# Style keys that change only materials, not sampled geometry
_MATERIAL_KEYS = frozenset({"color", "opacity", "animated"})


class VisualizationMode:
    """
    A visualization of one vector field.

    Parameters
    ----------
    kind : ModeKind or str
        'arrow', 'streamline', 'particle' or 'heatmap' (plurals accepted)
    engine : VectorFieldEngine
        Field to visualize
    config : VisualizationConfig or mapping, optional
        Style overrides merged over the kind's defaults
    rng_seed : int, optional
        Seed for particle placement
    """

    def __init__(
        self,
        kind: Union[ModeKind, str],
        engine,
        config: Optional[Union[VisualizationConfig, Mapping[str, Any]]] = None,
        rng_seed: Optional[int] = None,
    ):
        self.kind = ModeKind.parse(kind)
        self.engine = engine
        self.rng_seed = rng_seed
        self.config = self.default_config()
        if isinstance(config, VisualizationConfig):
            self.config = config
        elif config:
            self.config = self.config.merged(config)

        self.state = ModeState.IDLE
        self.geometry: Optional[Geometry] = None
        self.particles: Optional[ParticleSystem] = None

    def __repr__(self) -> str:
        return f"VisualizationMode(kind={self.kind.value}, state={self.state.value})"

    # ---------- Lifecycle ----------

    def _check_alive(self, operation: str) -> None:
        if self.state is ModeState.DISPOSED:
            raise RuntimeError(f"Cannot {operation}: visualization mode has been disposed")

    def default_config(self) -> VisualizationConfig:
        return DEFAULT_CONFIGS[self.kind]

    def render(self) -> Geometry:
        """Discard previous geometry and recompute it from the field."""
        self._check_alive("render")
        self.clear()
        self.geometry = _RENDERERS[self.kind](self)
        self.state = ModeState.RENDERED
        log(f"{self.kind.value} mode: {self.geometry.n_objects} objects")
        return self.geometry

    def update(self, dt: float) -> Optional[Geometry]:
        """
        Advance the animation by ``dt`` seconds.

        Only animated particle modes move; every other mode, and a mode
        that has not been rendered yet, is left unchanged.
        """
        self._check_alive("update")
        if (
            self.kind is not ModeKind.PARTICLE
            or self.state is not ModeState.RENDERED
            or self.particles is None
            or not self.config.animated
        ):
            return self.geometry

        self.state = ModeState.UPDATING
        try:
            self.particles.step(self.engine, dt)
            self.geometry = self._particle_geometry()
        finally:
            self.state = ModeState.RENDERED
        return self.geometry

    def clear(self) -> None:
        """Release geometry and particle state; the mode returns to IDLE."""
        self._check_alive("clear")
        self.geometry = None
        self.particles = None
        self.state = ModeState.IDLE

    def dispose(self) -> None:
        """Release everything; further operations raise RuntimeError."""
        if self.state is ModeState.DISPOSED:
            return
        self.clear()
        self.engine = None
        self.state = ModeState.DISPOSED

    # ---------- Reconfiguration ----------

    def set_field(self, engine) -> Optional[Geometry]:
        """Switch to another field; a rendered mode is re-rendered."""
        self._check_alive("set field")
        was_rendered = self.state is not ModeState.IDLE
        self.clear()
        self.engine = engine
        return self.render() if was_rendered else None

    def update_style(self, updates: Optional[Mapping[str, Any]] = None, **kwargs) -> Optional[Geometry]:
        """
        Merge style updates into the configuration.

        Colour and opacity changes restyle the current geometry in place;
        scale or density changes re-render a rendered mode.
        """
        self._check_alive("update style")
        changes = dict(updates or {})
        changes.update(kwargs)
        self.config = self.config.merged(changes)

        if self.geometry is None:
            return None
        if set(changes) & set(VisualizationConfig.keys()) <= _MATERIAL_KEYS:
            self.geometry.color = self.config.color
            self.geometry.opacity = self.config.opacity
            return self.geometry
        return self.render()

    # ---------- Renderers ----------

    def _geometry(self, **kwargs) -> Geometry:
        return Geometry(kind=self.kind.value, color=self.config.color, opacity=self.config.opacity, **kwargs)

    def _render_arrows(self) -> Geometry:
        cfg = get_config()
        glyphs = arrow_layout(
            self.engine,
            base_resolution=cfg.arrow_resolution,
            density=self.config.density,
            scale=self.config.scale,
            epsilon=cfg.zero_epsilon,
        )
        origins = np.array([g.origin for g in glyphs], dtype=np.float32).reshape(-1, 3)
        directions = np.array(
            [np.multiply(g.direction, g.length) for g in glyphs], dtype=np.float32
        ).reshape(-1, 3)
        return self._geometry(
            points=origins,
            directions=directions,
            point_size=ARROW_HEAD_SIZE * self.config.scale,
        )

    def _render_streamlines(self) -> Geometry:
        cfg = get_config()
        count = math.ceil(cfg.streamline_count * self.config.density * STREAMLINE_SEED_FACTOR)
        seeds = streamline_seeds(self.engine.get_bounds(), count)
        paths = trace_streamlines(self.engine, seeds, steps=cfg.streamline_steps, dt=cfg.streamline_dt)
        log(f"streamline mode: {len(seeds)} seeds, {len(paths)} paths")

        lines = [path_to_array(path) for path in paths]
        markers = [line[list(marker_indices(len(line)))] for line in lines]
        points = np.concatenate(markers, axis=0) if markers else np.zeros((0, 3), dtype=np.float32)
        return self._geometry(
            points=points,
            lines=lines,
            point_size=STREAMLINE_MARKER_SIZE * self.config.scale,
        )

    def _particle_geometry(self) -> Geometry:
        return self._geometry(
            points=self.particles.points3d(),
            point_size=PARTICLE_SIZE * self.config.scale,
        )

    def _render_particles(self) -> Geometry:
        cfg = get_config()
        self.particles = create_particle_system(
            self.engine.get_bounds(),
            base_count=cfg.particle_count,
            density=self.config.density,
            speed=cfg.particle_speed,
            rng_seed=self.rng_seed,
        )
        return self._particle_geometry()

    def _render_heatmap(self) -> Geometry:
        cfg = get_config()
        samples = heatmap_samples(
            self.engine,
            base_resolution=cfg.heatmap_resolution,
            density=self.config.density,
        )
        return self._geometry(
            points=to_points3d(samples.positions),
            colors=samples.colors,
            point_size=HEATMAP_POINT_SIZE * self.config.scale,
        )


_RENDERERS: Dict[ModeKind, Callable[[VisualizationMode], Geometry]] = {
    ModeKind.ARROW: VisualizationMode._render_arrows,
    ModeKind.STREAMLINE: VisualizationMode._render_streamlines,
    ModeKind.PARTICLE: VisualizationMode._render_particles,
    ModeKind.HEATMAP: VisualizationMode._render_heatmap,
}
