# fieldtrace/tracking/particles.py
"""
Animated particle advection.

A ParticleSystem holds an (N, D) position array inside a bounds box and
advances it with explicit Euler steps through a VectorFieldEngine. Particles
leaving the box re-enter at the opposite face.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, Union
import math
import numpy as np

from ..fields.base import Bounds
from ..integrators.euler import euler_step_batch
from .boundary import apply_wraparound
from .seeding import random_seeds

# Display-rate damping applied on top of dt * speed
ADVECTION_SCALE = 0.1


def _ensure_float32(data: np.ndarray) -> np.ndarray:
    """Convert data to float32 for consistency."""
    return np.asarray(data, dtype=np.float32)


def to_points3d(positions: np.ndarray) -> np.ndarray:
    """
    Ensure positions have shape (N, 3) with float32 dtype.

    2D positions get a zero z column.
    """
    pos = _ensure_float32(positions)
    if pos.ndim == 1:
        pos = pos.reshape(1, -1)
    if pos.ndim != 2:
        raise ValueError(f"Positions must be 2D array, got shape {pos.shape}")

    if pos.shape[1] == 2:
        z_zeros = np.zeros((pos.shape[0], 1), dtype=np.float32)
        pos = np.concatenate([pos, z_zeros], axis=1)
    elif pos.shape[1] != 3:
        raise ValueError(f"Positions must have 2 or 3 columns, got {pos.shape[1]}")
    return pos


@dataclass
class ParticleSystem:
    """
    Particle positions advected through a vector field.

    Attributes
    ----------
    positions : np.ndarray
        Current positions, shape (N, D) with D = bounds.dimension
    bounds : Bounds
        Wrapping box
    speed : float
        Advection speed multiplier
    time : float
        Accumulated simulation time
    """
    positions: np.ndarray
    bounds: Bounds
    speed: float = 1.0
    time: float = 0.0
    n_steps: int = field(default=0, init=False)

    def __post_init__(self):
        self.bounds = Bounds.from_any(self.bounds)
        pos = np.asarray(self.positions, dtype=float)
        if pos.ndim == 1 and pos.size == 0:
            pos = pos.reshape(0, self.bounds.dimension)
        if pos.ndim != 2 or pos.shape[1] != self.bounds.dimension:
            raise ValueError(
                f"positions must have shape (N, {self.bounds.dimension}), got {pos.shape}"
            )
        self.positions = pos.copy()

    @classmethod
    def seeded(
        cls,
        bounds: Union[Bounds, Mapping, Sequence],
        count: int,
        speed: float = 1.0,
        rng_seed: Optional[int] = None,
    ) -> "ParticleSystem":
        """Uniform random particles inside ``bounds``."""
        b = Bounds.from_any(bounds)
        return cls(random_seeds(count, b, rng_seed), b, speed=speed)

    @property
    def count(self) -> int:
        return int(self.positions.shape[0])

    def step(self, engine, dt: float, params: Optional[Mapping[str, float]] = None) -> np.ndarray:
        """
        Advance every particle by one tick.

        Each particle with a valid non-zero field vector moves by
        ``vector * dt * speed * ADVECTION_SCALE``; moved particles that end
        up outside the bounds jump to the opposite face, per axis.

        Returns
        -------
        np.ndarray
            Boolean mask, shape (N,), of particles that moved
        """
        if self.count == 0:
            self.time += dt
            self.n_steps += 1
            return np.zeros(0, dtype=bool)

        vectors, valid = engine.evaluate_many(self.positions, params)
        new_positions, moved = euler_step_batch(
            self.positions, vectors, valid, dt * self.speed * ADVECTION_SCALE
        )
        if np.any(moved):
            new_positions[moved] = apply_wraparound(new_positions[moved], self.bounds)

        self.positions = new_positions
        self.time += dt
        self.n_steps += 1
        return moved

    def points3d(self) -> np.ndarray:
        """Positions as (N, 3) float32 for display."""
        return to_points3d(self.positions)


def create_particle_system(
    bounds: Union[Bounds, Mapping, Sequence],
    base_count: int = 100,
    density: float = 1.0,
    speed: float = 1.0,
    rng_seed: Optional[int] = None,
) -> ParticleSystem:
    """
    Create a randomly seeded particle system.

    Parameters
    ----------
    bounds : Bounds or bounds-like
        Domain box
    base_count : int
        Particle count at density 1
    density : float
        Multiplier; ``ceil(base_count * density)`` particles are created
    speed : float
        Advection speed multiplier
    rng_seed : int, optional
        Seed for reproducible placement
    """
    count = max(0, math.ceil(base_count * density))
    return ParticleSystem.seeded(bounds, count, speed=speed, rng_seed=rng_seed)
