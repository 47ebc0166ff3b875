# fieldtrace/utils/jax_utils.py
from __future__ import annotations
from typing import Any, Optional
import warnings

try:
    import jax
    import jax.numpy as jnp
    JAX_AVAILABLE = True
except Exception:
    JAX_AVAILABLE = False
    jax = None  # type: ignore
    jnp = None  # type: ignore

import numpy as np


def get_jax_version() -> Optional[str]:
    """Return the JAX version string if available, else None."""
    return getattr(jax, "__version__", None) if JAX_AVAILABLE else None


def array_module(backend: str = "numpy"):
    """
    Return the array namespace used for batch evaluation.

    backend: 'numpy' | 'jax'. Requesting 'jax' without JAX installed warns
    and returns numpy.
    """
    if backend == "jax":
        if JAX_AVAILABLE:
            return jnp
        warnings.warn("JAX backend requested but JAX is not installed; using NumPy", RuntimeWarning)
    return np


def to_numpy(x: Any) -> np.ndarray:
    """Convert JAX/NumPy arrays to NumPy; leaves Python scalars unchanged."""
    return np.asarray(x)

