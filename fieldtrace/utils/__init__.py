# fieldtrace/utils/__init__.py
"""
Utilities for FieldTrace.

Contains:
- jax_utils: JAX availability guard and array backend selection
- config: package-wide settings
- logging: timers, memory monitoring, verbose messages

All modules handle JAX availability gracefully with NumPy fallbacks.
"""

from .jax_utils import (
    JAX_AVAILABLE,
    get_jax_version,
    array_module,
    to_numpy,
)

from .config import (
    PackageConfig,
    configure,
    get_config,
    reset_config,
)

from .logging import (
    Timer,
    timeit,
    memory_info,
    log,
)

__all__ = [
    # jax_utils
    "JAX_AVAILABLE",
    "get_jax_version",
    "array_module",
    "to_numpy",
    # config
    "PackageConfig",
    "configure",
    "get_config",
    "reset_config",
    # logging
    "Timer",
    "timeit",
    "memory_info",
    "log",
]
