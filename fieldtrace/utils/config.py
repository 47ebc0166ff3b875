# fieldtrace/utils/config.py
"""
Global package configuration.

Provides centralized settings for evaluation backend, expression limits
and the sampling defaults used by the visualization modes.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Dict, Any
import warnings

from .jax_utils import JAX_AVAILABLE


@dataclass
class PackageConfig:
    """
    Global configuration for FieldTrace.

    Controls the batch evaluation backend, safety limits for compiled
    expressions, and the sampling densities of each visualization mode.
    """
    # Evaluation settings
    dtype: str = "float64"              # 'float32' | 'float64'
    backend: str = "numpy"              # 'numpy' | 'jax' (batch evaluation only)

    # Expression limits
    max_nodes: int = 500                # AST nodes per component
    max_depth: int = 50                 # AST nesting per component
    max_length: int = 4096              # characters per formula

    # Sampling defaults
    arrow_resolution: int = 15
    heatmap_resolution: int = 30
    streamline_count: int = 20
    streamline_steps: int = 50
    streamline_dt: float = 0.2
    particle_count: int = 100
    particle_speed: float = 1.0
    zero_epsilon: float = 1e-6

    # Progress and monitoring
    verbose: bool = False

    _jax_available: bool = field(default=JAX_AVAILABLE, init=False, repr=False)

    def __post_init__(self):
        self._validate_config()

    def _validate_config(self):
        """Validate configuration settings."""
        if self.dtype not in ["float32", "float64"]:
            raise ValueError(f"dtype must be 'float32' or 'float64', got '{self.dtype}'")

        if self.backend not in ["numpy", "jax"]:
            raise ValueError(f"backend must be 'numpy' or 'jax', got '{self.backend}'")
        if self.backend == "jax" and not self._jax_available:
            warnings.warn("Backend 'jax' not available, using 'numpy'")
            self.backend = "numpy"

        for name in ("max_nodes", "max_depth", "max_length", "arrow_resolution", "heatmap_resolution",
                     "streamline_count", "particle_count"):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be a positive integer")

        if self.streamline_steps < 0:
            raise ValueError("streamline_steps must be non-negative")
        if self.zero_epsilon < 0:
            raise ValueError("zero_epsilon must be non-negative")

    def as_dict(self) -> Dict[str, Any]:
        """Public settings as a plain dict."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.init}


# Global configuration instance
_global_config = PackageConfig()


def get_config() -> PackageConfig:
    """Get global package configuration."""
    return _global_config


def configure(**kwargs) -> None:
    """
    Configure package settings.

    Parameters
    ----------
    **kwargs : dict
        Configuration parameters to update
    """
    global _global_config

    for key, value in kwargs.items():
        if key in _global_config.as_dict():
            setattr(_global_config, key, value)
        else:
            warnings.warn(f"Unknown configuration parameter: {key}")

    # Re-validate
    _global_config._validate_config()


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _global_config
    _global_config = PackageConfig()
