# fieldtrace/expression/presets.py
"""Named example fields offered by the formula picker."""

from __future__ import annotations
from typing import Dict, Tuple

# name -> (formula, dimension)
PRESETS: Dict[str, Tuple[str, int]] = {
    "vortex-2d": ("[-y, x]", 2),
    "saddle-2d": ("[x, -y]", 2),
    "spiral-2d": ("[-y + 0.1*x, x + 0.1*y]", 2),
    "wave-2d": ("[sin(y), cos(x)]", 2),
    "gradient-2d": ("[x, y]", 2),
    "curl-2d": ("[cos(x)*sin(y), sin(x)*cos(y)]", 2),
}


def get_preset(name: str) -> Tuple[str, int]:
    """Look up a preset formula and its dimension."""
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(sorted(PRESETS))}") from None
