# fieldtrace/visualization/config.py
"""
Style configuration for visualization modes.

The renderer hands back plain dicts ``{color, scale, density, opacity,
animated}``; VisualizationConfig merges them over the current values.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union
import math
import warnings

DEFAULT_COLOR = 0x0066FF

ColorLike = Union[int, str]


def parse_color(value: ColorLike, fallback: int = DEFAULT_COLOR) -> int:
    """
    Convert a colour to a 24-bit integer.

    Accepts integers in ``[0, 0xFFFFFF]`` and hex strings such as
    ``"#ff8800"``, ``"0xff8800"`` or ``"ff8800"``. Anything else yields
    ``fallback``.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value if 0 <= value <= 0xFFFFFF else fallback
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("#"):
            text = text[1:]
        elif text.startswith("0x"):
            text = text[2:]
        if not text or len(text) > 6:
            return fallback
        try:
            return int(text, 16)
        except ValueError:
            return fallback
    return fallback


@dataclass(frozen=True)
class VisualizationConfig:
    """
    Display settings of one visualization mode.

    Attributes
    ----------
    color : int
        24-bit RGB colour, e.g. 0x0066ff
    scale : float
        Glyph and point size multiplier
    density : float
        Sampling density multiplier
    opacity : float
        Opacity in [0, 1]
    animated : bool
        Whether update(dt) advances the mode
    """
    color: int = DEFAULT_COLOR
    scale: float = 1.0
    density: float = 1.0
    opacity: float = 1.0
    animated: bool = False

    def __post_init__(self):
        object.__setattr__(self, "color", parse_color(self.color))
        for name in ("scale", "density", "opacity"):
            value = float(getattr(self, name))
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a non-negative finite number, got {getattr(self, name)!r}")
            object.__setattr__(self, name, value)
        if self.opacity > 1.0:
            raise ValueError(f"opacity must be in [0, 1], got {self.opacity}")
        object.__setattr__(self, "animated", bool(self.animated))

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def merged(self, updates: Optional[Mapping[str, Any]] = None, **kwargs) -> "VisualizationConfig":
        """
        Return a copy with ``updates`` applied.

        Missing keys keep their current values; unrecognized keys are
        ignored with a warning. An unparseable colour keeps the current
        colour.
        """
        changes: Dict[str, Any] = dict(updates or {})
        changes.update(kwargs)

        known = set(self.keys())
        for key in list(changes):
            if key not in known:
                warnings.warn(f"Unknown style option '{key}' ignored")
                del changes[key]
        if "color" in changes:
            changes["color"] = parse_color(changes["color"], self.color)
        return replace(self, **changes)

    @property
    def color_hex(self) -> str:
        return f"#{self.color:06x}"

    @property
    def color_rgb(self) -> Tuple[float, float, float]:
        """Colour as floats in [0, 1]."""
        c = self.color
        return ((c >> 16 & 0xFF) / 255.0, (c >> 8 & 0xFF) / 255.0, (c & 0xFF) / 255.0)

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
