# fieldtrace/session.py
"""
Interactive exploration session.

FieldSession holds the state an interactive front end works against: the
active field engine, parameter bindings, the current visualization mode
and the style overrides chosen by the user. Loading a formula that fails
to compile or probes invalid keeps the previous field.
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Union

from .expression.compiler import ParseResult, coordinate_names, parse, test_function
from .expression.errors import InvalidResultError
from .expression.presets import get_preset
from .fields.base import Bounds
from .fields.vector_field import VectorFieldEngine
from .utils.logging import log
from .visualization.config import VisualizationConfig
from .visualization.geometry import Geometry
from .visualization.modes import DEFAULT_CONFIGS, ModeKind, VisualizationMode


class FieldSession:
    """
    State of one exploration session.

    Parameters
    ----------
    dimension : int
        Initial field dimension (2 or 3)
    bounds : Bounds or bounds-like, optional
        Domain box; defaults to the per-dimension default box
    mode : ModeKind or str
        Initial visualization mode
    style : mapping, optional
        Style overrides applied on top of every mode's defaults
    rng_seed : int, optional
        Seed for particle placement
    """

    def __init__(
        self,
        dimension: int = 2,
        bounds=None,
        mode: Union[ModeKind, str] = ModeKind.ARROW,
        style: Optional[Mapping[str, Any]] = None,
        rng_seed: Optional[int] = None,
    ):
        coordinate_names(dimension)
        self.dimension = dimension
        self._bounds: Optional[Bounds] = None if bounds is None else Bounds.from_any(bounds)
        self.mode_kind = ModeKind.parse(mode)
        self.rng_seed = rng_seed

        self.engine: Optional[VectorFieldEngine] = None
        self.mode: Optional[VisualizationMode] = None
        self.formula: Optional[str] = None
        self.variables: List[str] = []
        self.last_error: Optional[str] = None
        self.parameters: Dict[str, float] = {}
        self.style: Dict[str, Any] = {}
        if style:
            self.update_style(style)

    def __repr__(self) -> str:
        return f"FieldSession(formula={self.formula!r}, dimension={self.dimension}, mode={self.mode_kind.value})"

    def __enter__(self) -> "FieldSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ---------- Field ----------

    def _bounds_for(self, dimension: int) -> Bounds:
        if self._bounds is not None and self._bounds.dimension == dimension:
            return self._bounds
        return Bounds.default(dimension)

    def load_formula(self, expression: str, dimension: Optional[int] = None) -> ParseResult:
        """
        Compile ``expression`` and make it the active field.

        On a compile error, or when the compiled field yields no finite
        vector at any probe point, the previous field stays active and
        the returned result carries the error.
        """
        dim = self.dimension if dimension is None else dimension
        result = parse(expression, dim)
        if not result.ok:
            self.last_error = result.message
            log(f"formula rejected: {self.last_error}")
            return result

        probe = test_function(result.evaluator, dim, self.parameters)
        if not probe.success:
            error = InvalidResultError(probe.error)
            error.variables = list(result.variables)
            self.last_error = str(error)
            log(f"formula rejected: {self.last_error}")
            return ParseResult(None, error, result.variables)

        engine = VectorFieldEngine(dim, result.evaluator, self._bounds_for(dim))
        engine.set_parameters(self.parameters)

        self.engine = engine
        self.dimension = dim
        self.formula = result.evaluator.expression
        self.variables = list(result.variables)
        self.last_error = None
        log(f"loaded {dim}D field {self.formula} (variables: {', '.join(self.variables)})")

        if self.mode is None:
            self.mode = self._new_mode(self.mode_kind)
            self.mode.render()
        else:
            self.mode.set_field(engine)
            if self.mode.geometry is None:
                self.mode.render()
        return result

    def load_preset(self, name: str) -> ParseResult:
        """Load a named preset formula together with its dimension."""
        formula, dimension = get_preset(name)
        return self.load_formula(formula, dimension)

    def set_parameters(self, bindings: Mapping[str, float]) -> Optional[Geometry]:
        """Replace the parameter bindings and refresh the visualization."""
        self.parameters = {str(k): float(v) for k, v in bindings.items()}
        if self.engine is None:
            return None
        self.engine.set_parameters(self.parameters)
        return self._rerender()

    def set_bounds(self, bounds) -> Optional[Geometry]:
        """Replace the domain box and refresh the visualization."""
        new_bounds = Bounds.from_any(bounds)
        if self.engine is None:
            self._bounds = new_bounds
            return None
        self.engine.set_bounds(new_bounds)
        self._bounds = new_bounds
        return self._rerender()

    def get_bounds(self) -> Bounds:
        return self.engine.get_bounds() if self.engine is not None else self._bounds_for(self.dimension)

    # ---------- Visualization ----------

    def _new_mode(self, kind: ModeKind) -> VisualizationMode:
        config = DEFAULT_CONFIGS[kind].merged(self.style)
        return VisualizationMode(kind, self.engine, config=config, rng_seed=self.rng_seed)

    def _rerender(self) -> Optional[Geometry]:
        if self.mode is None or self.mode.geometry is None:
            return None
        return self.mode.render()

    def set_mode(self, mode: Union[ModeKind, str]) -> Optional[Geometry]:
        """Switch visualization mode; the new mode renders at once when a field is loaded."""
        kind = ModeKind.parse(mode)
        if self.mode is not None:
            self.mode.dispose()
            self.mode = None
        self.mode_kind = kind
        if self.engine is None:
            return None
        self.mode = self._new_mode(kind)
        return self.mode.render()

    def update_style(self, updates: Optional[Mapping[str, Any]] = None, **kwargs) -> Optional[Geometry]:
        """
        Apply style overrides to the current mode and remember them.

        Unrecognized keys are ignored with a warning.
        """
        changes = dict(updates or {})
        changes.update(kwargs)

        if self.mode is not None:
            geometry = self.mode.update_style(changes)
        else:
            DEFAULT_CONFIGS[self.mode_kind].merged(changes)
            geometry = None

        known = VisualizationConfig.keys()
        self.style.update({k: v for k, v in changes.items() if k in known})
        return geometry

    def render(self) -> Geometry:
        """Re-render the current mode from scratch."""
        if self.engine is None:
            raise RuntimeError("No field loaded")
        if self.mode is None:
            self.mode = self._new_mode(self.mode_kind)
        return self.mode.render()

    def tick(self, dt: float) -> Optional[Geometry]:
        """Advance animated modes by ``dt`` seconds."""
        if self.mode is None:
            return None
        return self.mode.update(dt)

    @property
    def geometry(self) -> Optional[Geometry]:
        return None if self.mode is None else self.mode.geometry

    def close(self) -> None:
        """Dispose the current mode."""
        if self.mode is not None:
            self.mode.dispose()
            self.mode = None
