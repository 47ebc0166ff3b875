"""Tests for FieldSession."""

import numpy as np
import pytest

from fieldtrace.expression import ComponentCountError, InvalidResultError, InvalidVariableError
from fieldtrace.fields import Bounds
from fieldtrace.session import FieldSession
from fieldtrace.visualization import ModeKind, ModeState


def test_load_formula_activates_field_and_renders():
    session = FieldSession()
    result = session.load_formula("[-y, x]")
    assert result.ok
    assert session.formula == "[-y, x]"
    assert session.variables == ["x", "y"]
    assert session.last_error is None
    assert session.engine.evaluate_at({"x": 1.0, "y": 0.0}) == (0.0, 1.0)
    assert session.mode.kind is ModeKind.ARROW
    assert session.mode.state is ModeState.RENDERED
    assert session.geometry.n_points == 15 * 15 - 1


def test_failed_compile_keeps_previous_field():
    session = FieldSession()
    session.load_formula("[-y, x]")
    engine = session.engine
    geometry = session.geometry

    result = session.load_formula("[x, y, z]")
    assert isinstance(result.error, ComponentCountError)
    assert session.last_error == "Expected 2 components, got 3"
    assert session.engine is engine
    assert session.geometry is geometry
    assert session.formula == "[-y, x]"

    result = session.load_formula("[x + w, y]")
    assert isinstance(result.error, InvalidVariableError)
    assert session.engine is engine


def test_probe_failure_keeps_previous_field():
    session = FieldSession()
    session.load_formula("[-y, x]")
    engine = session.engine

    result = session.load_formula("[sqrt(-1 - x^2), y]")
    assert not result.ok
    assert result.evaluator is None
    assert isinstance(result.error, InvalidResultError)
    assert result.message == "Function produces invalid results"
    assert result.variables == ["x", "y"]
    assert session.engine is engine


def test_failure_without_previous_field():
    session = FieldSession()
    result = session.load_formula("-y, x")
    assert not result.ok
    assert session.engine is None
    assert session.geometry is None
    with pytest.raises(RuntimeError):
        session.render()


def test_dimension_switch_uses_default_bounds():
    session = FieldSession(bounds=[[-1, -1], [1, 1]])
    session.load_formula("[-y, x]")
    assert session.get_bounds() == Bounds((-1, -1), (1, 1))

    session.load_formula("[x, y, z]", dimension=3)
    assert session.dimension == 3
    assert session.get_bounds() == Bounds.default(3)


def test_load_preset():
    session = FieldSession()
    result = session.load_preset("saddle-2d")
    assert result.ok
    assert session.engine.evaluate_at({"x": 1.0, "y": 2.0}) == (1.0, -2.0)
    with pytest.raises(KeyError):
        session.load_preset("missing")


def test_set_mode_renders_new_mode_and_disposes_old():
    session = FieldSession()
    session.load_formula("[-y, x]")
    old = session.mode

    g = session.set_mode("heatmap")
    assert old.state is ModeState.DISPOSED
    assert session.mode.kind is ModeKind.HEATMAP
    assert g.n_points == 900


def test_set_mode_before_formula():
    session = FieldSession()
    assert session.set_mode("streamlines") is None
    session.load_formula("[-y, x]")
    assert session.mode.kind is ModeKind.STREAMLINE
    assert len(session.geometry.lines) == 12


def test_style_persists_across_modes():
    session = FieldSession(style={"color": "#ff0000"})
    session.load_formula("[-y, x]")
    assert session.geometry.color == 0xFF0000

    session.update_style(scale=2.0)
    session.set_mode("streamline")
    assert session.mode.config.color == 0xFF0000
    assert session.mode.config.scale == 2.0
    # Untouched keys keep the mode's own defaults
    assert session.mode.config.density == 1.5


def test_update_style_ignores_unknown_keys():
    session = FieldSession()
    session.load_formula("[-y, x]")
    with pytest.warns(UserWarning):
        session.update_style({"wireframe": True})
    assert "wireframe" not in session.style


def test_update_style_validates_without_mode():
    session = FieldSession()
    with pytest.raises(ValueError):
        session.update_style(opacity=2.0)


def test_parameters_are_kept_and_forwarded():
    session = FieldSession()
    session.set_parameters({"k": 2})
    session.load_formula("[-y, x]")
    assert dict(session.engine.parameters) == {"k": 2.0}

    session.set_parameters({"k": 3})
    assert dict(session.engine.parameters) == {"k": 3.0}


def test_set_bounds_rerenders():
    session = FieldSession()
    session.load_formula("[-y, x]")
    g = session.set_bounds([[0, 0], [1, 1]])
    assert session.engine.get_bounds() == Bounds((0, 0), (1, 1))
    assert np.all(g.points[:, :2] >= 0.0)


def test_tick_advances_particles():
    session = FieldSession(mode="particle", rng_seed=4)
    assert session.tick(0.1) is None
    session.load_formula("[-y, x]")
    before = session.geometry.points.copy()
    after = session.tick(1.0)
    assert not np.array_equal(before, after.points)


def test_context_manager_disposes_mode():
    with FieldSession() as session:
        session.load_formula("[-y, x]")
        mode = session.mode
    assert mode.state is ModeState.DISPOSED
    assert session.mode is None


def test_bad_constructor_arguments():
    with pytest.raises(ValueError):
        FieldSession(dimension=4)
    with pytest.raises(ValueError):
        FieldSession(mode="volume")


def test_rejected_bounds_leave_session_bounds_unchanged():
    session = FieldSession(dimension=3)
    session.load_formula("[x, y, z]")
    with pytest.raises(ValueError):
        session.set_bounds([[0, 0], [1, 1]])
    assert session.get_bounds() == Bounds.default(3)

    # A later 2D field must not pick up the rejected box
    session.load_formula("[-y, x]", dimension=2)
    assert session.get_bounds() == Bounds.default(2)
