"""Tests for visualization modes, style configuration and geometry."""

import math

import numpy as np
import pytest

from fieldtrace.expression import compile_field
from fieldtrace.fields import VectorFieldEngine
from fieldtrace.visualization import (
    DEFAULT_CONFIGS,
    DEFAULT_COLOR,
    Geometry,
    ModeKind,
    ModeState,
    VisualizationConfig,
    VisualizationMode,
    parse_color,
)


def make_engine(formula="[-y, x]", dimension=2, bounds=None):
    return VectorFieldEngine(dimension, compile_field(formula, dimension), bounds)


# ---------- Style configuration ----------

@pytest.mark.parametrize(
    "value, expected",
    [
        (0xFF8800, 0xFF8800),
        ("#ff8800", 0xFF8800),
        ("0xFF8800", 0xFF8800),
        ("00ff00", 0x00FF00),
        ("not-a-colour", DEFAULT_COLOR),
        ("", DEFAULT_COLOR),
        (-1, DEFAULT_COLOR),
        (0x1000000, DEFAULT_COLOR),
        (True, DEFAULT_COLOR),
        (None, DEFAULT_COLOR),
    ],
)
def test_parse_color(value, expected):
    assert parse_color(value) == expected


def test_merged_keeps_missing_keys():
    cfg = VisualizationConfig(color=0x123456, scale=2.0)
    updated = cfg.merged({"density": 3.0})
    assert updated.color == 0x123456
    assert updated.scale == 2.0
    assert updated.density == 3.0
    # Original is immutable
    assert cfg.density == 1.0


def test_merged_ignores_unknown_keys_with_warning():
    cfg = VisualizationConfig()
    with pytest.warns(UserWarning, match="showArrowheads"):
        updated = cfg.merged({"showArrowheads": False, "opacity": 0.5})
    assert updated.opacity == 0.5
    assert not hasattr(updated, "showArrowheads")


def test_invalid_color_keeps_current_colour():
    cfg = VisualizationConfig(color=0xFFFFFF).merged(color="#zzzzzz")
    assert cfg.color == 0xFFFFFF


def test_invalid_color_keeps_mode_default():
    stream = DEFAULT_CONFIGS[ModeKind.STREAMLINE].merged({"color": "nonsense"})
    assert stream.color == 0xFFFFFF
    arrow = DEFAULT_CONFIGS[ModeKind.ARROW].merged({"color": "nonsense"})
    assert arrow.color == DEFAULT_COLOR


def test_invalid_numbers_rejected():
    with pytest.raises(ValueError):
        VisualizationConfig(opacity=1.5)
    with pytest.raises(ValueError):
        VisualizationConfig(scale=-1.0)
    with pytest.raises(ValueError):
        VisualizationConfig().merged(density=math.nan)


def test_color_accessors():
    cfg = VisualizationConfig(color=0xFF0080)
    assert cfg.color_hex == "#ff0080"
    assert cfg.color_rgb == pytest.approx((1.0, 0.0, 128 / 255))
    assert cfg.as_dict()["color"] == 0xFF0080


# ---------- Geometry ----------

def test_geometry_shapes_and_serialization():
    g = Geometry(
        kind="arrow",
        points=[[0, 0, 0], [1, 1, 0]],
        directions=[[1, 0, 0], [0, 1, 0]],
        lines=[np.zeros((3, 3))],
    )
    assert g.points.dtype == np.float32
    assert g.n_points == 2
    assert g.n_objects == 3
    d = g.to_dict()
    assert d["color"] == "#0066ff"
    assert d["lines"][0] == [[0.0, 0.0, 0.0]] * 3


def test_geometry_rejects_mismatched_arrays():
    with pytest.raises(ValueError):
        Geometry(kind="heatmap", points=[[0, 0, 0]], colors=[[1, 0, 0], [0, 1, 0]])
    with pytest.raises(ValueError):
        Geometry(kind="arrow", points=[[0, 0]])


def test_empty_geometry():
    g = Geometry(kind="particle")
    assert g.points.shape == (0, 3)
    assert g.is_empty()


# ---------- Mode kinds ----------

@pytest.mark.parametrize(
    "name, kind",
    [
        ("arrow", ModeKind.ARROW),
        ("arrows", ModeKind.ARROW),
        ("Streamlines", ModeKind.STREAMLINE),
        ("particles", ModeKind.PARTICLE),
        ("heatmap", ModeKind.HEATMAP),
        (ModeKind.HEATMAP, ModeKind.HEATMAP),
    ],
)
def test_mode_kind_parse(name, kind):
    assert ModeKind.parse(name) is kind


def test_unknown_mode_kind():
    with pytest.raises(ValueError, match="Available"):
        ModeKind.parse("volume")


def test_default_configs_per_kind():
    engine = make_engine()
    arrow = VisualizationMode("arrow", engine).default_config()
    assert arrow.color == 0x0066FF and arrow.density == 1.0 and not arrow.animated
    stream = VisualizationMode("streamline", engine).default_config()
    assert stream.color == 0xFFFFFF and stream.density == 1.5
    particle = VisualizationMode("particle", engine).default_config()
    assert particle.opacity == 0.8 and particle.animated
    heat = VisualizationMode("heatmap", engine).default_config()
    assert heat.density == 1.0


# ---------- Rendering ----------

def test_arrow_mode_geometry():
    mode = VisualizationMode("arrow", make_engine(), config={"scale": 2.0})
    g = mode.render()
    assert g.kind == "arrow"
    assert g.n_points == 15 * 15 - 1
    lengths = np.linalg.norm(g.directions, axis=1)
    assert lengths.max() == pytest.approx(1.6)
    assert np.all(lengths <= 1.6 + 1e-6)


def test_streamline_mode_geometry():
    mode = VisualizationMode("streamline", make_engine())
    g = mode.render()
    # ceil(20 * 1.5 * 0.4) = 12 seeds, all valid on the vortex
    assert len(g.lines) == 12
    assert all(line.shape == (51, 3) for line in g.lines)
    # 26 markers per 51-point path
    assert g.n_points == 12 * 26
    assert g.point_size == pytest.approx(0.15)


def test_heatmap_mode_geometry():
    mode = VisualizationMode("heatmap", make_engine())
    g = mode.render()
    assert g.n_points == 900
    assert g.colors.shape == (900, 3)
    assert g.point_size == pytest.approx(0.2)


def test_particle_mode_geometry_and_animation():
    mode = VisualizationMode("particle", make_engine(), rng_seed=5)
    g = mode.render()
    assert g.n_points == 100
    before = g.points.copy()
    g2 = mode.update(1.0)
    assert mode.state is ModeState.RENDERED
    assert g2.n_points == 100
    assert not np.array_equal(before, g2.points)


def test_render_replaces_previous_geometry():
    mode = VisualizationMode("arrow", make_engine())
    first = mode.render()
    second = mode.render()
    assert first is not second
    assert mode.geometry is second


def test_update_is_noop_for_static_modes_and_unrendered():
    arrow = VisualizationMode("arrow", make_engine())
    assert arrow.update(0.1) is None
    g = arrow.render()
    assert arrow.update(0.1) is g

    particle = VisualizationMode("particle", make_engine(), config={"animated": False}, rng_seed=1)
    g = particle.render()
    before = g.points.copy()
    particle.update(1.0)
    np.testing.assert_array_equal(particle.geometry.points, before)


# ---------- Lifecycle ----------

def test_lifecycle_transitions():
    mode = VisualizationMode("particle", make_engine(), rng_seed=0)
    assert mode.state is ModeState.IDLE
    mode.render()
    assert mode.state is ModeState.RENDERED
    mode.update(0.1)
    assert mode.state is ModeState.RENDERED
    mode.clear()
    assert mode.state is ModeState.IDLE
    assert mode.geometry is None
    mode.render()
    mode.dispose()
    assert mode.state is ModeState.DISPOSED
    assert mode.geometry is None


def test_disposed_mode_raises():
    mode = VisualizationMode("arrow", make_engine())
    mode.dispose()
    mode.dispose()
    for call in (mode.render, mode.clear, lambda: mode.update(0.1), lambda: mode.update_style(scale=2.0)):
        with pytest.raises(RuntimeError):
            call()


def test_update_during_failure_returns_to_rendered():
    mode = VisualizationMode("particle", make_engine(), rng_seed=0)
    mode.render()

    class Broken:
        def evaluate_many(self, points, params=None):
            raise RuntimeError("boom")

    mode.engine = Broken()
    with pytest.raises(RuntimeError):
        mode.update(0.1)
    assert mode.state is ModeState.RENDERED


def test_set_field_rerenders():
    mode = VisualizationMode("arrow", make_engine())
    assert mode.set_field(make_engine("[1, 0]")) is None
    assert mode.state is ModeState.IDLE

    mode.render()
    g = mode.set_field(make_engine("[0, 0]"))
    assert mode.state is ModeState.RENDERED
    assert g.n_points == 0


def test_update_style_material_vs_geometry():
    mode = VisualizationMode("arrow", make_engine())
    g = mode.render()
    same = mode.update_style(color="#ff0000", opacity=0.5)
    assert same is g
    assert g.color == 0xFF0000 and g.opacity == 0.5

    denser = mode.update_style(density=2.0)
    assert denser is not g
    # linspace(-10, 10, 30) skips the zero-magnitude origin
    assert denser.n_points == 30 * 30


def test_update_style_before_render_only_updates_config():
    mode = VisualizationMode("heatmap", make_engine())
    assert mode.update_style({"scale": 3.0}) is None
    assert mode.config.scale == 3.0
    assert mode.state is ModeState.IDLE


def test_modes_on_3d_field():
    engine = make_engine("[-y, x, 0.5]", 3)
    for kind in ModeKind:
        g = VisualizationMode(kind, engine, rng_seed=2).render()
        assert g.points.shape[1] == 3
        assert g.n_objects > 0
