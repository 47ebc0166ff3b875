"""Tests for arrow, streamline and heatmap sampling."""

import math

import numpy as np
import pytest

from fieldtrace.expression import compile_field
from fieldtrace.fields import Bounds, VectorFieldEngine
from fieldtrace.tracking import (
    arrow_layout,
    heatmap_samples,
    magnitude_colors,
    marker_indices,
    path_to_array,
    plane_grid,
    positions_to_dicts,
    random_seeds,
    streamline_seeds,
    trace_streamlines,
)


def make_engine(formula="[-y, x]", dimension=2, bounds=None):
    return VectorFieldEngine(dimension, compile_field(formula, dimension), bounds)


# ---------- Seeding ----------

def test_plane_grid_2d_includes_endpoints():
    grid = plane_grid(Bounds((-1, 0), (1, 2)), 3)
    assert grid.shape == (9, 2)
    np.testing.assert_allclose(grid[0], [-1.0, 0.0])
    np.testing.assert_allclose(grid[-1], [1.0, 2.0])
    # x-major ordering
    np.testing.assert_allclose(grid[1], [-1.0, 1.0])


def test_plane_grid_3d_is_z_zero_slice():
    grid = plane_grid(Bounds.default(3), 4)
    assert grid.shape == (16, 3)
    assert np.all(grid[:, 2] == 0.0)


def test_plane_grid_empty_for_zero_resolution():
    assert plane_grid(Bounds.default(2), 0).shape == (0, 2)


def test_streamline_seeds_cell_centres():
    seeds = streamline_seeds(Bounds.default(2), 8)
    assert seeds.shape == (8, 2)
    third = 20.0 / 3.0
    np.testing.assert_allclose(seeds[0], [-third, -third])
    np.testing.assert_allclose(seeds[4], [0.0, 0.0], atol=1e-12)
    # The ninth cell centre is truncated
    assert not np.any(np.all(np.isclose(seeds, [third, third]), axis=1))


def test_streamline_seeds_3d_and_edge_counts():
    seeds = streamline_seeds(Bounds.default(3), 4)
    assert seeds.shape == (4, 3)
    assert np.all(seeds[:, 2] == 0.0)
    np.testing.assert_allclose(seeds[0], [-2.5, -2.5, 0.0])
    assert streamline_seeds(Bounds.default(2), 0).shape == (0, 2)
    assert streamline_seeds(Bounds.default(2), 1).tolist() == [[0.0, 0.0]]


def test_random_seeds_inside_bounds_and_reproducible():
    b = Bounds((0, -1, 2), (1, 1, 3))
    a = random_seeds(200, b, rng_seed=7)
    assert a.shape == (200, 3)
    assert np.all(a >= np.array(b.min)) and np.all(a <= np.array(b.max))
    np.testing.assert_array_equal(a, random_seeds(200, b, rng_seed=7))


def test_positions_to_dicts():
    assert positions_to_dicts(np.array([[1.0, 2.0]])) == [{"x": 1.0, "y": 2.0}]


# ---------- Arrows ----------

def test_arrow_lengths_bounded_and_normalized():
    engine = make_engine()
    glyphs = arrow_layout(engine, base_resolution=15, density=1.0, scale=2.0)
    # 15 x 15 grid; the origin has zero magnitude and is skipped
    assert len(glyphs) == 15 * 15 - 1
    lengths = [g.length for g in glyphs]
    assert max(lengths) == 2.0 * 0.8
    assert all(length <= 2.0 * 0.8 for length in lengths)

    strongest = max(glyphs, key=lambda g: g.magnitude)
    assert strongest.magnitude == pytest.approx(math.hypot(10.0, 10.0))
    assert strongest.length == 2.0 * 0.8


def test_arrow_directions_are_unit_vectors():
    glyphs = arrow_layout(make_engine(), base_resolution=5)
    for g in glyphs:
        assert math.hypot(*g.direction) == pytest.approx(1.0)
        assert g.origin[2] == 0.0


def test_arrow_density_scales_resolution():
    engine = make_engine("[1, 0]")
    assert len(arrow_layout(engine, base_resolution=15, density=2.0)) == 30 * 30
    assert len(arrow_layout(engine, base_resolution=15, density=0.5)) == 8 * 8
    assert arrow_layout(engine, density=0.0) == []


def test_arrows_skip_invalid_and_tiny_samples():
    engine = make_engine("[1/x, 0]", bounds=Bounds((-1, -1), (1, 1)))
    glyphs = arrow_layout(engine, base_resolution=3)
    # The x = 0 column is infinite
    assert len(glyphs) == 6

    zero = make_engine("[0, 0]")
    assert arrow_layout(zero, base_resolution=4) == []


def test_arrows_3d_field_sample_z_zero_plane():
    engine = make_engine("[x, y, 1]", 3)
    glyphs = arrow_layout(engine, base_resolution=4)
    assert len(glyphs) == 16
    assert all(g.origin[2] == 0.0 for g in glyphs)
    assert all(len(g.direction) == 3 for g in glyphs)


# ---------- Streamlines ----------

def test_trace_streamlines_drops_short_paths():
    engine = make_engine("[1/x, 1]", bounds=Bounds((-1, -1), (1, 1)))
    seeds = [{"x": 0.0, "y": 0.0}, {"x": 0.5, "y": 0.0}]
    paths = trace_streamlines(engine, seeds, steps=5, dt=0.01)
    assert len(paths) == 1
    assert paths[0][0] == {"x": 0.5, "y": 0.0}


def test_trace_streamlines_from_array_seeds():
    engine = make_engine()
    seeds = streamline_seeds(engine.get_bounds(), 4)
    paths = trace_streamlines(engine, seeds, steps=50, dt=0.2)
    assert len(paths) == 4
    assert all(len(p) == 51 for p in paths)


def test_marker_indices():
    assert list(marker_indices(51)) == list(range(0, 51, 2))
    assert len(marker_indices(100)) == 20
    assert list(marker_indices(3)) == [0, 2]


def test_path_to_array_pads_z():
    arr = path_to_array(({"x": 1.0, "y": 2.0}, {"x": 3.0, "y": 4.0}))
    assert arr.dtype == np.float32
    np.testing.assert_array_equal(arr, [[1, 2, 0], [3, 4, 0]])


# ---------- Heatmap ----------

def test_heatmap_normalizes_and_colours():
    engine = make_engine()
    samples = heatmap_samples(engine, base_resolution=30)
    assert len(samples) == 900
    assert samples.normalized.min() == pytest.approx(0.0)
    assert samples.normalized.max() == pytest.approx(1.0)
    assert samples.colors.shape == (900, 3)

    low = np.argmin(samples.magnitudes)
    high = np.argmax(samples.magnitudes)
    np.testing.assert_allclose(samples.colors[low], [0.0, 0.0, 1.0], atol=1e-6)
    np.testing.assert_allclose(samples.colors[high], [1.0, 0.0, 0.0], atol=1e-6)


def test_heatmap_constant_field_has_zero_range():
    samples = heatmap_samples(make_engine("[1, 1]"), base_resolution=5)
    assert len(samples) == 25
    np.testing.assert_array_equal(samples.normalized, np.zeros(25))


def test_heatmap_omits_invalid_samples():
    engine = make_engine("[1/x, 0]", bounds=Bounds((-1, -1), (1, 1)))
    samples = heatmap_samples(engine, base_resolution=3)
    assert len(samples) == 6
    assert samples.positions.shape == (6, 2)


def test_magnitude_colors_midpoint_is_green():
    rgb = magnitude_colors(np.array([0.5]))
    np.testing.assert_allclose(rgb[0], [0.0, 1.0, 0.0], atol=1e-6)


# ---------- Large magnitudes ----------

def test_arrow_lengths_with_huge_but_finite_vectors():
    engine = make_engine("[1e200*x, 1e200*y]")
    glyphs = arrow_layout(engine, base_resolution=3)
    assert len(glyphs) == 8
    assert all(math.isfinite(g.length) and math.isfinite(g.magnitude) for g in glyphs)
    assert max(g.length for g in glyphs) == 0.8
    strongest = max(glyphs, key=lambda g: g.magnitude)
    assert strongest.magnitude == pytest.approx(math.sqrt(2.0) * 1e201)
    assert math.hypot(*strongest.direction) == pytest.approx(1.0)


def test_heatmap_with_huge_but_finite_vectors():
    samples = heatmap_samples(make_engine("[1e200*x, 1e200*y]"), base_resolution=3)
    assert len(samples) == 9
    assert np.all(np.isfinite(samples.magnitudes))
    assert samples.normalized.max() == pytest.approx(1.0)
