"""
Tests for layer_builder.topography: heightmaps, contour extraction,
hillshade and tanaka relief.
"""

import sys
import math

import numpy as np

from helpers import RED, WHITE, BLACK, CLEAR, run_tests

from layer_builder.errors import OutOfBoundsError, ConfigurationError
from layer_builder.surface import Color
from layer_builder.topography import (HeightMap, prepare, ContourSettings,
                                      ShadedSettings, TanakaSettings, contour_mask,
                                      clean_contours, generate_contour_layer,
                                      generate_shaded_layer, generate_tanaka_layer)


def _step_heightmap(width=5, height=5, low=0, high=5000, edge=2):
    """Columns left of *edge* at *low*, the rest at *high*."""
    samples = np.full((height, width), low, dtype=np.uint16)
    samples[:, edge:] = high
    return HeightMap.from_array(samples)


def _ramp_heightmap(width=5, height=5, step=100):
    """Elevation rising by *step* per column."""
    samples = np.tile(np.arange(width) * step, (height, 1))
    return HeightMap.from_array(samples)


# ---------------------------------------------------------------------------
# HeightMap
# ---------------------------------------------------------------------------

def test_heightmap_access():
    heightmap = HeightMap.new(3, 2)
    heightmap.set_height_at(2, 1, 65535)
    assert heightmap.height_at(2, 1) == 65535
    assert heightmap.height_at(0, 0) == 0
    for x, y in ((3, 0), (-1, 0), (0, 2)):
        try:
            heightmap.height_at(x, y)
        except OutOfBoundsError:
            continue
        raise AssertionError("({}, {}) should be out of bounds".format(x, y))


def test_heightmap_rejects_out_of_range_values():
    try:
        HeightMap.from_array([[0, 70000]])
    except ValueError:
        pass
    else:
        raise AssertionError("70000 is not a 16-bit elevation")
    try:
        HeightMap.new(1, 1).set_height_at(0, 0, -1)
    except ValueError:
        return
    raise AssertionError("-1 is not a 16-bit elevation")


def test_heightmap_neighbours():
    heightmap = HeightMap.from_array([[1, 2, 3], [4, 5, 6]])
    assert heightmap.orthogonal_neighbours(0, 0) == [((1, 0), 2), ((0, 1), 4)]
    assert heightmap.diagonal_neighbours(0, 0) == [((1, 1), 5)]
    assert len(heightmap.neighbours(1, 0)) == 5


def test_quantized_is_a_copy():
    heightmap = HeightMap.from_array([[0, 2046, 2047, 4094, 65535]])
    bands = heightmap.quantized(32)
    assert bands.samples.tolist() == [[0, 0, 1, 2, 32]]
    assert heightmap.samples.tolist() == [[0, 2046, 2047, 4094, 65535]]


def test_quantized_rejects_bad_divisions():
    for n in (0, 65536):
        try:
            HeightMap.new(1, 1).quantized(n)
        except ValueError:
            continue
        raise AssertionError("{} divisions should be rejected".format(n))


def test_surface_normal():
    heightmap = _ramp_heightmap()
    assert heightmap.surface_normal(0, 2) is None
    assert heightmap.surface_normal(2, 4) is None
    assert heightmap.surface_normal(2, 2) == (-1.0, 0.0)
    assert HeightMap.new(3, 3).surface_normal(1, 1) == (0.0, 0.0)


def test_normals_match_surface_normal():
    samples = np.array([[0, 10, 30, 60],
                        [5, 40, 20, 10],
                        [9, 15, 70, 3],
                        [1, 2, 3, 4]])
    heightmap = HeightMap.from_array(samples)
    nx, ny, defined = heightmap.normals()
    for y in range(4):
        for x in range(4):
            normal = heightmap.surface_normal(x, y)
            if normal is None:
                assert not defined[y, x]
            else:
                assert defined[y, x]
                assert abs(nx[y, x] - normal[0]) < 1e-12
                assert abs(ny[y, x] - normal[1]) < 1e-12


def test_prepare_without_smoothing_returns_same_map():
    heightmap = _step_heightmap()
    assert prepare(heightmap, 0.0) is heightmap
    smoothed = prepare(heightmap, 1.0)
    assert smoothed is not heightmap
    assert smoothed.size == heightmap.size
    assert heightmap.samples.tolist() == _step_heightmap().samples.tolist()


def test_smoothing_blurs_across_step():
    smoothed = prepare(_step_heightmap(), 1.0)
    for y in range(5):
        for x in (1, 2):
            assert 0 < smoothed.height_at(x, y) < 5000
    assert smoothed.height_at(1, 2) < smoothed.height_at(2, 2)


def test_smoothing_keeps_constant_field():
    flat = HeightMap.from_array(np.full((6, 4), 3000, dtype=np.uint16))
    assert prepare(flat, 2.0).samples.tolist() == flat.samples.tolist()


# ---------------------------------------------------------------------------
# Contours
# ---------------------------------------------------------------------------

def test_contour_centre_above_neighbours():
    # centre in band 2, every neighbour in band 1 (band size 2047)
    samples = np.full((3, 3), 3000, dtype=np.uint16)
    samples[1, 1] = 5000
    heightmap = HeightMap.from_array(samples)

    mask = contour_mask(heightmap, 32, 0)
    expected = np.zeros((3, 3), dtype=bool)
    expected[1, 1] = True
    assert np.array_equal(mask, expected)

    layer = generate_contour_layer(heightmap, ContourSettings(cleaning_factor=0))
    assert layer.get(1, 1) == RED
    assert layer.get(0, 1) == CLEAR
    assert layer.get(1, 0) == CLEAR


def test_contour_isolated_cell_is_cleaned():
    samples = np.full((3, 3), 3000, dtype=np.uint16)
    samples[1, 1] = 5000
    layer = generate_contour_layer(HeightMap.from_array(samples), ContourSettings())
    assert layer.colors() == set([CLEAR])


def test_contour_follows_uphill_side_of_step():
    mask = contour_mask(_step_heightmap(), 32, 0)
    assert mask[:, 2].all()
    assert mask.sum() == 5


def test_cleaning_keeps_lines_and_borders():
    lines = contour_mask(_step_heightmap(), 32, 0)
    assert np.array_equal(clean_contours(lines, 2), lines)

    cleaned = clean_contours(lines, 3)
    assert cleaned[:, 2].tolist() == [True, False, False, False, True]
    assert lines[:, 2].all()


def test_cleaning_removes_short_stroke():
    # each removal is visible to the cells scanned after it
    lines = np.zeros((3, 5), dtype=bool)
    lines[1, 1:4] = True
    cleaned = clean_contours(lines, 2)
    assert not cleaned.any()
    assert lines[1].tolist() == [False, True, True, True, False]


def test_cleaning_scans_columns_first():
    # (x, y): (1, 2) - (2, 1) - (3, 1) - (3, 0), the last on the border.
    # Column 1 goes first, and its removal starves the rest of the chain.
    lines = np.zeros((5, 5), dtype=bool)
    for x, y in ((1, 2), (2, 1), (3, 1), (3, 0)):
        lines[y, x] = True
    cleaned = clean_contours(lines, 2)
    expected = np.zeros((5, 5), dtype=bool)
    expected[0, 3] = True
    assert np.array_equal(cleaned, expected)


def test_cleaning_disabled():
    lines = np.zeros((4, 4), dtype=bool)
    lines[1, 1] = True
    assert np.array_equal(clean_contours(lines, 0), lines)


def test_contour_layer_colors():
    settings = ContourSettings(line_divisions=4, line_color='#0000FF',
                               background_color='#FFFFFF', cleaning_factor=0)
    layer = generate_contour_layer(_step_heightmap(high=40000), settings)
    assert layer.get(2, 0) == Color.from_hex('#0000FF')
    assert layer.get(0, 0) == WHITE
    assert layer.get(4, 4) == WHITE


def test_contour_does_not_modify_heightmap():
    heightmap = _step_heightmap()
    generate_contour_layer(heightmap, ContourSettings(smoothing=1.0))
    assert heightmap.samples.tolist() == _step_heightmap().samples.tolist()


def test_contour_settings_validation():
    bad = ({'line_divisions': 0}, {'line_divisions': 65536}, {'cleaning_factor': 9},
           {'smoothing': -1.0}, {'smoothing': 5000}, {'line_color': 'red'},
           {'line_divisions': True})
    for kwargs in bad:
        try:
            ContourSettings(**kwargs)
        except ConfigurationError as e:
            assert e.field == list(kwargs)[0]
            continue
        raise AssertionError("{} should be rejected".format(kwargs))


# ---------------------------------------------------------------------------
# Hillshade
# ---------------------------------------------------------------------------

def test_hillshade_facing_light_and_away():
    heightmap = _ramp_heightmap()

    lit = generate_shaded_layer(heightmap, ShadedSettings(light_direction=(1, 0)))
    assert lit.get(2, 2) == WHITE
    away = generate_shaded_layer(heightmap, ShadedSettings(light_direction=(-1, 0)))
    assert away.get(2, 2) == BLACK


def test_hillshade_borders_keep_background():
    layer = generate_shaded_layer(_ramp_heightmap(),
                                  ShadedSettings(background_color='#102030'))
    background = Color.from_hex('#102030')
    for x in range(5):
        assert layer.get(x, 0) == background
        assert layer.get(x, 4) == background
    for y in range(5):
        assert layer.get(0, y) == background
        assert layer.get(4, y) == background


def test_hillshade_flat_is_background():
    layer = generate_shaded_layer(HeightMap.new(4, 4))
    assert layer.colors() == set([CLEAR])


def test_hillshade_partial_light():
    layer = generate_shaded_layer(_ramp_heightmap())
    expected = Color.interpolate(CLEAR, WHITE, 1.0 / math.hypot(1.0, 1.0))
    assert np.allclose(tuple(layer.get(2, 2)), tuple(expected))


def test_shaded_settings_validation():
    try:
        ShadedSettings(light_direction=(0, 0))
    except ConfigurationError as e:
        assert e.field == 'light_direction'
    else:
        raise AssertionError("a zero light direction should be rejected")
    settings = ShadedSettings(light_direction=(3, 4))
    assert settings.light_direction == (0.6, 0.8)


# ---------------------------------------------------------------------------
# Tanaka
# ---------------------------------------------------------------------------

def test_tanaka_lights_contour_cells_only():
    settings = TanakaSettings(light_direction=(1, 0), cleaning_factor=0)
    layer = generate_tanaka_layer(_step_heightmap(), settings)
    for y in (1, 2, 3):
        assert layer.get(2, y) == WHITE
    # contour cells on the border have no normal
    assert layer.get(2, 0) == CLEAR
    assert layer.get(2, 4) == CLEAR
    # steep but not on a contour
    assert layer.get(1, 2) == CLEAR
    assert int(layer.matches(WHITE).sum()) == 3


def test_tanaka_dark_side():
    settings = TanakaSettings(light_direction=(-1, 0), cleaning_factor=0,
                              dark_color='#000000')
    layer = generate_tanaka_layer(_step_heightmap(), settings)
    assert layer.get(2, 2) == BLACK


def test_tanaka_is_pure():
    heightmap = _step_heightmap()
    first = generate_tanaka_layer(heightmap)
    second = generate_tanaka_layer(heightmap)
    assert first == second
    assert heightmap.samples.tolist() == _step_heightmap().samples.tolist()


def main():
    return run_tests("layer_builder.topography", globals())


if __name__ == '__main__':
    sys.exit(main())
