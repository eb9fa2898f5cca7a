"""
Tests for layer_builder.surface: colour parsing, bounds-checked access and
alpha compositing.
"""

import sys

import numpy as np

from helpers import RED, GREEN, BLUE, BLACK, CLEAR, solid, run_tests

from layer_builder.errors import OutOfBoundsError, DimensionMismatchError
from layer_builder.surface import Color, PixelSurface


# ---------------------------------------------------------------------------
# Color
# ---------------------------------------------------------------------------

def test_color_hex_forms():
    assert Color.from_hex('#FF0000') == Color(1.0, 0.0, 0.0, 1.0)
    assert Color.from_hex('0xff0000') == RED
    assert Color.from_hex('ff0000ff') == RED
    assert Color.from_hex('  #FF0000  ') == RED
    half = Color.from_hex('#00FF0080')
    assert half.a == 128 / 255.0
    assert half.g == 1.0


def test_color_invalid_hex():
    for text in ('#12345', 'zzzzzz', '#1234567', '', None):
        try:
            Color.from_hex(text)
        except ValueError:
            continue
        raise AssertionError("{!r} should not parse".format(text))


def test_color_hex_round_trip():
    assert Color.from_hex('#12345678').to_hex() == '#12345678'
    assert RED.to_hex() == '#FF0000FF'
    assert Color.from_bytes((18, 52, 86)).to_bytes() == (18, 52, 86, 255)


def test_color_interpolate_clamps():
    white = Color(1.0, 1.0, 1.0, 1.0)
    assert Color.interpolate(BLACK, white, 2.0) == white
    assert Color.interpolate(BLACK, white, -1.0) == BLACK
    mid = Color.interpolate(BLACK, white, 0.5)
    assert mid.r == 0.5 and mid.a == 1.0


def test_color_is_hashable_and_immutable():
    assert len(set([RED, Color.from_hex('#FF0000'), GREEN])) == 2
    try:
        RED.r = 0.5
    except AttributeError:
        return
    raise AssertionError("Color should be immutable")


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------

def test_new_surface_is_transparent():
    surface = PixelSurface.new(3, 2)
    assert surface.size == (3, 2)
    assert surface.colors() == set([CLEAR])


def test_get_set():
    surface = PixelSurface(4, 3)
    surface.set(3, 2, RED)
    assert surface.get(3, 2) == RED
    assert surface.get(0, 0) == CLEAR


def test_out_of_bounds_access_raises():
    surface = PixelSurface(4, 3)
    for x, y in ((4, 0), (0, 3), (-1, 0), (0, -1)):
        try:
            surface.get(x, y)
        except OutOfBoundsError as e:
            assert isinstance(e, IndexError)
        else:
            raise AssertionError("get({}, {}) should raise".format(x, y))
        try:
            surface.set(x, y, RED)
        except OutOfBoundsError:
            pass
        else:
            raise AssertionError("set({}, {}) should raise".format(x, y))


def test_neighbours4_order_and_clipping():
    surface = PixelSurface(3, 3)
    surface.set(1, 0, RED)
    surface.set(0, 1, GREEN)
    assert surface.neighbours4(0, 0) == [((1, 0), RED), ((0, 1), GREEN)]
    coords = [c for c, _ in surface.neighbours4(1, 1)]
    assert coords == [(0, 1), (2, 1), (1, 0), (1, 2)]


def test_fill_returns_copy():
    surface = PixelSurface(2, 2)
    filled = surface.fill(BLUE)
    assert filled.colors() == set([BLUE])
    assert surface.colors() == set([CLEAR])


def test_matches_and_paint():
    surface = solid(3, 1, RED)
    surface.set(1, 0, GREEN)
    mask = surface.matches(GREEN)
    assert mask.tolist() == [[False, True, False]]
    surface.paint(~mask, BLUE)
    assert surface.get(0, 0) == BLUE and surface.get(1, 0) == GREEN


# ---------------------------------------------------------------------------
# Compositing
# ---------------------------------------------------------------------------

def test_overlay_transparent_is_identity():
    surface = solid(4, 4, Color.from_hex('#336699CC'))
    surface.set(2, 1, RED)
    before = surface.copy()
    surface.overlay(PixelSurface(4, 4))
    assert surface == before


def test_overlay_opaque_replaces():
    surface = solid(2, 2, Color.from_hex('#33669980'))
    surface.overlay(solid(2, 2, GREEN))
    assert surface.colors() == set([GREEN])


def test_overlay_blends_alpha():
    surface = solid(1, 1, BLACK)
    surface.overlay(solid(1, 1, Color(1.0, 1.0, 1.0, 0.5)))
    r, g, b, a = surface.get(0, 0)
    assert r == 0.5 and a == 1.0


def test_overlay_size_mismatch():
    surface = solid(2, 2, RED)
    top = solid(3, 2, GREEN)
    try:
        surface.overlay(top)
    except DimensionMismatchError as e:
        assert isinstance(e, ValueError)
    else:
        raise AssertionError("overlay should reject a 3x2 surface")
    assert surface.colors() == set([RED])
    assert top.colors() == set([GREEN])


def test_stamp_clips_at_edges():
    glyph = solid(2, 2, RED)

    surface = PixelSurface(4, 4).stamp((3, 3), glyph)
    assert surface.get(3, 3) == RED
    assert int(surface.matches(RED).sum()) == 1

    surface = PixelSurface(4, 4).stamp((-1, -1), glyph)
    assert surface.get(0, 0) == RED
    assert int(surface.matches(RED).sum()) == 1

    surface = PixelSurface(4, 4).stamp((10, 10), glyph)
    assert surface.colors() == set([CLEAR])


def test_from_array_rgb_is_opaque():
    surface = PixelSurface.from_array(np.zeros((2, 3, 3)))
    assert surface.size == (3, 2)
    assert surface.colors() == set([BLACK])


def main():
    return run_tests("layer_builder.surface", globals())


if __name__ == '__main__':
    sys.exit(main())
