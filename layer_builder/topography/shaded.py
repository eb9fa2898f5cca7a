"""
Hillshade layer.

Each interior cell is lit by the dot product of its surface normal with the
light direction.  A cell facing the light (negative dot) blends from the
background towards ``light_color``; a cell facing away blends towards
``dark_color``.  Border cells have no normal and keep the background.
"""

import logging

import numpy as np

from .. import config as DEFAULTS
from ..fields import require_number, require_color, require_direction
from ..surface import PixelSurface
from .heightmap import prepare

log = logging.getLogger(__name__)


class ShadedSettings(object):
    """
    Styling for :func:`generate_shaded_layer`.

    *light_direction* is stored normalised.
    """

    __slots__ = ('light_direction', 'background_color', 'light_color',
                 'dark_color', 'smoothing')

    def __init__(self, light_direction=DEFAULTS.DEFAULT_LIGHT_DIRECTION,
                 background_color=DEFAULTS.DEFAULT_BACKGROUND_COLOR,
                 light_color=DEFAULTS.DEFAULT_LIGHT_COLOR,
                 dark_color=DEFAULTS.DEFAULT_DARK_COLOR,
                 smoothing=DEFAULTS.DEFAULT_SMOOTHING):
        self.light_direction = require_direction('light_direction', light_direction)
        self.background_color = require_color('background_color', background_color)
        self.light_color = require_color('light_color', light_color)
        self.dark_color = require_color('dark_color', dark_color)
        self.smoothing = require_number('smoothing', smoothing, 0.0,
                                        DEFAULTS.MAX_SMOOTHING)


def _lerp(start, end, t):
    """Per-cell ``start * (1 - t) + end * t`` for a (h, w) array *t*."""
    t = np.clip(t, 0.0, 1.0)[..., np.newaxis]
    return np.array(tuple(start)) * (1.0 - t) + np.array(tuple(end)) * t


def shade(nx, ny, light_direction, background, light, dark):
    """
    Colour every cell from its normal components.

    Args:
        nx, ny:          (h, w) normal component arrays.
        light_direction: Unit (x, y) tuple.
        background:      Colour at ``dot == 0``.
        light:           Colour approached as ``dot`` goes to -1.
        dark:            Colour approached as ``dot`` goes to 1.

    Returns:
        ``float64`` pixel array of shape (h, w, 4).
    """
    lx, ly = light_direction
    dot = nx * lx + ny * ly
    lit = _lerp(background, light, -dot)
    unlit = _lerp(background, dark, dot)
    return np.where((dot < 0)[..., np.newaxis], lit, unlit)


def generate_shaded_layer(heightmap, settings=None):
    """
    Render a hillshade of *heightmap*.

    Args:
        heightmap: :class:`HeightMap`.
        settings:  :class:`ShadedSettings` (defaults when None).

    Returns:
        New :class:`PixelSurface` of the heightmap's size.
    """
    if settings is None:
        settings = ShadedSettings()

    source = prepare(heightmap, settings.smoothing)
    nx, ny, defined = source.normals()

    layer = PixelSurface(heightmap.width, heightmap.height).fill(settings.background_color)
    colors = shade(nx, ny, settings.light_direction, settings.background_color,
                   settings.light_color, settings.dark_color)
    layer.pixels[defined] = colors[defined]

    log.info("Generated hillshade layer %dx%d", heightmap.width, heightmap.height)
    return layer
