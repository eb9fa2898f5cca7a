"""
Tanaka (illuminated contour) relief.

Contour cells are shaded like a hillshade so that lines on slopes facing
the light come out bright and lines on the far side come out dark.  Every
other cell, and every contour cell on the border of the grid, takes the
background colour.
"""

import logging

from .. import config as DEFAULTS
from ..fields import require_int, require_number, require_color, require_direction
from ..surface import PixelSurface
from .heightmap import prepare
from .contour import contour_mask
from .shaded import shade

log = logging.getLogger(__name__)


class TanakaSettings(object):
    """Contour settings without a line colour, plus the hillshade colours."""

    __slots__ = ('line_divisions', 'cleaning_factor', 'light_direction',
                 'background_color', 'light_color', 'dark_color', 'smoothing')

    def __init__(self, line_divisions=DEFAULTS.DEFAULT_LINE_DIVISIONS,
                 cleaning_factor=DEFAULTS.DEFAULT_CLEANING_FACTOR,
                 light_direction=DEFAULTS.DEFAULT_LIGHT_DIRECTION,
                 background_color=DEFAULTS.DEFAULT_BACKGROUND_COLOR,
                 light_color=DEFAULTS.DEFAULT_LIGHT_COLOR,
                 dark_color=DEFAULTS.DEFAULT_DARK_COLOR,
                 smoothing=DEFAULTS.DEFAULT_SMOOTHING):
        self.line_divisions = require_int(
            'line_divisions', line_divisions, 1, DEFAULTS.HEIGHT_MAX)
        self.cleaning_factor = require_int(
            'cleaning_factor', cleaning_factor, 0, DEFAULTS.MAX_CLEANING_FACTOR)
        self.light_direction = require_direction('light_direction', light_direction)
        self.background_color = require_color('background_color', background_color)
        self.light_color = require_color('light_color', light_color)
        self.dark_color = require_color('dark_color', dark_color)
        self.smoothing = require_number('smoothing', smoothing, 0.0,
                                        DEFAULTS.MAX_SMOOTHING)


def generate_tanaka_layer(heightmap, settings=None):
    """
    Render tanaka relief for *heightmap*.

    Args:
        heightmap: :class:`HeightMap`.
        settings:  :class:`TanakaSettings` (defaults when None).

    Returns:
        New :class:`PixelSurface` of the heightmap's size.
    """
    if settings is None:
        settings = TanakaSettings()

    source = prepare(heightmap, settings.smoothing)
    lines = contour_mask(source, settings.line_divisions, settings.cleaning_factor)
    nx, ny, defined = source.normals()
    lit = lines & defined

    layer = PixelSurface(heightmap.width, heightmap.height).fill(settings.background_color)
    colors = shade(nx, ny, settings.light_direction, settings.background_color,
                   settings.light_color, settings.dark_color)
    layer.pixels[lit] = colors[lit]

    log.info("Generated tanaka layer %dx%d (%d lit contour cells)",
             heightmap.width, heightmap.height, int(lit.sum()))
    return layer
