"""
Contour line layer.

The heightmap is quantized into ``line_divisions`` elevation bands.  A
cell lies on a contour when at least one orthogonal neighbour sits in a
strictly lower band, so each line traces the uphill side of a band
boundary.  An optional single-pass speckle filter then drops contour cells
with too few contour cells among their eight neighbours.
"""

import logging

import numpy as np

from .. import config as DEFAULTS
from ..fields import require_int, require_number, require_color
from ..surface import PixelSurface
from .heightmap import prepare

log = logging.getLogger(__name__)


class ContourSettings(object):
    """
    Styling for :func:`generate_contour_layer`.

    Attributes:
        line_divisions:   Number of bands between 0 and 65535.
        line_color:       Colour of contour cells.
        background_color: Colour of every other cell.
        cleaning_factor:  Minimum contour neighbours a contour cell needs to
                          survive cleaning; 0 disables cleaning.
        smoothing:        Gaussian pre-blur standard deviation; 0 disables it.
    """

    __slots__ = ('line_divisions', 'line_color', 'background_color',
                 'cleaning_factor', 'smoothing')

    def __init__(self, line_divisions=DEFAULTS.DEFAULT_LINE_DIVISIONS,
                 line_color=DEFAULTS.DEFAULT_LINE_COLOR,
                 background_color=DEFAULTS.DEFAULT_BACKGROUND_COLOR,
                 cleaning_factor=DEFAULTS.DEFAULT_CLEANING_FACTOR,
                 smoothing=DEFAULTS.DEFAULT_SMOOTHING):
        self.line_divisions = require_int(
            'line_divisions', line_divisions, 1, DEFAULTS.HEIGHT_MAX)
        self.line_color = require_color('line_color', line_color)
        self.background_color = require_color('background_color', background_color)
        self.cleaning_factor = require_int(
            'cleaning_factor', cleaning_factor, 0, DEFAULTS.MAX_CLEANING_FACTOR)
        self.smoothing = require_number('smoothing', smoothing, 0.0,
                                        DEFAULTS.MAX_SMOOTHING)


# ---------------------------------------------------------------------------
# Contour detection
# ---------------------------------------------------------------------------

def _lower_neighbour(bands):
    """Boolean mask of cells with a strictly lower orthogonal neighbour."""
    b = bands.astype(np.int64)
    lower = np.zeros(b.shape, dtype=bool)
    lower[:, 1:] |= b[:, :-1] < b[:, 1:]
    lower[:, :-1] |= b[:, 1:] < b[:, :-1]
    lower[1:, :] |= b[:-1, :] < b[1:, :]
    lower[:-1, :] |= b[1:, :] < b[:-1, :]
    return lower


def clean_contours(lines, cleaning_factor):
    """
    Drop isolated contour cells.

    A single pass scans the interior cells column by column (``x`` outer,
    ``y`` inner).  A contour cell with fewer than *cleaning_factor* contour
    cells among its eight neighbours is removed, and the removal is seen by
    the cells scanned after it, so a short stroke is removed end to end.
    Cells on the border of the grid are never removed.

    Returns:
        New boolean mask.
    """
    cleaned = lines.copy()
    if cleaning_factor == 0 or lines.shape[0] < 3 or lines.shape[1] < 3:
        return cleaned
    # nonzero on the transpose yields interior cells in x-major order
    xs, ys = np.nonzero(lines[1:-1, 1:-1].T)
    for x, y in zip(xs + 1, ys + 1):
        neighbours = int(cleaned[y - 1:y + 2, x - 1:x + 2].sum()) - 1
        if neighbours < cleaning_factor:
            cleaned[y, x] = False
    return cleaned


def contour_mask(heightmap, line_divisions, cleaning_factor=0):
    """
    Boolean (height, width) mask of contour cells.

    *heightmap* itself is not modified; the bands are computed on a copy.
    """
    bands = heightmap.quantized(line_divisions)
    lines = _lower_neighbour(bands.samples)
    cleaned = clean_contours(lines, cleaning_factor)
    log.debug("Contours: %d cells, %d after cleaning",
              int(lines.sum()), int(cleaned.sum()))
    return cleaned


def generate_contour_layer(heightmap, settings=None):
    """
    Render the contour lines of *heightmap*.

    Args:
        heightmap: :class:`HeightMap`.
        settings:  :class:`ContourSettings` (defaults when None).

    Returns:
        New :class:`PixelSurface` of the heightmap's size.
    """
    if settings is None:
        settings = ContourSettings()

    source = prepare(heightmap, settings.smoothing)
    lines = contour_mask(source, settings.line_divisions, settings.cleaning_factor)

    layer = PixelSurface(heightmap.width, heightmap.height).fill(settings.background_color)
    layer.paint(lines, settings.line_color)
    log.info("Generated contour layer %dx%d (%d divisions)",
             heightmap.width, heightmap.height, settings.line_divisions)
    return layer
