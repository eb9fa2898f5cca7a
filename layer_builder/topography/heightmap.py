"""
Grayscale heightmap with 16-bit samples.

Samples live in a ``uint16`` NumPy array of shape (height, width).  Every
derived map (quantized bands, smoothed copies) is a new :class:`HeightMap`;
the canonical samples are never modified by the layer generators.
"""

import math
import logging

import numpy as np

from .. import config as DEFAULTS
from ..errors import OutOfBoundsError
from ..kernel import Kernel

log = logging.getLogger(__name__)

_ORTHOGONAL_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))
_DIAGONAL_OFFSETS = ((-1, -1), (-1, 1), (1, -1), (1, 1))


class HeightMap(object):
    """
    Elevation grid.

    Attributes:
        width:   Number of columns.
        height:  Number of rows (the grid dimension, not an elevation).
        samples: ``uint16`` array of shape (height, width).
    """

    __slots__ = ('width', 'height', 'samples')

    def __init__(self, width, height):
        if width < 0 or height < 0:
            raise ValueError(
                "Heightmap dimensions must be non-negative, got {}x{}".format(
                    width, height))
        self.width = int(width)
        self.height = int(height)
        self.samples = np.zeros((self.height, self.width), dtype=np.uint16)

    @classmethod
    def new(cls, width, height):
        """Create an all-zero heightmap."""
        return cls(width, height)

    @classmethod
    def from_array(cls, array):
        """
        Copy a 2-D array of elevations into a new heightmap.

        Raises:
            ValueError: If the array is not 2-D or holds values outside
                0-65535.
        """
        arr = np.asarray(array)
        if arr.ndim != 2:
            raise ValueError("Expected a 2-D array, got {}-D".format(arr.ndim))
        if arr.size and (arr.min() < 0 or arr.max() > DEFAULTS.HEIGHT_MAX):
            raise ValueError("Heightmap samples must lie within 0-65535")
        heightmap = cls(arr.shape[1], arr.shape[0])
        heightmap.samples[...] = arr
        return heightmap

    @classmethod
    def from_surface(cls, surface):
        """Build a heightmap from the red channel of a :class:`PixelSurface`."""
        red = np.clip(surface.pixels[..., 0], 0.0, 1.0)
        return cls.from_array(np.round(red * DEFAULTS.HEIGHT_MAX).astype(np.uint16))

    @property
    def size(self):
        return (self.width, self.height)

    def copy(self):
        return HeightMap.from_array(self.samples)

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def height_at(self, x, y):
        """
        Elevation of the cell at (x, y).

        Raises:
            OutOfBoundsError: If the coordinate is outside the grid.
        """
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.width, self.height)
        return int(self.samples[y, x])

    def set_height_at(self, x, y, value):
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.width, self.height)
        if not 0 <= value <= DEFAULTS.HEIGHT_MAX:
            raise ValueError("Elevation {} is outside 0-65535".format(value))
        self.samples[y, x] = value

    # -- Neighbourhoods ----------------------------------------------------

    def _neighbours(self, x, y, offsets):
        neighbours = []
        for dx, dy in offsets:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                neighbours.append(((nx, ny), int(self.samples[ny, nx])))
        return neighbours

    def orthogonal_neighbours(self, x, y):
        """Return ``[((nx, ny), value), ...]`` for the in-bounds orthogonal cells."""
        return self._neighbours(x, y, _ORTHOGONAL_OFFSETS)

    def diagonal_neighbours(self, x, y):
        """See :meth:`orthogonal_neighbours`."""
        return self._neighbours(x, y, _DIAGONAL_OFFSETS)

    def neighbours(self, x, y):
        """Orthogonal followed by diagonal neighbours."""
        return self.orthogonal_neighbours(x, y) + self.diagonal_neighbours(x, y)

    # -- Derived maps ------------------------------------------------------

    def quantized(self, line_divisions):
        """
        Return a new heightmap of elevation bands.

        Every sample is floor-divided by ``65535 // line_divisions``.
        """
        if not 1 <= line_divisions <= DEFAULTS.HEIGHT_MAX:
            raise ValueError(
                "line_divisions must lie within 1-65535, got {}".format(line_divisions))
        division_size = DEFAULTS.HEIGHT_MAX // int(line_divisions)
        log.debug("Quantizing %dx%d heightmap into bands of %d",
                  self.width, self.height, division_size)
        return HeightMap.from_array(self.samples // np.uint16(division_size))

    def smoothed(self, kernel):
        """Return a new heightmap sampled through *kernel* (a :class:`Kernel`)."""
        blurred = kernel.apply(self.samples.astype(np.float64))
        blurred = np.clip(np.round(blurred), 0, DEFAULTS.HEIGHT_MAX)
        return HeightMap.from_array(blurred.astype(np.uint16))

    # -- Orientation -------------------------------------------------------

    def surface_normal(self, x, y):
        """
        Slope direction of the cell at (x, y).

        Uses central differences ``dx = (h(x+1,y) - h(x-1,y)) / 2`` and
        ``dy = (h(x,y+1) - h(x,y-1)) / 2`` and returns ``normalize(-dx, -dy)``.
        A flat cell returns ``(0.0, 0.0)``.

        Returns:
            (nx, ny) tuple, or None on the border of the grid.
        """
        if x <= 0 or y <= 0 or x >= self.width - 1 or y >= self.height - 1:
            return None

        l = float(self.samples[y, x - 1])
        r = float(self.samples[y, x + 1])
        t = float(self.samples[y - 1, x])
        b = float(self.samples[y + 1, x])

        dx = (r - l) / 2.0
        dy = (b - t) / 2.0
        length = math.hypot(dx, dy)
        if length == 0:
            return (0.0, 0.0)
        return (-dx / length, -dy / length)

    def normals(self):
        """
        Vectorised :meth:`surface_normal` over the whole grid.

        Returns:
            (nx, ny, defined): two float arrays and a boolean array, each of
            shape (height, width).  Border cells have ``defined == False``
            and zero components.
        """
        nx = np.zeros(self.samples.shape, dtype=np.float64)
        ny = np.zeros(self.samples.shape, dtype=np.float64)
        defined = np.zeros(self.samples.shape, dtype=bool)
        if self.width < 3 or self.height < 3:
            return nx, ny, defined

        h = self.samples.astype(np.float64)
        dx = (h[1:-1, 2:] - h[1:-1, :-2]) / 2.0
        dy = (h[2:, 1:-1] - h[:-2, 1:-1]) / 2.0
        length = np.hypot(dx, dy)
        safe = np.where(length == 0, 1.0, length)

        nx[1:-1, 1:-1] = np.where(length == 0, 0.0, -dx / safe)
        ny[1:-1, 1:-1] = np.where(length == 0, 0.0, -dy / safe)
        defined[1:-1, 1:-1] = True
        return nx, ny, defined

    def __repr__(self):
        return "HeightMap({}x{})".format(self.width, self.height)


def prepare(heightmap, smoothing):
    """
    Return the heightmap the derived layers should read.

    When *smoothing* is positive the result is a copy blurred with a
    normalised Gaussian of that standard deviation; otherwise *heightmap*
    itself is returned.
    """
    if not smoothing:
        return heightmap
    log.debug("Smoothing heightmap with sd=%.2f", smoothing)
    return heightmap.smoothed(Kernel.gaussian(smoothing).normalised())
