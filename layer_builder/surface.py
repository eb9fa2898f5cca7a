"""
Colours and pixel surfaces.

A :class:`PixelSurface` is a fixed-size RGBA grid backed by a NumPy
``float64`` array of shape ``(height, width, 4)``.  Channels are normalised
to ``[0, 1]``; 8-bit inputs are stored as ``v / 255.0`` so a colour parsed
from a hex string and the same colour decoded from an image compare exactly
equal.  Exact equality is what the region generator classifies on.

Compositing uses the "over" operator written as a weighted sum
(``bottom * (1 - a) + top * a``) so that fully opaque and fully transparent
tops reproduce their inputs bit for bit.
"""

import numpy as np

from .errors import OutOfBoundsError, DimensionMismatchError

_ORTHOGONAL_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


# ---------------------------------------------------------------------------
# Colour
# ---------------------------------------------------------------------------

class Color(object):
    """
    An RGBA colour with float channels in [0, 1].

    Colours are immutable, hashable and compare exactly.
    """

    __slots__ = ('r', 'g', 'b', 'a')

    def __init__(self, r, g, b, a=1.0):
        object.__setattr__(self, 'r', float(r))
        object.__setattr__(self, 'g', float(g))
        object.__setattr__(self, 'b', float(b))
        object.__setattr__(self, 'a', float(a))

    def __setattr__(self, name, value):
        raise AttributeError("Color is immutable")

    @classmethod
    def from_bytes(cls, values):
        """Build a colour from 3 or 4 integer channels in 0-255."""
        values = list(values)
        if len(values) == 3:
            values.append(255)
        if len(values) != 4:
            raise ValueError(
                "Expected 3 or 4 channels, got {}".format(len(values)))
        for v in values:
            if not 0 <= int(v) <= 255:
                raise ValueError("Channel value {} is outside 0-255".format(v))
        return cls(*(int(v) / 255.0 for v in values))

    @classmethod
    def from_hex(cls, text):
        """
        Parse ``#RRGGBB``, ``#RRGGBBAA``, ``0xRRGGBB[AA]`` or ``RRGGBB[AA]``.

        Six-digit forms are fully opaque.

        Raises:
            ValueError: If *text* is not a colour hex code.
        """
        if not isinstance(text, str):
            raise ValueError("Colour must be a string, got {!r}".format(text))
        digits = text.strip().lower()
        if digits.startswith('0x'):
            digits = digits[2:]
        elif digits.startswith('#'):
            digits = digits[1:]
        if len(digits) not in (6, 8):
            raise ValueError(
                "Invalid length for colour hex code: {!r}".format(text))
        try:
            channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError:
            raise ValueError("Invalid colour hex code: {!r}".format(text))
        return cls.from_bytes(channels)

    @staticmethod
    def interpolate(c1, c2, t):
        """
        Linearly interpolate every channel from *c1* to *c2*.

        Args:
            c1: Start colour.
            c2: End colour.
            t:  Interpolation factor, clamped to [0, 1].

        Returns:
            Interpolated :class:`Color`.
        """
        t = max(0.0, min(1.0, t))
        return Color(*(a * (1.0 - t) + b * t for a, b in zip(c1, c2)))

    def to_bytes(self):
        """Return the (r, g, b, a) channels rounded to 0-255 integers."""
        return tuple(int(round(v * 255.0)) for v in self)

    def to_hex(self):
        return "#{:02X}{:02X}{:02X}{:02X}".format(*self.to_bytes())

    def __iter__(self):
        return iter((self.r, self.g, self.b, self.a))

    def __eq__(self, other):
        if not isinstance(other, Color):
            return NotImplemented
        return tuple(self) == tuple(other)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(tuple(self))

    def __repr__(self):
        return "Color({})".format(self.to_hex())


TRANSPARENT = Color(0.0, 0.0, 0.0, 0.0)
BLACK = Color(0.0, 0.0, 0.0, 1.0)


# ---------------------------------------------------------------------------
# Compositing
# ---------------------------------------------------------------------------

def _composite(bottom, top):
    """Alpha-composite the *top* pixel array over *bottom* (same shape)."""
    alpha = top[..., 3:4]
    out = np.empty_like(bottom)
    out[..., :3] = bottom[..., :3] * (1.0 - alpha) + top[..., :3] * alpha
    out[..., 3] = top[..., 3] + bottom[..., 3] * (1.0 - top[..., 3])
    return out


# ---------------------------------------------------------------------------
# Pixel surface
# ---------------------------------------------------------------------------

class PixelSurface(object):
    """
    Fixed-size RGBA pixel grid with bounds-checked access.

    Attributes:
        width:  Number of columns.
        height: Number of rows.
        pixels: ``float64`` array of shape (height, width, 4).
    """

    __slots__ = ('width', 'height', 'pixels')

    def __init__(self, width, height):
        if width < 0 or height < 0:
            raise ValueError(
                "Surface dimensions must be non-negative, got {}x{}".format(
                    width, height))
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 4), dtype=np.float64)

    @classmethod
    def new(cls, width, height):
        """Create a transparent black surface."""
        return cls(width, height)

    @classmethod
    def from_array(cls, array):
        """
        Wrap a (height, width, 3|4) array of channels in [0, 1].

        The data is copied.  RGB arrays are made fully opaque.
        """
        arr = np.asarray(array, dtype=np.float64)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(
                "Expected an array of shape (h, w, 3|4), got {}".format(arr.shape))
        surface = cls(arr.shape[1], arr.shape[0])
        surface.pixels[..., :arr.shape[2]] = arr
        if arr.shape[2] == 3:
            surface.pixels[..., 3] = 1.0
        return surface

    @property
    def size(self):
        return (self.width, self.height)

    def to_array(self):
        return self.pixels.copy()

    def copy(self):
        surface = PixelSurface(self.width, self.height)
        surface.pixels[...] = self.pixels
        return surface

    def fill(self, color):
        """Return a copy of this surface filled with *color*."""
        surface = PixelSurface(self.width, self.height)
        surface.pixels[...] = tuple(color)
        return surface

    # -- Point access ------------------------------------------------------

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, x, y):
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.width, self.height)

    def get(self, x, y):
        """
        Return the colour at (x, y).

        Raises:
            OutOfBoundsError: If the coordinate is outside the surface.
        """
        self._check(x, y)
        return Color(*self.pixels[y, x])

    def set(self, x, y, color):
        """
        Set the colour at (x, y).

        Raises:
            OutOfBoundsError: If the coordinate is outside the surface.
        """
        self._check(x, y)
        self.pixels[y, x] = tuple(color)

    def neighbours4(self, x, y):
        """
        Return the orthogonally adjacent in-bounds cells of (x, y).

        Returns:
            List of ((nx, ny), Color) pairs, ordered left, right, up, down.
        """
        self._check(x, y)
        neighbours = []
        for dx, dy in _ORTHOGONAL_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                neighbours.append(((nx, ny), Color(*self.pixels[ny, nx])))
        return neighbours

    # -- Whole-surface helpers --------------------------------------------

    def matches(self, color):
        """Boolean (height, width) mask of pixels exactly equal to *color*."""
        return np.all(self.pixels == np.array(tuple(color)), axis=-1)

    def paint(self, mask, color):
        """Set every pixel selected by the boolean *mask* to *color*."""
        self.pixels[mask] = tuple(color)
        return self

    def colors(self):
        """Return the set of distinct colours on the surface."""
        flat = self.pixels.reshape(-1, 4)
        if flat.shape[0] == 0:
            return set()
        return set(Color(*row) for row in np.unique(flat, axis=0))

    # -- Compositing -------------------------------------------------------

    def overlay(self, top):
        """
        Alpha-composite *top* onto this surface in place.

        ``rgb = lerp(self, top, top.alpha)`` and
        ``alpha = top.alpha + self.alpha * (1 - top.alpha)``.

        Returns:
            self

        Raises:
            DimensionMismatchError: If the surfaces differ in size.  Neither
                surface is modified.
        """
        if top.size != self.size:
            raise DimensionMismatchError(self.size, top.size)
        self.pixels = _composite(self.pixels, top.pixels)
        return self

    def stamp(self, origin, glyph):
        """
        Alpha-composite *glyph* with its top-left corner at *origin*.

        Glyph pixels that land outside this surface are skipped.

        Returns:
            self
        """
        ox, oy = int(origin[0]), int(origin[1])
        x0 = max(ox, 0)
        y0 = max(oy, 0)
        x1 = min(ox + glyph.width, self.width)
        y1 = min(oy + glyph.height, self.height)
        if x0 >= x1 or y0 >= y1:
            return self

        src = glyph.pixels[y0 - oy:y1 - oy, x0 - ox:x1 - ox]
        self.pixels[y0:y1, x0:x1] = _composite(self.pixels[y0:y1, x0:x1], src)
        return self

    def __eq__(self, other):
        if not isinstance(other, PixelSurface):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.pixels, other.pixels)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return "PixelSurface({}x{})".format(self.width, self.height)
