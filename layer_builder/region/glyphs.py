"""
Glyph distribution: scatter a small icon across one region of a
classification raster.

Candidates sit on a regular grid spaced a glyph and a half apart, so
neighbouring glyphs cannot overlap even after jitter.  Each candidate goes
through four filters, in this order:

    1. density      one random draw, kept iff draw % 100 < density
    2. region       the classification pixel must be the target colour
    3. jitter       two random draws move the candidate by up to half a glyph;
                    candidates pushed to negative coordinates are dropped
    4. containment  at least ``threshold`` percent of the glyph's opaque
                    pixels must land on the target colour

Random draws come from one sequential stream, so the same seed and inputs
always give the same placements.
"""

import random
import logging

import numpy as np

from .. import config as DEFAULTS
from ..surface import PixelSurface

log = logging.getLogger(__name__)


class GlyphRandom(object):
    """Seeded stream of unsigned 32-bit draws."""

    __slots__ = ('_rng',)

    def __init__(self, seed=DEFAULTS.DEFAULT_GLYPH_SEED):
        self._rng = random.Random(seed)

    def next_u32(self):
        return self._rng.getrandbits(32)


class GlyphDistribution(object):
    """
    Placement anchors for one glyph over one region.

    Attributes:
        glyph:      :class:`PixelSurface` stamped at every anchor.
        layer_size: (width, height) of the classification raster.
        locations:  Tuple of (x, y) anchors, the glyph centre positions.
    """

    __slots__ = ('glyph', 'layer_size', 'locations')

    def __init__(self, seed, density, threshold, glyph, classification, color,
                 rng=None):
        """
        Args:
            seed:           Seed for :class:`GlyphRandom`.
            density:        Percentage (0-100) of grid candidates to keep.
            threshold:      Percentage (0-100) of the glyph footprint that
                            must lie inside the region.
            glyph:          :class:`PixelSurface` to scatter.
            classification: :class:`PixelSurface` of region colours.
            color:          Region colour to scatter over.
            rng:            Random source with a ``next_u32()`` method; a
                            :class:`GlyphRandom` seeded with *seed* by default.
        """
        self.glyph = glyph
        self.layer_size = classification.size
        if rng is None:
            rng = GlyphRandom(seed)
        self.locations = tuple(_place(rng, density, threshold,
                                      glyph, classification, color))
        log.debug("Placed %d glyphs for region %s", len(self.locations), color.to_hex())

    def to_layer(self):
        """
        Stamp the glyph at every anchor on a transparent layer.

        Anchors closer than half a glyph to the top or left edge are skipped.

        Returns:
            New :class:`PixelSurface` of the classification raster's size.
        """
        layer = PixelSurface(*self.layer_size)
        half_w = self.glyph.width // 2
        half_h = self.glyph.height // 2
        for x, y in self.locations:
            if x < half_w or y < half_h:
                continue
            layer.stamp((x - half_w, y - half_h), self.glyph)
        return layer


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------

def _candidates(width, height, glyph):
    step_x = glyph.width + glyph.width // 2 + DEFAULTS.GLYPH_OVERLAP_PREVENTION
    step_y = glyph.height + glyph.height // 2 + DEFAULTS.GLYPH_OVERLAP_PREVENTION
    for x in range(0, width, step_x):
        for y in range(0, height, step_y):
            yield x, y


def _footprint(glyph):
    """Offsets of the glyph's opaque pixels relative to its centre."""
    ys, xs = np.nonzero(glyph.pixels[..., 3] > 0)
    return xs - glyph.width // 2, ys - glyph.height // 2


def _contained(region, x, y, footprint, threshold):
    dx, dy = footprint
    total = dx.size
    if total == 0:
        return False
    mx = x + dx
    my = y + dy
    height, width = region.shape
    inside = (mx >= 0) & (mx < width) & (my >= 0) & (my < height)
    in_count = int(region[my[inside], mx[inside]].sum())
    return in_count * 100 >= threshold * total


def _place(rng, density, threshold, glyph, classification, color):
    region = classification.matches(color)
    footprint = _footprint(glyph)
    wiggle_x = max(glyph.width - DEFAULTS.GLYPH_OVERLAP_PREVENTION, 1)
    wiggle_y = max(glyph.height - DEFAULTS.GLYPH_OVERLAP_PREVENTION, 1)

    for x, y in _candidates(classification.width, classification.height, glyph):
        if rng.next_u32() % 100 >= density:
            continue
        if not region[y, x]:
            continue

        x += rng.next_u32() % wiggle_x - glyph.width // 2
        y += rng.next_u32() % wiggle_y - glyph.height // 2
        if x < 0 or y < 0:
            continue

        if _contained(region, x, y, footprint, threshold):
            yield x, y
