"""
Region (biome) layer generator.

Every style entry selects the classification pixels of its key colour,
paints them with the fill colour and grows an outline ring around them.
Entries are composited in ascending outline thickness so thin-outlined
regions sit underneath thick-outlined ones.  Glyphs scattered over the
regions are gathered on a separate layer and composited last, on top of
every outline.
"""

import logging

from scipy.ndimage import binary_dilation

from .. import config as DEFAULTS
from ..fields import require_int, require_color
from ..surface import PixelSurface
from .glyphs import GlyphDistribution

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Style entries
# ---------------------------------------------------------------------------

class GlyphStyle(object):
    """
    Glyph attached to a region.

    Attributes:
        image:     :class:`PixelSurface` to scatter.
        density:   Percentage (0-100) of candidate positions to use.
        threshold: Percentage (0-100) of the glyph that must lie in the region.
        seed:      Random seed for placement.
        path:      Source file of *image*, when loaded from disk.
    """

    __slots__ = ('image', 'density', 'threshold', 'seed', 'path')

    def __init__(self, image, density=DEFAULTS.DEFAULT_GLYPH_DENSITY,
                 threshold=DEFAULTS.DEFAULT_GLYPH_THRESHOLD,
                 seed=DEFAULTS.DEFAULT_GLYPH_SEED, path=None):
        self.image = image
        self.density = require_int('glyph_density', density, 0, 100)
        self.threshold = require_int('glyph_threshold', threshold, 0, 100)
        self.seed = require_int('glyph_seed', seed)
        self.path = path


class RegionStyle(object):
    """
    Styling for every classification pixel of ``key_color``.

    ``fill_color`` defaults to the key colour itself.
    """

    __slots__ = ('key_color', 'fill_color', 'outline_color',
                 'outline_thickness', 'glyph')

    def __init__(self, key_color, fill_color=None,
                 outline_color=DEFAULTS.DEFAULT_OUTLINE_COLOR,
                 outline_thickness=DEFAULTS.DEFAULT_OUTLINE_THICKNESS, glyph=None):
        self.key_color = require_color('key_color', key_color)
        if fill_color is None:
            self.fill_color = self.key_color
        else:
            self.fill_color = require_color('color', fill_color)
        self.outline_color = require_color('outline_color', outline_color)
        self.outline_thickness = require_int('outline_thickness', outline_thickness, 0)
        self.glyph = glyph

    def __repr__(self):
        return "RegionStyle({}, thickness={})".format(
            self.key_color.to_hex(), self.outline_thickness)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def region_mask(classification, key_color, fill_color):
    """Transparent surface with *fill_color* wherever *classification* is *key_color*."""
    mask = PixelSurface(classification.width, classification.height)
    return mask.paint(classification.matches(key_color), fill_color)


def grow_outline(mask, fill_color, outline_color, thickness):
    """
    Grow an outline ring of *thickness* pixels around the filled cells.

    Each pass reads a snapshot of the previous pass: a cell that is neither
    fill nor outline and touches (orthogonally) a fill or outline cell
    becomes outline.  After ``k`` passes every outline cell lies within
    ``k`` orthogonal steps of the fill.

    Args:
        mask:          :class:`PixelSurface` from :func:`region_mask`.
        fill_color:    Colour of the region interior.
        outline_color: Colour painted on the ring.
        thickness:     Number of passes.

    Returns:
        New :class:`PixelSurface`; *mask* is unchanged.
    """
    current = mask.copy()
    for i in range(thickness):
        solid = current.matches(fill_color) | current.matches(outline_color)
        ring = binary_dilation(solid) & ~solid
        if not ring.any():
            log.debug("Outline stopped growing after %d of %d passes", i, thickness)
            break
        grown = current.copy()
        grown.paint(ring, outline_color)
        current = grown
    return current


def _entries(configuration):
    entries = getattr(configuration, 'entries', configuration)
    return sorted(entries, key=lambda entry: entry.outline_thickness)


def generate_region_layer(classification, configuration):
    """
    Render the styled region layer for *classification*.

    Args:
        classification: :class:`PixelSurface` of region key colours.
        configuration:  ``RegionConfiguration`` or iterable of
                        :class:`RegionStyle`.

    Returns:
        New :class:`PixelSurface` of the classification raster's size.
    """
    width, height = classification.size
    layer = PixelSurface(width, height)
    glyph_layer = PixelSurface(width, height)

    entries = _entries(configuration)
    log.info("Generating region layer %dx%d from %d entries", width, height, len(entries))

    for entry in entries:
        mask = region_mask(classification, entry.key_color, entry.fill_color)
        mask = grow_outline(mask, entry.fill_color, entry.outline_color,
                            entry.outline_thickness)

        if entry.glyph is not None:
            glyph = entry.glyph
            distribution = GlyphDistribution(glyph.seed, glyph.density, glyph.threshold,
                                             glyph.image, classification, entry.key_color)
            glyph_layer.overlay(distribution.to_layer())
            log.info("  %s: %d glyphs", entry.key_color.to_hex(),
                     len(distribution.locations))

        layer.overlay(mask)

    layer.overlay(glyph_layer)
    return layer

