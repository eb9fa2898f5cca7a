"""Region layers: styled region fills, outlines and glyph scattering."""

from .glyphs import GlyphRandom, GlyphDistribution
from .layers import GlyphStyle, RegionStyle, region_mask, grow_outline, generate_region_layer
