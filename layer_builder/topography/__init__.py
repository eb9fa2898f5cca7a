"""Heightmap-derived layers: contours, hillshade and tanaka relief."""

from .heightmap import HeightMap, prepare
from .contour import ContourSettings, contour_mask, clean_contours, generate_contour_layer
from .shaded import ShadedSettings, generate_shaded_layer
from .tanaka import TanakaSettings, generate_tanaka_layer

__all__ = [
    'HeightMap', 'prepare',
    'ContourSettings', 'contour_mask', 'clean_contours', 'generate_contour_layer',
    'ShadedSettings', 'generate_shaded_layer',
    'TanakaSettings', 'generate_tanaka_layer',
]
