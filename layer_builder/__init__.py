"""
Layer Builder - cartographic map layers from raster inputs.

Turns a classification raster (pixels colour-coded by region) into a styled
region layer with outlines and scattered glyphs, and a grayscale heightmap
into contour lines, hillshading or tanaka relief.  Every layer is an RGBA
:class:`PixelSurface` that can be written as PNG and composited over a
base map.

Layers are usually described in a JSON layer document (see
:mod:`layer_builder.settings`) and built with :func:`build_from_file` or the
``layer-builder`` command.
"""

from .errors import (LayerBuilderError, OutOfBoundsError, DimensionMismatchError,
                     ConfigurationError, DecodeError, EncodeError)
from .surface import Color, PixelSurface
from .kernel import Kernel
from .codec import (decode, encode, load_surface, save_surface,
                    decode_heightmap, load_heightmap)
from .region import (GlyphRandom, GlyphDistribution, GlyphStyle, RegionStyle,
                     grow_outline, generate_region_layer)
from .topography import (HeightMap, ContourSettings, ShadedSettings, TanakaSettings,
                         generate_contour_layer, generate_shaded_layer,
                         generate_tanaka_layer)
from .settings import RegionConfiguration, LayerSpec, load_document, parse_document
from .pipeline import LayerResult, render_layer, build_layer, build_layers

__version__ = '0.1.0'


def build_from_file(path, only=None):
    """
    Build every layer of the layer document at *path*.

    Args:
        path: Layer document (JSON).
        only: Optional collection of layer names to build.

    Returns:
        List of :class:`LayerResult`.

    Raises:
        ConfigurationError: If the document is invalid; nothing is built.
    """
    return build_layers(load_document(path), only)
