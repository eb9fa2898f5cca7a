"""
Layer pipeline: load each input raster, run its generator and write the
result.

:func:`build_layers` is the batch entry point.  A layer that fails is
logged and reported in its :class:`LayerResult`; the remaining layers are
still built.
"""

import logging

from . import codec
from .errors import LayerBuilderError
from .region.layers import generate_region_layer
from .topography.contour import generate_contour_layer
from .topography.shaded import generate_shaded_layer
from .topography.tanaka import generate_tanaka_layer

log = logging.getLogger(__name__)

_HEIGHTMAP_GENERATORS = {
    'contour': generate_contour_layer,
    'hillshade': generate_shaded_layer,
    'tanaka': generate_tanaka_layer,
}


class LayerResult(object):
    """Outcome of building one layer."""

    __slots__ = ('name', 'output', 'error')

    def __init__(self, name, output, error=None):
        self.name = name
        self.output = output
        self.error = error

    @property
    def ok(self):
        return self.error is None

    def __repr__(self):
        if self.ok:
            return "LayerResult({!r}, ok)".format(self.name)
        return "LayerResult({!r}, failed: {})".format(self.name, self.error)


def render_layer(spec):
    """
    Load the input of *spec* and generate its layer.

    Args:
        spec: :class:`LayerSpec`.

    Returns:
        :class:`PixelSurface`.
    """
    if spec.kind == 'region':
        classification = codec.load_surface(spec.input)
        return generate_region_layer(classification, spec.settings)

    generator = _HEIGHTMAP_GENERATORS.get(spec.kind)
    if generator is None:
        raise ValueError("Unknown layer kind: {!r}".format(spec.kind))
    heightmap = codec.load_heightmap(spec.input)
    return generator(heightmap, spec.settings)


def build_layer(spec):
    """Render *spec* and write it to ``spec.output``.  Returns the surface."""
    log.info("--- Building layer '%s' (%s) ---", spec.name, spec.kind)
    surface = render_layer(spec)
    codec.save_surface(surface, spec.output)
    return surface


def build_layers(specs, only=None):
    """
    Build every layer in *specs*.

    Args:
        specs: Iterable of :class:`LayerSpec`.
        only:  Optional collection of layer names; other layers are skipped.

    Returns:
        List of :class:`LayerResult`, in document order.
    """
    results = []
    for spec in specs:
        if only is not None and spec.name not in only:
            log.debug("Skipping layer '%s'", spec.name)
            continue
        try:
            build_layer(spec)
        except (LayerBuilderError, OSError) as e:
            log.error("Layer '%s' failed: %s", spec.name, e)
            results.append(LayerResult(spec.name, spec.output, e))
        else:
            results.append(LayerResult(spec.name, spec.output))

    failed = sum(1 for r in results if not r.ok)
    log.info("=== Built %d of %d layers ===", len(results) - failed, len(results))
    return results
