"""
JSON configuration loader.

Two documents are read here:

Region configuration
    An object keyed by region colour.  Each value styles that region::

        {
            "#00FF00": {"outline_thickness": 2, "glyph_image": "tree.png",
                        "glyph_density": 40, "glyph_threshold": 80},
            "#0000FF": {"color": "#3050C0", "outline_color": "#102060"}
        }

    Omitted fields take the defaults in :mod:`layer_builder.config`.
    ``glyph_image`` paths are relative to the document's directory.

Layer document
    ``{"layers": [...]}``; every layer names its ``kind`` (``region``,
    ``contour``, ``hillshade`` or ``tanaka``), an ``input`` raster and an
    ``output`` path, plus the settings of its kind::

        {"layers": [
            {"name": "biomes", "kind": "region", "input": "biomes.png",
             "output": "out/biomes.png", "regions_file": "biomes.json"},
            {"name": "relief", "kind": "tanaka", "input": "height.png",
             "output": "out/relief.png", "line_divisions": 24}
        ]}

The whole document is validated before anything is generated.  Every
failure is a :class:`ConfigurationError` whose field names the path to the
offending value, e.g. ``layers[2].line_divisions``.
"""

import os
import json
import logging

from .errors import ConfigurationError, DecodeError
from .fields import require_color, require_string
from . import codec
from . import config as DEFAULTS
from .region.layers import GlyphStyle, RegionStyle
from .topography.contour import ContourSettings
from .topography.shaded import ShadedSettings
from .topography.tanaka import TanakaSettings

log = logging.getLogger(__name__)

LAYER_KINDS = ('region', 'contour', 'hillshade', 'tanaka')

_REGION_FIELDS = ('color', 'outline_color', 'outline_thickness', 'glyph_image',
                  'glyph_density', 'glyph_threshold', 'glyph_seed')
_COMMON_FIELDS = ('name', 'kind', 'input', 'output')
_KIND_FIELDS = {
    'region': ('regions', 'regions_file'),
    'contour': ('line_divisions', 'line_color', 'background_color',
                'cleaning_factor', 'smoothing'),
    'hillshade': ('light_direction', 'background_color', 'light_color',
                  'dark_color', 'smoothing'),
    'tanaka': ('line_divisions', 'cleaning_factor', 'light_direction',
               'background_color', 'light_color', 'dark_color', 'smoothing'),
}
_SETTINGS_CLASSES = {
    'contour': ContourSettings,
    'hillshade': ShadedSettings,
    'tanaka': TanakaSettings,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _join(prefix, field):
    if not field:
        return prefix
    if not prefix:
        return field
    return "{}.{}".format(prefix, field)


def _nested(prefix, build, *args, **kwargs):
    """Call *build*, prefixing the field of any ConfigurationError it raises."""
    try:
        return build(*args, **kwargs)
    except ConfigurationError as e:
        raise ConfigurationError(_join(prefix, e.field), e.message) from None


def _require_object(field, value):
    if not isinstance(value, dict):
        raise ConfigurationError(
            field, "expected an object, got {}".format(type(value).__name__))
    return value


def _check_fields(field, data, allowed):
    for key in data:
        if key not in allowed:
            raise ConfigurationError(_join(field, key), "unknown field")


def _read_json(path, field):
    path = str(path)
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except OSError as e:
        raise ConfigurationError(field, "cannot read {}: {}".format(path, e)) from e
    except ValueError as e:
        raise ConfigurationError(field, "invalid JSON in {}: {}".format(path, e)) from e


def _resolve(base_dir, path):
    return os.path.normpath(os.path.join(base_dir, path))


# ---------------------------------------------------------------------------
# Region configuration
# ---------------------------------------------------------------------------

class RegionConfiguration(object):
    """
    Region style entries plus the glyph images they reference.

    Attributes:
        entries: Tuple of :class:`RegionStyle`, sorted by ascending outline
                 thickness (document order among equal thicknesses).
        glyphs:  Dict of resolved glyph path -> :class:`PixelSurface`.
    """

    __slots__ = ('entries', 'glyphs')

    def __init__(self, entries=(), glyphs=None):
        self.entries = tuple(sorted(entries, key=lambda e: e.outline_thickness))
        self.glyphs = glyphs if glyphs is not None else {}

    @classmethod
    def from_file(cls, path, glyph_cache=None, field=''):
        """Load a region configuration document from *path*."""
        data = _read_json(path, field)
        base_dir = os.path.dirname(os.path.abspath(str(path)))
        log.info("Loading region configuration %s", path)
        return cls.from_dict(data, base_dir, glyph_cache, field)

    @classmethod
    def from_string(cls, text, base_dir='.', glyph_cache=None):
        """Parse a region configuration from JSON *text*."""
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ConfigurationError('', "invalid JSON: {}".format(e)) from e
        return cls.from_dict(data, base_dir, glyph_cache)

    @classmethod
    def from_dict(cls, data, base_dir='.', glyph_cache=None, field=''):
        """
        Build a configuration from parsed JSON.

        Args:
            data:        Dict keyed by region colour.
            base_dir:    Directory that relative ``glyph_image`` paths start from.
            glyph_cache: Optional dict shared between configurations so each
                         glyph file is decoded once.
            field:       Prefix for error field names.

        Raises:
            ConfigurationError: If any entry is malformed or a glyph image
                cannot be loaded.
        """
        _require_object(field, data)
        glyphs = glyph_cache if glyph_cache is not None else {}
        entries = []
        for key, value in data.items():
            entry_field = "{}[{}]".format(field, json.dumps(key))
            entries.append(_region_entry(key, value, base_dir, glyphs, entry_field))

        configuration = cls(entries, glyphs)
        log.debug("Region configuration: %s", list(configuration.entries))
        return configuration

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


def _load_glyph(path, glyphs, field):
    if path not in glyphs:
        try:
            glyphs[path] = codec.load_surface(path)
        except DecodeError as e:
            raise ConfigurationError(field, str(e)) from e
    return glyphs[path]


def _region_entry(key, value, base_dir, glyphs, field):
    _require_object(field, value)
    _check_fields(field, value, _REGION_FIELDS)

    key_color = require_color(field, key)

    glyph = None
    if 'glyph_image' in value:
        image_field = _join(field, 'glyph_image')
        path = _resolve(base_dir, require_string(image_field, value['glyph_image']))
        glyph = _nested(field, GlyphStyle,
                        _load_glyph(path, glyphs, image_field),
                        density=value.get('glyph_density', DEFAULTS.DEFAULT_GLYPH_DENSITY),
                        threshold=value.get('glyph_threshold', DEFAULTS.DEFAULT_GLYPH_THRESHOLD),
                        seed=value.get('glyph_seed', DEFAULTS.DEFAULT_GLYPH_SEED),
                        path=path)
    else:
        for unused in ('glyph_density', 'glyph_threshold', 'glyph_seed'):
            if unused in value:
                log.warning("%s is ignored without glyph_image", _join(field, unused))

    kwargs = {}
    if 'color' in value:
        kwargs['fill_color'] = value['color']
    if 'outline_color' in value:
        kwargs['outline_color'] = value['outline_color']
    if 'outline_thickness' in value:
        kwargs['outline_thickness'] = value['outline_thickness']
    return _nested(field, RegionStyle, key_color, glyph=glyph, **kwargs)


# ---------------------------------------------------------------------------
# Layer document
# ---------------------------------------------------------------------------

class LayerSpec(object):
    """
    One validated layer of a layer document.

    Attributes:
        name:     Layer name (defaults to the output file's stem).
        kind:     One of :data:`LAYER_KINDS`.
        input:    Resolved path of the input raster.
        output:   Resolved path of the output PNG.
        settings: :class:`RegionConfiguration`, :class:`ContourSettings`,
                  :class:`ShadedSettings` or :class:`TanakaSettings`.
    """

    __slots__ = ('name', 'kind', 'input', 'output', 'settings')

    def __init__(self, name, kind, input, output, settings):
        self.name = name
        self.kind = kind
        self.input = input
        self.output = output
        self.settings = settings

    @classmethod
    def from_dict(cls, data, base_dir='.', field='layer', glyph_cache=None):
        """
        Validate one layer object.

        Raises:
            ConfigurationError: Naming the first invalid field.
        """
        _require_object(field, data)

        if 'kind' not in data:
            raise ConfigurationError(_join(field, 'kind'), "missing required field")
        kind = data['kind']
        if kind not in LAYER_KINDS:
            raise ConfigurationError(
                _join(field, 'kind'),
                "expected one of {}, got {!r}".format(', '.join(LAYER_KINDS), kind))
        _check_fields(field, data, _COMMON_FIELDS + _KIND_FIELDS[kind])

        paths = {}
        for key in ('input', 'output'):
            if key not in data:
                raise ConfigurationError(_join(field, key), "missing required field")
            paths[key] = _resolve(base_dir, require_string(_join(field, key), data[key]))

        if 'name' in data:
            name = require_string(_join(field, 'name'), data['name'])
        else:
            name = os.path.splitext(os.path.basename(paths['output']))[0]

        if kind == 'region':
            settings = _region_settings(data, base_dir, field, glyph_cache)
        else:
            kwargs = dict((k, data[k]) for k in _KIND_FIELDS[kind] if k in data)
            settings = _nested(field, _SETTINGS_CLASSES[kind], **kwargs)

        return cls(name, kind, paths['input'], paths['output'], settings)

    def __repr__(self):
        return "LayerSpec({!r}, {})".format(self.name, self.kind)


def _region_settings(data, base_dir, field, glyph_cache):
    has_inline = 'regions' in data
    has_file = 'regions_file' in data
    if has_inline == has_file:
        raise ConfigurationError(
            field, "a region layer needs exactly one of regions, regions_file")

    if has_inline:
        return RegionConfiguration.from_dict(
            data['regions'], base_dir, glyph_cache, _join(field, 'regions'))

    file_field = _join(field, 'regions_file')
    path = _resolve(base_dir, require_string(file_field, data['regions_file']))
    return RegionConfiguration.from_file(path, glyph_cache, file_field)


def parse_document(data, base_dir='.'):
    """
    Validate a parsed layer document.

    Args:
        data:     Parsed JSON (``{"layers": [...]}``).
        base_dir: Directory relative paths start from.

    Returns:
        List of :class:`LayerSpec`.

    Raises:
        ConfigurationError: If any layer is invalid.  No layer is returned
            when one fails.
    """
    _require_object('', data)
    _check_fields('', data, ('layers',))
    if 'layers' not in data:
        raise ConfigurationError('layers', "missing required field")
    layers = data['layers']
    if not isinstance(layers, list):
        raise ConfigurationError('layers', "expected a list")

    glyph_cache = {}
    specs = []
    names = set()
    for i, layer in enumerate(layers):
        field = "layers[{}]".format(i)
        spec = LayerSpec.from_dict(layer, base_dir, field, glyph_cache)
        if spec.name in names:
            raise ConfigurationError(
                _join(field, 'name'), "duplicate layer name {!r}".format(spec.name))
        names.add(spec.name)
        specs.append(spec)

    log.info("Layer document: %d layers, %d glyph images", len(specs), len(glyph_cache))
    return specs


def load_document(path):
    """Read and validate the layer document at *path*."""
    data = _read_json(path, '')
    base_dir = os.path.dirname(os.path.abspath(str(path)))
    log.info("Loading layer document %s", path)
    return parse_document(data, base_dir)
