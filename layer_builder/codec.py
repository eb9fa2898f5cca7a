"""
Raster codec: image files <-> :class:`PixelSurface` / :class:`HeightMap`.

All decoding is delegated to Pillow, so any format Pillow reads is
accepted.  Pixel data is normalised on the way in:

    8-bit channels   -> v / 255.0
    16-bit grayscale -> v / 65535.0 (kept at full precision for heightmaps)

Surfaces are always written as 8-bit RGBA PNG.

Pillow errors are re-raised as :class:`DecodeError` / :class:`EncodeError`
so the pipeline can report them per layer.
"""

import io
import os
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from . import config as DEFAULTS
from .errors import DecodeError, EncodeError
from .surface import PixelSurface
from .topography.heightmap import HeightMap

log = logging.getLogger(__name__)

# Pillow modes that carry more than 8 bits of grayscale.
_WIDE_GRAY_MODES = ('I;16', 'I;16B', 'I;16L', 'I;16N', 'I')


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _open_image(data):
    """Open and fully load *data* (bytes) with Pillow."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError("Could not decode image: {}".format(e)) from e
    return img


def _read_file(path):
    path = str(path)
    if not os.path.isfile(path):
        raise DecodeError("Image file not found: {}".format(path))
    with open(path, 'rb') as f:
        return f.read()


def _wide_gray_values(img):
    """Return a (h, w) uint16 array from a 16/32-bit grayscale image."""
    values = np.array(img, dtype=np.int64)
    return np.clip(values, 0, DEFAULTS.HEIGHT_MAX).astype(np.uint16)


# ---------------------------------------------------------------------------
# Surfaces
# ---------------------------------------------------------------------------

def decode(data):
    """
    Decode image bytes into a :class:`PixelSurface`.

    Raises:
        DecodeError: If Pillow cannot read the data.
    """
    img = _open_image(data)

    if img.mode in _WIDE_GRAY_MODES:
        gray = _wide_gray_values(img).astype(np.float64) / float(DEFAULTS.HEIGHT_MAX)
        rgba = np.empty(gray.shape + (4,), dtype=np.float64)
        rgba[..., :3] = gray[..., np.newaxis]
        rgba[..., 3] = 1.0
    else:
        try:
            rgba = np.asarray(img.convert('RGBA'), dtype=np.float64) / 255.0
        except (OSError, ValueError) as e:
            raise DecodeError(
                "Unsupported image mode {}: {}".format(img.mode, e)) from e

    log.debug("Decoded %dx%d image (mode %s)", img.width, img.height, img.mode)
    return PixelSurface.from_array(rgba)


def encode(surface):
    """
    Encode *surface* as 8-bit RGBA PNG bytes.

    Raises:
        EncodeError: If the surface cannot be encoded.
    """
    if surface.width == 0 or surface.height == 0:
        raise EncodeError(
            "Cannot encode an empty {}x{} surface".format(surface.width, surface.height))

    arr = np.clip(np.round(surface.pixels * 255.0), 0, 255).astype(np.uint8)
    buf = io.BytesIO()
    try:
        Image.fromarray(arr).save(buf, format='PNG')
    except (OSError, ValueError) as e:
        raise EncodeError("Could not encode surface: {}".format(e)) from e
    return buf.getvalue()


def load_surface(path):
    """Read an image file into a :class:`PixelSurface`."""
    surface = decode(_read_file(path))
    log.info("Loaded %s (%dx%d)", path, surface.width, surface.height)
    return surface


def save_surface(surface, path):
    """
    Write *surface* to *path* as PNG, creating parent directories.

    Raises:
        EncodeError: If encoding or writing fails.
    """
    data = encode(surface)
    path = str(path)
    try:
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)
        with open(path, 'wb') as f:
            f.write(data)
    except OSError as e:
        raise EncodeError("Could not write {}: {}".format(path, e)) from e
    log.info("Saved %s (%d bytes)", path, len(data))


# ---------------------------------------------------------------------------
# Heightmaps
# ---------------------------------------------------------------------------

def decode_heightmap(data):
    """
    Decode image bytes into a :class:`HeightMap`.

    16-bit grayscale images keep their exact samples.  Any other image is
    read through its red channel, scaled to 0-65535.
    """
    img = _open_image(data)
    if img.mode in _WIDE_GRAY_MODES:
        return HeightMap.from_array(_wide_gray_values(img))
    return HeightMap.from_surface(decode(data))


def load_heightmap(path):
    """Read an image file into a :class:`HeightMap`."""
    heightmap = decode_heightmap(_read_file(path))
    log.info("Loaded heightmap %s (%dx%d)", path, heightmap.width, heightmap.height)
    return heightmap
