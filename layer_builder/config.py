# layer_builder/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
Fallback values used when a layer document does not set a field explicitly.

DO NOT MODIFY THIS FILE FOR A SPECIFIC MAP.
Put the values in the layer document instead.
================================================================================
"""

# --- Configuration document ---
DEFAULT_CONFIG_FILE = "layers.json"

# --- Region styles ---
# Colours are hex strings so they go through the same parser as user input.
DEFAULT_OUTLINE_COLOR = "#000000FF"
DEFAULT_OUTLINE_THICKNESS = 0
DEFAULT_GLYPH_DENSITY = 1       # percent of candidate anchors kept
DEFAULT_GLYPH_THRESHOLD = 100   # percent of the glyph footprint inside the region
DEFAULT_GLYPH_SEED = 52

# Extra spacing between candidate glyph anchors, in pixels.
GLYPH_OVERLAP_PREVENTION = 1

# --- Heightmaps ---
HEIGHT_MAX = 65535

# --- Contours ---
DEFAULT_LINE_DIVISIONS = 32
DEFAULT_LINE_COLOR = "#FF0000"
DEFAULT_BACKGROUND_COLOR = "#00000000"
DEFAULT_CLEANING_FACTOR = 2
MAX_CLEANING_FACTOR = 8  # a cell has at most 8 neighbours

# --- Shading ---
DEFAULT_LIGHT_DIRECTION = (1.0, 1.0)
DEFAULT_LIGHT_COLOR = "#FFFFFF"
DEFAULT_DARK_COLOR = "#000000"

# Standard deviation of the optional pre-blur; 0 disables it.
DEFAULT_SMOOTHING = 0.0
# Wider blurs build kernels too large to sample in reasonable time.
MAX_SMOOTHING = 50.0

# --- Spatial kernels ---
# Gaussian weights below this value are left out of the sparse kernel.
KERNEL_MINIMUM_VALUE = 0.0000001
# Gaussian kernels extend this many standard deviations from the centre.
GAUSSIAN_RADIUS_SD = 3.0
