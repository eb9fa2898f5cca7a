"""
Shared helpers for the layer_builder test modules.

Each test module can be run directly (``python tests/test_surface.py``) or
collected by pytest.
"""

import os
import sys
import traceback

# Ensure the project root is on the path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from layer_builder.surface import Color, PixelSurface

RED = Color.from_hex('#FF0000')
GREEN = Color.from_hex('#00FF00')
BLUE = Color.from_hex('#0000FF')
WHITE = Color.from_hex('#FFFFFF')
BLACK = Color.from_hex('#000000')
CLEAR = Color.from_hex('#00000000')


def solid(width, height, color):
    """Surface of the given size filled with *color*."""
    return PixelSurface(width, height).fill(color)


def surface_from_rows(rows):
    """Build a surface from a list of rows of :class:`Color`."""
    surface = PixelSurface(len(rows[0]), len(rows))
    for y, row in enumerate(rows):
        for x, color in enumerate(row):
            surface.set(x, y, color)
    return surface


class ScriptedRandom(object):
    """Random source that replays a fixed list of draws."""

    def __init__(self, draws):
        self.draws = list(draws)
        self.used = 0

    def next_u32(self):
        if self.used >= len(self.draws):
            raise AssertionError("random source exhausted after {} draws".format(self.used))
        value = self.draws[self.used]
        self.used += 1
        return value


# ---------------------------------------------------------------------------
# Script-style runner
# ---------------------------------------------------------------------------

def run_tests(title, namespace):
    """
    Run every ``test_*`` function in *namespace*, in definition order.

    Returns:
        0 when every test passed, 1 otherwise.
    """
    passed = 0
    errors = []

    print("=" * 70)
    print(title)
    print("=" * 70)

    for name, fn in list(namespace.items()):
        if not name.startswith('test_') or not callable(fn):
            continue
        try:
            fn()
            passed += 1
            print("  PASS  {}".format(name))
        except Exception as e:
            errors.append((name, e))
            print("  FAIL  {} -- {}".format(name, e))
            traceback.print_exc()

    print("\n" + "=" * 70)
    print("Results: {} passed, {} failed".format(passed, len(errors)))
    if errors:
        print("\nFailures:")
        for name, err in errors:
            print("  {} -- {}".format(name, err))
    print("=" * 70)
    return 0 if not errors else 1
