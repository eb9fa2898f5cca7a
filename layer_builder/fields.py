"""
Field validators shared by the settings classes and the document loader.

Each validator either returns the cleaned value or raises
:class:`ConfigurationError` naming the offending field, so a bad document
is rejected before any layer is generated.
"""

import math
import numbers

from .errors import ConfigurationError
from .surface import Color


def require_int(field, value, minimum=None, maximum=None):
    """Return *value* as an int, checking the inclusive range."""
    # bool is an int subclass; "true" is never a valid count
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(field, "expected an integer, got {!r}".format(value))
    value = int(value)
    if minimum is not None and value < minimum:
        raise ConfigurationError(field, "must be >= {}, got {}".format(minimum, value))
    if maximum is not None and value > maximum:
        raise ConfigurationError(field, "must be <= {}, got {}".format(maximum, value))
    return value


def require_number(field, value, minimum=None, maximum=None):
    """Return *value* as a finite float, checking the inclusive range."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(field, "expected a number, got {!r}".format(value))
    value = float(value)
    if not math.isfinite(value):
        raise ConfigurationError(field, "must be finite, got {}".format(value))
    if minimum is not None and value < minimum:
        raise ConfigurationError(field, "must be >= {}, got {}".format(minimum, value))
    if maximum is not None and value > maximum:
        raise ConfigurationError(field, "must be <= {}, got {}".format(maximum, value))
    return value


def require_color(field, value):
    """Accept a :class:`Color` or parse a hex colour string."""
    if isinstance(value, Color):
        return value
    try:
        return Color.from_hex(value)
    except ValueError as e:
        raise ConfigurationError(field, str(e)) from e


def require_direction(field, value):
    """Return *value* (a 2-sequence of numbers) normalised to unit length."""
    try:
        x, y = value
    except (TypeError, ValueError):
        raise ConfigurationError(
            field, "expected a pair of numbers, got {!r}".format(value))
    x = require_number(field, x)
    y = require_number(field, y)
    length = math.hypot(x, y)
    if length == 0:
        raise ConfigurationError(field, "direction must not be the zero vector")
    return (x / length, y / length)


def require_string(field, value):
    if not isinstance(value, str) or not value:
        raise ConfigurationError(field, "expected a non-empty string, got {!r}".format(value))
    return value
