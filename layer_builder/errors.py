"""
Error taxonomy for layer generation.

Every error raised on purpose by the package derives from
:class:`LayerBuilderError` so the pipeline can report a failing layer
without swallowing unrelated bugs.  The contract-violation errors also
derive from the matching builtin (``IndexError`` / ``ValueError``) so
callers that only know the builtins still catch them.
"""


class LayerBuilderError(Exception):
    """Base class for all layer builder errors."""


class OutOfBoundsError(LayerBuilderError, IndexError):
    """A coordinate access fell outside the grid."""

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super(OutOfBoundsError, self).__init__(
            "Coordinate ({}, {}) is out of bounds for a {}x{} grid".format(
                x, y, width, height)
        )


class DimensionMismatchError(LayerBuilderError, ValueError):
    """Two surfaces of different size were combined."""

    def __init__(self, expected, actual):
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super(DimensionMismatchError, self).__init__(
            "Surface size {}x{} does not match {}x{}".format(
                self.actual[0], self.actual[1],
                self.expected[0], self.expected[1])
        )


class ConfigurationError(LayerBuilderError, ValueError):
    """A style, colour or number in a configuration document is invalid."""

    def __init__(self, field, message):
        self.field = field
        self.message = message
        super(ConfigurationError, self).__init__(
            "{}: {}".format(field, message) if field else message
        )


class DecodeError(LayerBuilderError):
    """A raster could not be read or decoded."""


class EncodeError(LayerBuilderError):
    """A surface could not be encoded or written."""
