"""
Sparse spatial kernels for convolution-style sampling.

A :class:`Kernel` maps integer offsets ``(dx, dy)`` to weights.  Only
non-zero weights are stored, so wide kernels with long, negligible tails
stay small.  :meth:`Kernel.apply` densifies the kernel and hands the work
to SciPy.
"""

import math
import logging

import numpy as np
from scipy.ndimage import correlate

from . import config as DEFAULTS

log = logging.getLogger(__name__)


class Kernel(object):
    """Sparse offset -> weight mapping."""

    __slots__ = ('_values',)

    def __init__(self, values=None):
        self._values = {}
        if values:
            for offset, weight in dict(values).items():
                self[offset] = weight

    @classmethod
    def gaussian(cls, sd):
        """
        Build a 2-D Gaussian kernel with standard deviation *sd*.

        Weights follow ``exp(-(x^2 + y^2) / (2 sd^2)) / (2 pi sd^2)`` over
        the square of radius ``ceil(3 * sd)``; weights below
        ``KERNEL_MINIMUM_VALUE`` are dropped.

        Raises:
            ValueError: If *sd* is not positive.
        """
        if not sd > 0:
            raise ValueError("Standard deviation must be positive, got {}".format(sd))

        kernel = cls()
        radius = int(math.ceil(DEFAULTS.GAUSSIAN_RADIUS_SD * sd))
        scale = 1.0 / (2.0 * math.pi * sd * sd)

        for x in range(-radius, radius + 1):
            for y in range(-radius, radius + 1):
                v = scale * math.exp(-(x * x + y * y) / (2.0 * sd * sd))
                if v < DEFAULTS.KERNEL_MINIMUM_VALUE:
                    continue
                kernel[(x, y)] = v

        log.debug("Gaussian kernel sd=%.3f: %d weights, radius %d",
                  sd, len(kernel), radius)
        return kernel

    def value_at(self, offset):
        """Weight at *offset*, 0.0 when the offset is not stored."""
        return self._values.get(_offset(offset), 0.0)

    def __getitem__(self, offset):
        return self.value_at(offset)

    def __setitem__(self, offset, weight):
        self._values[_offset(offset)] = float(weight)

    def __contains__(self, offset):
        return _offset(offset) in self._values

    def __len__(self):
        return len(self._values)

    def pairs(self):
        """Return ``[((dx, dy), weight), ...]`` sorted by offset."""
        return sorted(self._values.items())

    @property
    def radius(self):
        """Largest absolute offset on either axis (0 for an empty kernel)."""
        if not self._values:
            return 0
        return max(max(abs(dx), abs(dy)) for dx, dy in self._values)

    def total(self):
        return sum(self._values.values())

    def normalised(self):
        """Return a copy whose weights sum to 1."""
        total = self.total()
        if total == 0:
            raise ValueError("Cannot normalise a kernel with zero total weight")
        return Kernel(dict((p, w / total) for p, w in self._values.items()))

    def to_array(self):
        """Dense ``(2r+1, 2r+1)`` weight array indexed ``[dy + r, dx + r]``."""
        r = self.radius
        dense = np.zeros((2 * r + 1, 2 * r + 1), dtype=np.float64)
        for (dx, dy), w in self._values.items():
            dense[dy + r, dx + r] = w
        return dense

    def apply(self, array):
        """
        Sample *array* through the kernel.

        ``out[y, x] = sum(w * array[y + dy, x + dx])``, clamping reads at
        the edges.  2-D arrays are sampled directly; 3-D arrays are sampled
        channel by channel.

        Returns:
            ``float64`` array of the same shape.
        """
        arr = np.asarray(array, dtype=np.float64)
        weights = self.to_array()
        if arr.ndim == 3:
            weights = weights[..., np.newaxis]
        elif arr.ndim != 2:
            raise ValueError("Expected a 2-D or 3-D array, got {}-D".format(arr.ndim))
        return correlate(arr, weights, mode='nearest')

    def __repr__(self):
        return "Kernel({} weights, radius {})".format(len(self), self.radius)


def _offset(offset):
    dx, dy = offset
    return (int(dx), int(dy))
