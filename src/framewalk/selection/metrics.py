"""
Distance Metrics
================

Scalar dissimilarity between two canonical frames.

Only the relative order of distances is meaningful. Both metrics are
deterministic, symmetric and zero for identical frames.

Metrics:
    - Squared Error: sum((a[i] - b[i])^2) over every pixel (default)
    - Hamming: number of differing bits, sum(popcount(a[i] XOR b[i]))

Design Note:
    Accumulation happens in int64, which holds 255^2 per pixel for any
    image up to ~1.4e14 pixels. The result is returned as a Python int.
"""

import logging
from typing import Dict, Protocol

import numpy as np

from framewalk.errors import DimensionMismatchError, UnsupportedFormatError
from framewalk.models.frame import PixelFormat, RasterFrame


logger = logging.getLogger(__name__)


class DistanceMetric(Protocol):
    """
    Protocol for frame distance strategies.

    All implementations compare two GRAYSCALE8 frames of identical
    dimensions and return a non-negative integer.
    """

    name: str

    def distance(self, a: RasterFrame, b: RasterFrame) -> int:
        """
        Compute the dissimilarity of two frames.

        Args:
            a: First frame
            b: Second frame, same dimensions as `a`

        Returns:
            Non-negative distance
        """
        ...


def _check_comparable(a: RasterFrame, b: RasterFrame) -> None:
    """Fail fast on frames a metric cannot compare."""
    if a.dimensions != b.dimensions:
        raise DimensionMismatchError(
            f"Cannot compare {a.identity!r} ({a.width}x{a.height}) with "
            f"{b.identity!r} ({b.width}x{b.height})"
        )
    for frame in (a, b):
        if frame.pixel_format != PixelFormat.GRAYSCALE8:
            raise UnsupportedFormatError(
                f"Cannot measure {frame.identity!r}: format "
                f"{frame.pixel_format.value} is not GRAYSCALE8"
            )


class SquaredErrorMetric:
    """Sum of squared per-pixel differences."""

    name = "squared_error"

    def distance(self, a: RasterFrame, b: RasterFrame) -> int:
        _check_comparable(a, b)
        diff = a.pixels.astype(np.int64) - b.pixels.astype(np.int64)
        return int(np.sum(diff * diff, dtype=np.int64))


class HammingMetric:
    """Number of bit positions at which the two buffers differ."""

    name = "hamming"

    def distance(self, a: RasterFrame, b: RasterFrame) -> int:
        _check_comparable(a, b)
        xor = np.bitwise_xor(a.pixels, b.pixels)
        return int(np.unpackbits(xor).sum(dtype=np.int64))


_METRICS: Dict[str, type] = {
    SquaredErrorMetric.name: SquaredErrorMetric,
    HammingMetric.name: HammingMetric,
}


def available_metrics() -> list:
    """Names accepted by get_metric."""
    return sorted(_METRICS)


def get_metric(name: str) -> DistanceMetric:
    """
    Create a metric by its configuration name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return _METRICS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown distance metric: {name!r} "
            f"(expected one of {', '.join(available_metrics())})"
        ) from None
