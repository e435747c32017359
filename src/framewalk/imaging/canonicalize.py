"""
Canonicalizer
=============

Nearest-neighbor resampling to the run's reference dimensions.

Every frame in the candidate pool passes through here so that the
distance metric only ever compares frames of identical size.

Sampling Rule:
    sx = round(dx / dst_width * src_width), clamped to src_width - 1
    sy = round(dy / dst_height * src_height), clamped to src_height - 1

Rounding is half away from zero and done in exact integer arithmetic,
so identical inputs yield identical bytes on every platform.
"""

import logging

import numpy as np

from framewalk.errors import UnsupportedFormatError
from framewalk.models.frame import CanonicalFrame, PixelFormat, RasterFrame


logger = logging.getLogger(__name__)


def source_indices(dst_size: int, src_size: int) -> np.ndarray:
    """
    Map each destination coordinate to its nearest source coordinate.

    Args:
        dst_size: Number of destination samples along the axis
        src_size: Number of source samples along the axis

    Returns:
        int64 array of length dst_size with values in [0, src_size - 1]

    Formula:
        round(d * src / dst) == (2 * d * src + dst) // (2 * dst)
    """
    dst = np.arange(dst_size, dtype=np.int64)
    idx = (2 * dst * src_size + dst_size) // (2 * dst_size)
    return np.minimum(idx, src_size - 1)


def canonicalize(frame: RasterFrame, width: int, height: int) -> CanonicalFrame:
    """
    Resample a frame to exactly (width, height).

    Frames already at the target size are returned unchanged, sharing
    their pixel buffer.

    Args:
        frame: Source frame
        width: Target width in pixels
        height: Target height in pixels

    Returns:
        CanonicalFrame with the target dimensions

    Raises:
        ValueError: If the target dimensions are not positive
        UnsupportedFormatError: If resampling is needed and the frame is
            not GRAYSCALE8
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Target dimensions must be positive, got {width}x{height}")

    if frame.dimensions == (width, height):
        return CanonicalFrame.wrap(frame)

    if frame.pixel_format != PixelFormat.GRAYSCALE8:
        raise UnsupportedFormatError(
            f"Cannot resample {frame.identity!r} from {frame.width}x{frame.height} "
            f"to {width}x{height}: format {frame.pixel_format.value} is not GRAYSCALE8"
        )

    xs = source_indices(width, frame.width)
    ys = source_indices(height, frame.height)
    resampled = frame.pixels[ys[:, None], xs[None, :]]

    logger.debug(
        f"Resampled {frame.identity}: {frame.width}x{frame.height} -> {width}x{height}"
    )

    return CanonicalFrame(
        identity=frame.identity,
        width=width,
        height=height,
        pixel_format=PixelFormat.GRAYSCALE8,
        pixels=resampled,
    )
