"""
Frame Data Model
=================

Internal raster frame representation.

This module defines the typed frame classes passed between the decoder,
the canonicalizer and the frame selector.

Design Rules:
    - Frames are immutable (frozen dataclass, read-only pixel array)
    - Pixel buffer length always equals width * height * channels
    - identity is for diagnostics only, never for equality or ordering
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from framewalk.errors import FrameValidationError


class PixelFormat(str, Enum):
    """
    Pixel layouts a decoder can produce.

    Attributes:
        GRAYSCALE8: One 8-bit luma channel
        RGB24: Three 8-bit channels, red first
        CMYK32: Four 8-bit channels. Recognized but unsupported
    """

    GRAYSCALE8 = "GRAYSCALE8"
    RGB24 = "RGB24"
    CMYK32 = "CMYK32"

    @property
    def channels(self) -> int:
        """Bytes per pixel."""
        return _CHANNELS[self]


_CHANNELS = {
    PixelFormat.GRAYSCALE8: 1,
    PixelFormat.RGB24: 3,
    PixelFormat.CMYK32: 4,
}


@dataclass(frozen=True, slots=True, eq=False)
class RasterFrame:
    """
    One decoded image.

    The pixel buffer is stored as a read-only uint8 array of shape
    (height, width) for grayscale and (height, width, channels) otherwise.
    Row-major, top-to-bottom, left-to-right.

    Attributes:
        identity: Provenance label (usually the source path)
        width: Width in pixels
        height: Height in pixels
        pixel_format: Channel layout of the buffer
        pixels: uint8 pixel array
    """

    identity: str
    width: int
    height: int
    pixel_format: PixelFormat
    pixels: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        """Validate invariants and freeze the buffer."""
        if self.width <= 0 or self.height <= 0:
            raise FrameValidationError(
                f"Frame {self.identity!r} has non-positive dimensions "
                f"{self.width}x{self.height}"
            )

        pixels = np.asarray(self.pixels)
        if pixels.dtype != np.uint8:
            raise FrameValidationError(
                f"Frame {self.identity!r} has dtype {pixels.dtype}, expected uint8"
            )

        channels = self.pixel_format.channels
        expected = self.width * self.height * channels
        if pixels.size != expected:
            raise FrameValidationError(
                f"Frame {self.identity!r} has {pixels.size} bytes, expected "
                f"{expected} ({self.width}x{self.height}x{channels})"
            )

        if channels == 1:
            shape = (self.height, self.width)
        else:
            shape = (self.height, self.width, channels)
        if pixels.shape != shape:
            # Only flat buffers are reshaped
            if pixels.ndim != 1:
                raise FrameValidationError(
                    f"Frame {self.identity!r} has shape {pixels.shape}, expected "
                    f"{shape} or a flat buffer"
                )
            pixels = pixels.reshape(shape)
        # Read-only buffers are shared as-is; writable ones are copied
        # so the caller cannot mutate the frame afterwards.
        if pixels.flags.writeable:
            pixels = pixels.copy()
            pixels.setflags(write=False)

        object.__setattr__(self, "pixels", pixels)

    @classmethod
    def from_bytes(
        cls,
        identity: str,
        width: int,
        height: int,
        pixel_format: PixelFormat,
        data: bytes,
    ) -> "RasterFrame":
        """Build a frame from a flat row-major byte sequence."""
        return cls(
            identity=identity,
            width=width,
            height=height,
            pixel_format=pixel_format,
            pixels=np.frombuffer(bytes(data), dtype=np.uint8),
        )

    @property
    def dimensions(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    def to_bytes(self) -> bytes:
        """Flat row-major pixel buffer."""
        return self.pixels.tobytes()

    def same_pixels(self, other: "RasterFrame") -> bool:
        """True if dimensions, format and every byte match."""
        return (
            self.dimensions == other.dimensions
            and self.pixel_format == other.pixel_format
            and bool(np.array_equal(self.pixels, other.pixels))
        )

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixel buffer."""
        return (
            f"{type(self).__name__}(identity={self.identity!r}, "
            f"{self.width}x{self.height}, {self.pixel_format.value})"
        )


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class CanonicalFrame(RasterFrame):
    """
    Frame resampled to the run's reference dimensions.

    Produced only by the canonicalizer. Two canonical frames of one run
    can always be compared by a distance metric.
    """

    @classmethod
    def wrap(cls, frame: RasterFrame) -> "CanonicalFrame":
        """Promote a frame that already has the reference dimensions."""
        if isinstance(frame, CanonicalFrame):
            return frame
        return cls(
            identity=frame.identity,
            width=frame.width,
            height=frame.height,
            pixel_format=frame.pixel_format,
            pixels=frame.pixels,
        )
