"""
Error Types
===========

Exception hierarchy for FrameWalk.

Recoverable (per candidate, the frame is dropped and the run continues):
    - ImageDecodeError: malformed or unreadable source image
    - UnsupportedFormatError: frame cannot be resampled or measured

Fatal (the run aborts):
    - MissingReferenceFrameError: no usable reference frame
    - DimensionMismatchError: metric invoked on incompatible frames
    - EncodeError: GIF container could not be written
    - ConfigurationError: run configuration missing or invalid
    - SourceError: input directory cannot be listed
"""


class FrameWalkError(Exception):
    """Base class for all FrameWalk errors."""
    pass


class FrameValidationError(FrameWalkError, ValueError):
    """Raised when a pixel buffer does not match its declared shape."""
    pass


class ImageDecodeError(FrameWalkError):
    """Raised when image decoding fails."""
    pass


class UnsupportedFormatError(FrameWalkError):
    """Raised when an operation cannot handle a frame's pixel format."""
    pass


class DimensionMismatchError(FrameWalkError):
    """Raised when two frames of different dimensions are compared."""
    pass


class MissingReferenceFrameError(FrameWalkError):
    """Raised when the reference frame cannot be loaded."""
    pass


class EncodeError(FrameWalkError):
    """Raised when the output container cannot be written."""
    pass


class ConfigurationError(FrameWalkError):
    """Raised when the run configuration is missing or invalid."""
    pass


class SourceError(FrameWalkError):
    """Raised when the input directory cannot be enumerated."""
    pass
