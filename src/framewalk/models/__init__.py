"""
Data Models
===========

Typed data models for FrameWalk.

Models:
    Frame:
        - PixelFormat: Channel layouts (GRAYSCALE8, RGB24, CMYK32)
        - RasterFrame: One decoded image
        - CanonicalFrame: Frame at the run's reference dimensions

    Selection:
        - SelectionWeights: Local/global score weights
        - SelectionState: Working state of the greedy walk
        - SelectionResult: Ordered output plus counts
"""

from framewalk.models.frame import CanonicalFrame, PixelFormat, RasterFrame
from framewalk.models.selection import SelectionResult, SelectionState, SelectionWeights

__all__ = [
    # Frame
    "PixelFormat",
    "RasterFrame",
    "CanonicalFrame",
    # Selection
    "SelectionWeights",
    "SelectionState",
    "SelectionResult",
]
