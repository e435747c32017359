"""
Output Module
=============

Animated container writers.
"""

from framewalk.output.gif_writer import GifContainerWriter, GifFrameEncoder

__all__ = [
    "GifContainerWriter",
    "GifFrameEncoder",
]
