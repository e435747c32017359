"""
Imaging Module
==============

Pixel-level helpers around the frame selector.

This module provides:
    - JPEG decoding into RasterFrames (OpenCV)
    - Nearest-neighbor canonicalization to the reference size
    - The fixed grayscale output palette
"""

from framewalk.imaging.canonicalize import canonicalize
from framewalk.imaging.decoder import decode_file, decode_image
from framewalk.imaging.palette import flatten_palette, grayscale_palette

__all__ = [
    "canonicalize",
    "decode_file",
    "decode_image",
    "flatten_palette",
    "grayscale_palette",
]
