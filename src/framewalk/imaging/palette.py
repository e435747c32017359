"""
Palette Builder
===============

The single global color table shared by every frame of the output GIF.

Frame bytes are written as palette indices, so entry i must be gray
level i for the grayscale pixels to render unchanged.
"""

from typing import List, Tuple


PALETTE_SIZE = 256

RGB = Tuple[int, int, int]


def grayscale_palette() -> Tuple[RGB, ...]:
    """Return 256 entries where entry i is (i, i, i)."""
    return tuple((i, i, i) for i in range(PALETTE_SIZE))


def flatten_palette(palette: Tuple[RGB, ...]) -> List[int]:
    """Flatten [(r, g, b), ...] into [r, g, b, r, g, b, ...] for Pillow."""
    return [channel for entry in palette for channel in entry]
