"""
FrameWalk
=========

Turns a directory of decoded JPEG images into one animated GIF.

A greedy walk picks and orders a bounded number of frames that stay
close to a reference image while changing as little as possible from
one frame to the next.

Components:
    - models: RasterFrame, CanonicalFrame and selection state
    - imaging: Decoding, canonicalization and the output palette
    - selection: Distance metrics, prefilters and the frame selector
    - output: GIF container writer
    - pipeline: One end-to-end run

Example:
    from framewalk.selection import select
    from framewalk.imaging import canonicalize, decode_file

    initial = canonicalize(decode_file("ref.jpg"), 64, 64)
    frames = select(initial, pool, cap=10)
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
