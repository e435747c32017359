"""
Test Configuration
==================

Pytest fixtures and test configuration for FrameWalk.
"""

from pathlib import Path

import cv2
import numpy as np
import pytest

from framewalk.config import Settings
from framewalk.models.frame import CanonicalFrame, PixelFormat


def gray(values, width=None, height=None, identity="test"):
    """Build a GRAYSCALE8 CanonicalFrame from a flat list of byte values."""
    if width is None:
        width, height = len(values), 1
    return CanonicalFrame(
        identity=identity,
        width=width,
        height=height,
        pixel_format=PixelFormat.GRAYSCALE8,
        pixels=np.array(values, dtype=np.uint8),
    )


def write_png(path: Path, array: np.ndarray) -> Path:
    """Losslessly encode an array (gray, BGR or BGRA) to a PNG file."""
    ok, buf = cv2.imencode(".png", array)
    assert ok
    path.write_bytes(buf.tobytes())
    return path


@pytest.fixture
def make_gray():
    """Factory for grayscale canonical frames."""
    return gray


@pytest.fixture
def png_writer():
    """Factory writing numpy arrays as PNG files."""
    return write_png


@pytest.fixture
def corpus(tmp_path):
    """
    A reference image and an input directory of candidates.

    Layout:
        ref.png           4x4 all zeros
        cases/a.png       4x4, one pixel set to 1 (closest to ref)
        cases/b.png       4x4 all 10
        cases/c.png       8x8 all 3 (resampled to 4x4)
        cases/d.png       not an image
    """
    ref = write_png(tmp_path / "ref.png", np.zeros((4, 4), dtype=np.uint8))

    cases = tmp_path / "cases"
    cases.mkdir()

    near = np.zeros((4, 4), dtype=np.uint8)
    near[3, 3] = 1
    write_png(cases / "a.png", near)
    write_png(cases / "b.png", np.full((4, 4), 10, dtype=np.uint8))
    write_png(cases / "c.png", np.full((8, 8), 3, dtype=np.uint8))
    (cases / "d.png").write_bytes(b"this is not an image")

    return {"reference": ref, "input": cases, "output": tmp_path / "out.gif"}


@pytest.fixture
def png_settings():
    """Settings that read PNG candidates."""
    return Settings.model_validate({"decode": {"extensions": [".png"]}})
