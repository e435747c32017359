"""
Canonicalizer Tests
===================

Tests for nearest-neighbor resampling.
"""

import numpy as np
import pytest

from framewalk.errors import UnsupportedFormatError
from framewalk.imaging.canonicalize import canonicalize, source_indices
from framewalk.models.frame import CanonicalFrame, PixelFormat, RasterFrame


def _frame(values, width, height, pixel_format=PixelFormat.GRAYSCALE8):
    return RasterFrame.from_bytes("src", width, height, pixel_format, bytes(values))


class TestSourceIndices:
    """Tests for the coordinate mapping."""

    def test_upsample_clamps_to_last_index(self):
        """Verify rounding onto the upper bound is clamped."""
        # round(3 / 4 * 2) == 2, clamped to 1
        assert source_indices(4, 2).tolist() == [0, 1, 1, 1]

    def test_downsample(self):
        """Verify downsampling picks every other source pixel."""
        assert source_indices(2, 4).tolist() == [0, 2]

    def test_rounds_half_away_from_zero(self):
        """Verify 0.5 rounds up rather than to even."""
        # d=1: 1 / 4 * 2 = 0.5 -> 1
        assert source_indices(4, 2)[1] == 1
        # d=1: 1 / 2 * 5 = 2.5 -> 3
        assert source_indices(2, 5).tolist() == [0, 3]

    def test_same_size_is_identity(self):
        """Verify equal sizes map each index to itself."""
        assert source_indices(5, 5).tolist() == [0, 1, 2, 3, 4]


class TestCanonicalize:
    """Tests for canonicalize()."""

    def test_identity_fast_path(self):
        """Verify a frame at the target size comes back pixel-identical."""
        frame = _frame(range(6), 3, 2)
        result = canonicalize(frame, 3, 2)

        assert isinstance(result, CanonicalFrame)
        assert result.same_pixels(frame)
        assert result.pixels is frame.pixels

    def test_identity_fast_path_keeps_color(self):
        """Verify the fast path does not require grayscale."""
        frame = _frame(range(12), 2, 2, PixelFormat.RGB24)
        result = canonicalize(frame, 2, 2)
        assert result.pixel_format == PixelFormat.RGB24

    def test_upsample(self):
        """Verify a 2x2 frame expands by nearest neighbor."""
        frame = _frame([1, 2, 3, 4], 2, 2)
        result = canonicalize(frame, 4, 4)

        expected = np.array(
            [
                [1, 2, 2, 2],
                [3, 4, 4, 4],
                [3, 4, 4, 4],
                [3, 4, 4, 4],
            ],
            dtype=np.uint8,
        )
        assert result.dimensions == (4, 4)
        np.testing.assert_array_equal(result.pixels, expected)

    def test_downsample(self):
        """Verify a 4x4 frame shrinks by sampling."""
        frame = _frame(range(16), 4, 4)
        result = canonicalize(frame, 2, 2)

        np.testing.assert_array_equal(result.pixels, [[0, 2], [8, 10]])

    def test_non_uniform_scale(self):
        """Verify width and height are mapped independently."""
        frame = _frame(range(8), 4, 2)
        result = canonicalize(frame, 2, 1)

        assert result.dimensions == (2, 1)
        np.testing.assert_array_equal(result.pixels, [[0, 2]])

    def test_idempotent(self):
        """Verify canonicalizing twice equals canonicalizing once."""
        frame = _frame(range(15), 5, 3)
        once = canonicalize(frame, 4, 4)
        twice = canonicalize(once, 4, 4)

        assert twice.same_pixels(once)

    def test_deterministic(self):
        """Verify identical inputs give identical bytes."""
        frame = _frame([(i * 37) % 256 for i in range(35)], 7, 5)
        assert canonicalize(frame, 3, 9).to_bytes() == canonicalize(frame, 3, 9).to_bytes()

    def test_keeps_identity(self):
        """Verify provenance survives resampling."""
        frame = _frame([0, 0, 0, 0], 2, 2)
        assert canonicalize(frame, 1, 1).identity == "src"

    def test_color_resample_rejected(self):
        """Verify non-grayscale frames cannot be resampled."""
        frame = _frame(range(12), 2, 2, PixelFormat.RGB24)
        with pytest.raises(UnsupportedFormatError):
            canonicalize(frame, 4, 4)

    def test_cmyk_resample_rejected(self):
        """Verify CMYK frames cannot be resampled."""
        frame = _frame(range(16), 2, 2, PixelFormat.CMYK32)
        with pytest.raises(UnsupportedFormatError):
            canonicalize(frame, 1, 1)

    def test_invalid_target(self):
        """Verify non-positive targets are rejected."""
        frame = _frame([0], 1, 1)
        with pytest.raises(ValueError):
            canonicalize(frame, 0, 1)
