"""
GIF Writer Tests
================

Tests for the Pillow-backed container writer.
"""

import numpy as np
import pytest
from PIL import Image

from framewalk.errors import EncodeError
from framewalk.imaging.palette import grayscale_palette
from framewalk.output.gif_writer import GifContainerWriter


class TestGifContainerWriter:
    """Tests for GifContainerWriter and GifFrameEncoder."""

    def test_writes_looping_animation(self, tmp_path):
        """Verify frames, loop flag and pixel values survive a write."""
        path = tmp_path / "out.gif"
        first = bytes([0, 64, 128, 255])
        second = bytes([255, 128, 64, 0])

        writer = GifContainerWriter(path, frame_duration_ms=50)
        with writer.begin(2, 2, grayscale_palette()) as encoder:
            encoder.write_frame(first)
            encoder.write_frame(second)
            assert encoder.frame_count == 2

        with Image.open(path) as image:
            assert image.size == (2, 2)
            assert image.n_frames == 2
            assert image.info.get("loop") == 0
            pixels = np.asarray(image.convert("L"))

        np.testing.assert_array_equal(pixels, [[0, 64], [128, 255]])

    def test_wrong_frame_length(self, tmp_path):
        """Verify a buffer of the wrong size raises EncodeError."""
        encoder = GifContainerWriter(tmp_path / "out.gif").begin(2, 2, grayscale_palette())
        with pytest.raises(EncodeError):
            encoder.write_frame(bytes(3))

    def test_no_frames(self, tmp_path):
        """Verify finishing an empty animation raises EncodeError."""
        encoder = GifContainerWriter(tmp_path / "out.gif").begin(2, 2, grayscale_palette())
        with pytest.raises(EncodeError):
            encoder.finish()

    def test_write_after_finish(self, tmp_path):
        """Verify a finished encoder refuses more frames."""
        encoder = GifContainerWriter(tmp_path / "out.gif").begin(1, 1, grayscale_palette())
        encoder.write_frame(b"\x00")
        encoder.finish()
        with pytest.raises(EncodeError):
            encoder.write_frame(b"\x01")

    def test_bad_palette(self, tmp_path):
        """Verify the palette must have 256 entries."""
        writer = GifContainerWriter(tmp_path / "out.gif")
        with pytest.raises(EncodeError):
            writer.begin(2, 2, grayscale_palette()[:16])

    def test_bad_dimensions(self, tmp_path):
        """Verify non-positive dimensions are rejected."""
        with pytest.raises(EncodeError):
            GifContainerWriter(tmp_path / "out.gif").begin(0, 2, grayscale_palette())

    def test_unwritable_path(self, tmp_path):
        """Verify I/O failures surface as EncodeError."""
        writer = GifContainerWriter(tmp_path / "missing" / "out.gif")
        encoder = writer.begin(1, 1, grayscale_palette())
        encoder.write_frame(b"\x00")
        with pytest.raises(EncodeError):
            encoder.finish()

    def test_no_partial_output_on_error(self, tmp_path):
        """Verify nothing is written when the block raises."""
        path = tmp_path / "out.gif"
        with pytest.raises(RuntimeError):
            with GifContainerWriter(path).begin(1, 1, grayscale_palette()) as encoder:
                encoder.write_frame(b"\x00")
                raise RuntimeError("boom")

        assert not path.exists()

    def test_invalid_duration(self, tmp_path):
        """Verify frame duration must be positive."""
        with pytest.raises(ValueError):
            GifContainerWriter(tmp_path / "out.gif", frame_duration_ms=0)

    def test_identical_frames_merged(self, tmp_path):
        """Verify repeated frames collapse into one frame with the summed duration."""
        path = tmp_path / "out.gif"
        still = bytes([0, 0, 0, 0])
        moved = bytes([0, 0, 0, 255])

        with GifContainerWriter(path, frame_duration_ms=100).begin(
            2, 2, grayscale_palette()
        ) as encoder:
            for _ in range(3):
                encoder.write_frame(still)
            encoder.write_frame(moved)
            assert encoder.frame_count == 4

        with Image.open(path) as image:
            assert image.n_frames == 2
            assert image.info.get("duration") == 300
