"""
Imaging Tests
=============

Tests for the decoder and the output palette.
"""

import cv2
import numpy as np
import pytest

from framewalk.errors import ImageDecodeError
from framewalk.imaging.decoder import decode_file, decode_image
from framewalk.imaging.palette import PALETTE_SIZE, flatten_palette, grayscale_palette
from framewalk.models.frame import PixelFormat


def _encode(array, ext=".png"):
    ok, buf = cv2.imencode(ext, array)
    assert ok
    return buf.tobytes()


class TestPalette:
    """Tests for the grayscale palette."""

    def test_size(self):
        """Verify the palette has 256 entries."""
        assert len(grayscale_palette()) == PALETTE_SIZE == 256

    def test_entries_are_gray_levels(self):
        """Verify entry i is (i, i, i)."""
        palette = grayscale_palette()
        assert palette[0] == (0, 0, 0)
        assert palette[128] == (128, 128, 128)
        assert palette[255] == (255, 255, 255)

    def test_flatten(self):
        """Verify the flat form Pillow expects."""
        flat = flatten_palette(grayscale_palette())
        assert len(flat) == 768
        assert flat[3:6] == [1, 1, 1]


class TestDecoder:
    """Tests for decode_image and decode_file."""

    def test_grayscale_png_exact(self):
        """Verify lossless grayscale input decodes byte for byte."""
        source = np.arange(12, dtype=np.uint8).reshape(3, 4)
        frame = decode_image(_encode(source), identity="g.png")

        assert frame.pixel_format == PixelFormat.GRAYSCALE8
        assert frame.dimensions == (4, 3)
        assert frame.identity == "g.png"
        np.testing.assert_array_equal(frame.pixels, source)

    def test_jpeg_dimensions(self):
        """Verify JPEG input is decoded with its dimensions."""
        source = np.full((8, 16, 3), 128, dtype=np.uint8)
        frame = decode_image(_encode(source, ".jpg"))

        assert frame.dimensions == (16, 8)
        assert frame.pixel_format == PixelFormat.GRAYSCALE8

    def test_color_forced_to_grayscale(self):
        """Verify color input becomes GRAYSCALE8 by default."""
        source = np.zeros((2, 2, 3), dtype=np.uint8)
        frame = decode_image(_encode(source))
        assert frame.pixel_format == PixelFormat.GRAYSCALE8

    def test_native_color_is_rgb(self):
        """Verify native decoding reorders OpenCV's BGR to RGB."""
        bgr = np.zeros((1, 1, 3), dtype=np.uint8)
        bgr[0, 0] = (255, 0, 0)  # blue
        frame = decode_image(_encode(bgr), force_grayscale=False)

        assert frame.pixel_format == PixelFormat.RGB24
        assert frame.pixels[0, 0].tolist() == [0, 0, 255]

    def test_native_grayscale(self):
        """Verify native decoding keeps single-channel images grayscale."""
        frame = decode_image(_encode(np.zeros((2, 2), dtype=np.uint8)), force_grayscale=False)
        assert frame.pixel_format == PixelFormat.GRAYSCALE8

    def test_four_channels(self):
        """Verify four-channel images are labelled CMYK32."""
        source = np.zeros((2, 2, 4), dtype=np.uint8)
        frame = decode_image(_encode(source), force_grayscale=False)
        assert frame.pixel_format == PixelFormat.CMYK32

    def test_garbage_rejected(self):
        """Verify non-image bytes raise ImageDecodeError."""
        with pytest.raises(ImageDecodeError):
            decode_image(b"definitely not a jpeg")

    def test_truncated_jpeg_rejected(self):
        """Verify a JPEG cut after its header is rejected."""
        data = _encode(np.zeros((16, 16), dtype=np.uint8), ".jpg")
        with pytest.raises(ImageDecodeError):
            decode_image(data[:20])

    def test_empty_rejected(self):
        """Verify empty input raises ImageDecodeError."""
        with pytest.raises(ImageDecodeError):
            decode_image(b"")

    def test_decode_file(self, tmp_path):
        """Verify files are decoded with their path as identity."""
        path = tmp_path / "frame.png"
        path.write_bytes(_encode(np.zeros((2, 3), dtype=np.uint8)))

        frame = decode_file(path)

        assert frame.identity == str(path)
        assert frame.dimensions == (3, 2)

    def test_missing_file(self, tmp_path):
        """Verify unreadable files raise ImageDecodeError."""
        with pytest.raises(ImageDecodeError):
            decode_file(tmp_path / "missing.jpg")
