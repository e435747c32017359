"""
GIF Container Writer
====================

Serializes the selected frames into a looping animated GIF with Pillow.

Every frame shares one global palette; frame bytes are written as
palette indices. The animation loops forever.

Usage:
    writer = GifContainerWriter("out.gif", frame_duration_ms=100)
    with writer.begin(width, height, grayscale_palette()) as encoder:
        for frame in frames:
            encoder.write_frame(frame.to_bytes())
"""

import logging
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from PIL import Image

from framewalk.errors import EncodeError
from framewalk.imaging.palette import PALETTE_SIZE, flatten_palette


logger = logging.getLogger(__name__)


class GifFrameEncoder:
    """
    Collects palette-indexed frames and writes them on finish().

    Obtained from GifContainerWriter.begin(). Pillow writes an animation
    in one call, so frames are buffered until finish().
    """

    def __init__(
        self,
        path: Path,
        width: int,
        height: int,
        palette: Sequence[Tuple[int, int, int]],
        frame_duration_ms: int,
    ) -> None:
        self.path = path
        self.width = width
        self.height = height
        self.frame_duration_ms = frame_duration_ms
        self._palette = flatten_palette(tuple(palette))
        self._frames: List[Image.Image] = []
        self._finished = False

    @property
    def frame_count(self) -> int:
        """Frames written so far."""
        return len(self._frames)

    def write_frame(self, pixels: bytes) -> None:
        """
        Append one frame of palette indices.

        Args:
            pixels: width * height bytes, row-major

        Raises:
            EncodeError: If the buffer has the wrong length or the
                encoder is already finished
        """
        if self._finished:
            raise EncodeError(f"Encoder for {self.path} is already finished")

        expected = self.width * self.height
        if len(pixels) != expected:
            raise EncodeError(
                f"Frame {len(self._frames)} has {len(pixels)} bytes, "
                f"expected {expected} ({self.width}x{self.height})"
            )

        image = Image.frombytes("P", (self.width, self.height), bytes(pixels))
        image.putpalette(self._palette)
        self._frames.append(image)

    def finish(self) -> Path:
        """
        Write the container to disk.

        Returns:
            Path of the written GIF

        Raises:
            EncodeError: If no frames were written or Pillow fails
        """
        if self._finished:
            return self.path
        self._finished = True

        if not self._frames:
            raise EncodeError(f"No frames written to {self.path}")

        first, rest = self._frames[0], self._frames[1:]
        try:
            first.save(
                str(self.path),
                format="GIF",
                save_all=True,
                append_images=rest,
                duration=self.frame_duration_ms,
                loop=0,  # 0 = infinite
                optimize=False,
            )
        except (OSError, ValueError) as e:
            raise EncodeError(f"Failed to write {self.path}: {e}") from e

        logger.info(f"Wrote {len(self._frames)} frames to {self.path}")
        return self.path

    def __enter__(self) -> "GifFrameEncoder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Partial output is never written
        if exc_type is None:
            self.finish()


class GifContainerWriter:
    """
    Factory for GIF encoders bound to one output path.

    Attributes:
        path: Output file
        frame_duration_ms: Display time of each frame
    """

    def __init__(self, path: Union[str, Path], frame_duration_ms: int = 100) -> None:
        if frame_duration_ms <= 0:
            raise ValueError(f"frame_duration_ms must be > 0, got {frame_duration_ms}")
        self.path = Path(path)
        self.frame_duration_ms = frame_duration_ms

    def begin(
        self,
        width: int,
        height: int,
        palette: Sequence[Tuple[int, int, int]],
    ) -> GifFrameEncoder:
        """
        Start a new animation.

        Raises:
            EncodeError: If the dimensions or palette are invalid
        """
        if width <= 0 or height <= 0:
            raise EncodeError(f"Invalid GIF dimensions {width}x{height}")
        if len(palette) != PALETTE_SIZE:
            raise EncodeError(
                f"Palette must have {PALETTE_SIZE} entries, got {len(palette)}"
            )
        return GifFrameEncoder(
            path=self.path,
            width=width,
            height=height,
            palette=palette,
            frame_duration_ms=self.frame_duration_ms,
        )
