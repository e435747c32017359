"""
Image Decoder
=============

Dedicated module for decoding JPEG files into RasterFrames.

Design Rules:
    - This is the ONLY place in the codebase that decodes images
    - Validates shape and dtype
    - Fails fast on corrupt input with ImageDecodeError
    - Grayscale by default; native channel layout on request
"""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from framewalk.errors import ImageDecodeError
from framewalk.models.frame import PixelFormat, RasterFrame


logger = logging.getLogger(__name__)


# OpenCV converts CMYK JPEGs to BGR itself, so a 4-channel result is
# usually BGRA. Every 4-channel layout maps to the unsupported CMYK32.
_FORMAT_BY_CHANNELS = {
    1: PixelFormat.GRAYSCALE8,
    3: PixelFormat.RGB24,
    4: PixelFormat.CMYK32,
}


def decode_image(
    data: bytes,
    identity: str = "<memory>",
    force_grayscale: bool = True,
) -> RasterFrame:
    """
    Decode an encoded image to a RasterFrame.

    Args:
        data: Encoded image bytes (JPEG, or anything OpenCV reads)
        identity: Provenance label stored on the frame
        force_grayscale: Convert to GRAYSCALE8 while decoding. When False
            the native layout is kept (1 -> GRAYSCALE8, 3 -> RGB24,
            any 4-channel image such as BGRA -> CMYK32, which no later
            stage accepts)

    Returns:
        RasterFrame with uint8 pixels

    Raises:
        ImageDecodeError: If decoding fails or the image is invalid
    """
    if not data:
        raise ImageDecodeError(f"Failed to decode {identity}: empty input")

    try:
        nparr = np.frombuffer(data, np.uint8)
        flags = cv2.IMREAD_GRAYSCALE if force_grayscale else cv2.IMREAD_UNCHANGED
        image = cv2.imdecode(nparr, flags)
    except cv2.error as e:
        raise ImageDecodeError(f"Failed to decode {identity}: {e}") from e

    if image is None:
        raise ImageDecodeError(
            f"Failed to decode {identity}: cv2.imdecode returned None"
        )

    # Validate dtype
    if image.dtype != np.uint8:
        raise ImageDecodeError(f"Invalid dtype for {identity}: {image.dtype}")

    # Validate shape
    if image.ndim == 2:
        channels = 1
    elif image.ndim == 3:
        channels = image.shape[2]
    else:
        raise ImageDecodeError(f"Invalid image shape for {identity}: {image.shape}")

    pixel_format = _FORMAT_BY_CHANNELS.get(channels)
    if pixel_format is None:
        raise ImageDecodeError(
            f"Unsupported channel count for {identity}: {channels}"
        )

    if channels == 4:
        logger.debug(
            f"{identity} decoded with 4 channels (BGRA or CMYK), labelled CMYK32"
        )

    if channels == 1 and image.ndim == 3:
        image = image[:, :, 0]
    elif pixel_format == PixelFormat.RGB24:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

    height, width = image.shape[:2]
    return RasterFrame(
        identity=identity,
        width=width,
        height=height,
        pixel_format=pixel_format,
        pixels=image,
    )


def decode_file(
    path: Union[str, Path],
    force_grayscale: bool = True,
) -> RasterFrame:
    """
    Read and decode one image file.

    Args:
        path: Image file path
        force_grayscale: See decode_image

    Returns:
        RasterFrame whose identity is the file path

    Raises:
        ImageDecodeError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageDecodeError(f"Cannot read {path}: {e}") from e

    return decode_image(data, identity=str(path), force_grayscale=force_grayscale)
