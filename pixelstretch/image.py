"""
Image buffer I/O at the boundary of the stretch pipeline.

The pipeline works on ``(H, W, 4)`` uint8 numpy arrays (RGBA8). This module
converts the inputs a caller typically holds (file paths, encoded bytes,
Pillow images, arrays with 1/3/4 channels) into that layout and encodes the
rendered result as PNG.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image as PILImage

from .config import settings
from .exceptions import ImageSizeError

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, bytes, bytearray, PILImage.Image, np.ndarray]


def validate_image(image: np.ndarray) -> np.ndarray:
    """Check that ``image`` is a non-empty RGBA8 buffer within the size limit.

    :param image: Candidate buffer
    :returns: The same array
    :raises ImageSizeError: For a malformed, zero-sized or oversized buffer
    """
    if not isinstance(image, np.ndarray):
        raise ImageSizeError(f"Expected numpy array, got {type(image).__name__}")
    if image.ndim != 3 or image.shape[2] != 4 or image.dtype != np.uint8:
        raise ImageSizeError(
            f"Expected uint8 image (H, W, 4), got shape {image.shape} dtype {image.dtype}")
    height, width = image.shape[:2]
    if width == 0 or height == 0:
        raise ImageSizeError(f"Image must have non-zero size, got {width}x{height}")
    if width * height > settings.MAX_IMAGE_PIXELS:
        raise ImageSizeError(
            f"Image of {width}x{height} exceeds the limit of {settings.MAX_IMAGE_PIXELS} pixels")
    return image


def _array_to_rgba(array: np.ndarray) -> np.ndarray:
    if array.dtype != np.uint8:
        raise ImageSizeError(f"Expected uint8 pixel data, got {array.dtype}")
    if array.ndim == 2:
        array = array[:, :, np.newaxis]
    if array.ndim != 3 or array.shape[2] not in (1, 3, 4):
        raise ImageSizeError(f"Expected image (H, W, 1|3|4), got shape {array.shape}")

    channels = array.shape[2]
    if channels == 4:
        return np.ascontiguousarray(array)
    rgb = np.repeat(array, 3, axis=2) if channels == 1 else array
    alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=2)


def load_image(source: ImageSource) -> np.ndarray:
    """Decode ``source`` into a validated RGBA8 buffer.

    :param source: File path, encoded image bytes, Pillow image or numpy array
    :returns: uint8 array (H, W, 4)
    :raises ImageSizeError: If the decoded image trips Pillow's decompression
        bomb limit
    """
    if isinstance(source, np.ndarray):
        rgba = _array_to_rgba(source)
    elif isinstance(source, PILImage.Image):
        rgba = np.array(source.convert('RGBA'))
    else:
        if isinstance(source, (bytes, bytearray)):
            fp = io.BytesIO(source)
        elif isinstance(source, (str, Path)):
            fp = source
        else:
            raise TypeError(f"Unsupported image source: {type(source).__name__}")
        try:
            with PILImage.open(fp) as pil_image:
                rgba = np.array(pil_image.convert('RGBA'))
        except PILImage.DecompressionBombError as e:
            raise ImageSizeError(f"Refusing to decode image: {e}") from e
    logger.debug(f"Loaded image {rgba.shape[1]}x{rgba.shape[0]}")
    return validate_image(rgba)


def encode_png(image: np.ndarray) -> bytes:
    """Encode an RGBA8 buffer as a PNG byte stream."""
    validate_image(image)
    buffer = io.BytesIO()
    PILImage.fromarray(image).save(buffer, format='PNG')
    return buffer.getvalue()


def decode_png(data: bytes) -> np.ndarray:
    """Decode PNG bytes back into an RGBA8 buffer."""
    return load_image(bytes(data))


def export_png(image: np.ndarray, path: Union[str, Path, None] = None) -> Path:
    """Write the rendered buffer to disk as PNG.

    :param image: Rendered RGBA8 buffer
    :param path: Target file, defaults to the configured export file name
    :returns: The path written
    """
    target = Path(path) if path is not None else Path(settings.EXPORT_FILENAME)
    target.write_bytes(encode_png(image))
    logger.info(f"Exported {image.shape[1]}x{image.shape[0]} render to {target}")
    return target


__all__ = [
    'ImageSource',
    'validate_image',
    'load_image',
    'encode_png',
    'decode_png',
    'export_png',
]
