"""Slice sampling: the 1-D palette every algorithmic stretch draws from."""

from __future__ import annotations

import math

import numpy as np

from .compositing import validate_rgba
from .settings import Direction


def slice_index(position: float, length: int) -> int:
    """Map a 0-100 percentage to a row/column index in ``[0, length - 1]``."""
    if length <= 0:
        return 0
    index = math.floor(position / 100.0 * (length - 1))
    return min(max(index, 0), length - 1)


def sample_slice(image: np.ndarray, direction: Direction, position: float) -> np.ndarray:
    """Extract the palette for a stretch.

    A horizontal stretch samples a vertical column (length H), a vertical
    stretch samples a horizontal row (length W).

    :param image: uint8 source (H, W, 4)
    :param direction: Stretch direction
    :param position: Slice position in percent (0-100)
    :returns: Contiguous uint8 array (L, 4)
    """
    validate_rgba(image)
    height, width = image.shape[:2]
    if Direction(direction) == Direction.HORIZONTAL:
        column = slice_index(position, width)
        palette = image[:, column, :] if width else image[:, :0, :].reshape(0, 4)
    else:
        row = slice_index(position, height)
        palette = image[row, :, :] if height else image[:0, :, :].reshape(0, 4)
    return np.ascontiguousarray(palette)


__all__ = ['slice_index', 'sample_slice']
