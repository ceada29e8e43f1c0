# PixelStretch - Linear Stretch
"""
Linear stretch: resample a thin band of the source across the whole canvas.

This is a direct area resample rather than a per-pixel palette lookup. A
horizontal stretch takes a band ``slice_size`` pixels wide starting at the
slice column and scales it to the full width; a vertical stretch does the
same with a band of rows.

When the band runs past the image edge the source rectangle is clipped and
the destination rectangle shrinks by the same proportion, leaving the rest
of the layer transparent.
"""

from __future__ import annotations

import numpy as np
from PIL import Image as PILImage

from .compositing import validate_rgba
from .settings import Direction
from .slicing import slice_index


def source_rect(
    width: int,
    height: int,
    direction: Direction,
    position: float,
    size: float,
) -> tuple[float, float, float, float]:
    """Return the requested source band as ``(x, y, w, h)`` before clipping."""
    thickness = max(1.0, float(size))
    if Direction(direction) == Direction.HORIZONTAL:
        return float(slice_index(position, width)), 0.0, thickness, float(height)
    return 0.0, float(slice_index(position, height)), float(width), thickness


def linear_stretch(
    image: np.ndarray,
    direction: Direction,
    position: float,
    size: float,
) -> np.ndarray:
    """Stretch a band of ``image`` over a new layer of the same size.

    :param image: uint8 source (H, W, 4)
    :param direction: Stretch direction
    :param position: Slice position in percent (0-100)
    :param size: Band thickness in pixels
    :returns: New uint8 layer (H, W, 4)
    """
    validate_rgba(image)
    height, width = image.shape[:2]
    sx, sy, sw, sh = source_rect(width, height, direction, position, size)

    # Clip the source to the image, scale the destination proportionally
    cw = min(sw, width - sx)
    ch = min(sh, height - sy)
    dest_w = min(width, max(1, int(round(width * cw / sw))))
    dest_h = min(height, max(1, int(round(height * ch / sh))))

    stretched = PILImage.fromarray(image).resize(
        (dest_w, dest_h),
        resample=PILImage.Resampling.BICUBIC,
        box=(sx, sy, sx + cw, sy + ch),
    )

    layer = np.zeros_like(image)
    layer[:dest_h, :dest_w] = np.asarray(stretched)
    return layer


__all__ = ['source_rect', 'linear_stretch']
