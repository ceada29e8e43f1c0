# PixelStretch - Coordinate Mapping
"""
Coordinate mapping for the spiral and geometric stretch modes.

Every destination pixel ``(x, y)`` is turned into an index into the sampled
palette (see :mod:`pixelstretch.slicing`). The offset from the origin
``(cx, cy) = (origin_x% * W, origin_y% * H)`` drives one of two families:

- **spiral**: radius plus a twist proportional to the polar angle, walked
  back and forth over the palette (mirrored wrap, no seam).
- **geometric**: a concentric distance field whose iso-lines approximate a
  shape; the palette repeats along each contour (hard wrap).

The shape formulas are visual approximations, not exact signed distance
functions, and are kept as they are so renders stay comparable.

Remainders use truncated division (the sign follows the dividend) and every
index is clamped to ``[0, L - 1]`` before the palette lookup, so negative
distances land on the first palette entry.

The index field is computed with vectorized numpy over row bands. Bands are
independent, so ``workers > 1`` shards them over a thread pool; the result
is identical for any worker count.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .compositing import validate_rgba
from .settings import Direction, GeometricShape, StretchMode, StretchSettings
from .slicing import sample_slice

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi

# Pentagon sector width
PENTAGON_SEGMENT = TWO_PI / 5


def spiral_positions(dx: np.ndarray, dy: np.ndarray, tightness: float) -> np.ndarray:
    """Continuous palette position for the spiral mode.

    ``dist + normalized_angle * tightness * 50`` with the polar angle
    normalized to ``[0, 1)``.
    """
    dist = np.sqrt(dx * dx + dy * dy)
    normalized_angle = (np.arctan2(dy, dx) + math.pi) / TWO_PI
    twist = tightness * 50
    return dist + normalized_angle * twist


def shape_distance(
    shape: GeometricShape,
    dx: np.ndarray,
    dy: np.ndarray,
    direction: Direction = Direction.HORIZONTAL,
) -> np.ndarray:
    """Concentric distance field of a geometric shape.

    Args:
        shape: Contour shape
        dx: Horizontal offset from the origin
        dy: Vertical offset from the origin
        direction: Orientation of the triangle; other shapes ignore it

    Returns:
        Float array with the same shape as ``dx``
    """
    shape = GeometricShape(shape)
    r = np.sqrt(dx * dx + dy * dy)

    if shape == GeometricShape.CIRCLE:
        return r
    elif shape == GeometricShape.SQUARE:
        return np.maximum(np.abs(dx), np.abs(dy))
    elif shape == GeometricShape.TRIANGLE:
        if Direction(direction) == Direction.VERTICAL:
            return np.maximum(np.abs(dy) * 0.866025 + dx * 0.5, -dx)
        return np.maximum(np.abs(dx) * 0.866025 + dy * 0.5, -dy)
    elif shape == GeometricShape.PENTAGON:
        ang = np.arctan2(dy, dx) + math.pi / 2
        local_ang = np.abs(np.fmod(ang, PENTAGON_SEGMENT) - PENTAGON_SEGMENT / 2)
        return r * np.cos(local_ang)
    elif shape == GeometricShape.STAR:
        return r * (1 + 0.3 * np.cos(5 * np.arctan2(dy, dx)))
    elif shape == GeometricShape.HEART:
        # y axis flipped so the heart points down
        angle = np.arctan2(-dy, dx)
        return r - r * 0.4 * np.sin(angle) * np.sqrt(np.abs(np.cos(angle)))
    elif shape == GeometricShape.HYPNOTIC:
        return r + 20 * np.sin(r / 20)
    raise ValueError(f"Unsupported geometric shape: {shape}")


def spiral_indices(positions: np.ndarray, length: int) -> np.ndarray:
    """Mirrored wrap: walk the palette forward, then backward, and repeat."""
    idx = np.fmod(np.floor(positions), 2 * length)
    return np.where(idx >= length, 2 * length - idx - 1, idx)


def geometric_indices(distances: np.ndarray, length: int) -> np.ndarray:
    """Hard wrap of a distance field onto the palette."""
    return np.fmod(np.floor(distances), length)


def _band_indices(
    rows: np.ndarray,
    width: int,
    cx: float,
    cy: float,
    length: int,
    mode: StretchMode,
    spiral_tightness: float,
    shape: GeometricShape,
    direction: Direction,
) -> np.ndarray:
    dx = np.arange(width, dtype=np.float64)[np.newaxis, :] - cx
    dy = rows.astype(np.float64)[:, np.newaxis] - cy
    dx, dy = np.broadcast_arrays(dx, dy)

    if mode == StretchMode.SPIRAL:
        idx = spiral_indices(spiral_positions(dx, dy, spiral_tightness), length)
    else:
        idx = geometric_indices(shape_distance(shape, dx, dy, direction), length)
    return np.clip(idx, 0, length - 1).astype(np.intp)


def compute_indices(
    width: int,
    height: int,
    length: int,
    mode: StretchMode,
    origin_x: float = 50.0,
    origin_y: float = 50.0,
    spiral_tightness: float = 0.0,
    shape: GeometricShape = GeometricShape.CIRCLE,
    direction: Direction = Direction.HORIZONTAL,
    workers: int = 1,
) -> np.ndarray:
    """Compute the palette index of every destination pixel.

    Args:
        width: Destination width
        height: Destination height
        length: Palette length ``L``
        mode: ``spiral`` or ``geometric``
        origin_x: Origin x in percent of the width
        origin_y: Origin y in percent of the height
        spiral_tightness: Twist factor (spiral mode)
        shape: Contour shape (geometric mode)
        direction: Triangle orientation (geometric mode)
        workers: Number of row bands computed in parallel

    Returns:
        intp array (H, W) with values in ``[0, length - 1]``
    """
    mode = StretchMode(mode)
    if mode == StretchMode.LINEAR:
        raise ValueError("Linear stretch does not use coordinate mapping")
    if length <= 0:
        raise ValueError("Palette must contain at least one sample")

    cx = origin_x / 100.0 * width
    cy = origin_y / 100.0 * height
    shape = GeometricShape(shape)
    direction = Direction(direction)

    def run(rows: np.ndarray) -> np.ndarray:
        return _band_indices(rows, width, cx, cy, length, mode, spiral_tightness, shape, direction)

    workers = max(1, min(int(workers), height))
    if workers == 1:
        return run(np.arange(height))

    bands = np.array_split(np.arange(height), workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        parts = list(pool.map(run, bands))
    return np.concatenate(parts, axis=0)


def map_palette(palette: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Look up palette colours for an index field.

    Indices are clamped again here so an out-of-range value can never reach
    the array access.
    """
    if palette.ndim != 2 or palette.shape[1] != 4 or len(palette) == 0:
        raise ValueError(f"Expected non-empty palette (L, 4), got shape {palette.shape}")
    safe = np.clip(indices, 0, len(palette) - 1)
    return palette[safe]


def algorithmic_stretch(
    image: np.ndarray,
    settings: StretchSettings,
    workers: int = 1,
) -> np.ndarray:
    """Build the effect layer for the spiral and geometric modes.

    :param image: uint8 source (H, W, 4)
    :param settings: Render settings
    :param workers: Number of row bands computed in parallel
    :returns: New uint8 layer (H, W, 4)
    """
    validate_rgba(image)
    height, width = image.shape[:2]
    palette = sample_slice(image, settings.direction, settings.slice_position)
    indices = compute_indices(
        width,
        height,
        len(palette),
        settings.stretch_mode,
        origin_x=settings.origin_x,
        origin_y=settings.origin_y,
        spiral_tightness=settings.spiral_tightness,
        shape=settings.geometric_shape,
        direction=settings.direction,
        workers=workers,
    )
    logger.debug(f"Mapped {width}x{height} pixels onto a palette of {len(palette)}")
    return map_palette(palette, indices)


__all__ = [
    'spiral_positions',
    'shape_distance',
    'spiral_indices',
    'geometric_indices',
    'compute_indices',
    'map_palette',
    'algorithmic_stretch',
]
