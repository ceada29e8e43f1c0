# PixelStretch - Texture Overlays
"""
Procedural texture overlays drawn on top of the composited image.

Each texture simulates a print or video artifact. Line and dot patterns are
rasterized analytically into an anti-aliased coverage mask and painted with
a solid colour; the VHS and canvas textures composite whole layers.

| Texture | Pattern | Paint |
|---------|---------|-------|
| scanlines | horizontal bars, period ``max(2, 4s)``, thickness ``max(1, 2s)`` | black, ``0.5a`` |
| vhs | bars, period ``max(2, 3s)``, thickness ``max(1, s)`` + chromatic aberration | near black, ``0.3a`` |
| currency | 45 degree hatching, spacing ``max(3, 6s)``, width ``max(1, s)`` | black, ``0.6a`` |
| halftone | staggered dots, spacing ``max(4, 8s)``, radius ``0.35 * spacing`` | black, ``0.6a`` |
| linotype | horizontal bars, spacing ``max(4, 6s)``, thickness ``spacing / 2`` | black, ``0.5a`` |
| canvas | tiled random-luminance swatch, overlay blend | ``a`` |

``a`` is ``intensity / 100`` and ``s`` is the texture scale, never below 0.1.

Usage:
    from pixelstretch.textures import apply_texture

    result = apply_texture(image, 'halftone', intensity=60, scale=1.5)
"""

from __future__ import annotations

import logging
import math

import numpy as np

from .compositing import BlendMode, composite, fill_coverage, validate_rgba
from .config import settings
from .settings import TextureType

logger = logging.getLogger(__name__)

BLACK = (0, 0, 0)
VHS_LINE_COLOR = (10, 10, 10)
CANVAS_SWATCH_ALPHA = 100


# ============================================================================
# Coverage rasterizers
# ============================================================================

def band_coverage(height: int, step: float, thickness: float) -> np.ndarray:
    """Row coverage of horizontal bars ``[k * step, k * step + thickness)``.

    Uses the integral of the band pattern, so fractional band edges produce
    partial (anti-aliased) rows. Requires ``thickness <= step``.

    :returns: float32 array (H,) with values 0.0-1.0
    """
    edges = np.arange(height + 1, dtype=np.float64)
    k = np.floor(edges / step)
    covered = k * thickness + np.minimum(edges - k * step, thickness)
    return np.clip(np.diff(covered), 0.0, 1.0).astype(np.float32)


def _line_coverage(distance: np.ndarray, width: float) -> np.ndarray:
    return np.clip(width / 2 + 0.5 - distance, 0.0, 1.0)


def diagonal_coverage(height: int, width: int, step: float, line_width: float) -> np.ndarray:
    """Coverage of 45 degree strokes from ``(x, 0)`` to ``(x + H, H)``.

    Stroke origins start at ``x = -H`` and advance by ``step`` while
    ``x < W``. All strokes belong to one path, so overlapping coverage is a
    union rather than a sum.

    :returns: float32 array (H, W)
    """
    px = np.arange(width, dtype=np.float64)[np.newaxis, :] + 0.5
    py = np.arange(height, dtype=np.float64)[:, np.newaxis] + 0.5
    # Offset along the x axis from the first stroke
    u = px - py + height
    last = math.ceil((width + height) / step) - 1

    best = np.zeros((height, width), dtype=np.float64)
    base = np.floor(u / step)
    for n in (base, base + 1):
        exists = (n >= 0) & (n <= last)
        distance = np.abs(u - n * step) / math.sqrt(2)
        best = np.maximum(best, np.where(exists, _line_coverage(distance, line_width), 0.0))
    return best.astype(np.float32)


def dot_coverage(height: int, width: int, step: float, radius: float) -> np.ndarray:
    """Coverage of a brick-pattern dot grid.

    Row ``n`` has centres at ``y = n * step`` and
    ``x = -step + m * step + (n % 2) * step / 2``.

    :returns: float32 array (H, W)
    """
    px = np.arange(width, dtype=np.float64)[np.newaxis, :] + 0.5
    py = np.arange(height, dtype=np.float64)[:, np.newaxis] + 0.5
    rows = math.ceil(height / step)
    columns = math.ceil((width + step) / step)

    best = np.zeros((height, width), dtype=np.float64)
    base = np.floor(py / step)
    for n in (base, base + 1):
        exists = (n >= 0) & (n < rows)
        x_offset = np.mod(n, 2) * (step / 2)
        m = np.clip(np.rint((px + step - x_offset) / step), 0, columns - 1)
        cx = -step + m * step + x_offset
        cy = n * step
        distance = np.sqrt((px - cx) ** 2 + (py - cy) ** 2)
        coverage = np.clip(radius + 0.5 - distance, 0.0, 1.0)
        best = np.maximum(best, np.where(exists, coverage, 0.0))
    return best.astype(np.float32)


# ============================================================================
# Canvas swatch
# ============================================================================

def canvas_swatch(rng: np.random.Generator, size: int | None = None) -> np.ndarray:
    """Random-luminance swatch with a constant alpha of 100.

    :param rng: Random source
    :param size: Edge length, defaults to the configured swatch size
    :returns: uint8 array (size, size, 4)
    """
    size = size or settings.CANVAS_SWATCH_SIZE
    luminance = np.rint(rng.random((size, size)) * 255).astype(np.uint8)
    swatch = np.empty((size, size, 4), dtype=np.uint8)
    swatch[:, :, :3] = luminance[:, :, np.newaxis]
    swatch[:, :, 3] = CANVAS_SWATCH_ALPHA
    return swatch


def tile_swatch(swatch: np.ndarray, width: int, height: int, scale: float = 1.0) -> np.ndarray:
    """Repeat ``swatch`` over a ``width`` x ``height`` layer, scaled by ``scale``.

    Sampling is nearest-neighbour at pixel centres.
    """
    tile_h, tile_w = swatch.shape[:2]
    sx = np.floor((np.arange(width) + 0.5) / scale).astype(np.intp) % tile_w
    sy = np.floor((np.arange(height) + 0.5) / scale).astype(np.intp) % tile_h
    return swatch[sy[:, np.newaxis], sx[np.newaxis, :]]


# ============================================================================
# Texture stages
# ============================================================================

def _shifted(image: np.ndarray, shift: int) -> np.ndarray:
    """Horizontally shifted copy; uncovered columns are transparent."""
    width = image.shape[1]
    result = np.zeros_like(image)
    if abs(shift) >= width:
        return result
    if shift > 0:
        result[:, shift:] = image[:, :width - shift]
    elif shift < 0:
        result[:, :width + shift] = image[:, -shift:]
    else:
        result[:] = image
    return result


def _tinted(image: np.ndarray, keep_channel: int) -> np.ndarray:
    result = image.copy()
    for channel in range(3):
        if channel != keep_channel:
            result[:, :, channel] = 0
    return result


def _scanlines(image: np.ndarray, alpha: float, scale: float) -> np.ndarray:
    height, width = image.shape[:2]
    rows = band_coverage(height, max(2.0, 4 * scale), max(1.0, 2 * scale))
    coverage = np.broadcast_to(rows[:, np.newaxis], (height, width))
    return fill_coverage(image, BLACK, coverage, alpha * 0.5)


def _vhs(image: np.ndarray, alpha: float, scale: float) -> np.ndarray:
    height, width = image.shape[:2]
    rows = band_coverage(height, max(2.0, 3 * scale), max(1.0, 1 * scale))
    coverage = np.broadcast_to(rows[:, np.newaxis], (height, width))
    result = fill_coverage(image, VHS_LINE_COLOR, coverage, alpha * 0.3)

    if alpha > 0.1:
        # Both copies come from the pre-texture snapshot, never the working buffer
        snapshot = image
        shift = max(2, math.floor(alpha * 10 * scale))
        red = _tinted(_shifted(snapshot, -shift), 0)
        blue = _tinted(_shifted(snapshot, shift), 2)
        result = composite(result, red, BlendMode.SCREEN, alpha * 0.5)
        result = composite(result, blue, BlendMode.SCREEN, alpha * 0.5)
    return result


def _currency(image: np.ndarray, alpha: float, scale: float) -> np.ndarray:
    height, width = image.shape[:2]
    coverage = diagonal_coverage(height, width, max(3.0, 6 * scale), max(1.0, 1 * scale))
    return fill_coverage(image, BLACK, coverage, alpha * 0.6)


def _halftone(image: np.ndarray, alpha: float, scale: float) -> np.ndarray:
    height, width = image.shape[:2]
    step = max(4.0, 8 * scale)
    coverage = dot_coverage(height, width, step, step * 0.35)
    return fill_coverage(image, BLACK, coverage, alpha * 0.6)


def _linotype(image: np.ndarray, alpha: float, scale: float) -> np.ndarray:
    height, width = image.shape[:2]
    step = max(4.0, 6 * scale)
    rows = band_coverage(height, step, step * 0.5)
    coverage = np.broadcast_to(rows[:, np.newaxis], (height, width))
    return fill_coverage(image, BLACK, coverage, alpha * 0.5)


def _canvas(
    image: np.ndarray,
    alpha: float,
    scale: float,
    rng: np.random.Generator,
) -> np.ndarray:
    height, width = image.shape[:2]
    layer = tile_swatch(canvas_swatch(rng), width, height, scale)
    return composite(image, layer, BlendMode.OVERLAY, alpha)


def apply_texture(
    image: np.ndarray,
    texture: TextureType,
    intensity: float,
    scale: float = 1.0,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Draw a procedural texture over ``image``.

    Args:
        image: uint8 array (H, W, 4)
        texture: Texture type
        intensity: 0-100, mapped to paint alpha ``intensity / 100``
        scale: Pattern scale, clamped to at least 0.1
        rng: Random source for the canvas texture (defaults to a fresh generator)

    Returns:
        New uint8 array (H, W, 4); a copy of ``image`` for ``none`` or zero intensity
    """
    validate_rgba(image)
    texture = TextureType(texture)
    alpha = min(max(float(intensity), 0.0), 100.0) / 100.0
    if texture == TextureType.NONE or alpha <= 0:
        return image.copy()
    scale = max(0.1, float(scale))

    if texture == TextureType.SCANLINES:
        result = _scanlines(image, alpha, scale)
    elif texture == TextureType.VHS:
        result = _vhs(image, alpha, scale)
    elif texture == TextureType.CURRENCY:
        result = _currency(image, alpha, scale)
    elif texture == TextureType.HALFTONE:
        result = _halftone(image, alpha, scale)
    elif texture == TextureType.LINOTYPE:
        result = _linotype(image, alpha, scale)
    else:
        result = _canvas(image, alpha, scale, rng if rng is not None else np.random.default_rng())

    logger.debug(f"Applied {texture.value} texture at alpha {alpha:.2f}, scale {scale:.2f}")
    return result


__all__ = [
    'band_coverage',
    'diagonal_coverage',
    'dot_coverage',
    'canvas_swatch',
    'tile_swatch',
    'apply_texture',
]
