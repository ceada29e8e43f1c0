# PixelStretch - Compositing
"""
Blend modes and source-over compositing of RGBA8 buffers.

Compositing follows the W3C compositing model: the layer colour is first
mixed with the backdrop through a separable blend function, then the result
is laid over the backdrop with Porter-Duff source-over using the layer
alpha multiplied by a global opacity.

All functions take and return ``(H, W, 4)`` uint8 arrays and never modify
their inputs.

Usage:
    from pixelstretch.compositing import BlendMode, composite

    result = composite(base, effect, mode=BlendMode.SCREEN, opacity=0.8)
"""

from __future__ import annotations

from enum import Enum

import numpy as np


class BlendMode(str, Enum):
    """Blend modes for merging a layer onto a backdrop."""
    SOURCE_OVER = 'source-over'
    LIGHTEN = 'lighten'
    DARKEN = 'darken'
    SCREEN = 'screen'
    OVERLAY = 'overlay'
    MULTIPLY = 'multiply'
    DIFFERENCE = 'difference'
    EXCLUSION = 'exclusion'
    SOFT_LIGHT = 'soft-light'
    HARD_LIGHT = 'hard-light'


def validate_rgba(image: np.ndarray, name: str = 'image') -> None:
    """Validate that ``image`` is an RGBA8 buffer."""
    if not isinstance(image, np.ndarray):
        raise ValueError(f"{name}: expected numpy array, got {type(image).__name__}")
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError(f"{name}: expected image (H, W, 4), got shape {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"{name}: expected uint8 dtype, got {image.dtype}")


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Round float values in the 0.0-1.0 range back to uint8."""
    return np.clip(np.rint(values * 255.0), 0, 255).astype(np.uint8)


def blend(base: np.ndarray, overlay: np.ndarray, mode: BlendMode) -> np.ndarray:
    """Apply a separable blend function.

    Args:
        base: Backdrop colour, float array with values 0.0-1.0
        overlay: Source colour, float array with values 0.0-1.0
        mode: Blend mode

    Returns:
        Blended colour, same shape as the inputs
    """
    mode = BlendMode(mode)

    if mode == BlendMode.SOURCE_OVER:
        return overlay
    elif mode == BlendMode.MULTIPLY:
        return base * overlay
    elif mode == BlendMode.SCREEN:
        return base + overlay - base * overlay
    elif mode == BlendMode.OVERLAY:
        # Hard light with the operands swapped
        return _hard_light(overlay, base)
    elif mode == BlendMode.HARD_LIGHT:
        return _hard_light(base, overlay)
    elif mode == BlendMode.SOFT_LIGHT:
        dark = base - (1 - 2 * overlay) * base * (1 - base)
        d = np.where(base <= 0.25, ((16 * base - 12) * base + 4) * base, np.sqrt(base))
        light = base + (2 * overlay - 1) * (d - base)
        return np.where(overlay <= 0.5, dark, light)
    elif mode == BlendMode.DARKEN:
        return np.minimum(base, overlay)
    elif mode == BlendMode.LIGHTEN:
        return np.maximum(base, overlay)
    elif mode == BlendMode.DIFFERENCE:
        return np.abs(base - overlay)
    elif mode == BlendMode.EXCLUSION:
        return base + overlay - 2 * base * overlay
    raise ValueError(f"Unsupported blend mode: {mode}")


def _hard_light(base: np.ndarray, overlay: np.ndarray) -> np.ndarray:
    multiply = base * (2 * overlay)
    doubled = 2 * overlay - 1
    screen = base + doubled - base * doubled
    return np.where(overlay <= 0.5, multiply, screen)


def composite_float(
    base: np.ndarray,
    color: np.ndarray,
    alpha: np.ndarray,
    mode: BlendMode = BlendMode.SOURCE_OVER,
) -> np.ndarray:
    """Composite a float source onto an RGBA8 backdrop.

    Args:
        base: uint8 backdrop (H, W, 4)
        color: Source colour, float (H, W, 3) or broadcastable, values 0.0-1.0
        alpha: Source alpha, float (H, W, 1) or broadcastable, values 0.0-1.0
        mode: Blend mode used to mix source and backdrop colour

    Returns:
        New uint8 array (H, W, 4). Pixels with zero source alpha are copied
        from ``base`` unchanged.
    """
    validate_rgba(base, 'base')
    cb = base[:, :, :3].astype(np.float32) / 255.0
    ab = base[:, :, 3:].astype(np.float32) / 255.0
    cs = np.broadcast_to(np.asarray(color, dtype=np.float32), cb.shape)
    a_s = np.broadcast_to(np.asarray(alpha, dtype=np.float32), ab.shape)

    mixed = (1 - ab) * cs + ab * blend(cb, cs, mode)
    co = a_s * mixed + ab * cb * (1 - a_s)
    ao = a_s + ab * (1 - a_s)
    rgb = np.divide(co, ao, out=np.zeros_like(co), where=ao > 0)

    result = np.concatenate([to_uint8(rgb), to_uint8(ao)], axis=2)
    return np.where(a_s > 0, result, base)


def composite(
    base: np.ndarray,
    layer: np.ndarray,
    mode: BlendMode = BlendMode.SOURCE_OVER,
    opacity: float = 1.0,
) -> np.ndarray:
    """Merge an RGBA8 layer onto a copy of ``base``.

    Args:
        base: uint8 backdrop (H, W, 4)
        layer: uint8 layer (H, W, 4), same size as ``base``
        mode: Blend mode
        opacity: Global alpha multiplier for the layer (0.0-1.0)

    Returns:
        New uint8 array (H, W, 4)
    """
    validate_rgba(base, 'base')
    validate_rgba(layer, 'layer')
    if base.shape != layer.shape:
        raise ValueError(f"Layer shape {layer.shape} does not match base shape {base.shape}")

    opacity = min(max(float(opacity), 0.0), 1.0)
    if opacity <= 0.0:
        return base.copy()

    color = layer[:, :, :3].astype(np.float32) / 255.0
    alpha = layer[:, :, 3:].astype(np.float32) / 255.0 * opacity
    return composite_float(base, color, alpha, mode)


def fill_coverage(
    base: np.ndarray,
    color: tuple[int, int, int],
    coverage: np.ndarray,
    alpha: float,
    mode: BlendMode = BlendMode.SOURCE_OVER,
) -> np.ndarray:
    """Paint a solid colour through an anti-aliased coverage mask.

    Args:
        base: uint8 backdrop (H, W, 4)
        color: RGB colour, 0-255 per channel
        coverage: float (H, W) in 0.0-1.0, or effective per-pixel alpha when
            ``alpha`` is 1.0
        alpha: Paint alpha (0.0-1.0)
        mode: Blend mode

    Returns:
        New uint8 array (H, W, 4)
    """
    rgb = np.asarray(color, dtype=np.float32).reshape(1, 1, 3) / 255.0
    a_s = np.clip(coverage.astype(np.float32) * float(alpha), 0.0, 1.0)[:, :, np.newaxis]
    return composite_float(base, rgb, a_s, mode)


__all__ = [
    'BlendMode',
    'blend',
    'composite',
    'composite_float',
    'fill_coverage',
    'to_uint8',
    'validate_rgba',
]
