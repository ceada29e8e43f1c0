"""Colour adjustment filters.

This module provides the multiplicative colour grading applied to the effect
layer before it is merged onto the base image:
- Brightness (linear slope)
- Contrast (slope around mid grey)
- Saturation (luminance-preserving colour matrix)

The semantics follow the CSS ``brightness()``, ``contrast()`` and
``saturate()`` filter functions: 1.0 is neutral and each primitive clamps its
output to the displayable range before the next one runs.

## Supported Formats

| Format | Shape | Type | Description |
|--------|-------|------|-------------|
| RGBA8 | (H, W, 4) | uint8 | 4 channels, 0-255 |

Alpha is never modified.

Usage:
    from pixelstretch.color import adjust_color, saturate

    result = adjust_color(layer, brightness=1.1, contrast=1.2, saturation=1.5)
    result = saturate(layer, amount=0.0)   # grayscale
"""
import numpy as np

from .compositing import to_uint8, validate_rgba


def _brightness_f32(rgb: np.ndarray, amount: float) -> np.ndarray:
    return np.clip(rgb * amount, 0.0, 1.0)


def _contrast_f32(rgb: np.ndarray, amount: float) -> np.ndarray:
    return np.clip((rgb - 0.5) * amount + 0.5, 0.0, 1.0)


def saturation_matrix(amount: float) -> np.ndarray:
    """Return the 3x3 colour matrix of ``saturate(amount)``."""
    s = float(amount)
    return np.array([
        [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
    ], dtype=np.float32)


def _saturate_f32(rgb: np.ndarray, amount: float) -> np.ndarray:
    return np.clip(rgb @ saturation_matrix(amount).T, 0.0, 1.0)


def _apply(image: np.ndarray, *steps) -> np.ndarray:
    validate_rgba(image)
    rgb = image[:, :, :3].astype(np.float32) / 255.0
    for func, amount in steps:
        rgb = func(rgb, amount)
    result = image.copy()
    result[:, :, :3] = to_uint8(rgb)
    return result


# ============================================================================
# Single primitives
# ============================================================================

def brightness(image: np.ndarray, amount: float = 1.0) -> np.ndarray:
    """Scale colour channels by ``amount`` (u8).

    Args:
        image: uint8 array (H, W, 4)
        amount: 0.0 (black) and up, 1.0 = no change

    Returns:
        Adjusted uint8 array
    """
    return _apply(image, (_brightness_f32, amount))


def contrast(image: np.ndarray, amount: float = 1.0) -> np.ndarray:
    """Scale the distance of each channel from mid grey (u8).

    Args:
        image: uint8 array (H, W, 4)
        amount: 0.0 (flat grey) and up, 1.0 = no change

    Returns:
        Adjusted uint8 array
    """
    return _apply(image, (_contrast_f32, amount))


def saturate(image: np.ndarray, amount: float = 1.0) -> np.ndarray:
    """Scale colour saturation (u8).

    Args:
        image: uint8 array (H, W, 4)
        amount: 0.0 (grayscale), 1.0 = no change, above 1.0 oversaturates

    Returns:
        Adjusted uint8 array
    """
    return _apply(image, (_saturate_f32, amount))


# ============================================================================
# Chained adjustment
# ============================================================================

def adjust_color(
    image: np.ndarray,
    brightness: float = 1.0,
    contrast: float = 1.0,
    saturation: float = 1.0,
) -> np.ndarray:
    """Apply brightness, contrast and saturation in that order.

    Neutral (1.0) steps are skipped; when all three are neutral the input is
    returned as an unmodified copy.
    """
    steps = [
        (func, amount)
        for func, amount in (
            (_brightness_f32, brightness),
            (_contrast_f32, contrast),
            (_saturate_f32, saturation),
        )
        if amount != 1.0
    ]
    if not steps:
        validate_rgba(image)
        return image.copy()
    return _apply(image, *steps)


__all__ = [
    'brightness',
    'contrast',
    'saturate',
    'saturation_matrix',
    'adjust_color',
]
