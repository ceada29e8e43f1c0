"""Luminance grain.

Adds the same uniform random delta to the R, G and B channels of each pixel,
so the grain changes brightness without shifting hue. Alpha is untouched.

Usage:
    from pixelstretch.noise import add_grain

    result = add_grain(image, amount=15, rng=np.random.default_rng(42))
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .compositing import validate_rgba


def grain_field(rng: np.random.Generator, height: int, width: int, amount: float) -> np.ndarray:
    """Per-pixel deltas ``(random() - 0.5) * amount * 2``, drawn row-major."""
    return (rng.random((height, width)) - 0.5) * (amount * 2)


def _apply_rows(result: np.ndarray, image: np.ndarray, delta: np.ndarray, rows: slice) -> None:
    rgb = image[rows, :, :3].astype(np.float64) + delta[rows, :, np.newaxis]
    result[rows, :, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


def add_grain(
    image: np.ndarray,
    amount: float,
    rng: np.random.Generator | None = None,
    workers: int = 1,
) -> np.ndarray:
    """Add monochrome uniform grain (u8).

    Args:
        image: uint8 array (H, W, 4)
        amount: Grain strength 0-100; deltas span ``[-amount, amount)``
        rng: Random source (defaults to a fresh generator)
        workers: Number of row bands processed in parallel. The random field
            is drawn before sharding, so the output does not depend on it.

    Returns:
        New uint8 array (H, W, 4); an unmodified copy when ``amount`` is 0
    """
    validate_rgba(image)
    if amount <= 0:
        return image.copy()

    rng = rng if rng is not None else np.random.default_rng()
    height, width = image.shape[:2]
    delta = grain_field(rng, height, width, amount)

    result = image.copy()
    workers = max(1, min(int(workers), height))
    if workers == 1:
        _apply_rows(result, image, delta, slice(0, height))
        return result

    bounds = np.linspace(0, height, workers + 1).astype(int)
    bands = [slice(start, stop) for start, stop in zip(bounds[:-1], bounds[1:])]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        list(pool.map(lambda rows: _apply_rows(result, image, delta, rows), bands))
    return result


__all__ = ['grain_field', 'add_grain']
