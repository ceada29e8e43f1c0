"""
Pytest fixtures for PixelStretch tests
"""

import numpy as np
import pytest


def solid(width: int, height: int, rgba) -> np.ndarray:
    """Create a uniform RGBA8 image."""
    return np.full((height, width, 4), rgba, dtype=np.uint8)


@pytest.fixture
def gradient_image() -> np.ndarray:
    """100x100 opaque image: red grows with x, green grows with y."""
    x = np.arange(100)
    pixels = np.zeros((100, 100, 4), dtype=np.uint8)
    pixels[:, :, 0] = (x * 2.55).astype(np.uint8)[np.newaxis, :]
    pixels[:, :, 1] = (x * 2.55).astype(np.uint8)[:, np.newaxis]
    pixels[:, :, 2] = 128
    pixels[:, :, 3] = 255
    return pixels


@pytest.fixture
def random_image() -> np.ndarray:
    """64x48 opaque image with seeded random colours."""
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(48, 64, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    return pixels


@pytest.fixture
def white_image() -> np.ndarray:
    """32x32 opaque white image."""
    return solid(32, 32, (255, 255, 255, 255))
