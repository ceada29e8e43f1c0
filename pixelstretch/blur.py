# PixelStretch - Blur
"""
Gaussian blur of the effect layer.
"""

from __future__ import annotations

import numpy as np
from PIL import Image as PILImage
from PIL import ImageFilter

from .compositing import validate_rgba


def gaussian_blur(layer: np.ndarray, radius: float) -> np.ndarray:
    """Blur an RGBA8 layer.

    ``radius`` is the standard deviation in pixels, the same unit as the CSS
    ``blur()`` filter. The blur runs on premultiplied alpha so transparent
    areas do not bleed black into their neighbours. A radius of zero returns
    the input unchanged.

    :param layer: uint8 layer (H, W, 4)
    :param radius: Blur radius, 0-100
    :returns: Blurred uint8 layer
    """
    validate_rgba(layer, 'layer')
    if radius <= 0:
        return layer

    pil_img = PILImage.fromarray(layer).convert('RGBa')
    result = pil_img.filter(ImageFilter.GaussianBlur(radius=float(radius)))
    return np.asarray(result.convert('RGBA')).copy()


__all__ = ['gaussian_blur']
