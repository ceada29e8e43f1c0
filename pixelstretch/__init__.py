"""
PixelStretch - Parametric pixel-stretch rendering for still images
"""

from .compositing import BlendMode, composite
from .exceptions import StretchError, ConfigurationError, ImageSizeError
from .image import load_image, validate_image, encode_png, decode_png, export_png
from .pipeline import render, effect_layer
from .renderer import StretchRenderer
from .settings import (
    StretchSettings,
    StretchMode,
    Direction,
    GeometricShape,
    TextureType,
)

__all__ = [
    # Rendering
    "render",
    "effect_layer",
    "StretchRenderer",
    # Settings
    "StretchSettings",
    "StretchMode",
    "Direction",
    "GeometricShape",
    "TextureType",
    "BlendMode",
    # Buffers
    "load_image",
    "validate_image",
    "encode_png",
    "decode_png",
    "export_png",
    "composite",
    # Errors
    "StretchError",
    "ConfigurationError",
    "ImageSizeError",
]

__version__ = "0.1.0"
