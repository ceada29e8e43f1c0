"""
Render settings for the stretch pipeline.

A ``StretchSettings`` instance is an immutable value describing one render.
It uses pydantic for validation and serialization with camelCase aliases, so
records written by browser front ends load unchanged:

    >>> from pixelstretch.settings import StretchSettings
    >>> s = StretchSettings.from_dict({'stretchMode': 'spiral', 'spiralTightness': 5})
    >>> s.spiral_tightness
    5.0
    >>> s.to_dict()['stretchMode']
    'spiral'

Numeric fields are clamped to their documented ranges while the model is
built; out-of-range values never fail. Unknown enumeration values raise
``ConfigurationError``.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Sequence, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .compositing import BlendMode
from .exceptions import ConfigurationError


class StretchMode(str, Enum):
    """Family of coordinate-to-sample mapping."""
    LINEAR = 'linear'
    SPIRAL = 'spiral'
    GEOMETRIC = 'geometric'


class Direction(str, Enum):
    """Stretch direction. A horizontal stretch samples a vertical column."""
    HORIZONTAL = 'horizontal'
    VERTICAL = 'vertical'


class GeometricShape(str, Enum):
    """Contour shapes for the geometric stretch mode."""
    CIRCLE = 'circle'
    SQUARE = 'square'
    TRIANGLE = 'triangle'
    PENTAGON = 'pentagon'
    STAR = 'star'
    HEART = 'heart'
    HYPNOTIC = 'hypnotic'


class TextureType(str, Enum):
    """Procedural texture overlays."""
    NONE = 'none'
    SCANLINES = 'scanlines'
    VHS = 'vhs'
    CURRENCY = 'currency'
    HALFTONE = 'halftone'
    LINOTYPE = 'linotype'
    CANVAS = 'canvas'


def _clamp(value: Any, low: float, high: float) -> Any:
    """Clamp numeric input; leave anything else for field validation to reject."""
    if isinstance(value, bool):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    if math.isnan(number):
        return value
    return min(max(number, low), high)


class StretchSettings(BaseModel):
    """Settings record for a single render.

    Every field has a camelCase alias matching the JS settings object.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra='forbid',
        allow_inf_nan=False,
    )

    # Documented ranges, applied by _clamp_ranges before field validation
    RANGES: ClassVar[Dict[str, Tuple[float, float]]] = {
        'slice_position': (0.0, 100.0),
        'slice_size': (1.0, 500.0),
        'origin_x': (0.0, 100.0),
        'origin_y': (0.0, 100.0),
        'spiral_tightness': (0.0, 20.0),
        'blur_strength': (0.0, 100.0),
        'brightness': (0.0, 2.0),
        'contrast': (0.0, 2.0),
        'saturation': (0.0, 3.0),
        'opacity': (0.0, 1.0),
        'texture_intensity': (0.0, 100.0),
        'texture_scale': (0.1, 5.0),
        'noise': (0.0, 100.0),
    }

    # Mapping
    stretch_mode: StretchMode = Field(default=StretchMode.LINEAR, alias='stretchMode')
    direction: Direction = Field(default=Direction.HORIZONTAL)
    slice_position: float = Field(default=50.0, alias='slicePosition')
    slice_size: float = Field(default=1.0, alias='sliceSize')
    origin_x: float = Field(default=50.0, alias='originX')
    origin_y: float = Field(default=50.0, alias='originY')
    spiral_tightness: float = Field(default=2.0, alias='spiralTightness')
    geometric_shape: GeometricShape = Field(default=GeometricShape.CIRCLE, alias='geometricShape')

    # Effect layer grading and merge
    blur_strength: float = Field(default=20.0, alias='blurStrength')
    brightness: float = Field(default=1.1)
    contrast: float = Field(default=1.2)
    saturation: float = Field(default=1.5)
    opacity: float = Field(default=1.0)
    blend_mode: BlendMode = Field(default=BlendMode.SOURCE_OVER, alias='blendMode')

    # Post-processing
    texture: TextureType = Field(default=TextureType.NONE)
    texture_intensity: float = Field(default=50.0, alias='textureIntensity')
    texture_scale: float = Field(default=1.0, alias='textureScale')
    noise: float = Field(default=15.0)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid stretch settings: {e}") from e

    @model_validator(mode='before')
    @classmethod
    def _clamp_ranges(cls, data: Any) -> Any:
        """Clamp numeric values to their documented ranges."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for name, (low, high) in cls.RANGES.items():
            alias = cls.model_fields[name].alias
            for key in {name, alias or name}:
                if key in data:
                    data[key] = _clamp(data[key], low, high)
        return data

    @property
    def is_neutral_color(self) -> bool:
        """True if brightness, contrast and saturation are all 1.0."""
        return self.brightness == 1.0 and self.contrast == 1.0 and self.saturation == 1.0

    @property
    def has_texture(self) -> bool:
        """True if the texture stage will draw anything."""
        return self.texture != TextureType.NONE and self.texture_intensity > 0

    # =========================================================================
    # Serialization (JS-Compatible Format)
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a camelCase dictionary with enum values as strings."""
        return self.model_dump(by_alias=True, mode='json')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StretchSettings':
        """Deserialize from a camelCase (or snake_case) dictionary."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a settings mapping, got {type(data).__name__}")
        return cls(**data)

    @classmethod
    def random(cls, rng: Optional[np.random.Generator] = None) -> 'StretchSettings':
        """Draw a random but usable look.

        Values come from sub-ranges that keep the effect visible, for example
        an opacity of at least 0.4. Linear mode is picked twice as often as the
        other modes.

        :param rng: Random source, defaults to a fresh generator
        """
        rng = rng if rng is not None else np.random.default_rng()

        def pick(options: Sequence[Any]) -> Any:
            return options[int(rng.random() * len(options))]

        texture = pick(list(TextureType))
        blend_mode = pick(list(BlendMode))
        stretch_mode = pick([StretchMode.LINEAR, StretchMode.LINEAR, StretchMode.SPIRAL, StretchMode.GEOMETRIC])
        shape = pick(list(GeometricShape))

        return cls(
            slice_position=rng.random() * 100,
            slice_size=math.floor(rng.random() * 300) + 1,
            blur_strength=rng.random() * 100,
            direction=Direction.HORIZONTAL if rng.random() > 0.5 else Direction.VERTICAL,
            brightness=0.5 + rng.random() * 1.5,
            contrast=0.5 + rng.random() * 1.5,
            saturation=rng.random() * 3,
            noise=rng.random() * 100,
            opacity=0.4 + rng.random() * 0.6,
            blend_mode=blend_mode,
            texture=texture,
            texture_intensity=rng.random() * 100,
            texture_scale=0.2 + rng.random() * 4.8,
            stretch_mode=stretch_mode,
            geometric_shape=shape,
            spiral_tightness=rng.random() * 10,
            origin_x=20 + rng.random() * 60,
            origin_y=20 + rng.random() * 60,
        )

    def with_changes(self, **changes: Any) -> 'StretchSettings':
        """Return a copy with the given fields replaced and re-validated.

        Field names and aliases are both accepted.
        """
        by_alias = {info.alias: name for name, info in type(self).model_fields.items() if info.alias}
        data = self.model_dump()
        for key, value in changes.items():
            data[by_alias.get(key, key)] = value
        return type(self)(**data)


__all__ = [
    'StretchSettings',
    'StretchMode',
    'Direction',
    'GeometricShape',
    'TextureType',
    'BlendMode',
]
