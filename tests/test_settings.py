# Tests for StretchSettings
"""
Test settings defaults, clamping, enum validation and serialization.
"""

import math

import numpy as np
import pytest
from pydantic import ValidationError

from pixelstretch import ConfigurationError
from pixelstretch.settings import (
    BlendMode,
    Direction,
    GeometricShape,
    StretchMode,
    StretchSettings,
    TextureType,
)


class TestDefaults:
    """Tests for default values."""

    def test_defaults_match_initial_app_state(self):
        """Defaults should match the initial state of the original app."""
        s = StretchSettings()
        assert s.stretch_mode == StretchMode.LINEAR
        assert s.direction == Direction.HORIZONTAL
        assert s.slice_position == 50
        assert s.slice_size == 1
        assert s.blur_strength == 20
        assert s.brightness == pytest.approx(1.1)
        assert s.contrast == pytest.approx(1.2)
        assert s.saturation == pytest.approx(1.5)
        assert s.noise == 15
        assert s.opacity == 1
        assert s.blend_mode == BlendMode.SOURCE_OVER
        assert s.texture == TextureType.NONE
        assert s.texture_intensity == 50
        assert s.texture_scale == 1
        assert s.geometric_shape == GeometricShape.CIRCLE
        assert s.spiral_tightness == 2
        assert s.origin_x == 50
        assert s.origin_y == 50

    def test_has_texture(self):
        """has_texture requires a texture and a positive intensity."""
        assert not StretchSettings().has_texture
        assert StretchSettings(texture='vhs').has_texture
        assert not StretchSettings(texture='vhs', textureIntensity=0).has_texture


class TestClamping:
    """Out-of-range numbers are clamped, never rejected."""

    @pytest.mark.parametrize('key,value,expected', [
        ('slicePosition', 150, 100),
        ('slicePosition', -3, 0),
        ('sliceSize', 0, 1),
        ('sliceSize', 9000, 500),
        ('originX', 101, 100),
        ('spiralTightness', 25, 20),
        ('blurStrength', -1, 0),
        ('brightness', 5, 2),
        ('contrast', -0.5, 0),
        ('saturation', 4, 3),
        ('opacity', 1.5, 1),
        ('textureIntensity', 200, 100),
        ('textureScale', 0, 0.1),
        ('textureScale', 10, 5),
        ('noise', 1000, 100),
    ])
    def test_clamp(self, key, value, expected):
        s = StretchSettings.from_dict({key: value})
        assert s.to_dict()[key] == pytest.approx(expected)

    def test_clamp_snake_case(self):
        """Clamping applies to field names as well as aliases."""
        s = StretchSettings(slice_position=120, opacity=-2)
        assert s.slice_position == 100
        assert s.opacity == 0

    def test_infinity_clamps(self):
        s = StretchSettings(noise=math.inf)
        assert s.noise == 100

    def test_numeric_strings_accepted(self):
        s = StretchSettings.from_dict({'blurStrength': '12.5'})
        assert s.blur_strength == 12.5


class TestValidation:
    """Unknown enum values and garbage input fail fast."""

    @pytest.mark.parametrize('key,value', [
        ('stretchMode', 'radial'),
        ('direction', 'diagonal'),
        ('geometricShape', 'hexagon'),
        ('texture', 'film'),
        ('blendMode', 'color-dodge'),
        ('blendMode', 'SCREEN'),
    ])
    def test_unknown_enum_rejected(self, key, value):
        with pytest.raises(ConfigurationError):
            StretchSettings.from_dict({key: value})

    def test_non_numeric_rejected(self):
        with pytest.raises(ConfigurationError):
            StretchSettings.from_dict({'noise': 'lots'})

    def test_nan_rejected(self):
        with pytest.raises(ConfigurationError):
            StretchSettings(opacity=float('nan'))

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigurationError):
            StretchSettings.from_dict({'sliceWidth': 3})

    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigurationError):
            StretchSettings.from_dict(['spiral'])

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            StretchSettings(blendMode='plus')

    def test_settings_are_frozen(self):
        s = StretchSettings()
        with pytest.raises(ValidationError):
            s.noise = 3


class TestSerialization:
    """camelCase round trip."""

    def test_to_dict_uses_aliases_and_values(self):
        d = StretchSettings(stretch_mode=StretchMode.SPIRAL, blend_mode=BlendMode.HARD_LIGHT).to_dict()
        assert d['stretchMode'] == 'spiral'
        assert d['blendMode'] == 'hard-light'
        assert 'stretch_mode' not in d
        assert len(d) == 18

    def test_round_trip(self):
        s = StretchSettings(
            stretchMode='geometric', geometricShape='heart', originY=60,
            texture='halftone', textureScale=1.5, blendMode='soft-light',
        )
        assert StretchSettings.from_dict(s.to_dict()) == s

    def test_with_changes_accepts_alias_and_name(self):
        s = StretchSettings()
        changed = s.with_changes(spiralTightness=7, noise=0)
        assert changed.spiral_tightness == 7
        assert changed.noise == 0
        assert s.noise == 15

    def test_with_changes_revalidates(self):
        s = StretchSettings()
        assert s.with_changes(opacity=3).opacity == 1
        with pytest.raises(ConfigurationError):
            s.with_changes(texture='grain')


class TestRandom:
    """Randomly drawn looks."""

    def test_same_seed_same_settings(self):
        first = StretchSettings.random(np.random.default_rng(12))
        second = StretchSettings.random(np.random.default_rng(12))
        assert first == second

    def test_draws_stay_in_sub_ranges(self):
        rng = np.random.default_rng(0)
        modes = set()
        for _ in range(200):
            s = StretchSettings.random(rng)
            modes.add(s.stretch_mode)
            assert 1 <= s.slice_size <= 300
            assert s.slice_size == int(s.slice_size)
            assert 0.5 <= s.brightness <= 2
            assert 0.5 <= s.contrast <= 2
            assert 0.4 <= s.opacity <= 1
            assert 0.2 <= s.texture_scale <= 5
            assert 0 <= s.spiral_tightness <= 10
            assert 20 <= s.origin_x <= 80
            assert 20 <= s.origin_y <= 80
        assert modes == set(StretchMode)

    def test_round_trips(self):
        s = StretchSettings.random(np.random.default_rng(3))
        assert StretchSettings.from_dict(s.to_dict()) == s
