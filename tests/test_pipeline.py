# Tests for the render pipeline
"""
End-to-end properties of render() and effect_layer().
"""

import numpy as np
import pytest

from pixelstretch import ImageSizeError, StretchSettings, effect_layer, render
from pixelstretch.settings import BlendMode

NEUTRAL = dict(blurStrength=0, brightness=1, contrast=1, saturation=1, noise=0, texture='none')


class TestOpacity:
    """Zero opacity leaves the source untouched."""

    @pytest.mark.parametrize('mode', list(BlendMode))
    def test_zero_opacity_returns_source(self, random_image, mode):
        settings = StretchSettings(opacity=0, blendMode=mode, noise=0, texture='none',
                                   stretchMode='spiral')
        result = render(random_image, settings)
        assert result is not random_image
        np.testing.assert_array_equal(result, random_image)


class TestEffectLayer:
    """Effect layer construction."""

    def test_full_band_linear_is_identity(self, random_image):
        settings = StretchSettings(stretchMode='linear', slicePosition=0, sliceSize=64)
        np.testing.assert_array_equal(effect_layer(random_image, settings), random_image)

    def test_spiral_without_twist_equals_circle(self, gradient_image):
        spiral = StretchSettings(stretchMode='spiral', spiralTightness=0)
        circle = StretchSettings(stretchMode='geometric', geometricShape='circle')
        np.testing.assert_array_equal(
            effect_layer(gradient_image, spiral), effect_layer(gradient_image, circle))

    def test_neutral_geometric_render_is_effect_layer(self, gradient_image):
        settings = StretchSettings(stretchMode='geometric', geometricShape='star', **NEUTRAL)
        np.testing.assert_array_equal(
            render(gradient_image, settings), effect_layer(gradient_image, settings))


class TestRender:
    """Whole pipeline behaviour."""

    def test_output_shape_and_type(self, random_image):
        result = render(random_image, StretchSettings(), rng=np.random.default_rng(0))
        assert result.shape == random_image.shape
        assert result.dtype == np.uint8

    @pytest.mark.parametrize('texture', ['canvas', 'vhs', 'halftone'])
    def test_seeded_render_is_idempotent(self, random_image, texture):
        settings = StretchSettings(stretchMode='geometric', geometricShape='heart',
                                   texture=texture, noise=40)
        first = render(random_image, settings, rng=np.random.default_rng(21))
        second = render(random_image, settings, rng=np.random.default_rng(21))
        np.testing.assert_array_equal(first, second)

    def test_source_not_modified(self, random_image):
        before = random_image.copy()
        render(random_image, StretchSettings(texture='vhs'), rng=np.random.default_rng(0))
        np.testing.assert_array_equal(random_image, before)

    def test_workers_do_not_change_result(self, random_image):
        settings = StretchSettings(stretchMode='spiral', spiralTightness=9, noise=20)
        single = render(random_image, settings, rng=np.random.default_rng(3), workers=1)
        sharded = render(random_image, settings, rng=np.random.default_rng(3), workers=4)
        np.testing.assert_array_equal(single, sharded)

    def test_single_pixel_image(self):
        image = np.array([[[10, 20, 30, 255]]], dtype=np.uint8)
        for mode in ('linear', 'spiral', 'geometric'):
            result = render(image, StretchSettings(stretchMode=mode), rng=np.random.default_rng(0))
            assert result.shape == (1, 1, 4)

    def test_zero_size_rejected(self):
        with pytest.raises(ImageSizeError):
            render(np.zeros((0, 10, 4), dtype=np.uint8), StretchSettings())

    def test_settings_type_checked(self, random_image):
        with pytest.raises(TypeError):
            render(random_image, {'stretchMode': 'spiral'})
