# Tests for image loading and PNG export
"""
Test conversion of image sources into RGBA8 buffers and PNG output.
"""

import io

import numpy as np
import pytest
from PIL import Image as PILImage

import pixelstretch.config
from pixelstretch.exceptions import ImageSizeError
from pixelstretch.image import decode_png, encode_png, export_png, load_image, validate_image


class TestLoad:
    """Tests for load_image."""

    def test_rgb_array_gets_opaque_alpha(self):
        rgb = np.full((5, 7, 3), 90, dtype=np.uint8)
        rgba = load_image(rgb)
        assert rgba.shape == (5, 7, 4)
        assert np.all(rgba[:, :, 3] == 255)
        assert np.all(rgba[:, :, :3] == 90)

    def test_grey_array(self):
        grey = np.arange(12, dtype=np.uint8).reshape(3, 4)
        rgba = load_image(grey)
        np.testing.assert_array_equal(rgba[:, :, 2], grey)

    def test_pil_image(self):
        pil_image = PILImage.new('RGB', (6, 4), (1, 2, 3))
        rgba = load_image(pil_image)
        assert rgba.shape == (4, 6, 4)
        np.testing.assert_array_equal(rgba[0, 0], [1, 2, 3, 255])

    def test_encoded_bytes(self):
        buffer = io.BytesIO()
        PILImage.new('RGBA', (3, 2), (9, 8, 7, 6)).save(buffer, format='PNG')
        rgba = load_image(buffer.getvalue())
        np.testing.assert_array_equal(rgba[1, 2], [9, 8, 7, 6])

    def test_path(self, tmp_path):
        path = tmp_path / 'src.png'
        PILImage.new('RGB', (8, 8), (200, 100, 50)).save(path)
        assert load_image(path).shape == (8, 8, 4)
        assert load_image(str(path)).shape == (8, 8, 4)

    def test_file_handle_closed(self, tmp_path, monkeypatch):
        path = tmp_path / 'src.png'
        PILImage.new('RGB', (4, 4), (1, 1, 1)).save(path)
        closed = []
        real_exit = PILImage.Image.__exit__

        def recording_exit(self, *args):
            closed.append(self)
            return real_exit(self, *args)

        monkeypatch.setattr(PILImage.Image, '__exit__', recording_exit)
        load_image(path)
        load_image(path.read_bytes())
        assert len(closed) >= 2

    def test_decompression_bomb_is_size_error(self, monkeypatch):
        buffer = io.BytesIO()
        PILImage.new('RGB', (20, 20)).save(buffer, format='PNG')
        monkeypatch.setattr(PILImage, 'MAX_IMAGE_PIXELS', 100)
        with pytest.raises(ImageSizeError):
            load_image(buffer.getvalue())

    def test_unsupported_source(self):
        with pytest.raises(TypeError):
            load_image(42)


class TestValidate:
    """Tests for validate_image."""

    @pytest.mark.parametrize('image', [
        np.zeros((0, 4, 4), dtype=np.uint8),
        np.zeros((4, 0, 4), dtype=np.uint8),
        np.zeros((4, 4, 3), dtype=np.uint8),
        np.zeros((4, 4, 4), dtype=np.float32),
        [[0, 0, 0, 0]],
    ])
    def test_rejected(self, image):
        with pytest.raises(ImageSizeError):
            validate_image(image)

    def test_size_limit(self, monkeypatch, random_image):
        monkeypatch.setattr(pixelstretch.config.settings, 'MAX_IMAGE_PIXELS', 100)
        with pytest.raises(ImageSizeError):
            validate_image(random_image)

    def test_image_size_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_image(np.zeros((0, 0, 4), dtype=np.uint8))


class TestPNG:
    """PNG encoding and export."""

    def test_round_trip(self, random_image):
        image = random_image.copy()
        image[0, 0, 3] = 17
        np.testing.assert_array_equal(decode_png(encode_png(image)), image)

    def test_export_to_path(self, tmp_path, random_image):
        target = export_png(random_image, tmp_path / 'out.png')
        assert target == tmp_path / 'out.png'
        np.testing.assert_array_equal(load_image(target), random_image)

    def test_export_default_name(self, tmp_path, monkeypatch, white_image):
        monkeypatch.chdir(tmp_path)
        target = export_png(white_image)
        assert target.name == 'pixel-stretch-art.png'
        assert (tmp_path / 'pixel-stretch-art.png').exists()
