"""
Tests for tonal adjustments.

Covers brightness, contrast, saturation, hue and gamma, the HSL
conversion helpers, range validation and the fixed application order.
"""

import numpy as np
import pytest
from PIL import Image

from IE_Libs.errors import InvalidOperation
from IE_Libs.ImageEditingLib.adjustments import (
    apply_adjustment,
    apply_brightness,
    apply_contrast,
    apply_hue,
    apply_saturation,
    build_gamma_lut,
    hsl_to_rgb,
    rgb_to_hsl,
    validate_adjustment,
)
from IE_Libs.ImageEditingLib.operation_types import AdjustmentOperation


class TestBrightnessContrast:
    """Tests for the linear adjustments."""

    def test_brightness_scales_and_clamps(self):
        image = Image.new("RGB", (2, 2), (100, 50, 200))

        result = apply_brightness(image, 1.5)

        assert result.getpixel((0, 0)) == (150, 75, 255)

    def test_brightness_keeps_alpha(self, rgba_image):
        result = apply_brightness(rgba_image, 0.5)

        assert result.mode == "RGBA"
        assert result.getchannel("A").tobytes() == rgba_image.getchannel("A").tobytes()

    def test_brightness_on_grayscale(self, gray_image):
        result = apply_brightness(gray_image, 2.0)

        assert result.mode == "L"
        assert result.size == gray_image.size

    def test_contrast_stretches_around_mid_gray(self):
        image = Image.new("RGB", (2, 2), (100, 128, 200))

        result = apply_contrast(image, 2.0)

        assert result.getpixel((1, 1)) == (72, 128, 255)


class TestHslConversion:
    """Tests for rgb_to_hsl and hsl_to_rgb."""

    def test_pure_red(self):
        h, s, l = rgb_to_hsl(np.array([[255, 0, 0]], dtype=np.uint8))

        assert h[0] == pytest.approx(0.0)
        assert s[0] == pytest.approx(1.0)
        assert l[0] == pytest.approx(0.5)

    def test_gray_has_no_saturation(self):
        h, s, l = rgb_to_hsl(np.array([[128, 128, 128]], dtype=np.uint8))

        assert s[0] == 0.0
        assert h[0] == 0.0
        assert l[0] == pytest.approx(128 / 255)

    def test_hue_is_in_range(self, rgb_image):
        h, _, _ = rgb_to_hsl(np.asarray(rgb_image))

        assert h.min() >= 0.0
        assert h.max() < 360.0

    def test_round_trip_is_exact(self, rgb_image):
        pixels = np.asarray(rgb_image)

        restored = hsl_to_rgb(*rgb_to_hsl(pixels))

        np.testing.assert_array_equal(restored, pixels)


class TestSaturationHue:
    """Tests for the HSL adjustments."""

    def test_hue_rotates_red_to_green(self):
        result = apply_hue(Image.new("RGB", (2, 2), (255, 0, 0)), 120)

        assert result.getpixel((0, 0)) == (0, 255, 0)

    def test_negative_hue_rotates_red_to_blue(self):
        result = apply_hue(Image.new("RGB", (2, 2), (255, 0, 0)), -120)

        assert result.getpixel((0, 0)) == (0, 0, 255)

    def test_zero_hue_shift_is_identity(self, rgb_image):
        assert apply_hue(rgb_image, 0).tobytes() == rgb_image.tobytes()

    def test_unit_saturation_is_identity(self, rgb_image):
        assert apply_saturation(rgb_image, 1.0).tobytes() == rgb_image.tobytes()

    def test_saturation_leaves_gray_alone(self):
        image = Image.new("RGB", (2, 2), (77, 77, 77))

        assert apply_saturation(image, 2.0).getpixel((0, 0)) == (77, 77, 77)

    def test_desaturation_moves_toward_gray(self):
        image = Image.new("RGB", (2, 2), (200, 50, 50))

        r, g, b = apply_saturation(image, 0.5).getpixel((0, 0))

        assert r < 200
        assert g > 50
        assert g == b

    def test_hue_on_grayscale_is_noop(self, gray_image):
        result = apply_hue(gray_image, 90)

        assert result.mode == "L"
        assert result.tobytes() == gray_image.tobytes()


class TestGamma:
    """Tests for the gamma lookup table."""

    def test_identity_gamma(self):
        np.testing.assert_array_equal(build_gamma_lut(1.0), np.arange(256, dtype=np.uint8))

    def test_endpoints_are_fixed(self):
        lut = build_gamma_lut(2.2)

        assert lut[0] == 0
        assert lut[255] == 255

    def test_gamma_brightens_midtones(self):
        assert build_gamma_lut(2.2)[128] == 186


class TestValidation:
    """Tests for adjustment range checks."""

    @pytest.mark.parametrize(
        "params",
        [
            AdjustmentOperation(brightness=0.0),
            AdjustmentOperation(brightness=2.0001),
            AdjustmentOperation(contrast=-0.5),
            AdjustmentOperation(saturation=3.0),
            AdjustmentOperation(hue=181),
            AdjustmentOperation(hue=-181),
            AdjustmentOperation(gamma=0.09),
            AdjustmentOperation(gamma=3.01),
        ],
    )
    def test_out_of_range_rejected(self, params):
        with pytest.raises(InvalidOperation):
            validate_adjustment(params)

    def test_bounds_accepted(self):
        validate_adjustment(
            AdjustmentOperation(brightness=2.0, contrast=0.01, saturation=2.0, hue=-180, gamma=0.1)
        )
        validate_adjustment(AdjustmentOperation(hue=180, gamma=3.0))


class TestApplyAdjustment:
    """Tests for the combined adjustment."""

    def test_fields_apply_in_order(self, rgb_image):
        params = AdjustmentOperation(brightness=1.2, contrast=0.8, gamma=1.5)

        result = apply_adjustment(rgb_image, params)

        expected = apply_adjustment(
            apply_contrast(apply_brightness(rgb_image, 1.2), 0.8),
            AdjustmentOperation(gamma=1.5),
        )
        assert result.tobytes() == expected.tobytes()

    def test_invalid_later_field_rejects_whole_adjustment(self, rgb_image):
        with pytest.raises(InvalidOperation):
            apply_adjustment(rgb_image, AdjustmentOperation(brightness=1.5, gamma=5.0))

    def test_empty_adjustment_returns_copy(self, rgb_image):
        result = apply_adjustment(rgb_image, AdjustmentOperation())

        assert result is not rgb_image
        assert result.tobytes() == rgb_image.tobytes()

    def test_chunked_processing_matches(self, rgb_image, small_chunks):
        """Splitting rows across workers gives byte-identical output."""
        params = AdjustmentOperation(brightness=1.3, saturation=0.7, hue=45)
        chunked = apply_adjustment(rgb_image, params)

        pixels = np.clip(np.asarray(rgb_image).astype(np.float32) * 1.3, 0, 255).astype(np.uint8)
        h, s, l = rgb_to_hsl(pixels)
        pixels = hsl_to_rgb(h, np.clip(s * 0.7, 0, 1), l)
        h, s, l = rgb_to_hsl(pixels)
        expected = hsl_to_rgb(np.mod(h + 45 + 360.0, 360.0), s, l)

        np.testing.assert_array_equal(np.asarray(chunked), expected)
