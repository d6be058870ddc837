"""
Tests for Filter Operations.

Tests cover:
- Grayscale, sepia and invert color filters
- Gaussian blur radius bounds
- Sharpen (unsharp mask)
- Alpha pass-through
- Error handling
"""

import unittest

import numpy as np
from PIL import Image

from IE_Libs.errors import InvalidOperation
from IE_Libs.ImageEditingLib.filters import (
    apply_gaussian_blur,
    apply_grayscale,
    apply_invert,
    apply_sepia,
    apply_sharpen,
    validate_blur_radius,
)
from tests.conftest import make_gradient


class TestInvert(unittest.TestCase):
    """Test invert filter."""

    def test_invert_values(self):
        """Each color channel becomes 255 - value; alpha is kept."""
        image = Image.new("RGBA", (4, 4), (10, 20, 30, 40))
        result = apply_invert(image)

        self.assertEqual(result.mode, "RGBA")
        self.assertEqual(result.getpixel((0, 0)), (245, 235, 225, 40))

    def test_invert_twice_is_identity(self):
        """Inverting twice restores every pixel."""
        for mode in ("L", "LA", "RGB", "RGBA"):
            with self.subTest(mode=mode):
                image = make_gradient(mode=mode)
                result = apply_invert(apply_invert(image))

                self.assertEqual(result.mode, image.mode)
                self.assertEqual(result.tobytes(), image.tobytes())

    def test_invert_does_not_modify_input(self):
        """The input image is left untouched."""
        image = make_gradient()
        before = image.tobytes()
        apply_invert(image)

        self.assertEqual(image.tobytes(), before)

    def test_invert_invalid_input_type(self):
        """Test that invalid input raises TypeError."""
        with self.assertRaises(TypeError):
            apply_invert("not_an_image")


class TestGrayscale(unittest.TestCase):
    """Test grayscale filter."""

    def test_grayscale_keeps_size(self):
        image = make_gradient(30, 20)
        result = apply_grayscale(image)

        self.assertEqual(result.size, (30, 20))
        self.assertEqual(result.mode, "L")

    def test_grayscale_of_gray_pixel(self):
        """A neutral pixel keeps its level."""
        result = apply_grayscale(Image.new("RGB", (2, 2), (90, 90, 90)))

        self.assertEqual(result.getpixel((0, 0)), 90)

    def test_grayscale_drops_alpha(self):
        result = apply_grayscale(make_gradient(mode="RGBA"))

        self.assertEqual(result.mode, "L")


class TestSepia(unittest.TestCase):
    """Test sepia filter."""

    def test_sepia_matrix(self):
        """Output channels follow the sepia matrix, truncated to bytes."""
        result = apply_sepia(Image.new("RGB", (3, 3), (100, 150, 200)))

        self.assertEqual(result.getpixel((1, 1)), (192, 171, 133))

    def test_sepia_clamps_white(self):
        result = apply_sepia(Image.new("RGB", (3, 3), (255, 255, 255)))

        self.assertEqual(result.getpixel((0, 0)), (255, 255, 238))

    def test_sepia_preserves_alpha(self):
        image = make_gradient(mode="RGBA")
        result = apply_sepia(image)

        self.assertEqual(result.mode, "RGBA")
        self.assertEqual(result.getchannel("A").tobytes(), image.getchannel("A").tobytes())

    def test_sepia_promotes_grayscale(self):
        result = apply_sepia(make_gradient(mode="L"))

        self.assertEqual(result.mode, "RGB")


class TestGaussianBlur(unittest.TestCase):
    """Test Gaussian blur operation."""

    def setUp(self):
        """Create test image."""
        self.test_image = make_gradient(20, 20)

    def test_blur_keeps_size_and_mode(self):
        result = apply_gaussian_blur(self.test_image, radius=2.5)

        self.assertEqual(result.size, self.test_image.size)
        self.assertEqual(result.mode, self.test_image.mode)

    def test_blur_smallest_radius(self):
        """A radius just above zero is accepted."""
        result = apply_gaussian_blur(self.test_image, radius=0.0001)

        self.assertEqual(result.size, self.test_image.size)

    def test_blur_largest_radius(self):
        """Radius 100 is accepted."""
        result = apply_gaussian_blur(self.test_image, radius=100)

        self.assertEqual(result.size, self.test_image.size)

    def test_blur_invalid_radius_zero(self):
        """Test that radius=0 raises error."""
        with self.assertRaises(InvalidOperation):
            apply_gaussian_blur(self.test_image, radius=0)

    def test_blur_invalid_radius_negative(self):
        with self.assertRaises(InvalidOperation):
            apply_gaussian_blur(self.test_image, radius=-1.0)

    def test_blur_invalid_radius_too_large(self):
        """Test that radius >100 raises error."""
        with self.assertRaises(InvalidOperation):
            validate_blur_radius(100.0001)

    def test_blur_error_is_value_error(self):
        """InvalidOperation is also a ValueError for plain callers."""
        with self.assertRaises(ValueError):
            apply_gaussian_blur(self.test_image, radius=101)

    def test_blur_invalid_input_type(self):
        with self.assertRaises(TypeError):
            apply_gaussian_blur("not_an_image", radius=2.0)


class TestSharpen(unittest.TestCase):
    """Test sharpen filter."""

    def setUp(self):
        """Left half black, right half mid-gray."""
        array = np.zeros((20, 20, 3), dtype=np.uint8)
        array[:, 10:] = 200
        self.edge_image = Image.fromarray(array)

    def test_sharpen_boosts_edge(self):
        """The bright side of an edge gets brighter."""
        result = apply_sharpen(self.edge_image)

        self.assertGreater(result.getpixel((10, 10))[0], 200)
        self.assertEqual(result.getpixel((9, 10))[0], 0)

    def test_sharpen_keeps_size_and_mode(self):
        result = apply_sharpen(self.edge_image)

        self.assertEqual(result.size, (20, 20))
        self.assertEqual(result.mode, "RGB")

    def test_sharpen_preserves_alpha(self):
        image = make_gradient(mode="RGBA")
        result = apply_sharpen(image)

        self.assertEqual(result.mode, "RGBA")
        self.assertEqual(result.getchannel("A").tobytes(), image.getchannel("A").tobytes())


if __name__ == "__main__":
    unittest.main()
