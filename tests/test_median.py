"""
Unit tests for the median filter.
"""

import numpy as np
import pytest

from conftest import random_buffer, uniform_buffer
from pixel_engine import PixelBuffer, median_filter
from pixel_engine.median import median_rank


def reference_median(pixels, window_size):
    """Per-pixel reference: sort each window and pick the fixed rank."""
    radius = window_size // 2
    rank = (window_size * window_size + 1) // 2
    height, width = pixels.shape[:2]
    out = pixels.copy()
    for y in range(radius, height - radius):
        for x in range(radius, width - radius):
            for c in range(3):
                window = pixels[y - radius : y + radius + 1, x - radius : x + radius + 1, c]
                out[y, x, c] = sorted(window.reshape(-1).tolist())[rank]
    return out


class TestMedianRank:

    @pytest.mark.parametrize("window_size,rank", [(3, 5), (5, 13), (7, 25)])
    def test_rank_formula(self, window_size, rank):
        assert median_rank(window_size) == rank


class TestMedianFilter:
    """Tests for median_filter."""

    def test_uniform_interior_unchanged(self):
        buffer = uniform_buffer(5, 5, 42)
        result = median_filter(buffer, 3)
        assert np.all(result.pixels == 42)

    @pytest.mark.parametrize("window_size", [3, 5, 7])
    def test_uniform_any_window(self, window_size):
        buffer = uniform_buffer(9, 9, 200)
        assert median_filter(buffer, window_size) == buffer

    def test_selects_rank_above_true_median(self):
        # Window values 1..9: true median is 5, the kept rank gives 6
        pixels = np.arange(1, 10, dtype=np.uint8).reshape(3, 3, 1).repeat(3, axis=2)
        result = median_filter(PixelBuffer.from_pixels(pixels), 3)
        assert result.get_pixel(1, 1).r == 6

    def test_removes_salt_noise(self):
        pixels = np.full((5, 5, 3), 100, dtype=np.uint8)
        pixels[2, 2] = 255
        result = median_filter(PixelBuffer.from_pixels(pixels), 3)
        assert result.get_pixel(2, 2).r == 100

    def test_channels_filtered_independently(self):
        rng = np.random.default_rng(5)
        pixels = rng.integers(0, 256, (3, 3, 3), dtype=np.uint8)
        result = median_filter(PixelBuffer.from_pixels(pixels), 3)
        for c in range(3):
            expected = np.sort(pixels[:, :, c].reshape(-1))[5]
            assert result.pixels[1, 1, c] == expected

    def test_border_copied_by_default(self, noisy_rgb):
        result = median_filter(noisy_rgb, 5)
        assert np.array_equal(result.pixels[:2], noisy_rgb.pixels[:2])
        assert np.array_equal(result.pixels[:, -2:], noisy_rgb.pixels[:, -2:])

    def test_border_zero_policy(self, noisy_rgba):
        result = median_filter(noisy_rgba, 3, border="zero")
        assert np.all(result.pixels[0, :, :3] == 0)
        assert np.all(result.pixels[:, -1, :3] == 0)
        # Alpha is never touched
        assert np.array_equal(result.pixels[:, :, 3], noisy_rgba.pixels[:, :, 3])

    def test_alpha_untouched(self, noisy_rgba):
        result = median_filter(noisy_rgba, 3)
        assert np.array_equal(result.pixels[:, :, 3], noisy_rgba.pixels[:, :, 3])

    @pytest.mark.parametrize("window_size", [3, 5, 7])
    def test_matches_reference(self, window_size, noisy_rgb):
        expected = reference_median(noisy_rgb.pixels, window_size)
        result = median_filter(noisy_rgb, window_size)
        assert np.array_equal(result.pixels, expected)

    def test_small_buffer_is_copied(self):
        buffer = random_buffer(4, 4, seed=6)
        assert median_filter(buffer, 5) == buffer

    def test_pure_function_no_mutation(self, noisy_rgb):
        original = noisy_rgb.pixels.copy()
        _ = median_filter(noisy_rgb, 3)
        assert np.array_equal(noisy_rgb.pixels, original)

    @pytest.mark.parametrize("window_size", [1, 2, 4, 9])
    def test_unsupported_window_raises(self, nine_gray, window_size):
        with pytest.raises(ValueError, match="window_size"):
            median_filter(nine_gray, window_size)

    def test_unknown_border_raises(self, nine_gray):
        with pytest.raises(ValueError, match="border"):
            median_filter(nine_gray, 3, border="reflect")


@pytest.mark.slow
def test_large_image_matches_reference():
    buffer = random_buffer(64, 48, seed=12)
    assert np.array_equal(median_filter(buffer, 7).pixels, reference_median(buffer.pixels, 7))
