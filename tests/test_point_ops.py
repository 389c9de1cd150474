"""
Unit tests for the point operations: grayscale and bitwise combination.
"""

import numpy as np
import pytest

from conftest import random_buffer, uniform_buffer
from pixel_engine import (
    BitwiseOp,
    PixelBuffer,
    SizeMismatchError,
    combine,
    to_grayscale,
)


class TestToGrayscale:
    """Tests for to_grayscale."""

    def test_truncated_average(self):
        buffer = PixelBuffer.from_raw_decoded(bytes([10, 20, 31]), 1, 1, 3, 3)
        pixel = to_grayscale(buffer).get_pixel(0, 0)
        # (10 + 20 + 31) / 3 = 20.33 -> 20
        assert (pixel.r, pixel.g, pixel.b) == (20, 20, 20)

    def test_no_overflow(self):
        buffer = uniform_buffer(3, 3, 255)
        assert to_grayscale(buffer) == buffer

    def test_idempotent(self, noisy_rgb):
        once = to_grayscale(noisy_rgb)
        assert to_grayscale(once) == once

    def test_idempotent_with_alpha(self, noisy_rgba):
        once = to_grayscale(noisy_rgba)
        assert to_grayscale(once) == once

    def test_alpha_preserved_by_default(self, noisy_rgba):
        result = to_grayscale(noisy_rgba)
        assert np.array_equal(result.pixels[:, :, 3], noisy_rgba.pixels[:, :, 3])

    def test_force_opaque(self, noisy_rgba):
        result = to_grayscale(noisy_rgba, force_opaque=True)
        assert np.all(result.pixels[:, :, 3] == 255)

    def test_pure_function_no_mutation(self, noisy_rgb):
        original = noisy_rgb.pixels.copy()
        _ = to_grayscale(noisy_rgb)
        assert np.array_equal(noisy_rgb.pixels, original)

    def test_invalid_type_raises(self):
        with pytest.raises(TypeError, match="Expected PixelBuffer"):
            to_grayscale(np.zeros((2, 2, 3), dtype=np.uint8))


class TestCombine:
    """Tests for bitwise combination."""

    def test_self_and_is_identity(self, noisy_rgba):
        assert combine(noisy_rgba, noisy_rgba, BitwiseOp.AND) == noisy_rgba

    def test_self_or_is_identity(self, noisy_rgb):
        assert combine(noisy_rgb, noisy_rgb, BitwiseOp.OR) == noisy_rgb

    def test_self_xor_is_zero(self, noisy_rgba):
        result = combine(noisy_rgba, noisy_rgba, BitwiseOp.XOR)
        assert not result.data.any()

    def test_bytewise_values(self):
        a = PixelBuffer.from_raw_decoded(bytes([0b1100, 0b1010, 0xFF]), 1, 1, 3, 3)
        b = PixelBuffer.from_raw_decoded(bytes([0b1010, 0b0110, 0x0F]), 1, 1, 3, 3)
        assert combine(a, b, "and").to_raw_bytes() == bytes([0b1000, 0b0010, 0x0F])
        assert combine(a, b, "or").to_raw_bytes() == bytes([0b1110, 0b1110, 0xFF])
        assert combine(a, b, "xor").to_raw_bytes() == bytes([0b0110, 0b1100, 0xF0])

    def test_alpha_included(self):
        a = PixelBuffer.from_raw_decoded(bytes([0, 0, 0, 0xF0]), 1, 1, 4, 4)
        b = PixelBuffer.from_raw_decoded(bytes([0, 0, 0, 0x0F]), 1, 1, 4, 4)
        assert combine(a, b, BitwiseOp.OR).get_pixel(0, 0).a == 0xFF

    def test_op_name_case_insensitive(self, noisy_rgb):
        assert combine(noisy_rgb, noisy_rgb, "XOR") == combine(noisy_rgb, noisy_rgb, "xor")

    def test_size_mismatch_raises(self):
        a = random_buffer(4, 4)
        b = random_buffer(4, 5)
        with pytest.raises(SizeMismatchError, match="4x4 with 4x5"):
            combine(a, b, BitwiseOp.AND)

    def test_channel_mismatch_raises(self):
        with pytest.raises(SizeMismatchError, match="byte pixels"):
            combine(random_buffer(4, 4, 3), random_buffer(4, 4, 4), BitwiseOp.AND)

    def test_unknown_op_raises(self, noisy_rgb):
        with pytest.raises(ValueError, match="Unknown bitwise operation"):
            combine(noisy_rgb, noisy_rgb, "nand")

    def test_inputs_not_mutated(self):
        a = random_buffer(3, 3, seed=1)
        b = random_buffer(3, 3, seed=2)
        a_before, b_before = a.pixels.copy(), b.pixels.copy()
        _ = combine(a, b, BitwiseOp.XOR)
        assert np.array_equal(a.pixels, a_before)
        assert np.array_equal(b.pixels, b_before)
