"""Pytest configuration and shared buffer fixtures, fast by default.

Slow tests (large-image comparisons against per-pixel reference loops) are
skipped unless --slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)
"""
import numpy as np
import pytest

from pixel_engine import PixelBuffer


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests that compare large images against reference loops",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped; pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def uniform_buffer(width, height, value, bytes_per_pixel=3, alpha=255):
    """Buffer where every color channel is ``value``."""
    pixels = np.full((height, width, bytes_per_pixel), value, dtype=np.uint8)
    if bytes_per_pixel == 4:
        pixels[:, :, 3] = alpha
    return PixelBuffer.from_pixels(pixels)


def random_buffer(width, height, bytes_per_pixel=3, seed=0):
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, (height, width, bytes_per_pixel), dtype=np.uint8)
    return PixelBuffer.from_pixels(pixels)


@pytest.fixture
def nine_gray_bytes():
    """3x3, 3-channel bytes whose gray value at each pixel is 1..9 row-major."""
    return bytes(v for v in range(1, 10) for _ in range(3))


@pytest.fixture
def nine_gray(nine_gray_bytes):
    return PixelBuffer.from_raw_decoded(nine_gray_bytes, 3, 3, 9, 3)


@pytest.fixture
def noisy_rgb():
    return random_buffer(16, 12, 3, seed=1)


@pytest.fixture
def noisy_rgba():
    return random_buffer(16, 12, 4, seed=2)
