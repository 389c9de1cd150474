"""
Order-statistic (median) neighborhood filter.

For every pixel with a full window inside the image, the B, G and R
channels are each replaced by a rank-selected sample of their window.
Alpha is never filtered.

The selected rank is the 0-based index ``(window_size² + 1) // 2`` of the
ascending samples, one position above the true median.
"""

from __future__ import annotations

import logging

import numpy as np

from config import MEDIAN_BORDER_POLICY, MEDIAN_WINDOW_SIZES
from .buffer import PixelBuffer
from .convolution import COLOR_CHANNELS, has_interior

logger = logging.getLogger(__name__)

BORDER_POLICIES = ("copy", "zero")


def median_rank(window_size: int) -> int:
    """0-based index of the sample kept from a sorted window."""
    return (window_size * window_size + 1) // 2


def median_filter(
    buffer: PixelBuffer,
    window_size: int = 3,
    border: str = MEDIAN_BORDER_POLICY,
) -> PixelBuffer:
    """Apply the median filter.

    Pure function: returns a new buffer without modifying the input.

    Args:
        buffer: Source pixels.
        window_size: Side of the square window, one of 3, 5 or 7.
        border: "copy" keeps the source color of pixels without a full
                window; "zero" sets their color channels to 0. Alpha is
                copied either way.

    Returns:
        New filtered buffer.

    Raises:
        ValueError: If window_size or border is not supported.
        TypeError: If buffer is not a PixelBuffer.
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")
    if window_size not in MEDIAN_WINDOW_SIZES:
        raise ValueError(
            f"window_size must be one of {MEDIAN_WINDOW_SIZES}, got {window_size}"
        )
    if border not in BORDER_POLICIES:
        raise ValueError(f"border must be one of {BORDER_POLICIES}, got {border!r}")

    radius = window_size // 2
    rank = median_rank(window_size)
    logger.debug(
        "Median filter %dx%d (rank %d, border=%s) on %dx%d buffer",
        window_size, window_size, rank, border, buffer.width, buffer.height,
    )

    result = buffer.pixels.copy()
    if border == "zero":
        result[:, :, :COLOR_CHANNELS] = 0

    if not has_interior(buffer, radius):
        return PixelBuffer.from_pixels(result)

    # (H', W', C, k, k) windows over the color channels
    color = buffer.pixels[:, :, :COLOR_CHANNELS]
    windows = np.lib.stride_tricks.sliding_window_view(
        color, (window_size, window_size), axis=(0, 1)
    )
    samples = windows.reshape(windows.shape[:3] + (window_size * window_size,))
    selected = np.partition(samples, rank, axis=-1)[..., rank]

    result[
        radius : buffer.height - radius,
        radius : buffer.width - radius,
        :COLOR_CHANNELS,
    ] = selected
    return PixelBuffer.from_pixels(result)
