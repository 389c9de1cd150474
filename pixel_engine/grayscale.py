"""Grayscale point operation."""

from __future__ import annotations

import logging

import numpy as np

from config import GRAYSCALE_FORCE_OPAQUE
from .buffer import ALPHA, PixelBuffer

logger = logging.getLogger(__name__)


def intensity(color: np.ndarray) -> np.ndarray:
    """Truncated channel average ``(B + G + R) // 3`` of an (..., 3) array."""
    return (color.astype(np.int32).sum(axis=-1) // 3).astype(np.uint8)


def to_grayscale(
    buffer: PixelBuffer,
    force_opaque: bool = GRAYSCALE_FORCE_OPAQUE,
) -> PixelBuffer:
    """Set R, G and B of every pixel to their truncated average.

    Pure function: returns a new buffer without modifying the input.

    Args:
        buffer: Source pixels.
        force_opaque: Set alpha to 255 instead of keeping it.
                      Ignored for 3-byte buffers.
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")

    result = buffer.pixels.copy()
    result[:, :, :3] = intensity(buffer.pixels[:, :, :3])[:, :, np.newaxis]
    if force_opaque and buffer.has_alpha:
        result[:, :, ALPHA] = 255

    logger.debug("Grayscale on %dx%d buffer", buffer.width, buffer.height)
    return PixelBuffer.from_pixels(result)
