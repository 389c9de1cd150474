"""
Intensity histograms and cumulative-distribution equalization.

Intensity is the truncated channel average ``(R + G + B) // 3``, the same
value the grayscale operation writes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from config import EQUALIZATION_LEVELS, HISTOGRAM_BINS
from .buffer import PixelBuffer
from .convolution import COLOR_CHANNELS
from .grayscale import intensity

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Histogram:
    """Frequency of each 8-bit intensity in a buffer.

    Attributes:
        counts: 256 int64 counts, read-only. Their sum is the pixel count.
    """

    counts: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        values = np.asarray(self.counts)
        if values.dtype.kind == "f" and not np.all(np.mod(values, 1) == 0):
            raise ValueError("Histogram counts must be whole numbers")
        counts = np.array(values, dtype=np.int64, copy=True)
        if counts.shape != (HISTOGRAM_BINS,):
            raise ValueError(
                f"Histogram must have {HISTOGRAM_BINS} bins, got shape {counts.shape}"
            )
        if np.any(counts < 0):
            raise ValueError("Histogram counts must be non-negative")
        counts.setflags(write=False)
        object.__setattr__(self, "counts", counts)

    @property
    def total(self) -> int:
        return int(self.counts.sum())

    def probabilities(self, total_pixels: int | None = None) -> np.ndarray:
        """Counts divided by the pixel total (the normalized histogram)."""
        total = self.total if total_pixels is None else total_pixels
        if total <= 0:
            raise ValueError(f"total_pixels must be positive, got {total}")
        return self.counts / float(total)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Histogram):
            return NotImplemented
        return np.array_equal(self.counts, other.counts)


def generate_histogram(buffer: PixelBuffer) -> Histogram:
    """Count how many pixels have each intensity."""
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")
    gray = intensity(buffer.pixels[:, :, :COLOR_CHANNELS])
    counts = np.bincount(gray.reshape(-1), minlength=HISTOGRAM_BINS)
    logger.debug("Histogram of %dx%d buffer", buffer.width, buffer.height)
    return Histogram(counts)


def equalize(
    histogram: Histogram,
    total_pixels: int | None = None,
    levels: int = EQUALIZATION_LEVELS,
) -> np.ndarray:
    """Map every intensity to an equalized output level.

    ``mapped[i] = floor(cdf[i] * (levels - 1))`` where ``cdf`` is the running
    sum of ``counts / total_pixels``. With the default of 8 levels the
    scaling factor is 7 and outputs are the indices 0..7.

    Args:
        histogram: Source histogram.
        total_pixels: Pixel count used for normalization. Defaults to the
                      histogram total.
        levels: Number of output levels, at least 2.

    Returns:
        256-entry int64 array, each entry in [0, levels - 1].

    Raises:
        ValueError: If total_pixels is not positive or levels < 2.
    """
    if levels < 2:
        raise ValueError(f"levels must be at least 2, got {levels}")

    total = histogram.total if total_pixels is None else total_pixels
    if total <= 0:
        raise ValueError(f"total_pixels must be positive, got {total}")
    cdf = np.cumsum(histogram.counts) / float(total)
    mapped = np.floor(cdf * (levels - 1)).astype(np.int64)
    return np.clip(mapped, 0, levels - 1)


def equalized_histogram(
    histogram: Histogram,
    mapping: np.ndarray,
    levels: int | None = None,
) -> np.ndarray:
    """Probability mass that lands on each output level after equalization."""
    mapping = np.asarray(mapping, dtype=np.int64)
    if mapping.shape != (HISTOGRAM_BINS,):
        raise ValueError(
            f"mapping must have {HISTOGRAM_BINS} entries, got shape {mapping.shape}"
        )
    size = int(mapping.max()) + 1 if levels is None else levels
    return np.bincount(mapping, weights=histogram.probabilities(), minlength=size)


def equalize_buffer(
    buffer: PixelBuffer,
    levels: int = EQUALIZATION_LEVELS,
) -> PixelBuffer:
    """Grayscale buffer with intensities remapped through the equalization map.

    Output levels are spread back over [0, 255] so that level ``L - 1`` is
    white. Alpha is copied from the source.
    """
    histogram = generate_histogram(buffer)
    mapping = equalize(histogram, buffer.pixel_count, levels)
    return apply_equalization(buffer, mapping, levels)


def apply_equalization(
    buffer: PixelBuffer,
    mapping: np.ndarray,
    levels: int = EQUALIZATION_LEVELS,
) -> PixelBuffer:
    """Remap a buffer through an existing equalization map.

    Raises:
        ValueError: If the map does not have 256 entries or levels < 2.
    """
    if levels < 2:
        raise ValueError(f"levels must be at least 2, got {levels}")
    mapping = np.asarray(mapping, dtype=np.int64)
    if mapping.shape != (HISTOGRAM_BINS,):
        raise ValueError(
            f"mapping must have {HISTOGRAM_BINS} entries, got shape {mapping.shape}"
        )
    mapping = np.clip(mapping, 0, levels - 1)
    lut = np.floor(mapping * 255.0 / (levels - 1)).astype(np.uint8)

    gray = intensity(buffer.pixels[:, :, :COLOR_CHANNELS])
    result = buffer.pixels.copy()
    result[:, :, :COLOR_CHANNELS] = lut[gray][:, :, np.newaxis]
    logger.debug("Equalized %dx%d buffer to %d levels", buffer.width, buffer.height, levels)
    return PixelBuffer.from_pixels(result)
