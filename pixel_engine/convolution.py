"""
Neighborhood convolution over pixel buffers.

Two operations share one accumulation routine:
- apply_kernel: a single weighted sum per channel (blur, sharpen, Laplacian)
- apply_gradient: two weighted sums combined as sqrt(gx² + gy²)
  (Sobel, Prewitt and Roberts edge detectors)

"Convolution" here does not flip the kernel; it is a correlation, which
only matters for asymmetric kernels.

Only pixels whose whole neighborhood lies inside the image are computed.
The border band of width ``kernel.radius`` is copied from the input
unchanged. Sums are accumulated in float64, clamped to [0, 255] and rounded
to the nearest integer. Alpha, when present, is forced to 255 on every
computed pixel.
"""

from __future__ import annotations

import logging

import numpy as np

from .buffer import ALPHA, PixelBuffer
from .errors import InvalidKernelError
from .kernels import GRADIENT_PRESETS, KERNEL_PRESETS, Kernel, as_kernel

logger = logging.getLogger(__name__)

COLOR_CHANNELS = 3


def _require_buffer(buffer) -> None:
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")


def has_interior(buffer: PixelBuffer, radius: int) -> bool:
    """True if at least one pixel has a full neighborhood of ``radius``."""
    return buffer.width > 2 * radius and buffer.height > 2 * radius


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Clamp float values to [0, 255] and round them to bytes."""
    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)


def correlate(channels: np.ndarray, kernel: Kernel) -> np.ndarray:
    """Weighted sums of every full neighborhood.

    Args:
        channels: (H, W, C) float64 array.
        kernel: Kernel to apply.

    Returns:
        (H - 2r, W - 2r, C) float64 array where entry (y, x) is the sum for
        input pixel (y + r, x + r).
    """
    size = kernel.size
    height, width = channels.shape[:2]
    out_h = height - size + 1
    out_w = width - size + 1
    acc = np.zeros((out_h, out_w) + channels.shape[2:], dtype=np.float64)

    for dy in range(size):
        for dx in range(size):
            weight = kernel.weights[dy, dx]
            if weight == 0.0:
                continue
            acc += weight * channels[dy : dy + out_h, dx : dx + out_w]
    return acc


def _write_interior(
    buffer: PixelBuffer,
    radius: int,
    values: np.ndarray,
) -> PixelBuffer:
    """Return a copy of ``buffer`` with the interior color channels replaced."""
    result = buffer.pixels.copy()
    interior = (
        slice(radius, buffer.height - radius),
        slice(radius, buffer.width - radius),
    )
    result[interior + (slice(0, COLOR_CHANNELS),)] = to_uint8(values)
    if buffer.has_alpha:
        result[interior + (ALPHA,)] = 255
    return PixelBuffer.from_pixels(result)


def apply_kernel(buffer: PixelBuffer, kernel: Kernel) -> PixelBuffer:
    """Convolve a buffer with a single kernel.

    Pure function: returns a new buffer without modifying the input.

    Args:
        buffer: Source pixels.
        kernel: Square, odd-sized kernel (a Kernel or nested sequence).

    Returns:
        New buffer; border pixels within ``kernel.radius`` of an edge are
        copied unchanged.

    Raises:
        InvalidKernelError: If the kernel is not square with an odd side.
        TypeError: If buffer is not a PixelBuffer.

    Examples:
        >>> buf = PixelBuffer.from_pixels(np.full((5, 5, 3), 90, dtype=np.uint8))
        >>> apply_kernel(buf, Kernel(np.full((3, 3), 1 / 9))).get_pixel(2, 2).r
        90.0
    """
    _require_buffer(buffer)
    kernel = as_kernel(kernel)
    radius = kernel.radius

    logger.debug(
        "Applying %dx%d kernel %s to %dx%d buffer",
        kernel.size, kernel.size, kernel.name, buffer.width, buffer.height,
    )

    if not has_interior(buffer, radius):
        logger.debug("Buffer has no interior for radius %d; returning copy", radius)
        return buffer.copy()

    color = buffer.pixels[:, :, :COLOR_CHANNELS].astype(np.float64)
    sums = correlate(color, kernel)
    return _write_interior(buffer, radius, sums)


def apply_gradient(
    buffer: PixelBuffer,
    kernel_x: Kernel,
    kernel_y: Kernel,
) -> PixelBuffer:
    """Edge strength from two directional kernels.

    Each interior channel becomes ``sqrt(gx² + gy²)`` where gx and gy are
    the weighted sums under ``kernel_x`` and ``kernel_y``.

    Pure function: returns a new buffer without modifying the input.

    Raises:
        InvalidKernelError: If either kernel is invalid or their sizes differ.
        TypeError: If buffer is not a PixelBuffer.
    """
    _require_buffer(buffer)
    kernel_x = as_kernel(kernel_x)
    kernel_y = as_kernel(kernel_y)
    if kernel_x.size != kernel_y.size:
        raise InvalidKernelError(
            f"Gradient kernels must have the same size, got "
            f"{kernel_x.size}x{kernel_x.size} and {kernel_y.size}x{kernel_y.size}"
        )
    radius = kernel_x.radius

    logger.debug(
        "Applying gradient %s/%s to %dx%d buffer",
        kernel_x.name, kernel_y.name, buffer.width, buffer.height,
    )

    if not has_interior(buffer, radius):
        logger.debug("Buffer has no interior for radius %d; returning copy", radius)
        return buffer.copy()

    color = buffer.pixels[:, :, :COLOR_CHANNELS].astype(np.float64)
    gx = correlate(color, kernel_x)
    gy = correlate(color, kernel_y)
    return _write_interior(buffer, radius, np.sqrt(gx * gx + gy * gy))


def apply_preset(buffer: PixelBuffer, name: str) -> PixelBuffer:
    """Apply a named single-kernel or gradient preset.

    Raises:
        ValueError: If ``name`` is not a known preset.
    """
    if name in KERNEL_PRESETS:
        return apply_kernel(buffer, KERNEL_PRESETS[name])
    if name in GRADIENT_PRESETS:
        kernel_x, kernel_y = GRADIENT_PRESETS[name]
        return apply_gradient(buffer, kernel_x, kernel_y)
    known = sorted(KERNEL_PRESETS) + sorted(GRADIENT_PRESETS)
    raise ValueError(f"Unknown kernel preset {name!r}. Expected one of: {', '.join(known)}")
