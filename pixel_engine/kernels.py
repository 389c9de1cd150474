"""
Convolution kernels and the named presets.

A Kernel is an immutable square matrix of float weights with an odd side,
anchored at its center cell. Weights are used as given: nothing is
normalized implicitly, so a box blur must carry 1/9 per cell itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from config import HIGH_PASS_VARIANT
from .errors import InvalidKernelError


@dataclass(frozen=True, eq=False)
class Kernel:
    """Square, odd-sized matrix of weights.

    Attributes:
        weights: 2D float64 array, read-only after construction.
        name: Optional label used in logs and step names.
    """

    weights: np.ndarray = field(repr=False)
    name: str = "custom"

    def __post_init__(self) -> None:
        try:
            weights = np.array(self.weights, dtype=np.float64, copy=True)
        except (TypeError, ValueError) as e:
            raise InvalidKernelError(f"Kernel weights must be numeric: {e}")

        if weights.ndim != 2:
            raise InvalidKernelError(
                f"Kernel must be a 2D matrix, got {weights.ndim}D with shape {weights.shape}"
            )
        rows, cols = weights.shape
        if rows != cols:
            raise InvalidKernelError(f"Kernel must be square, got {rows}x{cols}")
        if rows % 2 == 0:
            raise InvalidKernelError(f"Kernel side must be odd, got {rows}x{cols}")
        if not np.all(np.isfinite(weights)):
            raise InvalidKernelError("Kernel weights must be finite")

        weights.setflags(write=False)
        object.__setattr__(self, "weights", weights)

    @property
    def size(self) -> int:
        return self.weights.shape[0]

    @property
    def radius(self) -> int:
        """Distance from the anchor to the kernel edge."""
        return (self.size - 1) // 2

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Kernel):
            return NotImplemented
        return np.array_equal(self.weights, other.weights)


def as_kernel(kernel) -> Kernel:
    """Coerce a Kernel or nested sequence of weights into a Kernel."""
    if isinstance(kernel, Kernel):
        return kernel
    return Kernel(kernel)


def box_kernel(size: int) -> Kernel:
    """Normalized box blur: every cell weighs 1/size²."""
    if size <= 0 or size % 2 == 0:
        raise InvalidKernelError(f"Box kernel size must be a positive odd number, got {size}")
    return Kernel(np.full((size, size), 1.0 / (size * size)), name=f"box{size}")


# =============================================================================
# Single-kernel presets
# =============================================================================

LOW_PASS = Kernel(np.full((3, 3), 1.0 / 9.0), name="low-pass")

HIGH_PASS_SHARP = Kernel(
    [[-1, -1, -1],
     [-1, 8, -1],
     [-1, -1, -1]],
    name="high-pass",
)

HIGH_PASS_SOFT = Kernel(
    [[-0.25, -0.25, -0.25],
     [-0.25, 2.0, -0.25],
     [-0.25, -0.25, -0.25]],
    name="high-pass-soft",
)

_HIGH_PASS_VARIANTS = {
    "8/-1": HIGH_PASS_SHARP,
    "2/-0.25": HIGH_PASS_SOFT,
}

if HIGH_PASS_VARIANT not in _HIGH_PASS_VARIANTS:
    raise ValueError(
        f"HIGH_PASS_VARIANT must be one of {sorted(_HIGH_PASS_VARIANTS)}, "
        f"got {HIGH_PASS_VARIANT!r}"
    )
HIGH_PASS = _HIGH_PASS_VARIANTS[HIGH_PASS_VARIANT]

LAPLACIAN = Kernel(
    [[0, -1, 0],
     [-1, 4, -1],
     [0, -1, 0]],
    name="laplacian",
)

GAUSSIAN_3X3 = Kernel(
    np.array(
        [[1, 2, 1],
         [2, 4, 2],
         [1, 2, 1]],
        dtype=np.float64,
    ) / 16.0,
    name="gaussian",
)

# =============================================================================
# Gradient (edge detector) pairs: (horizontal derivative, vertical derivative)
# =============================================================================

SOBEL_X = Kernel(
    [[-1, 0, 1],
     [-2, 0, 2],
     [-1, 0, 1]],
    name="sobel-x",
)
SOBEL_Y = Kernel(
    [[-1, -2, -1],
     [0, 0, 0],
     [1, 2, 1]],
    name="sobel-y",
)

PREWITT_X = Kernel(
    [[-1, 0, 1],
     [-1, 0, 1],
     [-1, 0, 1]],
    name="prewitt-x",
)
PREWITT_Y = Kernel(
    [[-1, -1, -1],
     [0, 0, 0],
     [1, 1, 1]],
    name="prewitt-y",
)

# Roberts cross is 2x2; it is embedded in 3x3 with its top-left cell on the anchor
ROBERTS_X = Kernel(
    [[0, 0, 0],
     [0, 1, 0],
     [0, 0, -1]],
    name="roberts-x",
)
ROBERTS_Y = Kernel(
    [[0, 0, 0],
     [0, 0, 1],
     [0, -1, 0]],
    name="roberts-y",
)

KERNEL_PRESETS: dict[str, Kernel] = {
    "low-pass": LOW_PASS,
    "high-pass": HIGH_PASS,
    "laplacian": LAPLACIAN,
    "gaussian": GAUSSIAN_3X3,
}

GRADIENT_PRESETS: dict[str, tuple[Kernel, Kernel]] = {
    "sobel": (SOBEL_X, SOBEL_Y),
    "prewitt": (PREWITT_X, PREWITT_Y),
    "roberts": (ROBERTS_X, ROBERTS_Y),
}
