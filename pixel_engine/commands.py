"""
Named operations for the command layer.

Every single-image operation is exposed as a callable taking one
PixelBuffer and returning a new one; the two-image bitwise operations take
two buffers. The calling layer obtains the input and displays the output.
"""

from __future__ import annotations

from functools import partial
from typing import Callable

from config import MEDIAN_WINDOW_SIZES

from .bitwise import BitwiseOp, combine
from .buffer import PixelBuffer
from .config import EngineConfig
from .convolution import apply_gradient, apply_kernel
from .grayscale import to_grayscale
from .histogram import equalize_buffer
from .kernels import GRADIENT_PRESETS, KERNEL_PRESETS
from .median import median_filter
from .steps import (
    EqualizeStep,
    GradientStep,
    GrayscaleStep,
    KernelStep,
    MedianStep,
    OperationStep,
)

Operation = Callable[[PixelBuffer], PixelBuffer]
BinaryOperation = Callable[[PixelBuffer, PixelBuffer], PixelBuffer]


def build_operations(config: EngineConfig | None = None) -> dict[str, Operation]:
    """Build the name -> operation table for a configuration."""
    if config is None:
        config = EngineConfig()
    config.validate()

    operations: dict[str, Operation] = {
        "grayscale": partial(to_grayscale, force_opaque=config.grayscale_force_opaque),
    }
    for name, kernel in KERNEL_PRESETS.items():
        operations[name] = partial(apply_kernel, kernel=kernel)
    for name, (kernel_x, kernel_y) in GRADIENT_PRESETS.items():
        operations[name] = partial(apply_gradient, kernel_x=kernel_x, kernel_y=kernel_y)

    operations["median"] = partial(
        median_filter, window_size=config.median_window, border=config.median_border
    )
    for window_size in MEDIAN_WINDOW_SIZES:
        operations[f"median-{window_size}"] = partial(
            median_filter, window_size=window_size, border=config.median_border
        )
    operations["equalize"] = partial(equalize_buffer, levels=config.equalization_levels)
    return operations


def build_step(name: str, config: EngineConfig | None = None) -> OperationStep:
    """Pipeline step equivalent of a named operation.

    Raises:
        ValueError: If ``name`` is not a known operation.
    """
    if config is None:
        config = EngineConfig()
    config.validate()

    if name == "grayscale":
        return GrayscaleStep(force_opaque=config.grayscale_force_opaque)
    if name in KERNEL_PRESETS:
        return KernelStep(KERNEL_PRESETS[name])
    if name in GRADIENT_PRESETS:
        kernel_x, kernel_y = GRADIENT_PRESETS[name]
        return GradientStep(kernel_x, kernel_y, label=name)
    if name == "median":
        return MedianStep(config.median_window, config.median_border)
    if name.startswith("median-") and name in OPERATIONS:
        return MedianStep(int(name.split("-", 1)[1]), config.median_border)
    if name == "equalize":
        return EqualizeStep(levels=config.equalization_levels)
    raise ValueError(_unknown(name, OPERATIONS))


BINARY_OPERATIONS: dict[str, BinaryOperation] = {
    op.value: partial(combine, op=op) for op in BitwiseOp
}

OPERATIONS: dict[str, Operation] = build_operations()


def _unknown(name: str, table: dict) -> str:
    return f"Unknown operation {name!r}. Expected one of: {', '.join(sorted(table))}"


def get_operation(name: str, config: EngineConfig | None = None) -> Operation:
    """Look up a single-image operation by name.

    Raises:
        ValueError: If ``name`` is unknown.
    """
    table = OPERATIONS if config is None else build_operations(config)
    try:
        return table[name]
    except KeyError:
        raise ValueError(_unknown(name, table))


def get_binary_operation(name: str) -> BinaryOperation:
    """Look up a two-image operation by name ("and", "or", "xor").

    Raises:
        ValueError: If ``name`` is unknown.
    """
    try:
        return BINARY_OPERATIONS[name.lower()]
    except KeyError:
        raise ValueError(_unknown(name, BINARY_OPERATIONS))
