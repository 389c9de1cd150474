"""
Pixel-buffer manipulation engine.

This package provides pure, deterministic transforms over raw decoded image
buffers. All operations follow the pattern: input -> new output, never
mutating the caller's buffer.

Key components:
- buffer: PixelBuffer (unpadded BGR/BGRA bytes) and Pixel
- kernels: Kernel and the named presets (low-pass, Sobel, ...)
- convolution: apply_kernel() and apply_gradient()
- median: median_filter()
- histogram: generate_histogram(), equalize(), equalize_buffer(), apply_equalization()
- bitwise: combine() with BitwiseOp
- grayscale: to_grayscale()
- steps: class-based steps and Pipeline
- commands: name -> operation tables for the command layer
- adapter: OpenCV-backed ImageHandle with scoped lock/unlock
"""

from .errors import (
    PixelEngineError,
    InvalidDimensionsError,
    OutOfRangeError,
    InvalidKernelError,
    SizeMismatchError,
)
from .buffer import Pixel, PixelBuffer
from .kernels import (
    Kernel,
    box_kernel,
    LOW_PASS,
    HIGH_PASS,
    HIGH_PASS_SHARP,
    HIGH_PASS_SOFT,
    LAPLACIAN,
    GAUSSIAN_3X3,
    SOBEL_X,
    SOBEL_Y,
    PREWITT_X,
    PREWITT_Y,
    ROBERTS_X,
    ROBERTS_Y,
    KERNEL_PRESETS,
    GRADIENT_PRESETS,
)
from .convolution import apply_kernel, apply_gradient, apply_preset
from .median import median_filter
from .histogram import (
    Histogram,
    generate_histogram,
    equalize,
    equalized_histogram,
    equalize_buffer,
    apply_equalization,
)
from .bitwise import BitwiseOp, combine
from .grayscale import to_grayscale
from .config import EngineConfig
from .steps import (
    OperationStep,
    GrayscaleStep,
    KernelStep,
    GradientStep,
    MedianStep,
    EqualizeStep,
    CombineStep,
    Pipeline,
    PipelineStepResults,
    StepResult,
)
from .commands import (
    OPERATIONS,
    BINARY_OPERATIONS,
    build_operations,
    build_step,
    get_operation,
    get_binary_operation,
)

__all__ = [
    # Errors
    "PixelEngineError",
    "InvalidDimensionsError",
    "OutOfRangeError",
    "InvalidKernelError",
    "SizeMismatchError",
    # Data model
    "Pixel",
    "PixelBuffer",
    "Kernel",
    "box_kernel",
    "Histogram",
    "EngineConfig",
    # Kernel presets
    "LOW_PASS",
    "HIGH_PASS",
    "HIGH_PASS_SHARP",
    "HIGH_PASS_SOFT",
    "LAPLACIAN",
    "GAUSSIAN_3X3",
    "SOBEL_X",
    "SOBEL_Y",
    "PREWITT_X",
    "PREWITT_Y",
    "ROBERTS_X",
    "ROBERTS_Y",
    "KERNEL_PRESETS",
    "GRADIENT_PRESETS",
    # Operations
    "apply_kernel",
    "apply_gradient",
    "apply_preset",
    "median_filter",
    "generate_histogram",
    "equalize",
    "equalized_histogram",
    "equalize_buffer",
    "apply_equalization",
    "BitwiseOp",
    "combine",
    "to_grayscale",
    # Class-based API
    "OperationStep",
    "GrayscaleStep",
    "KernelStep",
    "GradientStep",
    "MedianStep",
    "EqualizeStep",
    "CombineStep",
    "Pipeline",
    "PipelineStepResults",
    "StepResult",
    # Command layer
    "OPERATIONS",
    "BINARY_OPERATIONS",
    "build_operations",
    "build_step",
    "get_operation",
    "get_binary_operation",
]
