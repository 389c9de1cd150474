"""
Operation step classes with a common interface.

Each step wraps one engine operation. Steps are pure: they take a buffer
and return a new one without mutating the input. A Pipeline chains steps,
keeps every intermediate buffer and can write each one to disk.

Usage:
    from pixel_engine.steps import GrayscaleStep, MedianStep, Pipeline

    pipeline = Pipeline(steps=[
        GrayscaleStep(),
        MedianStep(window_size=5),
    ])
    result = pipeline.run(buffer)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from config import ARTIFACT_EXTENSION, EQUALIZATION_LEVELS, MEDIAN_BORDER_POLICY
from .adapter import save_image
from .bitwise import BitwiseOp, combine
from .buffer import PixelBuffer
from .convolution import apply_gradient, apply_kernel
from .grayscale import to_grayscale
from .histogram import apply_equalization, equalize, generate_histogram
from .kernels import Kernel
from .median import median_filter

logger = logging.getLogger(__name__)


class OperationStep(ABC):
    """Base class for pipeline steps.

    Steps can optionally produce metadata (like the histogram of their
    input) that is kept alongside the output buffer.
    """

    @abstractmethod
    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        """Apply this step to a buffer.

        Must be pure: never mutates the input buffer.
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging and artifact file names."""
        pass

    def get_metadata(self) -> dict[str, Any]:
        """Return any metadata produced by the last apply(). Empty by default."""
        return {}


@dataclass(frozen=True)
class GrayscaleStep(OperationStep):
    """Average the color channels of every pixel."""

    force_opaque: bool = False

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return to_grayscale(buffer, force_opaque=self.force_opaque)

    @property
    def name(self) -> str:
        return "grayscale"


@dataclass(frozen=True)
class KernelStep(OperationStep):
    """Convolve with a single kernel."""

    kernel: Kernel

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return apply_kernel(buffer, self.kernel)

    @property
    def name(self) -> str:
        return f"kernel({self.kernel.name})"


@dataclass(frozen=True)
class GradientStep(OperationStep):
    """Gradient magnitude from a pair of directional kernels."""

    kernel_x: Kernel
    kernel_y: Kernel
    label: str = "gradient"

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return apply_gradient(buffer, self.kernel_x, self.kernel_y)

    @property
    def name(self) -> str:
        return f"{self.label}({self.kernel_x.size}x{self.kernel_x.size})"


@dataclass(frozen=True)
class MedianStep(OperationStep):
    """Median filter over a square window."""

    window_size: int = 3
    border: str = MEDIAN_BORDER_POLICY

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return median_filter(buffer, self.window_size, self.border)

    @property
    def name(self) -> str:
        return f"median({self.window_size})"


@dataclass(frozen=True)
class EqualizeStep(OperationStep):
    """Histogram equalization of the intensity channel.

    Records the input histogram and the equalization map as metadata.
    """

    levels: int = EQUALIZATION_LEVELS
    _metadata: dict[str, Any] = field(default_factory=dict, init=False, repr=False, compare=False)

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        histogram = generate_histogram(buffer)
        mapping = equalize(histogram, buffer.pixel_count, self.levels)
        self._metadata.clear()
        self._metadata.update({"histogram": histogram, "equalization_map": mapping})
        return apply_equalization(buffer, mapping, self.levels)

    @property
    def name(self) -> str:
        return f"equalize({self.levels})"

    def get_metadata(self) -> dict[str, Any]:
        return dict(self._metadata)


@dataclass(frozen=True)
class CombineStep(OperationStep):
    """Combine the running buffer with a fixed second buffer."""

    other: PixelBuffer
    op: BitwiseOp = BitwiseOp.AND

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return combine(buffer, self.other, self.op)

    @property
    def name(self) -> str:
        return f"combine({BitwiseOp.parse(self.op).value})"


@dataclass
class StepResult:
    """Result of applying a single step.

    Attributes:
        name: Name of the step that produced this result.
        buffer: Output buffer from the step.
        metadata: Any metadata produced by the step.
        artifact_path: Path where the buffer was saved (if artifact saving enabled).
    """

    name: str
    buffer: PixelBuffer
    metadata: dict[str, Any] = field(default_factory=dict)
    artifact_path: str | None = None


@dataclass
class PipelineStepResults:
    """Results from running a pipeline.

    Attributes:
        original: The input buffer.
        steps: List of StepResult for each step in order.
    """

    original: PixelBuffer
    steps: list[StepResult] = field(default_factory=list)

    @property
    def final(self) -> PixelBuffer:
        """Get the final buffer."""
        if not self.steps:
            return self.original
        return self.steps[-1].buffer

    def get_intermediate(self, step_name: str) -> PixelBuffer | None:
        """Get an intermediate buffer by step name, or None if not found."""
        for step in self.steps:
            if step.name == step_name:
                return step.buffer
        return None

    def get_metadata(self, key: str) -> Any | None:
        """First metadata value stored under ``key`` by any step."""
        for step in self.steps:
            if key in step.metadata:
                return step.metadata[key]
        return None

    @property
    def artifact_paths(self) -> dict[str, str]:
        """Artifact file stem (``NN_<step>``) to saved artifact path."""
        paths = {}
        for step in self.steps:
            if step.artifact_path:
                paths[Path(step.artifact_path).stem] = step.artifact_path
        return paths


@dataclass
class Pipeline:
    """A sequence of steps to apply to a buffer.

    The pipeline runs each step in order, passing the output of one step
    as the input to the next. All intermediate results are preserved.
    """

    steps: list[OperationStep]

    def run(
        self,
        buffer: PixelBuffer,
        artifact_dir: str | Path | None = None,
    ) -> PipelineStepResults:
        """Run the pipeline on a buffer.

        Args:
            buffer: Input buffer.
            artifact_dir: Optional directory to save every step's output as
                          ``NN_<step>.png``.

        Returns:
            PipelineStepResults containing all intermediate buffers and metadata.
        """
        result = PipelineStepResults(original=buffer)
        current = buffer

        for index, step in enumerate(self.steps, start=1):
            logger.debug("Running step %d/%d: %s", index, len(self.steps), step.name)
            output = step.apply(current)

            artifact_path = None
            if artifact_dir:
                step_key = step.name.split("(")[0]
                path = Path(artifact_dir) / f"{index:02d}_{step_key}{ARTIFACT_EXTENSION}"
                artifact_path = str(save_image(output, path))

            result.steps.append(
                StepResult(
                    name=step.name,
                    buffer=output,
                    metadata=step.get_metadata(),
                    artifact_path=artifact_path,
                )
            )
            current = output

        return result

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)
