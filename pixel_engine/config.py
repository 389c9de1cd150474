"""
Configuration for engine operations.

The command layer and CLI read every tunable choice from an EngineConfig so
that a run can be reproduced from its settings alone.
"""

from dataclasses import dataclass

from config import (
    DEFAULT_MEDIAN_WINDOW,
    EQUALIZATION_LEVELS,
    GRAYSCALE_FORCE_OPAQUE,
    MEDIAN_BORDER_POLICY,
    MEDIAN_WINDOW_SIZES,
)
from .median import BORDER_POLICIES


@dataclass(frozen=True)
class EngineConfig:
    """Settings shared by the named operations.

    Attributes:
        median_window: Window side for the "median" operation (3, 5 or 7).
        median_border: "copy" or "zero" for pixels without a full window.
        equalization_levels: Number of output levels for equalization.
                             The CDF is scaled by ``levels - 1``.
        grayscale_force_opaque: Whether grayscale sets alpha to 255.
    """

    median_window: int = DEFAULT_MEDIAN_WINDOW
    median_border: str = MEDIAN_BORDER_POLICY
    equalization_levels: int = EQUALIZATION_LEVELS
    grayscale_force_opaque: bool = GRAYSCALE_FORCE_OPAQUE

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.median_window not in MEDIAN_WINDOW_SIZES:
            raise ValueError(
                f"median_window must be one of {MEDIAN_WINDOW_SIZES}, "
                f"got {self.median_window}"
            )

        if self.median_border not in BORDER_POLICIES:
            raise ValueError(
                f"median_border must be one of {BORDER_POLICIES}, "
                f"got {self.median_border!r}"
            )

        if not isinstance(self.equalization_levels, int) or self.equalization_levels < 2:
            raise ValueError(
                f"equalization_levels must be an integer >= 2, "
                f"got {self.equalization_levels}"
            )
        if self.equalization_levels > 256:
            raise ValueError(
                f"equalization_levels={self.equalization_levels} exceeds the "
                f"256 intensities of an 8-bit channel"
            )
