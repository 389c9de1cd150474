"""Pydantic schemas for the JSON reports printed by the CLI.

Engine types (PixelBuffer, Histogram) live in their own modules.
These schemas define the exact JSON shape of `pxe histogram --json`
and `pxe pipeline --json`.
"""

from pydantic import BaseModel, Field, field_validator

from config import HISTOGRAM_BINS


class HistogramReport(BaseModel):
    """Histogram of one image plus its equalization."""
    source: str
    width: int
    height: int
    total_pixels: int
    levels: int
    counts: list[int]
    probabilities: list[float]
    equalization_map: list[int]
    equalized_histogram: list[float]

    @field_validator("counts", "probabilities", "equalization_map")
    @classmethod
    def _full_range(cls, value: list) -> list:
        if len(value) != HISTOGRAM_BINS:
            raise ValueError(f"expected {HISTOGRAM_BINS} entries, got {len(value)}")
        return value


class StepReport(BaseModel):
    name: str
    artifact_path: str | None = None


class PipelineReport(BaseModel):
    """Steps run by `pxe pipeline` and where the output went."""
    source: str
    output: str
    width: int
    height: int
    steps: list[StepReport] = Field(default_factory=list)
