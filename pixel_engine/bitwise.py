"""Byte-wise boolean combination of two buffers."""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np

from .buffer import PixelBuffer
from .errors import SizeMismatchError

logger = logging.getLogger(__name__)


class BitwiseOp(str, Enum):
    AND = "and"
    OR = "or"
    XOR = "xor"

    @classmethod
    def parse(cls, value) -> BitwiseOp:
        """Accept a BitwiseOp or its case-insensitive name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(op.value for op in cls)
            raise ValueError(f"Unknown bitwise operation {value!r}. Expected one of: {choices}")


_UFUNCS = {
    BitwiseOp.AND: np.bitwise_and,
    BitwiseOp.OR: np.bitwise_or,
    BitwiseOp.XOR: np.bitwise_xor,
}


def combine(a: PixelBuffer, b: PixelBuffer, op) -> PixelBuffer:
    """Combine two buffers byte by byte, alpha included.

    Args:
        a: First buffer.
        b: Second buffer, same width, height and bytes per pixel as ``a``.
        op: BitwiseOp or one of "and", "or", "xor".

    Raises:
        SizeMismatchError: If the buffers differ in layout.
        ValueError: If op is unknown.
    """
    for buffer in (a, b):
        if not isinstance(buffer, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")
    op = BitwiseOp.parse(op)

    if a.width != b.width or a.height != b.height:
        raise SizeMismatchError(
            f"Cannot combine {a.width}x{a.height} with {b.width}x{b.height}"
        )
    if a.bytes_per_pixel != b.bytes_per_pixel:
        raise SizeMismatchError(
            f"Cannot combine {a.bytes_per_pixel}-byte pixels with "
            f"{b.bytes_per_pixel}-byte pixels"
        )

    logger.debug("Bitwise %s on %dx%d buffers", op.value, a.width, a.height)
    data = _UFUNCS[op](a.data, b.data)
    return PixelBuffer(a.width, a.height, a.bytes_per_pixel, data)
