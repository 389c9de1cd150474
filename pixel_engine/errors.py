"""Exceptions raised by the pixel engine.

Every engine error derives from PixelEngineError and from the builtin
exception it refines, so callers can catch either.
"""


class PixelEngineError(Exception):
    """Base class for all engine errors."""


class InvalidDimensionsError(PixelEngineError, ValueError):
    """Width, height, stride or bytes-per-pixel are inconsistent."""


class OutOfRangeError(PixelEngineError, IndexError):
    """A pixel coordinate lies outside the buffer."""


class InvalidKernelError(PixelEngineError, ValueError):
    """A kernel is not a square matrix with an odd side."""


class SizeMismatchError(PixelEngineError, ValueError):
    """Two buffers that must share a layout do not."""
