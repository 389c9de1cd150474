"""
Owned, unpadded pixel buffers.

A PixelBuffer holds decoded 8-bit pixel data as one flat uint8 array with
no row padding, so ``len(data) == width * height * bytes_per_pixel`` always
holds. Channel order is B, G, R (, A): the byte order of native 24/32-bit
bitmaps and of images decoded by OpenCV.

Buffers are immutable. Every operation that changes pixels returns a new
buffer, which removes any question of whether a caller's buffer was touched.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .errors import InvalidDimensionsError, OutOfRangeError

SUPPORTED_BYTES_PER_PIXEL = (3, 4)

# Index of each channel inside a pixel
BLUE, GREEN, RED, ALPHA = 0, 1, 2, 3


@dataclass(frozen=True)
class Pixel:
    """A transient view of one pixel.

    Channels are floats so that callers can accumulate without 8-bit
    overflow; they are clamped to [0, 255] when written back.

    Attributes:
        r: Red channel.
        g: Green channel.
        b: Blue channel.
        a: Alpha channel, or None for 3-byte buffers.
    """

    r: float
    g: float
    b: float
    a: float | None = None


def _as_byte_array(data) -> np.ndarray:
    """Return a flat uint8 view (or copy) of raw pixel bytes."""
    if isinstance(data, np.ndarray):
        if data.dtype != np.uint8:
            raise TypeError(f"Expected uint8 pixel data, got dtype {data.dtype}")
        return np.ascontiguousarray(data).reshape(-1)
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(data, dtype=np.uint8)
    raise TypeError(
        f"Expected bytes, bytearray, memoryview or numpy.ndarray, got {type(data).__name__}"
    )


def _validate_geometry(width: int, height: int, bytes_per_pixel: int) -> None:
    if not isinstance(width, (int, np.integer)) or not isinstance(height, (int, np.integer)):
        raise TypeError(
            f"width and height must be int, got {type(width).__name__} "
            f"and {type(height).__name__}"
        )
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(
            f"width and height must be positive, got {width}x{height}"
        )
    if bytes_per_pixel not in SUPPORTED_BYTES_PER_PIXEL:
        raise InvalidDimensionsError(
            f"bytes_per_pixel must be 3 or 4, got {bytes_per_pixel}"
        )


def _clamp_channel(value: float) -> int:
    return int(min(255.0, max(0.0, float(value))))


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Decoded pixel data with its geometry.

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
        bytes_per_pixel: 3 (BGR) or 4 (BGRA).
        data: Flat, read-only uint8 array of ``width * height * bytes_per_pixel``
              bytes in row-major order, without padding.
    """

    width: int
    height: int
    bytes_per_pixel: int
    data: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        _validate_geometry(self.width, self.height, self.bytes_per_pixel)
        data = np.array(_as_byte_array(self.data), dtype=np.uint8, copy=True)
        expected = self.width * self.height * self.bytes_per_pixel
        if data.size != expected:
            raise InvalidDimensionsError(
                f"Expected {expected} bytes for {self.width}x{self.height}x"
                f"{self.bytes_per_pixel}, got {data.size}"
            )
        data.setflags(write=False)
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))
        object.__setattr__(self, "data", data)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_raw_decoded(
        cls,
        data,
        width: int,
        height: int,
        stride: int,
        bytes_per_pixel: int,
    ) -> PixelBuffer:
        """Build a buffer from possibly padded native rows.

        Each row starts at ``row * stride`` and only its first
        ``width * bytes_per_pixel`` bytes are kept; the rest is padding.
        The final row does not need to carry padding.

        Args:
            data: Raw bytes (bytes, bytearray, memoryview or uint8 array).
            width: Width in pixels.
            height: Height in pixels.
            stride: Bytes per row in ``data``.
            bytes_per_pixel: 3 or 4.

        Returns:
            A new, unpadded PixelBuffer.

        Raises:
            InvalidDimensionsError: If the stride is shorter than a row, the
                geometry is invalid, or ``data`` is too short.
            TypeError: If ``data`` is not a byte sequence.
        """
        _validate_geometry(width, height, bytes_per_pixel)
        raw = _as_byte_array(data)
        row_length = width * bytes_per_pixel

        if stride < row_length:
            raise InvalidDimensionsError(
                f"stride {stride} is smaller than the row length {row_length} "
                f"({width} pixels x {bytes_per_pixel} bytes)"
            )

        required = (height - 1) * stride + row_length
        if raw.size < required:
            raise InvalidDimensionsError(
                f"Expected at least {required} bytes for {height} rows of stride "
                f"{stride}, got {raw.size}"
            )

        rows = np.lib.stride_tricks.as_strided(
            raw,
            shape=(height, row_length),
            strides=(stride * raw.itemsize, raw.itemsize),
            writeable=False,
        )
        return cls(width, height, bytes_per_pixel, rows.reshape(-1))

    @classmethod
    def from_pixels(cls, pixels: np.ndarray) -> PixelBuffer:
        """Build a buffer from an (H, W, 3|4) uint8 array."""
        if not isinstance(pixels, np.ndarray):
            raise TypeError(f"Expected numpy.ndarray, got {type(pixels).__name__}")
        if pixels.ndim != 3:
            raise InvalidDimensionsError(
                f"Pixel array must be 3D (H, W, C), got {pixels.ndim}D array "
                f"with shape {pixels.shape}"
            )
        height, width, channels = pixels.shape
        return cls(width, height, channels, pixels)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (height, width, bytes_per_pixel) view of the data."""
        return self.data.reshape(self.height, self.width, self.bytes_per_pixel)

    @property
    def has_alpha(self) -> bool:
        return self.bytes_per_pixel == 4

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def row_length(self) -> int:
        """Bytes per unpadded row."""
        return self.width * self.bytes_per_pixel

    def to_raw_bytes(self, stride: int | None = None) -> bytes:
        """Return the pixel bytes.

        Args:
            stride: Optional target row stride. When given, every row is
                    padded with zero bytes up to ``stride``.

        Raises:
            InvalidDimensionsError: If ``stride`` is shorter than a row.
        """
        if stride is None or stride == self.row_length:
            return self.data.tobytes()
        if stride < self.row_length:
            raise InvalidDimensionsError(
                f"stride {stride} is smaller than the row length {self.row_length}"
            )
        padded = np.zeros((self.height, stride), dtype=np.uint8)
        padded[:, : self.row_length] = self.data.reshape(self.height, self.row_length)
        return padded.tobytes()

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.width, self.height, self.bytes_per_pixel, self.data)

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfRangeError(
                f"Pixel ({x}, {y}) is outside {self.width}x{self.height} buffer"
            )
        return (y * self.width + x) * self.bytes_per_pixel

    def get_pixel(self, x: int, y: int) -> Pixel:
        """Return the pixel at column ``x``, row ``y``.

        Raises:
            OutOfRangeError: If the coordinate lies outside the buffer.
        """
        offset = self._offset(x, y)
        channels = self.data[offset : offset + self.bytes_per_pixel]
        alpha = float(channels[ALPHA]) if self.has_alpha else None
        return Pixel(
            r=float(channels[RED]),
            g=float(channels[GREEN]),
            b=float(channels[BLUE]),
            a=alpha,
        )

    def set_pixel(self, x: int, y: int, pixel: Pixel) -> PixelBuffer:
        """Return a copy of this buffer with one pixel replaced.

        Channels are clamped to [0, 255]. On a 4-byte buffer a pixel without
        alpha keeps the existing alpha value.

        Raises:
            OutOfRangeError: If the coordinate lies outside the buffer.
        """
        offset = self._offset(x, y)
        data = self.data.copy()
        data[offset + BLUE] = _clamp_channel(pixel.b)
        data[offset + GREEN] = _clamp_channel(pixel.g)
        data[offset + RED] = _clamp_channel(pixel.r)
        if self.has_alpha and pixel.a is not None:
            data[offset + ALPHA] = _clamp_channel(pixel.a)
        return PixelBuffer(self.width, self.height, self.bytes_per_pixel, data)

    # ------------------------------------------------------------------

    def same_layout(self, other: PixelBuffer) -> bool:
        """True if both buffers share width, height and bytes per pixel."""
        return (
            self.width == other.width
            and self.height == other.height
            and self.bytes_per_pixel == other.bytes_per_pixel
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.same_layout(other) and np.array_equal(self.data, other.data)
