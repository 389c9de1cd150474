"""
Codec/display adapter between decoded images and PixelBuffers.

The engine never decodes or encodes files. This module is the seam where
raw decoded pixels enter and leave it:

- ImageHandle: what the engine needs from a decoded image (geometry plus a
  lock/unlock pair around its row-major bytes).
- ArrayImage: an ImageHandle over an OpenCV image, stored with rows padded
  to a 4-byte boundary like native bitmaps.
- locked_pixels / run_on_image: scoped acquisition. The handle is unlocked
  on every exit path, including errors.
- load_image / save_image: cv2.imread / cv2.imwrite for the CLI.
- find_images: image files under a path, for batch runs.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Protocol

import cv2
import numpy as np

from config import IMAGE_EXTENSIONS
from .buffer import PixelBuffer
from .errors import SizeMismatchError

logger = logging.getLogger(__name__)

# Native bitmap rows start on 4-byte boundaries
DEFAULT_ROW_ALIGNMENT = 4


class ImageHandle(Protocol):
    """A decoded image whose pixel bytes can be locked for copying."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    @property
    def bytes_per_pixel(self) -> int: ...

    @property
    def stride(self) -> int: ...

    def lock(self) -> memoryview:
        """Expose the padded row-major bytes until unlock() is called."""
        ...

    def unlock(self, commit: bytes | None = None) -> None:
        """Release the lock, optionally writing ``commit`` back first."""
        ...


def _normalize_decoded(image: np.ndarray) -> np.ndarray:
    """Bring an OpenCV-decoded image to 8-bit BGR or BGRA."""
    if not isinstance(image, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(image).__name__}")
    if image.size == 0:
        raise ValueError("Image array is empty")

    if image.dtype == np.uint16:
        image = cv2.convertScaleAbs(image, alpha=255.0 / 65535.0)
    elif image.dtype != np.uint8:
        raise ValueError(f"Unsupported image dtype {image.dtype}; expected uint8 or uint16")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.ndim == 3:
        channels = image.shape[2]
        if channels == 1:
            return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        if channels in (3, 4):
            return image
        raise ValueError(
            f"Unsupported number of channels: {channels}. "
            "Expected 1, 3 (BGR), or 4 (BGRA)."
        )
    raise ValueError(
        f"Image must be 2D or 3D array, got {image.ndim}D array with shape {image.shape}"
    )


class ArrayImage:
    """ImageHandle backed by a padded copy of a decoded numpy image.

    Args:
        image: Image as decoded by OpenCV (BGR, BGRA or grayscale).
        row_alignment: Rows are padded to a multiple of this many bytes.
    """

    def __init__(self, image: np.ndarray, row_alignment: int = DEFAULT_ROW_ALIGNMENT):
        if row_alignment <= 0:
            raise ValueError(f"row_alignment must be positive, got {row_alignment}")
        image = _normalize_decoded(image)
        height, width, channels = image.shape
        row_length = width * channels
        stride = -(-row_length // row_alignment) * row_alignment

        self._width = width
        self._height = height
        self._bytes_per_pixel = channels
        self._rows = np.zeros((height, stride), dtype=np.uint8)
        self._rows[:, :row_length] = image.reshape(height, row_length)
        self._locked = False

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def bytes_per_pixel(self) -> int:
        return self._bytes_per_pixel

    @property
    def stride(self) -> int:
        return self._rows.shape[1]

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def array(self) -> np.ndarray:
        """Copy of the current pixels as an (H, W, C) array without padding."""
        row_length = self._width * self._bytes_per_pixel
        return self._rows[:, :row_length].reshape(
            self._height, self._width, self._bytes_per_pixel
        ).copy()

    def lock(self) -> memoryview:
        if self._locked:
            raise RuntimeError("Image is already locked")
        self._locked = True
        return memoryview(self._rows.reshape(-1))

    def unlock(self, commit: bytes | None = None) -> None:
        if not self._locked:
            raise RuntimeError("Image is not locked")
        try:
            if commit is not None:
                expected = self._rows.size
                if len(commit) != expected:
                    raise SizeMismatchError(
                        f"Expected {expected} bytes to commit, got {len(commit)}"
                    )
                self._rows[:] = np.frombuffer(commit, dtype=np.uint8).reshape(self._rows.shape)
        finally:
            self._locked = False


@contextmanager
def locked_pixels(handle: ImageHandle) -> Iterator[PixelBuffer]:
    """Lock a handle, yield an owned copy of its pixels, always unlock."""
    raw = handle.lock()
    try:
        yield PixelBuffer.from_raw_decoded(
            raw, handle.width, handle.height, handle.stride, handle.bytes_per_pixel
        )
    finally:
        handle.unlock()


def run_on_image(
    handle: ImageHandle,
    operation: Callable[[PixelBuffer], PixelBuffer],
) -> PixelBuffer:
    """Run one operation on a handle's pixels and commit the result back.

    The handle is unlocked whether or not the operation succeeds; nothing is
    committed on failure.

    Raises:
        SizeMismatchError: If the operation changed the image layout.
    """
    raw = handle.lock()
    committed = None
    try:
        source = PixelBuffer.from_raw_decoded(
            raw, handle.width, handle.height, handle.stride, handle.bytes_per_pixel
        )
        result = operation(source)
        if not result.same_layout(source):
            raise SizeMismatchError(
                f"Operation changed layout from {source.width}x{source.height}x"
                f"{source.bytes_per_pixel} to {result.width}x{result.height}x"
                f"{result.bytes_per_pixel}; cannot commit in place"
            )
        committed = result.to_raw_bytes(stride=handle.stride)
    finally:
        handle.unlock(committed)
    return result


def from_array(image: np.ndarray) -> PixelBuffer:
    """PixelBuffer from an OpenCV-decoded image."""
    with locked_pixels(ArrayImage(image)) as buffer:
        return buffer


def to_array(buffer: PixelBuffer) -> np.ndarray:
    """Writable (H, W, C) BGR(A) copy of a buffer, ready for OpenCV."""
    return buffer.pixels.copy()


def load_image(path: str | Path) -> PixelBuffer:
    """Decode an image file into a PixelBuffer.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If OpenCV cannot decode it.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ValueError(f"Could not decode image: {path}")
    buffer = from_array(image)
    logger.debug(
        "Loaded %s (%dx%d, %d bytes/pixel)",
        path, buffer.width, buffer.height, buffer.bytes_per_pixel,
    )
    return buffer


def save_image(buffer: PixelBuffer, path: str | Path) -> Path:
    """Encode a buffer to disk; the format follows the file extension.

    Raises:
        OSError: If OpenCV cannot write the file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    image = to_array(buffer)
    if buffer.has_alpha and path.suffix.lower() in (".jpg", ".jpeg"):
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    try:
        written = cv2.imwrite(str(path), image)
    except cv2.error as e:
        raise OSError(f"Could not write image: {path}: {e}") from e
    if not written:
        raise OSError(f"Could not write image: {path}")
    logger.debug("Saved %s", path)
    return path


def find_images(path: str | Path) -> list[Path]:
    """Find all image files in a directory, or return a single image file.

    Raises:
        ValueError: If path doesn't exist or isn't a supported image/directory.
    """
    file_path = Path(path).resolve()

    if file_path.is_file():
        if file_path.suffix.lower() in IMAGE_EXTENSIONS:
            return [file_path]
        raise ValueError(f"{path} is not a supported image file")

    if not file_path.is_dir():
        raise ValueError(f"{path} is not a valid file or directory")

    return sorted(
        p for p in file_path.iterdir()
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    )
