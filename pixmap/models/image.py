from __future__ import annotations
from pathlib import Path
from typing import Optional, Union
import numpy as np

from ..errors import InvalidBufferSize, OutOfRange
from .pixel import Channel, Pixel, PixelLike

CHANNELS = len(Channel)

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray]


class Image:
    """
    RGB pixel buffer: width * height pixels, 3 bytes each, row-major.
    Every instance owns its storage; copies are always deep.
    """

    def __init__(self, width: int = 0, height: int = 0, path: Union[str, Path, None] = None):
        _check_dimensions(width, height)
        self._pixels = np.zeros((height, width, CHANNELS), dtype=np.uint8)
        self.path: Optional[Path] = Path(path) if path is not None else None

    # ─── Construction helpers ──────────────────────────────────────
    @classmethod
    def from_array(cls, pixels: np.ndarray, path: Union[str, Path, None] = None) -> "Image":
        """Copy an (H, W, 3) array into a new Image."""
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise InvalidBufferSize(f"Expected an (H, W, {CHANNELS}) array, got shape {pixels.shape}")
        image = cls(path=path)
        image._pixels = np.array(_as_bytes(pixels), order="C", copy=True)
        return image

    @classmethod
    def from_bytes(cls, width: int, height: int, data: BytesLike) -> "Image":
        image = cls()
        image.set_data(width, height, data)
        return image

    @classmethod
    def from_image(cls, other: "Image") -> "Image":
        return other.copy()

    def copy(self) -> "Image":
        return Image.from_array(self._pixels, self.path)

    __copy__ = copy

    def __deepcopy__(self, memo):
        return self.copy()

    # ─── Queries ───────────────────────────────────────────────────
    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def shape(self):
        return self._pixels.shape

    def byte_length(self) -> int:
        return self._pixels.size

    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def pixels(self) -> np.ndarray:
        """(H, W, 3) uint8 view of the backing storage."""
        return self._pixels

    def data(self) -> np.ndarray:
        """Flat uint8 view of the backing storage; writes go through."""
        return self._pixels.reshape(-1)

    def to_bytes(self) -> bytes:
        return self._pixels.tobytes()

    # ─── Whole-buffer mutation ─────────────────────────────────────
    def set_data(self, width: int, height: int, data: BytesLike) -> None:
        """
        Replace the whole buffer with a copy of ``data``.
        ``data`` must hold exactly width * height * 3 bytes.
        """
        _check_dimensions(width, height)
        if isinstance(data, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(data, dtype=np.uint8)
        else:
            flat = _as_bytes(np.asarray(data)).reshape(-1)
        expected = width * height * CHANNELS
        if flat.size != expected:
            raise InvalidBufferSize(
                f"{width}x{height} image needs {expected} bytes, got {flat.size}"
            )
        self._pixels = flat.reshape(height, width, CHANNELS).copy()

    def set_pixels(self, pixels: np.ndarray) -> None:
        """Replace the buffer with a copy of an (H, W, 3) array."""
        self._pixels = Image.from_array(pixels)._pixels

    def fill(self, color: PixelLike) -> None:
        self._pixels[:, :] = tuple(Pixel.coerce(color))

    # ─── Pixel accessors ───────────────────────────────────────────
    def get(self, *index: int) -> Pixel:
        """
        get(row, col) or get(i) with i a flat pixel index.
        Raises OutOfRange outside the image.
        """
        row, col = self._locate(index)
        r, g, b = self._pixels[row, col]
        return Pixel(int(r), int(g), int(b))

    def set(self, *args) -> None:
        """set(row, col, color) or set(i, color)."""
        if len(args) < 2:
            raise TypeError("set() takes (row, col, color) or (i, color)")
        *index, color = args
        row, col = self._locate(tuple(index))
        self._pixels[row, col] = tuple(Pixel.coerce(color))

    def _locate(self, index: tuple) -> tuple[int, int]:
        for value in index:
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise TypeError(f"Pixel index must be an int, got {value!r}")
        if len(index) == 1:
            (i,) = index
            if not 0 <= i < self.pixel_count():
                raise OutOfRange(f"Pixel index {i} outside [0, {self.pixel_count()})")
            return divmod(int(i), self.width)
        if len(index) == 2:
            row, col = index
            if not 0 <= row < self.height or not 0 <= col < self.width:
                raise OutOfRange(
                    f"(row={row}, col={col}) outside {self.height} rows x {self.width} cols"
                )
            return int(row), int(col)
        raise TypeError(f"Expected (i) or (row, col), got {len(index)} indices")

    # ─── Python protocol ───────────────────────────────────────────
    def __eq__(self, other):
        if not isinstance(other, Image):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._pixels, other._pixels)

    __hash__ = None

    def __repr__(self):
        where = f", path={str(self.path)!r}" if self.path else ""
        return f"Image(width={self.width}, height={self.height}{where})"


def _check_dimensions(width: int, height: int) -> None:
    if width < 0 or height < 0:
        raise InvalidBufferSize(f"Image dimensions must be >= 0, got {width}x{height}")


def _as_bytes(values: np.ndarray) -> np.ndarray:
    """``values`` as uint8; anything that is not a whole number in [0, 255] is rejected."""
    if values.dtype == np.uint8:
        return values
    fractional = np.issubdtype(values.dtype, np.floating) and np.any(values != np.floor(values))
    if values.size and (fractional or np.any((values < 0) | (values > 255))):
        raise InvalidBufferSize(
            f"Pixel data must hold whole numbers in [0, 255], got values in [{values.min()}, {values.max()}]"
        )
    return values.astype(np.uint8)
