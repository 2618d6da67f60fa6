from __future__ import annotations
from typing import Optional, Tuple
import logging

import numpy as np

from ..errors import OutOfRange
from ..models.image import Image

logger = logging.getLogger(__name__)

_Window = Tuple[Tuple[slice, slice], Tuple[slice, slice]]


class GeometryService:
    """
    Index-remapping operators: resize, flips, rotation, crops and pastes.
    Everything returns a new Image except replace / replace_alpha,
    which paste into the destination in place.
    """

    # ─── Resampling ────────────────────────────────────────────────
    @staticmethod
    def _sample_positions(new_n: int, old_n: int) -> np.ndarray:
        """Nearest source index for each of ``new_n`` evenly spaced outputs."""
        if new_n == 1:
            return np.zeros(1, dtype=np.intp)
        ratio = np.arange(new_n) / (new_n - 1)
        return np.floor(ratio * (old_n - 1) + 0.5).astype(np.intp)

    def resize(self, img: Image, width: int, height: int) -> Image:
        """
        Nearest-neighbour resize to ``width`` x ``height``.

        Output pixel (i, j) samples source
        (round(i / (height-1) * (H-1)), round(j / (width-1) * (W-1))),
        halves rounding up; a 1-pixel output dimension samples index 0.
        """
        if width < 0 or height < 0:
            raise ValueError(f"Cannot resize to {width}x{height}")
        if (width and height) and not img.pixel_count():
            raise OutOfRange(f"Cannot resample an empty {img.width}x{img.height} image")

        rows = self._sample_positions(height, img.height)
        cols = self._sample_positions(width, img.width)
        logger.debug(f"Resizing {img.width}x{img.height} -> {width}x{height}")
        if not (width and height):
            return Image(width, height)
        return Image.from_array(img.pixels[np.ix_(rows, cols)])

    # ─── Mirrors / rotation ────────────────────────────────────────
    def flip_horizontal(self, img: Image) -> Image:
        """Mirror across the horizontal midline: row i <- row (H-1-i)."""
        return Image.from_array(img.pixels[::-1])

    def flip_vertical(self, img: Image) -> Image:
        """Mirror across the vertical midline: col j <- col (W-1-j)."""
        return Image.from_array(img.pixels[:, ::-1])

    def flip_positive_diagonal(self, img: Image) -> Image:
        """Transpose; the result is height x width."""
        return Image.from_array(img.pixels.transpose(1, 0, 2))

    def rotate90(self, img: Image) -> Image:
        return self.flip_positive_diagonal(self.flip_horizontal(img))

    # ─── Crops / pastes ────────────────────────────────────────────
    def subimage(self, img: Image, x: int, y: int, w: int, h: int) -> Image:
        """
        Return the w x h rectangle whose top-left corner is column x, row y.
        The rectangle may touch the right / bottom edge.
        """
        if min(x, y, w, h) < 0 or x + w > img.width or y + h > img.height:
            raise OutOfRange(
                f"Rectangle x={x}, y={y}, w={w}, h={h} does not fit in {img.width}x{img.height}"
            )
        return Image.from_array(img.pixels[y:y + h, x:x + w])

    @staticmethod
    def _overlap(dest: Image, source: Image, x: int, y: int) -> Optional[_Window]:
        """Destination and source windows of ``source`` pasted at (x, y), clipped to ``dest``."""
        top, left = max(y, 0), max(x, 0)
        bottom = min(y + source.height, dest.height)
        right = min(x + source.width, dest.width)
        if bottom <= top or right <= left:
            return None
        return (
            (slice(top, bottom), slice(left, right)),
            (slice(top - y, bottom - y), slice(left - x, right - x)),
        )

    def replace(self, dest: Image, source: Image, x: int, y: int) -> None:
        """Paste ``source`` into ``dest`` at column x, row y. Parts falling outside are clipped."""
        window = self._overlap(dest, source, x, y)
        if window is None:
            logger.debug(f"replace at ({x}, {y}) falls outside {dest!r}; nothing to do")
            return
        dst, src = window
        dest.pixels[dst] = source.pixels[src]

    def replace_alpha(self, dest: Image, source: Image, alpha: float, x: int, y: int) -> None:
        """
        Like replace, but each pasted pixel becomes
        dest * (1 - alpha) + source * alpha (truncated to a byte).
        """
        window = self._overlap(dest, source, x, y)
        if window is None:
            return
        dst, src = window
        blended = dest.pixels[dst] * (1.0 - alpha) + source.pixels[src] * alpha
        dest.pixels[dst] = np.clip(blended, 0, 255).astype(np.uint8)

    def grid_copy(self, img: Image, m: int, n: int) -> Image:
        """Tile ``img`` n times across and m times down."""
        if m < 0 or n < 0:
            raise ValueError(f"Grid repeat counts must be >= 0, got m={m}, n={n}")
        return Image.from_array(np.tile(img.pixels, (m, n, 1)))
