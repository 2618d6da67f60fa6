from __future__ import annotations
import logging

import numpy as np

from ..errors import DimensionMismatch
from ..models.image import Image

logger = logging.getLogger(__name__)


class CompositingService:
    """
    Per-pixel arithmetic between two images of identical size.
    Channel math runs in int32 and saturates to [0, 255].
    """

    @staticmethod
    def _operands(a: Image, b: Image):
        if a.shape != b.shape:
            raise DimensionMismatch(
                f"Cannot combine {a.width}x{a.height} image with {b.width}x{b.height} image"
            )
        return a.pixels.astype(np.int32), b.pixels.astype(np.int32)

    @staticmethod
    def _saturate(values: np.ndarray) -> Image:
        return Image.from_array(np.clip(values, 0, 255).astype(np.uint8))

    def add(self, a: Image, b: Image) -> Image:
        x, y = self._operands(a, b)
        return self._saturate(x + y)

    def subtract(self, a: Image, b: Image) -> Image:
        x, y = self._operands(a, b)
        return self._saturate(x - y)

    def multiply(self, a: Image, b: Image) -> Image:
        x, y = self._operands(a, b)
        return self._saturate(x * y)

    def difference(self, a: Image, b: Image) -> Image:
        x, y = self._operands(a, b)
        return self._saturate(np.abs(x - y))

    def lightest(self, a: Image, b: Image) -> Image:
        x, y = self._operands(a, b)
        return self._saturate(np.maximum(x, y))

    def darkest(self, a: Image, b: Image) -> Image:
        x, y = self._operands(a, b)
        return self._saturate(np.minimum(x, y))

    def alpha_blend(self, a: Image, b: Image, alpha: float) -> Image:
        """a * (1 - alpha) + b * alpha per channel, truncated to a byte."""
        x, y = self._operands(a, b)
        logger.debug(f"Alpha blending {a.width}x{a.height} images with alpha={alpha}")
        return self._saturate(x * (1.0 - alpha) + y * alpha)
