from __future__ import annotations
from typing import Sequence
import logging

import numpy as np

from ..models import kernel as kernels
from ..models.image import Image
from ..models.kernel import Kernel

logger = logging.getLogger(__name__)


class ConvolutionService:
    """
    Square-kernel convolution with clamp-to-edge sampling, and the
    filters built on it.

    *   True convolution: the kernel is flipped on both axes.
    *   Out-of-range samples repeat the nearest edge pixel.
    *   Results are clamped to [0, 255] and rounded to the nearest byte.
    """

    # ─── Engine ────────────────────────────────────────────────────
    @staticmethod
    def _accumulate(img: Image, kernel: Kernel) -> np.ndarray:
        """
        Scaled weighted sums, unclamped, as an (H, W, 3) float array.
        """
        height, width = img.height, img.width
        if not img.pixel_count():
            return np.zeros(img.shape, dtype=np.float64)

        c = kernel.center
        padded = np.pad(img.pixels.astype(np.int64), ((c, c), (c, c), (0, 0)), mode="edge")
        flipped = kernel.flipped()

        acc = np.zeros(img.shape, dtype=np.int64)
        for ki in range(kernel.side):
            for kj in range(kernel.side):
                weight = flipped[ki, kj]
                if weight:
                    acc += weight * padded[ki:ki + height, kj:kj + width]
        return acc * kernel.scale

    @staticmethod
    def _to_image(values: np.ndarray) -> Image:
        clamped = np.clip(values, 0, 255)
        return Image.from_array(np.floor(clamped + 0.5).astype(np.uint8))

    def convolute(self, img: Image, kernel: Kernel) -> Image:
        logger.debug(f"Convolving {img!r} with {kernel.side}x{kernel.side} kernel {kernel.name or '<anonymous>'}")
        return self._to_image(self._accumulate(img, kernel))

    def convolute_raw(self, img: Image, weights: Sequence[int], scale: float, side: int) -> Image:
        """Convolve with a row-major flat weight list of ``side * side`` entries."""
        return self.convolute(img, Kernel.from_flat(weights, scale, side))

    # ─── Filters ───────────────────────────────────────────────────
    def identity(self, img: Image) -> Image:
        return self.convolute(img, kernels.IDENTITY)

    def sharpen(self, img: Image) -> Image:
        return self.convolute(img, kernels.SHARPEN)

    def gaussian_blur(self, img: Image) -> Image:
        return self.convolute(img, kernels.GAUSSIAN_BLUR)

    def box_blur(self, img: Image) -> Image:
        return self.convolute(img, kernels.BOX_BLUR)

    def ridge_detection(self, img: Image) -> Image:
        return self.convolute(img, kernels.RIDGE_DETECTION)

    def unsharp_masking(self, img: Image) -> Image:
        return self.convolute(img, kernels.UNSHARP_MASKING)

    def sobel(self, img: Image) -> Image:
        """
        Gradient magnitude sqrt(Gx^2 + Gy^2) per channel, where Gx and Gy are
        the horizontal / vertical Sobel responses. Gx and Gy are combined
        unclamped (negative gradients count); only the magnitude is clamped
        to [0, 255].
        """
        gx = self._accumulate(img, kernels.SOBEL_X)
        gy = self._accumulate(img, kernels.SOBEL_Y)
        return self._to_image(np.hypot(gx, gy))
