from __future__ import annotations
import logging

import numpy as np

from ..models.image import Image
from ..models.pixel import Channel, Pixel, PixelLike
from .compositing_service import CompositingService
from .convolution_service import ConvolutionService

logger = logging.getLogger(__name__)

# Luma weights in hundredths, so grayscale stays in integer math.
_GRAY_WEIGHTS = np.array([30, 59, 11], dtype=np.int32)


class ToneService:
    """Single-image, per-pixel colour operators."""

    def __init__(self,
                 convolution_service: ConvolutionService | None = None,
                 compositing_service: CompositingService | None = None):
        self.convolution_service = convolution_service or ConvolutionService()
        self.compositing_service = compositing_service or CompositingService()

    def grayscale(self, img: Image) -> Image:
        """
        intensity = 0.3 r + 0.59 g + 0.11 b, truncated; copied to all channels.
        (255, 0, 0) -> (76, 76, 76).
        """
        intensity = (img.pixels.astype(np.int32) @ _GRAY_WEIGHTS) // 100
        return Image.from_array(np.repeat(intensity[..., np.newaxis], 3, axis=2))

    def invert(self, img: Image) -> Image:
        return Image.from_array(255 - img.pixels)

    def gamma_correct(self, img: Image, gamma: float) -> Image:
        """
        Args:
            img: Source image.
            gamma: Strictly positive; each channel becomes 255 * (c / 255) ** (1 / gamma),
                rounded to the nearest byte.
        """
        if gamma <= 0:
            raise ValueError(f"Gamma must be > 0, got {gamma}")
        corrected = np.power(img.pixels / 255.0, 1.0 / gamma) * 255.0
        return Image.from_array(np.floor(np.clip(corrected, 0, 255) + 0.5).astype(np.uint8))

    def swirl(self, img: Image) -> Image:
        """Rotate channels: r <- g, g <- b, b <- r."""
        order = [int(Channel.GREEN), int(Channel.BLUE), int(Channel.RED)]
        return Image.from_array(img.pixels[..., order])

    # ─── Channel extraction ────────────────────────────────────────
    def extract(self, img: Image, low: PixelLike, high: PixelLike) -> Image:
        """Keep pixels whose every channel is within [low, high]; blacken the rest."""
        lo = np.array(tuple(Pixel.coerce(low)), dtype=np.uint8)
        hi = np.array(tuple(Pixel.coerce(high)), dtype=np.uint8)
        inside = np.all((img.pixels >= lo) & (img.pixels <= hi), axis=2)
        result = np.where(inside[..., np.newaxis], img.pixels, 0)
        return Image.from_array(result)

    def extract_channel(self, img: Image, channel: Channel) -> Image:
        result = np.zeros_like(img.pixels)
        result[..., channel] = img.pixels[..., channel]
        return Image.from_array(result)

    def extract_red(self, img: Image) -> Image:
        return self.extract_channel(img, Channel.RED)

    def extract_green(self, img: Image) -> Image:
        return self.extract_channel(img, Channel.GREEN)

    def extract_blue(self, img: Image) -> Image:
        return self.extract_channel(img, Channel.BLUE)

    def glow(self, img: Image, low: PixelLike, high: PixelLike) -> Image:
        """Brighten ``img`` with a blurred copy of its pixels inside [low, high]."""
        highlights = self.convolution_service.box_blur(self.extract(img, low, high))
        return self.compositing_service.add(img, highlights)
