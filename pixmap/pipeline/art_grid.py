"""
Art Grid Pipeline
Tiles an image 4 across and 5 down, then overwrites every tile but the
first with a different operator applied to the image.
"""
from __future__ import annotations

import logging
import os
from typing import Iterable, Tuple

from dotenv import load_dotenv

from ..models.image import Image
from ..models.pixel import Pixel
from ..services.block_service import BlockService
from ..services.compositing_service import CompositingService
from ..services.convolution_service import ConvolutionService
from ..services.geometry_service import GeometryService
from ..services.tone_service import ToneService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

GRID_COLUMNS = 4
GRID_ROWS = 5


def _pixel_from_env(name: str, default: str) -> Pixel:
    return Pixel.coerce([int(part) for part in os.getenv(name, default).split(",")])


class ArtGridPipeline:
    """
    Builds the operator showcase grid. Tile layout, row by row:

        original       | gaussian blur  | box blur       | unsharp masking
        sobel          | grayscale      | invert         | bitmap
        ridge          | sharpen        | swirl          | rotated 180
        glow           | red-ify        | green-ify      | blue-ify
        red-less       | green-less     | blue-less      | color jitter
    """

    def __init__(self, *, seed: int | None = None):
        self.geometry = GeometryService()
        self.compositing = CompositingService()
        self.convolution = ConvolutionService()
        self.tone = ToneService(self.convolution, self.compositing)
        self.blocks = BlockService(seed=seed)

        self.bitmap_size = int(os.getenv("BITMAP_BLOCK_SIZE", "8"))
        self.jitter_size = int(os.getenv("JITTER_BLOCK_SIZE", "20"))
        self.glow_low = _pixel_from_env("GLOW_LOW", "100,100,200")
        self.glow_high = _pixel_from_env("GLOW_HIGH", "255,255,255")

    def _tiles(self, img: Image) -> Iterable[Tuple[str, Image]]:
        conv, tone, comp = self.convolution, self.tone, self.compositing
        yield "gaussian blur", conv.gaussian_blur(img)
        yield "box blur", conv.box_blur(img)
        yield "unsharp mask", conv.unsharp_masking(img)
        yield "sobel", conv.sobel(img)
        yield "grayscale", tone.grayscale(img)
        yield "invert", tone.invert(img)
        yield "bitmap", self.blocks.bitmap(img, self.bitmap_size)
        yield "ridge detection", conv.ridge_detection(img)
        yield "sharpen", conv.sharpen(img)
        yield "swirl", tone.swirl(img)
        yield "rotate 180", self.geometry.rotate90(self.geometry.rotate90(img))
        yield "glow", tone.glow(img, self.glow_low, self.glow_high)

        extractors = (tone.extract_red, tone.extract_green, tone.extract_blue)
        for name, extract in zip(("red", "green", "blue"), extractors):
            yield f"{name}ify", comp.add(conv.box_blur(extract(img)), img)
        for name, extract in zip(("red", "green", "blue"), extractors):
            yield f"{name}less", comp.subtract(img, conv.box_blur(extract(img)))

        yield "jitter", self.blocks.color_jitter(img, self.jitter_size)

    def build(self, img: Image) -> Image:
        """
        Args:
            img: Source image; not modified.

        Returns:
            Image: (4 * width) x (5 * height) grid.
        """
        grid = self.geometry.grid_copy(img, GRID_ROWS, GRID_COLUMNS)
        for position, (name, tile) in enumerate(self._tiles(img), 1):
            row, col = divmod(position, GRID_COLUMNS)
            logger.info(f"{name} -> tile ({row}, {col})")
            self.geometry.replace(grid, tile, col * img.width, row * img.height)
        return grid

    def ghost(self, img: Image, alpha: float = 0.1, offsets: Iterable[int] = (10, 20, 30)) -> Image:
        """Blend faint copies of ``img`` onto itself, shifted right by each offset."""
        ghosted = img.copy()
        for x in offsets:
            self.geometry.replace_alpha(ghosted, img, alpha, x, 0)
        return ghosted


def build_art_grid(img: Image, *, seed: int | None = None) -> Image:
    return ArtGridPipeline(seed=seed).build(img)


def ghost(img: Image, alpha: float = 0.1, offsets: Iterable[int] = (10, 20, 30)) -> Image:
    return ArtGridPipeline().ghost(img, alpha, offsets)
