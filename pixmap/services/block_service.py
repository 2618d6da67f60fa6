from __future__ import annotations
from typing import Iterator, Optional, Tuple
import logging
import os

import numpy as np
from dotenv import load_dotenv

from ..models.image import Image

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class BlockService:
    """
    Operators that tile the image into size x size blocks (the last row /
    column of blocks is cut short when size does not divide the image) and
    rewrite each block from an aggregate of its pixels.
    """

    def __init__(self, seed: Optional[int] = None, max_offset: Optional[int] = None):
        """
        Args:
            seed: Seed for the jitter generator (defaults to env RANDOM_SEED;
                fresh OS entropy when neither is set).
            max_offset: Largest per-channel jitter magnitude (defaults to env JITTER_MAX_OFFSET).
        """
        if seed is None and os.getenv("RANDOM_SEED"):
            seed = int(os.getenv("RANDOM_SEED"))
        self.max_offset = max_offset if max_offset is not None else int(os.getenv("JITTER_MAX_OFFSET", "40"))
        if self.max_offset < 0:
            raise ValueError(f"Jitter offset must be >= 0, got {self.max_offset}")
        self.rng = np.random.default_rng(seed)

    @staticmethod
    def _blocks(img: Image, size: int) -> Iterator[Tuple[slice, slice]]:
        if size <= 0:
            raise ValueError(f"Block size must be > 0, got {size}")
        for top in range(0, img.height, size):
            for left in range(0, img.width, size):
                yield slice(top, min(top + size, img.height)), slice(left, min(left + size, img.width))

    def bitmap(self, img: Image, size: int) -> Image:
        """Fill every block with its mean colour (integer mean, rounded down)."""
        pixels = img.pixels
        result = np.empty_like(pixels)
        for rows, cols in self._blocks(img, size):
            block = pixels[rows, cols].reshape(-1, 3).astype(np.int64)
            result[rows, cols] = block.sum(axis=0) // len(block)
        return Image.from_array(result)

    def color_jitter(self, img: Image, size: int, rng: Optional[np.random.Generator] = None) -> Image:
        """
        Add one random offset per channel, drawn from [-max_offset, max_offset],
        to every pixel of each block; results saturate to [0, 255].
        ``rng`` overrides the service's own generator.
        """
        rng = rng if rng is not None else self.rng
        result = img.pixels.astype(np.int32)
        for rows, cols in self._blocks(img, size):
            offset = rng.integers(-self.max_offset, self.max_offset, size=3, endpoint=True)
            result[rows, cols] += offset.astype(np.int32)
        logger.debug(f"Jittered {img!r} in {size}x{size} blocks")
        return Image.from_array(np.clip(result, 0, 255))
