from __future__ import annotations
from pathlib import Path
from typing import Union, Iterable, List, Iterator
import logging
import os

import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..errors import CodecFailure
from ..models.image import Image

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Codec adapter: decodes files into Image objects and encodes them back.
    Decoding goes through OpenCV, encoding through Pillow.
    """
    def __init__(self, valid_exts: Iterable[str] | None = None):
        if valid_exts is None:
            valid_exts = os.getenv("VALID_IMAGE_EXTENSIONS", ".png,.jpg,.jpeg,.bmp").split(",")
        self.VALID_EXTS = {ext.strip().lower() for ext in valid_exts if ext.strip()}

    @staticmethod
    def decode(path: Union[str, Path], flip: bool = False) -> Image:
        """
        Read ``path`` as a 3-channel RGB image.
        ``flip`` mirrors the rows (bottom row first) after decoding.
        """
        path = Path(path)
        try:
            arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        except cv2.error as err:
            raise CodecFailure(f"Could not decode {path}: {err}") from err

        if arr_bgr is None:
            raise CodecFailure(f"Image not found or unreadable: {path}")

        arr = arr_bgr[:, :, ::-1]
        if flip:
            arr = arr[::-1]
        logger.debug(f"Decoded {path}: {arr.shape[1]}x{arr.shape[0]}")
        return Image.from_array(np.ascontiguousarray(arr), path)

    @staticmethod
    def encode(image: Image, path: Union[str, Path], flip: bool = False) -> Path:
        """
        Write ``image`` to ``path``; the format follows the file suffix.
        ``flip`` mirrors the rows of the written file, not of ``image``.
        """
        path = Path(path)
        pixels = image.pixels[::-1] if flip else image.pixels
        try:
            PILImage.fromarray(np.ascontiguousarray(pixels)).save(path)
        except (OSError, ValueError, KeyError, SystemError) as err:
            raise CodecFailure(f"Could not encode {image!r} to {path}: {err}") from err
        logger.debug(f"Encoded {image.width}x{image.height} image to {path}")
        return path

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Image]:
        """
        Yield Image objects one at a time.  Nothing accumulates in memory.
        Files with other suffixes, or that fail to decode, are skipped.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed or not p.is_file():
                logger.debug(f"Skipping {p}")
                continue
            try:
                yield self.decode(p)
            except CodecFailure as err:
                logger.warning(f"Skipping {p.name}: {err}")

    def load_dir(
        self, folder: Union[str, Path], *, recursive=False, exts=None
    ) -> List[Image]:
        """
        List form of iter_dir.
        """
        return list(self.iter_dir(folder, recursive=recursive, exts=exts))
