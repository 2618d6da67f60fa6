from __future__ import annotations
from pathlib import Path
from typing import Iterable, Iterator, Union
import logging

from dotenv import load_dotenv

from ..errors import CodecFailure
from ..models.image import Image
from ..repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageService:
    """I/O helpers.  No pixel operators here."""
    def __init__(self, image_repository: ImageRepository | None = None):
        self.image_repository = image_repository or ImageRepository()

    def create_image(self, width: int, height: int, path: Union[str, Path] = None) -> Image:
        """New zero-filled (black) image."""
        return Image(width, height, path)

    def load(self, path: str | Path, flip: bool = False) -> Image:
        """Load a single image from disk into an Image object. Raises CodecFailure."""
        return self.image_repository.decode(path, flip=flip)

    def load_into(self, image: Image, path: str | Path, flip: bool = False) -> bool:
        """
        Decode ``path`` and replace the contents of ``image`` with it.

        Returns:
            True on success. On failure ``image`` is left untouched and False is returned.
        """
        try:
            decoded = self.image_repository.decode(path, flip=flip)
        except CodecFailure as err:
            logger.error(f"Cannot load image: {err}")
            return False
        image.set_pixels(decoded.pixels)
        image.path = decoded.path
        return True

    def save(self, image: Image, path: str | Path | None = None, flip: bool = False) -> bool:
        """
        Encode ``image`` to ``path`` (defaults to ``image.path``).

        Returns:
            True if the file was written, False otherwise.
        """
        target = path if path is not None else image.path
        if target is None:
            logger.error(f"Cannot save {image!r}: no path given")
            return False
        try:
            self.image_repository.encode(image, target, flip=flip)
        except CodecFailure as err:
            logger.error(f"Cannot save image: {err}")
            return False
        return True

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Image]:
        """
        Yield images lazily instead of returning a gigantic list.
        """
        return self.image_repository.iter_dir(folder,
                                              recursive=recursive,
                                              exts=exts)

    def save_gallery(self, gallery: Iterable[Image]) -> int:
        """Save every image to its own path; returns how many were written."""
        return sum(self.save(img) for img in gallery)
