"""
pixmap: an in-memory RGB raster image engine.

Models hold pixels, repositories talk to the disk, services implement the
operators (geometry, compositing, convolution, tone, blocks).
"""
from .errors import PixmapError, OutOfRange, DimensionMismatch, InvalidBufferSize, CodecFailure
from .models.pixel import Pixel, Channel
from .models.kernel import Kernel
from .models.image import Image

__version__ = "1.0.0"

__all__ = [
    "Image",
    "Pixel",
    "Channel",
    "Kernel",
    "PixmapError",
    "OutOfRange",
    "DimensionMismatch",
    "InvalidBufferSize",
    "CodecFailure",
]
