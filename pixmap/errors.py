class PixmapError(Exception):
    """Base class for every error raised by pixmap."""


class OutOfRange(PixmapError, IndexError):
    """A pixel index, row or column lies outside the image."""


class DimensionMismatch(PixmapError, ValueError):
    """Two images that must share a size do not."""


class InvalidBufferSize(PixmapError, ValueError):
    """Raw data does not hold exactly width * height * 3 bytes."""


class CodecFailure(PixmapError, OSError):
    """Decoding or encoding an image file failed."""
