import numpy as np
import pytest

from pixmap.models.image import Image


@pytest.fixture
def quad() -> Image:
    """2x2 image: (0,0)=(10,20,30) (0,1)=(40,50,60) (1,0)=(70,80,90) (1,1)=(100,110,120)."""
    return Image.from_bytes(2, 2, bytes(range(10, 121, 10)))


@pytest.fixture
def noisy() -> Image:
    """5 wide, 3 tall, reproducible random content."""
    rng = np.random.default_rng(1234)
    return Image.from_array(rng.integers(0, 256, size=(3, 5, 3), dtype=np.uint8))


@pytest.fixture
def uniform():
    """Factory for single-colour images: uniform(width, height, value_or_rgb)."""
    def _make(width: int, height: int, value) -> Image:
        img = Image(width, height)
        img.fill(value if isinstance(value, tuple) else (value, value, value))
        return img
    return _make


@pytest.fixture
def gray_row():
    """Factory for 1-row images from gray levels."""
    def _make(*levels: int) -> Image:
        return Image.from_array(np.array([[[v, v, v] for v in levels]], dtype=np.uint8))
    return _make
