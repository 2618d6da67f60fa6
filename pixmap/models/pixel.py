from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Sequence, Union


class Channel(IntEnum):
    """Position of each colour component inside a pixel's 3 bytes."""
    RED = 0
    GREEN = 1
    BLUE = 2


@dataclass(frozen=True)
class Pixel:
    """
    Value object: one RGB colour, 8 bits per channel.
    Never stored on its own, always copied in/out of an Image.
    """
    r: int = 0
    g: int = 0
    b: int = 0

    def __post_init__(self):
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"Channel {name}={value!r} is not an int in [0, 255]")

    def __iter__(self) -> Iterator[int]:
        yield self.r
        yield self.g
        yield self.b

    def __getitem__(self, channel: int) -> int:
        return (self.r, self.g, self.b)[Channel(channel)]

    @classmethod
    def coerce(cls, color: "PixelLike") -> "Pixel":
        """Accept a Pixel or any (r, g, b) sequence of ints."""
        if isinstance(color, Pixel):
            return color
        if len(color) != len(Channel):
            raise ValueError(f"Expected {len(Channel)} channels, got {len(color)}")
        return cls(*(int(c) for c in color))


PixelLike = Union[Pixel, Sequence[int]]

BLACK = Pixel(0, 0, 0)
WHITE = Pixel(255, 255, 255)
