from __future__ import annotations
from dataclasses import dataclass, field
from typing import Sequence
import numpy as np


@dataclass(frozen=True)
class Kernel:
    """
    Square convolution kernel: odd side length, integer weights and a
    scale factor applied to every weighted sum.
    """
    weights: np.ndarray = field(repr=False)  # Shape (n, n), dtype int64.
    scale: float = 1.0
    name: str = ""

    def __post_init__(self):
        raw = np.asarray(self.weights)
        if raw.size and not np.array_equal(raw, np.round(raw)):
            raise ValueError(f"Kernel weights must be whole numbers, got {raw.tolist()}")
        weights = raw.astype(np.int64)
        if weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
            raise ValueError(f"Kernel weights must be a square matrix, got shape {weights.shape}")
        if weights.shape[0] % 2 == 0:
            raise ValueError(f"Kernel side length must be odd, got {weights.shape[0]}")
        weights.setflags(write=False)
        object.__setattr__(self, "weights", weights)
        object.__setattr__(self, "scale", float(self.scale))

    @property
    def side(self) -> int:
        return self.weights.shape[0]

    @property
    def center(self) -> int:
        return self.side // 2

    @classmethod
    def from_flat(cls, weights: Sequence[int], scale: float, side: int, name: str = "") -> "Kernel":
        """Build a kernel from a row-major flat list of side * side weights."""
        if len(weights) != side * side:
            raise ValueError(f"Expected {side * side} weights for a {side}x{side} kernel, got {len(weights)}")
        return cls(np.asarray(weights).reshape(side, side), scale, name)

    def flipped(self) -> np.ndarray:
        """Weights mirrored on both axes, i.e. weight (n-1-ki, n-1-kj)."""
        return self.weights[::-1, ::-1]

    def __eq__(self, other):
        if not isinstance(other, Kernel):
            return NotImplemented
        return self.scale == other.scale and np.array_equal(self.weights, other.weights)

    def __hash__(self):
        return hash((self.weights.tobytes(), self.weights.shape, self.scale))


def _binomial_5x5(center: int) -> np.ndarray:
    row = np.array([1, 4, 6, 4, 1], dtype=np.int64)
    weights = np.outer(row, row)
    weights[2, 2] = center
    return weights


IDENTITY = Kernel([[0, 0, 0], [0, 1, 0], [0, 0, 0]], 1.0, "identity")
SHARPEN = Kernel([[0, -1, 0], [-1, 5, -1], [0, -1, 0]], 1.0, "sharpen")
GAUSSIAN_BLUR = Kernel([[1, 2, 1], [2, 4, 2], [1, 2, 1]], 1 / 16, "gaussian_blur")
BOX_BLUR = Kernel(np.ones((3, 3), dtype=np.int64), 1 / 9, "box_blur")
RIDGE_DETECTION = Kernel([[-1, -1, -1], [-1, 8, -1], [-1, -1, -1]], 1.0, "ridge_detection")
UNSHARP_MASKING = Kernel(_binomial_5x5(-476), -1 / 256, "unsharp_masking")

# Sobel gradients
SOBEL_X = Kernel([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], 1.0, "sobel_x")
SOBEL_Y = Kernel([[1, 2, 1], [0, 0, 0], [-1, -2, -1]], 1.0, "sobel_y")
