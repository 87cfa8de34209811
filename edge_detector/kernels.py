"""Fixed convolution kernels used by the edge operators."""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Kernel:
    """Immutable integer kernel.

    anchor is the (row, col) cell that lines up with the output pixel:
    the center for 3x3 kernels, the top-left cell for Roberts' 2x2 ones.
    """
    name: str
    weights: Tuple[Tuple[int, ...], ...]
    anchor: Tuple[int, int] = (1, 1)

    def __post_init__(self):
        widths = {len(row) for row in self.weights}
        if not self.weights or len(widths) != 1:
            raise ValueError(f"Kernel {self.name} must be a non-empty rectangle")
        rows, cols = self.shape
        if not (0 <= self.anchor[0] < rows and 0 <= self.anchor[1] < cols):
            raise ValueError(f"Kernel {self.name} anchor {self.anchor} outside {rows}x{cols}")

    @property
    def shape(self) -> Tuple[int, int]:
        return (len(self.weights), len(self.weights[0]))

    def as_array(self) -> np.ndarray:
        return np.array(self.weights, dtype=np.int64)


SOBEL_X = Kernel("sobel_x", ((-1, 0, 1), (-2, 0, 2), (-1, 0, 1)))
SOBEL_Y = Kernel("sobel_y", ((-1, -2, -1), (0, 0, 0), (1, 2, 1)))

PREWITT_X = Kernel("prewitt_x", ((-1, 0, 1), (-1, 0, 1), (-1, 0, 1)))
PREWITT_Y = Kernel("prewitt_y", ((-1, -1, -1), (0, 0, 0), (1, 1, 1)))

# gx = p(x, y) - p(x+1, y+1), gy = p(x+1, y) - p(x, y+1)
ROBERTS_X = Kernel("roberts_x", ((1, 0), (0, -1)), anchor=(0, 0))
ROBERTS_Y = Kernel("roberts_y", ((0, 1), (-1, 0)), anchor=(0, 0))

LAPLACE = Kernel("laplace", ((0, -1, 0), (-1, 4, -1), (0, -1, 0)))

GAUSSIAN = Kernel("gaussian", ((1, 2, 1), (2, 4, 2), (1, 2, 1)))
GAUSSIAN_DIVISOR = 16
