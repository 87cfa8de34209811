"""Simplified Canny edge detector: Gaussian blur, Sobel gradient, NMS.

This keeps the three-stage shape of Canny but not its full rigor:
non-maximum suppression compares each pixel with its four direct
neighbors only (no gradient-direction binning) and there is no
double-threshold hysteresis. The shared threshold binarizer does the
final cut.
"""

from typing import Optional

import numpy as np
from scipy import ndimage

from .buffers import BufferLayout, resolve_layout
from .convolution import convolve, interior_bounds, magnitude, scaled
from .kernels import GAUSSIAN, GAUSSIAN_DIVISOR, SOBEL_X, SOBEL_Y

# North, south, east, west and the center itself
NMS_FOOTPRINT = np.array([[0, 1, 0],
                          [1, 1, 1],
                          [0, 1, 0]], dtype=bool)


def gaussian_blur(gray, layout: BufferLayout) -> np.ndarray:
    """3x3 Gaussian blur (weights sum to 16), border pixels black."""
    return convolve(gray, layout, (GAUSSIAN,), scaled(GAUSSIAN_DIVISOR))


def gradient_magnitude(blurred, layout: BufferLayout) -> np.ndarray:
    """Sobel magnitude of a blurred buffer.

    The blur leaves a one pixel black frame, so windows touching it are
    skipped (inset=1); otherwise every flat image would grow a bright
    ring one pixel in from its edge.
    """
    return convolve(blurred, layout, (SOBEL_X, SOBEL_Y), magnitude, inset=1)


def non_max_suppression(gradient, layout: BufferLayout) -> np.ndarray:
    """Keep interior pixels that are >= their N, S, E and W neighbors."""
    flat = layout.validate(gradient)
    values = layout.luminance(flat)
    local_max = ndimage.maximum_filter(values, footprint=NMS_FOOTPRINT, mode="constant", cval=0)

    rows, cols = interior_bounds((layout.height, layout.width), NMS_FOOTPRINT.shape, (1, 1))
    plane = np.zeros((layout.height, layout.width), dtype=np.uint8)
    interior = values[rows, cols]
    plane[rows, cols] = np.where(interior >= local_max[rows, cols], interior, 0)
    return layout.compose(plane)


def canny(gray, width: int, height: int, layout: Optional[BufferLayout] = None) -> np.ndarray:
    """Run blur, gradient and suppression on a grayscale buffer."""
    layout = resolve_layout(width, height, layout)
    blurred = gaussian_blur(gray, layout)
    gradient = gradient_magnitude(blurred, layout)
    return non_max_suppression(gradient, layout)
