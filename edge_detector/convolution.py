"""Kernel convolution engine shared by every edge operator.

One primitive, convolve(), slides one or more kernels over the luminance
plane of a buffer, combines the per-kernel sums into a single value per
pixel and writes it back as an opaque gray pixel. Pixels where a kernel
would reach outside the frame are left black: no wrap-around, no edge
replication, no renormalization.
"""

import logging
from typing import Callable, List, Sequence, Tuple

import numpy as np
from scipy import ndimage

from .buffers import BufferLayout
from .kernels import Kernel

logger = logging.getLogger(__name__)

Combine = Callable[[List[np.ndarray]], np.ndarray]


def magnitude(responses: List[np.ndarray]) -> np.ndarray:
    """Euclidean norm of a (gx, gy) pair."""
    gx, gy = responses
    return np.hypot(gx, gy)


def absolute(responses: List[np.ndarray]) -> np.ndarray:
    """Absolute value of a single kernel response."""
    return np.abs(responses[0])


def scaled(divisor: int) -> Combine:
    """Single kernel response divided by divisor (normalized blur)."""
    def combine(responses: List[np.ndarray]) -> np.ndarray:
        return responses[0] / divisor
    return combine


def saturate(values: np.ndarray) -> np.ndarray:
    """Round half to even and clamp to [0, 255], like an 8-bit clamped store."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def interior_bounds(
    shape: Tuple[int, int],
    kernel_shape: Tuple[int, int],
    anchor: Tuple[int, int],
    inset: int = 0
) -> Tuple[slice, slice]:
    """Row and column slices of pixels a kernel can cover fully.

    Args:
        shape: (height, width) of the frame
        kernel_shape: (rows, cols) of the kernel
        anchor: Kernel cell aligned with the output pixel
        inset: Extra pixels excluded on every side

    Returns:
        (rows, cols) slices, possibly empty for frames smaller than the kernel
    """
    bounds = []
    for size, k_size, k_anchor in zip(shape, kernel_shape, anchor):
        start = k_anchor + inset
        stop = size - (k_size - 1 - k_anchor) - inset
        bounds.append(slice(start, max(start, stop)))
    return bounds[0], bounds[1]


def correlate(plane: np.ndarray, kernel: Kernel) -> np.ndarray:
    """Weighted neighborhood sum of plane under kernel, for every pixel.

    Out-of-frame neighbors read as zero; callers keep only the interior.
    """
    origin = tuple(a - s // 2 for a, s in zip(kernel.anchor, kernel.shape))
    return ndimage.correlate(plane, kernel.as_array(), mode="constant", cval=0, origin=origin)


def convolve(
    data,
    layout: BufferLayout,
    kernels: Sequence[Kernel],
    combine: Combine,
    inset: int = 0
) -> np.ndarray:
    """Apply kernels to the luminance of data and build a new buffer.

    Args:
        data: Flat grayscale buffer
        layout: Layout of data (and of the result)
        kernels: One or more kernels sharing shape and anchor
        combine: Turns the list of per-kernel sums into one value per pixel
        inset: Extra border pixels to leave black

    Returns:
        New flat uint8 buffer; interior pixels hold the combined value,
        all other pixels are (0, 0, 0, 255)

    Raises:
        InvalidBufferLength: If data doesn't match layout
        ValueError: If kernels differ in shape or anchor
    """
    flat = layout.validate(data)
    footprints = {(k.shape, k.anchor) for k in kernels}
    if len(footprints) != 1:
        raise ValueError(f"Kernels must share shape and anchor, got {sorted(footprints)}")
    kernel_shape, anchor = footprints.pop()

    rows, cols = interior_bounds((layout.height, layout.width), kernel_shape, anchor, inset)
    plane = np.zeros((layout.height, layout.width), dtype=np.uint8)

    if rows.start < rows.stop and cols.start < cols.stop:
        luminance = layout.luminance(flat)
        responses = [correlate(luminance, k)[rows, cols] for k in kernels]
        plane[rows, cols] = saturate(combine(responses))
    else:
        logger.debug(
            "No interior pixels for %s on %dx%d frame",
            "/".join(k.name for k in kernels), layout.width, layout.height
        )

    return layout.compose(plane)
