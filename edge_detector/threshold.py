"""Threshold binarization of operator output."""

import numbers
from typing import Optional

import numpy as np

from .buffers import BufferLayout, row_layout, to_flat_array
from .config import THRESHOLD_MAX, THRESHOLD_MIN
from .errors import InvalidThreshold


def validate_threshold(value) -> int:
    """Return value as int, or raise InvalidThreshold."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidThreshold(f"Threshold must be an integer, got {value!r}")
    if not THRESHOLD_MIN <= value <= THRESHOLD_MAX:
        raise InvalidThreshold(
            f"Threshold must be in [{THRESHOLD_MIN}, {THRESHOLD_MAX}], got {value}"
        )
    return int(value)


def apply_threshold(data, threshold: int, layout: Optional[BufferLayout] = None) -> np.ndarray:
    """Binarize a buffer: white where red > threshold, black elsewhere.

    Alpha is forced opaque.

    Args:
        data: Operator output buffer
        threshold: Cutoff in [0, 255]; a pixel equal to it stays black
        layout: Buffer layout; without one the buffer is read as RGBA

    Returns:
        New flat uint8 buffer of the same length

    Raises:
        InvalidThreshold: If threshold is not an integer in range
        InvalidBufferLength: If the length doesn't fit the layout
    """
    threshold = validate_threshold(threshold)
    if layout is None:
        flat = to_flat_array(data)
        layout = row_layout(flat)
        if layout is None:
            return flat.copy()
    else:
        flat = layout.validate(data)

    values = layout.luminance(flat)
    plane = np.where(values > threshold, 255, 0).astype(np.uint8)
    return layout.compose(plane)
