"""Grayscale conversion for interleaved pixel buffers."""

from typing import Optional

import numpy as np

from .buffers import BufferLayout, row_layout, to_flat_array


def to_grayscale(data, layout: Optional[BufferLayout] = None) -> np.ndarray:
    """Replace R, G and B of every pixel with their truncated mean.

    Alpha is copied unchanged. Converting an already gray buffer returns
    an identical buffer.

    Args:
        data: Flat pixel buffer (bytes, numpy array or int sequence)
        layout: Buffer layout; without one the buffer is read as a single
            RGBA row and only needs a length divisible by 4

    Returns:
        New flat uint8 buffer of the same length

    Raises:
        InvalidBufferLength: If the length doesn't fit the layout
    """
    if layout is None:
        flat = to_flat_array(data)
        layout = row_layout(flat)
        if layout is None:
            return flat.copy()
    else:
        flat = layout.validate(data)

    pixels = layout.pixels(flat)
    color = list(layout.color_indices)
    # Sum of three uint8 values fits in uint16
    luminance = pixels[:, :, color].astype(np.uint16).sum(axis=2) // 3

    out = np.zeros(layout.expected_length, dtype=np.uint8)
    out_pixels = layout.pixels(out)
    out_pixels[:, :, color] = luminance.astype(np.uint8)[:, :, np.newaxis]
    if layout.alpha_index is not None:
        out_pixels[:, :, layout.alpha_index] = pixels[:, :, layout.alpha_index]
    return out
