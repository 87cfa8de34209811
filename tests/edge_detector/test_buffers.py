"""Tests for buffer layout handling."""

import numpy as np
import pytest

from edge_detector.buffers import (
    BufferLayout,
    as_image_array,
    resolve_layout,
    row_layout,
    to_flat_array,
)
from edge_detector.errors import InvalidBufferLength, InvalidDimensions


def test_default_layout_is_rgba():
    """Default layout is tightly packed RGBA."""
    layout = BufferLayout(3, 2)
    assert layout.channel_order == "RGBA"
    assert layout.stride == 12
    assert layout.expected_length == 24
    assert layout.color_indices == (0, 1, 2)
    assert layout.alpha_index == 3


def test_bgra_layout_indices():
    """Channel indices follow the declared order."""
    layout = BufferLayout(2, 2, channel_order="BGRA")
    assert layout.color_indices == (2, 1, 0)
    assert layout.luminance_index == 2
    assert layout.alpha_index == 3


def test_rgb_layout_has_no_alpha():
    layout = BufferLayout(2, 2, channel_order="RGB")
    assert layout.alpha_index is None
    assert layout.expected_length == 12


@pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 2), (2.5, 2), (True, 2)])
def test_invalid_dimensions_rejected(width, height):
    with pytest.raises(InvalidDimensions, match="positive integers"):
        BufferLayout(width, height)


@pytest.mark.parametrize("order", ["RGGA", "RG", "RGBX", "LA"])
def test_invalid_channel_order_rejected(order):
    with pytest.raises(InvalidDimensions, match="channel_order"):
        BufferLayout(2, 2, channel_order=order)


def test_stride_smaller_than_row_rejected():
    with pytest.raises(InvalidDimensions, match="stride"):
        BufferLayout(4, 2, stride=15)


def test_validate_rejects_wrong_length():
    """Length must be width * height * 4 for RGBA."""
    layout = BufferLayout(2, 2)
    with pytest.raises(InvalidBufferLength, match="expected 16 bytes"):
        layout.validate(bytes(15))


def test_validate_accepts_bytes_and_arrays():
    layout = BufferLayout(2, 1)
    from_bytes = layout.validate(bytes(range(8)))
    from_array = layout.validate(np.arange(8, dtype=np.uint8).reshape(1, 2, 4))
    from_list = layout.validate(list(range(8)))
    assert np.array_equal(from_bytes, from_array)
    assert np.array_equal(from_bytes, from_list)
    assert from_bytes.dtype == np.uint8


def test_compose_writes_gray_opaque_pixels():
    """compose() puts the plane into R, G, B and forces alpha to 255."""
    layout = BufferLayout(2, 1)
    out = layout.compose(np.array([[7, 200]], dtype=np.uint8))
    assert out.tolist() == [7, 7, 7, 255, 200, 200, 200, 255]


def test_compose_leaves_row_padding_zero():
    """Padding bytes beyond width * channels stay zero."""
    layout = BufferLayout(1, 2, stride=6)
    out = layout.compose(np.array([[9], [8]], dtype=np.uint8))
    assert out.tolist() == [9, 9, 9, 255, 0, 0, 8, 8, 8, 255, 0, 0]


def test_luminance_reads_red_channel_with_stride():
    layout = BufferLayout(2, 2, channel_order="BGRA", stride=10)
    data = np.zeros(20, dtype=np.uint8)
    data[2] = 11  # red of (0, 0)
    data[10 + 4 + 2] = 22  # red of (1, 1)
    assert layout.luminance(layout.validate(data)).tolist() == [[11, 0], [0, 22]]


def test_blank_is_black_and_opaque():
    pixels = BufferLayout(3, 3).blank().reshape(3, 3, 4)
    assert np.all(pixels[:, :, :3] == 0)
    assert np.all(pixels[:, :, 3] == 255)


def test_resolve_layout_checks_dimensions():
    assert resolve_layout(4, 3) == BufferLayout(4, 3)
    with pytest.raises(InvalidDimensions, match="layout is 4x3"):
        resolve_layout(3, 4, BufferLayout(4, 3))


def test_row_layout():
    assert row_layout(np.zeros(12, dtype=np.uint8)) == BufferLayout(3, 1)
    assert row_layout(np.zeros(0, dtype=np.uint8)) is None
    with pytest.raises(InvalidBufferLength, match="multiple of 4"):
        row_layout(np.zeros(6, dtype=np.uint8))


def test_as_image_array_copies():
    layout = BufferLayout(2, 1)
    data = np.arange(8, dtype=np.uint8)
    image = as_image_array(data, layout)
    assert image.shape == (1, 2, 4)
    image[0, 0, 0] = 99
    assert data[0] == 0


def test_to_flat_array_from_memoryview():
    flat = to_flat_array(memoryview(bytearray([1, 2, 3, 4])))
    assert flat.tolist() == [1, 2, 3, 4]
