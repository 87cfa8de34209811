"""Pixel buffer layout: validation, pixel views and output composition.

Buffers travel through the pipeline as flat uint8 arrays. A BufferLayout
describes how a flat buffer maps to pixels (width, height, channel order
and row stride), so the same operators work on RGBA canvas data, BGRA
camera frames or padded rows alike.
"""

import numbers
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

import numpy as np

from .config import DEFAULT_CHANNEL_ORDER, OPAQUE
from .errors import InvalidBufferLength, InvalidDimensions

RGBA_CHANNELS = 4


class Frame(NamedTuple):
    """A raw frame as handed over by a capture or decode collaborator."""
    pixels: np.ndarray
    width: int
    height: int


def _is_positive_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class BufferLayout:
    """Describes a flat interleaved pixel buffer."""
    width: int
    height: int
    channel_order: str = DEFAULT_CHANNEL_ORDER
    stride: Optional[int] = None  # Bytes per row, defaults to width * channels

    def __post_init__(self):
        if not _is_positive_int(self.width) or not _is_positive_int(self.height):
            raise InvalidDimensions(
                f"width and height must be positive integers, got {self.width!r}x{self.height!r}"
            )
        order = self.channel_order
        if sorted(order) not in (sorted("RGB"), sorted("RGBA")):
            raise InvalidDimensions(
                f"channel_order must be a permutation of RGB or RGBA, got {order!r}"
            )
        row_bytes = self.width * len(order)
        if self.stride is None:
            object.__setattr__(self, "stride", row_bytes)
        elif not _is_positive_int(self.stride) or self.stride < row_bytes:
            raise InvalidDimensions(
                f"stride must be an integer >= {row_bytes}, got {self.stride!r}"
            )

    @property
    def channels(self) -> int:
        return len(self.channel_order)

    @property
    def expected_length(self) -> int:
        return self.stride * self.height

    @property
    def color_indices(self) -> Tuple[int, int, int]:
        return tuple(self.channel_order.index(c) for c in "RGB")

    @property
    def luminance_index(self) -> int:
        """Channel read as luminance (red; all color channels match in grayscale)."""
        return self.channel_order.index("R")

    @property
    def alpha_index(self) -> Optional[int]:
        return self.channel_order.index("A") if "A" in self.channel_order else None

    def validate(self, data) -> np.ndarray:
        """Return data as a flat uint8 array, or raise InvalidBufferLength."""
        flat = to_flat_array(data)
        if flat.size != self.expected_length:
            raise InvalidBufferLength(
                flat.size,
                f"{self.expected_length} bytes for {self.width}x{self.height} "
                f"{self.channel_order} (stride {self.stride})"
            )
        return flat

    def pixels(self, flat: np.ndarray) -> np.ndarray:
        """View a validated flat buffer as a (height, width, channels) array.

        The view shares memory with flat, so writes land in the buffer.
        """
        return np.lib.stride_tricks.as_strided(
            flat,
            shape=(self.height, self.width, self.channels),
            strides=(self.stride, self.channels, 1),
        )

    def luminance(self, flat: np.ndarray) -> np.ndarray:
        """Luminance plane as a signed (height, width) array."""
        return self.pixels(flat)[:, :, self.luminance_index].astype(np.int64)

    def compose(self, plane: np.ndarray) -> np.ndarray:
        """Build a new buffer with plane in R, G, B and opaque alpha.

        Row padding, if any, stays zero.
        """
        out = np.zeros(self.expected_length, dtype=np.uint8)
        pixels = self.pixels(out)
        pixels[:, :, list(self.color_indices)] = plane[:, :, np.newaxis]
        if self.alpha_index is not None:
            pixels[:, :, self.alpha_index] = OPAQUE
        return out

    def blank(self) -> np.ndarray:
        """All-black, fully opaque buffer."""
        return self.compose(np.zeros((self.height, self.width), dtype=np.uint8))


def to_flat_array(data) -> np.ndarray:
    """Accept bytes-like objects, numpy arrays or int sequences as flat uint8."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(data, dtype=np.uint8)
    return np.ascontiguousarray(np.asarray(data, dtype=np.uint8).reshape(-1))


def resolve_layout(width: int, height: int, layout: Optional[BufferLayout] = None) -> BufferLayout:
    """Default RGBA layout for width x height, or check a given one matches."""
    if layout is None:
        return BufferLayout(width, height)
    if (layout.width, layout.height) != (width, height):
        raise InvalidDimensions(
            f"layout is {layout.width}x{layout.height} but frame is {width}x{height}"
        )
    return layout


def row_layout(flat: np.ndarray) -> Optional[BufferLayout]:
    """Read an RGBA buffer without known dimensions as a single row.

    Returns None for an empty buffer.
    """
    if flat.size % RGBA_CHANNELS != 0:
        raise InvalidBufferLength(flat.size, f"a multiple of {RGBA_CHANNELS}")
    if flat.size == 0:
        return None
    return BufferLayout(flat.size // RGBA_CHANNELS, 1)


def as_image_array(data, layout: BufferLayout) -> np.ndarray:
    """Copy a buffer out as a (height, width, channels) image for rendering."""
    flat = layout.validate(data)
    return np.array(layout.pixels(flat))
