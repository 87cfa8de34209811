"""The five edge operators and their registry.

Each operator is a pure function (gray, width, height, layout=None) that
returns a new buffer of the same layout. Sobel, Prewitt, Roberts and
Laplace are thin configurations of the shared convolution engine.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np

from .buffers import BufferLayout, resolve_layout
from .canny import canny
from .convolution import absolute, convolve, magnitude
from .errors import UnknownOperatorName
from .kernels import LAPLACE, PREWITT_X, PREWITT_Y, ROBERTS_X, ROBERTS_Y, SOBEL_X, SOBEL_Y


def sobel(gray, width: int, height: int, layout: Optional[BufferLayout] = None) -> np.ndarray:
    """Sobel gradient magnitude."""
    layout = resolve_layout(width, height, layout)
    return convolve(gray, layout, (SOBEL_X, SOBEL_Y), magnitude)


def roberts(gray, width: int, height: int, layout: Optional[BufferLayout] = None) -> np.ndarray:
    """Roberts cross gradient magnitude.

    The 2x2 footprint anchors at the top-left pixel, so the last row and
    column stay black instead of the first and last.
    """
    layout = resolve_layout(width, height, layout)
    return convolve(gray, layout, (ROBERTS_X, ROBERTS_Y), magnitude)


def prewitt(gray, width: int, height: int, layout: Optional[BufferLayout] = None) -> np.ndarray:
    """Prewitt gradient magnitude."""
    layout = resolve_layout(width, height, layout)
    return convolve(gray, layout, (PREWITT_X, PREWITT_Y), magnitude)


def laplace(gray, width: int, height: int, layout: Optional[BufferLayout] = None) -> np.ndarray:
    """Absolute response of the 4-neighbor Laplacian."""
    layout = resolve_layout(width, height, layout)
    return convolve(gray, layout, (LAPLACE,), absolute)


@dataclass(frozen=True)
class Operator:
    """A named edge operator."""
    name: str
    label: str
    apply: Callable[..., np.ndarray]


OPERATORS: Dict[str, Operator] = {
    op.name: op for op in (
        Operator("sobel", "Sobel", sobel),
        Operator("roberts", "Roberts", roberts),
        Operator("prewitt", "Prewitt", prewitt),
        Operator("laplace", "Laplace", laplace),
        Operator("canny", "Canny", canny),
    )
}


def get_operator(name: str) -> Operator:
    """Look up an operator by name.

    Raises:
        UnknownOperatorName: If name isn't one of the five operators
    """
    try:
        return OPERATORS[name]
    except (KeyError, TypeError):
        raise UnknownOperatorName(name) from None
