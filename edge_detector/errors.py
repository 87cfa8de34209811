"""Exceptions raised by the edge detection core."""

from .config import OPERATOR_NAMES


class EdgeDetectionError(Exception):
    """Base class for all edge detector errors."""


class InvalidBufferLength(EdgeDetectionError, ValueError):
    """Buffer length does not match the declared layout."""

    def __init__(self, length: int, expected: str):
        super().__init__(f"Buffer length {length} is invalid: expected {expected}")
        self.length = length


class InvalidDimensions(EdgeDetectionError, ValueError):
    """Width, height, channel order or stride cannot describe a buffer."""


class UnknownOperatorName(EdgeDetectionError, ValueError):
    """Operator name outside the fixed set of five."""

    def __init__(self, name):
        super().__init__(
            f"Unknown operator {name!r}, expected one of: {', '.join(OPERATOR_NAMES)}"
        )
        self.name = name


class InvalidThreshold(EdgeDetectionError, ValueError):
    """Threshold is not an integer in [0, 255]."""
