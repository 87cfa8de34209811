"""Frame sources: decoded image files and live camera capture.

These sit outside the processing core. They only turn whatever the
device or file gives us into flat RGBA frames.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np
from PIL import Image

from .buffers import Frame
from .config import CAMERA_INDEX, CAPTURE_HEIGHT, CAPTURE_WIDTH

logger = logging.getLogger(__name__)

# OpenCV conversions to RGBA, keyed by source channel order
_TO_RGBA = {
    "RGB": cv2.COLOR_RGB2RGBA,
    "BGR": cv2.COLOR_BGR2RGBA,
    "BGRA": cv2.COLOR_BGRA2RGBA,
    "GRAY": cv2.COLOR_GRAY2RGBA,
}


def load_image(path: Union[str, Path]) -> Frame:
    """Decode an image file into an RGBA frame.

    Raises:
        FileNotFoundError: If path doesn't exist
        PIL.UnidentifiedImageError: If the file isn't a readable image
    """
    with Image.open(path) as img:
        rgba = img.convert("RGBA")
    pixels = np.asarray(rgba, dtype=np.uint8).reshape(-1).copy()
    logger.info("Loaded %s (%dx%d)", path, rgba.width, rgba.height)
    return Frame(pixels, rgba.width, rgba.height)


def frame_from_array(array: np.ndarray, channel_order: str = "RGBA") -> Frame:
    """Convert an image array in the given channel order to an RGBA frame.

    Args:
        array: (height, width, channels) or (height, width) uint8 array
        channel_order: One of RGBA, RGB, BGR, BGRA, GRAY

    Raises:
        ValueError: If channel_order is unsupported
    """
    if channel_order != "RGBA" and channel_order not in _TO_RGBA:
        raise ValueError(f"Unsupported channel order {channel_order!r}")

    height, width = array.shape[:2]
    if width == 0 or height == 0:
        return Frame(np.empty(0, dtype=np.uint8), width, height)

    if channel_order == "RGBA":
        rgba = np.ascontiguousarray(array, dtype=np.uint8)
    else:
        rgba = cv2.cvtColor(np.ascontiguousarray(array, dtype=np.uint8), _TO_RGBA[channel_order])
    return Frame(rgba.reshape(-1).copy(), width, height)


class CameraSource:
    """Live frames from an OpenCV capture device."""

    def __init__(
        self,
        index: int = CAMERA_INDEX,
        width: int = CAPTURE_WIDTH,
        height: int = CAPTURE_HEIGHT
    ):
        """Initialize camera source.

        Args:
            index: OpenCV device index
            width: Requested capture width
            height: Requested capture height
        """
        self.index = index
        self.width = width
        self.height = height
        self._capture = None

    def open(self) -> "CameraSource":
        """Open the device.

        Raises:
            RuntimeError: If the device can't be opened
        """
        capture = cv2.VideoCapture(self.index)
        if not capture.isOpened():
            capture.release()
            raise RuntimeError(f"Cannot open camera {self.index}")

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self._capture = capture
        logger.info(
            "Camera %d opened at %dx%d", self.index,
            int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        )
        return self

    def read(self) -> Optional[Frame]:
        """Grab the next frame, or None when the device stops delivering."""
        if self._capture is None:
            raise RuntimeError("Camera is not open")
        ok, image = self._capture.read()
        if not ok or image is None:
            logger.warning("Failed to read frame from camera %d", self.index)
            return None
        return frame_from_array(image, "BGR")

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Camera %d released", self.index)

    def __enter__(self) -> "CameraSource":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
