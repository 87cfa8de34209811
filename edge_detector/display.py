"""Render frames and operator results into one labeled window image."""

from typing import Dict, List, Tuple

import cv2
import numpy as np

from .buffers import BufferLayout, Frame, as_image_array
from .config import LABEL_HEIGHT
from .operators import OPERATORS


def render_panel(data, layout: BufferLayout, label: str) -> np.ndarray:
    """Convert an RGBA buffer into a BGR panel with a label bar on top."""
    image = as_image_array(data, layout)
    bgr = cv2.cvtColor(image, cv2.COLOR_RGBA2BGR)

    labeled = np.zeros((bgr.shape[0] + LABEL_HEIGHT, bgr.shape[1], 3), dtype=np.uint8)
    labeled[:, :] = [40, 40, 40]  # Dark gray label background
    labeled[LABEL_HEIGHT:, :] = bgr
    cv2.putText(labeled, label, (10, 20), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)
    return labeled


def build_mosaic(panels: List[np.ndarray], columns: int = 3) -> np.ndarray:
    """Arrange equally sized panels in a grid, filling gaps with black."""
    if not panels:
        raise ValueError("No panels to arrange")
    blank = np.zeros_like(panels[0])
    rows = []
    for start in range(0, len(panels), columns):
        row = panels[start:start + columns]
        row = row + [blank] * (columns - len(row))
        rows.append(np.hstack(row))
    return np.vstack(rows)


def render_results(
    frame: Frame,
    results: Dict[str, np.ndarray],
    threshold: int,
    columns: int = 3
) -> np.ndarray:
    """Original frame followed by every operator result, as one BGR image."""
    layout = BufferLayout(frame.width, frame.height)
    panels: List[Tuple[str, np.ndarray]] = [("Original", frame.pixels)]
    panels += [(f"{OPERATORS[name].label} (T={threshold})", buffer) for name, buffer in results.items()]
    return build_mosaic([render_panel(data, layout, label) for label, data in panels], columns)
