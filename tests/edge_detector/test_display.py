"""Tests for rendering results into a window image."""

import numpy as np
import pytest

from edge_detector.buffers import BufferLayout, Frame
from edge_detector.config import LABEL_HEIGHT
from edge_detector.display import build_mosaic, render_panel, render_results
from edge_detector.orchestrator import EdgeDetectionSession

from conftest import rgba_from_luminance


def test_render_panel_adds_label_bar():
    layout = BufferLayout(40, 20)
    data = rgba_from_luminance(np.full((20, 40), 255))
    panel = render_panel(data, layout, "Sobel")
    assert panel.shape == (20 + LABEL_HEIGHT, 40, 3)
    assert np.all(panel[LABEL_HEIGHT:] == 255)


def test_render_panel_converts_rgba_to_bgr():
    layout = BufferLayout(1, 1)
    panel = render_panel(np.array([255, 0, 0, 255], dtype=np.uint8), layout, "x")
    assert panel[LABEL_HEIGHT, 0].tolist() == [0, 0, 255]


def test_build_mosaic_fills_grid():
    panels = [np.full((2, 3, 3), i, dtype=np.uint8) for i in range(4)]
    mosaic = build_mosaic(panels, columns=3)
    assert mosaic.shape == (4, 9, 3)
    assert np.all(mosaic[2:, 3:] == 0)  # padding after the 4th panel
    assert np.all(mosaic[2:, :3] == 3)


def test_build_mosaic_requires_panels():
    with pytest.raises(ValueError):
        build_mosaic([])


def test_render_results_includes_original_and_enabled_operators():
    values = np.zeros((10, 12), dtype=np.uint8)
    values[:, 6:] = 255
    frame = Frame(rgba_from_luminance(values), 12, 10)
    session = EdgeDetectionSession(enabled={"roberts": False, "canny": False})
    results = session.submit_frame(frame.pixels, frame.width, frame.height)

    image = render_results(frame, results, session.threshold)

    # Original + 3 operators in a 3-column grid: 2 rows
    assert image.shape == (2 * (10 + LABEL_HEIGHT), 3 * 12, 3)
