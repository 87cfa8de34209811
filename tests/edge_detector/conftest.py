"""Shared fixtures for edge detector tests."""

import numpy as np
import pytest


def rgba_from_luminance(values, alpha=255) -> np.ndarray:
    """Flat RGBA buffer with R=G=B=values and constant alpha."""
    values = np.asarray(values, dtype=np.uint8)
    height, width = values.shape
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = values[:, :, np.newaxis]
    pixels[:, :, 3] = alpha
    return pixels.reshape(-1)


def pixel_grid(buffer, width, height) -> np.ndarray:
    """View a flat RGBA buffer as (height, width, 4)."""
    return np.asarray(buffer).reshape(height, width, 4)


@pytest.fixture
def random_gray():
    """Deterministic random grayscale frame (10x8) with varying alpha."""
    rng = np.random.default_rng(1234)
    values = rng.integers(0, 256, size=(8, 10), dtype=np.uint8)
    pixels = np.empty((8, 10, 4), dtype=np.uint8)
    pixels[:, :, :3] = values[:, :, np.newaxis]
    pixels[:, :, 3] = rng.integers(0, 256, size=(8, 10), dtype=np.uint8)
    return pixels.reshape(-1), 10, 8


@pytest.fixture
def step_edge():
    """4x4 frame, left half black, right half white."""
    values = np.zeros((4, 4), dtype=np.uint8)
    values[:, 2:] = 255
    return rgba_from_luminance(values), 4, 4
