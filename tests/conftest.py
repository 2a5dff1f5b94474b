import numpy as np
import pytest


def draw_squares(shape, squares, value=255, dtype=np.uint8):
    """Return a zero image of ``shape`` with filled squares (x, y, size) set to ``value``."""
    image = np.zeros(shape, dtype=dtype)
    for x, y, size in squares:
        image[y:y + size, x:x + size] = value
    return image


@pytest.fixture
def mask_factory():
    """Build single-channel 0/255 masks from (x, y, size) squares."""
    def factory(height, width, squares=()):
        return draw_squares((height, width), squares)
    return factory


@pytest.fixture
def rgba_factory():
    """Build opaque RGBA frames with white squares on a dark background."""
    def factory(height, width, squares=(), background=20):
        frame = np.full((height, width, 4), background, dtype=np.uint8)
        frame[:, :, 3] = 255
        for x, y, size in squares:
            frame[y:y + size, x:x + size, :3] = 255
        return frame
    return factory


@pytest.fixture
def grid_squares():
    """Nine 8x8 squares on a 20px grid, none touching."""
    return [(10 + 20 * col, 10 + 20 * row, 8) for row in range(3) for col in range(3)]
