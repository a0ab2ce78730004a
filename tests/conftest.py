"""
Pytest fixtures for four-cut collage tests.
"""
import pytest
from PIL import Image

from fourcut.canvas import CanvasSpec

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
YELLOW = (255, 255, 0)
MAGENTA = (255, 0, 255)
WHITE = (255, 255, 255)


@pytest.fixture
def canvas():
    """Default 600×700 canvas with the caption disabled, so cut pixels are clean."""
    return CanvasSpec(caption="")


@pytest.fixture
def solid():
    """Factory for single-colour images."""
    def _solid(color, size=(120, 90), mode="RGB"):
        if mode == "RGBA" and len(color) == 3:
            color = color + (255,)
        return Image.new(mode, size, color)
    return _solid


@pytest.fixture
def base_images(solid):
    """Four differently-shaped photos: landscape, portrait, square, wide."""
    return [
        solid(RED, (400, 300)),
        solid(GREEN, (300, 400)),
        solid(BLUE, (256, 256)),
        solid(YELLOW, (1000, 200)),
    ]
