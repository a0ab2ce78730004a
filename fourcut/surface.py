"""
Drawing surface — explicit create / draw / finalize around a Pillow buffer.

Usage::

    with DrawingSurface.create((600, 700), "white") as surface:
        surface.draw_image(cut, rect)
        image = surface.finalize()
"""

import logging
from typing import Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

from fourcut.errors import RenderSurfaceAllocationFailure
from fourcut.layout import Rect

logger = logging.getLogger(__name__)


class DrawingSurface:
    """RGBA drawing buffer that can be read back exactly once."""

    def __init__(self, buffer: Image.Image):
        self._buffer: Optional[Image.Image] = buffer
        self._draw = ImageDraw.Draw(buffer)
        self._finalized = False

    # ── Factory ──────────────────────────────────────────────────────
    @classmethod
    def create(cls, size: Tuple[int, int], background="white") -> "DrawingSurface":
        """Allocate a new surface filled with *background*."""
        if isinstance(background, str):
            # bad colour names are ValueErrors, not allocation failures
            background = ImageColor.getcolor(background, "RGBA")
        try:
            buffer = Image.new("RGBA", size, background)
        except (MemoryError, ValueError) as e:
            raise RenderSurfaceAllocationFailure(
                f"Could not allocate {size[0]}×{size[1]} drawing surface: {e}"
            ) from e
        logger.debug(f"Allocated {size[0]}×{size[1]} surface")
        return cls(buffer)

    # ── Context manager ──────────────────────────────────────────────
    def __enter__(self) -> "DrawingSurface":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    # ── Drawing ──────────────────────────────────────────────────────
    @property
    def size(self) -> Tuple[int, int]:
        return self._require_buffer().size

    def draw_image(self, image: Image.Image, rect: Rect) -> None:
        """Composite *image* (already ``rect.size``) at the rect origin."""
        buffer = self._require_buffer()
        if image.size != rect.size:
            raise ValueError(f"Image size {image.size} does not match target {rect.size}")
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        buffer.alpha_composite(image, dest=(rect.x, rect.y))

    def draw_text(self, text: str, xy: Tuple[float, float],
                  font: ImageFont.ImageFont, fill) -> None:
        self._require_buffer()
        self._draw.text(xy, text, font=font, fill=fill)

    # ── Readback ─────────────────────────────────────────────────────
    def finalize(self) -> Image.Image:
        """Read the buffer back as an RGB image and close the surface for drawing."""
        buffer = self._require_buffer()
        image = buffer.convert("RGB")
        self._finalized = True
        self.release()
        return image

    def release(self) -> None:
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None
            self._draw = None

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _require_buffer(self) -> Image.Image:
        if self._buffer is None:
            state = "finalized" if self._finalized else "released"
            raise RuntimeError(f"Drawing surface already {state}")
        return self._buffer
