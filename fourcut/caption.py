"""
Caption layout — one line of text in the footer band.

The text's ink box is aligned horizontally across the full canvas width
and centered vertically in ``canvas.caption_band``.
"""

import logging
import os
import sys
from typing import Dict, List, Optional, Tuple

from PIL import ImageFont

from fourcut.canvas import CanvasSpec
from fourcut.surface import DrawingSurface

logger = logging.getLogger(__name__)


def _font_candidates(bold: bool) -> List[str]:
    """Platform font files to try, best match first."""
    if sys.platform == "win32":
        return ["C:/Windows/Fonts/arialbd.ttf" if bold else "C:/Windows/Fonts/arial.ttf"]
    if sys.platform == "darwin":
        return [
            "/System/Library/Fonts/Supplemental/Arial Bold.ttf" if bold
            else "/System/Library/Fonts/Supplemental/Arial.ttf",
            "/System/Library/Fonts/Helvetica.ttc",
        ]
    return [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf" if bold
        else "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf" if bold
        else "/usr/share/fonts/TTF/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf" if bold
        else "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    ]


# (path, size) → font; "" path = Pillow's built-in font
_font_cache: Dict[Tuple[str, int], ImageFont.ImageFont] = {}


def load_font(size: int, bold: bool = True, font_path: Optional[str] = None) -> ImageFont.ImageFont:
    """
    Load the caption font.

    An explicit *font_path* wins; otherwise the first existing platform
    font is used, falling back to Pillow's scalable default font.
    """
    candidates = [font_path] if font_path else []
    candidates += _font_candidates(bold)
    path = next((p for p in candidates if p and os.path.exists(p)), "")
    if font_path and path != font_path:
        logger.warning(f"Caption font {font_path!r} not found — using {path or 'built-in font'}")

    key = (path, size)
    if key not in _font_cache:
        if path:
            _font_cache[key] = ImageFont.truetype(path, size)
        else:
            _font_cache[key] = ImageFont.load_default(size)
        logger.debug(f"Loaded caption font {path or '<default>'} @ {size}px")
    return _font_cache[key]


def caption_origin(text: str, font: ImageFont.ImageFont,
                   canvas: CanvasSpec) -> Tuple[float, float]:
    """Top-left draw position that places the text's ink box inside the caption band."""
    left, top, right, bottom = font.getbbox(text)
    text_w = right - left
    text_h = bottom - top
    band_x, band_y, band_w, band_h = canvas.caption_band

    if canvas.text_align == "left":
        x = band_x
    elif canvas.text_align == "right":
        x = band_x + band_w - text_w
    else:
        x = band_x + (band_w - text_w) / 2
    y = band_y + (band_h - text_h) / 2

    # getbbox is relative to the draw origin
    return x - left, y - top


def draw_caption(surface: DrawingSurface, canvas: CanvasSpec) -> None:
    """Draw ``canvas.caption`` onto *surface*."""
    text = canvas.caption
    if not text:
        return
    font = load_font(canvas.font_size, canvas.bold, canvas.font_path)
    xy = caption_origin(text, font, canvas)
    surface.draw_text(text, xy, font=font, fill=canvas.text_color)
    logger.debug(f"Caption {text!r} drawn at ({xy[0]:.1f}, {xy[1]:.1f})")
