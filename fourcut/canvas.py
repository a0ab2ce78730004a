"""
Canvas constants and the final collage value
=============================================
``CanvasSpec`` fixes every number the renderer needs: canvas size, the
frame gap between cuts, and the caption band / font settings.
``CollageResult`` wraps the finished image.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from PIL import Image, ImageColor

logger = logging.getLogger(__name__)

Color = Union[str, Tuple[int, ...]]

TEXT_ALIGNMENTS = ("left", "center", "right")


@dataclass(frozen=True)
class CanvasSpec:
    """
    Immutable collage geometry and caption style.

    Parameters
    ----------
    width, height : int
        Canvas size in pixels (``W``, ``H``).
    frame_gap : int
        Gap ``F`` between neighbouring cuts; half of it is left at the
        canvas edges.
    caption_band_height : int
        Height ``T`` of the footer band the caption is centered in.
    caption : str
        Single line of text drawn in the footer band.
    font_size : int
    bold : bool
    text_color, background_color : str or tuple
        Any colour Pillow understands.
    text_align : str
        ``left``, ``center`` or ``right``.
    font_path : str | None
        Explicit TrueType font; ``None`` = platform lookup.
    """

    width: int = 600
    height: int = 700
    frame_gap: int = 10
    caption_band_height: int = 50
    caption: str = "Graceful Memories"
    font_size: int = 24
    bold: bool = True
    text_color: Color = "black"
    text_align: str = "center"
    background_color: Color = "white"
    font_path: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        for name in ("width", "height", "frame_gap", "caption_band_height", "font_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        for name in ("width", "height"):
            value = getattr(self, name)
            if value <= 0 or value % 2:
                raise ValueError(f"Canvas {name} must be a positive even integer, got {value}")
        if self.frame_gap < 0 or self.frame_gap % 2:
            raise ValueError(f"frame_gap must be a non-negative even integer, got {self.frame_gap}")
        if self.frame_gap >= min(self.width, self.height) // 2:
            raise ValueError(
                f"frame_gap {self.frame_gap} leaves no room for a cut "
                f"on a {self.width}×{self.height} canvas"
            )
        if not 0 < self.caption_band_height <= self.height:
            raise ValueError(
                f"caption_band_height must be in (0, {self.height}], "
                f"got {self.caption_band_height}"
            )
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {self.font_size}")
        if self.text_align not in TEXT_ALIGNMENTS:
            raise ValueError(
                f"text_align must be one of {TEXT_ALIGNMENTS}, got {self.text_align!r}"
            )
        for name in ("background_color", "text_color"):
            _check_color(name, getattr(self, name))

    # ── Derived geometry ─────────────────────────────────────────────
    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def cell_size(self) -> Tuple[int, int]:
        """Size of one grid cell before the frame gap is taken out."""
        return self.width // 2, self.height // 2

    @property
    def caption_band(self) -> Tuple[int, int, int, int]:
        """Footer band as ``(x, y, w, h)``."""
        top = self.height - self.caption_band_height
        return 0, top, self.width, self.caption_band_height

    # ── Factory ──────────────────────────────────────────────────────
    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CanvasSpec":
        """Build a spec from the ``canvas:`` and ``caption:`` sections of config.yaml."""
        canvas_cfg = config.get("canvas", {}) or {}
        caption_cfg = config.get("caption", {}) or {}
        defaults = cls()

        spec = cls(
            width=canvas_cfg.get("width", defaults.width),
            height=canvas_cfg.get("height", defaults.height),
            frame_gap=canvas_cfg.get("frame_gap", defaults.frame_gap),
            background_color=_color(canvas_cfg.get("background_color", defaults.background_color)),
            caption_band_height=caption_cfg.get("band_height", defaults.caption_band_height),
            caption=caption_cfg.get("text", defaults.caption),
            font_size=caption_cfg.get("font_size", defaults.font_size),
            bold=caption_cfg.get("bold", defaults.bold),
            text_color=_color(caption_cfg.get("color", defaults.text_color)),
            text_align=caption_cfg.get("align", defaults.text_align),
            font_path=caption_cfg.get("font_path"),
        )
        logger.debug(f"Canvas spec: {spec}")
        return spec


def _check_color(name: str, value: Any) -> None:
    """Raise ``ValueError`` unless Pillow can use *value* as a colour."""
    if isinstance(value, str):
        try:
            ImageColor.getrgb(value)
        except ValueError as e:
            raise ValueError(f"{name}: {e}") from e
        return
    if (
        isinstance(value, tuple)
        and len(value) in (3, 4)
        and all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in value)
    ):
        return
    raise ValueError(f"{name} must be a colour name or an RGB(A) tuple of 0–255 ints, got {value!r}")


def _color(value: Any) -> Color:
    # YAML gives lists for RGB(A) triples; Pillow wants tuples
    if isinstance(value, list):
        return tuple(value)
    return value


@dataclass(frozen=True)
class CollageResult:
    """The finished ``W×H`` collage and the spec it was rendered with."""

    image: Image.Image
    canvas: CanvasSpec

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def save(self, path: Union[str, Path]) -> Path:
        """Write the collage as PNG, creating parent directories."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(str(out), format="PNG")
        logger.info(f"Saved collage to {out}")
        return out
