"""
Collage Renderer — Composite four cuts and a caption into one image
====================================================================
For each slot ``i`` (row-major over the 2×2 grid):

  1. resolve the slot rectangle,
  2. scale the base photo to *fill* it (aspect preserved, centered, excess
     cropped),
  3. draw the slot's overlay, if any, the same way on top of the photo.

The caption is drawn into the footer band only after all four slots.
"""

import logging
from collections import abc
from typing import Mapping, Optional, Sequence, Tuple, Union

from PIL import Image

from fourcut.canvas import CanvasSpec, CollageResult
from fourcut.caption import draw_caption
from fourcut.errors import PrematureRender
from fourcut.layout import SLOT_COUNT, Rect, check_slot, rect_for
from fourcut.overlays import OverlaySet
from fourcut.surface import DrawingSurface

logger = logging.getLogger(__name__)

Overlays = Union[OverlaySet, Mapping[int, Optional[Image.Image]],
                 Sequence[Optional[Image.Image]], None]


# ── Scale-to-fill geometry ───────────────────────────────────────────
def fill_geometry(
    src_size: Tuple[int, int], rect_size: Tuple[int, int]
) -> Tuple[Tuple[int, int], Tuple[int, int, int, int]]:
    """
    Compute scale-to-fill resize and crop for a source image.

    Parameters
    ----------
    src_size : (int, int)
        Source image ``(width, height)``.
    rect_size : (int, int)
        Target rectangle ``(width, height)``.

    Returns
    -------
    scaled_size : (int, int)
        Size to resize the source to; covers the target on both axes.
    crop_box : (int, int, int, int)
        Centered ``(left, top, right, bottom)`` box of exactly
        ``rect_size`` within the scaled image.
    """
    src_w, src_h = src_size
    rect_w, rect_h = rect_size
    if src_w <= 0 or src_h <= 0:
        raise ValueError(f"Cannot scale an empty image ({src_w}×{src_h})")

    scale = max(rect_w / src_w, rect_h / src_h)
    scaled_w = max(rect_w, round(src_w * scale))
    scaled_h = max(rect_h, round(src_h * scale))

    left = (scaled_w - rect_w) // 2
    top = (scaled_h - rect_h) // 2
    return (scaled_w, scaled_h), (left, top, left + rect_w, top + rect_h)


def scale_to_fill(image: Image.Image, rect: Rect) -> Image.Image:
    """Return a new ``rect.size`` image: *image* scaled to cover *rect* and center-cropped."""
    scaled_size, crop_box = fill_geometry(image.size, rect.size)
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")
    scaled = image.resize(scaled_size, Image.LANCZOS)
    return scaled.crop(crop_box)


class CollageRenderer:
    """
    Render a four-cut collage.

    Parameters
    ----------
    canvas : CanvasSpec | None
        Default canvas for ``render``; ``None`` = built-in defaults.
    """

    def __init__(self, canvas: Optional[CanvasSpec] = None):
        self.canvas = canvas or CanvasSpec()

    # ── Public API ───────────────────────────────────────────────────
    def render(
        self,
        base_images: Sequence[Image.Image],
        overlays: Overlays = None,
        canvas: Optional[CanvasSpec] = None,
    ) -> CollageResult:
        """
        Composite four base images, their overlays and the caption.

        Parameters
        ----------
        base_images : sequence of PIL.Image.Image
            Exactly four captured photos, slot order.
        overlays : OverlaySet | mapping | sequence | None
            Optional overlay per slot.
        canvas : CanvasSpec | None
            Overrides the renderer's canvas for this call.

        Returns
        -------
        CollageResult
            The finished ``W×H`` collage.

        Raises
        ------
        PrematureRender
            Fewer (or more) than four base images.
        InvalidSlotIndex
            An overlay keyed outside 0–3.
        RenderSurfaceAllocationFailure
            The output buffer could not be allocated.
        """
        canvas = canvas or self.canvas
        bases = self._check_bases(base_images)
        overlay_slots = self._overlay_slots(overlays)

        with DrawingSurface.create(canvas.size, canvas.background_color) as surface:
            for i in range(SLOT_COUNT):
                rect = rect_for(i, canvas)
                surface.draw_image(scale_to_fill(bases[i], rect), rect)

                overlay = overlay_slots[i]
                if overlay is not None:
                    surface.draw_image(scale_to_fill(overlay, rect), rect)
                    logger.debug(f"Slot {i}: base + overlay → {rect}")
                else:
                    logger.debug(f"Slot {i}: base → {rect}")

            draw_caption(surface, canvas)
            image = surface.finalize()

        n_overlays = sum(o is not None for o in overlay_slots)
        logger.info(
            f"Rendered four-cut collage ({canvas.width}×{canvas.height}, "
            f"{n_overlays} overlay(s))"
        )
        return CollageResult(image=image, canvas=canvas)

    # ── Input normalisation ──────────────────────────────────────────
    @staticmethod
    def _check_bases(base_images: Sequence[Image.Image]) -> Tuple[Image.Image, ...]:
        given = list(base_images or ())
        bases = tuple(img for img in given if img is not None)
        if len(bases) != SLOT_COUNT or len(given) != SLOT_COUNT:
            raise PrematureRender(len(bases))
        return bases

    @staticmethod
    def _overlay_slots(overlays: Overlays) -> Tuple[Optional[Image.Image], ...]:
        if overlays is None:
            return (None,) * SLOT_COUNT
        if isinstance(overlays, OverlaySet):
            return overlays.snapshot()
        if isinstance(overlays, abc.Mapping):
            slots = [None] * SLOT_COUNT
            for slot, image in overlays.items():
                slots[check_slot(slot)] = image
            return tuple(slots)

        overlays = tuple(overlays)
        if len(overlays) > SLOT_COUNT:
            check_slot(len(overlays) - 1)
        return overlays + (None,) * (SLOT_COUNT - len(overlays))
