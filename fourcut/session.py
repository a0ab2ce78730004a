"""
Capture Session — drives when the collage is rendered
======================================================
States::

    EMPTY ──capture──▶ CAPTURING (1–3) ──4th capture──▶ READY

Entering ``READY`` is the only thing that renders. Overlays can be picked
at any time; whatever is set when the 4th photo lands ends up in the
collage.
"""

import enum
import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from PIL import Image

from fourcut.canvas import CollageResult
from fourcut.layout import SLOT_COUNT
from fourcut.overlays import OverlaySet
from fourcut.renderer import CollageRenderer

logger = logging.getLogger(__name__)

CollageListener = Callable[[CollageResult], None]


class SessionState(enum.Enum):
    EMPTY = "empty"
    CAPTURING = "capturing"
    READY = "ready"


class CaptureSession:
    """
    Accumulate four captured photos and per-slot overlays.

    Parameters
    ----------
    renderer : CollageRenderer | None
        Used once, on the transition into ``READY``.
    """

    def __init__(self, renderer: Optional[CollageRenderer] = None):
        self.renderer = renderer or CollageRenderer()
        self._images: List[Image.Image] = []
        self._overlays = OverlaySet()
        self._result: Optional[CollageResult] = None
        self._saved_path: Optional[Path] = None
        self._listeners: List[CollageListener] = []

    # ── State ────────────────────────────────────────────────────────
    @property
    def state(self) -> SessionState:
        if not self._images:
            return SessionState.EMPTY
        if len(self._images) < SLOT_COUNT:
            return SessionState.CAPTURING
        return SessionState.READY

    @property
    def count(self) -> int:
        return len(self._images)

    @property
    def base_images(self) -> Tuple[Image.Image, ...]:
        return tuple(self._images)

    @property
    def overlays(self) -> OverlaySet:
        return self._overlays

    @property
    def result(self) -> Optional[CollageResult]:
        return self._result

    @property
    def saved_path(self) -> Optional[Path]:
        """Where this session's collage was saved; None until the save completes."""
        return self._saved_path

    def mark_saved(self, path: Path) -> None:
        self._saved_path = Path(path)

    def subscribe(self, listener: CollageListener) -> None:
        """Call *listener* with the collage each time the session becomes ready."""
        self._listeners.append(listener)

    # ── Events from collaborators ────────────────────────────────────
    def on_base_image_captured(self, image: Image.Image) -> Optional[CollageResult]:
        """
        Accept one captured photo.

        Returns the collage if this photo was the 4th, otherwise ``None``.
        Captures after the session is ready are ignored.
        """
        if image is None:
            raise ValueError("Captured image must not be None")
        if self.state is SessionState.READY:
            logger.info("Session already has 4 photos — capture ignored")
            return None

        self._images.append(image)
        logger.info(f"Captured photo {self.count}/{SLOT_COUNT}")

        if self.state is SessionState.READY:
            return self._complete()
        return None

    def on_overlay_selected(self, slot: int, image: Image.Image) -> None:
        """Store *image* as the overlay of *slot*; does not re-render."""
        self._overlays.set(slot, image)

    def reset(self) -> None:
        """Start over with no photos and no overlays."""
        self._images = []
        self._overlays.clear()
        self._result = None
        self._saved_path = None
        logger.info("Capture session reset")

    # ── internals ────────────────────────────────────────────────────
    def _complete(self) -> CollageResult:
        result = self.renderer.render(
            self.base_images,
            self._overlays.snapshot(),
        )
        self._result = result
        for listener in self._listeners:
            listener(result)
        return result
