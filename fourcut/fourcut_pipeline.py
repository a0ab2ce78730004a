"""
Four-Cut Pipeline — End-to-end orchestration
=============================================
Chains all steps:

1. Load canvas / caption settings from config.yaml
2. Apply overlay picks to their slots
3. Feed captured photos into a capture session
4. Render the collage when the 4th photo lands
5. Save the collage to the album

Usage::

    from fourcut.fourcut_pipeline import FourCutPipeline
    from fourcut.sources import FileImageSource

    pipe = FourCutPipeline.from_config("config.yaml")
    output = pipe.run(FileImageSource(["a.jpg", "b.jpg", "c.jpg", "d.jpg"]))
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from fourcut.album import PhotoAlbum
from fourcut.canvas import CanvasSpec
from fourcut.errors import PrematureRender
from fourcut.renderer import CollageRenderer
from fourcut.session import CaptureSession
from fourcut.sources import ImageSource

logger = logging.getLogger(__name__)


class FourCutPipeline:
    """
    End-to-end four-cut collage pipeline.

    Parameters
    ----------
    config : dict
        Parsed config.yaml contents.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        album_cfg = self.config.get("album", {}) or {}

        # ── Build sub-components ─────────────────────────────────────
        self.canvas = CanvasSpec.from_config(self.config)
        self.renderer = CollageRenderer(self.canvas)
        self.album = PhotoAlbum(
            directory=album_cfg.get("directory", "output/album"),
            prefix=album_cfg.get("prefix", "fourcut"),
        )

    # ── Factory ──────────────────────────────────────────────────────
    @classmethod
    def from_config(cls, config_path: str = "config.yaml") -> "FourCutPipeline":
        """Load pipeline from a YAML config file."""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        logger.info(f"Loaded config from {path}")
        return cls(config)

    # ── Sessions ─────────────────────────────────────────────────────
    def new_session(self, output_path: Optional[str] = None) -> CaptureSession:
        """A capture session that saves its collage to the album when ready."""
        session = CaptureSession(self.renderer)
        session.subscribe(lambda result: session.mark_saved(self.album.save(result, output_path)))
        return session

    # ── Main entry point ─────────────────────────────────────────────
    def run(
        self,
        base_source: ImageSource,
        overlay_sources: Optional[Mapping[int, ImageSource]] = None,
        output_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Build and save a collage from captured photos.

        Parameters
        ----------
        base_source : ImageSource
            Produces the photos; the first four are used, in order.
        overlay_sources : dict[int, ImageSource] | None
            Overlay source per slot; the first image each produces is used.
        output_path : str | None
            Save here instead of a timestamped album file.

        Returns
        -------
        dict
            ``collage`` (CollageResult), ``collage_path`` (str), ``saved`` (bool).

        Raises
        ------
        PrematureRender
            Fewer than four photos could be decoded; nothing is saved.
        """
        t0 = time.time()
        session = self.new_session(output_path)

        # ── Step 1: Overlays ─────────────────────────────────────────
        for slot, source in (overlay_sources or {}).items():
            images = source.produce()
            if not images:
                logger.warning(f"No overlay image for slot {slot} — leaving it empty")
                continue
            session.on_overlay_selected(slot, images[0])

        # ── Step 2: Captures ─────────────────────────────────────────
        photos = base_source.produce()
        if len(photos) > 4:
            logger.warning(f"Got {len(photos)} photos — only the first 4 are used")
        for photo in photos:
            session.on_base_image_captured(photo)

        if session.result is None:
            raise PrematureRender(session.count)

        elapsed = time.time() - t0
        logger.info(f"✅ Collage complete in {elapsed:.2f}s — saved to {session.saved_path}")

        return {
            "collage": session.result,
            "collage_path": str(session.saved_path),
            "saved": session.saved_path is not None,
        }
