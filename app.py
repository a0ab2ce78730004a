#!/usr/bin/env python3
"""
Four-Cut Collage — Gradio Frontend
====================================
Take four photos with the webcam (or upload them), optionally pick a
decorative overlay for any cut, and the collage is rendered and saved the
moment the 4th photo is taken.

Launch locally::

    python app.py
"""

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import gradio as gr
from dotenv import load_dotenv
from PIL import Image

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fourcut.errors import FourCutError
from fourcut.fourcut_pipeline import FourCutPipeline
from fourcut.layout import SLOT_COUNT, rect_for
from fourcut.renderer import scale_to_fill
from fourcut.session import CaptureSession, SessionState

load_dotenv()

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(name)-24s │ %(levelname)-5s │ %(message)s",
    datefmt="%H:%M:%S",
)
for lib in ("httpx", "httpcore", "urllib3", "PIL"):
    logging.getLogger(lib).setLevel(logging.WARNING)

logger = logging.getLogger("app")

# ── Load config & build pipeline (once at startup) ───────────────────
CONFIG_PATH = os.getenv("FOURCUT_CONFIG", "config.yaml")

_pipeline = None


def get_pipeline() -> FourCutPipeline:
    """Lazy-load pipeline singleton."""
    global _pipeline
    if _pipeline is None:
        if Path(CONFIG_PATH).exists():
            logger.info(f"Loading pipeline from {CONFIG_PATH} …")
            _pipeline = FourCutPipeline.from_config(CONFIG_PATH)
        else:
            logger.warning(f"{CONFIG_PATH} not found — using built-in defaults")
            _pipeline = FourCutPipeline()
    return _pipeline


PLACEHOLDER_COLOR = (128, 128, 128)
SLOT_CHOICES = [f"Cut {i + 1}" for i in range(SLOT_COUNT)]


# ── Preview grid ─────────────────────────────────────────────────────
def preview_cuts(session: CaptureSession) -> List[Image.Image]:
    """One preview tile per cut: photo + overlay, or a grey placeholder."""
    canvas = get_pipeline().canvas
    tiles = []
    for i in range(SLOT_COUNT):
        rect = rect_for(i, canvas)
        if i < session.count:
            tile = scale_to_fill(session.base_images[i], rect).convert("RGBA")
            overlay = session.overlays[i]
            if overlay is not None:
                tile.alpha_composite(scale_to_fill(overlay, rect).convert("RGBA"))
            tiles.append(tile.convert("RGB"))
        else:
            tiles.append(Image.new("RGB", rect.size, PLACEHOLDER_COLOR))
    return tiles


def _session(session: Optional[CaptureSession]) -> CaptureSession:
    return session if session is not None else get_pipeline().new_session()


def _collage(session: CaptureSession) -> Optional[Image.Image]:
    return session.result.image if session.result else None


def _status(session: CaptureSession) -> str:
    if session.count == 0:
        return "Tap to take 4 photos"
    if session.state is SessionState.READY and session.saved_path is not None:
        return "✅ Photo Saved — your collage has been saved to the album."
    return f"📸 {session.count}/{SLOT_COUNT} photos taken"


# ── Callbacks ────────────────────────────────────────────────────────
def take_photo(photo: Optional[Image.Image], session: Optional[CaptureSession]):
    """Gradio callback — one capture event."""
    session = _session(session)
    if photo is None:
        return session, preview_cuts(session), _collage(session), "⚠️ Take or upload a photo first."

    try:
        session.on_base_image_captured(photo)
    except (FourCutError, OSError) as e:
        logger.exception("Collage error")
        return session, preview_cuts(session), None, f"❌ Error: {e}"

    return session, preview_cuts(session), _collage(session), _status(session)


def select_overlay(slot_label: str, overlay: Optional[Image.Image],
                   session: Optional[CaptureSession]):
    """Gradio callback — assign an overlay to a cut."""
    session = _session(session)
    if overlay is None:
        return session, preview_cuts(session), "⚠️ Choose an overlay image first."

    slot = SLOT_CHOICES.index(slot_label)
    session.on_overlay_selected(slot, overlay)
    return session, preview_cuts(session), f"🖼️ Overlay set for {slot_label}"


def reset_session(session: Optional[CaptureSession]):
    session = _session(session)
    session.reset()
    return session, preview_cuts(session), None, _status(session)


# ── Gradio UI ────────────────────────────────────────────────────────
TITLE = "📷 Four-Cut Collage"
DESCRIPTION = """\
**Take 4 photos → pick overlays → get a 2×2 collage with a caption**

Overlays can be chosen at any time; whatever is set when the 4th photo is
taken ends up in the collage.
"""


def build_ui() -> gr.Blocks:
    with gr.Blocks(title=TITLE, theme=gr.themes.Soft()) as demo:
        gr.Markdown(f"# {TITLE}")
        gr.Markdown(DESCRIPTION)

        session = gr.State(None)

        with gr.Row():
            # ── Left column: Capture & overlays ──────────────────────
            with gr.Column(scale=1):
                photo = gr.Image(
                    label="📸 Photo",
                    sources=["webcam", "upload"],
                    type="pil",
                    height=300,
                )
                take_btn = gr.Button("Take Photo", variant="primary", size="lg")

                with gr.Row():
                    slot = gr.Radio(SLOT_CHOICES, value=SLOT_CHOICES[0], label="Cut")
                    overlay = gr.Image(
                        label="🖼️ Overlay Image",
                        sources=["upload"],
                        type="pil",
                        image_mode="RGBA",
                        height=150,
                    )
                overlay_btn = gr.Button("Select Overlay Image")
                reset_btn = gr.Button("Start Over", variant="secondary")

            # ── Right column: Preview & result ───────────────────────
            with gr.Column(scale=1):
                preview = gr.Gallery(label="Cuts", columns=2, height=360)
                collage = gr.Image(label="Collage", type="pil", height=420)
                status = gr.Textbox(label="Status", value="Tap to take 4 photos",
                                    interactive=False)

        # ── Wire up ──────────────────────────────────────────────────
        take_btn.click(
            fn=take_photo,
            inputs=[photo, session],
            outputs=[session, preview, collage, status],
        )
        overlay_btn.click(
            fn=select_overlay,
            inputs=[slot, overlay, session],
            outputs=[session, preview, status],
        )
        reset_btn.click(
            fn=reset_session,
            inputs=[session],
            outputs=[session, preview, collage, status],
        )

    return demo


# ── Launch ───────────────────────────────────────────────────────────
if __name__ == "__main__":
    demo = build_ui()
    demo.launch(
        server_name="0.0.0.0",
        server_port=7860,
        share=False,
    )
