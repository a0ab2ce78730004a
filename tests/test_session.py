"""
Unit tests for overlays and the capture session state machine.
"""
import pytest
from unittest.mock import MagicMock

from fourcut.canvas import CanvasSpec, CollageResult
from fourcut.errors import InvalidSlotIndex, RenderSurfaceAllocationFailure
from fourcut.overlays import OverlaySet
from fourcut.renderer import CollageRenderer
from fourcut.session import CaptureSession, SessionState

from tests.conftest import BLUE, GREEN, MAGENTA, RED, YELLOW

SLOT_CENTERS = [(150, 175), (450, 175), (150, 500), (450, 500)]


@pytest.fixture
def session(canvas):
    return CaptureSession(CollageRenderer(canvas))


class TestOverlaySet:
    """Tests for OverlaySet."""

    def test_starts_empty(self):
        overlays = OverlaySet()
        assert len(overlays) == 4
        assert overlays.snapshot() == (None, None, None, None)

    def test_set_replaces(self, solid):
        overlays = OverlaySet()
        first, second = solid(RED), solid(BLUE)
        overlays.set(2, first)
        overlays.set(2, second)
        assert overlays[2] is second
        assert list(overlays) == [None, None, second, None]

    def test_clear(self, solid):
        overlays = OverlaySet()
        overlays.set(0, solid(RED))
        overlays.set(1, solid(RED))
        overlays.clear(0)
        assert overlays.get(0) is None and overlays.get(1) is not None
        overlays.clear()
        assert overlays.snapshot() == (None,) * 4

    def test_snapshot_is_detached(self, solid):
        overlays = OverlaySet()
        snap = overlays.snapshot()
        overlays.set(0, solid(RED))
        assert snap[0] is None

    @pytest.mark.parametrize("slot", [-1, 4])
    def test_invalid_slot(self, slot, solid):
        overlays = OverlaySet()
        with pytest.raises(InvalidSlotIndex):
            overlays.set(slot, solid(RED))
        with pytest.raises(InvalidSlotIndex):
            overlays.get(slot)


class TestCaptureSession:
    """Tests for CaptureSession."""

    def test_state_progression(self, session, base_images):
        assert session.state is SessionState.EMPTY
        for n, image in enumerate(base_images[:3], start=1):
            assert session.on_base_image_captured(image) is None
            assert session.state is SessionState.CAPTURING
            assert session.count == n
        result = session.on_base_image_captured(base_images[3])
        assert session.state is SessionState.READY
        assert isinstance(result, CollageResult)
        assert session.result is result
        assert result.size == (600, 700)

    def test_none_capture_rejected(self, session):
        with pytest.raises(ValueError):
            session.on_base_image_captured(None)
        assert session.count == 0
        assert session.state is SessionState.EMPTY

    def test_fifth_capture_is_noop(self, session, base_images, solid):
        for image in base_images:
            session.on_base_image_captured(image)
        result = session.result
        assert session.on_base_image_captured(solid(MAGENTA)) is None
        assert session.count == 4
        assert session.result is result

    def test_renders_only_on_ready_transition(self, base_images):
        renderer = MagicMock()
        session = CaptureSession(renderer)
        for image in base_images[:3]:
            session.on_base_image_captured(image)
        session.on_overlay_selected(0, base_images[0])
        renderer.render.assert_not_called()

        session.on_base_image_captured(base_images[3])
        renderer.render.assert_called_once()
        bases, overlays = renderer.render.call_args.args
        assert list(bases) == base_images
        assert overlays[0] is base_images[0]

    def test_overlay_before_last_capture_is_used(self, session, base_images, solid):
        # slots 0, 1 captured; overlay picked for slot 2 before its photo arrives
        session.on_base_image_captured(base_images[0])
        session.on_base_image_captured(base_images[1])
        session.on_overlay_selected(2, solid(MAGENTA, (40, 40)))
        session.on_base_image_captured(base_images[2])
        result = session.on_base_image_captured(base_images[3])

        image = result.image
        assert image.getpixel(SLOT_CENTERS[2]) == MAGENTA
        for i, color in ((0, RED), (1, GREEN), (3, YELLOW)):
            assert image.getpixel(SLOT_CENTERS[i]) == color

    def test_overlay_after_ready_does_not_rerender(self, session, base_images, solid):
        for image in base_images:
            session.on_base_image_captured(image)
        before = session.result.image.tobytes()
        session.on_overlay_selected(0, solid(MAGENTA))
        assert session.result.image.tobytes() == before
        assert session.overlays[0] is not None

    def test_overlay_invalid_slot(self, session, solid):
        with pytest.raises(InvalidSlotIndex):
            session.on_overlay_selected(7, solid(RED))

    def test_listeners_notified_once(self, session, base_images):
        listener = MagicMock()
        session.subscribe(listener)
        for image in base_images:
            session.on_base_image_captured(image)
        session.on_base_image_captured(base_images[0])
        listener.assert_called_once_with(session.result)

    def test_reset(self, session, base_images, solid):
        session.on_overlay_selected(1, solid(RED))
        for image in base_images:
            session.on_base_image_captured(image)
        session.reset()
        assert session.state is SessionState.EMPTY
        assert session.result is None
        assert session.overlays.snapshot() == (None,) * 4

        # a new round renders again
        for image in base_images:
            session.on_base_image_captured(image)
        assert session.result is not None

    def test_render_failure_propagates(self, base_images):
        renderer = MagicMock()
        renderer.render.side_effect = RenderSurfaceAllocationFailure("no memory")
        listener = MagicMock()
        session = CaptureSession(renderer)
        session.subscribe(listener)
        for image in base_images[:3]:
            session.on_base_image_captured(image)
        with pytest.raises(RenderSurfaceAllocationFailure):
            session.on_base_image_captured(base_images[3])
        assert session.result is None
        listener.assert_not_called()

    def test_default_renderer(self):
        session = CaptureSession()
        assert session.renderer.canvas == CanvasSpec()
