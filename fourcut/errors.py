"""
Errors raised by the compositing core.

All of them are programming / resource errors: the core never retries,
it raises synchronously and the caller (CLI, UI) decides what to show.
"""


class FourCutError(Exception):
    """Base class for all four-cut collage errors."""


class InvalidSlotIndex(FourCutError, IndexError):
    """A cut slot index outside 0–3 was used."""

    def __init__(self, index):
        self.index = index
        super().__init__(f"Slot index must be 0–3, got {index!r}")


class PrematureRender(FourCutError):
    """``render`` was invoked without exactly four base images."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"Collage needs exactly 4 base images, got {count}"
        )


class RenderSurfaceAllocationFailure(FourCutError):
    """The output raster buffer could not be allocated."""
