"""
Layout resolver — destination rectangle of each cut in the 2×2 grid.

Slot ``i`` sits at ``row = i // 2``, ``col = i % 2``. Every cell is shrunk
by the frame gap ``F`` (``F/2`` on each side), so neighbouring cuts are
``F`` apart and the canvas edges keep a ``F/2`` margin.
"""

from typing import List, NamedTuple, Tuple

from fourcut.canvas import CanvasSpec
from fourcut.errors import InvalidSlotIndex

SLOT_COUNT = 4
GRID_COLS = 2


class Rect(NamedTuple):
    x: int
    y: int
    w: int
    h: int

    @property
    def size(self) -> Tuple[int, int]:
        return self.w, self.h

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """Pillow-style ``(left, top, right, bottom)``."""
        return self.x, self.y, self.x + self.w, self.y + self.h


def check_slot(index) -> int:
    """Return *index* if it names one of the four cuts, else raise ``InvalidSlotIndex``."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidSlotIndex(index)
    if not 0 <= index < SLOT_COUNT:
        raise InvalidSlotIndex(index)
    return index


def rect_for(index: int, canvas: CanvasSpec) -> Rect:
    """Compute the content rectangle for cut *index* on *canvas*."""
    check_slot(index)
    row, col = divmod(index, GRID_COLS)
    cell_w, cell_h = canvas.cell_size
    half_gap = canvas.frame_gap // 2
    return Rect(
        x=col * cell_w + half_gap,
        y=row * cell_h + half_gap,
        w=cell_w - canvas.frame_gap,
        h=cell_h - canvas.frame_gap,
    )


def slot_rects(canvas: CanvasSpec) -> List[Rect]:
    """All four rectangles in slot order."""
    return [rect_for(i, canvas) for i in range(SLOT_COUNT)]
