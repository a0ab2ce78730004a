"""Per-cut decorative overlay images."""

import logging
from typing import Iterator, Optional, Tuple

from PIL import Image

from fourcut.layout import SLOT_COUNT, check_slot

logger = logging.getLogger(__name__)


class OverlaySet:
    """
    Fixed set of four optional overlay images, one per cut.

    Slots start empty and are set independently; the set never grows or
    shrinks.
    """

    def __init__(self):
        self._slots = [None] * SLOT_COUNT

    def set(self, slot: int, image: Optional[Image.Image]) -> None:
        """Assign *image* to *slot*, replacing whatever was there."""
        check_slot(slot)
        self._slots[slot] = image
        if image is None:
            logger.debug(f"Overlay cleared for slot {slot}")
        else:
            logger.info(f"Overlay set for slot {slot} ({image.size[0]}×{image.size[1]})")

    def get(self, slot: int) -> Optional[Image.Image]:
        check_slot(slot)
        return self._slots[slot]

    def clear(self, slot: Optional[int] = None) -> None:
        """Empty one slot, or every slot when *slot* is None."""
        if slot is None:
            self._slots = [None] * SLOT_COUNT
        else:
            self.set(slot, None)

    def snapshot(self) -> Tuple[Optional[Image.Image], ...]:
        return tuple(self._slots)

    def __getitem__(self, slot: int) -> Optional[Image.Image]:
        return self.get(slot)

    def __len__(self) -> int:
        return SLOT_COUNT

    def __iter__(self) -> Iterator[Optional[Image.Image]]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        filled = [i for i, img in enumerate(self._slots) if img is not None]
        return f"OverlaySet(filled={filled})"
