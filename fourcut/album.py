"""Photo album — stores finished collages on disk."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Union

from fourcut.canvas import CollageResult

logger = logging.getLogger(__name__)


class PhotoAlbum:
    """
    Save collages as timestamped PNG files in *directory*.

    The album is shared by every session of a pipeline, so it keeps no
    per-save state; callers record the returned path themselves.
    """

    def __init__(self, directory: Union[str, Path] = "output/album", prefix: str = "fourcut"):
        self.directory = Path(directory)
        self.prefix = prefix

    def save(self, result: CollageResult, path: Union[str, Path, None] = None) -> Path:
        """Write *result* to *path*, or to a fresh file in the album directory."""
        out = Path(path) if path else self._next_path()
        return result.save(out)

    def _next_path(self) -> Path:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        candidate = self.directory / f"{self.prefix}_{stamp}.png"
        n = 1
        while candidate.exists():
            candidate = self.directory / f"{self.prefix}_{stamp}_{n}.png"
            n += 1
        return candidate
