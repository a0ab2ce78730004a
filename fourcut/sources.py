"""
Image sources — where photos and overlays come from.

Every source exposes a single ``produce()`` returning zero or more decoded
images. Decode problems stay inside the source: a file that cannot be read
is logged and skipped, so the compositing core only ever sees valid
images.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Union

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)


class ImageSource(ABC):
    """Capability that yields decoded images."""

    @abstractmethod
    def produce(self) -> List[Image.Image]:
        ...


class FileImageSource(ImageSource):
    """
    Decode images from files on disk.

    Parameters
    ----------
    paths : iterable of str | Path
        Image files (PNG / JPG / WEBP / …), returned in the given order.
    """

    def __init__(self, paths: Iterable[Union[str, Path]]):
        self.paths = [Path(p) for p in paths]

    def produce(self) -> List[Image.Image]:
        images: List[Image.Image] = []
        for path in self.paths:
            image = self._decode(path)
            if image is not None:
                images.append(image)
        logger.info(f"Decoded {len(images)}/{len(self.paths)} image(s)")
        return images

    @staticmethod
    def _decode(path: Path):
        try:
            with Image.open(path) as img:
                # camera photos carry their rotation in EXIF
                image = ImageOps.exif_transpose(img)
                image.load()
        except FileNotFoundError:
            logger.warning(f"Image not found: {path}")
            return None
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Could not decode {path}: {e}")
            return None
        logger.debug(f"Decoded {path} ({image.size[0]}×{image.size[1]}, {image.mode})")
        return image


class StaticImageSource(ImageSource):
    """Hand out images that are already in memory (fixtures, UI uploads)."""

    def __init__(self, images: Iterable[Image.Image]):
        self.images = list(images)

    def produce(self) -> List[Image.Image]:
        return list(self.images)
