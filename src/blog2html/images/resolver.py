"""Locate, measure and copy images referenced by the blog content.

Images are looked up by (lowercase) file name anywhere under the source image
tree. The first depth-first match wins, where the files of a folder are
checked before its subfolders and both are visited in sorted name order. The
resolved location is cached for the whole run, so later references to the
same name neither search nor copy again.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from blog2html.errors import AssetIOError, ImageNotFoundError
from blog2html.model.content import ImageInfo
from blog2html.settings import BlogSettings

logger = logging.getLogger(__name__)


@dataclass
class ImageCache:
    """Per-run cache of resolved images, keyed by lowercase file name."""

    entries: dict[str, ImageInfo] = field(default_factory=dict)
    uses: dict[str, int] = field(default_factory=dict)

    def get(self, name: str) -> ImageInfo | None:
        return self.entries.get(name)

    def add(self, name: str, info: ImageInfo) -> None:
        self.entries[name] = info
        self.uses[name] = 0

    def count_use(self, name: str) -> int:
        self.uses[name] = self.uses.get(name, 0) + 1
        return self.uses[name]

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)


def find_image(name: str, folder: Path) -> Path | None:
    """Depth-first search for a file called ``name`` below ``folder``."""
    try:
        children = sorted(folder.iterdir(), key=lambda p: p.name)
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise AssetIOError(folder, cause=exc) from exc

    for child in children:
        if child.is_file() and child.name == name:
            return child
    for child in children:
        if child.is_dir():
            found = find_image(name, child)
            if found is not None:
                return found
    return None


def read_dimensions(path: Path) -> tuple[int, int]:
    """Decode the pixel size of an image file.

    Raises:
        AssetIOError: If the file cannot be decoded or reports a zero size
    """
    try:
        with Image.open(path) as img:
            width, height = img.size
    except (OSError, UnidentifiedImageError) as exc:
        raise AssetIOError(path, cause=exc) from exc
    if width <= 0 or height <= 0:
        raise AssetIOError(path, cause=ValueError(f"invalid image size {width}x{height}"))
    return int(width), int(height)


class ImageResolver:
    """Resolve image names to paths relative to the HTML files using them."""

    def __init__(self, settings: BlogSettings, cache: ImageCache | None = None) -> None:
        self.settings = settings
        self.cache = cache if cache is not None else ImageCache()
        self.copied: set[Path] = set()

    def output_path(self, info: ImageInfo) -> Path:
        """Mirror of the image's source location inside the html root."""
        rel = info.absolute_path.relative_to(self.settings.source_root)
        return self.settings.html_root / rel

    def _lookup(self, name: str) -> ImageInfo:
        info = self.cache.get(name)
        if info is not None:
            uses = self.cache.count_use(name)
            if uses > 1 and self.settings.checks_multiple_use(name):
                logger.warning("Image %s is used %d times", name, uses)
            return info

        found = find_image(name, self.settings.source_images)
        if found is None:
            raise ImageNotFoundError(name, self.settings.source_images)

        info = ImageInfo(absolute_path=found)
        if self.settings.checks_multiple_use(found):
            info.width, info.height = read_dimensions(found)
        self.cache.add(name, info)
        self.cache.count_use(name)
        return info

    def _copy(self, info: ImageInfo) -> Path:
        target = self.output_path(info)
        if target.exists():
            return target
        logger.info("Copying image %s", info.absolute_path.name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(info.absolute_path, target)
        except OSError as exc:
            raise AssetIOError(info.absolute_path, cause=exc, destination=target) from exc
        self.copied.add(target)
        return target

    def resolve(self, file_name: str, referencing_document: Path) -> str:
        """Return the path of ``file_name`` relative to ``referencing_document``.

        The image is copied into the output tree the first time it is needed.

        Raises:
            ImageNotFoundError: If no file with that name exists in the image tree
            AssetIOError: If the image cannot be measured or copied
        """
        name = file_name.strip().lower()
        info = self._lookup(name)
        target = self._copy(info)
        rel = os.path.relpath(target, referencing_document.parent)
        return rel.replace(os.sep, "/").replace("\\", "/")

    def info(self, file_name: str) -> ImageInfo:
        """Return the cached entry of an already resolved image."""
        name = file_name.strip().lower()
        info = self.cache.get(name)
        if info is None:
            raise KeyError(f"Image {name} has not been resolved yet")
        return info

    def measure(self, info: ImageInfo) -> ImageInfo:
        """Make sure ``info`` carries its pixel dimensions."""
        if not info.has_dimensions:
            info.width, info.height = read_dimensions(info.absolute_path)
        return info


__all__ = [
    "ImageCache",
    "ImageResolver",
    "find_image",
    "read_dimensions",
]
