"""Normalize image file names to lowercase.

Web servers on Linux treat file names case sensitively while the content
refers to images case insensitively, so every image under the source tree is
renamed to lowercase before the build. The folder structure is mirrored into
the output image tree at the same time.
"""

from __future__ import annotations

import logging
from pathlib import Path

from blog2html.errors import AssetIOError

logger = logging.getLogger(__name__)


def lowercase_image_tree(source: Path, html: Path) -> list[Path]:
    """Rename non-lowercase images below ``source`` and mirror folders to ``html``.

    Returns the new paths of all renamed files.
    """
    logger.info("Checking the images in %s", source)
    renamed: list[Path] = []

    try:
        html.mkdir(parents=True, exist_ok=True)
        children = sorted(source.iterdir(), key=lambda p: p.name)
    except FileNotFoundError:
        logger.warning("Image folder %s does not exist", source)
        return renamed
    except OSError as exc:
        raise AssetIOError(source, cause=exc, destination=html) from exc

    for child in children:
        if child.is_file() and child.name != child.name.lower():
            target = child.with_name(child.name.lower())
            logger.info("Changing image name %s to lowercase", child.name)
            try:
                child.rename(target)
            except OSError as exc:
                raise AssetIOError(child, cause=exc, destination=target) from exc
            renamed.append(target)
        elif child.is_file():
            logger.debug("Image name %s is lowercase", child.name)

    for child in children:
        if child.is_dir():
            renamed.extend(lowercase_image_tree(child, html / child.name))

    return renamed


__all__ = ["lowercase_image_tree"]
