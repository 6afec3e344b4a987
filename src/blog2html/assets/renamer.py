"""Cache-busting names for static assets.

The renamer works in two strict phases:

1. ``discover`` walks every static folder and assigns each file whose
   extension must be randomized a new name ``{stem}-{token}{ext}``.
2. ``copy_folders`` mirrors the folders into the output tree, writing renamed
   files under their new name and rewriting references inside HTML and script
   files.

The second phase only accepts the complete map built by the first, so a file
copied early can never miss a rename discovered later.
"""

from __future__ import annotations

import logging
import re
import shutil
from collections.abc import Iterator, Mapping
from pathlib import Path

from bs4 import BeautifulSoup, NavigableString

from blog2html.errors import AssetIOError
from blog2html.ids import compute_cache_bust_token, new_run_id
from blog2html.settings import BlogSettings

logger = logging.getLogger(__name__)

_HTML_SUFFIXES = frozenset({".html", ".htm"})
_INLINE_TAGS = ("script", "style")


def randomized_name(path: Path | str, token: str) -> str:
    p = Path(path)
    return f"{p.stem}-{token}{p.suffix}".lower()


def _iter_files(folder: Path) -> Iterator[Path]:
    for child in sorted(folder.iterdir(), key=lambda p: p.name):
        if child.is_dir():
            yield from _iter_files(child)
        elif child.is_file():
            yield child


class RenamedAssets(Mapping[str, str]):
    """Read-only map of original lowercase file names to randomized names."""

    def __init__(self, names: Mapping[str, str] | None = None) -> None:
        self._names = dict(names or {})
        self._pattern: re.Pattern[str] | None = None
        if self._names:
            # Longest names first so "app.min.js" wins over "min.js". A name
            # only matches as a whole file name: "layout.css" must not hit
            # "image-layout.css" nor "layout.css.map".
            alternatives = sorted(self._names, key=len, reverse=True)
            self._pattern = re.compile(
                r"(?<![\w.-])(?:" + "|".join(re.escape(n) for n in alternatives) + r")(?!\.?[\w-])"
            )

    def __getitem__(self, key: str) -> str:
        return self._names[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def target_name(self, name: str) -> str:
        """Name a file is written under in the output tree."""
        return self._names.get(name.lower(), name)

    def rewrite_text(self, text: str) -> str:
        """Replace every original name in ``text`` with its randomized name."""
        if self._pattern is None or not text:
            return text
        return self._pattern.sub(lambda m: self._names[m.group(0)], text)

    def rewrite_soup(self, soup: BeautifulSoup) -> BeautifulSoup:
        """Rewrite attribute values and inline script/style content in place."""
        if self._pattern is None:
            return soup
        for tag in soup.find_all(True):
            for attr, value in list(tag.attrs.items()):
                if isinstance(value, str):
                    tag[attr] = self.rewrite_text(value)
                elif isinstance(value, list):
                    tag[attr] = [self.rewrite_text(v) for v in value]
            if tag.name in _INLINE_TAGS:
                for child in list(tag.children):
                    if isinstance(child, NavigableString):
                        new_text = self.rewrite_text(str(child))
                        if new_text != str(child):
                            child.replace_with(type(child)(new_text))
        return soup


def discover(
    folders: list[str],
    settings: BlogSettings,
    run_id: str | None = None,
) -> RenamedAssets:
    """Phase 1: assign a cache-busting name to every file needing one."""
    run_id = run_id or new_run_id()
    names: dict[str, str] = {}
    for folder in folders:
        root = settings.source_root / folder
        if not root.is_dir():
            raise AssetIOError(root, cause=FileNotFoundError("static folder does not exist"))
        for path in _iter_files(root):
            if path.suffix.lower() not in settings.extensions_to_randomize:
                continue
            rel = path.relative_to(settings.source_root).as_posix()
            new_name = randomized_name(path, compute_cache_bust_token(run_id, rel))
            original = path.name.lower()
            if original in names:
                logger.warning("Asset name %s occurs more than once; %s wins", original, rel)
            names[original] = new_name
            logger.debug("Renaming %s to %s", rel, new_name)
    logger.info("Discovered %d assets to rename", len(names))
    return RenamedAssets(names)


def _copy_file(src: Path, dst: Path, settings: BlogSettings, renamed: RenamedAssets) -> None:
    suffix = src.suffix.lower()
    try:
        if suffix in settings.extensions_to_rewrite and suffix in _HTML_SUFFIXES:
            soup = BeautifulSoup(src.read_text(encoding="utf-8"), "html.parser")
            renamed.rewrite_soup(soup)
            dst.write_text(str(soup), encoding="utf-8")
        elif suffix in settings.extensions_to_rewrite:
            dst.write_text(renamed.rewrite_text(src.read_text(encoding="utf-8")), encoding="utf-8")
        else:
            shutil.copy2(src, dst)
    except (OSError, UnicodeDecodeError) as exc:
        raise AssetIOError(src, cause=exc, destination=dst) from exc


def copy_folder(src_dir: Path, dst_dir: Path, settings: BlogSettings, renamed: RenamedAssets) -> int:
    """Mirror one folder tree; returns the number of files written."""
    try:
        dst_dir.mkdir(parents=True, exist_ok=True)
        children = sorted(src_dir.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise AssetIOError(src_dir, cause=exc, destination=dst_dir) from exc

    count = 0
    for child in children:
        if child.is_dir():
            count += copy_folder(child, dst_dir / child.name, settings, renamed)
        elif child.is_file():
            target = dst_dir / renamed.target_name(child.name)
            logger.debug("Copying %s to %s", child, target)
            _copy_file(child, target, settings, renamed)
            count += 1
    return count


def copy_folders(folders: list[str], settings: BlogSettings, renamed: RenamedAssets) -> int:
    """Phase 2: copy every static folder into the html root."""
    total = 0
    for folder in folders:
        src_dir = settings.source_root / folder
        dst_dir = settings.html_root / folder
        logger.info("Copying folder %s", folder)
        total += copy_folder(src_dir, dst_dir, settings, renamed)
    return total


__all__ = [
    "RenamedAssets",
    "copy_folder",
    "copy_folders",
    "discover",
    "randomized_name",
]
