"""Build configuration for blog2html.

Settings are read from an XML file laid out like::

    <settings>
      <html>
        <SourceRootFolder value="../blog"/>
        <HtmlRootFolder value="../site"/>
        <IndentChars value="  "/>
        <ImagesToCheckForMultipleUse value=".jpg;.png"/>
        <FoldersToCopy>
          <folder value="css"/>
          <folder value="script"/>
        </FoldersToCopy>
      </html>
    </settings>

Relative folders resolve against the directory of the settings file. Values
given on the command line override the file.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from lxml import etree

from blog2html.errors import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_INDENTATION = "  "
DEFAULT_RANDOMIZE = frozenset({".js", ".css"})
DEFAULT_REWRITE = frozenset({".html", ".htm", ".js"})


def parse_extensions(value: str | Iterable[str] | None) -> frozenset[str]:
    """Normalize ``".JPG;png"`` style values to ``{".jpg", ".png"}``."""
    if value is None:
        return frozenset()
    items = value.split(";") if isinstance(value, str) else list(value)
    result: set[str] = set()
    for item in items:
        ext = item.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        result.add(ext)
    return frozenset(result)


@dataclass
class BlogSettings:
    """Configuration of a single build run."""

    source_root: Path
    html_root: Path
    folders_to_copy: list[str] = field(default_factory=list)
    indentation: str = DEFAULT_INDENTATION
    images_to_check_for_multiple_use: frozenset[str] = frozenset()
    extensions_to_randomize: frozenset[str] = DEFAULT_RANDOMIZE
    extensions_to_rewrite: frozenset[str] = DEFAULT_REWRITE
    images_folder: str = "images"
    templates_folder: str = "templates"
    manifest_path: str = "script/availablePages.json"
    css_path: str = "css/image-layout.css"
    site_title: str = "Blog"
    strict: bool = False

    @property
    def source_images(self) -> Path:
        return self.source_root / self.images_folder

    @property
    def html_images(self) -> Path:
        return self.html_root / self.images_folder

    @property
    def templates_dir(self) -> Path:
        return self.source_root / self.templates_folder

    @property
    def home_source(self) -> Path:
        return self.source_root / "index.xml"

    @property
    def home_output(self) -> Path:
        return self.html_root / "index.html"

    def checks_multiple_use(self, path: Path | str) -> bool:
        return Path(path).suffix.lower() in self.images_to_check_for_multiple_use

    @classmethod
    def from_xml(cls, path: Path) -> BlogSettings:
        """Load settings from an XML settings file.

        Raises:
            SettingsError: If the file is unreadable or lacks a required folder
        """
        try:
            tree = etree.parse(str(path))
        except (OSError, etree.XMLSyntaxError) as exc:
            raise SettingsError(f"Cannot read settings file {path}: {exc}") from exc

        root = tree.getroot()
        base = path.resolve().parent

        def value(name: str) -> str | None:
            node = root.find(f".//html/{name}")
            if node is None:
                return None
            raw = node.get("value")
            return raw if raw else None

        def folder(name: str) -> Path:
            raw = value(name)
            if raw is None:
                raise SettingsError(f"Missing required setting '{name}' in {path}")
            candidate = Path(raw)
            return candidate if candidate.is_absolute() else (base / candidate).resolve()

        folders = [
            node.get("value", "").strip()
            for node in root.findall(".//html/FoldersToCopy/folder")
            if node.get("value", "").strip()
        ]

        kwargs: dict[str, Any] = {
            "source_root": folder("SourceRootFolder"),
            "html_root": folder("HtmlRootFolder"),
            "folders_to_copy": folders,
            "images_to_check_for_multiple_use": parse_extensions(
                value("ImagesToCheckForMultipleUse")
            ),
        }
        if (indent := value("IndentChars")) is not None:
            kwargs["indentation"] = indent
        if (randomize := value("ExtensionsToRandomize")) is not None:
            kwargs["extensions_to_randomize"] = parse_extensions(randomize)
        if (rewrite := value("ExtensionsToRewrite")) is not None:
            kwargs["extensions_to_rewrite"] = parse_extensions(rewrite)
        for setting, attr in (
            ("ImagesFolder", "images_folder"),
            ("TemplatesFolder", "templates_folder"),
            ("ManifestPath", "manifest_path"),
            ("CssPath", "css_path"),
            ("SiteTitle", "site_title"),
        ):
            if (raw := value(setting)) is not None:
                kwargs[attr] = raw

        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> BlogSettings:
        """Return a copy with every non-None override applied."""
        applied = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **applied)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "source_root": str(self.source_root),
            "html_root": str(self.html_root),
            "folders_to_copy": list(self.folders_to_copy),
            "indentation": self.indentation,
            "images_to_check_for_multiple_use": sorted(self.images_to_check_for_multiple_use),
            "extensions_to_randomize": sorted(self.extensions_to_randomize),
            "extensions_to_rewrite": sorted(self.extensions_to_rewrite),
            "images_folder": self.images_folder,
            "templates_folder": self.templates_folder,
            "manifest_path": self.manifest_path,
            "css_path": self.css_path,
            "site_title": self.site_title,
            "strict": self.strict,
        }


def log_configuration(settings: BlogSettings) -> None:
    """Log the build configuration for debugging."""
    logger.info("Build configuration:")
    for key, val in settings.to_dict().items():
        logger.info("  %s: %s", key, val)


__all__ = [
    "BlogSettings",
    "DEFAULT_INDENTATION",
    "log_configuration",
    "parse_extensions",
]
