"""End-to-end build of the static site."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from blog2html.assets.renamer import RenamedAssets, copy_folders, discover
from blog2html.builder.home import HomeBuilder, ProgressCallback
from blog2html.builder.pages import PageSynthesizer
from blog2html.images.lowercase import lowercase_image_tree
from blog2html.images.resolver import ImageResolver
from blog2html.model.content import PageInfo
from blog2html.parser.source import parse_home_entries
from blog2html.parser.templating import create_environment
from blog2html.settings import BlogSettings
from blog2html.transform.layout import CssRegistry

logger = logging.getLogger(__name__)


@dataclass
class SiteReport:
    pages: list[PageInfo] = field(default_factory=list)
    renamed: dict[str, str] = field(default_factory=dict)
    css_rules: list[str] = field(default_factory=list)
    copied_images: list[Path] = field(default_factory=list)
    copied_files: int = 0


def build_site(
    settings: BlogSettings,
    on_progress: ProgressCallback = None,
    run_id: str | None = None,
) -> SiteReport:
    """Build the whole site described by ``settings``.

    Steps, in order: lowercase image names, discover asset renames, copy the
    static folders, generate the chapter pages and the home page, then write
    the manifest and the row CSS. The first fatal error aborts the run.
    """
    logger.info("Building %s into %s", settings.source_root, settings.html_root)

    lowercase_image_tree(settings.source_images, settings.html_images)

    renamed: RenamedAssets = discover(settings.folders_to_copy, settings, run_id=run_id)
    copied_files = copy_folders(settings.folders_to_copy, settings, renamed)

    resolver = ImageResolver(settings)
    css = CssRegistry()
    synthesizer = PageSynthesizer(
        settings,
        create_environment(settings.templates_dir),
        resolver,
        css,
        renamed,
    )
    entries = parse_home_entries(settings.home_source, strict=settings.strict)
    pages = HomeBuilder(synthesizer, on_progress=on_progress).build(entries)

    return SiteReport(
        pages=pages,
        renamed=dict(renamed),
        css_rules=css.class_names,
        copied_images=sorted(resolver.copied),
        copied_files=copied_files,
    )


__all__ = ["SiteReport", "build_site"]
