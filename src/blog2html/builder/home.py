"""Build the home page, the generated-pages manifest and the row CSS file."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress

from bs4 import BeautifulSoup, Tag

from blog2html.builder.html_io import save_html, save_json, save_text
from blog2html.builder.pages import (
    PageSynthesizer,
    discover_pages,
    find_insertion_point,
    relative_link,
)
from blog2html.model.content import (
    Chapter,
    ChapterEntry,
    EmptyLineEntry,
    HomeEntry,
    LinkEntry,
    PageInfo,
)
from blog2html.parser.templating import INDEX_TEMPLATE

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, dict[str, int | str]], None] | None

NBSP = "\u00a0"


def _safe_emit(on_progress: ProgressCallback, event: str, payload: dict[str, int | str]) -> None:
    if on_progress is None:
        return
    with suppress(Exception):
        on_progress(event, payload)


class HomeBuilder:
    """Walks the home entries, synthesizing every chapter's pages on the way."""

    def __init__(self, synthesizer: PageSynthesizer, on_progress: ProgressCallback = None) -> None:
        self.synthesizer = synthesizer
        self.settings = synthesizer.settings
        self.resolver = synthesizer.resolver
        self.on_progress = on_progress

    def _icon_link(self, soup: BeautifulSoup, href: str, icon: str, label: str) -> Tag:
        paragraph = soup.new_tag("p")
        anchor = soup.new_tag("a", attrs={"class": "no_decoration", "href": href})
        anchor.append(
            soup.new_tag(
                "img",
                attrs={
                    "class": "icon",
                    "src": self.resolver.resolve(icon, self.settings.home_output),
                },
            )
        )
        anchor.append(label)
        paragraph.append(anchor)
        return paragraph

    def add_chapter(self, soup: BeautifulSoup, content: Tag, chapter: Chapter) -> list[PageInfo]:
        content.append(
            self._icon_link(
                soup, f"./{chapter.path_segment}/page1.html", chapter.icon_name, chapter.title
            )
        )

        _safe_emit(self.on_progress, "chapter:start", {"chapter": chapter.title})
        written: list[PageInfo] = []
        for page in discover_pages(chapter, self.settings):
            written.append(self.synthesizer.write(page))
            _safe_emit(self.on_progress, "page:written", {"link": page.link})
        if not written:
            logger.warning("Chapter %s has no page1.xml", chapter.path_segment)
        _safe_emit(self.on_progress, "chapter:done", {"chapter": chapter.title, "pages": len(written)})
        return written

    def render(self, entries: list[HomeEntry]) -> tuple[BeautifulSoup, list[PageInfo]]:
        """Build the home document and every page it links to."""
        home = self.settings.home_output
        html = self.synthesizer.templates.render_index(
            {
                "title": self.settings.site_title,
                "root": "",
                "layout_css": relative_link(self.settings.html_root / self.settings.css_path, home),
            }
        )
        soup = BeautifulSoup(html, "html.parser")
        content = find_insertion_point(
            soup, "div", "content", self.synthesizer.templates.directory / INDEX_TEMPLATE
        )

        chapters = sum(1 for entry in entries if isinstance(entry, ChapterEntry))
        _safe_emit(self.on_progress, "site:start", {"chapters": chapters})

        pages: list[PageInfo] = []
        for entry in entries:
            match entry:
                case ChapterEntry(chapter=chapter):
                    pages.extend(self.add_chapter(soup, content, chapter))
                case EmptyLineEntry():
                    spacer = soup.new_tag("p")
                    spacer.append(NBSP)
                    content.append(spacer)
                case LinkEntry(href=href, icon_name=icon, label=label):
                    content.append(self._icon_link(soup, href, icon, label))

        _safe_emit(self.on_progress, "site:finalized", {"pages": len(pages)})
        return soup, pages

    def build(self, entries: list[HomeEntry]) -> list[PageInfo]:
        """Write ``index.html``, the manifest and the row CSS file."""
        soup, pages = self.render(entries)

        renamed = self.synthesizer.renamed
        if renamed is not None:
            renamed.rewrite_soup(soup)
        save_html(soup, self.settings.home_output, self.settings.indentation)
        save_json(
            [page.to_dict() for page in pages],
            self.settings.html_root / self.settings.manifest_path,
        )
        save_text(self.synthesizer.css.render(), self.settings.html_root / self.settings.css_path)
        logger.info("Generated %d pages and %d image row rules", len(pages), len(self.synthesizer.css))
        return pages


__all__ = ["HomeBuilder", "ProgressCallback"]
