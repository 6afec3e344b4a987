"""Convert the ``page{n}.xml`` files of a chapter into HTML pages."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from blog2html.assets.renamer import RenamedAssets
from blog2html.builder.html_io import save_html
from blog2html.errors import MalformedSourceError
from blog2html.images.resolver import ImageResolver
from blog2html.model.content import Chapter, ContentBlock, ImageRef, NavState, Page, PageInfo
from blog2html.parser.source import parse_page_blocks
from blog2html.parser.templating import PAGE_TEMPLATE, Templates
from blog2html.settings import BlogSettings
from blog2html.transform.layout import CssRegistry, layout_row

logger = logging.getLogger(__name__)

HOME_ICON = "minibus.svg"
PREVIOUS_ICON = "previous.svg"
NEXT_ICON = "next.svg"
EMPTY_ICON = "empty.svg"


def page_source(settings: BlogSettings, chapter: Chapter, index: int) -> Path:
    return settings.source_root / chapter.path_segment / f"page{index}.xml"


def page_output(settings: BlogSettings, chapter: Chapter, index: int) -> Path:
    return settings.html_root / chapter.path_segment / f"page{index}.html"


def discover_pages(chapter: Chapter, settings: BlogSettings) -> list[Page]:
    """Find ``page1.xml``, ``page2.xml``, ... up to the first missing number."""
    pages: list[Page] = []
    index = 1
    while page_source(settings, chapter, index).is_file():
        pages.append(
            Page(
                chapter=chapter,
                index=index,
                has_prev=index > 1 and page_source(settings, chapter, index - 1).is_file(),
                has_next=page_source(settings, chapter, index + 1).is_file(),
                source_path=page_source(settings, chapter, index),
                output_path=page_output(settings, chapter, index),
            )
        )
        index += 1
    logger.debug("Chapter %s has %d pages", chapter.path_segment, len(pages))
    return pages


def relative_link(target: Path, document: Path) -> str:
    """Link from ``document`` to ``target`` using forward slashes."""
    return os.path.relpath(target, document.parent).replace(os.sep, "/")


def root_prefix(settings: BlogSettings, document: Path) -> str:
    rel = relative_link(settings.html_root, document)
    return "" if rel == "." else rel + "/"


def normalize_text(text: str, indent: str) -> str:
    """Trim each line of authored text and re-join it at ``indent``."""
    lines = [line.strip() for line in text.splitlines()]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return ("\n" + indent).join(lines)


def find_insertion_point(soup: BeautifulSoup, name: str, element_id: str, source: Path) -> Tag:
    node = soup.find(name, id=element_id)
    if not isinstance(node, Tag):
        raise MalformedSourceError(source, f"template lacks <{name} id='{element_id}'>")
    return node


class PageSynthesizer:
    """Renders one HTML document per blog page."""

    def __init__(
        self,
        settings: BlogSettings,
        templates: Templates,
        resolver: ImageResolver,
        css: CssRegistry,
        renamed: RenamedAssets | None = None,
    ) -> None:
        self.settings = settings
        self.templates = templates
        self.resolver = resolver
        self.css = css
        self.renamed = renamed

    def render(self, page: Page) -> BeautifulSoup:
        root = root_prefix(self.settings, page.output_path)
        html = self.templates.render_page(
            {
                "title": page.title,
                "root": root,
                "layout_css": relative_link(
                    self.settings.html_root / self.settings.css_path, page.output_path
                ),
            }
        )
        soup = BeautifulSoup(html, "html.parser")
        template = self.templates.directory / PAGE_TEMPLATE
        title_node = find_insertion_point(soup, "p", "title", template)
        content = find_insertion_point(soup, "div", "content", template)

        title_node.append(
            soup.new_tag(
                "img",
                attrs={
                    "class": "icon",
                    "src": self.resolver.resolve(page.chapter.icon_name, page.output_path),
                },
            )
        )
        title_node.append(page.title)

        self.add_navigation(soup, title_node, page)
        self.convert_blocks(soup, content, page)
        return soup

    def _nav_link(self, soup: BeautifulSoup, css_class: str, href: str | None, icon: str, page: Page) -> Tag:
        attrs = {"class": css_class}
        if href is not None:
            attrs["href"] = href
        link = soup.new_tag("a", attrs=attrs)
        link.append(
            soup.new_tag(
                "img",
                attrs={"class": "icon", "src": self.resolver.resolve(icon, page.output_path)},
            )
        )
        return link

    def add_navigation(self, soup: BeautifulSoup, title_node: Tag, page: Page) -> None:
        """Add the home control and, for multi-page chapters, the arrows."""
        home = root_prefix(self.settings, page.output_path) + "index.html"
        state = page.nav_state

        if state is NavState.NO_PREV_NO_NEXT:
            title_node.append(self._nav_link(soup, "float-right", home, HOME_ICON, page))
            return

        navigation = soup.new_tag("p", attrs={"class": "flex"})
        title_node.insert_after(navigation)

        if state.has_prev:
            navigation.append(
                self._nav_link(soup, "left", f"./page{page.index - 1}.html", PREVIOUS_ICON, page)
            )
        else:
            navigation.append(self._nav_link(soup, "left", None, EMPTY_ICON, page))

        navigation.append(self._nav_link(soup, "center", home, HOME_ICON, page))

        if state.has_next:
            navigation.append(
                self._nav_link(soup, "right", f"./page{page.index + 1}.html", NEXT_ICON, page)
            )
        else:
            navigation.append(self._nav_link(soup, "right", None, EMPTY_ICON, page))

    def _image_tag(self, soup: BeautifulSoup, image: ImageRef, src: str) -> Tag:
        attrs = {"class": "zoom scale", "src": src}
        if image.alt_text is not None:
            attrs["alt"] = image.alt_text
        return soup.new_tag("img", attrs=attrs)

    def _image_row(self, soup: BeautifulSoup, images: list[ImageRef], page: Page) -> Tag:
        sources = [self.resolver.resolve(img.file_name, page.output_path) for img in images]
        infos = [self.resolver.measure(self.resolver.info(img.file_name)) for img in images]
        units = layout_row([(info.width or 0, info.height or 0) for info in infos])

        row = soup.new_tag("div", attrs={"class": "flex"})
        for image, src, unit in zip(images, sources, units, strict=True):
            cell = soup.new_tag("div", attrs={"class": self.css.register(unit)})
            cell.append(self._image_tag(soup, image, src))
            row.append(cell)
        return row

    @staticmethod
    def _is_inline(block: ContentBlock) -> bool:
        if block.is_dangling or len(block.images) != 1:
            return False
        image = block.images[0]
        return image.location is not None and not image.is_full_width

    def convert_block(self, soup: BeautifulSoup, content: Tag, block: ContentBlock, page: Page) -> None:
        text = (block.text or "").strip()
        if not text and not block.images:
            return

        container = soup.new_tag(
            "div", attrs={"class": "container last" if block.is_dangling else "container"}
        )
        content.append(container)

        # Every txt node gets its paragraph, even a blank one.
        paragraph: Tag | None = None
        if not block.is_dangling:
            paragraph = soup.new_tag("p", attrs={"class": "body"})
            container.append(paragraph)

        if paragraph is not None and self._is_inline(block):
            image = block.images[0]
            span = soup.new_tag("span", attrs={"class": f"image-{image.location}"})
            span.append(
                self._image_tag(soup, image, self.resolver.resolve(image.file_name, page.output_path))
            )
            paragraph.append(span)
        elif block.images:
            container.insert(0, self._image_row(soup, block.images, page))

        if paragraph is not None and text:
            depth = sum(1 for _ in paragraph.parents)
            paragraph.append(normalize_text(block.text or "", self.settings.indentation * depth))

    def convert_blocks(self, soup: BeautifulSoup, content: Tag, page: Page) -> None:
        for block in parse_page_blocks(page.source_path):
            self.convert_block(soup, content, block, page)

    def write(self, page: Page) -> PageInfo:
        """Render, rewrite asset references and save one page."""
        logger.info("Creating page %s", page.link)
        soup = self.render(page)
        if self.renamed is not None:
            self.renamed.rewrite_soup(soup)
        save_html(soup, page.output_path, self.settings.indentation)
        return PageInfo(
            link=page.link,
            icon=relative_link(
                self.resolver.output_path(self.resolver.info(page.chapter.icon_name)),
                page.output_path,
            ),
            title=page.chapter.title,
        )


__all__ = [
    "PageSynthesizer",
    "discover_pages",
    "normalize_text",
    "page_output",
    "page_source",
    "relative_link",
    "root_prefix",
]
