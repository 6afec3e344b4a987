"""Read the authored blog XML.

Two documents are understood:

- the home document (``index.xml``), whose root children are ``chapter``,
  ``empty-line`` and ``link`` elements, in display order;
- a page document (``<chapter>/page{n}.xml``), whose root children are
  ``img`` and ``txt`` elements.

Both are parsed into plain dataclasses so later stages never touch XML nodes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from lxml import etree

from blog2html.errors import MalformedSourceError
from blog2html.model.content import (
    Chapter,
    ChapterEntry,
    ContentBlock,
    EmptyLineEntry,
    HomeEntry,
    ImageRef,
    LinkEntry,
)

logger = logging.getLogger(__name__)


def _load(path: Path) -> etree._Element:
    try:
        return etree.parse(str(path)).getroot()
    except OSError as exc:
        raise MalformedSourceError(path, f"cannot read file ({exc})") from exc
    except etree.XMLSyntaxError as exc:
        raise MalformedSourceError(path, f"invalid XML ({exc})") from exc


def _tag(node: etree._Element) -> str | None:
    # Comments and processing instructions have a non-string tag.
    if not isinstance(node.tag, str):
        return None
    return etree.QName(node).localname.lower()


def _text(node: etree._Element) -> str:
    return "".join(node.itertext())


def _required(node: etree._Element, attr: str, path: Path) -> str:
    value = node.get(attr)
    if value is None or not value.strip():
        raise MalformedSourceError(path, f"<{_tag(node)}> on line {node.sourceline} lacks '{attr}'")
    return value.strip()


def parse_home_entries(path: Path, strict: bool = False) -> list[HomeEntry]:
    """Parse the home document into an ordered list of entries.

    Unknown elements are skipped with a warning, or rejected when ``strict``.
    """
    root = _load(path)
    entries: list[HomeEntry] = []

    # Older home documents wrap the chapters in a <chapters> element.
    nodes = list(root)
    if len(nodes) == 1 and _tag(nodes[0]) == "chapters":
        nodes = list(nodes[0])

    for node in nodes:
        tag = _tag(node)
        if tag is None:
            continue
        if tag == "chapter":
            chapter = Chapter(
                title=_text(node).strip(),
                icon_name=_required(node, "icon", path),
                path_segment=_required(node, "link", path).strip("/"),
            )
            entries.append(ChapterEntry(chapter))
        elif tag == "empty-line":
            entries.append(EmptyLineEntry())
        elif tag == "link":
            entries.append(
                LinkEntry(
                    href=_required(node, "href", path),
                    icon_name=_required(node, "icon", path),
                    label=_text(node).strip(),
                )
            )
        elif strict:
            raise MalformedSourceError(path, f"unknown element <{tag}> on line {node.sourceline}")
        else:
            logger.warning("Ignoring unknown element <%s> in %s", tag, path)

    return entries


def _image_ref(node: etree._Element, path: Path) -> ImageRef:
    name = _text(node).strip()
    if not name:
        raise MalformedSourceError(path, f"<img> on line {node.sourceline} has no file name")
    return ImageRef(
        file_name=name,
        alt_text=node.get("alt"),
        location=node.get("location"),
        scale=node.get("scale"),
    )


def parse_page_blocks(path: Path) -> list[ContentBlock]:
    """Split a page document into content blocks.

    A block is a run of images closed by one text node; images left over at
    the end of the page form a final block without text.
    """
    root = _load(path)
    blocks: list[ContentBlock] = []
    pending: list[ImageRef] = []

    for node in root:
        tag = _tag(node)
        if tag == "img":
            pending.append(_image_ref(node, path))
        elif tag == "txt":
            blocks.append(ContentBlock(images=pending, text=_text(node)))
            pending = []
        elif tag is not None:
            logger.debug("Skipping <%s> in %s", tag, path)

    if pending:
        blocks.append(ContentBlock(images=pending, text=None))
    return blocks


__all__ = ["parse_home_entries", "parse_page_blocks"]
