"""Data structures shared by the conversion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

FULL_WIDTH_SCALE = "full"
GUTTER_PX = 10


@dataclass(frozen=True, slots=True)
class Chapter:
    title: str
    icon_name: str
    path_segment: str  # folder under the source root, also the link prefix


class NavState(Enum):
    """Navigation state of a page, derived from its sibling page files."""

    NO_PREV_NO_NEXT = "no-prev-no-next"
    HAS_PREV_ONLY = "has-prev-only"
    HAS_NEXT_ONLY = "has-next-only"
    HAS_BOTH = "has-both"

    @classmethod
    def from_flags(cls, has_prev: bool, has_next: bool) -> NavState:
        if has_prev and has_next:
            return cls.HAS_BOTH
        if has_prev:
            return cls.HAS_PREV_ONLY
        if has_next:
            return cls.HAS_NEXT_ONLY
        return cls.NO_PREV_NO_NEXT

    @property
    def has_prev(self) -> bool:
        return self in (NavState.HAS_PREV_ONLY, NavState.HAS_BOTH)

    @property
    def has_next(self) -> bool:
        return self in (NavState.HAS_NEXT_ONLY, NavState.HAS_BOTH)


@dataclass(frozen=True, slots=True)
class Page:
    chapter: Chapter
    index: int  # 1-based
    has_prev: bool
    has_next: bool
    source_path: Path
    output_path: Path

    @property
    def nav_state(self) -> NavState:
        return NavState.from_flags(self.has_prev, self.has_next)

    @property
    def title(self) -> str:
        # The only page of a single-page chapter carries no number.
        if self.nav_state is NavState.NO_PREV_NO_NEXT:
            return self.chapter.title
        return f"{self.chapter.title} {self.index}"

    @property
    def link(self) -> str:
        return f"{self.chapter.path_segment}/page{self.index}.html"


@dataclass(frozen=True, slots=True)
class ImageRef:
    """An ``<img>`` node as authored in a page."""

    file_name: str
    alt_text: str | None = None
    location: str | None = None
    scale: str | None = None

    @property
    def is_full_width(self) -> bool:
        return (self.scale or "").strip().lower() == FULL_WIDTH_SCALE


@dataclass(slots=True)
class ContentBlock:
    """Zero or more images followed by at most one text node."""

    images: list[ImageRef] = field(default_factory=list)
    text: str | None = None

    @property
    def is_dangling(self) -> bool:
        return self.text is None


@dataclass(slots=True)
class ImageInfo:
    absolute_path: Path
    width: int | None = None
    height: int | None = None

    @property
    def has_dimensions(self) -> bool:
        return self.width is not None and self.height is not None


@dataclass(frozen=True, slots=True)
class RowLayoutUnit:
    css_class_name: str
    width_share: int
    total_share_in_group: int
    image_count: int

    @property
    def css(self) -> str:
        gutter = (self.image_count - 1) * GUTTER_PX
        return (
            f"div.{self.css_class_name} {{\n"
            f"  width: calc({self.width_share}*(100% - {gutter}px) / {self.total_share_in_group});\n"
            "  object-fit: contain;\n"
            "}"
        )


@dataclass(frozen=True, slots=True)
class ChapterEntry:
    chapter: Chapter


@dataclass(frozen=True, slots=True)
class EmptyLineEntry:
    pass


@dataclass(frozen=True, slots=True)
class LinkEntry:
    href: str
    icon_name: str
    label: str


HomeEntry = ChapterEntry | EmptyLineEntry | LinkEntry


@dataclass(frozen=True, slots=True)
class PageInfo:
    """One record of the generated-pages manifest."""

    link: str
    icon: str
    title: str

    def to_dict(self) -> dict[str, str]:
        return {"link": self.link, "icon": self.icon, "title": self.title}


__all__ = [
    "Chapter",
    "ChapterEntry",
    "ContentBlock",
    "EmptyLineEntry",
    "FULL_WIDTH_SCALE",
    "GUTTER_PX",
    "HomeEntry",
    "ImageInfo",
    "ImageRef",
    "LinkEntry",
    "NavState",
    "Page",
    "PageInfo",
    "RowLayoutUnit",
]
